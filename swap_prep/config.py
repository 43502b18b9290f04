from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_QUOTE_TIMEOUT_SEC = 30.0


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="SWP_", extra="allow")

    # Quote service
    get_swap_quote_url: str = "https://api.mainnet.valora.xyz/getSwapQuote"
    quote_timeout_sec: float = DEFAULT_QUOTE_TIMEOUT_SEC

    # EVM providers, keyed by network id. Override with a JSON object in SWP_RPC_URLS
    rpc_urls: dict[str, str] = {
        "celo-mainnet": "https://forno.celo.org",
        "celo-alfajores": "https://alfajores-forno.celo-testnet.org",
        "ethereum-mainnet": "https://ethereum-rpc.publicnode.com",
        "ethereum-sepolia": "https://ethereum-sepolia-rpc.publicnode.com",
        "arbitrum-one": "https://arb1.arbitrum.io/rpc",
        "arbitrum-sepolia": "https://sepolia-rollup.arbitrum.io/rpc",
        "op-mainnet": "https://mainnet.optimism.io",
        "op-sepolia": "https://sepolia.optimism.io",
        "polygon-pos-mainnet": "https://polygon-rpc.com",
        "polygon-pos-amoy": "https://rpc-amoy.polygon.technology",
        "base-mainnet": "https://mainnet.base.org",
        "base-sepolia": "https://sepolia.base.org",
    }

    # Logging
    log_level: str = "INFO"

    # --- Validators to fall back to defaults on empty env values ---
    @field_validator("quote_timeout_sec", mode="before")
    @classmethod
    def _empty_timeout_to_default(cls, v):
        if v == "":
            return DEFAULT_QUOTE_TIMEOUT_SEC
        return v

    def rpc_url_for(self, network_id: str) -> str | None:
        url = self.rpc_urls.get(network_id)
        return url or None
