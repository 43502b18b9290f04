from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from web3 import Web3

from swap_prep.errors import InvalidSwapRequest


class NetworkId(str, Enum):
    celo_mainnet = "celo-mainnet"
    celo_alfajores = "celo-alfajores"
    ethereum_mainnet = "ethereum-mainnet"
    ethereum_sepolia = "ethereum-sepolia"
    arbitrum_one = "arbitrum-one"
    arbitrum_sepolia = "arbitrum-sepolia"
    op_mainnet = "op-mainnet"
    op_sepolia = "op-sepolia"
    polygon_pos_mainnet = "polygon-pos-mainnet"
    polygon_pos_amoy = "polygon-pos-amoy"
    base_mainnet = "base-mainnet"
    base_sepolia = "base-sepolia"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TokenAmountWithMetadata(_CamelModel):
    """Source token as described by the caller; `amount` is in display units."""

    token_id: str
    address: str | None = None
    # Older same-chain clients don't set this
    network_id: NetworkId | None = None
    is_native: bool = False
    decimals: int
    amount: str
    symbol: str | None = None


class EvmContractCall(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    chain_type: str = "evm"
    call_type: int = 0  # 0 default, 1 full token balance, 2 full native balance, 3 collect token balance
    target: str
    value: str = "0"
    call_data: str
    payload: dict[str, Any] | None = None
    estimated_gas: str | None = None


class PostHook(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    chain_type: str = "evm"
    description: str | None = None
    calls: list[EvmContractCall] = Field(default_factory=list)


class SwapQuoteRequest(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    buy_token: str
    buy_is_native: bool = False
    buy_network_id: NetworkId
    sell_token: str | None = None
    sell_is_native: bool
    sell_network_id: NetworkId
    sell_amount: str
    slippage_percentage: str
    post_hook: PostHook | None = None
    user_address: str
    enable_app_fee: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        # Absent sellToken / enableAppFee are left out so the provider applies its defaults
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class UnvalidatedSwapTransaction(_CamelModel):
    # Providers send amounts either as decimal strings or as JSON numbers
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow", coerce_numbers_to_str=True
    )

    from_address: str = Field(alias="from")
    to: str
    data: str
    value: str
    gas: str
    estimated_gas_use: str | None = None
    allowance_target: str

    @field_validator("allowance_target")
    @classmethod
    def _check_allowance_target(cls, v: str) -> str:
        if not Web3.is_address(v):
            raise ValueError(f"Invalid allowanceTarget address: {v!r}")
        return v


class QuoteErrorDetail(BaseModel):
    message: str
    details: Any = None


class QuoteProviderError(BaseModel):
    provider: str
    error: QuoteErrorDetail


class QuoteDetails(_CamelModel):
    swap_provider: str | None = None


class SwapQuoteResponse(_CamelModel):
    unvalidated_swap_transaction: UnvalidatedSwapTransaction | None = None
    details: QuoteDetails = Field(default_factory=QuoteDetails)
    errors: list[QuoteProviderError] = Field(default_factory=list)


@dataclass
class Transaction:
    network_id: NetworkId
    from_address: str
    to: str
    data: str
    value: int | None = None
    gas: int | None = None
    estimated_gas_use: int | None = None  # informational, not used for execution

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "networkId": self.network_id.value,
            "from": self.from_address,
            "to": self.to,
            "data": self.data,
        }
        if self.value is not None:
            out["value"] = str(self.value)
        if self.gas is not None:
            out["gas"] = str(self.gas)
        if self.estimated_gas_use is not None:
            out["estimatedGasUse"] = str(self.estimated_gas_use)
        return out


@dataclass
class PreparedSwap:
    transactions: list[Transaction]
    data_props: dict[str, Any] = field(default_factory=dict)

    @property
    def swap_transaction(self) -> Transaction:
        return self.transactions[-1]


def parse_units(amount: str, decimals: int) -> int:
    """
    Converts a display amount (e.g. "1.5") to the token's smallest unit.
    Digits beyond `decimals` are rounded half-up.
    """
    if decimals < 0:
        raise InvalidSwapRequest(f"Invalid token decimals: {decimals}")
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise InvalidSwapRequest(f"Invalid token amount: {amount!r}") from None
    if not value.is_finite() or value < 0:
        raise InvalidSwapRequest(f"Invalid token amount: {amount!r}")
    with localcontext() as ctx:
        ctx.prec = 200
        scaled = value.scaleb(decimals).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return int(scaled)


def parse_int(value: str | int) -> int:
    if isinstance(value, int):
        return value
    v = value.strip()
    if v.lower().startswith("0x"):
        return int(v, 16)
    return int(v)
