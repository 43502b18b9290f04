from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import requests
from loguru import logger
from web3 import Web3
from web3.exceptions import Web3Exception

from swap_prep.config import AppSettings
from swap_prep.errors import OnChainReadError, UnsupportedNetwork
from swap_prep.models import NetworkId


def _load_abi(rel_path: str):
    path = Path(__file__).resolve().parent.parent / "abi" / rel_path
    return json.loads(path.read_text())


ERC20_ABI = _load_abi("erc20.json")


@dataclass
class EvmClient:
    """Read-only view of one EVM network."""

    w3: Web3
    network_id: NetworkId

    @classmethod
    def create(cls, rpc_url: str, network_id: NetworkId) -> "EvmClient":
        if rpc_url.startswith("ws"):
            wsprov = getattr(Web3, "LegacyWebSocketProvider", None) or getattr(Web3, "WebsocketProvider", None)
            if wsprov is None:
                raise RuntimeError(
                    "WebSocket provider not available in this web3 build. Use an HTTP RPC URL instead."
                )
            w3 = Web3(wsprov(rpc_url))
        else:
            w3 = Web3(Web3.HTTPProvider(rpc_url))
        logger.debug("Using EVM provider {} for {}", rpc_url, network_id.value)
        return cls(w3=w3, network_id=network_id)

    def erc20(self, token_addr: str):
        return self.w3.eth.contract(address=Web3.to_checksum_address(token_addr), abi=ERC20_ABI)

    def read_allowance(self, token: str, owner: str, spender: str) -> int:
        try:
            allowance = self.erc20(token).functions.allowance(
                Web3.to_checksum_address(owner), Web3.to_checksum_address(spender)
            ).call()
        except (Web3Exception, requests.RequestException) as e:
            logger.warning(
                "allowance() read failed on {}: token={} owner={} spender={} err={}",
                self.network_id.value,
                token,
                owner,
                spender,
                e,
            )
            raise OnChainReadError(self.network_id.value, token, owner, spender) from e
        return int(allowance)


def get_client(network_id: NetworkId, settings: AppSettings) -> EvmClient:
    rpc_url = settings.rpc_url_for(network_id.value)
    if not rpc_url:
        raise UnsupportedNetwork(network_id.value)
    return EvmClient.create(rpc_url, network_id)
