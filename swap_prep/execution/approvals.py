from __future__ import annotations

from typing import Protocol

from loguru import logger
from web3 import Web3

from swap_prep.chains.evm import ERC20_ABI
from swap_prep.models import NetworkId, Transaction

# Address-less contract, used for calldata encoding only
_ERC20_ENCODER = Web3().eth.contract(abi=ERC20_ABI)


class AllowanceReader(Protocol):
    def read_allowance(self, token: str, owner: str, spender: str) -> int: ...


def encode_approve(spender: str, amount: int) -> str:
    return _ERC20_ENCODER.encode_abi("approve", args=[Web3.to_checksum_address(spender), int(amount)])


def resolve_approval(
    client: AllowanceReader,
    network_id: NetworkId,
    token: str,
    owner: str,
    spender: str,
    amount: int,
) -> Transaction | None:
    """
    Returns an approve(spender, amount) transaction when the owner's current
    allowance for `spender` is below `amount`, otherwise None.
    The approval covers exactly `amount`, never an unlimited allowance.
    """
    allowance = client.read_allowance(token, owner, spender)
    if allowance >= amount:
        logger.debug("Allowance {} of {} for {} covers {}", allowance, token, spender, amount)
        return None

    logger.info("Approving {} for {} of {} (current allowance {})", spender, amount, token, allowance)
    return Transaction(
        network_id=network_id,
        from_address=owner,
        to=token,
        data=encode_approve(spender, amount),
    )
