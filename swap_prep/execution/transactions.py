from __future__ import annotations

from loguru import logger

from swap_prep.models import NetworkId, Transaction, UnvalidatedSwapTransaction, parse_int

# Applied to the simulated gas estimate only
GAS_PADDING_PERCENT = 115


def compute_gas_limit(gas: str, estimated_gas_use: str | None) -> int:
    # estimatedGasUse comes from a simulation, gas from the swap provider's heuristics
    if estimated_gas_use:
        return parse_int(estimated_gas_use) * GAS_PADDING_PERCENT // 100
    return parse_int(gas)


def build_swap_transaction(network_id: NetworkId, quote_tx: UnvalidatedSwapTransaction) -> Transaction:
    estimated = parse_int(quote_tx.estimated_gas_use) if quote_tx.estimated_gas_use else None
    gas = compute_gas_limit(quote_tx.gas, quote_tx.estimated_gas_use)
    logger.debug("Swap gas limit {} (provider gas={}, simulated={})", gas, quote_tx.gas, estimated)
    return Transaction(
        network_id=network_id,
        from_address=quote_tx.from_address,
        to=quote_tx.to,
        data=quote_tx.data,
        value=parse_int(quote_tx.value),
        gas=gas,
        estimated_gas_use=estimated,
    )
