from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from swap_prep.aggregators import quote_service
from swap_prep.chains.evm import get_client
from swap_prep.config import AppSettings
from swap_prep.errors import ErrorKind, classify_error
from swap_prep.execution.approvals import resolve_approval
from swap_prep.execution.transactions import build_swap_transaction
from swap_prep.models import (
    NetworkId,
    PostHook,
    PreparedSwap,
    TokenAmountWithMetadata,
    Transaction,
    parse_units,
)


def prepare_swap_transactions(
    swap_from_token: TokenAmountWithMetadata,
    post_hook: PostHook | None,
    swap_to_token_address: str,
    network_id: NetworkId,
    wallet_address: str,
    enable_app_fee: bool | None = None,
    settings: AppSettings | None = None,
) -> PreparedSwap:
    """
    Builds the unsigned transactions to swap `swap_from_token` into
    `swap_to_token_address` on `network_id` and run `post_hook` afterwards.

    Returns the transactions in execution order (an optional ERC-20 approval,
    then the swap) plus the provider's raw swap transaction under
    `data_props["swapTransaction"]`.
    """
    settings = settings or AppSettings()
    network_id = NetworkId(network_id)
    amount_to_swap = parse_units(swap_from_token.amount, swap_from_token.decimals)
    # Older clients only support same chain swap and deposit and don't set the token's network
    from_network_id = swap_from_token.network_id or network_id

    swap_params = quote_service.build_swap_params(
        buy_token=swap_to_token_address,
        buy_network_id=network_id,
        sell_token=swap_from_token.address,
        sell_is_native=swap_from_token.is_native,
        sell_network_id=from_network_id,
        sell_amount=amount_to_swap,
        user_address=wallet_address,
        post_hook=post_hook,
        enable_app_fee=enable_app_fee,
    )
    quote, raw_swap_tx = quote_service.get_swap_quote(
        settings.get_swap_quote_url,
        swap_params,
        timeout=settings.quote_timeout_sec,
    )
    quote_tx = quote.unvalidated_swap_transaction

    transactions: list[Transaction] = []

    if not swap_from_token.is_native and swap_from_token.address:
        client = get_client(from_network_id, settings)
        approve_tx = resolve_approval(
            client,
            network_id=from_network_id,
            token=swap_from_token.address,
            owner=wallet_address,
            spender=quote_tx.allowance_target,
            amount=amount_to_swap,
        )
        if approve_tx is not None:
            transactions.append(approve_tx)

    transactions.append(build_swap_transaction(from_network_id, quote_tx))

    logger.info(
        "Prepared {} transaction(s) to swap {} {} on {} (provider={})",
        len(transactions),
        swap_from_token.amount,
        swap_from_token.symbol or swap_from_token.token_id,
        from_network_id.value,
        quote.details.swap_provider,
    )
    return PreparedSwap(transactions=transactions, data_props={"swapTransaction": raw_swap_tx})


@dataclass
class SwapOutcome:
    result: PreparedSwap | None = None
    error: Exception | None = None
    kind: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def try_prepare_swap_transactions(
    swap_from_token: TokenAmountWithMetadata,
    post_hook: PostHook | None,
    swap_to_token_address: str,
    network_id: NetworkId,
    wallet_address: str,
    enable_app_fee: bool | None = None,
    settings: AppSettings | None = None,
) -> SwapOutcome:
    """
    Same as prepare_swap_transactions, but known failures come back as a
    SwapOutcome tagged with an ErrorKind instead of being raised.
    Unclassified exceptions still propagate.
    """
    try:
        return SwapOutcome(
            result=prepare_swap_transactions(
                swap_from_token,
                post_hook,
                swap_to_token_address,
                network_id,
                wallet_address,
                enable_app_fee=enable_app_fee,
                settings=settings,
            )
        )
    except Exception as e:
        kind = classify_error(e)
        if kind is None:
            raise
        return SwapOutcome(error=e, kind=kind)
