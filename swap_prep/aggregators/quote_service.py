from __future__ import annotations

from typing import Any

import requests
from loguru import logger
from pydantic import ValidationError
from web3 import Web3

from swap_prep.config import DEFAULT_QUOTE_TIMEOUT_SEC
from swap_prep.errors import InvalidSwapRequest, NoQuoteAvailable
from swap_prep.models import (
    NetworkId,
    PostHook,
    QuoteDetails,
    QuoteProviderError,
    SwapQuoteRequest,
    SwapQuoteResponse,
    UnvalidatedSwapTransaction,
)

# Fixed policy, not caller configurable
SLIPPAGE_PERCENTAGE = "1"


def build_swap_params(
    buy_token: str,
    buy_network_id: NetworkId,
    sell_token: str | None,
    sell_is_native: bool,
    sell_network_id: NetworkId,
    sell_amount: int,
    user_address: str,
    post_hook: PostHook | None = None,
    enable_app_fee: bool | None = None,
) -> SwapQuoteRequest:
    if not isinstance(sell_amount, int) or sell_amount < 0:
        raise InvalidSwapRequest(f"sell_amount must be a non-negative integer, got {sell_amount!r}")
    if not Web3.is_address(user_address):
        raise InvalidSwapRequest(f"Invalid wallet address: {user_address!r}")
    return SwapQuoteRequest(
        buy_token=buy_token,
        buy_is_native=False,
        buy_network_id=buy_network_id,
        sell_token=sell_token or None,
        sell_is_native=sell_is_native,
        sell_network_id=sell_network_id,
        sell_amount=str(sell_amount),
        slippage_percentage=SLIPPAGE_PERCENTAGE,
        post_hook=post_hook,
        user_address=user_address,
        enable_app_fee=enable_app_fee,
    )


def _details(body: dict[str, Any]) -> QuoteDetails:
    # Diagnostics only; a malformed block must not reject a usable quote
    try:
        return QuoteDetails.model_validate(body.get("details") or {})
    except ValidationError:
        logger.debug("Ignoring malformed swap quote details: {}", body.get("details"))
        return QuoteDetails()


def _provider_errors(body: Any) -> list[QuoteProviderError]:
    out: list[QuoteProviderError] = []
    if not isinstance(body, dict):
        return out
    for item in body.get("errors") or []:
        try:
            out.append(QuoteProviderError.model_validate(item))
        except ValidationError:
            continue
    return out


def get_swap_quote(
    url: str,
    swap_params: SwapQuoteRequest,
    timeout: float = DEFAULT_QUOTE_TIMEOUT_SEC,
) -> tuple[SwapQuoteResponse, dict[str, Any]]:
    """
    POSTs the quote request and returns the parsed response together with the
    raw `unvalidatedSwapTransaction` object exactly as the provider sent it.

    Non-2xx responses and transport failures are logged and re-raised unchanged.
    A 2xx response without a usable transaction raises NoQuoteAvailable.
    """
    payload = swap_params.to_payload()
    try:
        r = requests.post(url, json=payload, timeout=timeout)
        r.raise_for_status()
    except requests.HTTPError as e:
        response = e.response
        logger.warning(
            "Got a non-2xx response from getSwapQuote: status={} response={} swap_params={}",
            getattr(response, "status_code", None),
            getattr(response, "text", None),
            payload,
        )
        raise
    except requests.RequestException as e:
        logger.warning("Error getting swap quote: {} swap_params={}", e, payload)
        raise

    try:
        body = r.json()
    except ValueError:
        body = None

    raw_tx = body.get("unvalidatedSwapTransaction") if isinstance(body, dict) else None
    if not raw_tx:
        logger.warning(
            "No unvalidatedSwapTransaction in swapQuote: swap_params={} swap_quote={}",
            payload,
            body if body is not None else r.text,
        )
        raise NoQuoteAvailable(payload, body if body is not None else r.text, _provider_errors(body))

    try:
        quote_tx = UnvalidatedSwapTransaction.model_validate(raw_tx)
    except ValidationError as e:
        logger.warning(
            "Invalid unvalidatedSwapTransaction in swapQuote: {} swap_params={} swap_quote={}",
            e,
            payload,
            body,
        )
        raise NoQuoteAvailable(payload, body, _provider_errors(body)) from e

    quote = SwapQuoteResponse(
        unvalidated_swap_transaction=quote_tx,
        details=_details(body),
        errors=_provider_errors(body),
    )

    if quote.errors:
        logger.debug(
            "Swap quote from {} came with {} provider error(s): {}",
            quote.details.swap_provider,
            len(quote.errors),
            [err.provider for err in quote.errors],
        )
    return quote, raw_tx
