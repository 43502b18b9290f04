from __future__ import annotations

from enum import Enum
from typing import Any

import requests

# Quote service failures are re-raised as-is; these aliases name them.
TransportError = requests.HTTPError
ProviderError = requests.RequestException


class SwapPreparationError(Exception):
    pass


class InvalidSwapRequest(SwapPreparationError, ValueError):
    pass


class UnsupportedNetwork(SwapPreparationError):
    def __init__(self, network_id: str):
        super().__init__(f"No RPC URL configured for network {network_id}")
        self.network_id = network_id


class NoQuoteAvailable(SwapPreparationError):
    """
    Raised when the quote service answered 2xx but without a usable
    `unvalidatedSwapTransaction` (only provider errors, or a malformed body).
    """

    def __init__(
        self,
        swap_params: dict[str, Any],
        response: Any,
        provider_errors: list | None = None,
    ):
        super().__init__("Unable to get swap quote")
        self.swap_params = swap_params
        self.response = response
        self.provider_errors = provider_errors or []


class OnChainReadError(SwapPreparationError):
    def __init__(self, network_id: str, token: str, owner: str, spender: str):
        super().__init__(
            f"Failed to read allowance of {token} (owner={owner}, spender={spender}) on {network_id}"
        )
        self.network_id = network_id
        self.token = token
        self.owner = owner
        self.spender = spender


class ErrorKind(str, Enum):
    transport = "transport"
    provider = "provider"
    no_quote = "no_quote"
    on_chain_read = "on_chain_read"
    invalid_request = "invalid_request"


def classify_error(exc: BaseException) -> ErrorKind | None:
    # Order matters: HTTPError is itself a RequestException
    if isinstance(exc, NoQuoteAvailable):
        return ErrorKind.no_quote
    if isinstance(exc, OnChainReadError):
        return ErrorKind.on_chain_read
    if isinstance(exc, (InvalidSwapRequest, UnsupportedNetwork)):
        return ErrorKind.invalid_request
    if isinstance(exc, TransportError):
        return ErrorKind.transport
    if isinstance(exc, ProviderError):
        return ErrorKind.provider
    return None
