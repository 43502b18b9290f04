from __future__ import annotations

import pytest


@pytest.fixture
def settings():
    from swap_prep.config import AppSettings

    return AppSettings(get_swap_quote_url="https://quotes.test/getSwapQuote")


@pytest.fixture
def post_hook():
    from swap_prep.models import PostHook

    return PostHook.model_validate(
        {
            "chainType": "evm",
            "description": "deposit into vault",
            "calls": [
                {
                    "chainType": "evm",
                    "callType": 1,
                    "target": "0x8f2de4ca2c8c61ae6c4fdb5e04a1b2a6d3e1c8a1",
                    "value": "0",
                    "callData": "0x6e553f65",
                    "payload": {"tokenAddress": "0xceba9300f2b948710d2653dd7b07f33a8b32118c", "inputPos": 0},
                    "estimatedGas": "250000",
                }
            ],
        }
    )


@pytest.fixture
def warnings_log():
    from loguru import logger

    messages: list = []
    handler_id = logger.add(messages.append, level="WARNING", format="{message}")
    yield messages
    logger.remove(handler_id)
