"""
Utility functions for creating test SDK instances and marketplace payloads.
"""
from types import SimpleNamespace
from typing import Any, Dict, Iterable, Optional
from unittest.mock import MagicMock

from solders.hash import Hash

from tetto_sdk import TettoSDK, get_default_config
from tetto_sdk.token_mint import get_token_mint

# Test constants used throughout tests
TEST_API_URL = "https://api.tetto.test"
TEST_AGENT_ID = "3f1c2b8e-6a4d-4e8b-9c1a-7d2e5f6a8b90"
TEST_RECEIPT_ID = "a0b1c2d3-e4f5-4a6b-8c7d-9e0f1a2b3c4d"
TEST_AGENT_OWNER = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"
TEST_PAYER_SEED = bytes([7] * 32)
TEST_LAST_VALID_BLOCK_HEIGHT = 424242


def make_rpc_client(existing: Iterable[Any] = (), lookup_error: Optional[Exception] = None) -> MagicMock:
    """
    Mock Solana RPC client.

    Accounts whose address is in ``existing`` are reported as present;
    everything else is reported missing, or raises ``lookup_error``.
    """
    existing = {str(address) for address in existing}
    rpc = MagicMock()
    rpc.get_latest_blockhash.return_value = SimpleNamespace(value=SimpleNamespace(
        blockhash=Hash.default(),
        last_valid_block_height=TEST_LAST_VALID_BLOCK_HEIGHT,
    ))

    def get_account_info(address, *args, **kwargs):
        if str(address) in existing:
            return SimpleNamespace(value=SimpleNamespace(lamports=2_039_280))
        if lookup_error is not None:
            raise lookup_error
        return SimpleNamespace(value=None)

    rpc.get_account_info.side_effect = get_account_info
    return rpc


def agent_payload(
    agent_id: str = TEST_AGENT_ID,
    token: str = "USDC",
    price_base: int = 1_000_000,
    fee_bps: Optional[int] = 1000,
    **extra: Any,
) -> Dict[str, Any]:
    """Agent record as the marketplace returns it."""
    decimals = 9 if token == "SOL" else 6
    agent = {
        "id": agent_id,
        "name": "Title Generator",
        "description": "Generates titles",
        "endpoint_url": "https://agents.example.com/title",
        "price_display": price_base / 10 ** decimals,
        "price_base": price_base,
        "token": token,
        "token_mint": get_token_mint(token, "mainnet"),
        "token_decimals": decimals,
        "input_schema": {"type": "object", "properties": {"text": {"type": "string"}}},
        "output_schema": {"type": "object", "properties": {"title": {"type": "string"}}},
        "owner_wallet": TEST_AGENT_OWNER,
    }
    if fee_bps is not None:
        agent["fee_bps"] = fee_bps
    agent.update(extra)
    return agent


def create_test_sdk(
    network: str = "mainnet",
    api_url: str = TEST_API_URL,
    rpc_client: Optional[Any] = None,
    retry_count: int = 0,
    **config_overrides: Any,
) -> TettoSDK:
    """
    Create an SDK instance for testing with consistent defaults.

    Args:
        network: Network for the default configuration
        api_url: Marketplace URL (mocked with requests_mock)
        rpc_client: RPC client for the legacy path, defaults to a mock
        retry_count: GET retries, disabled by default so tests stay fast
        **config_overrides: TettoConfig fields

    Returns:
        Configured TettoSDK instance
    """
    config = get_default_config(network, api_url=api_url, **config_overrides)
    return TettoSDK(
        config,
        rpc_client=rpc_client if rpc_client is not None else make_rpc_client(),
        retry_count=retry_count,
    )
