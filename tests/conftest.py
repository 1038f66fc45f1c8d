"""
Pytest fixtures for the Tetto SDK tests.
"""
import base64

import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from tetto_sdk.networks import NETWORK_DEFAULTS
from tetto_sdk.transaction_builder import (
    SOL,
    BuildPaymentTransactionParams,
    build_agent_payment_transaction,
)
from tetto_sdk.wallet import create_wallet_from_keypair

from test_helpers import TEST_PAYER_SEED, create_test_sdk, make_rpc_client
from test_helpers.sdk_creator import TEST_AGENT_OWNER


@pytest.fixture(autouse=True)
def _no_agent_id_env(monkeypatch):
    """Keep a developer's TETTO_AGENT_ID from leaking into identity tests."""
    monkeypatch.delenv("TETTO_AGENT_ID", raising=False)
    monkeypatch.delenv("SOLANA_RPC_URL", raising=False)


@pytest.fixture
def payer_keypair():
    """Deterministic payer keypair"""
    return Keypair.from_seed(TEST_PAYER_SEED)


@pytest.fixture
def wallet(payer_keypair):
    return create_wallet_from_keypair(payer_keypair)


@pytest.fixture
def agent_wallet():
    return Pubkey.from_string(TEST_AGENT_OWNER)


@pytest.fixture
def protocol_wallet():
    return Pubkey.from_string(NETWORK_DEFAULTS["mainnet"]["protocol_wallet"])


@pytest.fixture
def rpc_client():
    """RPC client on which no token account exists yet"""
    return make_rpc_client()


@pytest.fixture
def sdk(rpc_client):
    return create_test_sdk(rpc_client=rpc_client)


@pytest.fixture
def unsigned_transaction_b64(payer_keypair, agent_wallet, protocol_wallet):
    """
    Base64 unsigned SOL payment, as the platform's build-transaction
    endpoint returns it.
    """
    payment = build_agent_payment_transaction(make_rpc_client(), BuildPaymentTransactionParams(
        payer=payer_keypair.pubkey(),
        agent_wallet=agent_wallet,
        protocol_wallet=protocol_wallet,
        amount_base=1_000_000,
        protocol_fee_base=100_000,
        token_mint=SOL,
        token_decimals=9,
    ))
    return base64.b64encode(bytes(payment.transaction)).decode("ascii")
