from .sdk_creator import (
    TEST_AGENT_ID,
    TEST_API_URL,
    TEST_PAYER_SEED,
    TEST_RECEIPT_ID,
    agent_payload,
    create_test_sdk,
    make_rpc_client,
)

__all__ = [
    "TEST_AGENT_ID",
    "TEST_API_URL",
    "TEST_PAYER_SEED",
    "TEST_RECEIPT_ID",
    "agent_payload",
    "create_test_sdk",
    "make_rpc_client",
]
