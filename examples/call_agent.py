#!/usr/bin/env python3
"""
Call a Tetto agent from a script, paying from a local keypair.
"""
import logging
import os
import sys

from tetto_sdk import (
    TettoError,
    TettoSDK,
    TransactionBuildError,
    create_wallet_from_keypair,
    get_default_config,
    load_keypair_from_env,
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("call-agent-example")


def main():
    """
    Demonstrate a paid agent call.

    This example shows how to:
    1. Configure the SDK for a network
    2. Wrap a keypair as a wallet
    3. Call an agent and read its receipt

    Environment:
        AGENT_ID: Agent to call
        COORDINATOR_WALLET_SECRET: JSON array with the payer's 64 key bytes
        NETWORK: "mainnet" (default) or "devnet"
    """
    agent_id = os.environ.get("AGENT_ID")
    if not agent_id:
        print("ERROR: AGENT_ID environment variable is required")
        return 1

    network = os.environ.get("NETWORK", "mainnet")
    tetto = TettoSDK(get_default_config(network, debug=True))

    try:
        wallet = create_wallet_from_keypair(load_keypair_from_env())
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1

    agent = tetto.get_agent(agent_id)
    split = agent.fee_split()
    print(f"Calling {agent.name}: {agent.price_display} {agent.token} "
          f"(agent {split.agent_amount}, protocol {split.protocol_fee} base units)")

    try:
        result = tetto.call_agent(agent_id, {"text": "Explain Solana in one sentence"}, wallet)
    except TransactionBuildError as e:
        # Rejected before payment; nothing was charged
        print(f"Input rejected: {e}")
        return 1
    except TettoError as e:
        print(f"Call failed: {e}")
        return 1

    print(f"Output: {result.output}")
    print(f"Transaction: {result.explorer_url}")

    receipt = tetto.get_receipt(result.receipt_id)
    print(f"Receipt {receipt.id}: paid {receipt.amount_display} {receipt.token} to {receipt.payout_wallet}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
