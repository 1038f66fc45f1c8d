#!/usr/bin/env python3
"""
A coordinator agent that pays two sub-agents to audit code.

The SDK is rebuilt from each inbound context so the sub-agents see this
coordinator as their caller. The coordinator's own wallet pays for them.

Environment:
    COORDINATOR_WALLET_SECRET: JSON array with the coordinator's key bytes
    NETWORK: "mainnet" (default) or "devnet"
"""
import logging

from flask import Flask

from tetto_sdk import AgentCall, TettoSDK, call_agents_parallel, create_wallet_from_keypair, load_keypair_from_env
from tetto_sdk.agent import load_agent_env, register_agent_route
from tetto_sdk.coordinator import summarize_outcomes

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("coordinator-agent")

env = load_agent_env({
    "COORDINATOR_WALLET_SECRET": "required",
    "NETWORK": "optional",
    "SOLANA_RPC_URL": "optional",
})
coordinator_wallet = create_wallet_from_keypair(load_keypair_from_env())

app = Flask(__name__)


def audit(input, context):
    tetto = TettoSDK.from_context(context.tetto_context, network=env["NETWORK"] or "mainnet")

    agents = {agent.name: agent for agent in tetto.list_agents()}
    scanner = agents.get("SecurityScanner")
    analyzer = agents.get("QualityAnalyzer")
    if scanner is None or analyzer is None:
        raise RuntimeError("Required sub-agents not found in marketplace")

    sub_input = {"code": input["code"], "language": input.get("language", "python")}
    outcomes = call_agents_parallel(
        tetto,
        [AgentCall(scanner.id, sub_input), AgentCall(analyzer.id, sub_input)],
        coordinator_wallet,
        join="settled",
    )
    security, quality = outcomes

    return {
        "security": security.result.output if security.ok else None,
        "quality": quality.result.output if quality.ok else None,
        "summary": summarize_outcomes(outcomes),
    }


register_agent_route(app, "/api/audit", audit)


if __name__ == "__main__":
    app.run(port=8001)
