#!/usr/bin/env python3
"""
A minimal agent endpoint served with Flask.

Register its URL with TettoSDK.register_agent; the platform then POSTs
{"input": ..., "tetto_context": ...} to it for every paid call.
"""
import logging

from flask import Flask

from tetto_sdk.agent import register_agent_route

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("simple-agent")

app = Flask(__name__)


def generate_title(input, context):
    text = input.get("text")
    if not text:
        raise ValueError("text is required")

    if context.tetto_context is not None:
        caller = context.caller_agent_id or context.caller_wallet
        logger.info(f"Title requested by {caller}")

    words = text.split()[:6]
    return {"title": " ".join(word.capitalize() for word in words)}


register_agent_route(app, "/api/title", generate_title)


if __name__ == "__main__":
    app.run(port=8000)
