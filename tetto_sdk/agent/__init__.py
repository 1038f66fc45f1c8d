"""
Helpers for building agents that receive Tetto calls.
"""
from ..context import AgentRequestContext, TettoContext
from ..token_mint import get_token_mint
from .env import load_agent_env
from .handler import AgentHandler, create_agent_handler, register_agent_route

__all__ = [
    "AgentHandler",
    "AgentRequestContext",
    "TettoContext",
    "create_agent_handler",
    "get_token_mint",
    "load_agent_env",
    "register_agent_route",
]
