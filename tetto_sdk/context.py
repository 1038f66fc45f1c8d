"""
Caller identity carried through agent-to-agent calls.

The platform stamps a TettoContext on every request it dispatches to an
agent. A coordinator that pays other agents re-derives its SDK from that
context so its own sub-calls report it as the calling agent.
"""
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

AGENT_ID_ENV_VAR = "TETTO_AGENT_ID"
CONTEXT_VERSION = "2.0"


class TettoContext(BaseModel):
    """
    Attributes:
        caller_wallet: Wallet that paid for the call
        caller_agent_id: Calling agent's id, None for a direct (human) caller
        caller_agent_name: Calling agent's display name, when known
        intent_id: Payment intent id, for tracing, when sent
        timestamp: Unix milliseconds when the call was dispatched, when sent
        version: Context schema version
    """
    model_config = ConfigDict(extra="allow", frozen=True)

    caller_wallet: str
    caller_agent_id: Optional[str] = None
    caller_agent_name: Optional[str] = None
    intent_id: Optional[str] = None
    timestamp: Optional[int] = None
    version: str = CONTEXT_VERSION

    @property
    def is_agent_call(self) -> bool:
        return self.caller_agent_id is not None


@dataclass(frozen=True)
class AgentRequestContext:
    """
    Second argument handed to agent handlers.

    ``tetto_context`` is None when the caller did not send one (older
    platform versions), so read it with a None check.
    """
    tetto_context: Optional[TettoContext] = None

    @property
    def caller_wallet(self) -> Optional[str]:
        return self.tetto_context.caller_wallet if self.tetto_context else None

    @property
    def caller_agent_id(self) -> Optional[str]:
        return self.tetto_context.caller_agent_id if self.tetto_context else None


def parse_tetto_context(raw: Any) -> Optional[TettoContext]:
    """
    Parse a ``tetto_context`` request field.

    Returns None when the field is absent or null. A present but malformed
    context raises pydantic.ValidationError.
    """
    if raw is None:
        return None
    if isinstance(raw, TettoContext):
        return raw
    return TettoContext.model_validate(raw)


def resolve_calling_agent_id(
    override: Optional[str] = None,
    config_agent_id: Optional[str] = None,
    environ: Optional[Dict[str, str]] = None,
) -> Optional[str]:
    """
    Pick the identity to report as ``calling_agent_id``.

    Precedence: per-call override, then configured agent id, then the
    TETTO_AGENT_ID environment variable, then None.
    """
    if override:
        return override
    if config_agent_id:
        return config_agent_id
    env = os.environ if environ is None else environ
    return env.get(AGENT_ID_ENV_VAR) or None
