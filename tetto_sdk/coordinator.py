"""
Fan-out helpers for coordinator agents.

A coordinator pays several sub-agents from one wallet. Calls run on a thread
pool and complete in any order; results are always handed back in the order
the calls were given.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Union

from .models import CallResult

if TYPE_CHECKING:
    from .client import TettoSDK
    from .wallet import TettoWallet

logger = logging.getLogger(__name__)

JOIN_ALL = "all"
JOIN_SETTLED = "settled"
MAX_PARALLEL_CALLS = 32


@dataclass
class AgentCall:
    agent_id: str
    input: Dict[str, Any] = field(default_factory=dict)
    preferred_token: Optional[str] = None


@dataclass
class CallOutcome:
    """
    Result of one sub-call under ``join="settled"``.

    Exactly one of ``result`` and ``error`` is set.
    """
    agent_id: str
    result: Optional[CallResult] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def call_agents_parallel(
    sdk: "TettoSDK",
    calls: Sequence[AgentCall],
    wallet: "TettoWallet",
    join: str = JOIN_ALL,
    max_workers: Optional[int] = None,
) -> Union[List[CallResult], List[CallOutcome]]:
    """
    Call several agents concurrently, paying each from the same wallet.

    join="all":
        All-or-nothing. Returns the CallResults in call order, or raises
        the first failure in call order. Every call still runs to the end,
        so sibling payments may have settled when this raises.
    join="settled":
        Best-effort. Returns a CallOutcome per call, in call order.

    There is no cancellation: a sub-call already handed to the platform
    settles whether or not the coordinator still wants its result.

    Args:
        sdk: SDK to call through (usually built with TettoSDK.from_context)
        calls: Calls to make
        wallet: Coordinator wallet paying for every call
        join: "all" or "settled"
        max_workers: Thread pool size, defaults to one thread per call up
            to MAX_PARALLEL_CALLS

    Returns:
        List of CallResult (join="all") or CallOutcome (join="settled")
    """
    if join not in (JOIN_ALL, JOIN_SETTLED):
        raise ValueError(f"join must be {JOIN_ALL!r} or {JOIN_SETTLED!r}, got {join!r}")
    if not calls:
        return []

    outcomes: List[Optional[CallOutcome]] = [None] * len(calls)
    logger.info(f"Calling {len(calls)} agents in parallel (join={join})")

    with ThreadPoolExecutor(max_workers=max_workers or min(len(calls), MAX_PARALLEL_CALLS)) as executor:
        future_to_index = {
            executor.submit(
                sdk.call_agent,
                call.agent_id,
                call.input,
                wallet,
                preferred_token=call.preferred_token,
            ): index
            for index, call in enumerate(calls)
        }

        for future in as_completed(future_to_index):
            index = future_to_index[future]
            agent_id = calls[index].agent_id
            try:
                outcomes[index] = CallOutcome(agent_id=agent_id, result=future.result())
                logger.info(f"[{index + 1}/{len(calls)}] {agent_id} completed")
            except Exception as e:
                outcomes[index] = CallOutcome(agent_id=agent_id, error=e)
                logger.warning(f"[{index + 1}/{len(calls)}] {agent_id} failed: {e}")

    if join == JOIN_SETTLED:
        return outcomes

    for outcome in outcomes:
        if outcome.error is not None:
            raise outcome.error
    return [outcome.result for outcome in outcomes]


def summarize_outcomes(outcomes: Sequence[CallOutcome]) -> Dict[str, Any]:
    """Counts and per-agent errors for a settled fan-out, for coordinator output."""
    failed = [outcome for outcome in outcomes if not outcome.ok]
    return {
        "total": len(outcomes),
        "succeeded": len(outcomes) - len(failed),
        "failed": len(failed),
        "errors": {outcome.agent_id: str(outcome.error) for outcome in failed},
    }
