"""
Environment loading for agent processes.
"""
import os
from typing import Dict, Mapping, Optional

from ..exceptions import MissingEnvironmentError

REQUIRED = "required"
OPTIONAL = "optional"


def load_agent_env(
    config: Mapping[str, str],
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Optional[str]]:
    """
    Read the environment variables an agent needs, failing on missing ones.

    Args:
        config: Variable name -> "required" or "optional"
        environ: Environment to read, defaults to os.environ

    Returns:
        Variable name -> value (None for unset optional variables)

    Raises:
        MissingEnvironmentError: Listing every unset required variable

    Example:
        env = load_agent_env({
            "COORDINATOR_WALLET_SECRET": "required",
            "SOLANA_RPC_URL": "optional",
        })
    """
    source = os.environ if environ is None else environ
    values: Dict[str, Optional[str]] = {}
    missing = []

    for key, requirement in config.items():
        if requirement not in (REQUIRED, OPTIONAL):
            raise ValueError(f"{key}: expected 'required' or 'optional', got {requirement!r}")
        value = source.get(key) or None
        if value is None and requirement == REQUIRED:
            missing.append(key)
        else:
            values[key] = value

    if missing:
        raise MissingEnvironmentError(missing)
    return values
