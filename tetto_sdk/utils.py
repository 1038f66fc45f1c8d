"""
Utility functions for the Tetto SDK.
"""
import re
from typing import Any, Dict

import base58

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)
# Marketplace ids are UUIDs; first-party agents also answer to slugs
_SLUG_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]{0,127}$")


def is_uuid(value: Any) -> bool:
    return isinstance(value, str) and bool(_UUID_RE.match(value))


def is_agent_id(value: Any) -> bool:
    return is_uuid(value) or (isinstance(value, str) and bool(_SLUG_RE.match(value)))


def is_valid_public_key(address: Any) -> bool:
    """
    Check that a string is a base58-encoded 32-byte Solana public key.
    """
    if not isinstance(address, str) or not 32 <= len(address) <= 44:
        return False
    try:
        return len(base58.b58decode(address)) == 32
    except ValueError:
        return False


def sanitize_input(payload: Any) -> Dict[str, Any]:
    """
    Describe an agent input for logging without its content.
    """
    if not isinstance(payload, dict):
        return {"type": type(payload).__name__}
    return {"keys": sorted(payload.keys()), "size": len(str(payload))}
