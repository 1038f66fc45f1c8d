"""
Fee split between an agent owner and the protocol.
"""
from dataclasses import dataclass
from typing import Optional

DEFAULT_FEE_BPS = 1000  # 10%
BPS_DENOMINATOR = 10_000


@dataclass(frozen=True)
class FeeSplit:
    """Amounts in base units. agent_amount + protocol_fee == price_base."""
    price_base: int
    fee_bps: int
    protocol_fee: int
    agent_amount: int


def compute_fee_split(price_base: int, fee_bps: Optional[int] = None) -> FeeSplit:
    """
    Split a price into the agent's share and the protocol fee.

    The fee is floored, the agent receives the rest, so the two halves always
    add back up to the price. Both sides of a call (SDK and platform) must get
    the same numbers from the same agent record.

    Args:
        price_base: Agent price in base units
        fee_bps: Fee in basis points; None means DEFAULT_FEE_BPS

    Returns:
        FeeSplit

    Raises:
        ValueError: If price_base is negative or fee_bps outside [0, 10000]
    """
    if fee_bps is None:
        fee_bps = DEFAULT_FEE_BPS
    price_base = int(price_base)
    fee_bps = int(fee_bps)
    if price_base < 0:
        raise ValueError(f"price_base must be >= 0, got {price_base}")
    if not 0 <= fee_bps <= BPS_DENOMINATOR:
        raise ValueError(f"fee_bps must be between 0 and {BPS_DENOMINATOR}, got {fee_bps}")

    # Integer floor division; float math loses precision above 2**53
    protocol_fee = price_base * fee_bps // BPS_DENOMINATOR
    return FeeSplit(
        price_base=price_base,
        fee_bps=fee_bps,
        protocol_fee=protocol_fee,
        agent_amount=price_base - protocol_fee,
    )
