"""
Canonical token mint addresses per network.

Deriving the mint from (token, network) removes hand-copied addresses from
agent configuration; a devnet mint used on mainnet makes every payment fail.
"""
from types import MappingProxyType
from typing import Mapping

from .exceptions import UnknownTokenMintError

# Wrapped SOL shares one address across clusters
WRAPPED_SOL_MINT = "So11111111111111111111111111111111111111112"

TOKEN_MINTS: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "mainnet": MappingProxyType({
        "USDC": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
        "SOL": WRAPPED_SOL_MINT,
    }),
    "devnet": MappingProxyType({
        "USDC": "EGzSiubUqhzWFR2KxWCx6jHD6XNsVhKrnebjcQdN6qK4",
        "SOL": WRAPPED_SOL_MINT,
    }),
})


def get_token_mint(token: str, network: str) -> str:
    """
    Get the mint address for a token on a network.

    Args:
        token: Token symbol ("USDC" or "SOL")
        network: Network name ("mainnet" or "devnet")

    Returns:
        Mint address as a base58 string

    Raises:
        UnknownTokenMintError: If the combination is not in the table
    """
    mint = TOKEN_MINTS.get(network, {}).get(token)
    if not mint:
        raise UnknownTokenMintError(token, network)
    return mint
