"""
Network defaults and SDK configuration.
"""
import os
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional

from solana.rpc.api import Client
from solana.rpc.commitment import Confirmed

from .token_mint import get_token_mint

NETWORKS = ("mainnet", "devnet")

NETWORK_DEFAULTS: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "mainnet": MappingProxyType({
        "api_url": "https://tetto.io",
        "protocol_wallet": "CYSnefexbvrRU6VxzGfvZqKYM4UixupvDeZg3sUSWm84",
        "usdc_mint": get_token_mint("USDC", "mainnet"),
        "rpc_url": "https://api.mainnet-beta.solana.com",
    }),
    "devnet": MappingProxyType({
        "api_url": "https://dev.tetto.io",
        "protocol_wallet": "BubFsAG8cSEH7NkLpZijctRpsZkCiaWqCdRfh8kUpXEt",
        "usdc_mint": get_token_mint("USDC", "devnet"),
        "rpc_url": "https://api.devnet.solana.com",
    }),
})


@dataclass(frozen=True)
class TettoConfig:
    """
    Immutable configuration for a TettoSDK instance.

    Attributes:
        api_url: Marketplace base URL
        network: "mainnet" or "devnet"
        protocol_wallet: Wallet that receives the protocol fee (required)
        agent_id: Identity reported as calling_agent_id on outbound calls
        api_key: Marketplace API key, sent as a bearer token
        debug: Log call progress at INFO instead of DEBUG
        rpc_url: Solana RPC override for the legacy client-submits path
    """
    api_url: str
    network: str
    protocol_wallet: str
    agent_id: Optional[str] = None
    api_key: Optional[str] = None
    debug: bool = False
    rpc_url: Optional[str] = None

    def __post_init__(self):
        _check_network(self.network)
        if not self.api_url:
            raise ValueError("api_url is required")
        if not self.protocol_wallet:
            raise ValueError("protocol_wallet is required")
        object.__setattr__(self, "api_url", self.api_url.rstrip("/"))

    def with_overrides(self, **changes: Any) -> "TettoConfig":
        """Return a copy with some fields replaced."""
        return replace(self, **changes)


def _check_network(network: str) -> None:
    if network not in NETWORK_DEFAULTS:
        raise ValueError(
            f"Unknown network: {network!r}. Valid networks: {', '.join(NETWORKS)}"
        )


def get_default_config(network: str, **overrides: Any) -> TettoConfig:
    """
    Build the default configuration for a network.

    Args:
        network: "mainnet" or "devnet"
        **overrides: Any TettoConfig field to replace

    Returns:
        TettoConfig populated from NETWORK_DEFAULTS
    """
    _check_network(network)
    defaults = NETWORK_DEFAULTS[network]
    fields = {
        "api_url": defaults["api_url"],
        "network": network,
        "protocol_wallet": defaults["protocol_wallet"],
    }
    fields.update(overrides)
    return TettoConfig(**fields)


def get_rpc_url(network: str, rpc_url: Optional[str] = None) -> str:
    """Explicit URL, then SOLANA_RPC_URL, then the network default."""
    _check_network(network)
    return rpc_url or os.environ.get("SOLANA_RPC_URL") or NETWORK_DEFAULTS[network]["rpc_url"]


def create_rpc_client(network: str, rpc_url: Optional[str] = None) -> Client:
    """
    Create a Solana RPC client at confirmed commitment.

    Only the legacy client-submits path needs one; the platform submits
    transactions in the current protocol.
    """
    return Client(get_rpc_url(network, rpc_url), commitment=Confirmed)


def get_usdc_mint(network: str) -> str:
    """Get the USDC mint address for a network."""
    _check_network(network)
    return NETWORK_DEFAULTS[network]["usdc_mint"]
