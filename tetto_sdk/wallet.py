"""
Wallet shims.

The SDK needs exactly two things from a wallet: its public key and a way to
sign a transaction. Submission is the platform's job, so no RPC connection
is part of the wallet shape. Key material never leaves the wallet object and
is never logged.
"""
import json
import os
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from .exceptions import SigningUnsupportedError, WalletNotConnectedError

COORDINATOR_SECRET_ENV_VAR = "COORDINATOR_WALLET_SECRET"


@runtime_checkable
class TettoWallet(Protocol):
    """
    Protocol for wallets accepted by TettoSDK.call_agent.

    A wallet may also expose ``send_transaction(tx) -> str``; only the
    legacy client-submits call mode uses it.
    """
    public_key: Pubkey

    def sign_transaction(self, transaction: Transaction) -> Transaction:
        """Sign and return the transaction"""
        ...


class KeypairWallet:
    """Signs in-process with a local keypair. For agents and scripts."""

    def __init__(self, keypair: Keypair):
        self._keypair = keypair
        self.public_key = keypair.pubkey()

    def sign_transaction(self, transaction: Transaction) -> Transaction:
        transaction.sign([self._keypair], transaction.message.recent_blockhash)
        return transaction

    def __repr__(self) -> str:
        return f"KeypairWallet({self.public_key})"


class AdapterWallet:
    """Delegates signing to an external adapter (browser extension, HSM, ...)."""

    def __init__(self, public_key: Pubkey, sign: Callable[[Transaction], Transaction]):
        self.public_key = public_key
        self._sign = sign

    def sign_transaction(self, transaction: Transaction) -> Transaction:
        return self._sign(transaction)

    def __repr__(self) -> str:
        return f"AdapterWallet({self.public_key})"


def create_wallet_from_keypair(keypair: Keypair) -> KeypairWallet:
    """
    Create a wallet from a keypair.

    Example:
        keypair = load_keypair_from_env()
        wallet = create_wallet_from_keypair(keypair)
        result = tetto.call_agent(agent_id, {"text": "hi"}, wallet)
    """
    return KeypairWallet(keypair)


def create_wallet_from_adapter(adapter: Any) -> AdapterWallet:
    """
    Create a wallet from an adapter object.

    The adapter must expose ``public_key`` (None while disconnected) and a
    ``sign_transaction`` method. Approval prompts shown by the adapter are
    outside the SDK's control.

    Raises:
        WalletNotConnectedError: If the adapter has no public key
        SigningUnsupportedError: If the adapter cannot sign
    """
    public_key = getattr(adapter, "public_key", None)
    if public_key is None:
        raise WalletNotConnectedError("Wallet not connected")

    sign = getattr(adapter, "sign_transaction", None)
    if not callable(sign):
        raise SigningUnsupportedError("Wallet does not support signing transactions")

    if isinstance(public_key, str):
        public_key = Pubkey.from_string(public_key)
    return AdapterWallet(public_key, sign)


def load_keypair_from_env(var_name: str = COORDINATOR_SECRET_ENV_VAR) -> Keypair:
    """
    Load a keypair from an environment variable holding a JSON byte array.

    Raises:
        ValueError: If the variable is unset or not a 64-byte array
    """
    raw: Optional[str] = os.environ.get(var_name)
    if not raw:
        raise ValueError(f"{var_name} is not set")
    try:
        secret = bytes(json.loads(raw))
    except (TypeError, ValueError) as e:
        raise ValueError(f"{var_name} must be a JSON array of key bytes") from e
    if len(secret) != 64:
        raise ValueError(f"{var_name} must contain 64 bytes, got {len(secret)}")
    return Keypair.from_bytes(secret)
