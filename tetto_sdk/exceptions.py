"""
Exceptions for the Tetto SDK.
"""
from enum import Enum
from typing import Any, Dict, Optional


class RegisterErrorCode(str, Enum):
    """
    Error codes returned by the marketplace when registering an agent.
    """
    UNKNOWN = "UNKNOWN"
    AGENT_NAME_TAKEN = "AGENT_NAME_TAKEN"
    INVALID_WALLET_ADDRESS = "INVALID_WALLET_ADDRESS"
    INVALID_SCHEMA = "INVALID_SCHEMA"

    @classmethod
    def from_response(cls, code: Optional[str], message: Optional[str]) -> "RegisterErrorCode":
        """Pick the code from an explicit field, else from the error text."""
        if code:
            try:
                return cls(code)
            except ValueError:
                pass
        for member in cls:
            if member is not cls.UNKNOWN and message and member.value in message:
                return member
        return cls.UNKNOWN


class TettoError(Exception):
    """Base exception for all Tetto SDK errors."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class TettoConnectionError(TettoError):
    """Raised when the marketplace cannot be reached or answers with garbage."""

    def __init__(self, message: str, *, url: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, code="CONNECTION_ERROR", **kwargs)
        self.url = url
        if url:
            self.details["url"] = url


class AuthenticationError(TettoError):
    """API key missing or rejected."""

    def __init__(self, message: str = "Authentication failed", **kwargs: Any) -> None:
        super().__init__(message, code="AUTH_ERROR", **kwargs)


class InvalidWalletError(TettoError):
    """Wallet is missing a public key or a signing capability."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message, code="INVALID_WALLET", **kwargs)


class WalletNotConnectedError(InvalidWalletError):
    """Browser-style adapter does not report a connected public key."""


class SigningUnsupportedError(InvalidWalletError):
    """Adapter exposes no method that can sign a transaction."""


class InvalidIdentifierError(TettoError, ValueError):
    """Agent or receipt identifier is malformed."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message, code="INVALID_ID", **kwargs)


class AgentNotFoundError(TettoError):
    """Requested agent does not exist."""

    def __init__(self, message: str = "Agent not found", *, agent_id: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, code="AGENT_NOT_FOUND", **kwargs)
        self.agent_id = agent_id
        if agent_id:
            self.details["agent_id"] = agent_id


class ReceiptNotFoundError(TettoError):
    """Requested receipt does not exist."""

    def __init__(self, message: str = "Receipt not found", *, receipt_id: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, code="RECEIPT_NOT_FOUND", **kwargs)
        self.receipt_id = receipt_id
        if receipt_id:
            self.details["receipt_id"] = receipt_id


class RegistrationError(TettoError):
    """Agent registration was refused."""

    def __init__(
        self,
        message: str = "Agent registration failed",
        *,
        error_code: RegisterErrorCode = RegisterErrorCode.UNKNOWN,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, code=error_code.value, **kwargs)
        self.error_code = error_code


class TransactionBuildError(TettoError):
    """
    The platform refused to build a payment transaction.

    Input validation happens at this step, so no payment intent exists and
    nothing was signed or submitted when this is raised.
    """

    def __init__(self, message: str = "Transaction building failed", *, agent_id: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, code="BUILD_FAILED", **kwargs)
        self.agent_id = agent_id
        if agent_id:
            self.details["agent_id"] = agent_id


class SigningRejectedError(TettoError):
    """The wallet declined or failed to sign. Never retried."""

    def __init__(self, message: str = "Transaction signing failed", **kwargs: Any) -> None:
        super().__init__(message, code="SIGNING_REJECTED", **kwargs)


class CallFailedError(TettoError):
    """The marketplace reported a failed agent call."""

    def __init__(
        self,
        message: str = "Agent call failed",
        *,
        agent_id: Optional[str] = None,
        payment_intent_id: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, code="CALL_FAILED", **kwargs)
        self.agent_id = agent_id
        self.payment_intent_id = payment_intent_id
        if agent_id:
            self.details["agent_id"] = agent_id
        if payment_intent_id:
            self.details["payment_intent_id"] = payment_intent_id


class UnknownTokenMintError(TettoError):
    """No canonical mint for the requested (token, network) pair."""

    def __init__(self, token: str, network: str) -> None:
        super().__init__(
            f"Unknown token/network combination: {token} on {network}. "
            "Valid combinations: USDC/SOL on mainnet/devnet.",
            code="UNKNOWN_TOKEN_MINT",
            details={"token": token, "network": network},
        )
        self.token = token
        self.network = network


class MissingEnvironmentError(TettoError):
    """One or more required environment variables are unset."""

    def __init__(self, missing: list) -> None:
        lines = "\n".join(f"  - {key}" for key in missing)
        super().__init__(
            f"Missing required environment variables:\n\n{lines}\n\n"
            "Add these to your .env file or deployment environment.",
            code="MISSING_ENV",
            details={"missing": list(missing)},
        )
        self.missing = list(missing)


class PluginError(TettoError):
    """A plugin could not be registered."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message, code="PLUGIN_ERROR", **kwargs)
