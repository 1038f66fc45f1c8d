"""
Tetto SDK - call and build paid AI agents on Solana.
"""
from .ata import ensure_ata_exists, ensure_multiple_atas_exist
from .client import CallMode, TettoSDK
from .context import AgentRequestContext, TettoContext, resolve_calling_agent_id
from .coordinator import AgentCall, CallOutcome, call_agents_parallel
from .exceptions import (
    AgentNotFoundError,
    AuthenticationError,
    CallFailedError,
    InvalidIdentifierError,
    InvalidWalletError,
    MissingEnvironmentError,
    PluginError,
    ReceiptNotFoundError,
    RegisterErrorCode,
    RegistrationError,
    SigningRejectedError,
    SigningUnsupportedError,
    TettoConnectionError,
    TettoError,
    TransactionBuildError,
    UnknownTokenMintError,
    WalletNotConnectedError,
)
from .fees import FeeSplit, compute_fee_split
from .models import Agent, AgentMetadata, CallResult, OwnerInfo, Receipt
from .networks import (
    NETWORK_DEFAULTS,
    TettoConfig,
    create_rpc_client,
    get_default_config,
    get_usdc_mint,
)
from .plugins import ErrorContext, PluginAPI
from .token_mint import get_token_mint
from .transaction_builder import (
    BuildPaymentTransactionParams,
    PaymentTransaction,
    build_agent_payment_transaction,
)
from .version import __version__
from .wallet import (
    TettoWallet,
    create_wallet_from_adapter,
    create_wallet_from_keypair,
    load_keypair_from_env,
)

__all__ = [
    "TettoSDK",
    "CallMode",
    "TettoConfig",
    "NETWORK_DEFAULTS",
    "get_default_config",
    "create_rpc_client",
    "get_usdc_mint",
    "get_token_mint",
    "Agent",
    "AgentMetadata",
    "CallResult",
    "OwnerInfo",
    "Receipt",
    "TettoContext",
    "AgentRequestContext",
    "resolve_calling_agent_id",
    "TettoWallet",
    "create_wallet_from_keypair",
    "create_wallet_from_adapter",
    "load_keypair_from_env",
    "FeeSplit",
    "compute_fee_split",
    "ensure_ata_exists",
    "ensure_multiple_atas_exist",
    "BuildPaymentTransactionParams",
    "PaymentTransaction",
    "build_agent_payment_transaction",
    "AgentCall",
    "CallOutcome",
    "call_agents_parallel",
    "PluginAPI",
    "ErrorContext",
    "TettoError",
    "TettoConnectionError",
    "AuthenticationError",
    "InvalidWalletError",
    "WalletNotConnectedError",
    "SigningUnsupportedError",
    "InvalidIdentifierError",
    "AgentNotFoundError",
    "ReceiptNotFoundError",
    "RegisterErrorCode",
    "RegistrationError",
    "TransactionBuildError",
    "SigningRejectedError",
    "CallFailedError",
    "UnknownTokenMintError",
    "MissingEnvironmentError",
    "PluginError",
    "__version__",
]
