"""
TettoSDK - Main client for the Tetto agent marketplace.
"""
import base64
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

import requests
from cachetools import TTLCache
from pydantic import TypeAdapter, ValidationError
from requests.adapters import HTTPAdapter
from solana.rpc.api import Client
from solders.pubkey import Pubkey
from solders.transaction import Transaction
from urllib3.util.retry import Retry

from .context import TettoContext, resolve_calling_agent_id
from .exceptions import (
    AgentNotFoundError,
    AuthenticationError,
    CallFailedError,
    InvalidIdentifierError,
    InvalidWalletError,
    ReceiptNotFoundError,
    RegisterErrorCode,
    RegistrationError,
    SigningRejectedError,
    TettoConnectionError,
    TettoError,
    TransactionBuildError,
)
from .fees import FeeSplit
from .models import (
    Agent,
    AgentListResponse,
    AgentMetadata,
    AgentResponse,
    ApiFailure,
    BuildTransactionResponse,
    CallResponse,
    CallResult,
    Receipt,
    ReceiptResponse,
    RegisterResponse,
)
from .networks import TettoConfig, create_rpc_client, get_default_config
from .plugins import ErrorContext, destroy_plugins, notify_error, register_plugin
from .transaction_builder import (
    SOL,
    BuildPaymentTransactionParams,
    build_agent_payment_transaction,
)
from .utils import is_agent_id, is_uuid, is_valid_public_key, sanitize_input
from .wallet import TettoWallet


class CallMode(str, Enum):
    """
    How a paid call is settled.

    PLATFORM: the platform validates input, builds the transaction, submits
        it and runs the agent; the SDK only signs.
    LEGACY: the SDK builds and submits the transaction itself, then reports
        the signature to the marketplace.
    """
    PLATFORM = "platform"
    LEGACY = "legacy"


class TettoSDK:
    """
    Client for calling and registering agents on the Tetto marketplace.

    One call runs strictly in order: fetch agent, compute fee split, obtain
    the unsigned transaction, sign, settle. Nothing is retried once a payment
    step has started. A caller that stops waiting on a call cannot undo a
    transaction already handed to the platform; it may still settle.

    The instance holds only immutable configuration, the HTTP session and,
    when enabled, an agent metadata cache. Wallets are passed per call and
    never stored.
    """

    def __init__(
        self,
        config: TettoConfig,
        *,
        session: Optional[requests.Session] = None,
        rpc_client: Optional[Client] = None,
        retry_count: int = 3,
        timeout: Optional[float] = None,
        agent_cache_ttl: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the SDK

        Args:
            config: SDK configuration (see get_default_config)
            session: Optional pre-configured requests session
            rpc_client: Solana RPC client for the legacy call mode
                (created lazily from the config when omitted)
            retry_count: Retries for idempotent GET requests
            timeout: HTTP timeout in seconds; None leaves deadlines to the
                platform, which enforces per-agent limits server-side
            agent_cache_ttl: Cache agent metadata for this many seconds
            logger: Optional logger instance to use for debug/info logging
        """
        self.config = config
        self.api_url = config.api_url
        self.calling_agent_id = resolve_calling_agent_id(config_agent_id=config.agent_id)
        self.logger = logger or logging.getLogger(__name__)
        self.timeout = timeout
        self._rpc_client = rpc_client

        self._agent_cache: Optional[TTLCache] = None
        if agent_cache_ttl:
            self._agent_cache = TTLCache(maxsize=256, ttl=agent_cache_ttl)

        self._plugins: Dict[str, Any] = {}

        # POSTs create payment intents or settle payments; only reads retry
        self.session = session or requests.Session()
        retries = Retry(
            total=retry_count,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )
        self.session.mount("http://", HTTPAdapter(max_retries=retries))
        self.session.mount("https://", HTTPAdapter(max_retries=retries))
        self.session.headers["Content-Type"] = "application/json"
        if config.api_key:
            self.session.headers["Authorization"] = f"Bearer {config.api_key}"

    @classmethod
    def from_context(
        cls,
        context: Optional[Union[TettoContext, Dict[str, Any]]],
        network: str = "mainnet",
        **overrides: Any,
    ) -> "TettoSDK":
        """
        Create an SDK for a coordinator from the context it was called with.

        The context's ``caller_agent_id`` becomes this SDK's agent_id, so
        every sub-call reports it as ``calling_agent_id``. Without this,
        sub-agents would see the calls as coming from a human.

        Args:
            context: Inbound TettoContext (or its dict form); None is allowed
            network: Network for the default configuration
            **overrides: TettoConfig fields, or TettoSDK keyword arguments
                (session, rpc_client, retry_count, timeout, agent_cache_ttl,
                logger)
        """
        sdk_kwargs = {
            key: overrides.pop(key)
            for key in ("session", "rpc_client", "retry_count", "timeout", "agent_cache_ttl", "logger")
            if key in overrides
        }
        if isinstance(context, dict):
            context = TettoContext.model_validate(context)
        agent_id = context.caller_agent_id if context is not None else None

        config = get_default_config(network, **overrides)
        if agent_id:
            config = config.with_overrides(agent_id=agent_id)
        return cls(config, **sdk_kwargs)

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    def _log(self, message: str) -> None:
        if self.config.debug:
            self.logger.info(message)
        else:
            self.logger.debug(message)

    def _request(self, method: str, path: str, json_body: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.api_url}{path}"
        try:
            response = self.session.request(method, url, json=json_body, timeout=self.timeout)
        except requests.RequestException as e:
            self.logger.error(f"Request to {url} failed: {e}")
            raise TettoConnectionError(f"Request to {url} failed: {e}", url=url) from e

        try:
            return response.json()
        except ValueError as e:
            raise TettoConnectionError(
                f"Invalid JSON response from {url} (HTTP {response.status_code})", url=url
            ) from e

    def _parse(self, adapter: TypeAdapter, data: Any, what: str) -> Any:
        # Anything short of ok: true is a failure, e.g. a bare {"error": ...} from a 404
        if isinstance(data, dict) and data.get("ok") is not True:
            data = {**data, "ok": False}
        try:
            return adapter.validate_python(data)
        except ValidationError as e:
            raise TettoError(f"{what} missing from response", details={"errors": e.errors()}) from e

    # ------------------------------------------------------------------
    # Marketplace reads and registration
    # ------------------------------------------------------------------

    def register_agent(self, metadata: Union[AgentMetadata, Dict[str, Any]]) -> Agent:
        """
        Register a new agent in the marketplace.

        Args:
            metadata: Agent metadata (name, endpoint, schemas, price, owner wallet)

        Returns:
            The registered Agent

        Raises:
            AuthenticationError: If the API key is missing or rejected
            RegistrationError: If the marketplace refuses the registration
        """
        if isinstance(metadata, dict):
            metadata = AgentMetadata.model_validate(metadata)

        if not is_valid_public_key(metadata.owner_wallet):
            raise RegistrationError(
                f"Invalid owner wallet address: {metadata.owner_wallet}",
                error_code=RegisterErrorCode.INVALID_WALLET_ADDRESS,
            )

        data = self._request("POST", "/api/agents/register", metadata.to_registration_dict())
        result = self._parse(RegisterResponse, data, "Agent data")

        if isinstance(result, ApiFailure):
            error = result.error or "Agent registration failed"
            if any(marker in error for marker in ("API key", "Unauthorized", "Not authenticated")):
                raise AuthenticationError(
                    f"Authentication failed: {error}\n\n"
                    "To fix this:\n"
                    "1. Generate an API key at https://www.tetto.io/dashboard/api-keys\n"
                    "2. Pass it in your config: get_default_config(network, api_key=...)\n"
                    "3. Or set the environment variable TETTO_API_KEY"
                )
            raise RegistrationError(
                error, error_code=RegisterErrorCode.from_response(result.code, error)
            )

        self.logger.info(f"Registered agent {result.agent.name} ({result.agent.id})")
        return result.agent

    def get_agent(self, agent_id: str) -> Agent:
        """
        Get agent details by ID.

        Raises:
            InvalidIdentifierError: If the id is malformed
            AgentNotFoundError: If the marketplace does not know the agent
        """
        if not is_agent_id(agent_id):
            raise InvalidIdentifierError(f"Invalid agent ID format: {agent_id!r}")

        if self._agent_cache is not None and agent_id in self._agent_cache:
            return self._agent_cache[agent_id]

        data = self._request("GET", f"/api/agents/{agent_id}")
        result = self._parse(AgentResponse, data, "Agent data")

        if isinstance(result, ApiFailure):
            raise AgentNotFoundError(
                result.error or (
                    f"Agent not found: {agent_id}\n\n"
                    "This agent may not exist or has been removed.\n"
                    f"Browse available agents: {self.api_url}/agents"
                ),
                agent_id=agent_id,
            )

        if self._agent_cache is not None:
            self._agent_cache[agent_id] = result.agent
        return result.agent

    def list_agents(self) -> List[Agent]:
        """List all active agents in the marketplace."""
        data = self._request("GET", "/api/agents")
        result = self._parse(AgentListResponse, data, "Agents data")
        if isinstance(result, ApiFailure):
            raise TettoError(result.error or "Failed to list agents")
        return result.agents

    def get_receipt(self, receipt_id: str) -> Receipt:
        """
        Get a receipt by ID.

        Raises:
            InvalidIdentifierError: If the id is not a UUID
            ReceiptNotFoundError: If the marketplace does not know the receipt
        """
        if not is_uuid(receipt_id):
            raise InvalidIdentifierError("Invalid receipt ID format. Expected UUID.")

        data = self._request("GET", f"/api/receipts/{receipt_id}")
        result = self._parse(ReceiptResponse, data, "Receipt data")

        if isinstance(result, ApiFailure):
            raise ReceiptNotFoundError(
                result.error or (
                    f"Receipt not found: {receipt_id}\n\n"
                    "Receipts are available immediately after agent calls complete.\n"
                    f"Check your dashboard: {self.api_url}/dashboard/analytics"
                ),
                receipt_id=receipt_id,
            )
        return result.receipt

    # ------------------------------------------------------------------
    # Paid calls
    # ------------------------------------------------------------------

    @property
    def rpc_client(self) -> Client:
        if self._rpc_client is None:
            self._rpc_client = create_rpc_client(self.config.network, self.config.rpc_url)
        return self._rpc_client

    def call_agent(
        self,
        agent_id: str,
        input: Dict[str, Any],
        wallet: TettoWallet,
        preferred_token: Optional[str] = None,
        calling_agent_id: Optional[str] = None,
        mode: CallMode = CallMode.PLATFORM,
    ) -> CallResult:
        """
        Call an agent and pay for it from the given wallet.

        Args:
            agent_id: Agent id
            input: Input matching the agent's input schema
            wallet: Wallet with public_key and sign_transaction
            preferred_token: "SOL" or "USDC"; the agent's token when None
            calling_agent_id: Identity to report for this call only
            mode: CallMode.PLATFORM (default) or CallMode.LEGACY

        Returns:
            CallResult with the agent output and payment proof

        Raises:
            InvalidWalletError: If the wallet cannot sign
            AgentNotFoundError: If the agent does not exist
            TransactionBuildError: If the platform rejects the input, or a
                legacy call asks for a token the agent is not priced in
                (nothing has been signed or paid at that point)
            SigningRejectedError: If the wallet declines to sign
            CallFailedError: If settlement or the agent itself fails
        """
        # 1. Validate wallet
        if getattr(wallet, "public_key", None) is None:
            raise InvalidWalletError("Wallet public key is required")
        if not callable(getattr(wallet, "sign_transaction", None)):
            raise InvalidWalletError("Wallet must provide a sign_transaction method")

        try:
            return self._call_agent(agent_id, input, wallet, preferred_token, calling_agent_id, mode)
        except TettoError as e:
            notify_error(self._plugins, e, ErrorContext("call_agent", agent_id=agent_id, input=input))
            raise

    def _call_agent(
        self,
        agent_id: str,
        input: Dict[str, Any],
        wallet: TettoWallet,
        preferred_token: Optional[str],
        calling_agent_id: Optional[str],
        mode: CallMode,
    ) -> CallResult:
        payer = wallet.public_key
        caller_id = resolve_calling_agent_id(calling_agent_id, self.calling_agent_id)
        self._log(f"Calling agent {agent_id} (payer {payer}, calling agent {caller_id})")

        # 2. Fetch agent
        agent = self.get_agent(agent_id)
        self._log(f"Agent: {agent.name}, price {agent.price_display} {agent.token}")

        # 3. Fee split (platform mode only logs it)
        try:
            split = agent.fee_split()
        except ValueError as e:
            if mode == CallMode.LEGACY:
                raise TettoError(
                    f"Cannot split payment for agent {agent.id}: {e}",
                    code="INVALID_FEE",
                    details={"agent_id": agent.id, "fee_bps": agent.fee_bps},
                ) from e
            self.logger.warning(f"Skipping local fee split for agent {agent.id}: {e}")
            split = None
        if split is not None:
            self._log(
                f"Fee split: agent {split.agent_amount}, protocol {split.protocol_fee} "
                f"({split.fee_bps} bps of {split.price_base})"
            )

        if mode == CallMode.LEGACY:
            return self._call_agent_legacy(agent, input, wallet, split, preferred_token, caller_id)
        return self._call_agent_platform(agent, input, wallet, preferred_token, caller_id)

    def _sign(self, wallet: TettoWallet, transaction: Transaction) -> Transaction:
        try:
            signed = wallet.sign_transaction(transaction)
        except Exception as e:
            self.logger.error(f"Transaction signing failed: {e}")
            raise SigningRejectedError(f"Transaction signing failed: {e}") from e
        self._log("Transaction signed")
        return signed

    def _call_agent_platform(
        self,
        agent: Agent,
        input: Dict[str, Any],
        wallet: TettoWallet,
        preferred_token: Optional[str],
        caller_id: Optional[str],
    ) -> CallResult:
        # 4. Platform validates input, then builds the unsigned transaction
        self._log(f"Requesting transaction from platform (input {sanitize_input(input)})")
        data = self._request("POST", f"/api/agents/{agent.id}/build-transaction", {
            "payer_wallet": str(wallet.public_key),
            "selected_token": preferred_token,
            "input": input,
            "calling_agent_id": caller_id,
        })
        built = self._parse(BuildTransactionResponse, data, "Transaction data")
        if isinstance(built, ApiFailure):
            self.logger.error(f"Transaction building failed: {built.error}")
            raise TransactionBuildError(built.error or "Transaction building failed", agent_id=agent.id)

        self._log(
            f"Transaction built: intent {built.payment_intent_id}, "
            f"{built.amount_base} base units of {built.token}"
        )

        # 5. Sign
        transaction = Transaction.from_bytes(base64.b64decode(built.transaction))
        signed = self._sign(wallet, transaction)

        # 6. Hand off to the platform, which submits, confirms and runs the agent
        data = self._request("POST", "/api/agents/call", {
            "payment_intent_id": built.payment_intent_id,
            "signed_transaction": base64.b64encode(bytes(signed)).decode("ascii"),
        })
        return self._finish(data, agent.id, built.payment_intent_id)

    def _call_agent_legacy(
        self,
        agent: Agent,
        input: Dict[str, Any],
        wallet: TettoWallet,
        split: FeeSplit,
        preferred_token: Optional[str],
        caller_id: Optional[str],
    ) -> CallResult:
        # 4. Build locally, always in the agent's own token
        if preferred_token and preferred_token != agent.token:
            raise TransactionBuildError(
                f"Legacy calls pay in the agent's token ({agent.token}); "
                f"preferred_token {preferred_token} needs CallMode.PLATFORM",
                agent_id=agent.id,
            )
        token_mint = SOL if agent.token == SOL else agent.token_mint
        payment = build_agent_payment_transaction(self.rpc_client, BuildPaymentTransactionParams(
            payer=wallet.public_key,
            agent_wallet=Pubkey.from_string(agent.owner_wallet),
            protocol_wallet=Pubkey.from_string(self.config.protocol_wallet),
            amount_base=split.price_base,
            protocol_fee_base=split.protocol_fee,
            token_mint=token_mint,
            token_decimals=agent.token_decimals,
            debug=self.config.debug,
        ))

        # 5. Sign
        signed = self._sign(wallet, payment.transaction)

        # 6. Submit, preferring the wallet's own submission when it has one
        send = getattr(wallet, "send_transaction", None)
        if callable(send):
            tx_signature = str(send(signed))
        else:
            tx_signature = str(self.rpc_client.send_raw_transaction(bytes(signed)).value)
        self._log(f"Transaction submitted: {tx_signature}")

        data = self._request("POST", "/api/agents/call", {
            "agent_id": agent.id,
            "input": input,
            "caller_wallet": str(wallet.public_key),
            "tx_signature": tx_signature,
            "selected_token": agent.token,
            "calling_agent_id": caller_id,
        })
        return self._finish(data, agent.id)

    def _finish(self, data: Any, agent_id: str, payment_intent_id: Optional[str] = None) -> CallResult:
        # 7. Shape the result
        result = self._parse(CallResponse, data, "Call result")
        if isinstance(result, ApiFailure):
            self.logger.error(f"Agent call failed: {result.error}")
            raise CallFailedError(
                result.error or "Agent call failed",
                agent_id=agent_id,
                payment_intent_id=payment_intent_id,
            )
        self._log(f"Agent call successful: receipt {result.receipt_id}")
        return result.to_result()

    # ------------------------------------------------------------------
    # Plugins
    # ------------------------------------------------------------------

    def use(self, plugin: Callable[..., Any], **options: Any) -> "TettoSDK":
        """
        Register a plugin.

        The plugin is called with a restricted PluginAPI and the options, and
        the object it returns is attached to the SDK under its ``name``.

        Returns:
            self, so registrations can be chained

        Raises:
            PluginError: On a duplicate id or a name collision
        """
        register_plugin(self, plugin, options)
        return self

    def has_plugin(self, plugin_id: str) -> bool:
        return plugin_id in self._plugins

    def get_plugin(self, plugin_id: str) -> Optional[Any]:
        return self._plugins.get(plugin_id)

    def list_plugins(self) -> List[str]:
        return list(self._plugins)

    def destroy(self) -> None:
        """Run plugin on_destroy hooks and close the HTTP session."""
        destroy_plugins(self._plugins)
        self._plugins.clear()
        self.session.close()
