"""
Data models for the Tetto SDK.

Each marketplace endpoint answers either with a success body (``ok: true``)
or with ``ApiFailure`` (``ok: false``). The ``*Response`` unions below are
validated with a TypeAdapter so callers branch on the model type.
"""
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .fees import DEFAULT_FEE_BPS, FeeSplit, compute_fee_split


class ExampleInput(BaseModel):
    label: str
    input: Dict[str, Any]
    description: Optional[str] = None


class OwnerInfo(BaseModel):
    """Studio that owns an agent, used for marketplace attribution."""
    display_name: str
    avatar_url: Optional[str] = None
    verified: bool = False
    studio_slug: Optional[str] = None
    bio: Optional[str] = None


class Agent(BaseModel):
    """Marketplace agent record. Read-only to the SDK."""
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    description: Optional[str] = None
    endpoint_url: str
    price_display: float = 0
    price_base: int
    token: str
    token_mint: str
    token_decimals: int
    input_schema: Dict[str, Any] = Field(default_factory=dict)
    output_schema: Dict[str, Any] = Field(default_factory=dict)
    owner_wallet: str
    owner: Optional[OwnerInfo] = None
    fee_bps: Optional[int] = None
    status: Optional[str] = None
    created_at: Optional[str] = None
    example_inputs: Optional[List[ExampleInput]] = None
    is_beta: bool = False

    def fee_split(self) -> FeeSplit:
        """Fee split for one call, defaulting fee_bps to 10%."""
        return compute_fee_split(
            self.price_base,
            DEFAULT_FEE_BPS if self.fee_bps is None else self.fee_bps,
        )


class AgentMetadata(BaseModel):
    """Registration request for a new agent."""
    name: str
    endpoint: str
    input_schema: Dict[str, Any]
    output_schema: Dict[str, Any]
    price_usdc: float
    owner_wallet: str
    description: Optional[str] = None
    token_mint: Optional[Literal["SOL", "USDC"]] = None
    example_inputs: Optional[List[ExampleInput]] = None
    is_beta: bool = False

    def to_registration_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "endpoint_url": self.endpoint,
            "input_schema": self.input_schema,
            "output_schema": self.output_schema,
            "price_usdc": self.price_usdc,
            "owner_wallet_pubkey": self.owner_wallet,
            "token_mint": self.token_mint,
            "example_inputs": (
                [example.model_dump(exclude_none=True) for example in self.example_inputs]
                if self.example_inputs is not None else None
            ),
            "is_beta": self.is_beta,
        }


class ReceiptAgent(BaseModel):
    id: str
    name: str
    description: Optional[str] = None


class Receipt(BaseModel):
    """Immutable record of a paid call."""
    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    agent: ReceiptAgent
    caller_wallet: str
    payout_wallet: str
    token: str
    amount_display: float
    protocol_fee_display: float
    input_hash: str
    output_hash: str
    output_data: Dict[str, Any] = Field(default_factory=dict)
    tx_signature: str
    explorer_url: str
    verified_at: Optional[str] = None
    created_at: Optional[str] = None


class CallResult(BaseModel):
    """
    Outcome of a settled agent call.

    ``agent_received`` and ``protocol_fee`` are the split the platform
    realized, in base units.
    """
    ok: bool
    message: str = ""
    output: Dict[str, Any] = Field(default_factory=dict)
    tx_signature: str = ""
    receipt_id: str = ""
    explorer_url: str = ""
    agent_received: int = 0
    protocol_fee: int = 0


# ---------------------------------------------------------------------------
# Endpoint bodies
# ---------------------------------------------------------------------------

class ApiFailure(BaseModel):
    model_config = ConfigDict(extra="allow")

    ok: Literal[False]
    error: Optional[str] = None
    code: Optional[str] = None
    message: Optional[str] = None


class AgentEnvelope(BaseModel):
    ok: Literal[True]
    agent: Agent


class AgentListEnvelope(BaseModel):
    ok: Literal[True]
    agents: List[Agent]
    count: Optional[int] = None


class ReceiptEnvelope(BaseModel):
    ok: Literal[True]
    receipt: Receipt


class BuildTransactionResult(BaseModel):
    """Unsigned transaction built by the platform after input validation."""
    ok: Literal[True]
    transaction: str
    payment_intent_id: str
    amount_base: int
    token: str
    expires_at: Optional[str] = None
    input_hash: Optional[str] = None
    message: Optional[str] = None


class CallEnvelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    ok: Literal[True]
    message: Optional[str] = None
    output: Optional[Dict[str, Any]] = None
    tx_signature: Optional[str] = None
    receipt_id: Optional[str] = None
    explorer_url: Optional[str] = None
    agent_received: Optional[int] = None
    protocol_fee: Optional[int] = None

    def to_result(self) -> CallResult:
        return CallResult(
            ok=True,
            message=self.message or "",
            output=self.output or {},
            tx_signature=self.tx_signature or "",
            receipt_id=self.receipt_id or "",
            explorer_url=self.explorer_url or "",
            agent_received=self.agent_received or 0,
            protocol_fee=self.protocol_fee or 0,
        )


AgentResponse = TypeAdapter(Union[AgentEnvelope, ApiFailure])
AgentListResponse = TypeAdapter(Union[AgentListEnvelope, ApiFailure])
RegisterResponse = TypeAdapter(Union[AgentEnvelope, ApiFailure])
ReceiptResponse = TypeAdapter(Union[ReceiptEnvelope, ApiFailure])
BuildTransactionResponse = TypeAdapter(Union[BuildTransactionResult, ApiFailure])
CallResponse = TypeAdapter(Union[CallEnvelope, ApiFailure])
