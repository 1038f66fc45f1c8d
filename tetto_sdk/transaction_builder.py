"""
Local construction of agent payment transactions.

This is the legacy client-builds path. In the current protocol the platform
builds the same transaction server-side and the SDK only signs it.
"""
import logging
import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Union

from solana.rpc.api import Client
from solana.rpc.commitment import Confirmed
from solders.instruction import Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.system_program import TransferParams as SystemTransferParams
from solders.system_program import transfer as system_transfer
from solders.transaction import Transaction
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import (
    TransferCheckedParams,
    get_associated_token_address,
    transfer_checked,
)

from .ata import ensure_multiple_atas_exist

logger = logging.getLogger(__name__)

SOL = "SOL"

Amount = Union[int, float, Decimal]


@dataclass
class BuildPaymentTransactionParams:
    """
    Attributes:
        payer: Wallet paying for the call (also the fee payer)
        agent_wallet: Agent owner's payout wallet
        protocol_wallet: Wallet receiving the protocol fee
        amount_base: Gross price in base units
        protocol_fee_base: Protocol fee in base units, already computed
        token_mint: "SOL" or the SPL mint address
        token_decimals: 9 for SOL, 6 for USDC
        debug: Log the split at INFO
    """
    payer: Pubkey
    agent_wallet: Pubkey
    protocol_wallet: Pubkey
    amount_base: Amount
    protocol_fee_base: Amount
    token_mint: str
    token_decimals: int
    debug: bool = False


@dataclass
class PaymentTransaction:
    """
    An unsigned payment transaction and the instructions it was compiled from.

    The transaction carries a recent blockhash, so it is single-use: once
    last_valid_block_height passes it must be rebuilt, not resubmitted.
    """
    transaction: Transaction
    instructions: List[Instruction] = field(default_factory=list)
    atas_created: int = 0
    last_valid_block_height: int = 0
    agent_amount: int = 0
    protocol_fee: int = 0


def split_amounts(amount_base: Amount, protocol_fee_base: Amount) -> tuple:
    """
    Floor each half of the payment on its own.

    Sub-unit remainders are dropped and go to neither party.

    Returns:
        (agent_amount, protocol_fee) as ints
    """
    return math.floor(amount_base - protocol_fee_base), math.floor(protocol_fee_base)


def build_agent_payment_transaction(
    connection: Client,
    params: BuildPaymentTransactionParams,
) -> PaymentTransaction:
    """
    Build an unsigned transaction paying an agent and the protocol.

    SOL payments are two system transfers. SPL payments prepend any missing
    ATA creations for the agent and protocol wallets, then add two
    transfer_checked instructions from the payer's ATA, which must already
    exist and hold the funds.

    Args:
        connection: Solana RPC client used for the blockhash and ATA lookups
        params: Payment parameters

    Returns:
        PaymentTransaction
    """
    log = logger.info if params.debug else logger.debug

    latest = connection.get_latest_blockhash(Confirmed).value
    agent_amount, protocol_fee = split_amounts(params.amount_base, params.protocol_fee_base)

    instructions: List[Instruction] = []
    atas_created = 0

    if params.token_mint == SOL:
        log("Building SOL payment transaction")
        instructions.append(system_transfer(SystemTransferParams(
            from_pubkey=params.payer,
            to_pubkey=params.agent_wallet,
            lamports=agent_amount,
        )))
        instructions.append(system_transfer(SystemTransferParams(
            from_pubkey=params.payer,
            to_pubkey=params.protocol_wallet,
            lamports=protocol_fee,
        )))
    else:
        log("Building SPL token payment transaction")
        mint = Pubkey.from_string(params.token_mint)
        payer_ata = get_associated_token_address(params.payer, mint)

        resolved = ensure_multiple_atas_exist(
            connection,
            mint,
            [params.agent_wallet, params.protocol_wallet],
            params.payer,
        )
        agent_ata, protocol_ata = resolved.atas
        atas_created = resolved.summary.created
        log(f"ATAs: {resolved.summary.existed} existing, {resolved.summary.created} to be created")

        # Accounts must exist before the transfers into them run
        instructions.extend(resolved.instructions)
        for destination, amount in ((agent_ata, agent_amount), (protocol_ata, protocol_fee)):
            instructions.append(transfer_checked(TransferCheckedParams(
                program_id=TOKEN_PROGRAM_ID,
                source=payer_ata,
                mint=mint,
                dest=destination,
                owner=params.payer,
                amount=amount,
                decimals=params.token_decimals,
                signers=[],
            )))

    log(f"Total: {params.amount_base} base units (agent {agent_amount}, protocol {protocol_fee})")

    message = Message.new_with_blockhash(instructions, params.payer, latest.blockhash)
    return PaymentTransaction(
        transaction=Transaction.new_unsigned(message),
        instructions=instructions,
        atas_created=atas_created,
        last_valid_block_height=latest.last_valid_block_height,
        agent_amount=agent_amount,
        protocol_fee=protocol_fee,
    )
