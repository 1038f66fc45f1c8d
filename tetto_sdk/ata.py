"""
Associated token account (ATA) resolution.

Transfers of an SPL token into a wallet that has never held it fail unless
the recipient's ATA is created first. These helpers compute the ATA address
and, when the account is not found on chain, produce an idempotent creation
instruction paid for by the payer.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from solana.rpc.api import Client
from solders.instruction import Instruction
from solders.pubkey import Pubkey
from spl.token.instructions import (
    create_idempotent_associated_token_account,
    get_associated_token_address,
)

logger = logging.getLogger(__name__)


@dataclass
class EnsureATAResult:
    """
    Attributes:
        ata: Associated token account address for (owner, mint)
        instruction: Creation instruction, or None if the account exists
        existed: Whether the account was found on chain
    """
    ata: Pubkey
    instruction: Optional[Instruction]
    existed: bool


@dataclass
class ATASummary:
    total: int = 0
    existed: int = 0
    created: int = 0


@dataclass
class MultipleATAResult:
    """
    Attributes:
        atas: ATA addresses in the same order as the owners given
        instructions: Creation instructions actually needed, in owner order
        summary: Counts used to report how many accounts a payment will create
    """
    atas: List[Pubkey] = field(default_factory=list)
    instructions: List[Instruction] = field(default_factory=list)
    summary: ATASummary = field(default_factory=ATASummary)


def ensure_ata_exists(
    connection: Client,
    mint: Pubkey,
    owner: Pubkey,
    payer: Pubkey,
) -> EnsureATAResult:
    """
    Resolve the ATA for an owner and return a creation instruction if needed.

    A failed lookup is treated like a missing account: the creation
    instruction is idempotent, so including it when the account does exist
    costs only a little compute.

    Args:
        connection: Solana RPC client
        mint: Token mint
        owner: Wallet that will own the token account
        payer: Wallet that pays rent if the account is created

    Returns:
        EnsureATAResult
    """
    ata = get_associated_token_address(owner, mint)

    try:
        account_info = connection.get_account_info(ata)
        if account_info.value is not None:
            return EnsureATAResult(ata=ata, instruction=None, existed=True)
    except Exception as e:
        logger.debug(f"ATA lookup failed for {ata}, assuming it does not exist: {e}")

    instruction = create_idempotent_associated_token_account(payer, owner, mint)
    return EnsureATAResult(ata=ata, instruction=instruction, existed=False)


def ensure_multiple_atas_exist(
    connection: Client,
    mint: Pubkey,
    owners: Sequence[Pubkey],
    payer: Pubkey,
) -> MultipleATAResult:
    """
    Resolve ATAs for several owners of the same mint, one after another.

    Returns:
        MultipleATAResult with positional ATAs and only the needed instructions
    """
    result = MultipleATAResult()
    result.summary.total = len(owners)

    for owner in owners:
        resolved = ensure_ata_exists(connection, mint, owner, payer)
        result.atas.append(resolved.ata)
        if resolved.instruction is not None:
            result.instructions.append(resolved.instruction)
            result.summary.created += 1
        else:
            result.summary.existed += 1

    return result
