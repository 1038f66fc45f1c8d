"""
Tests for local payment transaction construction.
"""
import pytest
from solders.hash import Hash
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.system_program import decode_transfer
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID
from spl.token.instructions import decode_transfer_checked, get_associated_token_address

from tetto_sdk.fees import compute_fee_split
from tetto_sdk.token_mint import get_token_mint
from tetto_sdk.transaction_builder import (
    SOL,
    BuildPaymentTransactionParams,
    build_agent_payment_transaction,
    split_amounts,
)

from test_helpers import make_rpc_client
from test_helpers.sdk_creator import TEST_LAST_VALID_BLOCK_HEIGHT

USDC_MINT = get_token_mint("USDC", "mainnet")


def _params(payer, agent_wallet, protocol_wallet, token_mint=SOL, decimals=9, price=1_000_000, fee_bps=1000):
    split = compute_fee_split(price, fee_bps)
    return BuildPaymentTransactionParams(
        payer=payer,
        agent_wallet=agent_wallet,
        protocol_wallet=protocol_wallet,
        amount_base=split.price_base,
        protocol_fee_base=split.protocol_fee,
        token_mint=token_mint,
        token_decimals=decimals,
    )


def test_sol_payment(payer_keypair, agent_wallet, protocol_wallet):
    """1_000_000 lamports at 10% becomes two transfers of 900_000 and 100_000"""
    payer = payer_keypair.pubkey()
    payment = build_agent_payment_transaction(
        make_rpc_client(), _params(payer, agent_wallet, protocol_wallet)
    )

    assert len(payment.instructions) == 2
    assert all(ix.program_id == SYSTEM_PROGRAM_ID for ix in payment.instructions)

    to_agent, to_protocol = (decode_transfer(ix) for ix in payment.instructions)
    assert to_agent["from_pubkey"] == payer
    assert to_agent["to_pubkey"] == agent_wallet
    assert to_agent["lamports"] == 900_000
    assert to_protocol["to_pubkey"] == protocol_wallet
    assert to_protocol["lamports"] == 100_000
    assert to_agent["lamports"] + to_protocol["lamports"] == 1_000_000

    assert payment.agent_amount == 900_000
    assert payment.protocol_fee == 100_000
    assert payment.atas_created == 0


def test_usdc_payment_to_first_time_recipients(payer_keypair, agent_wallet, protocol_wallet):
    payer = payer_keypair.pubkey()
    mint = Pubkey.from_string(USDC_MINT)
    payer_ata = get_associated_token_address(payer, mint)
    rpc = make_rpc_client(existing=[payer_ata])

    payment = build_agent_payment_transaction(
        rpc, _params(payer, agent_wallet, protocol_wallet, token_mint=USDC_MINT, decimals=6)
    )

    program_ids = [ix.program_id for ix in payment.instructions]
    assert program_ids == [
        ASSOCIATED_TOKEN_PROGRAM_ID,
        ASSOCIATED_TOKEN_PROGRAM_ID,
        TOKEN_PROGRAM_ID,
        TOKEN_PROGRAM_ID,
    ]
    assert payment.atas_created == 2

    to_agent = decode_transfer_checked(payment.instructions[2])
    to_protocol = decode_transfer_checked(payment.instructions[3])
    assert to_agent.source == payer_ata
    assert to_agent.dest == get_associated_token_address(agent_wallet, mint)
    assert to_agent.amount == 900_000
    assert to_agent.decimals == 6
    assert to_agent.mint == mint
    assert to_protocol.dest == get_associated_token_address(protocol_wallet, mint)
    assert to_protocol.amount == 100_000


def test_usdc_payment_existing_recipients(payer_keypair, agent_wallet, protocol_wallet):
    payer = payer_keypair.pubkey()
    mint = Pubkey.from_string(USDC_MINT)
    existing = [get_associated_token_address(owner, mint) for owner in (payer, agent_wallet, protocol_wallet)]

    payment = build_agent_payment_transaction(
        make_rpc_client(existing=existing),
        _params(payer, agent_wallet, protocol_wallet, token_mint=USDC_MINT, decimals=6),
    )

    assert [ix.program_id for ix in payment.instructions] == [TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID]
    assert payment.atas_created == 0


def test_transaction_is_unsigned_with_payer_first(payer_keypair, agent_wallet, protocol_wallet):
    payer = payer_keypair.pubkey()
    rpc = make_rpc_client()
    payment = build_agent_payment_transaction(rpc, _params(payer, agent_wallet, protocol_wallet))

    message = payment.transaction.message
    assert message.account_keys[0] == payer
    assert message.recent_blockhash == Hash.default()
    assert payment.last_valid_block_height == TEST_LAST_VALID_BLOCK_HEIGHT
    assert not payment.transaction.is_signed()
    rpc.get_latest_blockhash.assert_called_once()


@pytest.mark.parametrize("amount, fee, expected", [
    (1_000_000, 100_000, (900_000, 100_000)),
    (1000.9, 100.5, (900, 100)),
    (10, 0, (10, 0)),
])
def test_split_amounts_floors_each_half(amount, fee, expected):
    assert split_amounts(amount, fee) == expected
