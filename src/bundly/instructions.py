"""Instruction builders for the Bundly program.

Anchor wire format: 8-byte discriminator sha256("global:<ix_name>")[:8],
then Borsh-encoded args. Account metas follow the program's account order.
Builders are pure: they derive PDAs and encode data, nothing touches RPC.
"""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass, field

from solders.instruction import AccountMeta, Instruction  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from src.bundly.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    BUNDLY_PROGRAM_ID,
    COMPUTE_BUDGET_PROGRAM_ID,
    DEFAULT_UNSTAKE_COOLDOWN_SEC,
    GLOBAL_FEE_WALLET,
    METADATA_PROGRAM_ID,
    PUMP_AMM_EVENT_AUTHORITY,
    PUMP_AMM_PROGRAM_ID,
    PUMPFUN_EVENT_AUTHORITY,
    PUMPFUN_FEE_PROGRAM,
    PUMPFUN_FEE_RECIPIENT,
    PUMPFUN_GLOBAL,
    PUMPFUN_GLOBAL_VOLUME,
    PUMPFUN_MINT_AUTHORITY,
    PUMPFUN_PROGRAM_ID,
    RENT_SYSVAR_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_DECIMALS,
    TOKEN_PROGRAM_ID,
    WSOL_MINT,
)
from src.bundly.pda import (
    derive_amm_creator_vault_authority,
    derive_associated_bonding_curve,
    derive_bonding_curve_pda,
    derive_bundle_pda,
    derive_creator_vault_pda,
    derive_escrow_pda,
    derive_fee_config_pda,
    derive_fee_sol_vault_pda,
    derive_fee_vault_pda,
    derive_global_fee_token_account,
    derive_metadata_pda,
    derive_mint_pda,
    derive_order_pda,
    derive_order_vault_pda,
    derive_staking_vault_pda,
    derive_unstake_request_pda,
    derive_unstake_vault_pda,
    derive_user_stake_pda,
    derive_user_volume_accumulator_pda,
    get_associated_token_address,
)

U8_MAX = 2**8 - 1
U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


@dataclass
class BuiltInstruction:
    """An instruction plus the derived addresses the caller may need afterwards."""

    instruction: Instruction
    addresses: dict[str, Pubkey] = field(default_factory=dict)


# ─── Borsh encoding ───────────────────────────────────────────────────


def anchor_discriminator(ix_name: str) -> bytes:
    """8-byte Anchor sighash for a snake_case instruction name."""
    return hashlib.sha256(f"global:{ix_name}".encode()).digest()[:8]


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if not low <= value <= high:
        raise ValueError(f"{name}={value} out of range [{low}, {high}]")


def encode_u8(value: int, name: str = "value") -> bytes:
    _check_range(name, value, 0, U8_MAX)
    return struct.pack("<B", value)


def encode_u64(value: int, name: str = "value") -> bytes:
    _check_range(name, value, 0, U64_MAX)
    return struct.pack("<Q", value)


def encode_i64(value: int, name: str = "value") -> bytes:
    _check_range(name, value, I64_MIN, I64_MAX)
    return struct.pack("<q", value)


def encode_bool(value: bool) -> bytes:
    return b"\x01" if value else b"\x00"


def encode_string(value: str) -> bytes:
    """Borsh string: u32 LE byte length + UTF-8 bytes."""
    raw = value.encode("utf-8")
    if len(raw) > U32_MAX:
        raise ValueError("String too long for Borsh encoding")
    return struct.pack("<I", len(raw)) + raw


def _meta(pubkey: Pubkey, *, signer: bool = False, writable: bool = False) -> AccountMeta:
    return AccountMeta(pubkey=pubkey, is_signer=signer, is_writable=writable)


def _program(pubkey: Pubkey) -> AccountMeta:
    return AccountMeta(pubkey=pubkey, is_signer=False, is_writable=False)


# ─── Generic Solana helpers ───────────────────────────────────────────


def create_associated_token_account(payer: Pubkey, owner: Pubkey, mint: Pubkey) -> Instruction:
    """Create ATA instruction. Caller checks the account does not exist yet."""
    ata = get_associated_token_address(owner, mint)
    return Instruction(
        program_id=ASSOCIATED_TOKEN_PROGRAM_ID,
        accounts=[
            _meta(payer, signer=True, writable=True),
            _meta(ata, writable=True),
            _meta(owner),
            _meta(mint),
            _program(SYSTEM_PROGRAM_ID),
            _program(TOKEN_PROGRAM_ID),
        ],
        data=b"",
    )


def set_compute_unit_limit(units: int) -> Instruction:
    # ComputeBudget ix 2: u32 units
    _check_range("units", units, 0, U32_MAX)
    return Instruction(
        program_id=COMPUTE_BUDGET_PROGRAM_ID,
        accounts=[],
        data=b"\x02" + struct.pack("<I", units),
    )


def set_compute_unit_price(micro_lamports: int) -> Instruction:
    # ComputeBudget ix 3: u64 micro-lamports per CU
    return Instruction(
        program_id=COMPUTE_BUDGET_PROGRAM_ID,
        accounts=[],
        data=b"\x03" + encode_u64(micro_lamports, "micro_lamports"),
    )


# ─── Bundle lifecycle ─────────────────────────────────────────────────


def build_init_bundle(
    *,
    creator: Pubkey,
    nonce: int,
    cap_lamports: int,
    total_supply: int,
    decimals: int = TOKEN_DECIMALS,
    unstake_cooldown: int = DEFAULT_UNSTAKE_COOLDOWN_SEC,
    program_id: Pubkey = BUNDLY_PROGRAM_ID,
) -> BuiltInstruction:
    """init_bundle: creates the bundle mint (PDA of creator+nonce), bundle and escrow."""
    mint, _ = derive_mint_pda(creator, nonce)
    bundle, _ = derive_bundle_pda(mint)
    escrow, _ = derive_escrow_pda(mint)

    data = (
        anchor_discriminator("init_bundle")
        + encode_u64(nonce, "nonce")
        + encode_u8(decimals, "decimals")
        + encode_u64(cap_lamports, "cap_lamports")
        + encode_u64(total_supply, "total_supply")
        + encode_i64(unstake_cooldown, "unstake_cooldown")
    )
    accounts = [
        _meta(creator, signer=True, writable=True),
        _meta(mint, writable=True),
        _meta(bundle, writable=True),
        _meta(escrow, writable=True),
        _program(SYSTEM_PROGRAM_ID),
        _program(TOKEN_PROGRAM_ID),
        _program(RENT_SYSVAR_ID),
    ]
    return BuiltInstruction(
        Instruction(program_id=program_id, accounts=accounts, data=data),
        {"mint": mint, "bundle": bundle, "escrow": escrow},
    )


def build_swap(
    *,
    mint: Pubkey,
    user: Pubkey,
    amount_lamports: int,
    min_tokens_out: int = 0,
    program_id: Pubkey = BUNDLY_PROGRAM_ID,
) -> BuiltInstruction:
    """swap: presale buy of bundle tokens with SOL (1% tax to the global fee wallet)."""
    bundle, _ = derive_bundle_pda(mint)
    escrow, _ = derive_escrow_pda(mint)
    user_stake, _ = derive_user_stake_pda(bundle, user)
    user_tokens = get_associated_token_address(user, mint)

    data = (
        anchor_discriminator("swap")
        + encode_u64(amount_lamports, "amount_lamports")
        + encode_u64(min_tokens_out, "min_tokens_out")
    )
    accounts = [
        _meta(user, signer=True, writable=True),
        _meta(bundle, writable=True),
        _meta(escrow, writable=True),
        _meta(mint, writable=True),
        _meta(user_tokens, writable=True),
        _program(TOKEN_PROGRAM_ID),
        _program(SYSTEM_PROGRAM_ID),
        _meta(GLOBAL_FEE_WALLET, writable=True),
        _meta(user_stake, writable=True),
    ]
    return BuiltInstruction(Instruction(program_id=program_id, accounts=accounts, data=data))


def build_presale_exit(
    *,
    mint: Pubkey,
    user: Pubkey,
    amount_btoken: int,
    program_id: Pubkey = BUNDLY_PROGRAM_ID,
) -> BuiltInstruction:
    """presale_exit: burn bundle tokens for SOL back before finalization."""
    bundle, _ = derive_bundle_pda(mint)
    escrow, _ = derive_escrow_pda(mint)
    user_stake, _ = derive_user_stake_pda(bundle, user)
    user_btoken = get_associated_token_address(user, mint)

    data = anchor_discriminator("presale_exit") + encode_u64(amount_btoken, "amount_btoken")
    accounts = [
        _meta(user, signer=True, writable=True),
        _meta(bundle, writable=True),
        _meta(mint, writable=True),
        _meta(user_btoken, writable=True),
        _meta(escrow, writable=True),
        _meta(user_stake, writable=True),
        _meta(GLOBAL_FEE_WALLET, writable=True),
        _program(SYSTEM_PROGRAM_ID),
        _program(TOKEN_PROGRAM_ID),
        _program(ASSOCIATED_TOKEN_PROGRAM_ID),
    ]
    return BuiltInstruction(Instruction(program_id=program_id, accounts=accounts, data=data))


def build_finalize_pumpfun(
    *,
    mint: Pubkey,
    payer: Pubkey,
    pumpfun_mint: Pubkey,
    token_name: str,
    token_symbol: str,
    token_uri: str,
    min_tokens_out: int,
    program_id: Pubkey = BUNDLY_PROGRAM_ID,
) -> BuiltInstruction:
    """finalize_pumpfun: spend the escrow launching the token on pump.fun.

    ``min_tokens_out`` is the slippage floor from graduation.estimate();
    0 disables the protection. The pump.fun mint must co-sign the transaction.
    """
    bundle, _ = derive_bundle_pda(mint)
    escrow, _ = derive_escrow_pda(mint)
    staking_vault, _ = derive_staking_vault_pda(bundle)
    fee_vault, _ = derive_fee_vault_pda(bundle)

    bonding_curve, _ = derive_bonding_curve_pda(pumpfun_mint)
    associated_bonding_curve = derive_associated_bonding_curve(bonding_curve, pumpfun_mint)
    metadata, _ = derive_metadata_pda(pumpfun_mint)
    # The bundle PDA is the pump.fun creator, not the payer
    creator_vault, _ = derive_creator_vault_pda(bundle)
    user_volume, _ = derive_user_volume_accumulator_pda(payer)
    fee_config, _ = derive_fee_config_pda()

    data = (
        anchor_discriminator("finalize_pumpfun")
        + encode_string(token_name)
        + encode_string(token_symbol)
        + encode_string(token_uri)
        + encode_u64(min_tokens_out, "min_tokens_out")
    )
    accounts = [
        _meta(payer, signer=True, writable=True),
        _meta(bundle, writable=True),
        _meta(mint, writable=True),
        _meta(escrow, writable=True),
        _meta(pumpfun_mint, signer=True, writable=True),
        _meta(bonding_curve, writable=True),
        _meta(associated_bonding_curve, writable=True),
        _meta(metadata, writable=True),
        _meta(staking_vault, writable=True),
        _meta(fee_vault, writable=True),
        _meta(PUMPFUN_GLOBAL),
        _meta(PUMPFUN_MINT_AUTHORITY),
        _meta(PUMPFUN_FEE_RECIPIENT, writable=True),
        _meta(PUMPFUN_GLOBAL_VOLUME, writable=True),
        _program(PUMPFUN_FEE_PROGRAM),
        _meta(creator_vault, writable=True),
        _meta(user_volume, writable=True),
        _meta(fee_config),
        _meta(PUMPFUN_EVENT_AUTHORITY),
        _program(METADATA_PROGRAM_ID),
        _program(SYSTEM_PROGRAM_ID),
        _program(TOKEN_PROGRAM_ID),
        _program(ASSOCIATED_TOKEN_PROGRAM_ID),
        _program(RENT_SYSVAR_ID),
        _program(PUMPFUN_PROGRAM_ID),
    ]
    return BuiltInstruction(
        Instruction(program_id=program_id, accounts=accounts, data=data),
        {"bundle": bundle, "escrow": escrow, "bonding_curve": bonding_curve},
    )


# ─── Staking ──────────────────────────────────────────────────────────


def build_deposit_stake(
    *,
    mint: Pubkey,
    user: Pubkey,
    amount: int,
    real_mint: Pubkey | None = None,
    program_id: Pubkey = BUNDLY_PROGRAM_ID,
) -> BuiltInstruction:
    bundle, _ = derive_bundle_pda(mint)
    user_stake, _ = derive_user_stake_pda(bundle, user)
    staking_vault, _ = derive_staking_vault_pda(bundle)
    fee_vault, _ = derive_fee_vault_pda(bundle)
    real_mint = real_mint or mint

    data = anchor_discriminator("deposit_stake") + encode_u64(amount, "amount")
    accounts = [
        _meta(user, signer=True, writable=True),
        _meta(bundle, writable=True),
        _meta(mint),
        _meta(real_mint),
        _meta(get_associated_token_address(user, real_mint), writable=True),
        _meta(get_associated_token_address(user, mint), writable=True),
        _meta(staking_vault, writable=True),
        _meta(fee_vault, writable=True),
        _meta(user_stake, writable=True),
        _program(TOKEN_PROGRAM_ID),
        _program(SYSTEM_PROGRAM_ID),
    ]
    return BuiltInstruction(Instruction(program_id=program_id, accounts=accounts, data=data))


def build_prepare_unstake(
    *,
    mint: Pubkey,
    user: Pubkey,
    program_id: Pubkey = BUNDLY_PROGRAM_ID,
) -> BuiltInstruction:
    """prepare_unstake: opens an unstake request and starts the cooldown."""
    bundle, _ = derive_bundle_pda(mint)
    user_stake, _ = derive_user_stake_pda(bundle, user)
    unstake_request, _ = derive_unstake_request_pda(bundle, user)

    accounts = [
        _meta(user, signer=True, writable=True),
        _meta(bundle, writable=True),
        _meta(mint),
        _meta(unstake_request, writable=True),
        _meta(user_stake, writable=True),
        _program(SYSTEM_PROGRAM_ID),
    ]
    return BuiltInstruction(
        Instruction(
            program_id=program_id,
            accounts=accounts,
            data=anchor_discriminator("prepare_unstake"),
        )
    )


def build_execute_unstake(
    *,
    mint: Pubkey,
    user: Pubkey,
    amount_btoken: int,
    real_mint: Pubkey | None = None,
    program_id: Pubkey = BUNDLY_PROGRAM_ID,
) -> BuiltInstruction:
    """execute_unstake: after cooldown, moves stake into the user's unstake vault."""
    bundle, _ = derive_bundle_pda(mint)
    user_stake, _ = derive_user_stake_pda(bundle, user)
    unstake_request, _ = derive_unstake_request_pda(bundle, user)
    unstake_vault, _ = derive_unstake_vault_pda(mint, user)
    staking_vault, _ = derive_staking_vault_pda(bundle)
    fee_vault, _ = derive_fee_vault_pda(bundle)
    real_mint = real_mint or mint
    global_fee_token_account, _ = derive_global_fee_token_account(real_mint)

    data = anchor_discriminator("execute_unstake") + encode_u64(amount_btoken, "amount_btoken")
    accounts = [
        _meta(user, signer=True, writable=True),
        _meta(bundle, writable=True),
        _meta(mint),
        _meta(real_mint),
        _meta(get_associated_token_address(user, mint), writable=True),
        _meta(staking_vault, writable=True),
        _meta(fee_vault, writable=True),
        _meta(unstake_request, writable=True),
        _meta(unstake_vault, writable=True),
        _meta(user_stake, writable=True),
        _program(TOKEN_PROGRAM_ID),
        _meta(global_fee_token_account, writable=True),
        _meta(GLOBAL_FEE_WALLET),
    ]
    return BuiltInstruction(Instruction(program_id=program_id, accounts=accounts, data=data))


def build_withdraw_unstaked(
    *,
    mint: Pubkey,
    user: Pubkey,
    destination: Pubkey | None = None,
    real_mint: Pubkey | None = None,
    program_id: Pubkey = BUNDLY_PROGRAM_ID,
) -> BuiltInstruction:
    """withdraw_unstaked: empties the unstake vault into ``destination`` (default: user's ATA)."""
    bundle, _ = derive_bundle_pda(mint)
    user_stake, _ = derive_user_stake_pda(bundle, user)
    unstake_request, _ = derive_unstake_request_pda(bundle, user)
    unstake_vault, _ = derive_unstake_vault_pda(mint, user)
    real_mint = real_mint or mint
    destination = destination or get_associated_token_address(user, real_mint)

    accounts = [
        _meta(user, signer=True, writable=True),
        _meta(bundle),
        _meta(mint),
        _meta(real_mint),
        _meta(unstake_request, writable=True),
        _meta(unstake_vault, writable=True),
        _meta(destination, writable=True),
        _meta(user_stake, writable=True),
        _program(TOKEN_PROGRAM_ID),
        _program(SYSTEM_PROGRAM_ID),
    ]
    return BuiltInstruction(
        Instruction(
            program_id=program_id,
            accounts=accounts,
            data=anchor_discriminator("withdraw_unstaked"),
        )
    )


def build_claim_rewards(
    *,
    mint: Pubkey,
    user: Pubkey,
    real_mint: Pubkey | None = None,
    force_mint_writable: bool = False,
    program_id: Pubkey = BUNDLY_PROGRAM_ID,
) -> BuiltInstruction:
    """claim_rewards: pays accumulated staking rewards in ``real_mint``.

    ``force_mint_writable`` works around CPI permission errors where the
    program needs the bundle mint writable.
    """
    bundle, _ = derive_bundle_pda(mint)
    user_stake, _ = derive_user_stake_pda(bundle, user)
    staking_vault, _ = derive_staking_vault_pda(bundle)
    fee_vault, _ = derive_fee_vault_pda(bundle)
    real_mint = real_mint or mint
    global_fee_token_account, _ = derive_global_fee_token_account(real_mint)

    accounts = [
        _meta(user, signer=True, writable=True),
        _meta(bundle, writable=True),
        _meta(mint, writable=force_mint_writable),
        _meta(real_mint),
        _meta(get_associated_token_address(user, mint), writable=True),
        _meta(get_associated_token_address(user, real_mint), writable=True),
        _meta(staking_vault, writable=True),
        _meta(fee_vault, writable=True),
        _meta(user_stake, writable=True),
        _program(TOKEN_PROGRAM_ID),
        _program(ASSOCIATED_TOKEN_PROGRAM_ID),
        _program(SYSTEM_PROGRAM_ID),
        _meta(global_fee_token_account, writable=True),
        _meta(GLOBAL_FEE_WALLET),
    ]
    return BuiltInstruction(
        Instruction(
            program_id=program_id,
            accounts=accounts,
            data=anchor_discriminator("claim_rewards"),
        )
    )


def build_claim_rewards_raw(
    *,
    mint: Pubkey,
    user: Pubkey,
    real_mint: Pubkey | None = None,
    program_id: Pubkey = BUNDLY_PROGRAM_ID,
) -> BuiltInstruction:
    """claim_rewards with the bundle mint forced writable."""
    return build_claim_rewards(
        mint=mint,
        user=user,
        real_mint=real_mint,
        force_mint_writable=True,
        program_id=program_id,
    )


# ─── OTC orders ───────────────────────────────────────────────────────


def build_create_order(
    *,
    mint: Pubkey,
    maker: Pubkey,
    amount: int,
    price: int,
    is_buy_side: bool,
    id_seed: int,
    program_id: Pubkey = BUNDLY_PROGRAM_ID,
) -> BuiltInstruction:
    bundle, _ = derive_bundle_pda(mint)
    user_stake, _ = derive_user_stake_pda(bundle, maker)
    order, _ = derive_order_pda(mint, maker, id_seed)
    order_vault, _ = derive_order_vault_pda(order)

    data = (
        anchor_discriminator("create_order")
        + encode_u64(amount, "amount")
        + encode_u64(price, "price")
        + encode_bool(is_buy_side)
        + encode_u64(id_seed, "id_seed")
    )
    accounts = [
        _meta(maker, signer=True, writable=True),
        _meta(order, writable=True),
        _meta(order_vault, writable=True),
        _meta(get_associated_token_address(maker, mint), writable=True),
        _meta(mint),
        _meta(bundle),
        _meta(user_stake, writable=True),
        _program(SYSTEM_PROGRAM_ID),
        _program(TOKEN_PROGRAM_ID),
    ]
    return BuiltInstruction(
        Instruction(program_id=program_id, accounts=accounts, data=data),
        {"order": order, "order_vault": order_vault},
    )


def build_fill_order(
    *,
    mint: Pubkey,
    taker: Pubkey,
    maker: Pubkey,
    order: Pubkey,
    program_id: Pubkey = BUNDLY_PROGRAM_ID,
) -> BuiltInstruction:
    bundle, _ = derive_bundle_pda(mint)
    taker_stake, _ = derive_user_stake_pda(bundle, taker)
    maker_stake, _ = derive_user_stake_pda(bundle, maker)
    order_vault, _ = derive_order_vault_pda(order)

    accounts = [
        _meta(taker, signer=True, writable=True),
        _meta(maker, writable=True),
        _meta(order, writable=True),
        _meta(order_vault, writable=True),
        _meta(mint),
        _meta(bundle),
        _meta(taker_stake, writable=True),
        _meta(maker_stake, writable=True),
        _meta(get_associated_token_address(taker, mint), writable=True),
        _meta(get_associated_token_address(maker, mint), writable=True),
        _program(TOKEN_PROGRAM_ID),
        _program(ASSOCIATED_TOKEN_PROGRAM_ID),
        _program(SYSTEM_PROGRAM_ID),
    ]
    return BuiltInstruction(
        Instruction(
            program_id=program_id,
            accounts=accounts,
            data=anchor_discriminator("fill_order"),
        )
    )


def build_cancel_order(
    *,
    mint: Pubkey,
    maker: Pubkey,
    order: Pubkey,
    program_id: Pubkey = BUNDLY_PROGRAM_ID,
) -> BuiltInstruction:
    order_vault, _ = derive_order_vault_pda(order)

    accounts = [
        _meta(maker, signer=True, writable=True),
        _meta(order, writable=True),
        _meta(order_vault, writable=True),
        _meta(mint),
        _meta(get_associated_token_address(maker, mint), writable=True),
        _program(TOKEN_PROGRAM_ID),
        _program(SYSTEM_PROGRAM_ID),
    ]
    return BuiltInstruction(
        Instruction(
            program_id=program_id,
            accounts=accounts,
            data=anchor_discriminator("cancel_order"),
        )
    )


# ─── Creator fee collection ───────────────────────────────────────────


def build_collect_pump_fees(
    *,
    mint: Pubkey,
    collector: Pubkey,
    program_id: Pubkey = BUNDLY_PROGRAM_ID,
) -> BuiltInstruction:
    """collect_pump_fees: pump.fun creator vault (SOL) → bundle fee_sol_vault.

    ``mint`` is the fundraiser mint, not the pump.fun token mint.
    """
    bundle, _ = derive_bundle_pda(mint)
    fee_sol_vault, _ = derive_fee_sol_vault_pda(bundle)
    creator_vault, _ = derive_creator_vault_pda(bundle)

    accounts = [
        _meta(collector, signer=True, writable=True),
        _meta(bundle, writable=True),
        _meta(mint),
        _meta(fee_sol_vault, writable=True),
        _meta(creator_vault, writable=True),
        _meta(PUMPFUN_EVENT_AUTHORITY),
        _program(PUMPFUN_PROGRAM_ID),
        _program(SYSTEM_PROGRAM_ID),
    ]
    return BuiltInstruction(
        Instruction(
            program_id=program_id,
            accounts=accounts,
            data=anchor_discriminator("collect_pump_fees"),
        )
    )


def build_collect_pump_amm_fees(
    *,
    mint: Pubkey,
    collector: Pubkey,
    program_id: Pubkey = BUNDLY_PROGRAM_ID,
) -> BuiltInstruction:
    """collect_pump_amm_fees: pump AMM creator vault (WSOL) → bundle's WSOL ATA."""
    bundle, _ = derive_bundle_pda(mint)
    vault_authority, _ = derive_amm_creator_vault_authority(bundle)
    vault_ata = get_associated_token_address(vault_authority, WSOL_MINT)
    bundle_wsol = get_associated_token_address(bundle, WSOL_MINT)

    accounts = [
        _meta(collector, signer=True, writable=True),
        _meta(bundle, writable=True),
        _meta(mint),
        _meta(WSOL_MINT),
        _meta(vault_authority),
        _meta(vault_ata, writable=True),
        _meta(bundle_wsol, writable=True),
        _meta(PUMP_AMM_EVENT_AUTHORITY),
        _program(PUMP_AMM_PROGRAM_ID),
        _program(TOKEN_PROGRAM_ID),
    ]
    return BuiltInstruction(
        Instruction(
            program_id=program_id,
            accounts=accounts,
            data=anchor_discriminator("collect_pump_amm_fees"),
        )
    )
