"""Program Derived Address helpers for the Bundly program and its pump.fun CPIs.

Every derive_* returns (address, bump) like Pubkey.find_program_address.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from src.bundly.constants import (
    AMM_CREATOR_VAULT_SEED,
    ASSOCIATED_TOKEN_PROGRAM_ID,
    BONDING_CURVE_SEED,
    BUNDLE_SEED,
    BUNDLY_PROGRAM_ID,
    CREATOR_VAULT_SEED,
    ESCROW_SEED,
    FEE_CONFIG_SEED,
    FEE_SOL_VAULT_SEED,
    FEE_VAULT_SEED,
    GLOBAL_FEE_WALLET,
    METADATA_PROGRAM_ID,
    METADATA_SEED,
    MINT_SEED,
    ORDER_SEED,
    ORDER_VAULT_SEED,
    PUMP_AMM_PROGRAM_ID,
    PUMPFUN_FEE_PROGRAM,
    PUMPFUN_PROGRAM_ID,
    STAKING_VAULT_SEED,
    TOKEN_PROGRAM_ID,
    TOKEN_VAULT_SEED,
    UNSTAKE_REQUEST_SEED,
    UNSTAKE_VAULT_SEED,
    USER_STAKE_SEED,
    USER_VOLUME_SEED,
)

U64_MAX = 2**64 - 1


def u64_seed(value: int) -> bytes:
    """Encode a numeric seed as u64 little-endian (nonce, id_seed)."""
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"Seed value out of u64 range: {value}")
    return struct.pack("<Q", value)


def _find(seeds: list[bytes], program_id: Pubkey = BUNDLY_PROGRAM_ID) -> tuple[Pubkey, int]:
    return Pubkey.find_program_address(seeds, program_id)


# ─── Bundly accounts ──────────────────────────────────────────────────


def derive_bundle_pda(mint: Pubkey) -> tuple[Pubkey, int]:
    return _find([BUNDLE_SEED, bytes(mint)])


def derive_escrow_pda(mint: Pubkey) -> tuple[Pubkey, int]:
    """SOL escrow that accumulates presale funds until finalize."""
    return _find([ESCROW_SEED, bytes(mint)])


def derive_token_vault_pda(mint: Pubkey) -> tuple[Pubkey, int]:
    return _find([TOKEN_VAULT_SEED, bytes(mint)])


def derive_fee_vault_pda(bundle: Pubkey) -> tuple[Pubkey, int]:
    return _find([FEE_VAULT_SEED, bytes(bundle)])


def derive_fee_sol_vault_pda(bundle: Pubkey) -> tuple[Pubkey, int]:
    return _find([FEE_SOL_VAULT_SEED, bytes(bundle)])


def derive_staking_vault_pda(bundle: Pubkey) -> tuple[Pubkey, int]:
    return _find([STAKING_VAULT_SEED, bytes(bundle)])


def derive_unstake_vault_pda(mint: Pubkey, user: Pubkey) -> tuple[Pubkey, int]:
    return _find([UNSTAKE_VAULT_SEED, bytes(mint), bytes(user)])


def derive_unstake_request_pda(bundle: Pubkey, user: Pubkey) -> tuple[Pubkey, int]:
    return _find([UNSTAKE_REQUEST_SEED, bytes(bundle), bytes(user)])


def derive_user_stake_pda(bundle: Pubkey, user: Pubkey) -> tuple[Pubkey, int]:
    return _find([USER_STAKE_SEED, bytes(bundle), bytes(user)])


def derive_mint_pda(creator: Pubkey, nonce: int) -> tuple[Pubkey, int]:
    """Bundle token mint, unique per (creator, nonce)."""
    return _find([MINT_SEED, bytes(creator), u64_seed(nonce)])


def derive_order_pda(mint: Pubkey, maker: Pubkey, id_seed: int) -> tuple[Pubkey, int]:
    return _find([ORDER_SEED, bytes(mint), bytes(maker), u64_seed(id_seed)])


def derive_order_vault_pda(order: Pubkey) -> tuple[Pubkey, int]:
    return _find([ORDER_VAULT_SEED, bytes(order)])


# ─── SPL token accounts ───────────────────────────────────────────────


def get_associated_token_address(owner: Pubkey, mint: Pubkey) -> Pubkey:
    """Derive the Associated Token Account of ``owner`` for ``mint``.

    Works for PDA owners too (off-curve owners are allowed).
    """
    ata, _bump = Pubkey.find_program_address(
        [bytes(owner), bytes(TOKEN_PROGRAM_ID), bytes(mint)],
        ASSOCIATED_TOKEN_PROGRAM_ID,
    )
    return ata


def derive_global_fee_token_account(mint: Pubkey) -> tuple[Pubkey, int]:
    """Global fee wallet's ATA for ``mint``. Bump is reported as 0."""
    return get_associated_token_address(GLOBAL_FEE_WALLET, mint), 0


# ─── Pump.fun / Metaplex / Pump AMM ───────────────────────────────────


def derive_bonding_curve_pda(pumpfun_mint: Pubkey) -> tuple[Pubkey, int]:
    return _find([BONDING_CURVE_SEED, bytes(pumpfun_mint)], PUMPFUN_PROGRAM_ID)


def derive_associated_bonding_curve(bonding_curve: Pubkey, pumpfun_mint: Pubkey) -> Pubkey:
    return get_associated_token_address(bonding_curve, pumpfun_mint)


def derive_metadata_pda(mint: Pubkey) -> tuple[Pubkey, int]:
    return _find(
        [METADATA_SEED, bytes(METADATA_PROGRAM_ID), bytes(mint)],
        METADATA_PROGRAM_ID,
    )


def derive_creator_vault_pda(creator: Pubkey) -> tuple[Pubkey, int]:
    """Pump.fun creator vault. For Bundly launches the creator is the bundle PDA."""
    return _find([CREATOR_VAULT_SEED, bytes(creator)], PUMPFUN_PROGRAM_ID)


def derive_user_volume_accumulator_pda(user: Pubkey) -> tuple[Pubkey, int]:
    return _find([USER_VOLUME_SEED, bytes(user)], PUMPFUN_PROGRAM_ID)


def derive_fee_config_pda() -> tuple[Pubkey, int]:
    # Seeded with the pump program id but owned by the fee program
    return _find([FEE_CONFIG_SEED, bytes(PUMPFUN_PROGRAM_ID)], PUMPFUN_FEE_PROGRAM)


def derive_amm_creator_vault_authority(creator: Pubkey) -> tuple[Pubkey, int]:
    return _find([AMM_CREATOR_VAULT_SEED, bytes(creator)], PUMP_AMM_PROGRAM_ID)


# ─── Aggregate ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class BundleAddresses:
    bundle: Pubkey
    escrow: Pubkey
    token_vault: Pubkey
    fee_vault: Pubkey
    staking_vault: Pubkey


def derive_all_bundle_pdas(mint: Pubkey) -> BundleAddresses:
    """All per-bundle PDAs for ``mint`` in one call."""
    bundle, _ = derive_bundle_pda(mint)
    return BundleAddresses(
        bundle=bundle,
        escrow=derive_escrow_pda(mint)[0],
        token_vault=derive_token_vault_pda(mint)[0],
        fee_vault=derive_fee_vault_pda(bundle)[0],
        staking_vault=derive_staking_vault_pda(bundle)[0],
    )
