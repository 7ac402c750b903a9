"""Tests for PDA derivation: seeds, programs, determinism."""

from __future__ import annotations

import struct

import pytest
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from src.bundly.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    BUNDLY_PROGRAM_ID,
    GLOBAL_FEE_WALLET,
    METADATA_PROGRAM_ID,
    PUMP_AMM_PROGRAM_ID,
    PUMPFUN_FEE_PROGRAM,
    PUMPFUN_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from src.bundly.pda import (
    U64_MAX,
    derive_all_bundle_pdas,
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
    derive_token_vault_pda,
    derive_unstake_request_pda,
    derive_unstake_vault_pda,
    derive_user_stake_pda,
    get_associated_token_address,
    u64_seed,
)


# ── u64 seeds ──────────────────────────────────────────────────────────


class TestU64Seed:
    def test_little_endian(self):
        assert u64_seed(1) == b"\x01" + b"\x00" * 7
        assert u64_seed(0x0102) == b"\x02\x01" + b"\x00" * 6

    def test_max(self):
        assert u64_seed(U64_MAX) == b"\xff" * 8

    @pytest.mark.parametrize("value", [-1, U64_MAX + 1])
    def test_out_of_range(self, value: int):
        with pytest.raises(ValueError, match="u64"):
            u64_seed(value)


# ── Bundly PDAs ────────────────────────────────────────────────────────


class TestBundlyPdas:
    def test_bundle_seed(self, mint: Pubkey):
        expected = Pubkey.find_program_address([b"bundle_v2", bytes(mint)], BUNDLY_PROGRAM_ID)
        assert derive_bundle_pda(mint) == expected

    def test_escrow_seed(self, mint: Pubkey):
        expected = Pubkey.find_program_address([b"escrow_v2", bytes(mint)], BUNDLY_PROGRAM_ID)
        assert derive_escrow_pda(mint) == expected

    def test_token_vault_seed(self, mint: Pubkey):
        expected = Pubkey.find_program_address([b"vault_v2", bytes(mint)], BUNDLY_PROGRAM_ID)
        assert derive_token_vault_pda(mint) == expected

    def test_bundle_scoped_vaults(self, mint: Pubkey):
        bundle, _ = derive_bundle_pda(mint)
        for derive, seed in [
            (derive_fee_vault_pda, b"fee_vault_v1"),
            (derive_fee_sol_vault_pda, b"fee_sol_v1"),
            (derive_staking_vault_pda, b"staking_vault_v1"),
        ]:
            assert derive(bundle) == Pubkey.find_program_address([seed, bytes(bundle)], BUNDLY_PROGRAM_ID)

    def test_mint_pda_uses_u64_nonce(self, user: Pubkey):
        nonce = 1_700_000_000_000
        expected = Pubkey.find_program_address(
            [b"bundle_mint_v1", bytes(user), struct.pack("<Q", nonce)], BUNDLY_PROGRAM_ID
        )
        assert derive_mint_pda(user, nonce) == expected
        assert derive_mint_pda(user, nonce + 1) != expected

    def test_user_scoped_accounts(self, mint: Pubkey, user: Pubkey):
        bundle, _ = derive_bundle_pda(mint)
        assert derive_user_stake_pda(bundle, user) == Pubkey.find_program_address(
            [b"user_stake_v1", bytes(bundle), bytes(user)], BUNDLY_PROGRAM_ID
        )
        assert derive_unstake_request_pda(bundle, user) == Pubkey.find_program_address(
            [b"unstake_request_v1", bytes(bundle), bytes(user)], BUNDLY_PROGRAM_ID
        )
        assert derive_unstake_vault_pda(mint, user) == Pubkey.find_program_address(
            [b"unstake_vault_v2", bytes(mint), bytes(user)], BUNDLY_PROGRAM_ID
        )

    def test_unstake_vault_differs_per_user(self, mint: Pubkey):
        a, b = Pubkey.new_unique(), Pubkey.new_unique()
        assert derive_unstake_vault_pda(mint, a)[0] != derive_unstake_vault_pda(mint, b)[0]

    def test_order_pdas(self, mint: Pubkey, user: Pubkey):
        order, _ = derive_order_pda(mint, user, 7)
        assert order == Pubkey.find_program_address(
            [b"order_v1", bytes(mint), bytes(user), struct.pack("<Q", 7)], BUNDLY_PROGRAM_ID
        )[0]
        assert derive_order_vault_pda(order) == Pubkey.find_program_address(
            [b"vault_v2", bytes(order)], BUNDLY_PROGRAM_ID
        )

    def test_pdas_are_off_curve(self, mint: Pubkey):
        bundle, _ = derive_bundle_pda(mint)
        escrow, _ = derive_escrow_pda(mint)
        assert not bundle.is_on_curve()
        assert not escrow.is_on_curve()

    def test_deterministic_and_distinct(self, mint: Pubkey):
        assert derive_bundle_pda(mint) == derive_bundle_pda(mint)
        assert derive_bundle_pda(mint)[0] != derive_escrow_pda(mint)[0]
        assert derive_bundle_pda(mint)[0] != derive_bundle_pda(Pubkey.new_unique())[0]


class TestDeriveAll:
    def test_consistent_with_single_derivations(self, mint: Pubkey):
        addrs = derive_all_bundle_pdas(mint)
        bundle, _ = derive_bundle_pda(mint)
        assert addrs.bundle == bundle
        assert addrs.escrow == derive_escrow_pda(mint)[0]
        assert addrs.token_vault == derive_token_vault_pda(mint)[0]
        assert addrs.fee_vault == derive_fee_vault_pda(bundle)[0]
        assert addrs.staking_vault == derive_staking_vault_pda(bundle)[0]


# ── Token accounts ─────────────────────────────────────────────────────


class TestTokenAccounts:
    def test_ata_derivation(self, mint: Pubkey, user: Pubkey):
        expected, _ = Pubkey.find_program_address(
            [bytes(user), bytes(TOKEN_PROGRAM_ID), bytes(mint)], ASSOCIATED_TOKEN_PROGRAM_ID
        )
        assert get_associated_token_address(user, mint) == expected

    def test_ata_for_pda_owner(self, mint: Pubkey):
        bundle, _ = derive_bundle_pda(mint)
        assert isinstance(get_associated_token_address(bundle, mint), Pubkey)

    def test_global_fee_token_account(self, mint: Pubkey):
        ata, bump = derive_global_fee_token_account(mint)
        assert ata == get_associated_token_address(GLOBAL_FEE_WALLET, mint)
        assert bump == 0


# ── Pump.fun / Metaplex / AMM ──────────────────────────────────────────


class TestExternalPdas:
    def test_bonding_curve(self, mint: Pubkey):
        curve, _ = derive_bonding_curve_pda(mint)
        assert curve == Pubkey.find_program_address([b"bonding-curve", bytes(mint)], PUMPFUN_PROGRAM_ID)[0]
        assert derive_associated_bonding_curve(curve, mint) == get_associated_token_address(curve, mint)

    def test_metadata(self, mint: Pubkey):
        expected = Pubkey.find_program_address(
            [b"metadata", bytes(METADATA_PROGRAM_ID), bytes(mint)], METADATA_PROGRAM_ID
        )
        assert derive_metadata_pda(mint) == expected

    def test_creator_vault_uses_bundle_as_creator(self, mint: Pubkey):
        bundle, _ = derive_bundle_pda(mint)
        assert derive_creator_vault_pda(bundle) == Pubkey.find_program_address(
            [b"creator-vault", bytes(bundle)], PUMPFUN_PROGRAM_ID
        )

    def test_fee_config_owned_by_fee_program(self):
        assert derive_fee_config_pda() == Pubkey.find_program_address(
            [b"fee_config", bytes(PUMPFUN_PROGRAM_ID)], PUMPFUN_FEE_PROGRAM
        )

    def test_amm_creator_vault_authority(self, mint: Pubkey):
        bundle, _ = derive_bundle_pda(mint)
        assert derive_amm_creator_vault_authority(bundle) == Pubkey.find_program_address(
            [b"creator_vault", bytes(bundle)], PUMP_AMM_PROGRAM_ID
        )
