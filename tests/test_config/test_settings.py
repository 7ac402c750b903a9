"""Tests for Settings: RPC endpoint resolution and IPFS key fallback."""

from __future__ import annotations

import pytest

from config.settings import RPC_ENDPOINTS, Settings


def _settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)


class TestRpcUrl:
    def test_network_default(self):
        assert _settings(solana_network="devnet", solana_rpc_url="").rpc_url == RPC_ENDPOINTS["devnet"]
        assert _settings(solana_network="mainnet", solana_rpc_url="").rpc_url == RPC_ENDPOINTS["mainnet"]

    def test_explicit_url_wins(self):
        cfg = _settings(solana_network="mainnet", solana_rpc_url="https://rpc.example")
        assert cfg.rpc_url == "https://rpc.example"

    def test_unknown_network(self):
        with pytest.raises(ValueError, match="solana_network"):
            _ = _settings(solana_network="testnet", solana_rpc_url="").rpc_url


class TestIpfsJwt:
    def test_pinata_preferred(self):
        assert _settings(pinata_jwt="p", nft_storage_key="n").ipfs_jwt == "p"

    def test_fallback_name(self):
        assert _settings(pinata_jwt="", nft_storage_key="n").ipfs_jwt == "n"


class TestEnv:
    def test_reads_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CONFIRMATION_RETRIES", "5")
        monkeypatch.setenv("GRADUATION_FIXED_COSTS_LAMPORTS", "20000000")
        cfg = Settings(_env_file=None)
        assert cfg.confirmation_retries == 5
        assert cfg.graduation_fixed_costs_lamports == 20_000_000

    def test_defaults(self):
        cfg = _settings()
        assert cfg.finalize_compute_unit_limit == 1_400_000
        assert cfg.claw_base_url == "https://claw.bundly.fun"
