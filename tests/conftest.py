"""Shared test fixtures."""

import pytest
from solders.keypair import Keypair  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]


@pytest.fixture
def keypair() -> Keypair:
    return Keypair()


@pytest.fixture
def mint() -> Pubkey:
    """Random bundle mint address (no account behind it)."""
    return Pubkey.new_unique()


@pytest.fixture
def user() -> Pubkey:
    return Pubkey.new_unique()
