"""Wallet-signature auth headers for claw.bundly.fun.

Signed message: ``bundly-auth:{action}:{timestamp_ms}:{nonce}`` where
``action`` is the request path. The signature is an ed25519 detached
signature over the UTF-8 message, base58 encoded.
"""

from __future__ import annotations

import secrets
import time

import base58
from solders.keypair import Keypair  # type: ignore[import-untyped]

AUTH_PREFIX = "bundly-auth"
NONCE_BYTES = 16


def build_auth_message(action: str, timestamp: int, nonce: str) -> str:
    return f"{AUTH_PREFIX}:{action}:{timestamp}:{nonce}"


def build_wallet_auth_headers(
    keypair: Keypair,
    action: str,
    timestamp: int | None = None,
    nonce: str | None = None,
) -> dict[str, str]:
    if not isinstance(keypair, Keypair):
        raise ValueError("keypair is required")
    if not isinstance(action, str) or not action.startswith("/"):
        raise ValueError("action must be a path like /api/v1/agents/login")

    if timestamp is None:
        timestamp = int(time.time() * 1000)
    if nonce is None:
        nonce = secrets.token_hex(NONCE_BYTES)

    message = build_auth_message(action, timestamp, nonce)
    signature = keypair.sign_message(message.encode("utf-8"))

    return {
        "x-wallet-address": str(keypair.pubkey()),
        "x-wallet-signature": base58.b58encode(bytes(signature)).decode("ascii"),
        "x-wallet-timestamp": str(timestamp),
        "x-wallet-nonce": nonce,
        "x-wallet-action": action,
    }
