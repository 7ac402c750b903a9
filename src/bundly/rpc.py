"""Minimal async Solana JSON-RPC client over httpx.

Only the calls the SDK needs. Errors raise RpcError subclasses; there is
no resend or backoff: confirm_transaction polls at a fixed interval for
a fixed number of attempts and gives up.
"""

from __future__ import annotations

import asyncio
import base64
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger
from solders.hash import Hash  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.transaction import VersionedTransaction  # type: ignore[import-untyped]

from src.bundly.constants import TOKEN_PROGRAM_ID
from src.bundly.exceptions import ConfirmationTimeoutError, RpcError, TransactionFailedError

COMMITMENT_RANK = {"processed": 0, "confirmed": 1, "finalized": 2}


@dataclass
class AccountInfo:
    lamports: int
    owner: str
    data: bytes
    executable: bool = False


@dataclass
class TokenAmount:
    amount: int  # raw units
    decimals: int


class SolanaRpcClient:
    """Async JSON-RPC client bound to one endpoint and commitment."""

    def __init__(
        self,
        rpc_url: str,
        *,
        commitment: str = "confirmed",
        timeout: float = 30.0,
        confirm_retries: int = 30,
        confirm_delay_sec: float = 2.0,
    ) -> None:
        if not rpc_url:
            raise ValueError("RPC URL is empty")
        if commitment not in COMMITMENT_RANK:
            raise ValueError(f"Unknown commitment: {commitment}")
        self._rpc_url = rpc_url
        self._commitment = commitment
        self._confirm_retries = confirm_retries
        self._confirm_delay = confirm_delay_sec
        self._http = httpx.AsyncClient(timeout=timeout)
        self._request_id = 0

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    async def _call(self, method: str, params: list[Any]) -> Any:
        """POST one JSON-RPC request and return its ``result``."""
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }
        try:
            resp = await self._http.post(self._rpc_url, json=payload)
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            raise RpcError(f"{method} request failed: {type(e).__name__}: {e}") from e

        if resp.status_code != 200:
            raise RpcError(f"{method} HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise RpcError(f"{method} returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise RpcError(f"{method} returned unexpected payload: {type(data).__name__}")
        if "error" in data:
            error = data["error"] or {}
            raise RpcError(
                f"{method} RPC error: {error.get('message', error)}",
                code=error.get("code"),
            )
        return data.get("result")

    # ─── Reads ───────────────────────────────────────────────────────

    async def get_balance(self, pubkey: Pubkey) -> int:
        """Lamports held by ``pubkey``."""
        result = await self._call("getBalance", [str(pubkey), {"commitment": self._commitment}])
        return int(result["value"])

    async def get_account_info(self, pubkey: Pubkey) -> AccountInfo | None:
        """Raw account, or None if it does not exist."""
        result = await self._call(
            "getAccountInfo",
            [str(pubkey), {"encoding": "base64", "commitment": self._commitment}],
        )
        value = result.get("value") if result else None
        if not value:
            return None
        return AccountInfo(
            lamports=int(value.get("lamports", 0)),
            owner=value.get("owner", ""),
            data=base64.b64decode(value["data"][0]),
            executable=bool(value.get("executable", False)),
        )

    async def get_token_account_balance(self, token_account: Pubkey) -> TokenAmount:
        result = await self._call(
            "getTokenAccountBalance",
            [str(token_account), {"commitment": self._commitment}],
        )
        value = result["value"]
        return TokenAmount(amount=int(value.get("amount", "0")), decimals=int(value.get("decimals", 0)))

    async def get_token_accounts_by_owner(
        self,
        owner: Pubkey,
        program_id: Pubkey = TOKEN_PROGRAM_ID,
    ) -> list[dict]:
        """jsonParsed token accounts of ``owner`` under ``program_id``."""
        result = await self._call(
            "getTokenAccountsByOwner",
            [
                str(owner),
                {"programId": str(program_id)},
                {"encoding": "jsonParsed", "commitment": self._commitment},
            ],
        )
        return list(result.get("value", []))

    async def get_latest_blockhash(self) -> tuple[Hash, int]:
        """(blockhash, last_valid_block_height)."""
        result = await self._call("getLatestBlockhash", [{"commitment": self._commitment}])
        value = result["value"]
        return Hash.from_string(value["blockhash"]), int(value["lastValidBlockHeight"])

    async def get_signature_status(self, signature: str) -> dict | None:
        result = await self._call(
            "getSignatureStatuses",
            [[signature], {"searchTransactionHistory": True}],
        )
        statuses = result.get("value", []) if result else []
        return statuses[0] if statuses else None

    # ─── Writes ──────────────────────────────────────────────────────

    async def send_transaction(self, tx: VersionedTransaction, *, skip_preflight: bool = False) -> str:
        """Submit a signed transaction, returns its signature."""
        tx_b64 = base64.b64encode(bytes(tx)).decode("ascii")
        result = await self._call(
            "sendTransaction",
            [
                tx_b64,
                {
                    "encoding": "base64",
                    "skipPreflight": skip_preflight,
                    "preflightCommitment": self._commitment,
                },
            ],
        )
        logger.debug(f"[RPC] TX sent: {result}")
        return str(result)

    async def request_airdrop(self, pubkey: Pubkey, lamports: int) -> str:
        result = await self._call("requestAirdrop", [str(pubkey), lamports])
        return str(result)

    async def confirm_transaction(self, signature: str) -> str:
        """Poll until ``signature`` reaches the client commitment.

        Returns the confirmation status reached. Raises
        TransactionFailedError on an on-chain error and
        ConfirmationTimeoutError once the polls are used up.
        """
        target = COMMITMENT_RANK[self._commitment]
        for attempt in range(1, self._confirm_retries + 1):
            status = await self.get_signature_status(signature)
            if status is not None:
                if status.get("err"):
                    raise TransactionFailedError(signature, status["err"])
                confirmation = status.get("confirmationStatus") or ""
                if COMMITMENT_RANK.get(confirmation, -1) >= target:
                    logger.debug(f"[RPC] TX {signature[:16]} {confirmation} after {attempt} polls")
                    return confirmation
            if attempt < self._confirm_retries:
                await asyncio.sleep(self._confirm_delay)

        raise ConfirmationTimeoutError(signature, self._confirm_retries)

    async def close(self) -> None:
        await self._http.aclose()
