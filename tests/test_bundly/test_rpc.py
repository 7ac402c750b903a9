"""Tests for SolanaRpcClient: JSON-RPC payloads, parsing, errors, confirmation.

All HTTP calls are mocked. No real RPC requests are made.
"""

from __future__ import annotations

import base64
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from solders.hash import Hash  # type: ignore[import-untyped]
from solders.keypair import Keypair  # type: ignore[import-untyped]
from solders.message import MessageV0  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.transaction import VersionedTransaction  # type: ignore[import-untyped]

from src.bundly.exceptions import ConfirmationTimeoutError, RpcError, TransactionFailedError
from src.bundly.rpc import SolanaRpcClient

RPC_URL = "https://api.devnet.solana.com"


def _rpc_response(result: object = None, *, error: dict | None = None, status: int = 200) -> MagicMock:
    resp = MagicMock(spec=httpx.Response)
    resp.status_code = status
    body: dict = {"jsonrpc": "2.0", "id": 1}
    if error is not None:
        body["error"] = error
    else:
        body["result"] = result
    resp.json.return_value = body
    return resp


def _mock_http(client: SolanaRpcClient, *responses: MagicMock) -> AsyncMock:
    client._http = AsyncMock(spec=httpx.AsyncClient)
    client._http.post = AsyncMock(side_effect=list(responses))
    return client._http.post


# ── Fixtures ───────────────────────────────────────────────────────────


@pytest.fixture
def client() -> SolanaRpcClient:
    return SolanaRpcClient(RPC_URL, confirm_retries=3, confirm_delay_sec=0.0)


# ── Init ───────────────────────────────────────────────────────────────


class TestInit:
    def test_empty_url_raises(self):
        with pytest.raises(ValueError, match="RPC URL is empty"):
            SolanaRpcClient("")

    def test_unknown_commitment_raises(self):
        with pytest.raises(ValueError, match="commitment"):
            SolanaRpcClient(RPC_URL, commitment="max")


# ── Transport / errors ─────────────────────────────────────────────────


class TestCall:
    async def test_payload_shape(self, client: SolanaRpcClient):
        post = _mock_http(client, _rpc_response({"value": 5}))
        pubkey = Pubkey.new_unique()

        await client.get_balance(pubkey)

        url = post.call_args.args[0]
        payload = post.call_args.kwargs["json"]
        assert url == RPC_URL
        assert payload["jsonrpc"] == "2.0"
        assert payload["method"] == "getBalance"
        assert payload["params"] == [str(pubkey), {"commitment": "confirmed"}]

    async def test_http_error_raises(self, client: SolanaRpcClient):
        _mock_http(client, _rpc_response(status=503))
        with pytest.raises(RpcError, match="HTTP 503"):
            await client.get_balance(Pubkey.new_unique())

    async def test_rpc_error_object_raises_with_code(self, client: SolanaRpcClient):
        _mock_http(client, _rpc_response(error={"code": -32602, "message": "Invalid param"}))
        with pytest.raises(RpcError, match="Invalid param") as exc:
            await client.get_balance(Pubkey.new_unique())
        assert exc.value.code == -32602

    async def test_non_json_body_raises(self, client: SolanaRpcClient):
        resp = _rpc_response()
        resp.json.side_effect = ValueError("Expecting value")
        _mock_http(client, resp)
        with pytest.raises(RpcError, match="non-JSON"):
            await client.get_balance(Pubkey.new_unique())

    async def test_non_object_body_raises(self, client: SolanaRpcClient):
        resp = _rpc_response()
        resp.json.return_value = ["batch"]
        _mock_http(client, resp)
        with pytest.raises(RpcError, match="unexpected payload"):
            await client.get_balance(Pubkey.new_unique())

    async def test_timeout_wrapped(self, client: SolanaRpcClient):
        client._http = AsyncMock(spec=httpx.AsyncClient)
        client._http.post = AsyncMock(side_effect=httpx.ReadTimeout("timeout"))
        with pytest.raises(RpcError, match="ReadTimeout"):
            await client.get_balance(Pubkey.new_unique())


# ── Reads ──────────────────────────────────────────────────────────────


class TestReads:
    async def test_get_balance(self, client: SolanaRpcClient):
        _mock_http(client, _rpc_response({"context": {"slot": 1}, "value": 5_000_000_000}))
        assert await client.get_balance(Pubkey.new_unique()) == 5_000_000_000

    async def test_get_account_info_decodes_base64(self, client: SolanaRpcClient):
        raw = b"\x01\x02\x03bundle"
        owner = str(Pubkey.new_unique())
        _mock_http(
            client,
            _rpc_response(
                {
                    "value": {
                        "lamports": 2_039_280,
                        "owner": owner,
                        "data": [base64.b64encode(raw).decode(), "base64"],
                        "executable": False,
                    }
                }
            ),
        )
        info = await client.get_account_info(Pubkey.new_unique())
        assert info is not None
        assert info.data == raw
        assert info.lamports == 2_039_280
        assert info.owner == owner

    async def test_get_account_info_missing(self, client: SolanaRpcClient):
        _mock_http(client, _rpc_response({"context": {"slot": 1}, "value": None}))
        assert await client.get_account_info(Pubkey.new_unique()) is None

    async def test_get_token_account_balance(self, client: SolanaRpcClient):
        _mock_http(
            client,
            _rpc_response({"value": {"amount": "1500000", "decimals": 6, "uiAmountString": "1.5"}}),
        )
        balance = await client.get_token_account_balance(Pubkey.new_unique())
        assert balance.amount == 1_500_000
        assert balance.decimals == 6

    async def test_get_token_accounts_by_owner(self, client: SolanaRpcClient):
        post = _mock_http(client, _rpc_response({"value": [{"pubkey": "a"}, {"pubkey": "b"}]}))
        accounts = await client.get_token_accounts_by_owner(Pubkey.new_unique())
        assert len(accounts) == 2
        params = post.call_args.kwargs["json"]["params"]
        assert params[2]["encoding"] == "jsonParsed"
        assert "programId" in params[1]

    async def test_get_latest_blockhash(self, client: SolanaRpcClient):
        blockhash = Hash.default()
        _mock_http(
            client,
            _rpc_response({"value": {"blockhash": str(blockhash), "lastValidBlockHeight": 1234}}),
        )
        result, height = await client.get_latest_blockhash()
        assert result == blockhash
        assert height == 1234


# ── Writes ─────────────────────────────────────────────────────────────


class TestSendTransaction:
    async def test_sends_base64(self, client: SolanaRpcClient):
        kp = Keypair()
        msg = MessageV0.try_compile(
            payer=kp.pubkey(),
            instructions=[],
            address_lookup_table_accounts=[],
            recent_blockhash=Hash.default(),
        )
        tx = VersionedTransaction(msg, [kp])
        post = _mock_http(client, _rpc_response("5igSig"))

        signature = await client.send_transaction(tx)

        assert signature == "5igSig"
        params = post.call_args.kwargs["json"]["params"]
        assert params[0] == base64.b64encode(bytes(tx)).decode("ascii")
        assert params[1]["encoding"] == "base64"
        assert params[1]["skipPreflight"] is False

    async def test_request_airdrop(self, client: SolanaRpcClient):
        post = _mock_http(client, _rpc_response("airdropSig"))
        pubkey = Pubkey.new_unique()
        assert await client.request_airdrop(pubkey, 1_000_000_000) == "airdropSig"
        assert post.call_args.kwargs["json"]["params"] == [str(pubkey), 1_000_000_000]


# ── Confirmation ───────────────────────────────────────────────────────


def _status(confirmation: str | None, err: object = None) -> MagicMock:
    if confirmation is None:
        return _rpc_response({"value": [None]})
    return _rpc_response({"value": [{"confirmationStatus": confirmation, "err": err}]})


class TestConfirmTransaction:
    async def test_confirmed_after_polls(self, client: SolanaRpcClient):
        post = _mock_http(client, _status(None), _status("processed"), _status("confirmed"))
        with patch("src.bundly.rpc.asyncio.sleep", new_callable=AsyncMock) as sleep:
            assert await client.confirm_transaction("sig") == "confirmed"
        assert post.await_count == 3
        assert sleep.await_count == 2

    async def test_finalized_satisfies_confirmed(self, client: SolanaRpcClient):
        _mock_http(client, _status("finalized"))
        assert await client.confirm_transaction("sig") == "finalized"

    async def test_on_chain_error_raises(self, client: SolanaRpcClient):
        _mock_http(client, _status("confirmed", err={"InstructionError": [1, {"Custom": 6001}]}))
        with pytest.raises(TransactionFailedError) as exc:
            await client.confirm_transaction("sig")
        assert exc.value.signature == "sig"
        assert "6001" in str(exc.value)

    async def test_timeout_after_retries(self, client: SolanaRpcClient):
        post = _mock_http(client, _status(None), _status(None), _status("processed"))
        with patch("src.bundly.rpc.asyncio.sleep", new_callable=AsyncMock):
            with pytest.raises(ConfirmationTimeoutError, match="3 polls"):
                await client.confirm_transaction("sig")
        assert post.await_count == 3

    async def test_timeout_is_rpc_error(self):
        assert issubclass(ConfirmationTimeoutError, RpcError)
        assert issubclass(TransactionFailedError, RpcError)


class TestClose:
    async def test_close(self, client: SolanaRpcClient):
        client._http = AsyncMock(spec=httpx.AsyncClient)
        await client.close()
        client._http.aclose.assert_awaited_once()
