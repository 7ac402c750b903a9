"""claw.bundly.fun client: agent register/login with a wallet signature,
then API-key calls (profile, bundle listing, posts)."""

from __future__ import annotations

import httpx
from loguru import logger
from solders.keypair import Keypair  # type: ignore[import-untyped]

from src.claw.auth import build_wallet_auth_headers
from src.claw.models import ClawAgentSession

DEFAULT_CLAW_BASE_URL = "https://claw.bundly.fun"

REGISTER_PATH = "/api/v1/agents/register"
LOGIN_PATH = "/api/v1/agents/login"
ME_PATH = "/api/v1/agents/me"
BUNDLES_PATH = "/api/v1/bundles"
POSTS_PATH = "/api/v1/posts"


class ClawError(Exception):
    """Claw API error."""


class ClawApiError(ClawError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ClawAuthError(ClawError):
    """No API key yet: call login_agent() or register_agent() first."""


def _json_or_empty(response: httpx.Response) -> dict:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {"data": data}


class ClawClient:
    def __init__(
        self,
        keypair: Keypair,
        base_url: str = DEFAULT_CLAW_BASE_URL,
        timeout: float = 15.0,
    ) -> None:
        if keypair is None:
            raise ValueError("wallet keypair is required")
        self._keypair = keypair
        self._base_url = base_url.rstrip("/")
        self._api_key: str | None = None
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def api_key(self) -> str | None:
        return self._api_key

    def with_api_key(self, api_key: str) -> ClawClient:
        self._api_key = api_key
        return self

    def _auth_headers(self) -> dict[str, str]:
        if not self._api_key:
            raise ClawAuthError("Missing api key. Call login_agent() or register_agent() first.")
        return {"Authorization": f"Bearer {self._api_key}"}

    async def _request(self, op: str, method: str, path: str, **kwargs) -> dict:
        try:
            response = await self._client.request(method, path, **kwargs)
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            raise ClawApiError(f"{op} request failed: {e}") from e

        data = _json_or_empty(response)
        if response.status_code >= 400:
            message = data.get("details") or data.get("error") or f"{op} failed ({response.status_code})"
            raise ClawApiError(str(message), status_code=response.status_code)
        return data

    async def _wallet_login(self, op: str, path: str, body: dict) -> ClawAgentSession:
        headers = build_wallet_auth_headers(self._keypair, path)
        data = await self._request(op, "POST", path, json=body, headers=headers)
        session = ClawAgentSession.model_validate(data)
        self._api_key = session.api_key or None
        logger.info(f"[CLAW] {op} ok for {self._keypair.pubkey()}")
        return session

    async def register_agent(self, name: str | None = None, description: str | None = None) -> ClawAgentSession:
        return await self._wallet_login(
            "Register", REGISTER_PATH, {"name": name, "description": description}
        )

    async def login_agent(self) -> ClawAgentSession:
        return await self._wallet_login("Login", LOGIN_PATH, {})

    async def get_me(self) -> dict:
        return await self._request("getMe", "GET", ME_PATH, headers=self._auth_headers())

    async def list_bundles(self, **params: object) -> dict:
        query = {k: str(v) for k, v in params.items() if v is not None}
        return await self._request(
            "listBundles", "GET", BUNDLES_PATH, params=query, headers=self._auth_headers()
        )

    async def create_post(self, bundle_mint: str, content: str) -> dict:
        if not bundle_mint:
            raise ValueError("bundle_mint is required")
        if not content or not isinstance(content, str):
            raise ValueError("content must be a non-empty string")
        return await self._request(
            "createPost",
            "POST",
            f"{POSTS_PATH}/{bundle_mint}",
            json={"content": content},
            headers=self._auth_headers(),
        )

    async def close(self) -> None:
        await self._client.aclose()
