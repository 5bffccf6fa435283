"""
Authenticated HTTP channel to a Space instance.

Outbound calls authenticate as the application itself using the OAuth2
client-credentials flow. The bearer token is fetched lazily, cached until
shortly before it expires and refreshed transparently on the next call.
"""

import asyncio
import base64
import logging
import time
from typing import Callable, Optional

import httpx

from core.errors import AuthConfigError, AuthTokenError
from schemas.credentials import Credentials
from schemas.message import OutboundMessage

logger = logging.getLogger(__name__)

TOKEN_PATH = "/oauth/token"
SEND_MESSAGE_PATH = "/api/http/chats/messages/send-message"
DEFAULT_TOKEN_TTL_SECONDS = 600
EXPIRY_LEEWAY_SECONDS = 5


class ClientCredentialsAuth(httpx.Auth):
    def __init__(
        self,
        credentials: Credentials,
        scope: str = "**",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.token_url = f"{credentials.instance_url.rstrip('/')}{TOKEN_PATH}"
        self.scope = scope
        self._basic = base64.b64encode(
            f"{credentials.client_id}:{credentials.client_secret}".encode("utf-8")
        ).decode("ascii")
        self._clock = clock
        self._lock = asyncio.Lock()
        self._access_token: Optional[str] = None
        self._expires_at = 0.0

    def _has_valid_token(self) -> bool:
        return self._access_token is not None and self._clock() < self._expires_at

    def invalidate(self) -> None:
        self._access_token = None
        self._expires_at = 0.0

    def build_token_request(self) -> httpx.Request:
        return httpx.Request(
            "POST",
            self.token_url,
            data={"grant_type": "client_credentials", "scope": self.scope},
            headers={
                "Authorization": f"Basic {self._basic}",
                "Accept": "application/json",
            },
        )

    def update_token(self, response: httpx.Response) -> None:
        if response.status_code >= 400:
            logger.error(
                "Space token request failed",
                extra={"status_code": response.status_code},
            )
            raise AuthTokenError(
                f"Space token endpoint returned {response.status_code}",
                status_code=response.status_code,
            )
        try:
            data = response.json()
            access_token = data["access_token"]
            expires_in = int(data.get("expires_in") or DEFAULT_TOKEN_TTL_SECONDS)
        except (ValueError, KeyError, TypeError):
            raise AuthTokenError(
                "Space token endpoint returned a malformed response",
                status_code=response.status_code,
            )
        if not isinstance(access_token, str) or not access_token:
            raise AuthTokenError(
                "Space token endpoint returned a malformed response",
                status_code=response.status_code,
            )

        self._access_token = access_token
        self._expires_at = self._clock() + max(expires_in - EXPIRY_LEEWAY_SECONDS, 0)
        logger.info("Space access token refreshed", extra={"expires_in": expires_in})

    def sync_auth_flow(self, request):
        raise RuntimeError("ClientCredentialsAuth requires an httpx.AsyncClient")

    async def async_auth_flow(self, request):
        async with self._lock:
            if not self._has_valid_token():
                token_response = yield self.build_token_request()
                await token_response.aread()
                self.update_token(token_response)
            token = self._access_token

        request.headers["Authorization"] = f"Bearer {token}"
        response = yield request

        if response.status_code == 401:
            # Next call fetches a fresh token; this request is not re-sent.
            async with self._lock:
                if self._access_token == token:
                    self.invalidate()


class SpaceChannel:
    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def post_message(self, message: OutboundMessage) -> httpx.Response:
        return await self.client.post(
            SEND_MESSAGE_PATH,
            json=message.to_request_body(),
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "SpaceChannel":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def _validate_credentials(credentials: Credentials) -> None:
    if not credentials.client_id or not credentials.client_secret:
        raise AuthConfigError("Space client id and client secret must not be empty")

    try:
        url = httpx.URL(credentials.instance_url)
    except httpx.InvalidURL as exc:
        raise AuthConfigError(f"Invalid Space instance URL: {credentials.instance_url!r}") from exc

    if url.scheme not in {"http", "https"} or not url.host:
        raise AuthConfigError(f"Space instance URL must be absolute: {credentials.instance_url!r}")


def authenticated_channel(
    credentials: Credentials,
    *,
    timeout: Optional[httpx.Timeout] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    clock: Callable[[], float] = time.monotonic,
) -> SpaceChannel:
    _validate_credentials(credentials)
    auth = ClientCredentialsAuth(credentials, clock=clock)
    client = httpx.AsyncClient(
        base_url=credentials.instance_url.rstrip("/"),
        auth=auth,
        transport=transport,
        timeout=timeout or httpx.Timeout(15.0, connect=5.0),
    )
    return SpaceChannel(client)
