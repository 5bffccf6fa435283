"""
Chat Notifier Tests

Direct-message sending through the authenticated channel.
"""

import httpx
import pytest

from core.errors import InvalidRecipientError, SendError
from core.space_client import SEND_MESSAGE_PATH, authenticated_channel
from services.chat_service import send_message


class TransportSpy:
    def __init__(self, send_status=200, token_status=200, raise_on_send=None):
        self.send_status = send_status
        self.token_status = token_status
        self.raise_on_send = raise_on_send
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if request.url.path == SEND_MESSAGE_PATH:
            if self.raise_on_send:
                raise self.raise_on_send
            return httpx.Response(self.send_status, text="send-result")
        if self.token_status != 200:
            return httpx.Response(self.token_status)
        return httpx.Response(200, json={"access_token": "token", "expires_in": 600})


class TestSendMessage:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("recipient", ["", "   "])
    async def test_empty_recipient_makes_no_call(self, credentials, recipient):
        spy = TransportSpy()
        async with authenticated_channel(credentials, transport=httpx.MockTransport(spy)) as channel:
            with pytest.raises(InvalidRecipientError):
                await send_message(channel, recipient, "hello")

        assert spy.calls == 0

    @pytest.mark.asyncio
    async def test_success_returns_none(self, credentials):
        spy = TransportSpy(send_status=200)
        async with authenticated_channel(credentials, transport=httpx.MockTransport(spy)) as channel:
            result = await send_message(channel, "2kawvQ4F6GM6", "hello", caller_id="2kawvQ4F6GM6")

        assert result is None
        assert spy.calls == 2

    @pytest.mark.asyncio
    async def test_unauthorized_surfaces_send_error_with_status(self, credentials):
        spy = TransportSpy(send_status=401)
        async with authenticated_channel(credentials, transport=httpx.MockTransport(spy)) as channel:
            with pytest.raises(SendError) as exc_info:
                await send_message(channel, "2kawvQ4F6GM6", "hello")

        assert exc_info.value.status_code == 401
        assert "401" in str(exc_info.value)
        assert exc_info.value.detail == "send-result"

    @pytest.mark.asyncio
    async def test_not_found_is_not_retried(self, credentials):
        spy = TransportSpy(send_status=404)
        async with authenticated_channel(credentials, transport=httpx.MockTransport(spy)) as channel:
            with pytest.raises(SendError) as exc_info:
                await send_message(channel, "unknown", "hello")

        assert exc_info.value.status_code == 404
        assert spy.calls == 2

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self, credentials):
        spy = TransportSpy(raise_on_send=httpx.ConnectError("connection refused"))
        async with authenticated_channel(credentials, transport=httpx.MockTransport(spy)) as channel:
            with pytest.raises(SendError) as exc_info:
                await send_message(channel, "2kawvQ4F6GM6", "hello")

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_token_failure_wrapped(self, credentials):
        spy = TransportSpy(token_status=401)
        async with authenticated_channel(credentials, transport=httpx.MockTransport(spy)) as channel:
            with pytest.raises(SendError) as exc_info:
                await send_message(channel, "2kawvQ4F6GM6", "hello")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_null_access_token_surfaces_send_error(self, credentials):
        spy = TransportSpy()

        def handler(request):
            if request.url.path == SEND_MESSAGE_PATH:
                return spy(request)
            return httpx.Response(200, json={"access_token": None, "expires_in": 600})

        async with authenticated_channel(credentials, transport=httpx.MockTransport(handler)) as channel:
            with pytest.raises(SendError):
                await send_message(channel, "2kawvQ4F6GM6", "hello")

        assert spy.calls == 0
