from typing import Optional

import httpx

from core.config import settings
from core.space_client import SpaceChannel, authenticated_channel

_channel: Optional[SpaceChannel] = None

def init_channel() -> None:
    global _channel
    if _channel is None:
        _channel = authenticated_channel(
            settings.require_credentials(),
            timeout=httpx.Timeout(
                settings.http_timeout_seconds,
                connect=settings.http_connect_timeout_seconds,
            ),
        )

def get_channel() -> SpaceChannel:
    if _channel is None:
        init_channel()
    return _channel

async def close_channel() -> None:
    global _channel
    if _channel is not None:
        await _channel.aclose()
        _channel = None
