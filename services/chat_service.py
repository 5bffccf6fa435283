import logging
import time
from typing import Optional

import httpx

from core.errors import AuthTokenError, InvalidRecipientError, SendError
from core.space_client import SpaceChannel
from schemas.message import OutboundMessage

logger = logging.getLogger(__name__)


async def send_message(
    channel: SpaceChannel,
    recipient_user_id: str,
    message: str,
    *,
    caller_id: Optional[str] = None,
) -> None:
    """
    Send ``message`` as a direct chat message to one Space member.

    ``caller_id`` identifies the member whose request triggered the send and
    is only recorded in logs. Failures are raised as ``SendError`` and never
    retried.
    """
    if not recipient_user_id or not recipient_user_id.strip():
        raise InvalidRecipientError("Recipient user id must not be empty")

    outbound = OutboundMessage(recipient_user_id=recipient_user_id, content=message)
    log_extra = {"recipient_user_id": recipient_user_id, "caller_id": caller_id}
    start = time.perf_counter()
    try:
        response = await channel.post_message(outbound)
    except AuthTokenError as exc:
        logger.exception("Space send_message authentication failed", extra=log_extra)
        raise SendError(
            f"Space authentication failed: {exc}",
            status_code=exc.status_code,
        ) from exc
    except httpx.HTTPError as exc:
        logger.exception(
            "Space send_message transport error",
            extra={**log_extra, "elapsed_s": round(time.perf_counter() - start, 3)},
        )
        raise SendError(f"Space send_message failed: {exc}") from exc

    elapsed = time.perf_counter() - start
    logger.info(
        "Space send_message completed",
        extra={**log_extra, "status_code": response.status_code, "elapsed_s": round(elapsed, 3)},
    )
    if response.status_code >= 400:
        raise SendError(
            f"Space send_message returned {response.status_code}",
            status_code=response.status_code,
            detail=response.text,
        )
