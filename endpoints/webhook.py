import json
import logging
import time
from typing import Optional
from fastapi import APIRouter, Request, HTTPException, Depends
from pydantic import ValidationError
from core.config import settings
from core.errors import SendError
from dependencies.services import get_request_verifier, get_webhook_service
from schemas.message import ApplicationPayload
from services.verification_service import RequestVerifier
from services.webhook_service import WebhookService

router = APIRouter()
logger = logging.getLogger(__name__)

TIMESTAMP_HEADER = "X-Space-Timestamp"
SIGNATURE_HEADER = "X-Space-Signature"

@router.post("/webhook/space")
async def space_webhook(
    request: Request,
    verifier: RequestVerifier = Depends(get_request_verifier),
    webhook_service: WebhookService = Depends(get_webhook_service),
):
    body = await request.body()
    if settings.space_verification_mode == "signature":
        _verify_signature(request, verifier, body)

    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning("Webhook body is not valid UTF-8", extra={"body_len": len(body)})
        raise HTTPException(status_code=400, detail="Invalid request body")

    try:
        raw_payload = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Webhook invalid JSON payload", extra={"body_len": len(body)})
        raise HTTPException(status_code=400, detail="Invalid JSON payload")

    if settings.space_verification_mode == "token" and not verifier.verify_token(raw_payload):
        logger.warning("Webhook verification token mismatch", extra={"body_len": len(body)})
        raise HTTPException(status_code=401, detail="Invalid verification token")

    try:
        payload = ApplicationPayload.model_validate(raw_payload)
    except ValidationError:
        logger.warning("Webhook invalid payload structure")
        raise HTTPException(status_code=400, detail="Invalid webhook payload")

    try:
        result = await webhook_service.handle_payload(payload)
    except SendError as exc:
        logger.exception(
            "Webhook reply failed",
            extra={"class_name": payload.class_name, "status_code": exc.status_code},
        )
        raise HTTPException(status_code=502, detail="Failed to deliver chat message")

    if result is not None:
        return result
    return {"status": "ok"}


def _verify_signature(request: Request, verifier: RequestVerifier, body: bytes) -> None:
    timestamp = request.headers.get(TIMESTAMP_HEADER)
    signature = request.headers.get(SIGNATURE_HEADER)
    if not timestamp or not signature:
        logger.warning("Webhook signature headers missing")
        raise HTTPException(status_code=401, detail="Missing Space signature headers")

    max_age = settings.space_signature_max_age_seconds
    if max_age and not _is_fresh(timestamp, max_age):
        logger.warning("Webhook timestamp outside allowed window", extra={"timestamp": timestamp})
        raise HTTPException(status_code=401, detail="Stale Space request timestamp")

    if not verifier.verify_signature(timestamp, signature, body):
        logger.warning("Webhook signature verification failed", extra={"body_len": len(body)})
        raise HTTPException(status_code=401, detail="Invalid Space webhook signature")


def _is_fresh(timestamp: str, max_age: int, now: Optional[float] = None) -> bool:
    try:
        value = int(timestamp)
    except ValueError:
        return False
    # Space sends milliseconds; accept seconds as well.
    seconds = value / 1000 if value > 10**11 else value
    current = time.time() if now is None else now
    return abs(current - seconds) <= max_age
