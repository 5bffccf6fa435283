from fastapi import Depends
from core.config import settings
from core.http_client import get_channel
from core.space_client import SpaceChannel
from services.verification_service import RequestVerifier
from services.webhook_service import WebhookService

def get_space_channel() -> SpaceChannel:
    return get_channel()

def get_request_verifier() -> RequestVerifier:
    return RequestVerifier(settings.require_verification())

def get_webhook_service(
    channel: SpaceChannel = Depends(get_space_channel),
) -> WebhookService:
    return WebhookService(channel=channel)
