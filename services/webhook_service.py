import logging
from typing import Any, Dict, Optional

from core.space_client import SpaceChannel
from schemas.message import ApplicationPayload
from services.chat_service import send_message

COMMANDS = [
    {"name": "help", "description": "Show this help"},
]

class WebhookService:
    def __init__(self, channel: SpaceChannel):
        self.channel = channel
        self.logger = logging.getLogger(__name__)

    async def handle_payload(self, payload: ApplicationPayload) -> Optional[Dict[str, Any]]:
        self.logger.info(
            "WebhookService received payload",
            extra={"class_name": payload.class_name, "user_id": payload.user_id},
        )
        if payload.class_name == "ListCommandsPayload":
            return {"commands": COMMANDS}

        if payload.class_name == "MessagePayload":
            await self._handle_message(payload)
            return None

        self.logger.info(
            "Webhook payload ignored",
            extra={"class_name": payload.class_name},
        )
        return None

    async def _handle_message(self, payload: ApplicationPayload) -> None:
        if not payload.user_id:
            self.logger.warning("MessagePayload without userId ignored")
            return

        command = payload.text.strip().split(" ", 1)[0].lower()
        if command == "help":
            reply_text = self._help_text()
        else:
            reply_text = "Unknown command. Type `help` to see what I can do."

        await send_message(
            self.channel,
            payload.user_id,
            reply_text,
            caller_id=payload.user_id,
        )

    def _help_text(self) -> str:
        lines = ["Available commands:"]
        lines.extend(f"`{c['name']}` - {c['description']}" for c in COMMANDS)
        return "\n".join(lines)
