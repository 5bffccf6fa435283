from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class MessageBody(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    class_name: Optional[str] = Field(None, alias="className")
    text: Optional[str] = None


class MessageContext(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    message_id: Optional[str] = Field(None, alias="messageId")
    body: Optional[MessageBody] = None


class ApplicationPayload(BaseModel):
    """Request body Space posts to the application endpoint."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    class_name: str = Field(..., alias="className")
    verification_token: Optional[str] = Field(None, alias="verificationToken")
    user_id: Optional[str] = Field(None, alias="userId")
    message: Optional[MessageContext] = None

    @property
    def text(self) -> str:
        if self.message and self.message.body and self.message.body.text:
            return self.message.body.text
        return ""


class OutboundMessage(BaseModel):
    recipient_user_id: str
    content: str

    def to_request_body(self) -> Dict[str, Any]:
        return {
            "recipient": {
                "className": "MessageRecipient.Member",
                "member": f"id:{self.recipient_user_id}",
            },
            "content": {
                "className": "ChatMessage.Text",
                "text": self.content,
            },
        }
