from .credentials import Credentials, VerificationConfig
from .message import ApplicationPayload, MessageBody, MessageContext, OutboundMessage
