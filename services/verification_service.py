import hashlib
import hmac
import logging
from collections.abc import Mapping
from typing import Any, Union

from core.errors import InvalidKeyError
from schemas.credentials import VerificationConfig

logger = logging.getLogger(__name__)


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8", "surrogatepass")


def to_hex(digest: bytes) -> str:
    return "".join(f"{byte:02x}" for byte in digest)


def hmac_hex(key: str, message: Union[str, bytes]) -> str:
    """
    HMAC-SHA256 of ``message`` under ``key`` as lower-case hex.

    Always 64 characters; leading zero bytes keep their two digits.
    """
    if not key:
        raise InvalidKeyError("Signing key must not be empty")
    try:
        key_bytes = key.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidKeyError("Signing key is not encodable as UTF-8") from exc

    return to_hex(hmac.new(key_bytes, _to_bytes(message), hashlib.sha256).digest())


def _equals(expected: str, provided: str) -> bool:
    return hmac.compare_digest(_to_bytes(expected), _to_bytes(provided))


class RequestVerifier:
    def __init__(self, config: VerificationConfig):
        self.verification_token = config.verification_token
        self.signing_key = config.signing_key

    def verify_token(self, payload: Any) -> bool:
        """
        Compare the ``verificationToken`` Space embeds in the payload with the
        configured one. A payload without a string token is rejected.
        """
        if not isinstance(payload, Mapping):
            logger.info("Verification token check rejected non-object payload")
            return False

        token = payload.get("verificationToken")
        if not isinstance(token, str):
            logger.info("Verification token missing from payload")
            return False

        return _equals(self.verification_token, token)

    def verify_signature(self, timestamp: str, signature: str, body: Union[str, bytes]) -> bool:
        """
        Recompute HMAC-SHA256 over ``"<timestamp>:<body>"`` with the signing
        key and compare it with the signature Space sent. ``body`` may be the raw
        request bytes.
        """
        expected = hmac_hex(self.signing_key, _to_bytes(f"{timestamp}:") + _to_bytes(body))
        return _equals(expected, signature)
