from typing import Optional


class AuthConfigError(RuntimeError):
    """Credentials or instance URL are missing or malformed."""


class AuthTokenError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidKeyError(ValueError):
    """Signing key cannot be used to initialize HMAC-SHA256."""


class InvalidRecipientError(ValueError):
    pass


class SendError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail
