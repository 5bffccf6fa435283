from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from core.errors import AuthConfigError
from schemas.credentials import Credentials, VerificationConfig

class Settings(BaseSettings):
    port: int = Field(8000, alias="PORT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    space_instance_url: Optional[str] = Field(None, alias="SPACE_INSTANCE_URL")
    space_client_id: Optional[str] = Field(None, alias="SPACE_CLIENT_ID")
    space_client_secret: Optional[str] = Field(None, alias="SPACE_CLIENT_SECRET")

    space_verification_token: Optional[str] = Field(None, alias="SPACE_VERIFICATION_TOKEN")
    space_signing_key: Optional[str] = Field(None, alias="SPACE_SIGNING_KEY")
    space_verification_mode: Literal["signature", "token"] = Field("signature", alias="SPACE_VERIFICATION_MODE")
    space_signature_max_age_seconds: Optional[int] = Field(None, alias="SPACE_SIGNATURE_MAX_AGE_SECONDS")

    http_timeout_seconds: float = Field(15.0, alias="HTTP_TIMEOUT_SECONDS")
    http_connect_timeout_seconds: float = Field(5.0, alias="HTTP_CONNECT_TIMEOUT_SECONDS")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        case_sensitive=True,
    )

    def validate_runtime(self) -> None:
        self.require_credentials()
        self.require_verification()

    def require_credentials(self) -> Credentials:
        missing: list[str] = []
        if not self.space_instance_url:
            missing.append("SPACE_INSTANCE_URL")
        if not self.space_client_id:
            missing.append("SPACE_CLIENT_ID")
        if not self.space_client_secret:
            missing.append("SPACE_CLIENT_SECRET")

        if missing:
            raise AuthConfigError(f"Space credentials missing: {', '.join(missing)}")

        return Credentials(
            client_id=self.space_client_id,
            client_secret=self.space_client_secret,
            instance_url=self.space_instance_url,
        )

    def require_verification(self) -> VerificationConfig:
        missing: list[str] = []
        if not self.space_verification_token:
            missing.append("SPACE_VERIFICATION_TOKEN")
        if not self.space_signing_key:
            missing.append("SPACE_SIGNING_KEY")

        if missing:
            raise AuthConfigError(f"Space verification config missing: {', '.join(missing)}")

        return VerificationConfig(
            verification_token=self.space_verification_token,
            signing_key=self.space_signing_key,
        )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

settings = Settings()
