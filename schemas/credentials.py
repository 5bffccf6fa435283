from pydantic import BaseModel, ConfigDict


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: str
    instance_url: str


class VerificationConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    verification_token: str
    signing_key: str
