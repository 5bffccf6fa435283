"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from schemas.credentials import Credentials, VerificationConfig


SIGNING_KEY = "23f4245714ea018a3b73f8b2731e241d0acee4f098ed14b6c2b1cafdd5d41ee8"
VERIFICATION_TOKEN = "d415ca5965b37f4f0cac59fd33de7b94e396284e897d0fb8a070d0a5e1b7f2d3"
INSTANCE_URL = "https://example.jetbrains.space"


@pytest.fixture
def verification_config():
    return VerificationConfig(
        verification_token=VERIFICATION_TOKEN,
        signing_key=SIGNING_KEY,
    )


@pytest.fixture
def credentials():
    return Credentials(
        client_id="client-id",
        client_secret="client-secret",
        instance_url=INSTANCE_URL,
    )
