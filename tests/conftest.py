from pathlib import Path

import sys

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.ainsemble_mail.api.main import create_app
from src.ainsemble_mail.config import Settings
from tests.fakes import ADMIN_EMAIL, CONTACT_SENDER, SUBSCRIPTION_SENDER, FakeDispatcher


@pytest.fixture
def settings() -> Settings:
    return Settings(
        acs_connection_string="endpoint=https://ainsemble.communication.azure.com/;accesskey=c2VjcmV0",
        sender_email=CONTACT_SENDER,
        subscription_sender_email=SUBSCRIPTION_SENDER,
        recipient_email=ADMIN_EMAIL,
    )


@pytest.fixture
def dispatcher() -> FakeDispatcher:
    return FakeDispatcher()


@pytest.fixture
def client(settings, dispatcher):
    app = create_app(settings, dispatcher=dispatcher)
    test_client = TestClient(app)
    yield test_client
    test_client.close()
