import importlib
import sys

import pytest


@pytest.fixture
def functions_env(monkeypatch):
    monkeypatch.setenv("ACS_CONNECTION_STRING", "endpoint=https://x.communication.azure.com/;accesskey=abc")
    monkeypatch.setenv("SENDER_EMAIL", "contact@mail.ainsemble.com")
    monkeypatch.setenv("SUBSCRIPTION_SENDER_EMAIL", "newsletter@mail.ainsemble.com")
    monkeypatch.setenv("RECIPIENT_EMAIL", "admin@ainsemble.com")
    sys.modules.pop("src.ainsemble_mail.blueprints.bp_email_api", None)
    yield monkeypatch
    sys.modules.pop("src.ainsemble_mail.blueprints.bp_email_api", None)


def test_blueprint_serves_email_api(functions_env):
    bp_email_api = importlib.import_module("src.ainsemble_mail.blueprints.bp_email_api")

    paths = {getattr(route, "path", None) for route in bp_email_api.email_api_app.routes}

    assert {"/api/subscribe", "/api/send-email", "/api/health"} <= paths
    assert bp_email_api.email_api_app.state.settings.recipient_email == "admin@ainsemble.com"


def test_blueprint_refuses_to_load_without_configuration(functions_env):
    functions_env.delenv("RECIPIENT_EMAIL")

    with pytest.raises(ValueError, match="RECIPIENT_EMAIL"):
        importlib.import_module("src.ainsemble_mail.blueprints.bp_email_api")
