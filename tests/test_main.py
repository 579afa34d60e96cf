import importlib

entry_point = importlib.import_module("src.ainsemble_mail.__main__")


def test_main_exits_non_zero_without_configuration(monkeypatch):
    for name in ("ACS_CONNECTION_STRING", "AZURE_EMAIL_CONNECTION_STRING", "ACS_ENDPOINT", "SENDER_EMAIL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(entry_point.uvicorn, "run", lambda *args, **kwargs: None)

    assert entry_point.main() == 1


def test_main_serves_on_configured_port(monkeypatch):
    monkeypatch.setenv("ACS_CONNECTION_STRING", "endpoint=https://x.communication.azure.com/;accesskey=abc")
    monkeypatch.setenv("SENDER_EMAIL", "contact@mail.ainsemble.com")
    monkeypatch.setenv("SUBSCRIPTION_SENDER_EMAIL", "newsletter@mail.ainsemble.com")
    monkeypatch.setenv("RECIPIENT_EMAIL", "admin@ainsemble.com")
    monkeypatch.setenv("PORT", "4010")
    calls = []
    monkeypatch.setattr(entry_point.uvicorn, "run", lambda app, **kwargs: calls.append(kwargs))

    assert entry_point.main() == 0
    assert calls[0]["port"] == 4010
