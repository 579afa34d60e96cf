"""Substitutes for the dispatcher and provider errors."""
from src.ainsemble_mail.models.email import DeliveryResult, EmailMessage

ADMIN_EMAIL = "admin@ainsemble.com"
CONTACT_SENDER = "contact@mail.ainsemble.com"
SUBSCRIPTION_SENDER = "newsletter@mail.ainsemble.com"


class ProviderFailure(Exception):
    """Stands in for an ACS error carrying a code and HTTP status."""

    def __init__(self, message="", code=None, status_code=None):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class FakeDispatcher:
    def __init__(self, error=None, fail_on_call=None):
        self.error = error
        self.fail_on_call = fail_on_call
        self.sent: list[EmailMessage] = []

    def send(self, message: EmailMessage) -> DeliveryResult:
        self.sent.append(message)
        if self.error and (self.fail_on_call is None or len(self.sent) == self.fail_on_call):
            raise self.error
        return DeliveryResult(id=f"msg-{len(self.sent)}", status="Succeeded")
