"""Exceptions raised by the mail service and provider error classification."""
import logging
from typing import Any


class MailServiceError(Exception):
    """Base class for service errors. Only errors with ``expose`` set show their message to clients."""
    status_code: int = 500
    default_message: str = "Internal server error"
    expose: bool = False

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MailServiceError):
    """Client submitted missing or malformed fields."""
    status_code = 400
    default_message = "Invalid request"
    expose = True


class TemplateRenderError(MailServiceError):
    """An email template could not be loaded or rendered."""


class DeliveryTimeoutError(MailServiceError):
    """The send operation did not reach a terminal state in time."""
    default_message = "Email send did not complete in time"


class DeliveryFailedError(MailServiceError):
    """The send operation finished in a non-successful terminal state."""

    def __init__(self, message_id: str | None, status: str | None):
        self.message_id = message_id
        self.status = status
        super().__init__(f"ACS email send failed with status {status}")


class ProviderError(MailServiceError):
    """A send failure mapped to a generic, user-facing message."""
    default_message = "Failed to send email. Please try again later."
    expose = True

    def __init__(self, cause: BaseException | None = None):
        self.cause = cause
        super().__init__()


class ProviderAuthError(ProviderError):
    default_message = "Email service configuration error. Please contact support."


class ProviderRequestError(ProviderError):
    default_message = "Invalid email request. Please check your input."


class DomainConfigError(ProviderError):
    default_message = "Email domain configuration error. Please contact support."


class UnclassifiedProviderError(ProviderError):
    pass


def _error_code(exc: BaseException) -> Any:
    code = getattr(exc, "code", None)
    if code is None:
        # azure-core HttpResponseError keeps the service error under .error
        odata_error = getattr(exc, "error", None)
        code = getattr(odata_error, "code", None)
    return code


def _status_code(exc: BaseException) -> Any:
    status_code = getattr(exc, "status_code", None)
    if status_code is None:
        status_code = getattr(exc, "statusCode", None)
    return status_code


def _error_message(exc: BaseException) -> str:
    message = getattr(exc, "message", None)
    if not isinstance(message, str):
        message = str(exc)
    return message


def error_details(exc: BaseException) -> dict[str, Any]:
    """Structured context for logging a provider failure."""
    return {
        "message": _error_message(exc),
        "name": type(exc).__name__,
        "code": _error_code(exc),
        "statusCode": _status_code(exc),
    }


def classify_provider_error(exc: BaseException) -> ProviderError:
    """
    Map a dispatch failure to the error class whose message is shown to clients.

    Args:
        exc (BaseException): the error raised while sending.

    Returns:
        ProviderError: the classified error, with the original kept as its cause.
    """
    if isinstance(exc, ProviderError):
        return exc

    code = _error_code(exc)
    status_code = _status_code(exc)
    message = _error_message(exc)

    if code == "Unauthorized":
        classified: ProviderError = ProviderAuthError(exc)
    elif code == "InvalidRequest" or status_code == 400:
        classified = ProviderRequestError(exc)
    elif message and "domain" in message:
        classified = DomainConfigError(exc)
    else:
        classified = UnclassifiedProviderError(exc)

    logging.debug(f"Classified {type(exc).__name__} as {type(classified).__name__}")
    return classified
