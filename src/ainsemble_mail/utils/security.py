"""Input validation and HTML escaping for form submissions."""
import logging
import re
from typing import Any

from src.ainsemble_mail.config import MESSAGE_MAX_LENGTH, NAME_MAX_LENGTH, SUBJECT_MAX_LENGTH
from src.ainsemble_mail.errors import ValidationError
from src.ainsemble_mail.models.requests import ContactRequest, SubscriptionRequest

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# & goes first so entities added by later replacements are left alone
HTML_REPLACEMENTS = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)

CONTACT_FIELDS = ("name", "email", "subject", "message")


def validate_email(email: Any) -> bool:
    """
    Checks an address against a permissive local@domain.tld pattern.

    Args:
        email: the value to check.

    Returns:
        True if the value looks like an email address, False otherwise.
    """
    if not isinstance(email, str):
        return False
    return EMAIL_PATTERN.fullmatch(email) is not None


def sanitize_html(value: str) -> str:
    """
    Escapes HTML-reserved characters. Not idempotent: escape each value once.

    Args:
        value: the raw user-supplied string.

    Returns:
        The escaped string.
    """
    for char, entity in HTML_REPLACEMENTS:
        value = value.replace(char, entity)
    return value


def mask_email(email: Any) -> str:
    """Masks an address for logging."""
    if not isinstance(email, str):
        return "undefined..."
    return f"{email[:5]}..."


def text_length(value: str) -> int:
    """Length in UTF-16 code units, so characters outside the BMP count twice."""
    return len(value.encode("utf-16-le", "surrogatepass")) // 2


def _string_field(payload: dict, field: str) -> str | None:
    value = payload.get(field)
    if not isinstance(value, str) or not value:
        return None
    return value


def validate_subscription(payload: dict) -> SubscriptionRequest:
    """
    Validates a newsletter subscription body.

    Raises:
        ValidationError: if the email is missing or malformed.
    """
    email = _string_field(payload, "email")
    if not email or not validate_email(email):
        logging.info(f"Invalid subscription email: {mask_email(payload.get('email'))}")
        raise ValidationError("Please provide a valid email address")
    return SubscriptionRequest(email=email)


def validate_contact(payload: dict) -> ContactRequest:
    """
    Validates a contact form body. Checks run in a fixed order and the first failure wins.

    Args:
        payload (dict): the decoded JSON body.

    Returns:
        ContactRequest: the validated submission.

    Raises:
        ValidationError: on a missing field, a length overrun or a malformed email.
    """
    fields = {field: _string_field(payload, field) for field in CONTACT_FIELDS}
    if not all(fields.values()):
        raise ValidationError("All fields (name, email, subject, message) are required")

    if text_length(fields["name"]) > NAME_MAX_LENGTH:
        raise ValidationError(f"Name must be less than {NAME_MAX_LENGTH} characters")

    if text_length(fields["subject"]) > SUBJECT_MAX_LENGTH:
        raise ValidationError(f"Subject must be less than {SUBJECT_MAX_LENGTH} characters")

    if not validate_email(fields["email"]):
        raise ValidationError("Invalid email format")

    if text_length(fields["message"]) > MESSAGE_MAX_LENGTH:  # spam guard
        raise ValidationError(f"Message must be less than {MESSAGE_MAX_LENGTH} characters")

    return ContactRequest(**fields)
