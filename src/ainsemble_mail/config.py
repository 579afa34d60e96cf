"""Configuration for the Ainsemble mail service."""
import logging
import os

from pydantic import BaseModel, ConfigDict


def _get_required_env(var_name: str) -> str:
    """Gets a required environment variable or raises a ValueError."""
    value = os.getenv(var_name)
    if not value:
        raise ValueError(f"Missing required environment variable: '{var_name}'")
    return value


def _get_bool_env(var_name: str) -> bool:
    """Reads a true/false flag from the environment."""
    setting: str | None = os.environ.get(var_name)
    return bool(setting) and setting.strip().lower() in ("true", "1", "yes", "on")


# --- Fixed application settings ---
DEFAULT_PORT = 3001
DEFAULT_POLL_TIMEOUT_SECONDS = 60
RATE_LIMIT_MAX_REQUESTS = 100
RATE_LIMIT_WINDOW_SECONDS = 15 * 60

NAME_MAX_LENGTH = 100
SUBJECT_MAX_LENGTH = 200
MESSAGE_MAX_LENGTH = 2000


class Settings(BaseModel):
    """Validated process configuration, built once at startup."""
    model_config = ConfigDict(frozen=True)

    acs_connection_string: str | None = None
    acs_endpoint: str | None = None
    sender_email: str
    subscription_sender_email: str
    recipient_email: str
    port: int = DEFAULT_PORT
    poll_timeout_seconds: float = DEFAULT_POLL_TIMEOUT_SECONDS
    rate_limit_max_requests: int = RATE_LIMIT_MAX_REQUESTS
    rate_limit_window_seconds: int = RATE_LIMIT_WINDOW_SECONDS
    disable_email: bool = False
    trust_forwarded_for: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Returns:
            Settings: the validated settings.

        Raises:
            ValueError: if a required variable is missing.
        """
        # --- Azure Communication Services (one of the two is required) ---
        acs_connection_string: str | None = (
            os.getenv("ACS_CONNECTION_STRING") or os.getenv("AZURE_EMAIL_CONNECTION_STRING") or None
        )
        acs_endpoint: str | None = os.getenv("ACS_ENDPOINT") or None
        if not acs_connection_string and not acs_endpoint:
            raise ValueError(
                "Missing required environment variable: 'ACS_CONNECTION_STRING' (or 'ACS_ENDPOINT')"
            )

        settings = cls(
            acs_connection_string=acs_connection_string,
            acs_endpoint=acs_endpoint,
            sender_email=_get_required_env("SENDER_EMAIL"),
            subscription_sender_email=_get_required_env("SUBSCRIPTION_SENDER_EMAIL"),
            recipient_email=_get_required_env("RECIPIENT_EMAIL"),
            port=int(os.getenv("PORT") or DEFAULT_PORT),
            poll_timeout_seconds=float(os.getenv("ACS_POLL_TIMEOUT_SECONDS") or DEFAULT_POLL_TIMEOUT_SECONDS),
            rate_limit_max_requests=int(os.getenv("RATE_LIMIT_MAX_REQUESTS") or RATE_LIMIT_MAX_REQUESTS),
            rate_limit_window_seconds=int(os.getenv("RATE_LIMIT_WINDOW_SECONDS") or RATE_LIMIT_WINDOW_SECONDS),
            disable_email=_get_bool_env("DISABLE_EMAIL"),
            trust_forwarded_for=_get_bool_env("TRUST_FORWARDED_FOR"),
        )
        settings.log_summary()
        return settings

    def log_summary(self) -> None:
        """Logs which settings are present without exposing their values."""
        logging.info("Environment variables check:")
        logging.info(f"ACS_CONNECTION_STRING: {'Present' if self.acs_connection_string else 'Missing'}")
        logging.info(f"ACS_ENDPOINT: {'Present' if self.acs_endpoint else 'Missing'}")
        logging.info(f"SENDER_EMAIL: {'Present' if self.sender_email else 'Missing'}")
        logging.info(f"SUBSCRIPTION_SENDER_EMAIL: {'Present' if self.subscription_sender_email else 'Missing'}")
        logging.info(f"RECIPIENT_EMAIL: {'Present' if self.recipient_email else 'Missing'}")
        logging.info(f"PORT: {self.port}")
        if self.disable_email:
            logging.warning("DISABLE_EMAIL is set; messages will not be sent to ACS.")
