"""Service for sending emails using Azure Communication Service (ACS)."""
import logging
import uuid

from azure.communication.email import EmailClient
from azure.core.exceptions import HttpResponseError, ServiceRequestError
from azure.identity import DefaultAzureCredential

from src.ainsemble_mail.config import Settings
from src.ainsemble_mail.errors import DeliveryFailedError, DeliveryTimeoutError
from src.ainsemble_mail.models.email import DeliveryResult, EmailMessage

SUCCEEDED_STATUS = "succeeded"
SKIPPED_STATUS = "Skipped"


def create_email_client(settings: Settings) -> EmailClient:
    """
    Create an email client using the Azure Communication Service (ACS) connection string or endpoint.

    Args:
        settings (Settings): the application settings.

    Returns:
        EmailClient: The initialized email client.
    """
    if settings.acs_connection_string:
        logging.debug("Using ACS Connection String.")
        email_client: EmailClient = EmailClient.from_connection_string(settings.acs_connection_string)
    else:
        logging.debug("Using ACS Endpoint and DefaultAzureCredential.")
        credential: DefaultAzureCredential = DefaultAzureCredential()
        # noinspection PyTypeChecker
        email_client: EmailClient = EmailClient(endpoint=settings.acs_endpoint, credential=credential)

    logging.info("EmailClient initialized successfully")
    return email_client


class EmailDispatcher:
    """Hands composed messages to ACS and waits for a terminal delivery status."""

    def __init__(self, settings: Settings, email_client: EmailClient | None = None):
        self.settings = settings
        self._email_client = email_client

    @property
    def email_client(self) -> EmailClient:
        """The ACS client, created on first use."""
        if self._email_client is None:
            self._email_client = create_email_client(self.settings)
        return self._email_client

    def send(self, message: EmailMessage) -> DeliveryResult:
        """
        Send a message and block until ACS reports a terminal status.

        Args:
            message (EmailMessage): the message to send.

        Returns:
            DeliveryResult: the message id and final status.

        Raises:
            DeliveryTimeoutError: if the poller is not done within the configured timeout.
            DeliveryFailedError: if the send finished with a status other than Succeeded.
            HttpResponseError | ServiceRequestError: provider errors, unchanged.
        """
        recipients = list(message.recipients)

        if self.settings.disable_email:
            logging.warning(f"Email disabled; not sending '{message.subject}' to {recipients}.")
            return DeliveryResult(id=str(uuid.uuid4()), status=SKIPPED_STATUS)

        timeout = self.settings.poll_timeout_seconds
        try:
            logging.info(f"Sending email to {recipients} via ACS.")
            poller = self.email_client.begin_send(message.to_acs_payload())
            logging.info("Email send initiated, waiting for completion...")

            poller.wait(timeout=timeout)
            if not poller.done():
                logging.error(f"ACS send poller did not finish within {timeout} seconds.")
                raise DeliveryTimeoutError()

            send_result = poller.result()
            logging.info("ACS send poller finished.")
        except (HttpResponseError, ServiceRequestError) as acs_sdk_err:
            logging.exception(f"Azure SDK Error sending email via ACS: {acs_sdk_err}")
            raise
        except DeliveryTimeoutError:
            raise
        except Exception as email_err:
            logging.exception(f"Failed to send email via ACS: {email_err}")
            raise

        status = send_result.get('status') if isinstance(send_result, dict) else None
        message_id = send_result.get('id') if isinstance(send_result, dict) else None

        if not status or status.lower() != SUCCEEDED_STATUS:
            error_details = send_result.get('error', {}) if isinstance(send_result, dict) else send_result
            logging.error(
                f"ACS Email send finished with status: {status}. Message ID: {message_id}. Details: "
                f"{error_details}"
            )
            raise DeliveryFailedError(message_id=message_id, status=status)

        logging.info(f"Successfully sent email via ACS. Message ID: {message_id}, status: {status}")
        return DeliveryResult(id=message_id, status=status)
