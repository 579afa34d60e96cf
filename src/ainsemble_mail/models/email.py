"""Pydantic models for outbound email."""
from pydantic import BaseModel, ConfigDict


class EmailContent(BaseModel):
    """Rendered subject and bodies for one message."""
    subject: str
    plain_text: str
    html: str


class EmailMessage(BaseModel):
    """Represents a single message handed to Azure Communication Services."""
    model_config = ConfigDict(frozen=True)

    sender_address: str
    subject: str
    plain_text: str
    html: str
    recipients: tuple[str, ...]

    @classmethod
    def compose(cls, sender_address: str, content: EmailContent, recipients: list[str]) -> "EmailMessage":
        """Builds a message from rendered content."""
        return cls(
            sender_address=sender_address,
            subject=content.subject,
            plain_text=content.plain_text,
            html=content.html,
            recipients=tuple(recipients),
        )

    def to_acs_payload(self) -> dict:
        """
        Convert the message to the dictionary accepted by EmailClient.begin_send.

        Returns:
            dict: the ACS message payload, recipients in their original order.
        """
        return {
            "senderAddress": self.sender_address,
            "content": {
                "subject": self.subject,
                "plainText": self.plain_text,
                "html": self.html,
            },
            "recipients": {
                "to": [{"address": address} for address in self.recipients],
            },
        }


class DeliveryResult(BaseModel):
    """Final state of a send operation."""
    id: str | None = None
    status: str
