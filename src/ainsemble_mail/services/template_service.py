"""Service for rendering the fixed email templates."""
import datetime
import logging
import pathlib

from jinja2 import Environment, FileSystemLoader, Template, TemplateError, TemplateNotFound, select_autoescape

from src.ainsemble_mail.errors import TemplateRenderError
from src.ainsemble_mail.models.email import EmailContent
from src.ainsemble_mail.models.requests import ContactRequest
from src.ainsemble_mail.utils.security import sanitize_html

TEMPLATE_DIR = pathlib.Path(__file__).parent.parent / "templates"

SUBSCRIBER_WELCOME_TEMPLATE = "subscriber_welcome"
ADMIN_SUBSCRIPTION_TEMPLATE = "admin_subscription"
CONTACT_NOTICE_TEMPLATE = "contact_notice"

SUBSCRIBER_WELCOME_SUBJECT = "Thank you for subscribing to our newsletter"
ADMIN_SUBSCRIPTION_SUBJECT = "New Newsletter Subscription"
CONTACT_SUBJECT_PREFIX = "Contact Form: "

WEBSITE_URL = "https://ainsemble.com"
NEWSLETTER_HIGHLIGHTS = [
    ("Industry Insights", "Stay updated with the latest trends and innovations"),
    ("Expert Analysis", "Get in-depth analysis from our industry experts"),
    ("Exclusive Content", "Access to premium content and resources"),
]


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def iso_timestamp(moment: datetime.datetime) -> str:
    """Formats a UTC moment as ISO-8601 with millisecond precision and a Z suffix."""
    return moment.astimezone(datetime.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TemplateService:
    """Renders plain-text and HTML bodies for the service's messages.

    Values interpolated into HTML templates must already be sanitized; the
    ``*.j2`` names keep Jinja2 autoescaping off so nothing is escaped twice.
    """

    def __init__(self, template_dir: pathlib.Path = TEMPLATE_DIR):
        if not template_dir.is_dir():
            logging.error(f"Jinja template directory not found at: {template_dir}")
            raise TemplateRenderError(f"Jinja template directory not found: {template_dir}")

        self.jinja_env: Environment = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(['html', 'xml'])
        )
        logging.info(f"Jinja2 environment loaded successfully from: {template_dir}")

    def _render(self, template_name: str, context: dict) -> str:
        try:
            template: Template = self.jinja_env.get_template(template_name)
            return template.render(context)
        except TemplateNotFound as template_err:
            logging.error(f"Template not found: {template_err}", exc_info=True)
            raise TemplateRenderError(f"Template not found: {template_name}") from template_err
        except TemplateError as render_err:
            logging.error(f"Error rendering template {template_name}: {render_err}", exc_info=True)
            raise TemplateRenderError(f"Error rendering template: {template_name}") from render_err

    def render_pair(self, base_name: str, subject: str, text_context: dict, html_context: dict) -> EmailContent:
        """
        Render the plain-text and HTML variants of one template.

        Args:
            base_name (str): template name without the ``.txt.j2`` / ``.html.j2`` suffix.
            subject (str): the message subject.
            text_context (dict): values for the plain-text body.
            html_context (dict): values for the HTML body, already sanitized.

        Returns:
            EmailContent: the rendered subject and bodies.
        """
        content = EmailContent(
            subject=subject,
            plain_text=self._render(f"{base_name}.txt.j2", text_context),
            html=self._render(f"{base_name}.html.j2", html_context),
        )
        logging.debug(f"Email template '{base_name}' rendered successfully.")
        return content

    def render_subscriber_welcome(self, now: datetime.datetime | None = None) -> EmailContent:
        """Welcome message for a new subscriber. The footer carries the current year."""
        now = now or utcnow()
        return self.render_pair(
            SUBSCRIBER_WELCOME_TEMPLATE,
            SUBSCRIBER_WELCOME_SUBJECT,
            text_context={},
            html_context={
                "year": now.year,
                "website_url": WEBSITE_URL,
                "highlights": NEWSLETTER_HIGHLIGHTS,
            },
        )

    def render_admin_subscription(self, email: str, now: datetime.datetime | None = None) -> EmailContent:
        """Notice to the admin that ``email`` subscribed."""
        now = now or utcnow()
        return self.render_pair(
            ADMIN_SUBSCRIPTION_TEMPLATE,
            ADMIN_SUBSCRIPTION_SUBJECT,
            text_context={"email": email, "timestamp": iso_timestamp(now)},
            html_context={"email": sanitize_html(email)},
        )

    def render_contact_notice(self, contact: ContactRequest) -> EmailContent:
        """
        Notice to the admin of a contact form submission.

        Args:
            contact (ContactRequest): the validated, unescaped submission.

        Returns:
            EmailContent: plain text with the raw fields, HTML with escaped fields.
        """
        raw = contact.model_dump()
        escaped = {field: sanitize_html(value) for field, value in raw.items()}
        return self.render_pair(
            CONTACT_NOTICE_TEMPLATE,
            f"{CONTACT_SUBJECT_PREFIX}{escaped['subject']}",
            text_context=raw,
            html_context=escaped,
        )
