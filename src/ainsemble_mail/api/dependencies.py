"""Dependencies for the HTTP handlers."""
from fastapi import Request

from src.ainsemble_mail.config import Settings
from src.ainsemble_mail.services.email_dispatcher import EmailDispatcher
from src.ainsemble_mail.services.template_service import TemplateService


def get_settings(request: Request) -> Settings:
    """Function to get the application settings."""
    return request.app.state.settings


def get_dispatcher(request: Request) -> EmailDispatcher:
    """Function to get the email dispatcher."""
    return request.app.state.dispatcher


def get_template_service(request: Request) -> TemplateService:
    """Function to get the template renderer."""
    return request.app.state.template_service
