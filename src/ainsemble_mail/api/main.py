"""FastAPI app for the Ainsemble contact form and newsletter endpoints."""
import json
import logging

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.ainsemble_mail.api.dependencies import get_dispatcher, get_settings, get_template_service
from src.ainsemble_mail.api.rate_limit import client_address, forwarded_client_address, per_client_limiter
from src.ainsemble_mail.config import Settings
from src.ainsemble_mail.errors import MailServiceError, classify_provider_error, error_details
from src.ainsemble_mail.models.email import DeliveryResult, EmailMessage
from src.ainsemble_mail.models.responses import (
    ErrorResponse, HealthResponse, SendEmailResponse, SubscribeResponse
)
from src.ainsemble_mail.services.email_dispatcher import EmailDispatcher
from src.ainsemble_mail.services.template_service import TemplateService, utcnow, iso_timestamp
from src.ainsemble_mail.utils.security import mask_email, validate_contact, validate_subscription

INTERNAL_ERROR_MESSAGE = "Internal server error"
SUBSCRIBE_FAILED_MESSAGE = "Failed to process subscription. Please try again later."
SUBSCRIBE_SUCCESS_MESSAGE = "Subscription successful! You will receive a confirmation email shortly."
HEALTH_MESSAGE = "Email service is running"

router = APIRouter(prefix="/api")


def _error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=headers,
    )


async def _read_json(request: Request) -> dict:
    """Decoded JSON object body; anything else counts as an empty form."""
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logging.warning("Request body is not valid JSON.")
        return {}
    return payload if isinstance(payload, dict) else {}


@router.post("/subscribe", response_model=SubscribeResponse)
async def subscribe(
    request: Request,
    settings: Settings = Depends(get_settings),
    dispatcher: EmailDispatcher = Depends(get_dispatcher),
    template_service: TemplateService = Depends(get_template_service),
) -> SubscribeResponse | JSONResponse:
    """
    Newsletter subscription: confirm to the subscriber, then notify the admin.

    Args:
        request (Request): body ``{"email": "..."}``
        settings (Settings): the application settings
        dispatcher (EmailDispatcher): the email dispatcher
        template_service (TemplateService): the template renderer

    Returns:
        SubscribeResponse: success only when both messages were delivered.
    """
    payload = await _read_json(request)
    logging.info(f"Received subscription request: {mask_email(payload.get('email'))}")

    subscription = validate_subscription(payload)

    subscriber_result: DeliveryResult | None = None
    try:
        welcome = EmailMessage.compose(
            sender_address=settings.subscription_sender_email,
            content=template_service.render_subscriber_welcome(),
            recipients=[subscription.email],
        )
        logging.info(f"Sending subscription confirmation to: {mask_email(subscription.email)}")
        subscriber_result = await run_in_threadpool(dispatcher.send, welcome)
        logging.info(
            f"Subscription confirmation sent successfully: "
            f"messageId={subscriber_result.id}, status={subscriber_result.status}"
        )

        admin_notice = EmailMessage.compose(
            sender_address=settings.subscription_sender_email,
            content=template_service.render_admin_subscription(subscription.email),
            recipients=[settings.recipient_email],
        )
        logging.info("Sending admin notification")
        admin_result: DeliveryResult = await run_in_threadpool(dispatcher.send, admin_notice)
        logging.info(
            f"Admin notification sent successfully: messageId={admin_result.id}, status={admin_result.status}"
        )
    except Exception as send_err:
        if subscriber_result is not None:
            # subscriber already has the confirmation; a client retry will send it again
            logging.error(
                f"Admin notification failed after confirmation {subscriber_result.id} was delivered: "
                f"{error_details(send_err)}"
            )
        logging.error(f"Error in /api/subscribe: {send_err}", exc_info=True)
        return _error_response(500, SUBSCRIBE_FAILED_MESSAGE)

    return SubscribeResponse(message=SUBSCRIBE_SUCCESS_MESSAGE)


@router.post("/send-email", response_model=SendEmailResponse)
async def send_email(
    request: Request,
    settings: Settings = Depends(get_settings),
    dispatcher: EmailDispatcher = Depends(get_dispatcher),
    template_service: TemplateService = Depends(get_template_service),
) -> SendEmailResponse | JSONResponse:
    """
    Contact form: forward the submission to the admin mailbox.

    Args:
        request (Request): body ``{"name", "email", "subject", "message"}``
        settings (Settings): the application settings
        dispatcher (EmailDispatcher): the email dispatcher
        template_service (TemplateService): the template renderer

    Returns:
        SendEmailResponse: the provider message id and final status.
    """
    payload = await _read_json(request)
    logging.info(
        f"Received email request: name={payload.get('name')!r}, "
        f"email={mask_email(payload.get('email'))}, subject={payload.get('subject')!r}"
    )

    contact = validate_contact(payload)

    message = EmailMessage.compose(
        sender_address=settings.sender_email,
        content=template_service.render_contact_notice(contact),
        recipients=[settings.recipient_email],
    )

    try:
        logging.info("Attempting to send email...")
        result: DeliveryResult = await run_in_threadpool(dispatcher.send, message)
    except Exception as send_err:
        logging.error(f"Error in /api/send-email: {send_err}", exc_info=True)
        logging.error(f"Error details: {error_details(send_err)}")
        classified = classify_provider_error(send_err)
        return _error_response(500, classified.message)

    logging.info(f"Email sent successfully: id={result.id}, status={result.status}")
    return SendEmailResponse(messageId=result.id, status=result.status)


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness check; never touches the provider."""
    return HealthResponse(message=HEALTH_MESSAGE, timestamp=iso_timestamp(utcnow()))


def create_app(
    settings: Settings,
    dispatcher: EmailDispatcher | None = None,
    template_service: TemplateService | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings (Settings): the validated settings
        dispatcher (EmailDispatcher | None): dispatcher to use, built from settings when omitted
        template_service (TemplateService | None): renderer to use, built when omitted

    Returns:
        FastAPI: the configured application
    """
    rate_limit = per_client_limiter(
        limit=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
        identifier_fn=forwarded_client_address if settings.trust_forwarded_for else client_address,
    )

    # noinspection PyArgumentEqualDefault
    app = FastAPI(
        title="Ainsemble Mail Service",
        description="Contact form and newsletter subscription email API",
        version="1.0.0",
        dependencies=[Depends(rate_limit)],
    )
    app.state.settings = settings
    app.state.dispatcher = dispatcher or EmailDispatcher(settings)
    app.state.template_service = template_service or TemplateService()
    app.state.rate_limit = rate_limit

    @app.exception_handler(MailServiceError)
    async def mail_service_error_handler(request: Request, exc: MailServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            logging.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
        return _error_response(exc.status_code, exc.message if exc.expose else INTERNAL_ERROR_MESSAGE)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.middleware("http")
    async def catch_unhandled_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as unhandled:
            logging.exception(f"Unhandled error: {unhandled}")
            return _error_response(500, INTERNAL_ERROR_MESSAGE)

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.include_router(router)

    return app
