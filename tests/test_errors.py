from azure.core.exceptions import HttpResponseError, ServiceRequestError

from src.ainsemble_mail.errors import (
    DeliveryTimeoutError, DomainConfigError, ProviderAuthError, ProviderRequestError,
    UnclassifiedProviderError, classify_provider_error, error_details,
)
from tests.fakes import ProviderFailure


def test_unauthorized_code_maps_to_configuration_error():
    classified = classify_provider_error(ProviderFailure("Access key is invalid", code="Unauthorized"))

    assert isinstance(classified, ProviderAuthError)
    assert classified.message == "Email service configuration error. Please contact support."
    assert classified.status_code == 500


def test_invalid_request_code_or_http_400_maps_to_request_error():
    assert isinstance(classify_provider_error(ProviderFailure(code="InvalidRequest")), ProviderRequestError)
    assert isinstance(classify_provider_error(ProviderFailure(status_code=400)), ProviderRequestError)
    assert classify_provider_error(ProviderFailure(status_code=400)).message == (
        "Invalid email request. Please check your input."
    )


def test_domain_in_message_maps_to_domain_error():
    classified = classify_provider_error(HttpResponseError(message="Sender domain has not been linked"))

    assert isinstance(classified, DomainConfigError)
    assert classified.message == "Email domain configuration error. Please contact support."


def test_code_takes_precedence_over_message():
    classified = classify_provider_error(ProviderFailure("domain mismatch", code="Unauthorized"))

    assert isinstance(classified, ProviderAuthError)


def test_anything_else_is_unclassified():
    for error in (ServiceRequestError("connection reset"), DeliveryTimeoutError(), RuntimeError("boom")):
        classified = classify_provider_error(error)
        assert isinstance(classified, UnclassifiedProviderError)
        assert classified.message == "Failed to send email. Please try again later."
        assert classified.cause is error


def test_already_classified_errors_pass_through():
    error = ProviderAuthError()
    assert classify_provider_error(error) is error


def test_error_details():
    details = error_details(ProviderFailure("nope", code="Unauthorized", status_code=401))

    assert details == {"message": "nope", "name": "ProviderFailure", "code": "Unauthorized", "statusCode": 401}
