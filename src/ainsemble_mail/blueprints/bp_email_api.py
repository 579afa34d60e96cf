"""Blueprint serving the email FastAPI app through Azure Functions"""
import azure.functions as func
from azure.functions import AsgiMiddleware

from src.ainsemble_mail.api.main import create_app
from src.ainsemble_mail.config import Settings

email_api_app = create_app(Settings.from_env())

bp = func.Blueprint()


@bp.route(
    route="{*remaining_path}",
    methods=[
        func.HttpMethod.GET,
        func.HttpMethod.POST,
        func.HttpMethod.OPTIONS,
    ],
    auth_level=func.AuthLevel.ANONYMOUS
)
async def EmailApi(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """
    Forward contact form, subscription and health requests to the FastAPI app.

    Args:
        req (func.HttpRequest): the request object
        context (func.Context): the context object

    Returns:
        func.HttpResponse: the response object
    """
    return await AsgiMiddleware(email_api_app).handle_async(req, context)
