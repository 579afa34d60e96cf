"""Run the email API standalone with uvicorn: ``python -m src.ainsemble_mail``."""
import logging
import sys

import uvicorn

from src.ainsemble_mail.api.main import create_app
from src.ainsemble_mail.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """Root logger setup for running outside the Functions host."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


def main() -> int:
    configure_logging()

    try:
        settings = Settings.from_env()
    except ValueError as config_err:
        logging.error(f"Error: {config_err}")
        return 1

    app = create_app(settings)
    logging.info(f"Email server is running on port {settings.port}")
    logging.info(f"Health check available at http://localhost:{settings.port}/api/health")
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
