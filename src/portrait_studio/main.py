"""Command-line entrypoint that serves the webhook app with uvicorn."""

import logging

import uvicorn

from portrait_studio.api.app import create_app
from portrait_studio.app_logging import configure_logging
from portrait_studio.config import load_settings
from portrait_studio.containers import build_container
from portrait_studio.domain.errors import ConfigurationMissingError

logger = logging.getLogger(__name__)


def main() -> None:
    """Load settings and run the HTTP server until interrupted."""
    configure_logging()
    try:
        settings = load_settings()
    except ConfigurationMissingError as exc:
        logger.error("%s", exc)  # noqa: TRY400
        raise SystemExit(1) from exc
    configure_logging(settings.log_level)
    app = create_app(build_container(settings))
    logger.info("Server listening", extra={"port": settings.port})
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
