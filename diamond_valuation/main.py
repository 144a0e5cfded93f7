from diamond_valuation.core.config import get_settings
from diamond_valuation.core.logging import configure_logging
from diamond_valuation.core.middleware import RequestIdMiddleware
from diamond_valuation.api.v1.router import v1_router

from fastapi import FastAPI
import logging

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
    )
    # Middleware: Request ID
    app.add_middleware(RequestIdMiddleware, header_name=settings.request_id_header)

    # API v1
    app.include_router(v1_router, prefix=settings.api_prefix)

    logger.info("application configured", extra={"api_prefix": settings.api_prefix})
    return app


app = create_app()
