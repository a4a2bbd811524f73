"""FastAPI application factory."""

import logging

import uvicorn
from fastapi import FastAPI

from apikit.api.dependencies import Responder
from apikit.api.exception_handlers import register_exception_handlers
from apikit.config import Settings, settings
from apikit.middleware.request_id import RequestIDMiddleware

logger = logging.getLogger(__name__)


def configure_logging(config: Settings = settings) -> None:
    """Plain format in dev mode, one JSON-ish line per record otherwise."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    if not config.dev_mode:
        logging.basicConfig(
            level=level,
            format='{"time":"%(asctime)s","level":"%(levelname)s","name":"%(name)s","message":"%(message)s"}',
        )
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        )


def create_app(config: Settings = settings) -> FastAPI:
    """Build an app with envelope error handling and request IDs installed."""
    app = FastAPI(
        title=config.app_title,
        docs_url="/docs" if config.dev_mode else None,
        redoc_url="/redoc" if config.dev_mode else None,
    )

    app.add_middleware(RequestIDMiddleware, header_name=config.request_id_header)
    register_exception_handlers(app)

    @app.get("/health")
    async def health_check(responder: Responder):
        """Liveness check."""
        return responder.respond_data({"status": "healthy"})

    return app


configure_logging()
app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
