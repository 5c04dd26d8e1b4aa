"""FastAPI application factory."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import CORS_ALLOW_HEADERS, CORS_ALLOW_METHODS, get_allowed_origins
from .errors import register_exception_handlers
from .routes import router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="School Portal AI Gateway")

    origins = get_allowed_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
    )
    register_exception_handlers(app)
    app.include_router(router)

    logger.info(f"App created: allowed origins={origins}")
    return app
