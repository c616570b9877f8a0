"""precisely API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure to {"error": message}
    - The store handle is opened in the lifespan and disposed on shutdown;
      both steps are bounded by store_connect_timeout_seconds
    - A store that cannot be reached at startup aborts startup

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - IndentedJSONResponse as default response class: bodies are pretty-printed
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from precisely.api.error_handlers import register_error_handlers
from precisely.api.responses import IndentedJSONResponse
from precisely.api.routes import documents, health
from precisely.config import SERVICE_VERSION, get_settings
from precisely.infrastructure.database import close_db, init_db
from precisely.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        connect_timeout=settings.store_connect_timeout_seconds,
    )
    await manager.connect(create_tables=settings.create_tables_on_startup)
    logger.info("precisely API started")
    try:
        yield
    finally:
        logger.info("precisely API shutting down")
        await close_db()


app = FastAPI(
    title="precisely API", version=SERVICE_VERSION, lifespan=lifespan,
    default_response_class=IndentedJSONResponse,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(documents.router)

register_error_handlers(app)
