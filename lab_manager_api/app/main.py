"""
Main entrypoint for the Lab Manager API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``, so it can be served directly::

    uvicorn lab_manager_api.app.main:app --reload

On startup the JSON snapshot is loaded into the entity store.  When
no snapshot exists yet and ``SEED_ON_EMPTY`` is enabled, the
illustrative dataset is loaded so a fresh deployment has something to
show.
"""

import logging

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.logging_config import setup_logging
from .core.store import init_store
from .services.data_service import DataService

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging()

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        store = init_store()
        if not store.snapshot_found and settings.seed_on_empty:
            logger.info("No lab data found, loading seed data")
            await DataService.load_seed_data(store)

    return app


app = create_app()
