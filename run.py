"""Entry point for the lab manager service.

Serves the FastAPI application with Uvicorn.  It is intended to be
executed from the project root, for example in Docker, where you only
specify a single Python file to run.

Host, port and all other settings are read from environment variables;
see ``lab_manager_api/app/core/config.py`` for the supported names.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from lab_manager_api.app.core.config import settings
from lab_manager_api.app.main import app


async def main() -> None:
    """Start the API using Uvicorn."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
