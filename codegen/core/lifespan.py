"""Service lifespan: startup and shutdown.

Single place for startup/shutdown wiring (logging, telemetry, DB engine).
No business logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from codegen.infrastructure.persistence import database
from codegen.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: logging, SQL instrumentation when telemetry and a database are
    both configured. Shutdown: telemetry flush, engine dispose.
    """
    setup_logging()

    telemetry = getattr(app.state, "telemetry", None)
    engine = database.get_engine()
    if engine is None:
        logger.warning(
            "DATABASE_URL not set: only non-sequential patterns can be generated"
        )
    elif telemetry is not None:
        telemetry.instrument_sqlalchemy(engine)

    yield

    if telemetry is not None:
        telemetry.shutdown()
    await database.dispose_engine()
