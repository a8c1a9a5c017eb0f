"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers.
No business logic here. See codegen.core.lifespan and codegen.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and optionally
clear get_settings cache) before calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from codegen.api.v1 import api_router
from codegen.core.config import get_settings
from codegen.core.exception_handlers import register_exception_handlers
from codegen.core.lifespan import create_lifespan
from codegen.shared.telemetry.telemetry import TelemetryConfig


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.telemetry = None

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    # Instrument before the app starts; middleware cannot be added afterwards.
    if settings.telemetry_enabled:
        telemetry = TelemetryConfig.from_settings(settings)
        telemetry.instrument_fastapi(app)
        telemetry.instrument_logging()
        app.state.telemetry = telemetry

    return app


app = create_app()
