"""Application lifespan: startup and shutdown.

Single place for store client lifecycle and telemetry wiring. Used by
main.py; no business logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from onetime_access.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: telemetry (if enabled), credential store client
    (Firestore REST client or SQL engine). Shutdown order: Firestore client
    close, SQL engine dispose, telemetry shutdown.
    """
    settings = get_settings()

    # ---- Startup ----
    telemetry = None
    if settings.telemetry_enabled:
        from onetime_access.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            store_backend=settings.database_backend,
            environment=settings.telemetry_environment,
        )
        if telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        ) is None:
            telemetry = None
        else:
            set_telemetry(telemetry)
            telemetry.instrument_fastapi(app)

    app.state.firestore_client = None
    if settings.database_backend == "firestore":
        from onetime_access.infrastructure.firebase import create_firestore_client

        app.state.firestore_client = create_firestore_client()
        if app.state.firestore_client is None:
            logger.error("Firestore client unavailable; store calls will fail until fixed")
    else:
        from onetime_access.infrastructure.persistence import database

        database.get_session_factory()
        if telemetry is not None:
            telemetry.instrument_sqlalchemy(database.engine)
        logger.info("Database engine created")

    yield

    # ---- Shutdown ----
    if getattr(app.state, "firestore_client", None) is not None:
        await app.state.firestore_client.aclose()
        app.state.firestore_client = None
        logger.info("Firestore client closed")

    from onetime_access.infrastructure.persistence import database

    await database.dispose_engine()

    from onetime_access.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)
        logger.info("Telemetry shutdown complete")
