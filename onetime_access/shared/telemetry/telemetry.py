"""OpenTelemetry tracing for the one-time access service.

Spans cover inbound requests (FastAPI), SQL statements when the Postgres
backend is selected, and the service operations wrapped with ``traced``.
Health checks are not traced.
"""

import logging
import threading

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

STORE_BACKEND_ATTRIBUTE = "onetime_access.store.backend"
UNTRACED_URLS = "/api/v1/health,/api/v1/health/ready"


def build_span_exporter(kind: str, otlp_endpoint: str | None) -> SpanExporter | None:
    """Return the exporter for TELEMETRY_EXPORTER, or None for "none".

    "otlp" without an endpoint, and unknown kinds, fall back to console.
    """
    if kind == "none":
        return None
    if kind == "otlp":
        if otlp_endpoint:
            return OTLPSpanExporter(
                endpoint=otlp_endpoint,
                insecure=otlp_endpoint.startswith("http://"),
            )
        logger.warning("TELEMETRY_OTLP_ENDPOINT not set; exporting spans to console")
    elif kind != "console":
        logger.warning("Unknown telemetry exporter '%s'; exporting spans to console", kind)
    return ConsoleSpanExporter()


class TelemetryConfig:
    """Tracer provider plus the instrumentors attached to it."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        store_backend: str,
        environment: str = "development",
    ) -> None:
        self.resource = Resource(
            attributes={
                SERVICE_NAME: service_name,
                SERVICE_VERSION: service_version,
                "deployment.environment": environment,
                STORE_BACKEND_ATTRIBUTE: store_backend,
            }
        )
        self.tracer_provider: TracerProvider | None = None
        self._app: FastAPI | None = None
        self._sqlalchemy: SQLAlchemyInstrumentor | None = None

    def setup_telemetry(
        self,
        exporter_type: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> TracerProvider | None:
        """Install the global tracer provider.

        Child spans follow the parent's sampling decision; root spans are
        sampled at ``sample_rate``. Returns None when setup fails, in which
        case the service runs untraced.
        """
        try:
            provider = TracerProvider(
                resource=self.resource,
                sampler=ParentBased(TraceIdRatioBased(sample_rate)),
            )
            exporter = build_span_exporter(exporter_type, otlp_endpoint)
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
        except Exception as e:
            logger.exception("Failed to initialize telemetry: %s", e)
            return None
        self.tracer_provider = provider
        logger.info(
            "Tracing enabled: exporter=%s sample_rate=%s backend=%s",
            exporter_type,
            sample_rate,
            self.resource.attributes.get(STORE_BACKEND_ATTRIBUTE),
        )
        return provider

    def instrument_fastapi(self, app: FastAPI) -> None:
        if self.tracer_provider is None:
            return
        try:
            FastAPIInstrumentor.instrument_app(
                app,
                tracer_provider=self.tracer_provider,
                excluded_urls=UNTRACED_URLS,
            )
            self._app = app
        except Exception as e:
            logger.exception("Failed to instrument FastAPI: %s", e)

    def instrument_sqlalchemy(self, engine: AsyncEngine | None) -> None:
        if self.tracer_provider is None or engine is None:
            return
        try:
            instrumentor = SQLAlchemyInstrumentor()
            instrumentor.instrument(
                engine=engine.sync_engine,
                tracer_provider=self.tracer_provider,
            )
            self._sqlalchemy = instrumentor
        except Exception as e:
            logger.exception("Failed to instrument SQLAlchemy: %s", e)

    def shutdown(self) -> None:
        """Detach instrumentors and flush pending spans."""
        if self._app is not None:
            FastAPIInstrumentor.uninstrument_app(self._app)
            self._app = None
        if self._sqlalchemy is not None:
            self._sqlalchemy.uninstrument()
            self._sqlalchemy = None
        if self.tracer_provider is not None:
            try:
                self.tracer_provider.shutdown()
            except Exception as e:
                logger.exception("Error during telemetry shutdown: %s", e)
            self.tracer_provider = None


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry
