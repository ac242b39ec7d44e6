"""OpenTelemetry tracing.

Tracing is off unless ``OTEL_ENABLED`` is truthy. Without a configured
provider ``get_tracer`` hands out no-op tracers, so services open spans
unconditionally.
"""

import logging
import os

from opentelemetry import trace

logger = logging.getLogger(__name__)

SERVICE_NAME = "autosales"
_TRUTHY = {"1", "true", "yes", "on"}


def get_tracer(name: str | None = None) -> trace.Tracer:
    return trace.get_tracer(name or SERVICE_NAME)


def _otel_enabled() -> bool:
    return os.getenv("OTEL_ENABLED", "false").strip().lower() in _TRUTHY


def _span_exporter():
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

    base_url = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if base_url:
        return OTLPSpanExporter(endpoint=base_url.rstrip("/") + "/v1/traces")
    return OTLPSpanExporter()


def _instrument_fastapi(app) -> None:
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

    FastAPIInstrumentor.instrument_app(app)


def _instrument_sqlalchemy(app) -> None:
    from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor

    from autosales.db import get_engine

    SQLAlchemyInstrumentor().instrument(engine=get_engine())


_INSTRUMENTORS = (
    ("fastapi", _instrument_fastapi),
    ("sqlalchemy", _instrument_sqlalchemy),
)


def setup_otel(app) -> None:
    """Install a tracer provider with an OTLP/HTTP exporter and instrument the app.

    The exporter and instrumentors ship in the ``otel`` extra; a missing
    instrumentor is logged and skipped.
    """
    if not _otel_enabled():
        return
    try:
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor

        exporter = _span_exporter()
    except ImportError:
        logger.exception("otel_setup_skipped reason=sdk_unavailable")
        return

    service_name = os.getenv("OTEL_SERVICE_NAME", SERVICE_NAME)
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    for label, instrument in _INSTRUMENTORS:
        try:
            instrument(app)
        except ImportError:
            logger.warning("otel_instrumentor_missing name=%s", label, exc_info=True)
            continue
        logger.info("otel_instrumented name=%s", label)
    logger.info("otel_enabled service=%s", service_name)
