"""OpenTelemetry helpers."""

from __future__ import annotations

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor


def setup_otel(app: FastAPI, service_name: str = "app", endpoint: str | None = None) -> bool:
    """Configure OpenTelemetry tracing for a FastAPI app.

    Nothing is exported unless ``endpoint`` is set; spans created by the
    services then go to the default no-op provider. Returns whether an
    exporter was installed.
    """

    if not endpoint:
        return False

    resource = Resource.create({"service.name": service_name})
    tracer_provider = TracerProvider(resource=resource)
    span_exporter = OTLPSpanExporter(endpoint=endpoint)
    tracer_provider.add_span_processor(BatchSpanProcessor(span_exporter))
    trace.set_tracer_provider(tracer_provider)

    FastAPIInstrumentor().instrument_app(app)
    return True
