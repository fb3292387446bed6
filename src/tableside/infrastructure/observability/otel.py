from __future__ import annotations

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from tableside.infrastructure import config

_OTEL_CONFIGURED = False

# Probes and scrapes would otherwise dominate the trace volume.
_UNTRACED_URLS = "health/live,health/ready,metrics"


def _build_provider(version: str) -> TracerProvider:
    resource = Resource.create(
        {
            SERVICE_NAME: config.otel_service_name(),
            SERVICE_VERSION: version,
            "deployment.environment": config.app_env(),
        }
    )
    provider = TracerProvider(resource=resource)

    endpoint = config.otel_exporter_endpoint()
    if endpoint:
        exporter = OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
        provider.add_span_processor(BatchSpanProcessor(exporter))
    return provider


def configure_otel(app: FastAPI) -> None:
    global _OTEL_CONFIGURED
    if _OTEL_CONFIGURED:
        return

    provider = _build_provider(app.version)
    trace.set_tracer_provider(provider)
    set_global_textmap(TraceContextTextMapPropagator())
    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=provider,
        excluded_urls=_UNTRACED_URLS,
    )
    _OTEL_CONFIGURED = True
