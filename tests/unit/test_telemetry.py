"""Tests for OpenTelemetry setup and instrumentation."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from sqlalchemy import text

from taskflow.core.config import get_settings
from taskflow.shared.telemetry.telemetry import TelemetryConfig


@pytest.fixture
def spans() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def telemetry(spans) -> TelemetryConfig:
    """Enabled config with no exporter; finished spans land in memory."""
    config = TelemetryConfig("taskflow-test", "0.0.0", enabled=True, environment="test")
    provider = config.setup_telemetry(exporter_type="none")
    provider.add_span_processor(SimpleSpanProcessor(spans))
    yield config
    config.shutdown()


class TestSetup:
    def test_disabled_config_has_no_provider(self) -> None:
        config = TelemetryConfig("taskflow", "1.0.0", enabled=False)
        assert config.setup_telemetry() is None
        config.instrument_fastapi(FastAPI())
        assert config.tracer_provider is None

    def test_from_settings_follows_flag(self) -> None:
        settings = get_settings()
        config = TelemetryConfig.from_settings(settings)
        assert config.enabled is settings.telemetry_enabled
        assert config.service_name == settings.app_name

    def test_resource_carries_service_and_environment(self, telemetry) -> None:
        attributes = telemetry.tracer_provider.resource.attributes
        assert attributes["service.name"] == "taskflow-test"
        assert attributes["deployment.environment"] == "test"


class TestInstrumentation:
    async def test_requests_are_traced_except_health(self, telemetry, spans) -> None:
        app = FastAPI()

        @app.get("/api/v1/items")
        def items() -> list[str]:
            return []

        @app.get("/api/v1/health")
        def health() -> dict[str, str]:
            return {"status": "ok"}

        telemetry.instrument_fastapi(app)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            assert (await client.get("/api/v1/health")).status_code == 200
            assert not spans.get_finished_spans()
            assert (await client.get("/api/v1/items")).status_code == 200
        assert any("/api/v1/items" in span.name for span in spans.get_finished_spans())

    async def test_queries_are_traced(self, telemetry, spans, engine) -> None:
        telemetry.instrument_sqlalchemy(engine)
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        finally:
            SQLAlchemyInstrumentor().uninstrument()
        assert telemetry.instrumented_engine is engine
        assert spans.get_finished_spans()
