"""Tests for tracing helpers."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from dpa_operator import tracing


class TestTraceSpan:
    """Test cases for trace_span."""

    def test_disabled_by_default(self, monkeypatch):
        """Test tracing stays off unless enabled."""
        monkeypatch.delenv("OTEL_TRACES_ENABLED", raising=False)
        monkeypatch.setattr(tracing, "_tracer", None)

        tracing.initialize_tracing()

        assert tracing.get_tracer() is None
        with tracing.trace_span("noop") as span:
            assert span is None

    def test_records_exceptions(self, monkeypatch):
        """Test errors inside a span are recorded and re-raised."""
        tracer = MagicMock()
        span = tracer.start_as_current_span.return_value.__enter__.return_value
        span.is_recording.return_value = True
        monkeypatch.setattr(tracing, "_tracer", tracer)

        with pytest.raises(RuntimeError):
            with tracing.trace_span("reconcile", kind="DataProtectionApplication", attributes={"a": 1}):
                raise RuntimeError("boom")

        tracer.start_as_current_span.assert_called_once_with(
            "reconcile", attributes={"a": 1, "resource.kind": "DataProtectionApplication"}
        )
        span.record_exception.assert_called_once()

    @patch("dpa_operator.tracing.trace")
    @patch("dpa_operator.tracing.BatchSpanProcessor")
    @patch("dpa_operator.tracing.TracerProvider")
    @patch("dpa_operator.tracing.OTLPSpanExporter")
    def test_enabled(self, mock_exporter, mock_provider, mock_processor, mock_trace, monkeypatch):
        """Test enabling tracing installs a tracer."""
        monkeypatch.setenv("OTEL_TRACES_ENABLED", "true")
        monkeypatch.setattr(tracing, "_tracer", None)

        tracing.initialize_tracing()

        assert tracing.get_tracer() is mock_trace.get_tracer.return_value
        mock_trace.set_tracer_provider.assert_called_once()
