"""Tests for Kubernetes event utilities."""

from __future__ import annotations

from unittest.mock import Mock, patch

from dpa_operator.constants import (
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_RECONCILE_STARTED,
    EVENT_REASON_VALIDATE_FAILED,
)
from dpa_operator.utils.events import (
    emit_event,
    emit_reconcile_failed,
    emit_reconcile_started,
    emit_validate_failed,
    object_reference,
)

BODY = {"kind": "DataProtectionApplication", "metadata": {"name": "dpa", "namespace": "ns"}}


class TestEmitEvent:
    """Test cases for emit_event function."""

    @patch("dpa_operator.utils.events.kopf.event")
    def test_emit_event_normal(self, mock_event):
        """Test emitting normal event."""
        emit_event(BODY, "TestReason", "Test message")

        mock_event.assert_called_once_with(BODY, reason="TestReason", message="Test message", type="Normal")

    @patch("dpa_operator.utils.events.kopf.event")
    def test_emit_event_warning(self, mock_event):
        """Test emitting warning event."""
        emit_event(BODY, "ErrorReason", "Error occurred", type_="Warning")

        mock_event.assert_called_once_with(BODY, reason="ErrorReason", message="Error occurred", type="Warning")


class TestReconcileEvents:
    """Test cases for reconciliation events."""

    def test_emit_reconcile_started(self):
        """Test emitting reconcile started event."""
        recorder = Mock()
        emit_reconcile_started(BODY, recorder=recorder)
        recorder.assert_called_once_with(BODY, EVENT_REASON_RECONCILE_STARTED, "Reconciliation started")

    def test_emit_reconcile_failed(self):
        """Test emitting reconcile failed event."""
        recorder = Mock()
        emit_reconcile_failed(BODY, "boom", recorder=recorder)
        recorder.assert_called_once_with(BODY, EVENT_REASON_RECONCILE_FAILED, "boom", type_="Warning")

    def test_emit_validate_failed(self):
        """Test emitting validation failed event."""
        recorder = Mock()
        emit_validate_failed(BODY, "invalid", recorder=recorder)
        recorder.assert_called_once_with(BODY, EVENT_REASON_VALIDATE_FAILED, "invalid", type_="Warning")

    @patch("dpa_operator.utils.events.kopf.event")
    def test_default_recorder_uses_kopf(self, mock_event):
        """Test the default recorder posts through kopf."""
        emit_reconcile_started(BODY)
        mock_event.assert_called_once()


class TestObjectReference:
    """Test cases for object_reference."""

    def test_reference(self):
        """Test building an event target for an object not held as a body."""
        ref = object_reference("v1", "Secret", {"name": "s", "namespace": "ns"})

        assert ref == {
            "apiVersion": "v1",
            "kind": "Secret",
            "metadata": {"name": "s", "namespace": "ns", "uid": None},
        }
