"""Tests for Kubernetes secrets utilities."""

from __future__ import annotations

import base64
from unittest.mock import Mock

import pytest
from kubernetes import client

from dpa_operator.constants import FIELD_MANAGER
from dpa_operator.utils.secrets import (
    MERGE_PATCH,
    OperationResult,
    create_or_update_secret,
    decode_secret_data,
    diff_string_data,
    ensure_secret_labels,
    get_secret_value,
    read_secret,
    read_secret_data,
)


class TestReadSecrets:
    """Test cases for secret read helpers."""

    def test_get_secret_value_success(self, make_secret):
        """Test successfully getting a secret value."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.return_value = make_secret(data={"cloud": "value"})

        assert get_secret_value(mock_api, "ns", "test-secret", "cloud") == "value"
        mock_api.read_namespaced_secret.assert_called_once_with(name="test-secret", namespace="ns")

    def test_get_secret_value_key_not_found(self, make_secret):
        """Test error when key not found in secret."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.return_value = make_secret(data={"other": "v"})

        with pytest.raises(ValueError, match="Key 'cloud' not found"):
            get_secret_value(mock_api, "ns", "test-secret", "cloud")

    def test_read_secret_not_found(self, not_found):
        """Test that a missing secret reads as None."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.side_effect = not_found

        assert read_secret(mock_api, "ns", "missing") is None
        with pytest.raises(ValueError, match="not found"):
            read_secret_data(mock_api, "ns", "missing")

    def test_read_secret_other_error(self):
        """Test that other API errors propagate."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.side_effect = client.exceptions.ApiException(status=403)

        with pytest.raises(client.exceptions.ApiException):
            read_secret(mock_api, "ns", "forbidden")

    def test_decode_bytes_and_base64(self):
        """Test decoding both base64 strings and raw bytes."""
        secret = Mock()
        secret.data = {"a": base64.b64encode(b"one").decode(), "b": b"two"}

        assert decode_secret_data(secret) == {"a": "one", "b": "two"}


class TestDiffStringData:
    """Test cases for diff_string_data."""

    def test_changed_and_removed(self):
        """Test the per-key diff."""
        changed, removed = diff_string_data(
            {"k1": "same", "k2": "old", "k3": "stale", "k0": "stale"},
            {"k1": "same", "k2": "new", "k4": "added"},
        )

        assert changed == {"k2": "new", "k4": "added"}
        assert removed == ["k0", "k3"]

    def test_identical(self):
        """Test identical data produces an empty diff."""
        assert diff_string_data({"k": "v"}, {"k": "v"}) == ({}, [])


class TestCreateOrUpdateSecret:
    """Test cases for create_or_update_secret."""

    def test_creates_missing_secret(self, not_found):
        """Test creating a secret that does not exist."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.side_effect = not_found
        owner = {
            "apiVersion": "oadp.openshift.io/v1alpha1",
            "kind": "DataProtectionApplication",
            "name": "dpa",
            "uid": "u1",
            "controller": True,
            "blockOwnerDeletion": True,
        }

        result = create_or_update_secret(
            mock_api, "ns", "s", {"k": "v"}, labels={"a": "b"}, owner_references=[owner]
        )

        assert result is OperationResult.CREATED
        kwargs = mock_api.create_namespaced_secret.call_args.kwargs
        body = kwargs["body"]
        assert kwargs["field_manager"] == FIELD_MANAGER
        assert body.string_data == {"k": "v"}
        assert body.metadata.labels == {"a": "b"}
        (ref,) = body.metadata.owner_references
        assert ref.uid == "u1"
        assert ref.kind == "DataProtectionApplication"
        assert ref.controller is True

    def test_unchanged(self, make_secret):
        """Test that a matching secret is not written."""
        mock_api = Mock()
        ref = client.V1OwnerReference(api_version="v1", kind="X", name="dpa", uid="u1")
        mock_api.read_namespaced_secret.return_value = make_secret(
            data={"k": "v"}, labels={"a": "b", "extra": "kept"}, owner_references=[ref]
        )

        result = create_or_update_secret(
            mock_api, "ns", "s", {"k": "v"}, labels={"a": "b"}, owner_references=[{"uid": "u1"}]
        )

        assert result is OperationResult.UNCHANGED
        mock_api.patch_namespaced_secret.assert_not_called()
        mock_api.create_namespaced_secret.assert_not_called()

    def test_patches_only_differences(self, make_secret):
        """Test that only changed keys and labels are patched."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.return_value = make_secret(
            data={"k": "old", "gone": "x"}, labels={"a": "b"}
        )

        result = create_or_update_secret(mock_api, "ns", "s", {"k": "new"}, labels={"a": "b", "c": "d"})

        assert result is OperationResult.UPDATED
        kwargs = mock_api.patch_namespaced_secret.call_args.kwargs
        assert kwargs["_content_type"] == MERGE_PATCH
        assert kwargs["body"] == {
            "metadata": {"labels": {"c": "d"}},
            "stringData": {"k": "new"},
            "data": {"gone": None},
        }

    def test_patch_carries_resource_version(self, make_secret):
        """Test the patch is guarded by the resourceVersion that was read."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.return_value = make_secret(
            data={"k": "old"}, resource_version="42"
        )

        create_or_update_secret(mock_api, "ns", "s", {"k": "new"})

        body = mock_api.patch_namespaced_secret.call_args.kwargs["body"]
        assert body["metadata"]["resourceVersion"] == "42"

    def test_create_conflict_falls_back_to_update(self, make_secret, not_found):
        """Test that a concurrent create is handled as an update."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.side_effect = [not_found, make_secret(data={"k": "old"})]
        mock_api.create_namespaced_secret.side_effect = client.exceptions.ApiException(status=409)

        result = create_or_update_secret(mock_api, "ns", "s", {"k": "new"})

        assert result is OperationResult.UPDATED
        mock_api.patch_namespaced_secret.assert_called_once()


class TestEnsureSecretLabels:
    """Test cases for ensure_secret_labels."""

    def test_adds_missing_labels(self, make_secret):
        """Test that missing labels are patched."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.return_value = make_secret(labels={"x": "y"})

        assert ensure_secret_labels(mock_api, "ns", "s", {"x": "y", "a": "b"}) is True
        body = mock_api.patch_namespaced_secret.call_args.kwargs["body"]
        assert body == {"metadata": {"labels": {"a": "b"}}}

    def test_already_labelled(self, make_secret):
        """Test that nothing is written when labels are present."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.return_value = make_secret(labels={"a": "b"})

        assert ensure_secret_labels(mock_api, "ns", "s", {"a": "b"}) is False
        mock_api.patch_namespaced_secret.assert_not_called()

    def test_missing_secret(self, not_found):
        """Test that a missing secret is reported as None."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.side_effect = not_found

        assert ensure_secret_labels(mock_api, "ns", "s", {"a": "b"}) is None
