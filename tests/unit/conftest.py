"""Shared fixtures for unit tests."""

from __future__ import annotations

import base64
from typing import Any, Callable

import pytest
from kubernetes import client


def _encode(data: dict[str, str]) -> dict[str, str]:
    return {k: base64.b64encode(v.encode("utf-8")).decode("utf-8") for k, v in data.items()}


@pytest.fixture
def make_secret() -> Callable[..., client.V1Secret]:
    """Factory for secrets as returned by the API server (base64 encoded data)."""

    def _make(
        name: str = "test-secret",
        namespace: str = "test-ns",
        data: dict[str, str] | None = None,
        labels: dict[str, str] | None = None,
        owner_references: list[Any] | None = None,
        resource_version: str | None = None,
    ) -> client.V1Secret:
        return client.V1Secret(
            metadata=client.V1ObjectMeta(
                name=name,
                namespace=namespace,
                labels=labels,
                owner_references=owner_references,
                resource_version=resource_version,
            ),
            data=_encode(data or {}),
        )

    return _make


@pytest.fixture
def not_found() -> client.exceptions.ApiException:
    return client.exceptions.ApiException(status=404, reason="Not Found")


@pytest.fixture
def dpa() -> dict[str, Any]:
    """A minimal valid DataProtectionApplication."""
    return {
        "apiVersion": "oadp.openshift.io/v1alpha1",
        "kind": "DataProtectionApplication",
        "metadata": {
            "name": "dpa-sample",
            "namespace": "openshift-adp",
            "uid": "0b7c1a4e-1111-2222-3333-444455556666",
            "generation": 3,
        },
        "spec": {
            "configuration": {"velero": {"defaultPlugins": ["aws"]}},
            "backupLocations": [
                {
                    "velero": {
                        "provider": "aws",
                        "objectStorage": {"bucket": "backups"},
                        "credential": {"name": "cloud-credentials", "key": "cloud"},
                    }
                }
            ],
        },
    }
