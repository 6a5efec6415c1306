"""Utilities for managing Kubernetes secrets."""

from __future__ import annotations

import base64
import binascii
import enum
from typing import Any, Mapping

from kubernetes import client

from ..constants import FIELD_MANAGER

MERGE_PATCH = "application/merge-patch+json"


class OperationResult(str, enum.Enum):
    """Outcome of a create-or-update call."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


def decode_secret_data(secret: Any) -> dict[str, str]:
    """Decode the ``data`` map of a secret into plain strings."""
    result = {}
    for key, value in (secret.data or {}).items():
        if isinstance(value, str):
            try:
                result[key] = base64.b64decode(value, validate=True).decode("utf-8")
            except (binascii.Error, UnicodeDecodeError):
                result[key] = value
        else:
            result[key] = value.decode("utf-8")
    return result


def read_secret(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
) -> client.V1Secret | None:
    """Read a secret, returning None when it does not exist."""
    try:
        return api.read_namespaced_secret(name=secret_name, namespace=namespace)
    except client.exceptions.ApiException as e:
        if e.status == 404:
            return None
        raise


def read_secret_data(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
) -> dict[str, str]:
    """Read all data from a Kubernetes secret.

    Raises:
        ValueError: If secret not found
    """
    secret = read_secret(api, namespace, secret_name)
    if secret is None:
        raise ValueError(f"Secret '{secret_name}' not found in namespace '{namespace}'")
    return decode_secret_data(secret)


def get_secret_value(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
    key: str,
) -> str:
    """Get a single value from a Kubernetes secret.

    Raises:
        ValueError: If secret or key not found
    """
    data = read_secret_data(api, namespace, secret_name)
    if key not in data:
        raise ValueError(f"Key '{key}' not found in secret '{secret_name}'")
    return data[key]


def diff_string_data(
    current: Mapping[str, str],
    desired: Mapping[str, str],
) -> tuple[dict[str, str], list[str]]:
    """Compare desired secret data to the current data key by key.

    Returns:
        Tuple of (keys whose value must be written, keys that must be removed)
    """
    changed = {k: v for k, v in desired.items() if current.get(k) != v}
    removed = sorted(k for k in current if k not in desired)
    return changed, removed


def owner_reference_model(ref: Any) -> client.V1OwnerReference:
    """Convert an API-shaped owner reference mapping to the client model."""
    if isinstance(ref, client.V1OwnerReference):
        return ref
    return client.V1OwnerReference(
        api_version=ref["apiVersion"],
        kind=ref["kind"],
        name=ref["name"],
        uid=ref["uid"],
        controller=ref.get("controller"),
        block_owner_deletion=ref.get("blockOwnerDeletion"),
    )


def create_secret(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
    string_data: Mapping[str, str],
    labels: Mapping[str, str] | None = None,
    owner_references: list[dict[str, Any]] | None = None,
) -> None:
    """Create an Opaque secret from plain string data."""
    secret = client.V1Secret(
        metadata=client.V1ObjectMeta(
            name=secret_name,
            namespace=namespace,
            labels=dict(labels or {}),
            owner_references=[owner_reference_model(r) for r in owner_references or []] or None,
        ),
        type="Opaque",
        string_data=dict(string_data),
    )

    api.create_namespaced_secret(
        namespace=namespace,
        body=secret,
        field_manager=FIELD_MANAGER,
    )


def patch_secret(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
    body: dict[str, Any],
) -> None:
    """Apply a JSON merge patch to a secret."""
    api.patch_namespaced_secret(
        name=secret_name,
        namespace=namespace,
        body=body,
        field_manager=FIELD_MANAGER,
        _content_type=MERGE_PATCH,
    )


def _ref_uid(ref: Any) -> str | None:
    if isinstance(ref, Mapping):
        return ref.get("uid")
    return getattr(ref, "uid", None)


def create_or_update_secret(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
    string_data: Mapping[str, str],
    labels: Mapping[str, str] | None = None,
    owner_references: list[dict[str, Any]] | None = None,
) -> OperationResult:
    """Make a secret match the desired data, labels and owner references.

    Keys not in ``string_data`` are removed. Existing labels not listed in
    ``labels`` are kept.

    Returns:
        Whether the secret was created, updated or already up to date
    """
    labels = dict(labels or {})
    existing = read_secret(api, namespace, secret_name)
    if existing is None:
        try:
            create_secret(api, namespace, secret_name, string_data, labels, owner_references)
            return OperationResult.CREATED
        except client.exceptions.ApiException as e:
            if e.status != 409:
                raise
        existing = read_secret(api, namespace, secret_name)
        if existing is None:
            raise client.exceptions.ApiException(
                status=409, reason=f"secret {namespace}/{secret_name} vanished after create conflict"
            )

    changed, removed = diff_string_data(decode_secret_data(existing), string_data)
    current_labels = existing.metadata.labels or {}
    label_patch = {k: v for k, v in labels.items() if current_labels.get(k) != v}
    current_uids = {_ref_uid(r) for r in existing.metadata.owner_references or []}
    desired_uids = {_ref_uid(r) for r in owner_references or []}

    if not changed and not removed and not label_patch and current_uids == desired_uids:
        return OperationResult.UNCHANGED

    body: dict[str, Any] = {"metadata": {}}
    if existing.metadata.resource_version:
        body["metadata"]["resourceVersion"] = existing.metadata.resource_version
    if label_patch:
        body["metadata"]["labels"] = label_patch
    if current_uids != desired_uids:
        body["metadata"]["ownerReferences"] = owner_references or None
    if changed:
        body["stringData"] = changed
    if removed:
        body["data"] = {k: None for k in removed}

    patch_secret(api, namespace, secret_name, body)
    return OperationResult.UPDATED


def ensure_secret_labels(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
    labels: Mapping[str, str],
) -> bool | None:
    """Add missing labels to an existing secret.

    Returns:
        True if the secret was patched, False if it already carried the labels,
        None if the secret does not exist
    """
    secret = read_secret(api, namespace, secret_name)
    if secret is None:
        return None

    current = secret.metadata.labels or {}
    missing = {k: v for k, v in labels.items() if current.get(k) != v}
    if not missing:
        return False

    patch_secret(api, namespace, secret_name, {"metadata": {"labels": missing}})
    return True
