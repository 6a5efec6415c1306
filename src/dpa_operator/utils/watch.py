"""Mapping of secondary object events to DataProtectionApplication requests."""

from __future__ import annotations

from typing import Any, Mapping, NamedTuple

from ..constants import LABEL_DPA_NAME, LABEL_OADP_OPERATOR


class ObjectKey(NamedTuple):
    """Namespace and name identifying a DataProtectionApplication."""

    namespace: str
    name: str


def map_object_to_request(obj: Mapping[str, Any] | None) -> ObjectKey | None:
    """Resolve the DataProtectionApplication an object belongs to.

    The object must carry a non-empty ``openshift.io/oadp`` label and a
    ``dataprotectionapplication.name`` label. The owner is looked up in the
    object's own namespace. Returns None when either label is missing.
    """
    if not obj:
        return None

    meta = obj.get("metadata") or {}
    labels = meta.get("labels") or {}
    if not labels.get(LABEL_OADP_OPERATOR):
        return None

    dpa_name = labels.get(LABEL_DPA_NAME)
    if not dpa_name:
        return None

    return ObjectKey(namespace=meta.get("namespace", ""), name=dpa_name)


def map_event_to_request(event: Mapping[str, Any]) -> ObjectKey | None:
    """Resolve a raw watch event; the new object is used for updates."""
    obj = event.get("object")
    if obj is None:
        obj = event.get("new")
    return map_object_to_request(obj)
