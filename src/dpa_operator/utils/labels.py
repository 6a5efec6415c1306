"""Label sets stamped on objects managed for a DataProtectionApplication."""

from __future__ import annotations

from ..constants import (
    LABEL_APP_COMPONENT,
    LABEL_APP_INSTANCE,
    LABEL_APP_MANAGED_BY,
    LABEL_APP_NAME,
    LABEL_DPA_NAME,
    LABEL_OADP_OPERATOR,
)


def dpa_app_labels(dpa_name: str) -> dict[str, str]:
    """Labels for objects that belong to the Velero server of a DPA."""
    return {
        LABEL_APP_NAME: "velero",
        LABEL_APP_INSTANCE: dpa_name,
        LABEL_APP_MANAGED_BY: "oadp-operator",
        LABEL_APP_COMPONENT: "server",
        LABEL_OADP_OPERATOR: "True",
    }


def correlation_labels(dpa_name: str) -> dict[str, str]:
    """Labels that route events of a secondary object back to its DPA."""
    return {
        LABEL_OADP_OPERATOR: "True",
        LABEL_DPA_NAME: dpa_name,
    }
