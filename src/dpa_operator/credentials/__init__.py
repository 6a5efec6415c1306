"""Federated cloud credential provisioning."""

from .providers import (
    AWSCredentials,
    AzureCredentials,
    GCPCredentials,
    ProviderCredentials,
    select_credentials,
)
from .stsflow import ProvisionResult, create_or_update_sts_secret, provision_sts_credentials
from .workload_identity import reconcile_azure_workload_identity_secret

__all__ = [
    "AWSCredentials",
    "AzureCredentials",
    "GCPCredentials",
    "ProviderCredentials",
    "ProvisionResult",
    "create_or_update_sts_secret",
    "provision_sts_credentials",
    "reconcile_azure_workload_identity_secret",
    "select_credentials",
]
