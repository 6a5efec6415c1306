"""Builder for cloud storage provider instances."""

from __future__ import annotations

import configparser
import json
import logging
from typing import Any

from kubernetes import client

from ..constants import WEB_IDENTITY_TOKEN_PATH
from ..services.cloud.aws import AWSProvider, assume_role_with_web_identity
from ..services.cloud.azure import AzureProvider, AzureStorageCredentials, parse_env_file
from ..services.cloud.base import CloudProvider
from ..services.cloud.gcp import GCPProvider
from ..utils.secrets import get_secret_value

logger = logging.getLogger(__name__)

DEFAULT_CREDENTIAL_KEY = "cloud"
DEFAULT_AWS_PROFILE = "default"
DEFAULT_AWS_REGION = "us-east-1"

SUPPORTED_PROVIDERS = ("aws", "gcp", "azure")


def _aws_provider(credentials_text: str, location_config: dict[str, Any]) -> AWSProvider:
    profile_name = location_config.get("profile", DEFAULT_AWS_PROFILE)
    parser = configparser.ConfigParser()
    parser.read_string(credentials_text)
    if not parser.has_section(profile_name):
        raise ValueError(f"profile '{profile_name}' not found in AWS credentials")
    profile = parser[profile_name]

    region = location_config.get("region") or DEFAULT_AWS_REGION
    endpoint = location_config.get("s3Url")
    path_style = str(location_config.get("s3ForcePathStyle", "false")).lower() == "true"
    insecure = str(location_config.get("insecureSkipTLSVerify", "false")).lower() == "true"

    keys: dict[str, Any] = {}
    if profile.get("aws_access_key_id"):
        keys = {
            "access_key": profile.get("aws_access_key_id"),
            "secret_key": profile.get("aws_secret_access_key"),
            "session_token": profile.get("aws_session_token"),
        }
    elif profile.get("role_arn"):
        token_file = profile.get("web_identity_token_file", WEB_IDENTITY_TOKEN_PATH)
        keys = assume_role_with_web_identity(profile["role_arn"], token_file, region)

    return AWSProvider(
        region=region,
        endpoint=endpoint,
        path_style=path_style,
        insecure_skip_verify=insecure,
        **keys,
    )


def _gcp_provider(credentials_text: str, location_config: dict[str, Any]) -> GCPProvider:
    try:
        info = json.loads(credentials_text)
    except json.JSONDecodeError as e:
        raise ValueError(f"GCP credentials are not valid JSON: {e}") from e
    return GCPProvider(info, project=location_config.get("project"))


def _azure_provider(credentials_text: str, location_config: dict[str, Any]) -> AzureProvider:
    values = parse_env_file(credentials_text)
    # Location config wins over the credentials file
    overrides = {
        "AZURE_RESOURCE_GROUP": location_config.get("resourceGroup"),
        "AZURE_STORAGE_ACCOUNT_ID": location_config.get("storageAccount"),
        "AZURE_SUBSCRIPTION_ID": location_config.get("subscriptionId"),
    }
    values.update({k: v for k, v in overrides.items() if v})

    creds = AzureStorageCredentials.from_mapping(values)
    if not creds.storage_account:
        raise ValueError("storageAccount is required for azure backup locations")
    return AzureProvider(creds)


def create_cloud_provider_from_spec(
    api: client.CoreV1Api,
    namespace: str,
    location: dict[str, Any],
) -> CloudProvider:
    """Create a cloud provider instance from an inline backup location.

    Args:
        api: Core API used to read the credential secret
        namespace: Namespace of the credential secret
        location: Backup location spec (``provider``, ``config``, ``credential``)

    Returns:
        Configured cloud provider

    Raises:
        ValueError: If configuration is invalid
    """
    provider_type = (location.get("provider") or "").lower()
    if provider_type.startswith("velero.io/"):
        provider_type = provider_type[len("velero.io/") :]
    if provider_type not in SUPPORTED_PROVIDERS:
        raise ValueError(f"Unsupported provider type: {location.get('provider')}")

    credential = location.get("credential") or {}
    secret_name = credential.get("name")
    if not secret_name:
        raise ValueError("credential.name is required")
    secret_key = credential.get("key") or DEFAULT_CREDENTIAL_KEY

    credentials_text = get_secret_value(api, namespace, secret_name, secret_key)
    location_config = location.get("config") or {}

    logger.info(f"Building {provider_type} provider from secret {namespace}/{secret_name}")
    if provider_type == "aws":
        return _aws_provider(credentials_text, location_config)
    if provider_type == "gcp":
        return _gcp_provider(credentials_text, location_config)
    return _azure_provider(credentials_text, location_config)
