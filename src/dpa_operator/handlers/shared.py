"""Shared utilities for handlers."""

from __future__ import annotations

from kubernetes import client, config


def load_kube_config() -> None:
    """Load in-cluster configuration, falling back to the local kubeconfig."""
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()


def get_core_api() -> client.CoreV1Api:
    """Get Kubernetes CoreV1Api client."""
    load_kube_config()
    return client.CoreV1Api()


def get_custom_api() -> client.CustomObjectsApi:
    """Get Kubernetes CustomObjectsApi client."""
    load_kube_config()
    return client.CustomObjectsApi()
