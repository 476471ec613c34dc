"""Kubernetes client configuration.

Inside a pod (and with no explicit context) the in-cluster service account
is used, otherwise the kubeconfig, optionally switched to a named context.
"""

import logging
import os

from kubernetes import client, config

logger = logging.getLogger("mcp-server")


def _in_cluster() -> bool:
    return bool(os.environ.get("KUBERNETES_SERVICE_HOST"))


def get_api_client(context: str = "") -> client.ApiClient:
    """Return an ApiClient for the given kubeconfig context ("" = current)."""
    if not context and _in_cluster():
        try:
            config.load_incluster_config()
            return client.ApiClient()
        except config.ConfigException as e:
            logger.warning(f"In-cluster config unavailable, falling back to kubeconfig: {e}")
    return config.new_client_from_config(context=context or None)


def get_apiextensions_client(context: str = "") -> client.ApiextensionsV1Api:
    return client.ApiextensionsV1Api(get_api_client(context))


def get_rbac_client(context: str = "") -> client.RbacAuthorizationV1Api:
    return client.RbacAuthorizationV1Api(get_api_client(context))


def get_apis_client(context: str = "") -> client.ApisApi:
    return client.ApisApi(get_api_client(context))


def get_core_client(context: str = "") -> client.CoreV1Api:
    return client.CoreV1Api(get_api_client(context))


def get_custom_objects_client(context: str = "") -> client.CustomObjectsApi:
    return client.CustomObjectsApi(get_api_client(context))


def serialize(obj):
    """Convert kubernetes model objects into their camelCase dict form.

    Plain dicts and lists pass through unchanged.
    """
    return client.ApiClient().sanitize_for_serialization(obj)
