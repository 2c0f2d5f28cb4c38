"""Kubernetes client module for certsync.

This module handles all interactions with the Kubernetes API.
"""

from certsync.kubernetes.connection import (
    CONNECTION_MODE_KUBECTL,
    KubernetesConfigurationError,
    KubernetesConnection,
)
from certsync.kubernetes.secrets import SecretResource, SecretSynchronizationError

__all__ = [
    "CONNECTION_MODE_KUBECTL",
    "KubernetesConfigurationError",
    "KubernetesConnection",
    "SecretResource",
    "SecretSynchronizationError",
]
