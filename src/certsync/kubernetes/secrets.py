"""Kubernetes Secrets handling module.

This module creates or updates the Secrets holding the fetched certificates.
"""

import logging
from collections.abc import Iterable

from kubernetes import client
from kubernetes.client.rest import ApiException

from certsync.kubernetes.connection import KubernetesConnection
from certsync.secrets import CERTIFICATE_KEY, SecretRecord

logger = logging.getLogger(__name__)

# Label marking the Secrets written by certsync
MANAGED_BY_LABEL = "app.kubernetes.io/managed-by"
MANAGED_BY_VALUE = "certsync"
# Annotation recording where the certificate was fetched from
SOURCE_HOST_ANNOTATION = "certsync.io/source-host"


class SecretSynchronizationError(Exception):
    """Raised when a Secret cannot be created or updated."""

    def __init__(self, name: str, namespace: str, cause: Exception):
        super().__init__(f"Failed to synchronize Secret {namespace}/{name}: {cause}")
        self.name = name
        self.namespace = namespace


class SecretResource:
    """Handler for Kubernetes Secret resources."""

    # Resource type specific constants
    RESOURCE_API_VERSION = "v1"
    RESOURCE_KIND = "Secret"

    def __init__(self, connection: KubernetesConnection, namespace: str):
        """Initialize the Secret resource handler.

        Args:
            connection: The Kubernetes connection to use
            namespace: Namespace where the Secrets are synchronized.
        """
        self.connection = connection
        self.namespace = namespace
        self.api = connection.core_v1_api

    def get_resource(self, name: str, namespace: str | None = None) -> client.V1Secret | None:
        """Get a specific Secret by name.

        Args:
            name: Name of the Secret.
            namespace: Namespace of the Secret. If None, use the handler's namespace.

        Returns:
            The Secret object, or None if it does not exist.
        """
        ns = namespace or self.namespace
        try:
            return self.api.read_namespaced_secret(name, ns)
        except ApiException as e:
            if e.status == 404:
                return None
            raise

    def build_body(self, record: SecretRecord, namespace: str) -> client.V1Secret:
        """Generate the Secret object for a record.

        Args:
            record: The record to build the Secret from.
            namespace: Namespace of the Secret.

        Returns:
            The Secret object.
        """
        annotations = {SOURCE_HOST_ANNOTATION: record.host} if record.host else None
        return client.V1Secret(
            api_version=self.RESOURCE_API_VERSION,
            kind=self.RESOURCE_KIND,
            metadata=client.V1ObjectMeta(
                name=record.name,
                namespace=namespace,
                labels={MANAGED_BY_LABEL: MANAGED_BY_VALUE},
                annotations=annotations,
            ),
            string_data={CERTIFICATE_KEY: record.certificate},
        )

    def synchronize(self, records: Iterable[SecretRecord], namespace: str | None = None) -> int:
        """Create or update the Secrets of the records.

        Each Secret is read, created when missing, then updated with the fresh certificate.
        The first failure aborts the remaining records.

        Args:
            records: The records to synchronize, in order.
            namespace: Namespace of the Secrets. If None, use the handler's namespace.

        Returns:
            The number of Secrets synchronized.

        Raises:
            SecretSynchronizationError: If a Secret cannot be read, created or updated.
        """
        ns = namespace or self.namespace
        count = 0

        for record in records:
            record.namespace = ns
            body = self.build_body(record, ns)

            try:
                if self.get_resource(record.name, ns) is None:
                    logger.info(f"Creating Secret {ns}/{record.name}")
                    self.api.create_namespaced_secret(ns, body)

                logger.debug(f"Updating Secret {ns}/{record.name}")
                self.api.replace_namespaced_secret(record.name, ns, body)
            except ApiException as e:
                raise SecretSynchronizationError(record.name, ns, e) from e

            count += 1

        return count
