"""Scheduler module for certsync.

This module runs the synchronization of the certificates at a fixed interval.
"""

import logging
import time

from certsync.config import CertSyncConfig
from certsync.kubernetes.secrets import SecretResource, SecretSynchronizationError
from certsync.secrets import Fetcher, build_secrets
from certsync.tls import CertificateFetchError, fetch_leaf_certificate

logger = logging.getLogger(__name__)


class Scheduler:
    """Scheduler for the certificate synchronization.

    Each run fetches every certificate, then synchronizes the Secrets, then waits
    for the configured interval.
    """

    def __init__(self, config: CertSyncConfig, secret_resource: SecretResource, fetcher: Fetcher | None = None):
        """Initialize the scheduler.

        Args:
            config: The configuration for the scheduler.
            secret_resource: The Secret handler used to write the certificates.
            fetcher: Callable returning the PEM certificate of a HOST:PORT address.
                Defaults to fetch_leaf_certificate.
        """
        self.config = config
        self.secret_resource = secret_resource
        self.fetcher = fetcher or fetch_leaf_certificate

    def reconcile(self) -> int:
        """Fetch the certificates and synchronize the Secrets once.

        Returns:
            The number of Secrets synchronized.

        Raises:
            CertificateFetchError: If a certificate cannot be fetched. No Secret is synchronized.
            SecretSynchronizationError: If a Secret cannot be written. Remaining Secrets are skipped.
        """
        secrets = build_secrets(
            self.config.secret_names,
            self.config.tls_hosts,
            fetcher=self.fetcher,
            timeout=self.config.tls_timeout,
        )

        logger.info(f"Synchronizing the Secrets in the namespace: {self.config.namespace}")
        count = self.secret_resource.synchronize(secrets, namespace=self.config.namespace)
        logger.info(f"Synchronized {count} Secret(s)")
        return count

    def run_reconciliation_loop(self) -> None:
        """Run the synchronization loop continuously.

        A failed run is logged and the loop goes on with the next one after the usual interval.
        """
        logger.info(f"Starting synchronization loop with interval {self.config.synchronization_interval} seconds")
        logger.info(f"Namespace: {self.config.namespace}")
        for name, host in self.config.targets:
            logger.info(f"Secret {name} <- {host}")

        try:
            while True:
                self._run_once()
                logger.info(f"Next synchronization in {self.config.synchronization_interval} seconds")
                time.sleep(self.config.synchronization_interval)
        except KeyboardInterrupt:
            logger.info("Synchronization loop interrupted, shutting down")

    def _run_once(self) -> None:
        try:
            self.reconcile()
        except CertificateFetchError as e:
            logger.error(f"Error fetching the certificates: {e}")
        except SecretSynchronizationError as e:
            logger.error(f"Error synchronizing the Secrets: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error during synchronization: {str(e)}")
