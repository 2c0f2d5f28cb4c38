"""Kubernetes connection management.

This module handles the connection to the Kubernetes API.
"""
import logging

from kubernetes import client, config

logger = logging.getLogger(__name__)

# Connection mode using a kubeconfig file, every other mode means in-cluster
CONNECTION_MODE_KUBECTL = "kubectl"


class KubernetesConfigurationError(RuntimeError):
    """Raised when the Kubernetes client cannot be configured."""


class KubernetesConnection:
    """Connection manager for the Kubernetes API.

    This class manages authentication and connection to the Kubernetes API.
    It is built once at startup and reused for every synchronization.
    """

    def __init__(self, connection_mode: str = CONNECTION_MODE_KUBECTL, kubeconfig: str | None = None):
        """Initialize the Kubernetes connection.

        Args:
            connection_mode: "kubectl" to load credentials from a kubeconfig file,
                any other value to use the in-cluster service account.
            kubeconfig: Path of the kubeconfig file. Only used in kubectl mode.

        Raises:
            KubernetesConfigurationError: If the credentials cannot be loaded.
        """
        self.connection_mode = connection_mode
        self.kubeconfig = kubeconfig
        self._setup_connection()

    @property
    def in_cluster(self) -> bool:
        return self.connection_mode != CONNECTION_MODE_KUBECTL

    def _setup_connection(self) -> None:
        """Set up the connection to the Kubernetes API."""
        configuration = client.Configuration()
        try:
            if self.in_cluster:
                config.load_incluster_config(client_configuration=configuration)
                logger.info("Using in-cluster configuration")
            else:
                config.load_kube_config(config_file=self.kubeconfig, client_configuration=configuration)
                logger.info(f"Using kubeconfig configuration from {self.kubeconfig or 'default location'}")
        except (config.ConfigException, OSError) as e:
            logger.error(
                "Failed to load Kubernetes configuration. Ensure that the "
                + ("service account is mounted." if self.in_cluster else "kubeconfig file is available and valid.")
            )
            raise KubernetesConfigurationError(f"Kubernetes configuration error: {e}") from e

        # Initialize API clients
        self.api_client = client.ApiClient(configuration)
        self.core_v1_api = client.CoreV1Api(self.api_client)
        self.host = configuration.host
