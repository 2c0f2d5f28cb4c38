"""Configuration module for certsync.

This module handles the configuration of certsync through environment variables.
Command-line flags are layered on top of it by the CLI.
"""
import os

from pydantic import BaseModel, Field, field_validator, model_validator

from certsync.tls import parse_address

DEFAULT_CONNECTION_MODE = "kubectl"
DEFAULT_NAMESPACE = "default"
DEFAULT_SYNCHRONIZATION_INTERVAL = 20


def default_kubeconfig_path() -> str:
    """Return the default kubeconfig location, ~/.kube/config."""
    return os.path.join(os.path.expanduser("~"), ".kube", "config")


def _split_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class CertSyncConfig(BaseModel):
    """Configuration class for certsync.

    Attributes:
        connection_mode: "kubectl" to connect through a kubeconfig file, anything else for in-cluster.
        kubeconfig: Path of the kubeconfig file used in kubectl mode.
        namespace: Namespace where the Secrets are synchronized.
        secret_names: Names of the Secrets to manage, paired positionally with tls_hosts.
        tls_hosts: HOST:PORT addresses to read the certificates from.
        synchronization_interval: Seconds to wait between two synchronizations.
        tls_timeout: Optional timeout in seconds for each TLS connection.
    """
    connection_mode: str = Field(default=DEFAULT_CONNECTION_MODE)
    kubeconfig: str = Field(default_factory=default_kubeconfig_path)
    namespace: str = Field(default=DEFAULT_NAMESPACE)
    secret_names: list[str] = Field(default_factory=list)
    tls_hosts: list[str] = Field(default_factory=list)
    synchronization_interval: int = Field(default=DEFAULT_SYNCHRONIZATION_INTERVAL)
    tls_timeout: float | None = Field(default=None)

    @field_validator("namespace")
    def validate_namespace(cls, v):
        """Validate that the namespace is not empty"""
        if not v:
            raise ValueError("Namespace must not be empty")
        return v

    @field_validator("secret_names")
    def validate_secret_names(cls, v):
        """Validate that no secret name is empty"""
        if any(not name for name in v):
            raise ValueError("Secret names must not be empty")
        return v

    @field_validator("tls_hosts")
    def validate_tls_hosts(cls, v):
        """Validate that every host is in HOST:PORT format"""
        for host in v:
            parse_address(host)
        return v

    @field_validator("synchronization_interval")
    def validate_interval(cls, v):
        """Validate that the interval is strictly positive"""
        if v <= 0:
            raise ValueError("Synchronization interval must be greater than 0")
        return v

    @field_validator("tls_timeout")
    def validate_timeout(cls, v):
        """Validate that the timeout, when set, is strictly positive"""
        if v is not None and v <= 0:
            raise ValueError("TLS timeout must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_targets(self):
        """Force to have a secret name per TLS host"""
        if len(self.secret_names) != len(self.tls_hosts):
            raise ValueError(
                "The number of Secrets to generate and the TLS hosts to visit must be the same "
                f"({len(self.secret_names)} secret names, {len(self.tls_hosts)} TLS hosts)"
            )
        return self

    @property
    def targets(self) -> list[tuple[str, str]]:
        """Secret names paired with their TLS hosts, in configuration order."""
        return list(zip(self.secret_names, self.tls_hosts))

    @classmethod
    def from_env(cls, **overrides):
        """Create a config instance from environment variables.

        Keyword arguments that are not None take precedence over the environment.
        """
        timeout = os.getenv("CERTSYNC_TLS_TIMEOUT")
        values = {
            "connection_mode": os.getenv("CERTSYNC_CONNECTION_MODE", DEFAULT_CONNECTION_MODE),
            "kubeconfig": os.getenv("CERTSYNC_KUBECONFIG", default_kubeconfig_path()),
            "namespace": os.getenv("CERTSYNC_NAMESPACE", DEFAULT_NAMESPACE),
            "secret_names": _split_list(os.getenv("CERTSYNC_SECRET_NAMES")),
            "tls_hosts": _split_list(os.getenv("CERTSYNC_TLS_HOSTS")),
            "synchronization_interval": int(
                os.getenv("CERTSYNC_SYNCHRONIZATION_INTERVAL", str(DEFAULT_SYNCHRONIZATION_INTERVAL))),
            "tls_timeout": float(timeout) if timeout else None,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
