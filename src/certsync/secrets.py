"""Secret records for certsync.

This module pairs the configured Secret names with the certificates fetched from their hosts.
"""

import logging
from collections.abc import Callable, Sequence

from pydantic import BaseModel

from certsync.tls import fetch_leaf_certificate

logger = logging.getLogger(__name__)

# Data key holding the PEM certificate inside the Secret
CERTIFICATE_KEY = "tls.crt"

Fetcher = Callable[..., str]


class SecretRecord(BaseModel):
    """A Secret to synchronize.

    Attributes:
        name: Name of the Secret.
        namespace: Namespace of the Secret, filled at synchronization time.
        certificate: PEM encoded certificate stored under the tls.crt key.
        host: HOST:PORT the certificate was fetched from.
    """
    name: str
    namespace: str | None = None
    certificate: str
    host: str | None = None


def build_secrets(
    secret_names: Sequence[str],
    tls_hosts: Sequence[str],
    fetcher: Fetcher = fetch_leaf_certificate,
    timeout: float | None = None,
) -> list[SecretRecord]:
    """Get the TLS certificates from the hosts and craft the Secret records with them.

    The first host that cannot be fetched aborts the whole batch.

    Args:
        secret_names: Secret names, paired positionally with tls_hosts.
        tls_hosts: HOST:PORT addresses to fetch the certificates from.
        fetcher: Callable returning the PEM certificate of an address.
        timeout: Optional timeout passed to the fetcher.

    Returns:
        The Secret records, in input order.

    Raises:
        ValueError: If the two sequences have different lengths.
        CertificateFetchError: If a certificate cannot be fetched.
    """
    if len(secret_names) != len(tls_hosts):
        raise ValueError("The number of Secrets to generate and the TLS hosts to visit must be the same")

    secrets = []
    for name, host in zip(secret_names, tls_hosts):
        logger.debug(f"Fetching certificate for Secret {name} from {host}")
        certificate = fetcher(host, timeout=timeout)
        secrets.append(SecretRecord(name=name, certificate=certificate, host=host))

    return secrets
