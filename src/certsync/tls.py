"""TLS certificate fetching module for certsync.

This module dials remote endpoints and extracts the leaf certificate they present.

Certificate chain and hostname verification are intentionally disabled: the goal is
to harvest whatever certificate an endpoint serves, not to authenticate it. Never
reuse these connections to exchange application data.
"""

import logging
import socket
import ssl

from cryptography import x509
from cryptography.hazmat.primitives.serialization import Encoding

logger = logging.getLogger(__name__)


class CertificateFetchError(Exception):
    """Raised when the certificate of a remote endpoint cannot be retrieved."""

    def __init__(self, address: str, message: str):
        super().__init__(f"{address}: {message}")
        self.address = address


class EmptyCertificateChainError(CertificateFetchError):
    """Raised when a remote endpoint completes the handshake without presenting a certificate."""

    def __init__(self, address: str):
        super().__init__(address, "peer presented no certificate")


def parse_address(address: str) -> tuple[str, int]:
    """Split a HOST:PORT address.

    IPv6 literals must be enclosed in brackets, e.g. ``[::1]:443``.

    Args:
        address: The address to parse.

    Returns:
        A (host, port) tuple.

    Raises:
        ValueError: If the address has no valid port.
    """
    host, sep, port_str = address.rpartition(":")
    if not sep or not host:
        raise ValueError(f"Address must be in format HOST:PORT, got '{address}'")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
        if not host:
            raise ValueError(f"Address must be in format HOST:PORT, got '{address}'")
    elif ":" in host:
        raise ValueError(f"IPv6 addresses must be enclosed in brackets, got '{address}'")

    try:
        port = int(port_str)
    except ValueError:
        raise ValueError(f"Invalid port in address '{address}'")
    if not 0 < port < 65536:
        raise ValueError(f"Port out of range in address '{address}'")

    return host, port


def _create_context() -> ssl.SSLContext:
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    # check_hostname must be disabled before verify_mode can be relaxed
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def fetch_leaf_certificate(address: str, timeout: float | None = None) -> str:
    """Fetch the leaf certificate presented by a TLS endpoint.

    The connection is opened, used for the handshake only and closed before returning.

    Args:
        address: The endpoint in HOST:PORT format.
        timeout: Optional socket timeout in seconds. None uses the blocking socket default.

    Returns:
        The leaf certificate encoded as a PEM block.

    Raises:
        CertificateFetchError: If the connection or the handshake fails, or the certificate cannot be parsed.
        EmptyCertificateChainError: If the endpoint presented no certificate.
    """
    host, port = parse_address(address)
    context = _create_context()

    try:
        with socket.create_connection((host, port), timeout=timeout) as sock:
            with context.wrap_socket(sock, server_hostname=host) as tls_sock:
                der = tls_sock.getpeercert(binary_form=True)
    except (OSError, ssl.SSLError) as e:
        raise CertificateFetchError(address, str(e)) from e

    if not der:
        raise EmptyCertificateChainError(address)

    try:
        certificate = x509.load_der_x509_certificate(der)
    except ValueError as e:
        raise CertificateFetchError(address, f"invalid certificate: {e}") from e

    pem = certificate.public_bytes(Encoding.PEM).decode("ascii")
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Fetched certificate from {address}: {describe_certificate(pem)}")
    return pem


def describe_certificate(pem: str) -> str:
    """Return a short human readable description of a PEM certificate."""
    certificate = x509.load_pem_x509_certificate(pem.encode("ascii"))
    return f"subject={certificate.subject.rfc4514_string()}, not_after={certificate.not_valid_after_utc.isoformat()}"
