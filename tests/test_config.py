"""Tests for the configuration module."""

import os
import unittest
from unittest import mock

from certsync.config import CertSyncConfig


class TestCertSyncConfig(unittest.TestCase):
    """Test cases for CertSyncConfig."""

    def test_default_values(self):
        """Test that default values are set correctly."""
        with mock.patch.dict(os.environ, {"HOME": "/home/certsync"}):
            config = CertSyncConfig()
        self.assertEqual(config.connection_mode, "kubectl")
        self.assertEqual(config.kubeconfig, os.path.join("/home/certsync", ".kube", "config"))
        self.assertEqual(config.namespace, "default")
        self.assertEqual(config.secret_names, [])
        self.assertEqual(config.tls_hosts, [])
        self.assertEqual(config.synchronization_interval, 20)
        self.assertIsNone(config.tls_timeout)

    def test_from_env(self):
        """Test that values are loaded from environment variables."""
        with mock.patch.dict(os.environ, {
            "CERTSYNC_CONNECTION_MODE": "incluster",
            "CERTSYNC_KUBECONFIG": "/etc/kube/config",
            "CERTSYNC_NAMESPACE": "prod",
            "CERTSYNC_SECRET_NAMES": "cert-a, cert-b",
            "CERTSYNC_TLS_HOSTS": "host1:443,host2:8443",
            "CERTSYNC_SYNCHRONIZATION_INTERVAL": "30",
            "CERTSYNC_TLS_TIMEOUT": "2.5",
        }):
            config = CertSyncConfig.from_env()

        self.assertEqual(config.connection_mode, "incluster")
        self.assertEqual(config.kubeconfig, "/etc/kube/config")
        self.assertEqual(config.namespace, "prod")
        self.assertEqual(config.secret_names, ["cert-a", "cert-b"])
        self.assertEqual(config.tls_hosts, ["host1:443", "host2:8443"])
        self.assertEqual(config.synchronization_interval, 30)
        self.assertEqual(config.tls_timeout, 2.5)
        self.assertEqual(config.targets, [("cert-a", "host1:443"), ("cert-b", "host2:8443")])

    def test_from_env_overrides(self):
        """Test that explicit values take precedence over the environment."""
        with mock.patch.dict(os.environ, {
            "CERTSYNC_NAMESPACE": "prod",
            "CERTSYNC_SECRET_NAMES": "cert-a",
            "CERTSYNC_TLS_HOSTS": "host1:443",
        }):
            config = CertSyncConfig.from_env(
                namespace="staging",
                secret_names=["cert-b"],
                tls_hosts=["host2:443"],
                synchronization_interval=None,
            )

        self.assertEqual(config.namespace, "staging")
        self.assertEqual(config.secret_names, ["cert-b"])
        self.assertEqual(config.tls_hosts, ["host2:443"])
        self.assertEqual(config.synchronization_interval, 20)

    def test_mismatched_targets(self):
        """Test that the number of secret names must match the number of hosts."""
        with self.assertRaises(ValueError):
            CertSyncConfig(secret_names=["cert-a", "cert-b"], tls_hosts=["host1:443"])

        with self.assertRaises(ValueError):
            CertSyncConfig(secret_names=[], tls_hosts=["host1:443"])

    def test_host_format_validation(self):
        """Test that hosts must be in HOST:PORT format."""
        with self.assertRaises(ValueError):
            CertSyncConfig(secret_names=["cert-a"], tls_hosts=["host1"])

    def test_interval_validation(self):
        """Test that the interval must be positive."""
        with self.assertRaises(ValueError):
            CertSyncConfig(synchronization_interval=0)

    def test_timeout_validation(self):
        """Test that the timeout must be positive when set."""
        CertSyncConfig(tls_timeout=1)

        with self.assertRaises(ValueError):
            CertSyncConfig(tls_timeout=-1)

    def test_empty_values_validation(self):
        """Test that names and namespace cannot be empty."""
        with self.assertRaises(ValueError):
            CertSyncConfig(namespace="")

        with self.assertRaises(ValueError):
            CertSyncConfig(secret_names=[""], tls_hosts=["host1:443"])


if __name__ == "__main__":
    unittest.main()
