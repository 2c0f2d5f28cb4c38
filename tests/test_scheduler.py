"""Tests for the scheduler module."""

import unittest
from unittest import mock

from kubernetes.client.rest import ApiException

from certsync.config import CertSyncConfig
from certsync.kubernetes.secrets import SecretResource, SecretSynchronizationError
from certsync.scheduler import Scheduler
from certsync.secrets import SecretRecord
from certsync.tls import CertificateFetchError


class TestScheduler(unittest.TestCase):
    """Test cases for the Scheduler class."""

    def setUp(self):
        """Set up test fixtures."""
        self.config = CertSyncConfig(
            namespace="prod",
            secret_names=["cert-a", "cert-b"],
            tls_hosts=["host1:443", "host2:443"],
            synchronization_interval=20,
            tls_timeout=5,
        )
        self.secret_resource = mock.Mock(spec=SecretResource)
        self.secret_resource.synchronize.return_value = 2
        self.fetcher = mock.Mock(side_effect=lambda host, timeout=None: f"PEM({host})")
        self.scheduler = Scheduler(config=self.config, secret_resource=self.secret_resource, fetcher=self.fetcher)

    def test_reconcile(self):
        """Test that reconcile fetches every certificate then synchronizes them."""
        self.assertEqual(self.scheduler.reconcile(), 2)

        self.fetcher.assert_has_calls([mock.call("host1:443", timeout=5), mock.call("host2:443", timeout=5)])
        self.secret_resource.synchronize.assert_called_once_with(
            [
                SecretRecord(name="cert-a", certificate="PEM(host1:443)", host="host1:443"),
                SecretRecord(name="cert-b", certificate="PEM(host2:443)", host="host2:443"),
            ],
            namespace="prod",
        )

    def test_reconcile_fetch_error_skips_synchronization(self):
        """Test that no Secret is synchronized when a certificate cannot be fetched."""
        self.fetcher.side_effect = CertificateFetchError("host1:443", "connection refused")

        with self.assertRaises(CertificateFetchError):
            self.scheduler.reconcile()

        self.secret_resource.synchronize.assert_not_called()

    @mock.patch("certsync.scheduler.time.sleep")
    def test_loop_continues_after_errors(self, mock_sleep):
        """Test that failed runs are logged and the loop goes on."""
        mock_sleep.side_effect = [None, None, KeyboardInterrupt()]
        self.secret_resource.synchronize.side_effect = [
            SecretSynchronizationError("cert-a", "prod", ApiException(status=500)),
            RuntimeError("boom"),
            2,
        ]

        with self.assertLogs("certsync.scheduler", level="INFO") as logs:
            self.scheduler.run_reconciliation_loop()

        self.assertEqual(self.secret_resource.synchronize.call_count, 3)
        mock_sleep.assert_has_calls([mock.call(20)] * 3)
        output = "\n".join(logs.output)
        self.assertIn("Error synchronizing the Secrets", output)
        self.assertIn("Unexpected error during synchronization", output)
        self.assertIn("Next synchronization in 20 seconds", output)

    @mock.patch("certsync.scheduler.time.sleep")
    def test_loop_fetch_error(self, mock_sleep):
        """Test that a fetch error is logged and the loop sleeps normally."""
        mock_sleep.side_effect = KeyboardInterrupt()
        self.fetcher.side_effect = CertificateFetchError("host1:443", "connection refused")

        with self.assertLogs("certsync.scheduler", level="ERROR") as logs:
            self.scheduler.run_reconciliation_loop()

        self.assertIn("Error fetching the certificates", logs.output[0])
        self.secret_resource.synchronize.assert_not_called()
        mock_sleep.assert_called_once_with(20)


if __name__ == "__main__":
    unittest.main()
