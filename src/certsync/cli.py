"""Command-line interface for certsync.

This module serves as the entrypoint for the certsync application.
"""

import argparse
import logging
import sys

from certsync import __description__, __version__
from certsync.config import DEFAULT_CONNECTION_MODE, DEFAULT_NAMESPACE, CertSyncConfig, default_kubeconfig_path
from certsync.kubernetes import (
    KubernetesConfigurationError,
    KubernetesConnection,
    SecretResource,
    SecretSynchronizationError,
)
from certsync.scheduler import Scheduler
from certsync.tls import CertificateFetchError


def setup_logging(verbose: bool = False) -> None:
    """Set up logging configuration.

    Args:
        verbose: Whether to enable verbose logging.
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(level=log_level, format=log_format, stream=sys.stdout)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: Command-line arguments to parse. If None, sys.argv will be used.

    Returns:
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(prog="certsync", description=__description__)

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    parser.add_argument(
        "--connection-mode",
        help=f"What type of connection to use: incluster, kubectl (default: {DEFAULT_CONNECTION_MODE}, "
             "overrides CERTSYNC_CONNECTION_MODE)",
    )

    parser.add_argument(
        "--kubeconfig",
        help=f"Absolute path to the kubeconfig file (default: {default_kubeconfig_path()}, "
             "overrides CERTSYNC_KUBECONFIG)",
    )

    parser.add_argument(
        "--namespace",
        help=f"Namespace where to synchronize the certificates (default: {DEFAULT_NAMESPACE}, "
             "overrides CERTSYNC_NAMESPACE)",
    )

    parser.add_argument(
        "--secret-name",
        dest="secret_names",
        action="append",
        help="Name of the Secret that will be created with the PEM information. Repeat once per TLS host "
             "(overrides CERTSYNC_SECRET_NAMES)",
    )

    parser.add_argument(
        "--tls-host",
        dest="tls_hosts",
        action="append",
        help="HOST:PORT that will be dialed to get the TLS certificate. Repeat once per Secret name "
             "(overrides CERTSYNC_TLS_HOSTS)",
    )

    parser.add_argument(
        "--interval",
        type=int,
        help="Synchronization interval in seconds (overrides CERTSYNC_SYNCHRONIZATION_INTERVAL)",
    )

    parser.add_argument(
        "--timeout", type=float, help="Timeout in seconds for each TLS connection (overrides CERTSYNC_TLS_TIMEOUT)"
    )

    parser.add_argument("--reconcile-once", action="store_true", help="Run synchronization once and exit")

    return parser.parse_args(args)


def main(args: list[str] | None = None) -> int:
    """Main entry point for the certsync application.

    Args:
        args: Command-line arguments. If None, sys.argv will be used.

    Returns:
        Exit code.
    """
    try:
        parsed_args = parse_args(args)
        setup_logging(parsed_args.verbose)
        logger = logging.getLogger(__name__)
        logger.info("Starting certsync")

        # Environment first, command-line arguments on top
        config = CertSyncConfig.from_env(
            connection_mode=parsed_args.connection_mode,
            kubeconfig=parsed_args.kubeconfig,
            namespace=parsed_args.namespace,
            secret_names=parsed_args.secret_names,
            tls_hosts=parsed_args.tls_hosts,
            synchronization_interval=parsed_args.interval,
            tls_timeout=parsed_args.timeout,
        )

        logger.info(
            f"Configuration: connection_mode={config.connection_mode}, namespace={config.namespace}, "
            f"secrets={len(config.secret_names)}, interval={config.synchronization_interval}s"
        )

        # Generate the Kubernetes client to modify the resources
        logger.info("Generating the client to connect to Kubernetes")
        connection = KubernetesConnection(connection_mode=config.connection_mode, kubeconfig=config.kubeconfig)
        secret_resource = SecretResource(connection, namespace=config.namespace)

        scheduler = Scheduler(config=config, secret_resource=secret_resource)

        if parsed_args.reconcile_once:
            logger.info("Running synchronization once")
            scheduler.reconcile()
        else:
            logger.info("Running continuous synchronization")
            scheduler.run_reconciliation_loop()

    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Interrupted by user")
    except ValueError as e:
        logging.getLogger(__name__).error(f"Configuration error: {e}")
        return 1
    except KubernetesConfigurationError as e:
        logging.getLogger(__name__).error(f"Error connecting to Kubernetes API: {e}")
        return 1
    except (CertificateFetchError, SecretSynchronizationError) as e:
        logging.getLogger(__name__).error(f"Synchronization failed: {e}")
        return 1
    except Exception as e:
        logging.getLogger(__name__).error(f"An unexpected error occurred: {e}")
        return 1

    logging.getLogger(__name__).info("certsync exiting")
    return 0


if __name__ == "__main__":
    sys.exit(main())
