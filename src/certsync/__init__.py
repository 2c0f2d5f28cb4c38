__version__ = "0.1.0"
__description__ = (
    "Periodically harvest TLS certificates from remote endpoints and store them as Kubernetes Secrets"
)
