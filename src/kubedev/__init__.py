"""kubedev - developer convenience layer over the Kubernetes API."""

__version__ = "0.1.0"
