"""kubedev CLI command groups."""
