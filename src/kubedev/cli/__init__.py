"""kubedev command line interface."""
