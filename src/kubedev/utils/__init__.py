"""Utility functions for kubedev."""

from kubedev.utils.naming import to_kebab_case
from kubedev.utils.terminal import is_tty, raw_mode, read_ready

__all__ = [
    "is_tty",
    "raw_mode",
    "read_ready",
    "to_kebab_case",
]
