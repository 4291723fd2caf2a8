"""Unit tests for resource name helpers."""

from __future__ import annotations

import pytest

from kubedev.utils.naming import to_kebab_case


@pytest.mark.unit
@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("appSettings", "app-settings"),
        ("AppSettings", "app-settings"),
        ("DB_PASSWORD", "db-password"),
        ("nginx.conf", "nginx-conf"),
        ("HTTPServerConfig", "http-server-config"),
        ("tls.crt", "tls-crt"),
        ("already-kebab", "already-kebab"),
        ("__private__", "private"),
        ("v2Api", "v2-api"),
    ],
)
def test_to_kebab_case(value: str, expected: str) -> None:
    assert to_kebab_case(value) == expected
