"""Workspace-level pytest configuration and fixtures.

This file provides shared fixtures and configuration for all tests in the
repository.
"""

import pytest


@pytest.fixture(autouse=True, scope="function")
def isolate_pidea_environment(monkeypatch: pytest.MonkeyPatch):
    """Automatically remove PIDEA environment variables for each test.

    Configuration classes fall back to environment variables, so values set
    in the developer's shell would otherwise change test results.
    """
    for name in ("PIDEA_ENV", "PIDEA_STRICT_CATEGORIES"):
        monkeypatch.delenv(name, raising=False)

    yield
