"""Shared pytest fixtures and configuration for the haile test suite.

Guidelines
----------
* No internet access in any test.
* ``requests`` is mocked at the session boundary; responses are real
  ``requests.Response`` objects built in memory.
* Tests that touch ``sys.path`` or ``sys.modules`` restore them through
  ``monkeypatch``.
"""

from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's ``HAILE_*`` settings out of the tests."""
    for name in list(os.environ):
        if name.startswith("HAILE_"):
            monkeypatch.delenv(name)
