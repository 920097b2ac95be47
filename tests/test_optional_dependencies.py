"""Regression tests for optional dependency boundaries.

Bootstrap paths (``--help``, ``--version``, ``doctor``) must keep working
without Rich, and request rendering must fail cleanly with a typed
error only when the Rich table is actually needed.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
import requests

from haile.cli import exit_codes
from haile.cli.app import main
from haile.cli.console import escape
from haile.exceptions import DependencyMissingError


def _hide_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("rich", "rich.console", "rich.table", "rich.logging", "rich.markup"):
        monkeypatch.setitem(sys.modules, name, None)


@pytest.fixture
def session() -> Iterator[MagicMock]:
    http = requests.Response()
    http.status_code = 200
    http._content = b'{"ok": true}'
    http.reason = "OK"
    http.url = "http://marathon.test/ping"
    http.elapsed = timedelta(milliseconds=1)
    http.headers["Content-Type"] = "application/json"
    with patch("haile.client.requests.Session") as session_cls:
        session_cls.return_value.request.return_value = http
        yield session_cls.return_value


def test_help_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_version_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0


def test_doctor_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    assert main(["doctor"]) == exit_codes.SUCCESS


def test_request_with_headers_errors_cleanly_without_rich(
    monkeypatch: pytest.MonkeyPatch, session: MagicMock,
) -> None:
    _hide_rich(monkeypatch)
    with pytest.raises(DependencyMissingError, match="rich is not installed"):
        main(["http://marathon.test/ping"])


def test_request_without_headers_falls_back_to_plain_output(
    monkeypatch: pytest.MonkeyPatch,
    session: MagicMock,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)
    code = main(["--no-headers", "http://marathon.test/ping"])
    captured = capsys.readouterr()

    assert code == exit_codes.SUCCESS
    assert '"ok": true' in captured.out
    assert "200 OK" in captured.err


def test_escape_is_identity_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    assert escape("[bold]x[/bold]") == "[bold]x[/bold]"


def test_verbose_logging_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    import logging

    from haile.cli.console import configure_logging

    _hide_rich(monkeypatch)
    with patch("haile.cli.console.logging.basicConfig") as basic_config:
        configure_logging(verbose=True)

    basic_config.assert_called_once()
    assert basic_config.call_args.kwargs["level"] == logging.DEBUG
    assert logging.getLogger("haile").level == logging.DEBUG
    logging.getLogger("haile").setLevel(logging.NOTSET)
