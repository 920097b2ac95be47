"""``haile doctor``: environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment can load and use haile.  Falls back
to plain stderr output when Rich is not installed.
"""

from __future__ import annotations

import platform
import sys

from haile import bootstrap
from haile.cli import exit_codes
from haile.cli.console import console
from haile.exceptions import HaileError
from haile.version import __version__

_OK = "[green]OK[/green]"
_FAIL = "[red]FAIL[/red]"


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _haile_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the haile version row."""
    return "haile", __version__, _OK


def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = _OK if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _requests_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the HTTP foundation row."""
    try:
        module = bootstrap.require_foundation()
    except HaileError:
        return bootstrap.FOUNDATION, "NOT INSTALLED", _FAIL
    return bootstrap.FOUNDATION, str(getattr(module, "__version__", "unknown")), _OK


def _units_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the bootstrap units row."""
    try:
        loaded = bootstrap.namespace()
    except HaileError as exc:
        return "units", str(exc), _FAIL
    return "units", ", ".join(loaded.unit_names), _OK


def _os_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, _OK


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\nhaile doctor", file=sys.stderr)
    print("=" * 56, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<32} {'Status':<8}", file=sys.stderr)
    print("-" * 56, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<32} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor() -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all checks pass,
        :data:`exit_codes.GENERAL_ERROR` if any check fails.
    """
    checks = [
        _haile_version_check(),
        _python_version_check(),
        _requests_version_check(),
        _units_check(),
        _os_check(),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_table(checks)
        print(
            "Some checks failed." if has_failure else "All checks passed.",
            file=sys.stderr,
        )
    else:
        table = Table(
            title="haile doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=12)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)
        for label, value, status in checks:
            table.add_row(label, value, status)

        console.print()
        console.print(table)
        console.print()
        if has_failure:
            console.print("[bold red]Some checks failed.[/bold red]")
        else:
            console.print("[bold green]All checks passed.[/bold green]")

    return exit_codes.GENERAL_ERROR if has_failure else exit_codes.SUCCESS
