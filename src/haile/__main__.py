"""Allow ``python -m haile`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m haile`` behaves identically to the ``haile`` console script.
"""

from __future__ import annotations

from haile.cli.app import cli

if __name__ == "__main__":
    cli()
