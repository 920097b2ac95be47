"""Client configuration.

Values come from keyword arguments or, through :meth:`ClientConfig.from_env`,
from ``HAILE_*`` environment variables.  The CLI layers its own flags on
top with :meth:`ClientConfig.merged`.
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from haile.exceptions import ConfigurationError
from haile.version import __version__

ENV_PREFIX = "HAILE_"

_FALSE_VALUES: frozenset[str] = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Connection settings shared by every request a client makes."""

    base_url: str | None = None
    """Prefix joined to relative request paths, e.g. ``http://host:8080``."""

    username: str | None = None
    password: str | None = None

    timeout: float = 30.0
    """Default per-request timeout in seconds."""

    verify: bool = True
    """Whether TLS certificates are verified."""

    user_agent: str = f"haile/{__version__}"

    @property
    def auth(self) -> tuple[str, str] | None:
        """Basic-auth pair, or ``None`` when no username is configured."""
        if not self.username:
            return None
        return (self.username, self.password or "")

    def merged(self, **overrides: Any) -> ClientConfig:
        """Return a copy with every non-``None`` override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if "timeout" in changes:
            changes["timeout"] = parse_timeout(changes["timeout"])
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """Build a config from ``HAILE_*`` variables.

        Recognised variables: ``HAILE_BASE_URL``, ``HAILE_USERNAME``,
        ``HAILE_PASSWORD``, ``HAILE_TIMEOUT``, ``HAILE_VERIFY``.

        Raises
        ------
        ConfigurationError
            If ``HAILE_TIMEOUT`` is not a positive number.
        """
        env = os.environ if environ is None else environ

        def _get(name: str) -> str | None:
            value = env.get(ENV_PREFIX + name)
            if value is None or not value.strip():
                return None
            return value.strip()

        kwargs: dict[str, Any] = {
            "base_url": _get("BASE_URL"),
            "username": _get("USERNAME"),
            "password": _get("PASSWORD"),
        }
        timeout = _get("TIMEOUT")
        if timeout is not None:
            kwargs["timeout"] = parse_timeout(timeout)
        verify = _get("VERIFY")
        if verify is not None:
            kwargs["verify"] = verify.lower() not in _FALSE_VALUES
        return cls(**kwargs)


def parse_timeout(raw: object) -> float:
    """Convert *raw* to a finite, positive ``float`` or raise :class:`ConfigurationError`."""
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"Invalid timeout: {raw!r}",
            hint="Timeout must be a number of seconds, e.g. 10 or 2.5",
        ) from exc
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(
            f"Invalid timeout: {raw!r}",
            hint="Timeout must be a finite number of seconds greater than zero.",
        )
    return value
