"""Protocols (interfaces) consumed by :mod:`haile.client`.

The client depends ONLY on this protocol, never on a concrete session
class, so tests can inject a mock and callers can supply a configured
``requests.Session`` (adapters, proxies, certificates).
"""

from __future__ import annotations

from typing import Any, Protocol


class HttpSession(Protocol):
    """Contract for the transport object a :class:`~haile.client.Client` drives.

    ``requests.Session`` satisfies this protocol structurally.
    """

    def request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send one request and return a ``requests.Response``-like object.

        The returned object must expose ``status_code``, ``headers``,
        ``content``, ``url``, ``reason`` and ``elapsed``.

        Raises
        ------
        requests.RequestException
            For any transport-level failure.
        """
        ...  # pragma: no cover

    def close(self) -> None:
        """Release pooled connections."""
        ...  # pragma: no cover
