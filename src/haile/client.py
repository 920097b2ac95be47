"""Client unit: the ``requests``-backed HTTP client.

This module is the **only** place in the codebase that sends requests
through ``requests``.  Transport exceptions are caught here and turned into
failed :class:`~haile.response.Response` objects; HTTP error statuses
are returned as unsuccessful responses.  Callers that prefer
exceptions use :meth:`Response.raise_for_status`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import requests

from haile.config import ClientConfig, parse_timeout
from haile.exceptions import InvalidURLError
from haile.protocols import HttpSession

if TYPE_CHECKING:
    from haile.response import Response

logger = logging.getLogger(__name__)

_SCHEMES: tuple[str, ...] = ("http://", "https://")


class Client:
    """HTTP client bound to an optional base URL and credentials.

    Usage::

        with Client("http://marathon.local:8080", "admin", "secret") as client:
            response = client.get("/v2/apps")
            if response.success:
                print(response.parsed_response)
            else:
                print(response.error)

    Parameters
    ----------
    base_url:
        Prefix for relative request paths.  Overrides ``config.base_url``.
    username, password:
        Basic-auth credentials.  Override the values in *config*.
    config:
        Connection settings.  Defaults to :meth:`ClientConfig.from_env`.
    session:
        Any object satisfying :class:`~haile.protocols.HttpSession`.
        When omitted a ``requests.Session`` is created on first use and
        owned (closed) by the client.
    """

    def __init__(
        self,
        base_url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        *,
        config: ClientConfig | None = None,
        session: HttpSession | None = None,
    ) -> None:
        base = config if config is not None else ClientConfig.from_env()
        self.config: ClientConfig = base.merged(
            base_url=base_url,
            username=username,
            password=password,
        )
        if self.config.base_url is not None:
            self._validate_url(self.config.base_url)

        self._session: HttpSession | None = session
        self._owns_session: bool = session is None

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the session if this client created it."""
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def default_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.config.user_agent,
        }

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        data: Any = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Response:
        """Send a request and wrap the outcome in a :class:`Response`.

        Parameters
        ----------
        method:
            HTTP verb, case-insensitive.
        path:
            Path relative to ``base_url``, or an absolute ``http(s)`` URL.
        params:
            Query-string parameters.
        json:
            Body serialised as JSON.
        data:
            Raw body or form fields.
        headers:
            Per-request headers; they override the defaults.
        timeout:
            Seconds; falls back to ``config.timeout``.

        Raises
        ------
        InvalidURLError
            If *path* is relative and no base URL is configured.
        ConfigurationError
            If *timeout* is not a finite number of seconds above zero.
        """
        # Bound at call time: the response unit loads after this one.
        from haile.response import Response

        url = self.build_url(path)
        verb = method.upper()
        merged_headers = {**self.default_headers, **dict(headers or {})}

        kwargs: dict[str, Any] = {
            "headers": merged_headers,
            "timeout": parse_timeout(timeout) if timeout is not None else self.config.timeout,
            "verify": self.config.verify,
        }
        if params:
            kwargs["params"] = dict(params)
        if json is not None:
            kwargs["json"] = json
        if data is not None:
            kwargs["data"] = data
        if self.config.auth is not None:
            kwargs["auth"] = self.config.auth

        logger.debug("%s %s", verb, url)
        try:
            http = self._get_session().request(verb, url, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", verb, url, exc)
            return Response.failure(str(exc), url=url)

        response = Response.from_http(http)
        logger.debug(
            "%s %s -> %s (%.0f ms)", verb, url, response.status_code, response.elapsed_ms,
        )
        return response

    def get(self, path: str, **kwargs: Any) -> Response:
        return self.request("GET", path, **kwargs)

    def head(self, path: str, **kwargs: Any) -> Response:
        return self.request("HEAD", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Response:
        return self.request("DELETE", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> Response:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> Response:
        return self.request("PATCH", path, **kwargs)

    # ------------------------------------------------------------------
    # URL handling
    # ------------------------------------------------------------------

    def build_url(self, path: str) -> str:
        """Join *path* to the base URL with exactly one ``/``.

        Absolute ``http(s)`` URLs are returned unchanged.
        """
        stripped = path.strip()
        if stripped.startswith(_SCHEMES):
            return stripped
        if self.config.base_url is None:
            raise InvalidURLError(
                f"Relative path without a base URL: {stripped or '(empty)'}",
                hint="Pass base_url to Client() or set HAILE_BASE_URL.",
            )
        base = self.config.base_url.rstrip("/")
        if not stripped:
            return base
        return f"{base}/{stripped.lstrip('/')}"

    @staticmethod
    def _validate_url(url: str) -> None:
        """Raise :class:`InvalidURLError` for empty or non-HTTP URLs."""
        stripped = url.strip()
        if not stripped:
            raise InvalidURLError("URL must not be empty.")
        if not stripped.startswith(_SCHEMES):
            raise InvalidURLError(
                f"Invalid URL: {stripped}",
                hint="URL must start with http:// or https://",
            )

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def _get_session(self) -> HttpSession:
        """Lazy-create the ``requests`` session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session
