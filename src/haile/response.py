"""Response unit: the value object every client call returns.

A :class:`Response` is built either from a completed ``requests``
response or, when the transport failed, from the failure message.  It
never holds a reference to the underlying ``requests`` object, so it is
safe to keep after the session is closed.
"""

from __future__ import annotations

import codecs
import json
from dataclasses import dataclass, field
from typing import Any

from haile.exceptions import HttpStatusError, RequestError


@dataclass(frozen=True, slots=True)
class Response:
    """Outcome of a single HTTP request."""

    status_code: int | None
    """HTTP status, or ``None`` when no response was received."""

    headers: dict[str, str] = field(default_factory=dict)
    content: bytes = b""
    url: str = ""
    reason: str = ""
    elapsed_ms: float = 0.0

    transport_error: str | None = None
    """Failure message when the request never completed."""

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_http(cls, http: Any) -> Response:
        """Copy the relevant fields out of a ``requests.Response``."""
        elapsed = getattr(http, "elapsed", None)
        return cls(
            status_code=int(http.status_code),
            headers={str(k): str(v) for k, v in http.headers.items()},
            content=http.content or b"",
            url=str(http.url or ""),
            reason=str(http.reason or ""),
            elapsed_ms=elapsed.total_seconds() * 1000 if elapsed is not None else 0.0,
        )

    @classmethod
    def failure(cls, message: str, *, url: str = "") -> Response:
        """Build a response for a request that never got an answer."""
        return cls(status_code=None, url=url, transport_error=message)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @property
    def success(self) -> bool:
        """``True`` for a completed request with a 2xx status."""
        if self.transport_error is not None or self.status_code is None:
            return False
        return 200 <= self.status_code < 300

    @property
    def error(self) -> str | None:
        """Human-readable failure reason, or ``None`` on success."""
        if self.success:
            return None
        if self.transport_error is not None:
            return self.transport_error

        parsed = self.parsed_response
        if isinstance(parsed, dict):
            for key in ("message", "error"):
                if parsed.get(key):
                    return str(parsed[key])

        text = self.text.strip()
        if text:
            return text
        return f"HTTP {self.status_code} {self.reason}".rstrip()

    def raise_for_status(self) -> None:
        """Raise unless the request succeeded.

        Raises
        ------
        RequestError
            When the request never completed.
        HttpStatusError
            When the server answered with a non-2xx status.
        """
        if self.success:
            return
        if self.status_code is None:
            raise RequestError(
                self.error or "Request failed.",
                response=self,
                hint="Check the URL and your network connection.",
            )
        raise HttpStatusError(
            f"HTTP {self.status_code}: {self.error}",
            status_code=self.status_code,
            response=self,
        )

    # ------------------------------------------------------------------
    # Body access
    # ------------------------------------------------------------------

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return default

    @property
    def content_type(self) -> str:
        return (self.header("content-type") or "").split(";", 1)[0].strip().lower()

    @property
    def encoding(self) -> str:
        """The ``charset`` parameter of ``Content-Type``, else ``utf-8``."""
        for param in (self.header("content-type") or "").split(";")[1:]:
            key, _, value = param.partition("=")
            if key.strip().lower() == "charset":
                charset = value.strip().strip("\"'")
                try:
                    return codecs.lookup(charset).name
                except LookupError:
                    break
        return "utf-8"

    @property
    def text(self) -> str:
        return self.content.decode(self.encoding, errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON, raising ``ValueError`` on bad input."""
        return json.loads(self.content)

    @property
    def parsed_response(self) -> Any:
        """Body decoded according to its content type.

        ``None`` for an empty body, the decoded JSON document for JSON
        bodies that parse, and the text otherwise.
        """
        if not self.content:
            return None
        if "json" in self.content_type:
            try:
                return self.json()
            except ValueError:
                return self.text
        return self.text

    def __str__(self) -> str:
        if self.status_code is None:
            return f"ERROR: {self.transport_error}"
        return f"{self.status_code} {self.reason}".rstrip()
