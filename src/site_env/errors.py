"""Error types."""

from __future__ import annotations

from typing import Any


class SiteEnvError(Exception):
    """Base exception for site-env errors."""


class InvalidContextError(SiteEnvError):
    """Raised when a deploy context tag is not recognized."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Unknown deploy context: {value!r}")
        self.value = value


class InvalidScopeError(SiteEnvError):
    """Raised when a scope tag is not recognized."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Unknown scope: {value!r}")
        self.value = value


class InvalidSourceError(SiteEnvError):
    """Raised when a source tag is not recognized."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Unknown variable source: {value!r}")
        self.value = value


class EnvelopeAPIError(SiteEnvError):
    """Raised when the variable service answers with an error status.

    Carries the HTTP status code and the decoded response body (or raw text
    when the body is not JSON).
    """

    def __init__(self, status_code: int, detail: Any = None) -> None:
        msg = f"Variable service returned HTTP {status_code}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
        self.status_code = status_code
        self.detail = detail
