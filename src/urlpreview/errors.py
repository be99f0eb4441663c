"""Error taxonomy shared by the probe, fetcher, renderer and relay."""

from __future__ import annotations


class PreviewError(Exception):
    """Base class for preview failures."""


class InvalidTargetURL(ValueError, PreviewError):
    """Raised when user input cannot be normalized into an http(s) URL."""


class ProbeFailure(PreviewError):
    """Raised when response headers could not be obtained for a URL."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Probe failed for {url}: {reason}")


class FetchFailed(PreviewError):
    """Raised when a direct fetch returns a non-success status or cannot connect."""

    def __init__(self, status: int | None, reason: str) -> None:
        self.status = status
        self.reason = reason
        if status is None:
            super().__init__(reason)
        else:
            super().__init__(f"HTTP {status} {reason}".rstrip())


class RenderFailed(PreviewError):
    """Raised when the headless browser cannot launch or navigate."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RelayError(PreviewError):
    """Raised for relay requests that map to an HTTP error status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(message)
