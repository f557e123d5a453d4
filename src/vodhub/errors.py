"""Domain exceptions for vodhub.

Upstream failures are raised per source by the source client. During fan-out
they are swallowed so that one bad site only shrinks the merged result; a
single-site detail lookup lets them propagate to the API layer.
"""

from __future__ import annotations


class VodhubError(Exception):
    """Base class for all vodhub errors."""


class UpstreamError(VodhubError):
    """A content site failed to produce a usable response."""

    def __init__(self, site_key: str, message: str):
        self.site_key = site_key
        super().__init__(f"[{site_key}] {message}")


class UpstreamTimeout(UpstreamError):
    """The site did not answer within the per-call timeout."""


class UpstreamNetworkError(UpstreamError):
    """Transport failure or non-success HTTP status."""

    def __init__(self, site_key: str, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(site_key, message)


class UpstreamMalformedResponse(UpstreamError):
    """The site answered with markup or otherwise unstructured content."""


class BackendUnavailable(VodhubError):
    """A durable cache backend could not be initialized."""


class SourceNotFound(VodhubError):
    """No registered site matches the requested key."""

    def __init__(self, site_key: str):
        self.site_key = site_key
        super().__init__(f"Site not found: {site_key}")
