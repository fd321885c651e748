"""Exception hierarchy for URL canonicalisation."""

from __future__ import annotations


class UrlCanonError(Exception):
    """Base class for every error raised by :mod:`url_canon`."""


class MalformedUrlError(UrlCanonError, ValueError):
    """The raw string could not be split into valid URL components.

    Args:
        url:    The offending input.
        reason: Short human-readable explanation.
    """

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Malformed URL {url!r}: {reason}")
        self.url = url
        self.reason = reason


class InvalidArgumentError(UrlCanonError, ValueError):
    """A public operation was called with arguments it cannot accept."""


class UnsupportedAlgorithmError(UrlCanonError, ValueError):
    """The requested fingerprint digest is not available.

    Args:
        algorithm: Digest name as supplied by the caller.
    """

    def __init__(self, algorithm: str) -> None:
        super().__init__(f"Unsupported fingerprint algorithm: {algorithm!r}")
        self.algorithm = algorithm
