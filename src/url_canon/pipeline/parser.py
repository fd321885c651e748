"""Parse boundary — split a raw string into URL components."""

from __future__ import annotations

import re
from urllib.parse import SplitResult, urlsplit

import structlog

from url_canon.errors import MalformedUrlError
from url_canon.models import ParsedComponents

logger = structlog.get_logger(__name__)

_WHITESPACE_OR_CONTROL = re.compile(r"[\x00-\x20\x7f]")


def _reject(url: str, reason: str) -> MalformedUrlError:
    logger.debug("parser.rejected", url=url[:200], reason=reason)
    return MalformedUrlError(url, reason)


def _raw_host(netloc: str) -> str | None:
    """Return the host part of *netloc* exactly as written (IPv6 brackets kept)."""
    if not netloc:
        return None
    hostport = netloc.rpartition("@")[2]
    if hostport.startswith("["):
        return hostport[: hostport.index("]") + 1]
    return hostport.partition(":")[0]


def _is_scheme_only(parts: SplitResult) -> bool:
    return bool(parts.scheme) and not (parts.netloc or parts.path or parts.query or parts.fragment)


def split_url(url: str) -> ParsedComponents:
    """Split *url* into its raw components using :func:`urllib.parse.urlsplit`.

    No normalisation happens here beyond what ``urlsplit`` itself does
    (lower-casing the scheme); blank components come back as ``None``.

    Args:
        url: Raw URL string. Surrounding whitespace is ignored.

    Returns:
        :class:`ParsedComponents` holding the raw values. An empty input
        yields a component set where everything is ``None``.

    Raises:
        MalformedUrlError: If the string contains whitespace or control
            characters, has a scheme and nothing else, has an unbalanced
            IPv6 literal, or carries an invalid port.
    """
    candidate = url.strip()
    if not candidate:
        return ParsedComponents()

    if _WHITESPACE_OR_CONTROL.search(candidate):
        raise _reject(url, "contains whitespace or control characters")

    try:
        parts = urlsplit(candidate)
        port = parts.port
    except ValueError as exc:
        raise _reject(url, str(exc)) from exc

    if _is_scheme_only(parts):
        raise _reject(url, "scheme is not followed by an authority, path, query or fragment")

    return ParsedComponents(
        scheme=parts.scheme,
        host=_raw_host(parts.netloc),
        user=parts.username,
        password=parts.password,
        port=port,
        path=parts.path,
        query=parts.query,
        fragment=parts.fragment,
    )
