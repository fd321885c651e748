"""Path normalisation steps."""

from __future__ import annotations

import re

from url_canon.models import PathPolicy

_REPEATED_SLASHES = re.compile(r"/{2,}")


def remove_dot_segments(path: str) -> str:
    """Resolve ``.`` and ``..`` segments as described in RFC 3986 §5.2.4.

    Examples:
        ``"/path/./to/../resource"`` → ``"/path/resource"``
        ``"/a/b/../../.."`` → ``"/"``
    """
    output: list[str] = []
    remaining = path
    while remaining:
        if remaining.startswith("../"):
            remaining = remaining[3:]
        elif remaining.startswith("./"):
            remaining = remaining[2:]
        elif remaining.startswith("/./"):
            remaining = remaining[2:]
        elif remaining == "/.":
            remaining = "/"
        elif remaining.startswith("/../"):
            remaining = remaining[3:]
            if output:
                output.pop()
        elif remaining == "/..":
            remaining = "/"
            if output:
                output.pop()
        elif remaining in (".", ".."):
            remaining = ""
        else:
            start = 1 if remaining.startswith("/") else 0
            end = remaining.find("/", start)
            if end == -1:
                end = len(remaining)
            output.append(remaining[:end])
            remaining = remaining[end:]
    return "".join(output)


def remove_empty_segments(path: str) -> str:
    """Fold runs of consecutive slashes into one."""
    return _REPEATED_SLASHES.sub("/", path)


def remove_trailing_slash(path: str) -> str:
    """Strip trailing slashes, leaving a bare root ``/`` intact."""
    if not path.endswith("/"):
        return path
    return path.rstrip("/") or "/"


def normalize_path(path: str, policy: PathPolicy) -> str:
    """Apply the enabled path steps in order: dot segments, empty segments, trailing slash.

    Each step can expose work for the next one (``/a/./`` only gains a
    trailing slash once the dot segment is gone), so the order is fixed.

    Args:
        path:   Raw path as split from the URL.
        policy: Which steps to run.

    Returns:
        The normalised path, possibly empty.
    """
    if policy.without_dot_segments:
        path = remove_dot_segments(path)
    if policy.without_empty_segments:
        path = remove_empty_segments(path)
    if policy.without_trailing_slash:
        path = remove_trailing_slash(path)
    return path
