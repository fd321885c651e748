"""Component normalisers — one pure transformation per URL component."""

from __future__ import annotations

from url_canon.errors import MalformedUrlError
from url_canon.handlers import HandlerRegistry
from url_canon.models import Configuration, ParsedComponents, PathPolicy, QueryPolicy
from url_canon.pipeline.path import normalize_path
from url_canon.pipeline.query import normalize_query


def canonical_host(host: str) -> str:
    """Lower-case *host* and IDNA-encode non-ASCII labels.

    IPv6 literals (``[...]``) are only lower-cased.

    Raises:
        MalformedUrlError: If a non-ASCII host cannot be IDNA-encoded.
    """
    host = host.lower()
    if host.startswith("[") or host.isascii():
        return host
    try:
        return host.encode("idna").decode("ascii")
    except UnicodeError as exc:
        raise MalformedUrlError(host, "host is not a valid internationalised domain name") from exc


def normalize_scheme(scheme: str | None, handlers: HandlerRegistry) -> str | None:
    """Lower-case the scheme, then run the ``scheme`` handler."""
    normalized = scheme.lower() if scheme is not None else None
    return handlers.invoke("scheme", normalized, scheme)


def normalize_host(host: str | None, handlers: HandlerRegistry) -> str | None:
    """Canonicalise the host with :func:`canonical_host`, then run the ``host`` handler.

    Raises:
        MalformedUrlError: If the host cannot be IDNA-encoded.
    """
    if host is None:
        return None
    return handlers.invoke("host", canonical_host(host), host)


def normalize_user(user: str | None, handlers: HandlerRegistry) -> str | None:
    """Pass the user name through to its handler."""
    return handlers.invoke("user", user, user)


def normalize_password(password: str | None, handlers: HandlerRegistry) -> str | None:
    """Pass the password through to its handler."""
    return handlers.invoke("password", password, password)


def normalize_port(port: int | None, handlers: HandlerRegistry) -> int | None:
    """Pass the port through to its handler; a handler may drop default ports."""
    return handlers.invoke("port", port, port)


def normalize_path_component(path: str | None, policy: PathPolicy, handlers: HandlerRegistry) -> str | None:
    """Run the enabled path steps, then the ``path`` handler.

    Args:
        path:     Raw path from the parser.
        policy:   Path steps to apply.
        handlers: Post-processing hooks.

    Returns:
        The handled path, or ``None`` when nothing is left.
    """
    normalized = normalize_path(path, policy) if path is not None else None
    return handlers.invoke("path", normalized or None, path)


def normalize_query_component(query: str | None, policy: QueryPolicy, handlers: HandlerRegistry) -> str | None:
    """Run the enabled query steps, then the ``query`` handler.

    Args:
        query:    Raw query string from the parser.
        policy:   Query steps and tracking parameter list.
        handlers: Post-processing hooks.

    Returns:
        The handled query, or ``None`` when every pair was removed.
    """
    normalized = normalize_query(query, policy) if query is not None else None
    return handlers.invoke("query", normalized or None, query)


def normalize_fragment(fragment: str | None, handlers: HandlerRegistry) -> str | None:
    """Pass the fragment through to its handler."""
    return handlers.invoke("fragment", fragment, fragment)


def normalize_components(
    raw: ParsedComponents,
    config: Configuration,
    handlers: HandlerRegistry,
) -> ParsedComponents:
    """Normalise every component of *raw* under *config*, then run *handlers*.

    *config* is passed explicitly rather than read from shared state so the
    same registry can serve display and fingerprint normalisation at once.

    Args:
        raw:      Components straight from :func:`~url_canon.pipeline.parser.split_url`.
        config:   Effective configuration for this call.
        handlers: Post-processing hooks.

    Returns:
        Normalised :class:`ParsedComponents`; blank results become ``None``.
    """
    return ParsedComponents(
        scheme=normalize_scheme(raw.scheme, handlers),
        host=normalize_host(raw.host, handlers),
        user=normalize_user(raw.user, handlers),
        password=normalize_password(raw.password, handlers),
        port=normalize_port(raw.port, handlers),
        path=normalize_path_component(raw.path, config.path_policy, handlers),
        query=normalize_query_component(raw.query, config.query_policy, handlers),
        fragment=normalize_fragment(raw.fragment, handlers),
    )
