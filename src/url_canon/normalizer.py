"""URL normaliser facade — parse, normalise, build, fingerprint and compare URLs."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from url_canon.errors import InvalidArgumentError
from url_canon.handlers import HandlerOverrides, HandlerRegistry
from url_canon.models import (
    ConfigOverrides,
    Configuration,
    ParsedComponents,
    UrlDetails,
    default_configuration,
    resolve_configuration,
)
from url_canon.pipeline.builder import build_url
from url_canon.pipeline.components import normalize_components
from url_canon.pipeline.fingerprint import (
    DigestAlgorithm,
    compute_fingerprint,
    fingerprint_configuration,
)
from url_canon.pipeline.parser import split_url

logger = structlog.get_logger(__name__)


class UrlNormalizer:
    """Canonicalise URLs for display and deduplication.

    The configuration and handlers are fixed at construction time and never
    mutated afterwards, so one instance can be shared between threads::

        normalizer = UrlNormalizer(
            config={"query_policy": {"with_sorted_params": False}},
            handlers={"port": lambda port, _: None if port == 80 else port},
        )
        normalizer.normalize("HTTP://Example.com:80/a/./b/?utm_source=x")
        # 'http://example.com/a/b'

    Args:
        config:   Overrides merged over :func:`~url_canon.models.default_configuration`.
        handlers: Per-component hooks merged over the pass-through defaults.

    Raises:
        UnsupportedAlgorithmError: If the configured fingerprint algorithm
            is not available.
    """

    def __init__(self, config: ConfigOverrides = None, handlers: HandlerOverrides = None) -> None:
        self._config = resolve_configuration(default_configuration(), config)
        self._handlers = HandlerRegistry().merged(handlers)
        self._algorithm = DigestAlgorithm.from_name(self._config.fingerprint_algorithm)
        logger.debug(
            "normalizer.created",
            algorithm=self._algorithm.value,
            handlers=list(self._handlers.registered()),
        )

    @property
    def config(self) -> Configuration:
        """The resolved, frozen configuration."""
        return self._config

    @property
    def handlers(self) -> HandlerRegistry:
        """A copy of the handler registry."""
        return self._handlers.merged()

    @property
    def algorithm(self) -> DigestAlgorithm:
        """Digest used by :meth:`fingerprint`."""
        return self._algorithm

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _parse(self, url: str, config: Configuration) -> ParsedComponents:
        return normalize_components(split_url(url), config, self._handlers)

    def _normalize(self, url: str, config: Configuration) -> str:
        return build_url(**self._parse(url, config).as_build_kwargs())

    def parse(self, url: str) -> ParsedComponents:
        """Split *url* and normalise each component.

        Raises:
            MalformedUrlError: If *url* cannot be split.
        """
        return self._parse(url, self._config)

    def normalize(self, url: str) -> str:
        """Return the canonical display form of *url* (``""`` for an empty input).

        Raises:
            MalformedUrlError: If *url* cannot be split.
        """
        return self._normalize(url, self._config)

    def build(
        self,
        scheme: str | None = None,
        host: str | None = None,
        user: str | None = None,
        password: str | None = None,
        port: int | None = None,
        path: str | None = None,
        query: str | Mapping[str, Any] | None = None,
        fragment: str | None = None,
    ) -> str:
        """Assemble a URL from components; see :func:`~url_canon.pipeline.builder.build_url`."""
        return build_url(
            scheme=scheme,
            host=host,
            user=user,
            password=password,
            port=port,
            path=path,
            query=query,
            fragment=fragment,
        )

    # ------------------------------------------------------------------
    # Fingerprinting
    # ------------------------------------------------------------------

    def fingerprint(self, url: str) -> str:
        """Return a dedup key for *url*.

        The URL is normalised with every query and path step enabled
        (keeping this instance's tracking parameter list), whatever the
        display configuration says, and the result is hashed.

        Raises:
            MalformedUrlError: If *url* cannot be split.
        """
        canonical = self._normalize(url, fingerprint_configuration(self._config))
        return compute_fingerprint(canonical, self._algorithm)

    def details(self, url: str) -> UrlDetails:
        """Return fingerprint, normalised form and parsed components of *url*."""
        components = self.parse(url)
        return UrlDetails(
            fingerprint=self.fingerprint(url),
            original_url=url,
            normalized_url=build_url(**components.as_build_kwargs()),
            parsed_components=components,
        )

    def equals(self, *urls: str) -> bool:
        """Return True if every URL has the same fingerprint as the first.

        Raises:
            InvalidArgumentError: If fewer than two URLs are given.
            MalformedUrlError: If any URL cannot be split.
        """
        if len(urls) < 2:
            raise InvalidArgumentError("At least two URLs are required for comparison.")
        fingerprints = [self.fingerprint(url) for url in urls]
        return all(fp == fingerprints[0] for fp in fingerprints)


# Module-level default instance (created lazily so settings can be patched first).
_default_normalizer: UrlNormalizer | None = None


def _get_normalizer() -> UrlNormalizer:
    global _default_normalizer
    if _default_normalizer is None:
        _default_normalizer = UrlNormalizer()
    return _default_normalizer


def normalize_url(url: str) -> str:
    """Normalise *url* with the default configuration."""
    return _get_normalizer().normalize(url)


def url_fingerprint(url: str) -> str:
    """Fingerprint *url* with the default configuration."""
    return _get_normalizer().fingerprint(url)
