"""Tests for fingerprint computation and digest selection."""

from __future__ import annotations

import hashlib
from concurrent.futures import ThreadPoolExecutor

import pytest

from url_canon.errors import UnsupportedAlgorithmError
from url_canon.models import Configuration, PathPolicy, QueryPolicy
from url_canon.normalizer import UrlNormalizer
from url_canon.pipeline.fingerprint import (
    DigestAlgorithm,
    compute_fingerprint,
    fingerprint_configuration,
)


class TestDigestAlgorithm:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("sha256", DigestAlgorithm.SHA256),
            ("SHA-256", DigestAlgorithm.SHA256),
            ("md5", DigestAlgorithm.MD5),
            ("sha3-256", DigestAlgorithm.SHA3_256),
            ("sha3_512", DigestAlgorithm.SHA3_512),
            ("BLAKE2b", DigestAlgorithm.BLAKE2B),
            (DigestAlgorithm.SHA1, DigestAlgorithm.SHA1),
        ],
    )
    def test_from_name(self, name: str, expected: DigestAlgorithm) -> None:
        """Names are matched ignoring case and separators."""
        assert DigestAlgorithm.from_name(name) is expected

    @pytest.mark.parametrize("name", ["crc32", "", "shake_128", "sha"])
    def test_unsupported(self, name: str) -> None:
        """Unknown or non-fixed-length digests are rejected."""
        with pytest.raises(UnsupportedAlgorithmError) as exc_info:
            DigestAlgorithm.from_name(name)
        assert exc_info.value.algorithm == name

    def test_hexdigest_matches_hashlib(self) -> None:
        expected = hashlib.sha1(b"https://example.com").hexdigest()
        assert DigestAlgorithm.SHA1.hexdigest("https://example.com") == expected


class TestFingerprintConfiguration:
    def test_policies_forced_on(self) -> None:
        """Every query and path step is enabled."""
        config = Configuration().resolve(
            {
                "query_policy": {"without_duplicates": False, "with_sorted_params": False},
                "path_policy": {"without_dot_segments": False},
            }
        )
        derived = fingerprint_configuration(config)
        assert derived.query_policy == QueryPolicy()
        assert derived.path_policy == PathPolicy()

    def test_tracking_list_preserved(self) -> None:
        """The caller's tracking list survives."""
        config = Configuration().resolve({"query_policy": {"tracking_params_list": ["session"]}})
        assert fingerprint_configuration(config).query_policy.tracking_params_list == ("session",)

    def test_source_untouched(self) -> None:
        """The caller's configuration is not modified."""
        config = Configuration().resolve({"query_policy": {"with_sorted_params": False}})
        fingerprint_configuration(config)
        assert config.query_policy.with_sorted_params is False

    def test_algorithm_kept(self) -> None:
        config = Configuration(fingerprint_algorithm="md5")
        assert fingerprint_configuration(config).fingerprint_algorithm == "md5"


class TestFingerprint:
    def test_known_value(self, normalizer: UrlNormalizer) -> None:
        """The digest is taken over the canonical form."""
        expected = hashlib.sha256(b"https://example.com/a?b=1").hexdigest()
        assert normalizer.fingerprint("HTTPS://EXAMPLE.com/a/?utm_source=x&b=1") == expected
        assert compute_fingerprint("https://example.com/a?b=1", DigestAlgorithm.SHA256) == expected

    def test_deterministic(self, normalizer: UrlNormalizer) -> None:
        url = "https://example.com/test?utm_source=google&utm_medium=cpc"
        assert normalizer.fingerprint(url) == normalizer.fingerprint(url)

    def test_param_order_and_duplicates_ignored(self, display_normalizer: UrlNormalizer) -> None:
        """Display settings do not leak into the fingerprint."""
        fp = display_normalizer.fingerprint
        assert fp("https://example.com/p?a=1&b=2") == fp("https://example.com/p?b=2&a=1")
        assert fp("https://example.com/p?a=1&b=2") == fp("https://example.com/p?a=1&b=2&a=1")
        assert fp("https://example.com/p?a=1") == fp("https://example.com/p?a=1&a=2")

    def test_tracking_removed_only_from_fingerprint(self, display_normalizer: UrlNormalizer) -> None:
        url = "https://example.com/p?utm_source=google&q=1"
        assert "utm_source" in display_normalizer.normalize(url)
        assert display_normalizer.fingerprint(url) == display_normalizer.fingerprint("https://example.com/p?q=1")

    def test_path_variants_collapse(self, display_normalizer: UrlNormalizer) -> None:
        """Dot segments and empty segments do not change the fingerprint."""
        fp = display_normalizer.fingerprint
        assert fp("https://example.com/a/./b/../c/") == fp("https://example.com/a/c")
        assert fp("https://example.com//a//c") == fp("https://example.com/a/c")

    def test_indexed_array_forms_collapse(self, display_normalizer: UrlNormalizer) -> None:
        """Indexed and bare list keys carrying the same values share one fingerprint."""
        fp = display_normalizer.fingerprint
        assert fp("https://example.com/s?a[0]=x&a[1]=x") == fp("https://example.com/s?a[]=x&a[]=x")
        assert fp("https://example.com/s?a[0]=x&a[1]=x") == fp("https://example.com/s?a[]=x")
        assert fp("https://example.com/s?a[0]=x&a[1]=y") != fp("https://example.com/s?a[]=x")

    def test_custom_tracking_list(self) -> None:
        """Only the configured tracking names are ignored."""
        normalizer = UrlNormalizer(
            config={
                "query_policy": {"without_tracking_params": False, "tracking_params_list": ["session"]}
            }
        )
        assert normalizer.fingerprint("https://example.com/?session=1&q=2") == normalizer.fingerprint(
            "https://example.com/?q=2"
        )
        assert normalizer.fingerprint("https://example.com/?utm_source=x") != normalizer.fingerprint(
            "https://example.com/"
        )

    def test_algorithm_selects_digest_length(self) -> None:
        assert len(UrlNormalizer(config={"fingerprint_algorithm": "md5"}).fingerprint("https://a.b")) == 32
        assert len(UrlNormalizer(config={"fingerprint_algorithm": "sha1"}).fingerprint("https://a.b")) == 40
        assert len(UrlNormalizer().fingerprint("https://a.b")) == 64

    def test_empty_url(self, normalizer: UrlNormalizer) -> None:
        """An empty URL hashes the empty string."""
        assert normalizer.fingerprint("") == hashlib.sha256(b"").hexdigest()

    def test_instance_config_unchanged(self, display_normalizer: UrlNormalizer) -> None:
        before = display_normalizer.config
        display_normalizer.fingerprint("https://example.com/p?b=2&a=1")
        assert display_normalizer.config is before
        assert display_normalizer.config.query_policy.with_sorted_params is False

    def test_concurrent_fingerprint_and_normalize(self, display_normalizer: UrlNormalizer) -> None:
        """Fingerprinting on other threads never changes what normalize() sees."""
        url = "https://example.com/p?b=2&a=1&b=2&utm_source=x"
        expected_display = display_normalizer.normalize(url)
        expected_fp = display_normalizer.fingerprint(url)

        def work(i: int) -> tuple[str, str]:
            if i % 2:
                return ("fp", display_normalizer.fingerprint(url))
            return ("norm", display_normalizer.normalize(url))

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(work, range(400)))

        for kind, value in results:
            assert value == (expected_fp if kind == "fp" else expected_display)
