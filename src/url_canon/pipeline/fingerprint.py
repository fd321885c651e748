"""Fingerprint engine — digest of the fingerprint-mode canonical form."""

from __future__ import annotations

import hashlib
from enum import Enum

import structlog

from url_canon.errors import UnsupportedAlgorithmError
from url_canon.models import Configuration, PathPolicy, QueryPolicy

logger = structlog.get_logger(__name__)


class DigestAlgorithm(str, Enum):
    """Fixed-length digests available from :mod:`hashlib` on every platform."""

    MD5 = "md5"
    SHA1 = "sha1"
    SHA224 = "sha224"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"
    SHA3_224 = "sha3_224"
    SHA3_256 = "sha3_256"
    SHA3_384 = "sha3_384"
    SHA3_512 = "sha3_512"
    BLAKE2B = "blake2b"
    BLAKE2S = "blake2s"

    @classmethod
    def from_name(cls, name: str | DigestAlgorithm) -> DigestAlgorithm:
        """Resolve a digest by name, ignoring case, ``-`` and ``_``.

        ``"SHA-256"``, ``"sha256"`` and ``"sha3-256"`` all resolve.

        Raises:
            UnsupportedAlgorithmError: If *name* is not a member.
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower().replace("-", "").replace("_", "")
        for member in cls:
            if member.value.replace("_", "") == key:
                return member
        logger.warning("fingerprint.unsupported_algorithm", algorithm=str(name))
        raise UnsupportedAlgorithmError(str(name))

    def hexdigest(self, text: str) -> str:
        """Return the lowercase hex digest of *text* encoded as UTF-8."""
        return hashlib.new(self.value, text.encode("utf-8")).hexdigest()


def fingerprint_configuration(config: Configuration) -> Configuration:
    """Derive the configuration used for fingerprinting from *config*.

    Every query and path step is switched on; only the caller's tracking
    parameter list survives. *config* itself is not modified, so one
    instance configuration can be shared across threads.
    """
    return config.model_copy(
        update={
            "query_policy": QueryPolicy(tracking_params_list=config.query_policy.tracking_params_list),
            "path_policy": PathPolicy(),
        }
    )


def compute_fingerprint(canonical_url: str, algorithm: DigestAlgorithm) -> str:
    """Hash an already fingerprint-normalised URL.

    Args:
        canonical_url: Output of the normalisation pipeline.
        algorithm:     Digest to use.

    Returns:
        Lowercase hex digest.
    """
    return algorithm.hexdigest(canonical_url)
