"""Package configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

from url_canon.errors import InvalidArgumentError

logger = structlog.get_logger(__name__)


class Settings(BaseSettings):
    """Runtime defaults, loaded from ``URL_CANON_*`` environment variables / .env file."""

    fingerprint_algorithm: str = "sha256"
    config_file: Path | None = None
    log_level: str = "INFO"
    environment: str = "development"

    model_config = SettingsConfigDict(
        env_prefix="URL_CANON_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Module-level singleton; imported everywhere.
settings = Settings()


def load_configuration_file(path: Path | str) -> dict[str, Any]:
    """Read configuration overrides from a YAML document.

    The document mirrors :class:`~url_canon.models.Configuration`, e.g.::

        fingerprint_algorithm: md5
        query_policy:
          with_sorted_params: false
          tracking_params_list: [utm_source, gclid]

    Args:
        path: Location of the YAML file.

    Returns:
        The parsed mapping; ``{}`` when the file is missing or empty.

    Raises:
        InvalidArgumentError: If the document is not a mapping.
    """
    config_path = Path(path)
    if not config_path.is_file():
        logger.warning("config.file_missing", path=str(config_path))
        return {}

    with config_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise InvalidArgumentError(
            f"Configuration file {config_path} must contain a mapping, got {type(raw).__name__}."
        )
    logger.info("config.file_loaded", path=str(config_path), sections=sorted(raw))
    return raw
