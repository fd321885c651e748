"""Pydantic v2 data models for URL canonicalisation."""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from url_canon.config import load_configuration_file, settings
from url_canon.utils.tracking_params import DEFAULT_TRACKING_PARAMS

# Policies accept ``without_duplicates`` as well as ``withoutDuplicates`` and
# keep unknown keys around for custom handlers.
_POLICY_CONFIG = ConfigDict(
    frozen=True,
    extra="allow",
    alias_generator=to_camel,
    populate_by_name=True,
)


# ---------------------------------------------------------------------------
# Normalisation policy
# ---------------------------------------------------------------------------


class QueryPolicy(BaseModel):
    """Toggles for the query-string normaliser, applied in declaration order."""

    model_config = _POLICY_CONFIG

    without_duplicates: bool = True
    without_empty_pairs: bool = True
    with_sorted_params: bool = True
    without_numeric_indices: bool = True
    without_tracking_params: bool = True
    tracking_params_list: tuple[str, ...] = DEFAULT_TRACKING_PARAMS


class PathPolicy(BaseModel):
    """Toggles for the path normaliser."""

    model_config = _POLICY_CONFIG

    without_dot_segments: bool = True
    without_empty_segments: bool = True
    without_trailing_slash: bool = True


class Configuration(BaseModel):
    """Complete normalisation configuration for one :class:`UrlNormalizer`.

    Instances are frozen; use :meth:`resolve` to derive a new configuration
    with overrides applied.
    """

    model_config = _POLICY_CONFIG

    fingerprint_algorithm: str = "sha256"
    query_policy: QueryPolicy = Field(default_factory=QueryPolicy)
    path_policy: PathPolicy = Field(default_factory=PathPolicy)

    def resolve(self, overrides: ConfigOverrides = None) -> Configuration:
        """Return a copy of this configuration with *overrides* merged in."""
        return resolve_configuration(self, overrides)


ConfigOverrides = Union[Configuration, Mapping[str, Any], None]


# ---------------------------------------------------------------------------
# Config resolver
# ---------------------------------------------------------------------------


def _field_name(model: type[BaseModel], key: str) -> str:
    """Map a snake_case name or camelCase alias onto the model's field name."""
    for name, field in model.model_fields.items():
        if key == name or key == field.alias:
            return name
    return key


def _section_model(model: type[BaseModel], name: str) -> type[BaseModel] | None:
    field = model.model_fields.get(name)
    if field is None:
        return None
    annotation = field.annotation
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    return None


def _explicit_values(overrides: BaseModel | Mapping[str, Any]) -> Mapping[str, Any]:
    # Partial models only contribute the fields the caller actually set.
    if isinstance(overrides, BaseModel):
        return overrides.model_dump(exclude_unset=True)
    return overrides


def _merge(
    model: type[BaseModel],
    base: Mapping[str, Any],
    overrides: BaseModel | Mapping[str, Any],
) -> dict[str, Any]:
    merged = dict(base)
    for key, value in _explicit_values(overrides).items():
        name = _field_name(model, key)
        section = _section_model(model, name)
        if section is not None and isinstance(value, (Mapping, BaseModel)):
            merged[name] = _merge(section, merged.get(name) or {}, value)
        else:
            merged[name] = value
    return merged


def resolve_configuration(defaults: Configuration, overrides: ConfigOverrides = None) -> Configuration:
    """Merge *overrides* over *defaults*, section by section.

    Scalar leaves replace the default, list leaves such as
    ``tracking_params_list`` are replaced wholesale, and nested sections are
    merged so unspecified keys keep their default value.

    Args:
        defaults:  Base configuration.
        overrides: ``None``, a (possibly nested, snake or camel case) mapping,
                   or a partial :class:`Configuration`.

    Returns:
        A new :class:`Configuration`; *defaults* is left untouched.

    Raises:
        pydantic.ValidationError: If an override has the wrong type.
    """
    if overrides is None:
        return defaults
    merged = _merge(Configuration, defaults.model_dump(), overrides)
    return Configuration.model_validate(merged)


@lru_cache(maxsize=1)
def default_configuration() -> Configuration:
    """Return built-in defaults adjusted by :data:`~url_canon.config.settings`.

    Environment-level overrides come from ``URL_CANON_FINGERPRINT_ALGORITHM``
    and the optional YAML file named by ``URL_CANON_CONFIG_FILE``.
    """
    config = Configuration(fingerprint_algorithm=settings.fingerprint_algorithm)
    if settings.config_file is not None:
        config = resolve_configuration(config, load_configuration_file(settings.config_file))
    return config


# ---------------------------------------------------------------------------
# Parsed URL
# ---------------------------------------------------------------------------


class ParsedComponents(BaseModel):
    """The eight URL components; any of them may be absent.

    Blank strings are stored as ``None`` so that absence has exactly one
    representation.
    """

    model_config = ConfigDict(frozen=True)

    scheme: Optional[str] = None
    host: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    port: Optional[int] = None
    path: Optional[str] = None
    query: Union[str, dict[str, Any], None] = None
    fragment: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:  # noqa: ANN401
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def as_build_kwargs(self) -> dict[str, Any]:
        """Return the components as keyword arguments for ``build``."""
        return {name: getattr(self, name) for name in type(self).model_fields}


class UrlDetails(BaseModel):
    """Everything known about one URL, as returned by ``details``."""

    fingerprint: str
    original_url: str
    normalized_url: str
    parsed_components: ParsedComponents
