"""Configuration loading and management for refdoc.

Configuration sources are merged in priority order:
    1. Defaults (defined in RefdocConfig)
    2. Global config (~/.refdoc.toml)
    3. Project config (./refdoc.toml)
    4. Explicit config file
    5. Environment variables (REFDOC_* prefix)
    6. Keyword overrides

Example:
    >>> config = load_config(source_root="/srv/wordpress")
    >>> config.source_root
    '/srv/wordpress'
    >>> config.archive_url("function")
    '/reference/functions/'
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

DEFAULT_BASIC_KEYS: tuple[str, ...] = (
    "callable",
    "url",
    "type",
    "summary",
    "description",
    "namespace",
    "return",
    "signature",
    "params",
    "source_file",
    "start_line",
    "end_line",
    "changelog",
    "deprecated",
)

DEFAULT_ADVANCED_KEYS: tuple[str, ...] = ("uses", "used_by")

_TUPLE_FIELDS = ("basic_keys", "advanced_keys", "types_with_source_code")


@dataclass(frozen=True)
class RefdocConfig:
    """Settings for the reference layer.

    Attributes:
        Source extraction:
            source_root: Import root the parser ran against; source files
                are resolved relative to it
            strip_source_indent: Remove the first line's indentation from
                every extracted line
            types_with_source_code: Kinds whose records have extractable source

        Links:
            site_url: Prefix for every generated URL (may be empty)
            archive_paths: Archive path per kind, used for record URLs and
                for resolving {@see} references
            term_paths: Archive path per taxonomy, used for term links

        Factory:
            type_aliases: Extra record type tags mapped onto a kind,
                e.g. {"wp-parser-function": "function"}
            explanation_type: Record type tag of hand-written explanations
                stored as children of a reference record

        Serialization:
            basic_keys: Fields in the basic projection
            advanced_keys: Nested-entity fields added by the full projection

        Rendering:
            template_dir: Directory searched for templates
            template_extension: Template file extension

        Caching:
            cache_enabled: Cache extracted source code on disk
            cache_dir: Directory for cache storage
            cache_ttl_hours: Cache time-to-live in hours

        Output control:
            verbosity: Logging verbosity level
    """

    # Source extraction
    source_root: str = "."
    strip_source_indent: bool = True
    types_with_source_code: tuple[str, ...] = ("class", "method", "function")

    # Links
    site_url: str = ""
    archive_paths: dict[str, str] = field(
        default_factory=lambda: {
            "function": "/reference/functions/",
            "hook": "/reference/hooks/",
            "class": "/reference/classes/",
            "method": "/reference/methods/",
        }
    )
    term_paths: dict[str, str] = field(
        default_factory=lambda: {
            "since": "/reference/since/",
            "source-file": "/reference/files/",
            "namespace": "/reference/namespaces/",
        }
    )

    # Factory
    type_aliases: dict[str, str] = field(default_factory=dict)
    explanation_type: str = "wporg_explanations"

    # Serialization
    basic_keys: tuple[str, ...] = DEFAULT_BASIC_KEYS
    advanced_keys: tuple[str, ...] = DEFAULT_ADVANCED_KEYS

    # Rendering
    template_dir: str = "templates/refdoc"
    template_extension: str = ".html"

    # Caching
    cache_enabled: bool = True
    cache_dir: str = ".refdoc-cache"
    cache_ttl_hours: int = 24

    # Output control
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.cache_ttl_hours < 0:
            raise InvalidConfigError("cache_ttl_hours", self.cache_ttl_hours, "must be non-negative")
        if not self.template_extension.startswith("."):
            raise InvalidConfigError(
                "template_extension", self.template_extension, "must start with '.'"
            )
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet/normal/verbose")
        for key in self.basic_keys + self.advanced_keys:
            if not isinstance(key, str) or not key:
                raise InvalidConfigError("basic_keys", key, "keys must be non-empty strings")
        overlap = set(self.basic_keys) & set(self.advanced_keys)
        if overlap:
            raise InvalidConfigError(
                "advanced_keys", sorted(overlap), "a key cannot be both basic and advanced"
            )

    @property
    def source_root_path(self) -> Path:
        return Path(self.source_root).expanduser()

    def archive_url(self, kind: str) -> str:
        """Archive URL for a kind, '' when the kind has no archive."""
        path = self.archive_paths.get(kind)
        if path is None:
            return ""
        return self.site_url.rstrip("/") + path

    def term_url(self, taxonomy: str, slug: str) -> str:
        """URL of a term archive page, '' when the taxonomy has no archive."""
        path = self.term_paths.get(taxonomy)
        if path is None or not slug:
            return ""
        return f"{self.site_url.rstrip('/')}{path}{slug}/"


DEFAULT_CONFIG = RefdocConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> RefdocConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated RefdocConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    if config_file is not None and not config_file.exists():
        raise ConfigurationError(f"Config file not found: {config_file}")

    merged: dict = {}
    sources = [
        ("global config", Path.home() / ".refdoc.toml"),
        ("project config", Path.cwd() / "refdoc.toml"),
    ]
    if config_file is not None:
        sources.append(("config file", config_file))

    for label, path in sources:
        if not path.exists():
            continue
        try:
            merged.update(_load_toml_file(path))
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Invalid {label} '{path}': {e}")

    merged.update(_load_env_vars())

    verbose = overrides.pop("verbose", False)
    quiet = overrides.pop("quiet", False)
    if quiet:
        overrides["verbosity"] = "quiet"
    elif verbose:
        overrides["verbosity"] = "verbose"

    merged.update(overrides)

    # TOML arrays arrive as lists
    for name in _TUPLE_FIELDS:
        if name in merged and isinstance(merged[name], list):
            merged[name] = tuple(merged[name])

    try:
        return RefdocConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from REFDOC_* environment variables.

    Only scalar fields can be set this way, e.g. REFDOC_SOURCE_ROOT,
    REFDOC_SITE_URL, REFDOC_CACHE_ENABLED, REFDOC_CACHE_TTL_HOURS.

    Returns:
        Dict of field_name -> parsed_value for any REFDOC_* vars found.
    """
    type_hints = get_type_hints(RefdocConfig)

    result: dict[str, Any] = {}

    for field_name in RefdocConfig.__dataclass_fields__:
        env_key = f"REFDOC_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Returns None for types that cannot be expressed in a single variable
    (mappings, tuples).

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if origin in (dict, tuple, list) or type_hint in (dict, tuple, list):
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If no TOML parser is available
        Exception: If TOML parsing fails
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
