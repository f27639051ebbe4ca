"""Configuration loading and management."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

from .constants import (
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_TERMINAL,
    DEFAULT_WRAP_WIDTH,
    GENERATE_TOC_OPTION,
)

CONFIG_TABLE = "remarkup-toc"
DOTFILE_NAME = ".remarkup-toc.toml"


@dataclass
class RemarkupConfig:
    """Configuration for rendering remarkup documents.

    Attributes:
        generate_toc: Generate header anchors and a table of contents.
        text_mode: Render plain text instead of HTML.
        terminal: String appended by ``shorten`` when it cuts text.
        wrap_width: Default width for hard-wrapping.
        max_file_size: Maximum file size in bytes that will be processed.

    Examples:
        RemarkupConfig(generate_toc=False, wrap_width=72)
    """

    # Rendering
    generate_toc: bool = True
    text_mode: bool = False

    # Text utilities
    terminal: str = DEFAULT_TERMINAL
    wrap_width: int = DEFAULT_WRAP_WIDTH

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE

    def engine_options(self) -> dict[str, object]:
        """Return the options exposed to header rules through ``get_config``."""
        return {GENERATE_TOC_OPTION: self.generate_toc}


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`wrap_width` must be a positive integer")
    """


def load_config(search_path: Path) -> RemarkupConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.remarkup-toc]`` table from `pyproject.toml` and the
    ``[remarkup-toc]`` or ``[tool.remarkup-toc]`` table from
    `.remarkup-toc.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        RemarkupConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a matching table is present but is not a mapping or
            contains unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", CONFIG_TABLE)]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / DOTFILE_NAME,
            table_paths=[(CONFIG_TABLE,), ("tool", CONFIG_TABLE)],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return RemarkupConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> RemarkupConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> RemarkupConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    # TOML keys may use hyphens, as in `generate-toc = false`.
    options = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return RemarkupConfig(**options)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: RemarkupConfig) -> None:
    """Validate a `RemarkupConfig` instance.

    Raises:
        ConfigError: If flags are not booleans, the terminal is not a string,
            or numeric limits are not positive integers.

    Examples:
        validate_config(RemarkupConfig(wrap_width=72))
    """
    for key in ("generate_toc", "text_mode"):
        if not isinstance(getattr(config, key), bool):
            raise ConfigError(f"`{key}` must be a boolean")

    if not isinstance(config.terminal, str):
        raise ConfigError("`terminal` must be a string")

    for key in ("wrap_width", "max_file_size"):
        value = getattr(config, key)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def apply_overrides(config: RemarkupConfig, **overrides: object) -> RemarkupConfig:
    """Apply override values to a `RemarkupConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        RemarkupConfig: New configuration with the provided overrides applied.
        The original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `RemarkupConfig`.

    Examples:
        updated = apply_overrides(config, text_mode=True, generate_toc=None)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> RemarkupConfig:
    """Load, override, and validate configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), text_mode=True)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config
