"""
Settings for framecheck.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.
    A bad ``select`` code or a broken regex must fail at startup with a
    clear message, not silently disable a rule.

Load order (lowest to highest precedence)::

    defaults  →  config file  →  FRAMECHECK_* env vars  →  explicit overrides

The config file is the explicit ``--config`` path, or the first of
``.framecheck.yaml``, ``.framecheck.yml`` and ``pyproject.toml``
(``[tool.framecheck]`` table) found at the project root.

Examples:
    >>> settings = load_settings(select=["W"], ignore=["W007"])
    >>> settings.is_enabled("W001"), settings.is_enabled("W007")
    (True, False)

Tags:
    settings, configuration, pydantic, environment, yaml, pyproject
"""

from __future__ import annotations

import os
import re
import tomllib
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from framecheck.errors import ConfigError, InvalidConfigError, MissingConfigError

ENV_PREFIX = "FRAMECHECK_"

CONFIG_FILENAMES = (".framecheck.yaml", ".framecheck.yml", "pyproject.toml")

_CODE_PREFIX_RE = re.compile(r"^[A-Z][0-9]{0,3}$")

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

CodeList = Annotated[list[str], NoDecode]
StrList = Annotated[list[str], NoDecode]


def _split_list(value: Any) -> Any:
    """Accept ``"W001, E002"`` as well as a real list."""
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class FramecheckSettings(BaseSettings):
    """Validated settings for a lint run.

    Every field can be set with a ``FRAMECHECK_*`` environment variable;
    list fields take comma-separated values
    (``FRAMECHECK_IGNORE=W004,I001``).

    Fields
    ──────
    select               : Code prefixes to report (empty = all)
    ignore               : Code prefixes to drop (wins over select)
    include_infos        : Report info-level diagnostics
    exclude              : Glob patterns for files/directories to skip
    frame_name_patterns  : Regexes; matching names are treated as frames
    extra_frame_members  : Attribute names that are never columns (accessors)
    schema_validators    : Call names that declare a frame's schema
    log_level / log_json : Logging configuration
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="forbid",
    )

    # ── Rule selection ───────────────────────────────────────────
    select: CodeList = Field(default_factory=list)
    ignore: CodeList = Field(default_factory=list)
    include_infos: bool = True

    # ── File discovery ───────────────────────────────────────────
    exclude: StrList = Field(
        default_factory=lambda: [
            ".git",
            "__pycache__",
            ".venv",
            "venv",
            ".tox",
            ".nox",
            "build",
            "dist",
            "node_modules",
        ]
    )

    # ── Frame inference ──────────────────────────────────────────
    frame_name_patterns: StrList = Field(
        default_factory=lambda: [r"^df$", r"^df_", r"_df$", r"_frame$"]
    )
    extra_frame_members: StrList = Field(default_factory=list)
    schema_validators: StrList = Field(default_factory=lambda: ["validate"])

    # ── Observability ────────────────────────────────────────────
    log_level: str = "WARNING"
    log_json: bool = False

    @field_validator("select", "ignore", mode="before")
    @classmethod
    def _normalise_codes(cls, value: Any) -> Any:
        value = _split_list(value)
        if not isinstance(value, list):
            return value
        codes = [str(code).strip().upper() for code in value]
        for code in codes:
            if not _CODE_PREFIX_RE.match(code):
                raise ValueError(f"not a code or code prefix: {code!r}")
        return codes

    @field_validator("exclude", "extra_frame_members", "schema_validators", mode="before")
    @classmethod
    def _split_strings(cls, value: Any) -> Any:
        return _split_list(value)

    @field_validator("frame_name_patterns", mode="before")
    @classmethod
    def _compile_patterns(cls, value: Any) -> Any:
        value = _split_list(value)
        if isinstance(value, list):
            for pattern in value:
                try:
                    re.compile(pattern)
                except re.error as exc:
                    raise ValueError(f"invalid regex {pattern!r}: {exc}") from exc
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _check_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.upper()
            if value not in _LOG_LEVELS:
                raise ValueError(f"unknown log level {value!r}")
        return value

    # ── Derived helpers ──────────────────────────────────────────

    def is_enabled(self, code: str) -> bool:
        """Return True if diagnostics with ``code`` should be reported."""
        if any(code.startswith(prefix) for prefix in self.ignore):
            return False
        if not self.select:
            return True
        return any(code.startswith(prefix) for prefix in self.select)

    def compiled_frame_patterns(self) -> list[re.Pattern[str]]:
        return [re.compile(p) for p in self.frame_name_patterns]


# ── Config file discovery ────────────────────────────────────────────────


def find_project_root(start: Path | None = None) -> Path:
    """Walk upward from *start* to find the project root.

    Recognised root markers: a framecheck config file, ``pyproject.toml``,
    a ``.git`` directory, or ``setup.py``. Falls back to *start* (or cwd).
    """
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    for directory in (current, *current.parents):
        for marker in (*CONFIG_FILENAMES, ".git", "setup.py"):
            if (directory / marker).exists():
                return directory
    return current


def discover_config_file(project_root: Path) -> Path | None:
    """Return the config file to use under *project_root*, if any.

    A ``pyproject.toml`` only counts when it has a ``[tool.framecheck]``
    table.
    """
    for name in CONFIG_FILENAMES:
        candidate = project_root / name
        if not candidate.is_file():
            continue
        if name == "pyproject.toml" and "framecheck" not in _read_toml(candidate).get("tool", {}):
            continue
        return candidate
    return None


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}", cause=exc).with_context(path=str(path))


def read_config_file(path: Path) -> dict[str, Any]:
    """Read framecheck options from a YAML file or a pyproject.toml.

    Keys may use dashes or underscores (``frame-name-patterns``).
    """
    if path.name.endswith(".toml"):
        data = _read_toml(path).get("tool", {}).get("framecheck", {})
    else:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}", cause=exc).with_context(path=str(path))

    if not isinstance(data, dict):
        raise InvalidConfigError("<root>", data, f"Config in {path} must be a mapping")

    return {str(key).replace("-", "_"): value for key, value in data.items()}


def load_settings(
    config_path: Path | str | None = None,
    *,
    start: Path | None = None,
    **overrides: Any,
) -> FramecheckSettings:
    """Build :class:`FramecheckSettings` from file, environment, and overrides.

    Parameters
    ----------
    config_path:
        Explicit config file. Must exist.
    start:
        Directory to start the project-root search from (defaults to cwd).
        Ignored when ``config_path`` is given.
    overrides:
        Highest-precedence values (typically CLI options). ``None`` values
        are ignored so unset CLI options do not mask file settings.

    Raises
    ------
    MissingConfigError
        If ``config_path`` does not exist.
    InvalidConfigError
        If a key is unknown or a value fails validation.
    """
    if config_path is not None:
        path: Path | None = Path(config_path)
        if not path.is_file():
            raise MissingConfigError(path)
    else:
        path = discover_config_file(find_project_root(start))

    file_data = read_config_file(path) if path is not None else {}

    # Real environment variables win over the file.
    data = {
        key: value
        for key, value in file_data.items()
        if f"{ENV_PREFIX}{key.upper()}" not in os.environ
    }
    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return FramecheckSettings(**data)
    except ValidationError as exc:
        first = exc.errors()[0]
        key = ".".join(str(part) for part in first.get("loc", ())) or "<settings>"
        raise InvalidConfigError(
            key,
            first.get("input"),
            f"Invalid configuration for {key}: {first.get('msg')}",
            cause=exc,
        ).with_context(config_file=str(path) if path else None)
