# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the LeanHeaders configuration file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from leanheaders.parser.lexer import DEFAULT_PRAGMA_PREFIX, UNIQUE_PRAGMA_PREFIX

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".leanheaders.yaml"

# Language-level names that never need an import or forward declaration.
DEFAULT_BUILTIN_SYMBOLS: frozenset[str] = frozenset(
    {
        "void",
        "char",
        "short",
        "int",
        "long",
        "float",
        "double",
        "signed",
        "unsigned",
        "_Bool",
        "bool",
        "BOOL",
        "id",
        "SEL",
        "Class",
        "IMP",
        "instancetype",
        "Protocol",
    }
)


class LeanHeadersConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


@dataclass
class LeanHeadersConfig:
    """The parsed LeanHeaders configuration.

    Attributes:
        pragma_prefix: The word following ``#pragma`` that marks dialect lines.
        inheritance_requires_import: Whether superclass, category-target and
            conformance references need a full import instead of a forward
            declaration.
        builtin_symbols: Names that are always available and never resolved.
        max_workers: Number of workers for per-file analysis; None analyzes
            files one after another.
    """

    pragma_prefix: str = DEFAULT_PRAGMA_PREFIX
    inheritance_requires_import: bool = False
    builtin_symbols: frozenset[str] = field(default_factory=lambda: DEFAULT_BUILTIN_SYMBOLS)
    max_workers: int | None = None


def load_config(path: Path) -> LeanHeadersConfig:
    """Load and parse a LeanHeaders configuration file.

    Args:
        path: Path to the `.leanheaders.yaml` file.

    Returns:
        A LeanHeadersConfig instance populated from the file.

    Raises:
        LeanHeadersConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise LeanHeadersConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise LeanHeadersConfigError(f"Cannot read config file: {exc}") from exc

    config = parse_config(text, source_label=str(path))
    logger.debug("Loaded configuration from %s: %s", path, config)
    return config


def parse_config(text: str, source_label: str = "<string>") -> LeanHeadersConfig:
    """Parse configuration YAML text into a LeanHeadersConfig.

    An empty document yields the default configuration.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Returns:
        A LeanHeadersConfig instance.

    Raises:
        LeanHeadersConfigError: If the YAML is invalid or a field has the wrong shape.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise LeanHeadersConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return LeanHeadersConfig()
    if not isinstance(data, dict):
        raise LeanHeadersConfigError(f"{source_label}: config must be a YAML mapping")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise LeanHeadersConfigError(f"{source_label}: unknown field(s) {', '.join(repr(k) for k in unknown)}")

    config = LeanHeadersConfig()
    unique_pragma = _optional_bool(data, "unique-pragma", source_label)
    if "pragma-prefix" in data:
        if unique_pragma:
            raise LeanHeadersConfigError(
                f"{source_label}: 'pragma-prefix' and 'unique-pragma' cannot be combined"
            )
        config.pragma_prefix = _require_string(data, "pragma-prefix", source_label)
        if not config.pragma_prefix or any(ch.isspace() for ch in config.pragma_prefix):
            raise LeanHeadersConfigError(f"{source_label}: 'pragma-prefix' must be a single word")
    elif unique_pragma:
        config.pragma_prefix = UNIQUE_PRAGMA_PREFIX

    if "inheritance-requires-import" in data:
        config.inheritance_requires_import = bool(_optional_bool(data, "inheritance-requires-import", source_label))

    if "builtin-symbols" in data:
        raw_symbols = data["builtin-symbols"]
        if not isinstance(raw_symbols, list) or not all(isinstance(s, str) for s in raw_symbols):
            raise LeanHeadersConfigError(f"{source_label}: 'builtin-symbols' must be a list of strings")
        config.builtin_symbols = DEFAULT_BUILTIN_SYMBOLS | frozenset(raw_symbols)

    if "max-workers" in data:
        workers = data["max-workers"]
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise LeanHeadersConfigError(f"{source_label}: 'max-workers' must be a positive integer")
        config.max_workers = workers

    return config


# ################
# Implementation
# ################

_KNOWN_KEYS: frozenset[str] = frozenset(
    {"pragma-prefix", "unique-pragma", "inheritance-requires-import", "builtin-symbols", "max-workers"}
)


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a required string field from a mapping, raising LeanHeadersConfigError if missing."""
    if key not in mapping:
        raise LeanHeadersConfigError(f"{source_label}: missing required field '{key}'")
    value = mapping[key]
    if not isinstance(value, str):
        raise LeanHeadersConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _optional_bool(mapping: dict[str, object], key: str, source_label: str) -> bool | None:
    """Extract an optional boolean field, returning None when absent."""
    if key not in mapping:
        return None
    value = mapping[key]
    if not isinstance(value, bool):
        raise LeanHeadersConfigError(f"{source_label}: '{key}' must be true or false")
    return value
