# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Configuration handling for LeanHeaders."""

from leanheaders.workspace.config import (
    CONFIG_FILE_NAME,
    DEFAULT_BUILTIN_SYMBOLS,
    LeanHeadersConfig,
    LeanHeadersConfigError,
    load_config,
    parse_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_BUILTIN_SYMBOLS",
    "LeanHeadersConfig",
    "LeanHeadersConfigError",
    "load_config",
    "parse_config",
]
