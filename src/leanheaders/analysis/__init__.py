# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Per-file analysis, cross-file resolution and the pipeline tying them together."""

from leanheaders.analysis.analyzer import analyze_file
from leanheaders.analysis.artifact import (
    deserialize_analysis,
    deserialize_plan,
    read_artifact,
    serialize_analysis,
    serialize_plan,
    write_artifact,
)
from leanheaders.analysis.pipeline import PipelineResult, analyze_files, run
from leanheaders.analysis.resolver import SymbolGraph, build_symbol_graph, resolve, resolve_file

__all__ = [
    "PipelineResult",
    "SymbolGraph",
    "analyze_file",
    "analyze_files",
    "build_symbol_graph",
    "deserialize_analysis",
    "deserialize_plan",
    "read_artifact",
    "resolve",
    "resolve_file",
    "run",
    "serialize_analysis",
    "serialize_plan",
    "write_artifact",
]
