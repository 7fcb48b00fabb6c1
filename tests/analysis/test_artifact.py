# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for analysis and plan artifact serialization."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from leanheaders.analysis.analyzer import analyze_file
from leanheaders.analysis.artifact import (
    ARTIFACT_FORMAT_VERSION,
    ARTIFACT_SUFFIX,
    deserialize_analysis,
    deserialize_plan,
    read_artifact,
    serialize_analysis,
    serialize_plan,
    write_artifact,
)
from leanheaders.analysis.resolver import resolve
from leanheaders.model.entities import FileAnalysis, ImportPlan

# ###############
# Test Helpers
# ###############

_HEADER = (
    "#pragma LeanHeaders need import protocol Delegate\n"
    "@class Helper;\n"
    "@interface View : Base <Delegate>\n"
    "@property (nonatomic, copy) void (^handler)(Helper *helper);\n"
    "- (Helper *)helperWith:(NSArray<NSString *> *)names, ...;\n"
    "@end\n"
    "typedef NS_OPTIONS(NSUInteger, ViewOptions) { ViewOptionA = 1 << 0 };\n"
)


def _analysis() -> FileAnalysis:
    return analyze_file("View.h", _HEADER)


def _plan() -> ImportPlan:
    return resolve([_analysis()])["View.h"]


# ###############
# String Round Trips
# ###############


class TestSerialization:
    def test_analysis_round_trip(self) -> None:
        analysis = _analysis()
        assert deserialize_analysis(serialize_analysis(analysis)) == analysis

    def test_plan_round_trip(self) -> None:
        plan = _plan()
        assert not plan.is_satisfied
        assert deserialize_plan(serialize_plan(plan)) == plan

    def test_output_is_byte_identical_for_unchanged_input(self) -> None:
        assert serialize_analysis(_analysis()) == serialize_analysis(_analysis())

    def test_output_is_compact_with_sorted_keys(self) -> None:
        data = serialize_plan(_plan())
        assert " " not in data.split('"file_id"')[0]
        obj = json.loads(data)
        assert list(obj) == ["plan", "v"]
        assert obj["v"] == ARTIFACT_FORMAT_VERSION

    def test_unknown_version_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="version"):
            deserialize_analysis(json.dumps({"v": "0", "analysis": {"file_id": "X.h"}}))

    def test_wrong_kind_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="plan"):
            deserialize_plan(serialize_analysis(_analysis()))


# ###############
# Artifact Files
# ###############


class TestArtifactFiles:
    def test_write_and_read(self, tmp_path: Path) -> None:
        path = tmp_path / "build" / f"View{ARTIFACT_SUFFIX}"
        write_artifact(_analysis(), _plan(), path)
        analysis, plan = read_artifact(path)
        assert analysis == _analysis()
        assert plan == _plan()

    def test_plan_is_optional(self, tmp_path: Path) -> None:
        path = tmp_path / f"View{ARTIFACT_SUFFIX}"
        write_artifact(_analysis(), None, path)
        _, plan = read_artifact(path)
        assert plan is None

    def test_rewrite_is_byte_identical(self, tmp_path: Path) -> None:
        first = tmp_path / "a.json"
        second = tmp_path / "b.json"
        write_artifact(_analysis(), _plan(), first)
        write_artifact(_analysis(), _plan(), second)
        assert first.read_bytes() == second.read_bytes()

    def test_read_rejects_unknown_version(self, tmp_path: Path) -> None:
        path = tmp_path / "old.json"
        path.write_text('{"v":"99","analysis":{"file_id":"X.h"}}', encoding="utf-8")
        with pytest.raises(ValueError):
            read_artifact(path)
