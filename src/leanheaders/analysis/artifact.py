# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization and deserialization of analysis results and import plans.

Artifacts are stored as compact JSON with sorted keys, so an unchanged input
always produces byte-identical output. The format is versioned so future
schema changes can be detected.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from leanheaders.model.entities import FileAnalysis, ImportPlan

# ###############
# Public Interface
# ###############

ARTIFACT_FORMAT_VERSION = "1"
ARTIFACT_SUFFIX = ".leanheaders.json"


def serialize_analysis(analysis: FileAnalysis) -> str:
    """Serialize a FileAnalysis to a compact JSON string."""
    return _dumps("analysis", analysis)


def deserialize_analysis(data: str) -> FileAnalysis:
    """Deserialize a FileAnalysis from a JSON string.

    Raises:
        ValueError: If the format version or artifact kind is not recognised.
    """
    return FileAnalysis.model_validate(_loads(data, "analysis"))


def serialize_plan(plan: ImportPlan) -> str:
    """Serialize an ImportPlan to a compact JSON string."""
    return _dumps("plan", plan)


def deserialize_plan(data: str) -> ImportPlan:
    """Deserialize an ImportPlan from a JSON string.

    Raises:
        ValueError: If the format version or artifact kind is not recognised.
    """
    return ImportPlan.model_validate(_loads(data, "plan"))


def write_artifact(analysis: FileAnalysis, plan: ImportPlan | None, path: Path) -> None:
    """Write a file's analysis and, if given, its plan to *path*.

    Parent directories are created as needed.
    """
    obj: dict[str, Any] = {
        "v": ARTIFACT_FORMAT_VERSION,
        "analysis": analysis.model_dump(mode="json"),
    }
    if plan is not None:
        obj["plan"] = plan.model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, separators=(",", ":"), sort_keys=True), encoding="utf-8")


def read_artifact(path: Path) -> tuple[FileAnalysis, ImportPlan | None]:
    """Read an artifact written by :func:`write_artifact`.

    Raises:
        ValueError: If the artifact format version is not recognised.
    """
    obj = json.loads(path.read_text(encoding="utf-8"))
    _check_version(obj)
    analysis = FileAnalysis.model_validate(obj["analysis"])
    plan = ImportPlan.model_validate(obj["plan"]) if "plan" in obj else None
    return analysis, plan


# ################
# Implementation
# ################


def _dumps(kind: str, model: BaseModel) -> str:
    obj = {"v": ARTIFACT_FORMAT_VERSION, kind: model.model_dump(mode="json")}
    return json.dumps(obj, separators=(",", ":"), sort_keys=True)


def _loads(data: str, kind: str) -> dict[str, Any]:
    obj = json.loads(data)
    _check_version(obj)
    if kind not in obj:
        raise ValueError(f"Artifact does not contain {kind!r}")
    return obj[kind]


def _check_version(obj: dict[str, Any]) -> None:
    version = obj.get("v")
    if version != ARTIFACT_FORMAT_VERSION:
        raise ValueError(f"Unsupported artifact format version: {version!r}")
