# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Two-phase pipeline: parallel per-file analysis, then global resolution.

Per-file analysis shares no mutable state and may run on a worker pool.
Resolution starts only after every analysis has been collected.
"""

from __future__ import annotations

import concurrent.futures
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from leanheaders.analysis.analyzer import analyze_file
from leanheaders.analysis.resolver import resolve
from leanheaders.model.entities import FileAnalysis, ImportPlan
from leanheaders.workspace.config import LeanHeadersConfig

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass
class PipelineResult:
    """The analyses and import plans of one pipeline run, keyed by file id."""

    analyses: dict[str, FileAnalysis] = field(default_factory=dict)
    plans: dict[str, ImportPlan] = field(default_factory=dict)

    @property
    def has_unsatisfied(self) -> bool:
        """Return True if any file has a need nothing supplies."""
        return any(not plan.is_satisfied for plan in self.plans.values())


def analyze_files(
    sources: Mapping[str, str] | Iterable[tuple[str, str]],
    *,
    config: LeanHeadersConfig | None = None,
    max_workers: int | None = None,
) -> list[FileAnalysis]:
    """Analyze every ``(file_id, source)`` pair.

    Args:
        sources: File identifiers and their source text, in any order.
        config: Active configuration; defaults are used when omitted.
        max_workers: Worker threads for analysis. Falls back to
            ``config.max_workers``; None or 1 analyzes serially.

    Returns:
        The analyses in the order of *sources*.
    """
    config = config or LeanHeadersConfig()
    pairs = list(sources.items()) if isinstance(sources, Mapping) else list(sources)
    workers = max_workers if max_workers is not None else config.max_workers

    def _analyze(pair: tuple[str, str]) -> FileAnalysis:
        file_id, source = pair
        return analyze_file(file_id, source, config=config)

    if workers is None or workers <= 1 or len(pairs) <= 1:
        return [_analyze(pair) for pair in pairs]

    logger.debug("Analyzing %d file(s) on %d worker(s)", len(pairs), workers)
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(_analyze, pairs))


def run(
    sources: Mapping[str, str] | Iterable[tuple[str, str]],
    *,
    config: LeanHeadersConfig | None = None,
) -> PipelineResult:
    """Analyze all files, then resolve each one against the complete aggregate.

    Args:
        sources: File identifiers and their source text, in any order.
        config: Active configuration; defaults are used when omitted.

    Returns:
        A PipelineResult with both mappings ordered by file id.
    """
    config = config or LeanHeadersConfig()
    analyses = analyze_files(sources, config=config)
    plans = resolve(analyses, config=config)
    result = PipelineResult(
        analyses={a.file_id: a for a in sorted(analyses, key=lambda a: a.file_id)},
        plans=plans,
    )
    if result.has_unsatisfied:
        logger.warning(
            "%d file(s) have unsatisfied needs",
            sum(1 for plan in plans.values() if not plan.is_satisfied),
        )
    return result
