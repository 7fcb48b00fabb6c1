# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Cross-file dependency resolution.

Builds an immutable symbol graph from every file's analysis and computes, per
file, the weakest set of imports and forward declarations that satisfies all
of its references and ``need`` directives.

Strength policy:

* A reference is forward-sufficient by default.
* ``need import`` forces import strength; ``need forward`` asks for forward.
* With ``inheritance_requires_import`` enabled, superclass, category-target
  and conformance references require import strength.
* A file's own ``@class``/``@protocol`` satisfies its references only at
  forward strength.
* A ``need`` directive is satisfied only by a supplier of the same kind.
* Only classes and protocols can be forward declared, so a reference whose
  suppliers are all structs, enums or typedefs is escalated to import.
* Builtin language names never need a supplier.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from leanheaders.analysis.analyzer import declared_symbols
from leanheaders.model.entities import (
    FORWARD_DECLARABLE_KINDS,
    DirectiveStrength,
    DirectiveTarget,
    FileAnalysis,
    ForwardDeclaration,
    ImportPlan,
    PlannedSymbol,
    SymbolKind,
    UnsatisfiedNeed,
)
from leanheaders.workspace.config import LeanHeadersConfig

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Supply:
    """One fact supplying a symbol: a declaration or a ``have`` directive.

    Attributes:
        kind: The kind of the supplied symbol.
        name: The supplied symbol name.
        file_id: The file the fact was found in.
        target: IMPORT for declarations and ``have import``; FORWARD for
            forward declarations and ``have forward``.
        from_directive: True if the fact is a ``have`` directive rather
            than a declaration in source.
    """

    kind: SymbolKind
    name: str
    file_id: str
    target: DirectiveTarget
    from_directive: bool = False


@dataclass(frozen=True)
class Requirement:
    """A symbol one file needs, with the weakest strength that satisfies it.

    ``exact_kind`` is set for ``need`` directives: only a supplier of exactly
    ``kind`` satisfies them. For references ``kind`` is only a hint.
    """

    name: str
    kind: SymbolKind | None
    target: DirectiveTarget
    line: int = 0
    column: int = 0
    exact_kind: bool = False


@dataclass
class SymbolGraph:
    """The aggregate of supplies and requirements across all analyzed files.

    Attributes:
        supplies: Supplying facts per symbol name, ordered by file id.
        needs: Requirements per file id, ordered by symbol name.
        file_ids: Identifiers of every analyzed file.
        supplied_files: File names named by any ``have import file`` directive.
    """

    supplies: dict[str, list[Supply]] = field(default_factory=dict)
    needs: dict[str, list[Requirement]] = field(default_factory=dict)
    file_ids: list[str] = field(default_factory=list)
    supplied_files: set[str] = field(default_factory=set)

    def suppliers(self, name: str, *, exclude_file: str | None = None) -> list[Supply]:
        """Return the supplies of *name*, optionally ignoring one file's own facts."""
        return [s for s in self.supplies.get(name, []) if s.file_id != exclude_file]

    def find_file(self, file_name: str) -> str | None:
        """Return the id of the analyzed file whose last path component is *file_name*."""
        for file_id in self.file_ids:
            if _base_name(file_id) == file_name:
                return file_id
        return None


def build_symbol_graph(analyses: Iterable[FileAnalysis], *, config: LeanHeadersConfig | None = None) -> SymbolGraph:
    """Aggregate per-file analyses into a SymbolGraph.

    Args:
        analyses: The analyses of every file taking part in resolution.
        config: Active configuration; defaults are used when omitted.

    Returns:
        A SymbolGraph; it is not modified by resolution.
    """
    config = config or LeanHeadersConfig()
    graph = SymbolGraph()
    for analysis in sorted(analyses, key=lambda a: a.file_id):
        graph.file_ids.append(analysis.file_id)
        for supply in _supplies_of(analysis):
            graph.supplies.setdefault(supply.name, []).append(supply)
        for directive in analysis.directives:
            if directive.strength == DirectiveStrength.HAVE and directive.symbol_kind == SymbolKind.FILE:
                graph.supplied_files.add(directive.name)
        graph.needs[analysis.file_id] = requirements_of(analysis, config=config)
    return graph


def requirements_of(analysis: FileAnalysis, *, config: LeanHeadersConfig | None = None) -> list[Requirement]:
    """Return the symbols a file needs from other files, ordered by name.

    References to names declared inside the file are already excluded from
    ``external_references``; a local forward declaration satisfies a
    reference only at forward strength. ``need`` directives are checked
    against the file's own declarations (import strength) and announcements
    (forward strength) of the same kind. File needs are handled separately.
    """
    config = config or LeanHeadersConfig()
    local_import = {(symbol.kind, symbol.name) for symbol in analysis.declared_symbols}
    announced = {(s.kind, s.name) for s in analysis.announced_symbols if s.kind != SymbolKind.FILE}
    local_forward = local_import | announced
    announced_names = {name for _, name in announced}

    merged: dict[str, Requirement] = {}
    for ref in analysis.external_references:
        if _is_builtin(ref.name, config):
            continue
        target = DirectiveTarget.FORWARD
        if config.inheritance_requires_import and ref.is_implementing:
            target = DirectiveTarget.IMPORT
        if target == DirectiveTarget.FORWARD and ref.name in announced_names:
            continue
        _merge(merged, Requirement(ref.name, ref.kind_hint, target, ref.line, ref.column))

    for directive in analysis.directives:
        if directive.strength != DirectiveStrength.NEED or directive.symbol_kind == SymbolKind.FILE:
            continue
        local = local_import if directive.target == DirectiveTarget.IMPORT else local_forward
        if (directive.symbol_kind, directive.name) in local:
            continue
        _merge(
            merged,
            Requirement(
                directive.name,
                directive.symbol_kind,
                directive.target,
                directive.line,
                directive.column,
                exact_kind=True,
            ),
        )
    return [merged[name] for name in sorted(merged)]


def resolve_file(
    analysis: FileAnalysis, graph: SymbolGraph, *, config: LeanHeadersConfig | None = None
) -> ImportPlan:
    """Compute the minimal import plan of one file against the aggregate.

    Args:
        analysis: The file to resolve.
        graph: The symbol graph of all files, including this one.
        config: Active configuration; defaults are used when omitted.

    Returns:
        The ImportPlan of the file. Every list in it is sorted.
    """
    config = config or LeanHeadersConfig()
    requirements = graph.needs.get(analysis.file_id)
    if requirements is None:
        requirements = requirements_of(analysis, config=config)

    imports: list[PlannedSymbol] = []
    forwards: list[PlannedSymbol] = []
    unsatisfied: list[UnsatisfiedNeed] = []
    for req in requirements:
        planned, target = _assign(req, graph.suppliers(req.name, exclude_file=analysis.file_id))
        if planned is None:
            unsatisfied.append(
                UnsatisfiedNeed(
                    kind=req.kind,
                    name=req.name,
                    strength=target,
                    needed_by=analysis.file_id,
                    line=req.line,
                    column=req.column,
                )
            )
        elif target == DirectiveTarget.IMPORT:
            imports.append(planned)
        else:
            forwards.append(planned)

    import_files = {p.source_file for p in imports if p.source_file is not None}
    import_files |= _resolve_file_needs(analysis, graph, unsatisfied)

    for need in unsatisfied:
        logger.warning(
            "%s:%d: nothing supplies %s %s at %s strength",
            need.needed_by,
            need.line,
            need.kind.value if need.kind is not None else "symbol",
            need.name,
            need.strength.value,
        )

    plan = ImportPlan(
        file_id=analysis.file_id,
        import_symbols=sorted(imports, key=_planned_key),
        forward_symbols=sorted(forwards, key=_planned_key),
        import_files=sorted(import_files),
        unsatisfied=sorted(unsatisfied, key=lambda n: (n.name, _kind_key(n.kind), n.line, n.column)),
        redundant_imports=_redundant_imports(analysis, graph, import_files),
        redundant_forwards=_redundant_forwards(analysis),
    )
    logger.debug(
        "Resolved %s: %d import(s), %d forward(s), %d unsatisfied",
        analysis.file_id,
        len(plan.import_symbols),
        len(plan.forward_symbols),
        len(plan.unsatisfied),
    )
    return plan


def resolve(
    analyses: Iterable[FileAnalysis], *, config: LeanHeadersConfig | None = None
) -> dict[str, ImportPlan]:
    """Resolve every file against the complete aggregate.

    Args:
        analyses: The analyses of every file; all must be present before
            resolution starts.
        config: Active configuration; defaults are used when omitted.

    Returns:
        A mapping from file id to its ImportPlan, ordered by file id.
    """
    analyses = list(analyses)
    graph = build_symbol_graph(analyses, config=config)
    plans: dict[str, ImportPlan] = {}
    for analysis in sorted(analyses, key=lambda a: a.file_id):
        plans[analysis.file_id] = resolve_file(analysis, graph, config=config)
    return plans


# ################
# Implementation
# ################


def _supplies_of(analysis: FileAnalysis) -> list[Supply]:
    supplies = [
        Supply(kind=s.kind, name=s.name, file_id=analysis.file_id, target=DirectiveTarget.IMPORT)
        for s in declared_symbols(analysis.declarations, [])
    ]
    for directive in analysis.directives:
        if (
            directive.strength == DirectiveStrength.HAVE
            and directive.target == DirectiveTarget.IMPORT
            and directive.symbol_kind != SymbolKind.FILE
        ):
            supplies.append(
                Supply(
                    kind=directive.symbol_kind,
                    name=directive.name,
                    file_id=analysis.file_id,
                    target=DirectiveTarget.IMPORT,
                    from_directive=True,
                )
            )
    for symbol in analysis.announced_symbols:
        if symbol.kind == SymbolKind.FILE:
            continue
        supplies.append(
            Supply(kind=symbol.kind, name=symbol.name, file_id=analysis.file_id, target=DirectiveTarget.FORWARD)
        )
    return supplies


def _merge(merged: dict[str, Requirement], req: Requirement) -> None:
    """Record *req*, keeping the stronger target and the first known kind.

    The kind of a ``need`` directive wins over a reference's kind hint.
    """
    existing = merged.get(req.name)
    if existing is None:
        merged[req.name] = req
        return
    target = DirectiveTarget.IMPORT if DirectiveTarget.IMPORT in (existing.target, req.target) else existing.target
    if req.exact_kind and not existing.exact_kind:
        kind = req.kind
    else:
        kind = existing.kind if existing.kind is not None else req.kind
    exact_kind = existing.exact_kind or req.exact_kind
    merged[req.name] = Requirement(existing.name, kind, target, existing.line, existing.column, exact_kind)


def _assign(req: Requirement, supplies: list[Supply]) -> tuple[PlannedSymbol | None, DirectiveTarget]:
    """Pick the supply for *req* and the strength it is planned at."""
    if req.kind is not None:
        matching = [s for s in supplies if s.kind == req.kind]
        if matching or req.exact_kind:
            supplies = matching

    target = req.target
    if target == DirectiveTarget.FORWARD and supplies and not any(s.kind in FORWARD_DECLARABLE_KINDS for s in supplies):
        target = DirectiveTarget.IMPORT

    if target == DirectiveTarget.IMPORT:
        full = [s for s in supplies if s.target == DirectiveTarget.IMPORT]
        if not full:
            return None, target
        # Declarations in source are preferred over `have import` claims.
        chosen = min(full, key=lambda s: (s.from_directive, s.file_id))
        source_file = None if chosen.from_directive else chosen.file_id
        return PlannedSymbol(kind=chosen.kind, name=req.name, source_file=source_file), target

    if not supplies:
        return None, target
    chosen = min(supplies, key=lambda s: (s.kind not in FORWARD_DECLARABLE_KINDS, s.file_id))
    return PlannedSymbol(kind=chosen.kind, name=req.name), target


def _resolve_file_needs(analysis: FileAnalysis, graph: SymbolGraph, unsatisfied: list[UnsatisfiedNeed]) -> set[str]:
    """Resolve ``need import file`` directives; returns the files to import."""
    local_files = {s.name for s in analysis.announced_symbols if s.kind == SymbolKind.FILE}
    files: set[str] = set()
    for directive in analysis.directives:
        if directive.strength != DirectiveStrength.NEED or directive.symbol_kind != SymbolKind.FILE:
            continue
        if directive.name in local_files:
            continue
        file_id = graph.find_file(directive.name)
        if file_id is not None:
            files.add(file_id)
        elif directive.name in graph.supplied_files:
            files.add(directive.name)
        else:
            unsatisfied.append(
                UnsatisfiedNeed(
                    kind=SymbolKind.FILE,
                    name=directive.name,
                    strength=DirectiveTarget.IMPORT,
                    needed_by=analysis.file_id,
                    line=directive.line,
                    column=directive.column,
                )
            )
    return files


def _redundant_imports(analysis: FileAnalysis, graph: SymbolGraph, import_files: set[str]) -> list[str]:
    """Return quoted includes of known files that supply nothing the file needs."""
    redundant: set[str] = set()
    for include in analysis.includes:
        if include.is_system:
            continue
        file_id = graph.find_file(include.file_name)
        if file_id is not None and file_id != analysis.file_id and file_id not in import_files:
            redundant.add(include.path)
    return sorted(redundant)


def _redundant_forwards(analysis: FileAnalysis) -> list[str]:
    """Return forward-declared names the file never references or needs."""
    used = {ref.name for ref in analysis.references}
    used |= {d.name for d in analysis.directives if d.strength == DirectiveStrength.NEED}
    forwarded = {name for decl in analysis.declarations if isinstance(decl, ForwardDeclaration) for name in decl.names}
    return sorted(forwarded - used)


def _is_builtin(name: str, config: LeanHeadersConfig) -> bool:
    # Multi-word scalars such as `unsigned long` arrive as one name.
    return all(word in config.builtin_symbols for word in name.split())


def _base_name(file_id: str) -> str:
    return file_id.replace("\\", "/").rsplit("/", 1)[-1]


def _kind_key(kind: SymbolKind | None) -> str:
    return kind.value if kind is not None else ""


def _planned_key(planned: PlannedSymbol) -> tuple[str, str]:
    return (planned.name, planned.kind.value)
