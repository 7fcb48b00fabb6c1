# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Per-file analysis: declarations, reference sites, symbols and counts.

The analyzer drives the declaration parser over one file and derives:

- one Reference per type-name occurrence site,
- the symbols the file declares (import strength) and announces (forward
  strength, including files it claims to import),
- the de-duplicated external references the resolver has to satisfy,
- the ``(declared, announced, referenced)`` summary.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from leanheaders.model.entities import (
    BlockTypeAlias,
    ClassDeclaration,
    Counts,
    Declaration,
    Diagnostic,
    DiagnosticCode,
    Directive,
    DirectiveStrength,
    DirectiveTarget,
    EnumDeclaration,
    FileAnalysis,
    ForwardDeclaration,
    MethodDeclaration,
    PropertyDeclaration,
    ProtocolDeclaration,
    Reference,
    ReferenceRole,
    StructDeclaration,
    Symbol,
    SymbolKind,
    TypeAlias,
)
from leanheaders.model.types import TypeReference
from leanheaders.parser.declarations import parse_declarations
from leanheaders.workspace.config import LeanHeadersConfig

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def analyze_file(file_id: str, source: str, *, config: LeanHeadersConfig | None = None) -> FileAnalysis:
    """Analyze the source text of one header file.

    Malformed statements and pragma lines are recorded as diagnostics; an
    unexpected failure is recorded as an ``analysis-failure`` diagnostic on
    an otherwise empty result so that sibling files are unaffected.

    Args:
        file_id: Caller-supplied identifier of the file, typically its path.
        source: The full text of the file.
        config: Active configuration; defaults are used when omitted.

    Returns:
        The FileAnalysis of the file.
    """
    config = config or LeanHeadersConfig()
    try:
        analysis = _analyze(file_id, source, config)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Analysis of %s failed: %s", file_id, exc, exc_info=True)
        return FileAnalysis(
            file_id=file_id,
            diagnostics=[Diagnostic(code=DiagnosticCode.ANALYSIS_FAILURE, message=f"{type(exc).__name__}: {exc}")],
        )
    logger.debug(
        "Analyzed %s: (d,a,r) = %s, %d diagnostic(s)",
        file_id,
        analysis.counts.as_tuple(),
        len(analysis.diagnostics),
    )
    return analysis


def extract_references(declaration: Declaration) -> list[Reference]:
    """Return the reference sites of a single declaration, in source order."""
    return list(_references_of(declaration))


def declared_symbols(declarations: Iterable[Declaration], directives: Iterable[Directive]) -> list[Symbol]:
    """Return the symbols introduced at import strength, in source order.

    Struct and enum tags and aliases are collected per declaration without
    repeating identical names, so ``typedef struct S {...} S;`` yields one
    symbol. ``have import class|protocol`` directives supply their symbol too.
    """
    symbols: list[Symbol] = []
    for decl in declarations:
        symbols.extend(_symbols_of(decl))
    for directive in directives:
        if (
            directive.strength == DirectiveStrength.HAVE
            and directive.target == DirectiveTarget.IMPORT
            and directive.symbol_kind != SymbolKind.FILE
        ):
            symbols.append(Symbol(kind=directive.symbol_kind, name=directive.name))
    return symbols


def announced_symbols(declarations: Iterable[Declaration], directives: Iterable[Directive]) -> list[Symbol]:
    """Return the symbols promised at forward strength, in source order.

    Forward-declared names, ``have forward`` names and ``have import file``
    names all count as announcements.
    """
    symbols: list[Symbol] = []
    for decl in declarations:
        if isinstance(decl, ForwardDeclaration):
            symbols.extend(Symbol(kind=decl.symbol_kind, name=name) for name in decl.names)
    for directive in directives:
        if directive.strength != DirectiveStrength.HAVE:
            continue
        if directive.target == DirectiveTarget.FORWARD or directive.symbol_kind == SymbolKind.FILE:
            symbols.append(Symbol(kind=directive.symbol_kind, name=directive.name))
    return symbols


# ################
# Implementation
# ################


def _analyze(file_id: str, source: str, config: LeanHeadersConfig) -> FileAnalysis:
    parsed = parse_declarations(source, source_file=file_id, pragma_prefix=config.pragma_prefix)
    for diagnostic in parsed.diagnostics:
        logger.debug("%s: %s: %s", file_id, diagnostic.code.value, diagnostic.message)

    references = [ref for decl in parsed.declarations for ref in _references_of(decl)]
    declared = declared_symbols(parsed.declarations, parsed.directives)
    announced = announced_symbols(parsed.declarations, parsed.directives)
    needs = [
        d
        for d in parsed.directives
        if d.strength == DirectiveStrength.NEED and d.symbol_kind in (SymbolKind.CLASS, SymbolKind.PROTOCOL)
    ]

    return FileAnalysis(
        file_id=file_id,
        declarations=parsed.declarations,
        references=references,
        directives=parsed.directives,
        includes=parsed.includes,
        declared_symbols=declared,
        announced_symbols=announced,
        external_references=_external_references(references, declared, announced),
        diagnostics=parsed.diagnostics,
        counts=Counts(declared=len(declared), announced=len(announced), referenced=len(references) + len(needs)),
    )


def _references_of(decl: Declaration) -> Iterator[Reference]:
    """Yield the reference sites of one declaration."""
    located = {"source_file": decl.source_file, "line": decl.line, "column": decl.column}
    if isinstance(decl, ClassDeclaration):
        if decl.is_category or decl.is_extension:
            yield Reference(name=decl.name, role=ReferenceRole.EXTENDED_CLASS, kind_hint=SymbolKind.CLASS, **located)
        if decl.superclass is not None:
            yield Reference(name=decl.superclass, role=ReferenceRole.SUPERCLASS, kind_hint=SymbolKind.CLASS, **located)
        for arg in decl.superclass_arguments:
            for ref in _mention_references(arg, decl.source_file):
                if ref.name not in decl.type_parameters:
                    yield ref
        for name in decl.protocols:
            yield Reference(name=name, role=ReferenceRole.CONFORMANCE, kind_hint=SymbolKind.PROTOCOL, **located)
    elif isinstance(decl, ProtocolDeclaration):
        for name in decl.inherited_protocols:
            yield Reference(name=name, role=ReferenceRole.CONFORMANCE, kind_hint=SymbolKind.PROTOCOL, **located)
    elif isinstance(decl, PropertyDeclaration):
        yield from _mention_references(decl.type, decl.source_file)
    elif isinstance(decl, MethodDeclaration):
        if decl.return_type is not None:
            yield from _mention_references(decl.return_type, decl.source_file)
        for part in decl.selector_parts:
            if part.type is not None:
                yield from _mention_references(part.type, decl.source_file)
    elif isinstance(decl, BlockTypeAlias):
        yield from _mention_references(decl.signature, decl.source_file)
    elif isinstance(decl, TypeAlias):
        yield from _mention_references(decl.aliased_type, decl.source_file)
    # Forward declarations, structs and enums reference nothing; enum raw
    # types are recorded on the declaration only.


def _mention_references(ref: TypeReference, source_file: str) -> Iterator[Reference]:
    for mention in ref.iter_mentions():
        yield Reference(
            name=mention.name,
            role=ReferenceRole.CONFORMANCE if mention.is_conformance else ReferenceRole.TYPE,
            kind_hint=SymbolKind.PROTOCOL if mention.is_conformance else None,
            source_file=source_file,
            line=mention.line,
            column=mention.column,
        )


def _symbols_of(decl: Declaration) -> list[Symbol]:
    if isinstance(decl, ClassDeclaration):
        if decl.is_category or decl.is_extension:
            return []
        return [Symbol(kind=SymbolKind.CLASS, name=decl.name)]
    if isinstance(decl, ProtocolDeclaration):
        return [Symbol(kind=SymbolKind.PROTOCOL, name=decl.name)]
    if isinstance(decl, (StructDeclaration, EnumDeclaration)):
        kind = SymbolKind.STRUCT if isinstance(decl, StructDeclaration) else SymbolKind.ENUM
        names: list[str] = []
        for name in (decl.name, decl.alias_name):
            if name is not None and name not in names:
                names.append(name)
        return [Symbol(kind=kind, name=name) for name in names]
    if isinstance(decl, (BlockTypeAlias, TypeAlias)):
        return [Symbol(kind=SymbolKind.TYPEDEF, name=decl.name)]
    return []


def _external_references(
    references: list[Reference], declared: list[Symbol], announced: list[Symbol]
) -> list[Reference]:
    """Return the first site of every (name, kind) not supplied within the file.

    A local declaration hides every reference to its name. A local forward
    declaration hides only plain type references; superclass, category-target
    and conformance references stay so that the resolver can decide whether
    the announcement is strong enough.
    """
    declared_names = {symbol.name for symbol in declared}
    announced_names = {symbol.name for symbol in announced if symbol.kind != SymbolKind.FILE}
    seen: set[tuple[str, SymbolKind | None]] = set()
    external: list[Reference] = []
    for ref in references:
        key = (ref.name, ref.kind_hint)
        if ref.name in declared_names or key in seen:
            continue
        if ref.name in announced_names and not ref.is_implementing:
            continue
        seen.add(key)
        external.append(ref)
    return external
