# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model for LeanHeaders (type mentions, declarations, directives, plans)."""

from leanheaders.model.entities import (
    FORWARD_DECLARABLE_KINDS,
    IMPLEMENTING_ROLES,
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
    ImportPlan,
    Include,
    MethodDeclaration,
    PlannedSymbol,
    PropertyDeclaration,
    ProtocolDeclaration,
    Reference,
    ReferenceRole,
    SelectorPart,
    StructDeclaration,
    Symbol,
    SymbolKind,
    TypeAlias,
    UnsatisfiedNeed,
)
from leanheaders.model.types import BLOCK_MARKER, BlockParameter, Qualifier, QualifierKind, TypeMention, TypeReference

__all__ = [
    # Type mentions
    "BLOCK_MARKER",
    "BlockParameter",
    "Qualifier",
    "QualifierKind",
    "TypeMention",
    "TypeReference",
    # Declarations
    "BlockTypeAlias",
    "ClassDeclaration",
    "Declaration",
    "EnumDeclaration",
    "ForwardDeclaration",
    "MethodDeclaration",
    "PropertyDeclaration",
    "ProtocolDeclaration",
    "SelectorPart",
    "StructDeclaration",
    "TypeAlias",
    # Directives, references and file results
    "Counts",
    "Diagnostic",
    "DiagnosticCode",
    "Directive",
    "DirectiveStrength",
    "DirectiveTarget",
    "FileAnalysis",
    "IMPLEMENTING_ROLES",
    "Include",
    "Reference",
    "ReferenceRole",
    "Symbol",
    "SymbolKind",
    "FORWARD_DECLARABLE_KINDS",
    # Resolution results
    "ImportPlan",
    "PlannedSymbol",
    "UnsatisfiedNeed",
]
