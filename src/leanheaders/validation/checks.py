# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Header hygiene checks for analyzed files.

These checks operate on a FileAnalysis and, when available, its resolved
ImportPlan. They flag constructs that are legal but worth a second look,
and report needs that nothing in the aggregate supplies.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from leanheaders.model.entities import (
    ClassDeclaration,
    EnumDeclaration,
    FileAnalysis,
    ImportPlan,
    ProtocolDeclaration,
    StructDeclaration,
)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ValidationWarning:
    """A non-fatal hygiene issue.

    Attributes:
        message: Human-readable description of the warning.
        line: 1-based line number, 0 when the issue has no single location.
    """

    message: str
    line: int = 0


@dataclass(frozen=True)
class ValidationError:
    """A fatal issue: the file cannot be compiled with its minimal imports.

    Attributes:
        message: Human-readable description of the error.
        line: 1-based line number, 0 when the issue has no single location.
    """

    message: str
    line: int = 0


@dataclass
class ValidationResult:
    """Result of running hygiene checks.

    Attributes:
        warnings: Non-fatal issues found during validation.
        errors: Fatal errors that break the build.
    """

    warnings: list[ValidationWarning] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Return True if any fatal validation errors were found."""
        return len(self.errors) > 0


def validate(analysis: FileAnalysis, plan: ImportPlan | None = None) -> ValidationResult:
    """Run all hygiene checks on one analyzed file.

    Checks performed:

    1. **Root classes and protocols** (warning): an ``@interface`` without a
       superclass or a ``@protocol`` without inherited protocols.
    2. **#include** (warning): ``#include`` used instead of ``#import``.
    3. **Plain enums** (warning): a C enum instead of ``NS_ENUM`` or
       ``NS_OPTIONS``.
    4. **Struct naming** (warning): anonymous structs, and structs or enums
       whose tag and typedef alias differ.
    5. **Redundancy** (warning, needs *plan*): includes and forward
       declarations the file does not need.
    6. **Unsatisfied needs** (error, needs *plan*): references or ``need``
       directives nothing in the aggregate supplies.

    Args:
        analysis: The file to check.
        plan: The file's resolved ImportPlan; checks 5 and 6 are skipped
            without it.

    Returns:
        A :class:`ValidationResult`; an empty result means a clean header.
    """
    warnings: list[ValidationWarning] = []
    errors: list[ValidationError] = []

    warnings.extend(_check_root_declarations(analysis))
    warnings.extend(_check_includes(analysis))
    warnings.extend(_check_enums(analysis))
    warnings.extend(_check_tags(analysis))
    if plan is not None:
        warnings.extend(_check_redundancy(plan))
        errors.extend(_check_unsatisfied(plan))

    return ValidationResult(warnings=warnings, errors=errors)


# ################
# Implementation
# ################


def _check_root_declarations(analysis: FileAnalysis) -> list[ValidationWarning]:
    """Return warnings for classes and protocols that inherit from nothing."""
    warnings: list[ValidationWarning] = []
    for decl in analysis.declarations:
        if isinstance(decl, ClassDeclaration) and not (decl.is_category or decl.is_extension):
            if decl.superclass is None:
                warnings.append(
                    ValidationWarning(message=f"Class '{decl.name}' is a root class (no superclass).", line=decl.line)
                )
        elif isinstance(decl, ProtocolDeclaration) and not decl.inherited_protocols:
            warnings.append(
                ValidationWarning(
                    message=f"Protocol '{decl.name}' is a root protocol (inherits no protocol).", line=decl.line
                )
            )
    return warnings


def _check_includes(analysis: FileAnalysis) -> list[ValidationWarning]:
    """Return warnings for ``#include`` lines; ``#import`` guards against double inclusion."""
    return [
        ValidationWarning(message=f"'#include' used for '{inc.path}'; prefer '#import'.", line=inc.line)
        for inc in analysis.includes
        if inc.uses_include
    ]


def _check_enums(analysis: FileAnalysis) -> list[ValidationWarning]:
    """Return warnings for enums not declared through an enum macro."""
    warnings: list[ValidationWarning] = []
    for decl in analysis.declarations:
        if isinstance(decl, EnumDeclaration) and decl.macro is None:
            label = decl.alias_name or decl.name or "<anonymous>"
            warnings.append(
                ValidationWarning(
                    message=f"Enum '{label}' is a plain C enum; prefer NS_ENUM or NS_OPTIONS.", line=decl.line
                )
            )
    return warnings


def _check_tags(analysis: FileAnalysis) -> list[ValidationWarning]:
    """Return warnings for anonymous structs and for tags that differ from their alias."""
    warnings: list[ValidationWarning] = []
    for decl in analysis.declarations:
        if not isinstance(decl, (StructDeclaration, EnumDeclaration)):
            continue
        if isinstance(decl, StructDeclaration) and decl.is_anonymous:
            warnings.append(
                ValidationWarning(message=f"Struct '{decl.name or '<anonymous>'}' has no tag name.", line=decl.line)
            )
        if not decl.is_anonymous and decl.alias_name is not None and decl.alias_name != decl.name:
            warnings.append(
                ValidationWarning(
                    message=f"Tag '{decl.name}' differs from its typedef alias '{decl.alias_name}'.", line=decl.line
                )
            )
    return warnings


def _check_redundancy(plan: ImportPlan) -> list[ValidationWarning]:
    """Return warnings for imports and forward declarations the file does not need."""
    warnings = [ValidationWarning(message=f"Import of '{path}' is not needed.") for path in plan.redundant_imports]
    warnings.extend(
        ValidationWarning(message=f"Forward declaration of '{name}' is never used.") for name in plan.redundant_forwards
    )
    return warnings


def _check_unsatisfied(plan: ImportPlan) -> list[ValidationError]:
    """Return errors for needs nothing in the aggregate supplies."""
    errors: list[ValidationError] = []
    for need in plan.unsatisfied:
        kind = need.kind.value if need.kind is not None else "symbol"
        errors.append(
            ValidationError(
                message=f"Nothing supplies {kind} '{need.name}' at {need.strength.value} strength.",
                line=need.line,
            )
        )
    return errors
