# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declarations, directives and per-file results of the LeanHeaders model."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

from leanheaders.model.types import TypeReference

# ###############
# Public Interface
# ###############


class SymbolKind(Enum):
    """The kinds of symbol a header can declare, announce or need."""

    CLASS = "class"
    PROTOCOL = "protocol"
    FILE = "file"
    STRUCT = "struct"
    ENUM = "enum"
    TYPEDEF = "typedef"


FORWARD_DECLARABLE_KINDS: frozenset[SymbolKind] = frozenset({SymbolKind.CLASS, SymbolKind.PROTOCOL})


class DirectiveStrength(Enum):
    """Whether a directive demands or supplies a symbol."""

    NEED = "need"
    HAVE = "have"


class DirectiveTarget(Enum):
    """The satisfaction level of a directive; import subsumes forward."""

    FORWARD = "forward"
    IMPORT = "import"


class ReferenceRole(Enum):
    """The syntactic position a referenced type name occupies."""

    SUPERCLASS = "superclass"
    EXTENDED_CLASS = "extended_class"
    CONFORMANCE = "conformance"
    TYPE = "type"


IMPLEMENTING_ROLES: frozenset[ReferenceRole] = frozenset(
    {ReferenceRole.SUPERCLASS, ReferenceRole.EXTENDED_CLASS, ReferenceRole.CONFORMANCE}
)


class DiagnosticCode(Enum):
    """Recoverable problems recorded while analyzing a single file."""

    LEXICAL_ANOMALY = "lexical-anomaly"
    GRAMMAR_MISMATCH = "grammar-mismatch"
    DIALECT_MISMATCH = "dialect-mismatch"
    ANALYSIS_FAILURE = "analysis-failure"


class _Located(BaseModel):
    """Common fields of everything parsed from a source position."""

    model_config = ConfigDict(frozen=True)

    source_file: str = ""
    line: int = 0
    column: int = 0


# ------------------------------------------------------------------
# Declarations
# ------------------------------------------------------------------


class ClassDeclaration(_Located):
    """An ``@interface`` header: a class, a named category, or an extension.

    ``type_parameters`` are the names of the class's own generic parameters;
    ``superclass_arguments`` are the generic arguments given to the superclass,
    as in ``@interface Stack : NSArray<NSString *>``.
    """

    kind: Literal["class"] = "class"
    name: str
    type_parameters: list[str] = _Field(default_factory=list)
    superclass: str | None = None
    superclass_arguments: list[TypeReference] = _Field(default_factory=list)
    protocols: list[str] = _Field(default_factory=list)
    category: str | None = None
    is_extension: bool = False

    @property
    def is_category(self) -> bool:
        """Return True for ``@interface Name (Category)``."""
        return self.category is not None


class ProtocolDeclaration(_Located):
    """A ``@protocol`` definition header."""

    kind: Literal["protocol"] = "protocol"
    name: str
    inherited_protocols: list[str] = _Field(default_factory=list)


class ForwardDeclaration(_Located):
    """An ``@class`` or ``@protocol`` statement promising one or more names."""

    kind: Literal["forward"] = "forward"
    symbol_kind: SymbolKind
    names: list[str] = _Field(default_factory=list)


class StructDeclaration(_Located):
    """A struct definition; its fields are opaque.

    ``name`` is the tag name when present, otherwise the typedef alias.
    """

    kind: Literal["struct"] = "struct"
    name: str | None = None
    is_anonymous: bool = False
    alias_name: str | None = None


class EnumDeclaration(_Located):
    """A C enum, a typedef'd enum, or one of the ``NS_ENUM`` macro forms.

    Case identifiers inside the braces are not recorded.
    """

    kind: Literal["enum"] = "enum"
    name: str | None = None
    is_anonymous: bool = False
    alias_name: str | None = None
    raw_type: TypeReference | None = None
    is_options_style: bool = False
    macro: str | None = None
    error_domain: str | None = None


class PropertyDeclaration(_Located):
    """An ``@property`` member declaration."""

    kind: Literal["property"] = "property"
    owner_context: str | None = None
    attributes: list[str] = _Field(default_factory=list)
    markers: list[str] = _Field(default_factory=list)
    type: TypeReference
    name: str | None = None

    @property
    def getter(self) -> str | None:
        """Return the custom getter name, if any."""
        return _attribute_value(self.attributes, "getter")

    @property
    def setter(self) -> str | None:
        """Return the custom setter name, if any."""
        return _attribute_value(self.attributes, "setter")


class SelectorPart(BaseModel):
    """One ``label:(Type)name`` segment of a method selector."""

    model_config = ConfigDict(frozen=True)

    label: str
    parameter_name: str | None = None
    type: TypeReference | None = None


class MethodDeclaration(_Located):
    """A ``+``/``-`` method declaration header."""

    kind: Literal["method"] = "method"
    owner_context: str | None = None
    is_class_method: bool = False
    return_type: TypeReference | None = None
    selector_parts: list[SelectorPart] = _Field(default_factory=list)
    is_variadic: bool = False

    @property
    def selector(self) -> str:
        """Return the full selector, e.g. ``initWith:onClose:``."""
        if len(self.selector_parts) == 1 and self.selector_parts[0].parameter_name is None:
            return self.selector_parts[0].label
        return "".join(f"{part.label}:" for part in self.selector_parts)


class BlockTypeAlias(_Located):
    """``typedef Return (^Name)(Params);``"""

    kind: Literal["block_alias"] = "block_alias"
    name: str
    signature: TypeReference


class TypeAlias(_Located):
    """``typedef ExistingType NewName;`` for a non-block existing type."""

    kind: Literal["alias"] = "alias"
    name: str
    aliased_type: TypeReference


# A declaration site. The `kind` discriminator keeps the union closed and
# unambiguous when deserialized.
Declaration = Annotated[
    ClassDeclaration
    | ProtocolDeclaration
    | ForwardDeclaration
    | StructDeclaration
    | EnumDeclaration
    | PropertyDeclaration
    | MethodDeclaration
    | BlockTypeAlias
    | TypeAlias,
    _Field(discriminator="kind"),
]


# ------------------------------------------------------------------
# Directives, references and includes
# ------------------------------------------------------------------


class Directive(_Located):
    """One name from a ``#pragma LeanHeaders`` line."""

    strength: DirectiveStrength
    target: DirectiveTarget
    symbol_kind: SymbolKind
    name: str

    def describe(self) -> str:
        """Return the directive in its pragma surface form."""
        return f"{self.strength.value} {self.target.value} {self.symbol_kind.value} {self.name}"


class Reference(_Located):
    """A type name occurring at one site of a file."""

    name: str
    role: ReferenceRole = ReferenceRole.TYPE
    kind_hint: SymbolKind | None = None

    @property
    def is_implementing(self) -> bool:
        """Return True for superclass, category-target and conformance references."""
        return self.role in IMPLEMENTING_ROLES


class Include(_Located):
    """An ``#import`` or ``#include`` line."""

    path: str
    is_system: bool = False
    uses_include: bool = False

    @property
    def file_name(self) -> str:
        """Return the last path component, e.g. ``Foo.h`` for ``Module/Foo.h``."""
        return self.path.rsplit("/", 1)[-1]


class Symbol(BaseModel):
    """A named symbol tagged with its kind."""

    model_config = ConfigDict(frozen=True)

    kind: SymbolKind
    name: str


class Diagnostic(BaseModel):
    """A recoverable problem found while analyzing a file.

    Attributes:
        code: The taxonomy entry of the problem.
        message: Human-readable description.
        line: 1-based line number, 0 when unknown.
        column: 1-based column number, 0 when unknown.
    """

    model_config = ConfigDict(frozen=True)

    code: DiagnosticCode
    message: str
    line: int = 0
    column: int = 0


class Counts(BaseModel):
    """The (declared, announced, referenced) summary of a file."""

    model_config = ConfigDict(frozen=True)

    declared: int = 0
    announced: int = 0
    referenced: int = 0

    def as_tuple(self) -> tuple[int, int, int]:
        """Return the counts as a ``(declared, announced, referenced)`` tuple."""
        return (self.declared, self.announced, self.referenced)


class FileAnalysis(BaseModel):
    """Everything the analyzer extracted from one file.

    Attributes:
        file_id: The caller-supplied identifier of the file.
        declarations: Declaration sites in source order.
        references: One entry per referenced type-name site, in source order.
        directives: Dialect directives in source order.
        includes: ``#import``/``#include`` lines in source order.
        declared_symbols: Symbols the file introduces at import strength.
        announced_symbols: Symbols the file only promises at forward strength
            (including files it claims to import).
        external_references: References not satisfied by anything declared,
            forward-declared or had in the same file, one per (name, kind).
        diagnostics: Recoverable problems found while analyzing.
        counts: The (declared, announced, referenced) summary.
    """

    model_config = ConfigDict(frozen=True)

    file_id: str
    declarations: list[Declaration] = _Field(default_factory=list)
    references: list[Reference] = _Field(default_factory=list)
    directives: list[Directive] = _Field(default_factory=list)
    includes: list[Include] = _Field(default_factory=list)
    declared_symbols: list[Symbol] = _Field(default_factory=list)
    announced_symbols: list[Symbol] = _Field(default_factory=list)
    external_references: list[Reference] = _Field(default_factory=list)
    diagnostics: list[Diagnostic] = _Field(default_factory=list)
    counts: Counts = _Field(default_factory=Counts)


# ------------------------------------------------------------------
# Resolution results
# ------------------------------------------------------------------


class PlannedSymbol(BaseModel):
    """A symbol the file must import or forward-declare.

    ``source_file`` names the file supplying the definition for imports; it
    is None for forward declarations and for symbols supplied only by a
    ``have`` directive.
    """

    model_config = ConfigDict(frozen=True)

    kind: SymbolKind
    name: str
    source_file: str | None = None


class UnsatisfiedNeed(BaseModel):
    """A reference or ``need`` directive nothing in the aggregate supplies."""

    model_config = ConfigDict(frozen=True)

    kind: SymbolKind | None = None
    name: str
    strength: DirectiveTarget
    needed_by: str
    line: int = 0
    column: int = 0


class ImportPlan(BaseModel):
    """The minimal set of imports and forward declarations for one file."""

    model_config = ConfigDict(frozen=True)

    file_id: str
    import_symbols: list[PlannedSymbol] = _Field(default_factory=list)
    forward_symbols: list[PlannedSymbol] = _Field(default_factory=list)
    import_files: list[str] = _Field(default_factory=list)
    unsatisfied: list[UnsatisfiedNeed] = _Field(default_factory=list)
    redundant_imports: list[str] = _Field(default_factory=list)
    redundant_forwards: list[str] = _Field(default_factory=list)

    @property
    def is_satisfied(self) -> bool:
        """Return True if every need of the file is supplied somewhere."""
        return not self.unsatisfied


# ################
# Implementation
# ################


def _attribute_value(attributes: list[str], key: str) -> str | None:
    prefix = f"{key}="
    for attr in attributes:
        if attr.startswith(prefix):
            return attr[len(prefix) :]
    return None
