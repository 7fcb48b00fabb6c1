# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type mention representations for the LeanHeaders model."""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class TypeMention(NamedTuple):
    """A type name occurring inside a type reference."""

    name: str
    line: int
    column: int
    is_conformance: bool = False


class QualifierKind(Enum):
    """Qualifiers that may decorate a type mention.

    Every nullability spelling of "unspecified" (``null_unspecified``,
    ``_Null_unspecified``, ``__null_unspecified``) maps to NULL_UNSPECIFIED.
    """

    CONST = "const"
    NULLABLE = "nullable"
    NONNULL = "nonnull"
    NULL_UNSPECIFIED = "null_unspecified"


class Qualifier(BaseModel):
    """A qualifier bound to one level of a type mention.

    Level 0 is the base type itself; level ``n`` is the ``n``-th ``*``
    counted from the base type outwards.
    """

    model_config = ConfigDict(frozen=True)

    kind: QualifierKind
    level: int = 0


class TypeReference(BaseModel):
    """One occurrence of a type in header source text.

    Generic arguments and protocol conformances are structurally distinct:
    an angle-bracket group is assigned to exactly one of them when parsed.
    Block types carry their return type and parameter list; their base name
    is the ``^`` marker.
    """

    model_config = ConfigDict(frozen=True)

    base_name: str
    generic_arguments: list[TypeReference] = _Field(default_factory=list)
    conformances: list[str] = _Field(default_factory=list)
    indirection_depth: int = 0
    qualifiers: list[Qualifier] = _Field(default_factory=list)
    is_block: bool = False
    block_return: TypeReference | None = None
    block_parameters: list[BlockParameter] = _Field(default_factory=list)
    explicit_void: bool = False
    is_variadic: bool = False
    line: int = 0
    column: int = 0

    def qualifiers_at(self, level: int) -> set[QualifierKind]:
        """Return the qualifier kinds bound to the given indirection level."""
        return {q.kind for q in self.qualifiers if q.level == level}

    def iter_mentions(self) -> Iterator[TypeMention]:
        """Yield every type name mentioned by this reference, in source order.

        The block marker itself is not a name; a block contributes its return
        type and parameter types instead, and an explicit ``(void)`` parameter
        list contributes ``void``. Conformance names share the position of the
        mention that carries them.
        """
        if self.is_block:
            if self.block_return is not None:
                yield from self.block_return.iter_mentions()
            for param in self.block_parameters:
                yield from param.type.iter_mentions()
            if self.explicit_void:
                yield TypeMention("void", self.line, self.column)
            return
        yield TypeMention(self.base_name, self.line, self.column)
        for arg in self.generic_arguments:
            yield from arg.iter_mentions()
        for name in self.conformances:
            yield TypeMention(name, self.line, self.column, is_conformance=True)

    def mentioned_names(self) -> list[str]:
        """Return every type name mentioned by this reference, in source order."""
        return [mention.name for mention in self.iter_mentions()]


class BlockParameter(BaseModel):
    """A single parameter of a block type; anonymous parameters have no name."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    type: TypeReference


BLOCK_MARKER = "^"

# Resolve forward references for models that use TypeReference.
TypeReference.model_rebuild()
BlockParameter.model_rebuild()
