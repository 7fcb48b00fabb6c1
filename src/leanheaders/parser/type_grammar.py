# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent grammar for type mentions.

Parses one occurrence of a type: the base name, an optional angle-bracket
list, indirection markers with the qualifiers bound to each level, and the
block-type shape ``Return (^name)(Params)``. The grammar is structural: an
angle-bracket list is parsed without committing to "generic arguments" or
"protocol conformances"; the caller's :class:`TypeContext` decides.
"""

from __future__ import annotations

from enum import Enum

from leanheaders.model.types import BLOCK_MARKER, BlockParameter, Qualifier, QualifierKind, TypeReference
from leanheaders.parser.lexer import Token, TokenType, matching_close, tokenize

# ###############
# Public Interface
# ###############


class GrammarMismatch(Exception):
    """Raised when a grammar rule does not match at the current position.

    Attributes:
        line: 1-based line number of the offending token.
        column: 1-based column number of the offending token.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


class TypeContext(Enum):
    """Where a type mention occurs, deciding how ``<...>`` is interpreted."""

    # Property, parameter, return, alias and block types.
    MENTION = "mention"
    # Directly after a class, category or protocol name.
    DECLARATION_HEADER = "declaration_header"


def classify_angle_list(
    items: list[TypeReference], context: TypeContext
) -> tuple[list[TypeReference], list[str]]:
    """Split a parsed angle-bracket list into generic arguments or conformances.

    In a declaration header every item is a protocol name. In a type mention
    the list is a conformance list only when every item is a bare identifier
    (``id<P>``, ``Type<P, Q>``); any indirection, qualifier or nesting makes
    it a generic argument list (``NSArray<Foo *>``).

    Returns:
        A ``(generic_arguments, conformances)`` pair; at most one is non-empty.
    """
    if context == TypeContext.DECLARATION_HEADER or all(_is_bare(item) for item in items):
        return [], [item.base_name for item in items]
    return list(items), []


def match_type_reference(
    tokens: list[Token],
    pos: int,
    context: TypeContext = TypeContext.MENTION,
) -> tuple[TypeReference, int] | None:
    """Try to parse exactly one type mention starting at ``tokens[pos]``.

    Args:
        tokens: A token sequence as produced by :func:`tokenize`.
        pos: Index of the first token of the candidate type mention.
        context: How an angle-bracket list directly after the base name is read.

    Returns:
        The parsed TypeReference and the index of the first token after it,
        or None if no type mention starts at ``pos``.
    """
    grammar = TypeGrammar(tokens, pos)
    try:
        ref, _ = grammar.parse_type(context)
    except GrammarMismatch:
        return None
    return ref, grammar.position


def parse_declarator(source: str) -> tuple[TypeReference, str | None]:
    """Parse a standalone ``Type name`` declarator such as ``Foo * const bar;``.

    The declared name is optional, as is a terminating semicolon. For block
    types the name is the one written inside ``(^name)``.

    Returns:
        The TypeReference and the declared name (None when absent).

    Raises:
        GrammarMismatch: If the text is not exactly one type declarator.
    """
    grammar = TypeGrammar(tokenize(source))
    ref, name = grammar.parse_type(TypeContext.MENTION)
    if name is None and grammar._check(TokenType.IDENTIFIER):
        name = grammar._advance().value
    if grammar._check(TokenType.SEMICOLON):
        grammar._advance()
    if not grammar._at_end():
        tok = grammar._current()
        raise GrammarMismatch(f"Unexpected token {tok.value!r} after type", tok.line, tok.column)
    return ref, name


def parse_type_reference(source: str) -> TypeReference:
    """Parse a standalone type mention, ignoring an optional declared name.

    Raises:
        GrammarMismatch: If the text is not exactly one type declarator.
    """
    ref, _ = parse_declarator(source)
    return ref


class TypeGrammar:
    """Token cursor implementing the type-mention grammar.

    The declaration parser extends this class, so the token access helpers
    are shared by both grammars.
    """

    def __init__(self, tokens: list[Token], pos: int = 0) -> None:
        self._tokens = tokens
        self._pos = pos

    @property
    def position(self) -> int:
        """Index of the current (un-consumed) token."""
        return self._pos

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        """Return the current (un-consumed) token."""
        return self._tokens[self._pos]

    def _peek(self, offset: int = 1) -> Token:
        """Return the token *offset* positions ahead, clamped to EOF."""
        return self._tokens[min(self._pos + offset, len(self._tokens) - 1)]

    def _peek_type(self) -> TokenType:
        """Return the token type of the current token."""
        return self._tokens[self._pos].type

    def _at_end(self) -> bool:
        """Return True if the current token is the EOF token."""
        return self._peek_type() == TokenType.EOF

    def _advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self._tokens[self._pos]
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return tok

    def _expect(self, *types: TokenType) -> Token:
        """Consume the current token if it matches any of the given types.

        Raises GrammarMismatch if the current token does not match.
        """
        tok = self._current()
        if tok.type not in types:
            expected = ", ".join(repr(t.value) for t in types)
            raise GrammarMismatch(f"Expected {expected}, got {tok.value!r}", tok.line, tok.column)
        return self._advance()

    def _check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of the given types (without
        consuming).
        """
        return self._peek_type() in types

    def _check_word(self, *words: str) -> bool:
        """Return True if the current token is an identifier spelled as one of *words*."""
        tok = self._current()
        return tok.type == TokenType.IDENTIFIER and tok.value in words

    def _skip_group(self) -> None:
        """Consume the balanced group opened by the current token."""
        end = matching_close(self._tokens, self._pos)
        if end is None:
            tok = self._current()
            raise GrammarMismatch(f"Unclosed {tok.value!r}", tok.line, tok.column)
        self._pos = end + 1

    def _skip_attributes(self) -> None:
        """Skip ``__attribute__((...))`` and attribute-like macros such as ``NS_NOESCAPE``."""
        while True:
            if self._check_word(*_ATTRIBUTE_WITH_ARGUMENTS) and self._peek().type == TokenType.LPAREN:
                self._advance()
                self._skip_group()
            elif self._check_word(*_ATTRIBUTE_MARKERS):
                self._advance()
            else:
                return

    # ------------------------------------------------------------------
    # Type mentions
    # ------------------------------------------------------------------

    def parse_type(self, context: TypeContext = TypeContext.MENTION) -> tuple[TypeReference, str | None]:
        """Parse one type mention starting at the current token.

        Returns:
            The TypeReference and, for block types, the name written inside
            ``(^name)`` (None otherwise).

        Raises:
            GrammarMismatch: If no type mention starts here.
        """
        start = self._pos
        try:
            ref = self._parse_plain_type(context)
            if self._check(TokenType.LPAREN) and self._peek().type == TokenType.CARET:
                return self._parse_block_suffix(ref)
            return ref, None
        except GrammarMismatch:
            self._pos = start
            raise

    def _parse_plain_type(self, context: TypeContext) -> TypeReference:
        """Parse ``[prefix qualifiers] Base [<...>] [qualifiers] (* [qualifiers])*``."""
        qualifiers: list[Qualifier] = []
        self._parse_qualifiers(0, qualifiers, prefix=True)

        tok = self._current()
        if tok.type != TokenType.IDENTIFIER or tok.value in _RESERVED_WORDS:
            raise GrammarMismatch(f"Expected a type name, got {tok.value!r}", tok.line, tok.column)
        base_name = self._parse_base_name()
        self._parse_qualifiers(0, qualifiers)

        generic_arguments: list[TypeReference] = []
        conformances: list[str] = []
        if self._check(TokenType.LANGLE):
            items = self._parse_angle_list()
            generic_arguments, conformances = classify_angle_list(items, context)
            self._parse_qualifiers(0, qualifiers)

        depth = 0
        while self._check(TokenType.STAR):
            self._advance()
            depth += 1
            self._parse_qualifiers(depth, qualifiers)

        return TypeReference(
            base_name=base_name,
            generic_arguments=generic_arguments,
            conformances=conformances,
            indirection_depth=depth,
            qualifiers=qualifiers,
            line=tok.line,
            column=tok.column,
        )

    def _parse_base_name(self) -> str:
        """Consume the base identifier, folding multi-word C scalar types into one name."""
        first = self._advance().value
        if first in _ELABORATED_TAGS and self._check(TokenType.IDENTIFIER):
            return self._advance().value
        if first not in _SCALAR_WORDS:
            return first
        words = [first]
        while self._check_word(*_SCALAR_WORDS):
            words.append(self._advance().value)
        return " ".join(words)

    def _parse_qualifiers(self, level: int, into: list[Qualifier], *, prefix: bool = False) -> None:
        """Consume qualifier keywords, binding const/nullability to *level*.

        Method-parameter qualifiers such as ``inout`` are only accepted in
        prefix position, where they cannot be mistaken for a declared name.
        """
        while True:
            self._skip_attributes()
            tok = self._current()
            if tok.type != TokenType.IDENTIFIER:
                return
            if tok.value in _QUALIFIER_WORDS:
                into.append(Qualifier(kind=_QUALIFIER_WORDS[tok.value], level=level))
            elif tok.value not in _IGNORED_QUALIFIERS and not (prefix and tok.value in _PREFIX_QUALIFIERS):
                return
            self._advance()

    def _parse_angle_list(self) -> list[TypeReference]:
        """Parse ``< item (, item)* >`` into structural TypeReferences."""
        self._expect(TokenType.LANGLE)
        items: list[TypeReference] = []
        while True:
            while self._check_word(*_VARIANCE_WORDS):
                self._advance()
            item, _ = self.parse_type(TypeContext.MENTION)
            items.append(item)
            if self._check(TokenType.COMMA):
                self._advance()
                continue
            self._expect(TokenType.RANGLE)
            return items

    # ------------------------------------------------------------------
    # Block types
    # ------------------------------------------------------------------

    def _parse_block_suffix(self, return_type: TypeReference) -> tuple[TypeReference, str | None]:
        """Parse ``(^ [qualifiers] [name]) (params)`` following a block's return type."""
        self._expect(TokenType.LPAREN)
        caret = self._expect(TokenType.CARET)
        qualifiers: list[Qualifier] = []
        self._parse_qualifiers(0, qualifiers)
        name: str | None = None
        if self._check(TokenType.IDENTIFIER):
            name = self._advance().value
        self._expect(TokenType.RPAREN)
        parameters, explicit_void, is_variadic = self._parse_block_parameters()
        ref = TypeReference(
            base_name=BLOCK_MARKER,
            qualifiers=qualifiers,
            is_block=True,
            block_return=return_type,
            block_parameters=parameters,
            explicit_void=explicit_void,
            is_variadic=is_variadic,
            line=caret.line,
            column=caret.column,
        )
        self._skip_attributes()
        return ref, name

    def _parse_block_parameters(self) -> tuple[list[BlockParameter], bool, bool]:
        """Parse a parenthesized block parameter list.

        Returns:
            The parameters, whether the list was an explicit ``(void)``, and
            whether it ends in ``...``.
        """
        self._expect(TokenType.LPAREN)
        if self._check(TokenType.RPAREN):
            self._advance()
            return [], False, False
        if self._check_word("void") and self._peek().type == TokenType.RPAREN:
            self._advance()
            self._advance()
            return [], True, False

        parameters: list[BlockParameter] = []
        is_variadic = False
        while True:
            if self._check(TokenType.ELLIPSIS):
                self._advance()
                is_variadic = True
            else:
                param_type, param_name = self.parse_type(TypeContext.MENTION)
                if param_name is None and self._check(TokenType.IDENTIFIER):
                    param_name = self._advance().value
                self._skip_attributes()
                parameters.append(BlockParameter(name=param_name, type=param_type))
            if self._check(TokenType.COMMA):
                self._advance()
                continue
            self._expect(TokenType.RPAREN)
            return parameters, False, is_variadic


# ################
# Implementation
# ################

_QUALIFIER_WORDS: dict[str, QualifierKind] = {
    "const": QualifierKind.CONST,
    "nullable": QualifierKind.NULLABLE,
    "_Nullable": QualifierKind.NULLABLE,
    "__nullable": QualifierKind.NULLABLE,
    "_Nullable_result": QualifierKind.NULLABLE,
    "nonnull": QualifierKind.NONNULL,
    "_Nonnull": QualifierKind.NONNULL,
    "__nonnull": QualifierKind.NONNULL,
    "null_unspecified": QualifierKind.NULL_UNSPECIFIED,
    "_Null_unspecified": QualifierKind.NULL_UNSPECIFIED,
    "__null_unspecified": QualifierKind.NULL_UNSPECIFIED,
}

# Qualifiers that carry no information for dependency analysis.
_IGNORED_QUALIFIERS: frozenset[str] = frozenset(
    {
        "volatile",
        "restrict",
        "__restrict",
        "__kindof",
        "__weak",
        "__strong",
        "__unsafe_unretained",
        "__autoreleasing",
        "__block",
        "__unused",
    }
)

_PREFIX_QUALIFIERS: frozenset[str] = frozenset({"in", "out", "inout", "bycopy", "byref", "oneway"})

_ATTRIBUTE_MARKERS: frozenset[str] = frozenset({"NS_NOESCAPE", "NS_RETURNS_RETAINED", "NS_RETURNS_NOT_RETAINED"})

_ATTRIBUTE_WITH_ARGUMENTS: frozenset[str] = frozenset({"__attribute__", "__attribute"})

_VARIANCE_WORDS: frozenset[str] = frozenset({"__covariant", "__contravariant"})

_ELABORATED_TAGS: frozenset[str] = frozenset({"struct", "enum", "union"})

_SCALAR_WORDS: frozenset[str] = frozenset({"signed", "unsigned", "short", "long", "int", "char", "double"})

# Words that can never start a type mention.
_RESERVED_WORDS: frozenset[str] = frozenset({"typedef", "static", "extern", "return"})


def _is_bare(ref: TypeReference) -> bool:
    """Return True if *ref* is a plain identifier with no decoration."""
    return (
        not ref.is_block
        and ref.indirection_depth == 0
        and not ref.qualifiers
        and not ref.generic_arguments
        and not ref.conformances
    )
