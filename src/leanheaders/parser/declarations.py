# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for Objective-C header declarations.

Converts the token stream produced by the scanner into declaration sites,
dialect directives and include lines. Only declaration headers are parsed:
struct fields, enum cases, ivar blocks and method bodies are skipped as
balanced groups. A statement that matches no declaration family is recorded
as a diagnostic and skipped up to its terminator, so one malformed statement
never hides the rest of the file.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from leanheaders.model.entities import (
    BlockTypeAlias,
    ClassDeclaration,
    Declaration,
    Diagnostic,
    DiagnosticCode,
    Directive,
    EnumDeclaration,
    ForwardDeclaration,
    Include,
    MethodDeclaration,
    PropertyDeclaration,
    ProtocolDeclaration,
    SelectorPart,
    StructDeclaration,
    SymbolKind,
    TypeAlias,
)
from leanheaders.model.types import TypeReference
from leanheaders.parser.directives import DialectMismatch, parse_directive
from leanheaders.parser.lexer import DEFAULT_PRAGMA_PREFIX, Token, TokenType, tokenize
from leanheaders.parser.type_grammar import GrammarMismatch, TypeContext, TypeGrammar, classify_angle_list

# ###############
# Public Interface
# ###############


@dataclass
class ParsedHeader:
    """Everything the declaration parser extracted from one header.

    Attributes:
        declarations: Declaration sites in source order.
        directives: Dialect directives in source order.
        includes: ``#import``/``#include``/``@import`` lines in source order.
        diagnostics: Lexical anomalies, grammar mismatches and dialect mismatches.
    """

    declarations: list[Declaration] = field(default_factory=list)
    directives: list[Directive] = field(default_factory=list)
    includes: list[Include] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)


def parse_declarations(
    source: str,
    *,
    source_file: str = "",
    pragma_prefix: str = DEFAULT_PRAGMA_PREFIX,
) -> ParsedHeader:
    """Parse header source text into declarations, directives and includes.

    Args:
        source: The full text of a header file.
        source_file: Identifier of the file, recorded on every result.
        pragma_prefix: The dialect word following ``#pragma``.

    Returns:
        A ParsedHeader. Parsing never raises for malformed input; problems
        are reported in :attr:`ParsedHeader.diagnostics`.
    """
    tokens = tokenize(source, pragma_prefix=pragma_prefix)
    return _Parser(tokens, source_file, pragma_prefix).parse()


# ################
# Implementation
# ################

_ENUM_MACROS: dict[str, bool] = {
    # macro name -> is options style
    "NS_ENUM": False,
    "NS_CLOSED_ENUM": False,
    "NS_ERROR_ENUM": False,
    "NS_OPTIONS": True,
    "CF_ENUM": False,
    "CF_CLOSED_ENUM": False,
    "CF_OPTIONS": True,
}

_PROPERTY_ATTRIBUTES: dict[str, str] = {
    "NS_NONATOMIC_IOSONLY": "nonatomic",
}

_PROPERTY_MARKERS: frozenset[str] = frozenset({"IBOutlet", "IBInspectable", "IBOutletCollection"})

# Statements in these families are C declarations without any symbol of
# interest (external constants, functions, static variables).
_OPAQUE_STATEMENT_WORDS: frozenset[str] = frozenset(
    {
        "extern",
        "static",
        "inline",
        "FOUNDATION_EXPORT",
        "FOUNDATION_EXTERN",
        "FOUNDATION_STATIC_INLINE",
        "UIKIT_EXTERN",
        "UIKIT_STATIC_INLINE",
        "APPKIT_EXTERN",
        "OBJC_EXPORT",
        "CF_EXPORT",
        "CF_INLINE",
    }
)

_BARE_MACROS: frozenset[str] = frozenset(
    {
        "NS_ASSUME_NONNULL_BEGIN",
        "NS_ASSUME_NONNULL_END",
        "CF_ASSUME_NONNULL_BEGIN",
        "CF_ASSUME_NONNULL_END",
        "CF_EXTERN_C_BEGIN",
        "CF_EXTERN_C_END",
        "NS_HEADER_AUDIT_BEGIN",
        "NS_HEADER_AUDIT_END",
        "CF_IMPLICIT_BRIDGING_ENABLED",
        "CF_IMPLICIT_BRIDGING_DISABLED",
        "__BEGIN_DECLS",
        "__END_DECLS",
    }
)

_LINE_START_WORDS: frozenset[str] = frozenset({"typedef", "struct", "enum", *_ENUM_MACROS})

_ALWAYS_STARTS_STATEMENT: frozenset[TokenType] = frozenset(
    {
        TokenType.PRAGMA,
        TokenType.INCLUDE,
        TokenType.AT_INTERFACE,
        TokenType.AT_IMPLEMENTATION,
        TokenType.AT_PROTOCOL,
        TokenType.AT_CLASS,
        TokenType.AT_PROPERTY,
        TokenType.AT_END,
        TokenType.AT_OPTIONAL,
        TokenType.AT_REQUIRED,
    }
)

_MACRO_NAME = re.compile(r"[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)+")

_INCLUDE_LINE = re.compile(r"#\s*(import|include)\s*([<\"])([^>\"]+)[>\"]")


class _Parser(TypeGrammar):
    """Recursive-descent parser for header token streams."""

    def __init__(self, tokens: list[Token], source_file: str, pragma_prefix: str) -> None:
        super().__init__(tokens)
        self._source_file = source_file
        self._pragma_prefix = pragma_prefix
        self._context: str | None = None
        self._result = ParsedHeader()

    def parse(self) -> ParsedHeader:
        """Parse the full token stream and return a ParsedHeader."""
        for tok in self._tokens:
            if tok.type == TokenType.UNKNOWN:
                self._diagnose(DiagnosticCode.LEXICAL_ANOMALY, f"Unrecognized character {tok.value!r}", tok)
        while not self._at_end():
            start = self._pos
            try:
                self._parse_statement()
            except GrammarMismatch as exc:
                self._result.diagnostics.append(
                    Diagnostic(code=DiagnosticCode.GRAMMAR_MISMATCH, message=str(exc), line=exc.line, column=exc.column)
                )
                self._pos = start
                self._skip_statement()
        return self._result

    # ------------------------------------------------------------------
    # Statement dispatch and recovery
    # ------------------------------------------------------------------

    def _parse_statement(self) -> None:
        """Parse one top-level or member statement."""
        tok = self._current()
        if tok.type == TokenType.PRAGMA:
            self._parse_pragma()
        elif tok.type == TokenType.INCLUDE:
            self._parse_include()
        elif tok.type == TokenType.AT_INTERFACE:
            self._parse_interface()
        elif tok.type == TokenType.AT_PROTOCOL:
            self._parse_protocol()
        elif tok.type == TokenType.AT_CLASS:
            self._parse_forward(SymbolKind.CLASS)
        elif tok.type == TokenType.AT_PROPERTY:
            self._parse_property()
        elif tok.type in (TokenType.PLUS, TokenType.MINUS):
            self._parse_method()
        elif tok.type == TokenType.AT_END:
            self._advance()
            self._context = None
        elif tok.type in (TokenType.AT_OPTIONAL, TokenType.AT_REQUIRED, TokenType.SEMICOLON, TokenType.UNKNOWN):
            self._advance()
        elif tok.type == TokenType.AT_IMPLEMENTATION:
            self._skip_implementation()
        elif tok.type == TokenType.AT_KEYWORD:
            self._parse_at_keyword()
        elif tok.type == TokenType.LBRACE:
            self._skip_group()
        elif tok.type == TokenType.IDENTIFIER:
            self._parse_identifier_statement()
        else:
            raise GrammarMismatch(f"Unexpected token {tok.value!r}", tok.line, tok.column)

    def _parse_identifier_statement(self) -> None:
        """Dispatch a statement that starts with an identifier."""
        tok = self._current()
        word = tok.value
        if word == "typedef":
            self._parse_typedef()
        elif word == "struct":
            self._advance()
            self._parse_struct_body(typedef=False)
        elif word == "enum":
            self._advance()
            self._parse_enum_body(typedef=False)
        elif word in _ENUM_MACROS:
            self._parse_enum_macro(typedef=False)
        elif word in _BARE_MACROS:
            self._advance()
        elif word in _OPAQUE_STATEMENT_WORDS:
            self._skip_statement()
        elif self._is_macro_call():
            # Availability annotations in front of a declaration.
            self._advance()
            self._skip_group()
        else:
            raise GrammarMismatch(f"Unrecognized declaration starting with {word!r}", tok.line, tok.column)

    def _skip_statement(self) -> None:
        """Skip tokens up to the end of the current statement.

        Stops after a ';', after a top-level braced group, or before the next
        token that can only begin a new statement.
        """
        if self._check(TokenType.LBRACE):
            self._skip_group_or_rest()
        else:
            self._advance()
        while not self._at_end():
            if self._check(TokenType.SEMICOLON):
                self._advance()
                return
            if self._check(TokenType.LBRACE):
                self._skip_group_or_rest()
                if self._check(TokenType.SEMICOLON):
                    self._advance()
                return
            if self._starts_statement():
                return
            self._advance()

    def _skip_group_or_rest(self) -> None:
        """Skip a balanced group, or everything up to EOF if it is never closed."""
        try:
            self._skip_group()
        except GrammarMismatch:
            self._pos = len(self._tokens) - 1

    def _starts_statement(self) -> bool:
        """Return True if the current token can only begin a new statement."""
        tok = self._current()
        if tok.type in _ALWAYS_STARTS_STATEMENT:
            return True
        if not self._is_first_on_line():
            return False
        if tok.type in (TokenType.PLUS, TokenType.MINUS):
            return True
        return tok.type == TokenType.IDENTIFIER and tok.value in _LINE_START_WORDS

    def _is_first_on_line(self) -> bool:
        return self._pos == 0 or self._tokens[self._pos - 1].line != self._current().line

    def _is_macro_call(self) -> bool:
        tok = self._current()
        return bool(_MACRO_NAME.fullmatch(tok.value)) and self._peek().type == TokenType.LPAREN

    def _skip_trailing_macros(self) -> None:
        """Skip postfix annotations such as ``NS_UNAVAILABLE`` or ``NS_SWIFT_NAME(x)``."""
        while self._check(TokenType.IDENTIFIER):
            word = self._current().value
            if not (_MACRO_NAME.fullmatch(word) or word.startswith("__")):
                return
            self._advance()
            if self._check(TokenType.LPAREN):
                self._skip_group()

    def _skip_implementation(self) -> None:
        """Skip an ``@implementation`` block; implementations declare nothing for headers."""
        self._advance()
        while not self._at_end() and not self._check(TokenType.AT_END):
            if self._check(TokenType.LBRACE):
                self._skip_group_or_rest()
            else:
                self._advance()
        if self._check(TokenType.AT_END):
            self._advance()

    def _located(self, tok: Token) -> dict[str, object]:
        return {"source_file": self._source_file, "line": tok.line, "column": tok.column}

    def _diagnose(self, code: DiagnosticCode, message: str, tok: Token) -> None:
        self._result.diagnostics.append(Diagnostic(code=code, message=message, line=tok.line, column=tok.column))

    # ------------------------------------------------------------------
    # Preprocessor lines and module imports
    # ------------------------------------------------------------------

    def _parse_pragma(self) -> None:
        """Parse a dialect pragma; a malformed one is reported and ignored."""
        tok = self._advance()
        try:
            directives = parse_directive(
                tok.value,
                line=tok.line,
                column=tok.column,
                pragma_prefix=self._pragma_prefix,
                source_file=self._source_file,
            )
        except DialectMismatch as exc:
            self._result.diagnostics.append(
                Diagnostic(code=DiagnosticCode.DIALECT_MISMATCH, message=str(exc), line=exc.line, column=exc.column)
            )
            return
        self._result.directives.extend(directives)

    def _parse_include(self) -> None:
        """Parse ``#import "File.h"``, ``#import <Module/File.h>`` or ``#include ...``."""
        tok = self._advance()
        match = _INCLUDE_LINE.match(tok.value)
        if match is None:
            # Macro-expanded include targets cannot be resolved statically.
            return
        directive, opener, path = match.groups()
        self._result.includes.append(
            Include(
                path=path.strip(),
                is_system=opener == "<",
                uses_include=directive == "include",
                **self._located(tok),
            )
        )

    def _parse_at_keyword(self) -> None:
        """Parse ``@import Module;`` and skip any other @-statement."""
        tok = self._advance()
        if tok.value == "@import" and self._check(TokenType.IDENTIFIER):
            parts = [self._advance().value]
            while self._check(TokenType.PUNCTUATION) and self._current().value == ".":
                self._advance()
                parts.append(self._expect(TokenType.IDENTIFIER).value)
            self._expect(TokenType.SEMICOLON)
            self._result.includes.append(Include(path="/".join(parts), is_system=True, **self._located(tok)))
            return
        self._skip_statement_tail()

    # ------------------------------------------------------------------
    # Interfaces, categories and extensions
    # ------------------------------------------------------------------

    def _parse_interface(self) -> None:
        """Parse: @interface Name [<T>] [(Category)] [: Super] [<Protocols>]"""
        start = self._expect(TokenType.AT_INTERFACE)
        name = self._expect(TokenType.IDENTIFIER).value

        type_parameters: list[str] = []
        if self._check(TokenType.LANGLE) and self._angle_group_is_type_parameters():
            type_parameters = self._parse_type_parameters()

        category: str | None = None
        is_extension = False
        if self._check(TokenType.LPAREN):
            self._advance()
            if self._check(TokenType.IDENTIFIER):
                category = self._advance().value
            else:
                is_extension = True
            self._expect(TokenType.RPAREN)

        superclass: str | None = None
        superclass_arguments: list[TypeReference] = []
        protocols: list[str] = []
        if self._check(TokenType.COLON) and category is None and not is_extension:
            self._advance()
            superclass = self._expect(TokenType.IDENTIFIER).value
            if self._check(TokenType.LANGLE):
                followed_by_angle = self._next_group_is_followed_by_angle()
                items = self._parse_angle_list()
                generics, conformances = classify_angle_list(items, TypeContext.MENTION)
                if followed_by_angle or generics:
                    # Generic arguments of the superclass, e.g. `: NSArray<T> <NSCopying>`.
                    superclass_arguments = items
                else:
                    protocols = conformances

        if not protocols:
            protocols = self._parse_protocol_list()
        self._result.declarations.append(
            ClassDeclaration(
                name=name,
                type_parameters=type_parameters,
                superclass=superclass,
                superclass_arguments=superclass_arguments,
                protocols=protocols,
                category=category,
                is_extension=is_extension,
                **self._located(start),
            )
        )
        if self._check(TokenType.LBRACE):
            # Instance variable block.
            self._skip_group()
        if category is not None:
            self._context = f"{name} ({category})"
        elif is_extension:
            self._context = f"{name} ()"
        else:
            self._context = name

    def _angle_group_is_type_parameters(self) -> bool:
        """Return True if the ``<...>`` after a class name declares generic type parameters."""
        end = self._group_end()
        inner = self._tokens[self._pos + 1 : end]
        if any(tok.value in ("__covariant", "__contravariant") for tok in inner):
            return True
        following = self._tokens[end + 1] if end + 1 < len(self._tokens) else self._tokens[-1]
        return following.type in (TokenType.COLON, TokenType.LPAREN)

    def _parse_type_parameters(self) -> list[str]:
        """Consume ``<[variance] T, ...>`` and return the parameter names."""
        end = self._group_end()
        names: list[str] = []
        expect_name = True
        depth = 0
        for tok in self._tokens[self._pos + 1 : end]:
            if tok.type == TokenType.LANGLE:
                depth += 1
            elif tok.type == TokenType.RANGLE:
                depth -= 1
            elif depth > 0:
                continue
            elif tok.type == TokenType.COMMA:
                expect_name = True
            elif (
                expect_name
                and tok.type == TokenType.IDENTIFIER
                and tok.value not in ("__covariant", "__contravariant")
            ):
                names.append(tok.value)
                expect_name = False
        self._pos = end + 1
        return names

    def _next_group_is_followed_by_angle(self) -> bool:
        end = self._group_end()
        return end + 1 < len(self._tokens) and self._tokens[end + 1].type == TokenType.LANGLE

    def _group_end(self) -> int:
        start = self._pos
        self._skip_group()
        end = self._pos - 1
        self._pos = start
        return end

    def _parse_protocol_list(self) -> list[str]:
        """Parse an optional ``<P, Q>`` list in a declaration header."""
        if not self._check(TokenType.LANGLE):
            return []
        items = self._parse_angle_list()
        return [item.base_name for item in items]

    # ------------------------------------------------------------------
    # Protocols and forward declarations
    # ------------------------------------------------------------------

    def _parse_protocol(self) -> None:
        """Parse: @protocol Name [<Protocols>]  or  @protocol A, B;"""
        if self._peek(2).type in (TokenType.SEMICOLON, TokenType.COMMA):
            self._parse_forward(SymbolKind.PROTOCOL)
            return
        start = self._expect(TokenType.AT_PROTOCOL)
        name = self._expect(TokenType.IDENTIFIER).value
        inherited = self._parse_protocol_list()
        if self._check(TokenType.SEMICOLON):
            # `@protocol P <Q>;` is still only a promise.
            self._advance()
            self._result.declarations.append(
                ForwardDeclaration(symbol_kind=SymbolKind.PROTOCOL, names=[name], **self._located(start))
            )
            return
        self._result.declarations.append(
            ProtocolDeclaration(name=name, inherited_protocols=inherited, **self._located(start))
        )
        self._context = name

    def _parse_forward(self, symbol_kind: SymbolKind) -> None:
        """Parse: @class A [, B]* ;  or  @protocol A [, B]* ;"""
        start = self._advance()
        names = [self._parse_forward_name()]
        while self._check(TokenType.COMMA):
            self._advance()
            names.append(self._parse_forward_name())
        self._expect(TokenType.SEMICOLON)
        self._result.declarations.append(
            ForwardDeclaration(symbol_kind=symbol_kind, names=names, **self._located(start))
        )

    def _parse_forward_name(self) -> str:
        name = self._expect(TokenType.IDENTIFIER).value
        if self._check(TokenType.LANGLE):
            # `@class NSArray<ObjectType>;`
            self._skip_group()
        return name

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def _parse_property(self) -> None:
        """Parse: @property [(attr, attr=value, ...)] [IBOutlet] Type name;"""
        start = self._expect(TokenType.AT_PROPERTY)
        attributes: list[str] = []
        if self._check(TokenType.LPAREN):
            attributes = self._parse_property_attributes()

        markers: list[str] = []
        while self._check_word(*_PROPERTY_MARKERS):
            markers.append(self._advance().value)
            if self._check(TokenType.LPAREN):
                self._skip_group()

        prop_type, name = self.parse_type(TypeContext.MENTION)
        if name is None and self._check(TokenType.IDENTIFIER):
            name = self._advance().value
        while self._check(TokenType.COMMA):
            # `@property int a, b;` declares further names of the same type.
            self._advance()
            while self._check(TokenType.STAR):
                self._advance()
            self._expect(TokenType.IDENTIFIER)
        self._skip_trailing_macros()
        self._expect(TokenType.SEMICOLON)
        self._result.declarations.append(
            PropertyDeclaration(
                owner_context=self._context,
                attributes=attributes,
                markers=markers,
                type=prop_type,
                name=name,
                **self._located(start),
            )
        )

    def _parse_property_attributes(self) -> list[str]:
        """Parse ``(attr, getter=name, setter=name:)`` into normalized attribute strings."""
        self._expect(TokenType.LPAREN)
        attributes: list[str] = []
        while not self._check(TokenType.RPAREN):
            word = self._expect(TokenType.IDENTIFIER).value
            if self._check(TokenType.EQUALS):
                self._advance()
                value = self._expect(TokenType.IDENTIFIER).value
                if self._check(TokenType.COLON):
                    self._advance()
                    value += ":"
                attributes.append(f"{word}={value}")
            else:
                attributes.append(_PROPERTY_ATTRIBUTES.get(word, word))
            if not self._check(TokenType.RPAREN):
                self._expect(TokenType.COMMA)
        self._expect(TokenType.RPAREN)
        return attributes

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------

    def _parse_method(self) -> None:
        """Parse: (+|-) [(ReturnType)] label[:(Type)name [label:(Type)name]*] [, ...];"""
        start = self._advance()
        return_type: TypeReference | None = None
        if self._check(TokenType.LPAREN):
            return_type = self._parse_parenthesized_type()

        parts: list[SelectorPart] = []
        label = self._expect(TokenType.IDENTIFIER).value
        if not self._check(TokenType.COLON):
            parts.append(SelectorPart(label=label))
        else:
            parts.append(self._parse_selector_argument(label))
            while self._check(TokenType.COLON) or (
                self._check(TokenType.IDENTIFIER) and self._peek().type == TokenType.COLON
            ):
                next_label = self._advance().value if self._check(TokenType.IDENTIFIER) else ""
                parts.append(self._parse_selector_argument(next_label))

        is_variadic = False
        if self._check(TokenType.COMMA) and self._peek().type == TokenType.ELLIPSIS:
            self._advance()
            self._advance()
            is_variadic = True
        self._skip_trailing_macros()
        if self._check(TokenType.LBRACE):
            self._skip_group()
        else:
            self._expect(TokenType.SEMICOLON)

        self._result.declarations.append(
            MethodDeclaration(
                owner_context=self._context,
                is_class_method=start.type == TokenType.PLUS,
                return_type=return_type,
                selector_parts=parts,
                is_variadic=is_variadic,
                **self._located(start),
            )
        )

    def _parse_selector_argument(self, label: str) -> SelectorPart:
        """Parse ``:(Type)name`` following a selector label."""
        self._expect(TokenType.COLON)
        param_type: TypeReference | None = None
        if self._check(TokenType.LPAREN):
            param_type = self._parse_parenthesized_type()
        self._skip_attributes()
        param_name = self._expect(TokenType.IDENTIFIER).value
        return SelectorPart(label=label, parameter_name=param_name, type=param_type)

    def _parse_parenthesized_type(self) -> TypeReference:
        self._expect(TokenType.LPAREN)
        ref, _ = self.parse_type(TypeContext.MENTION)
        self._expect(TokenType.RPAREN)
        return ref

    # ------------------------------------------------------------------
    # Typedefs
    # ------------------------------------------------------------------

    def _parse_typedef(self) -> None:
        """Parse a typedef of a struct, an enum, an enum macro, a block or another type."""
        self._advance()  # consume 'typedef'
        if self._check_word("struct") and self._struct_or_enum_has_body():
            self._advance()
            self._parse_struct_body(typedef=True)
        elif self._check_word("enum") and self._struct_or_enum_has_body():
            self._advance()
            self._parse_enum_body(typedef=True)
        elif self._check_word(*_ENUM_MACROS):
            self._parse_enum_macro(typedef=True)
        else:
            self._parse_alias()

    def _struct_or_enum_has_body(self) -> bool:
        """Return True if the ``struct``/``enum`` keyword starts a definition with a body."""
        index = self._pos + 1
        if self._tokens[index].type == TokenType.IDENTIFIER:
            index += 1
        if self._tokens[index].type == TokenType.COLON:
            return True
        return self._tokens[index].type == TokenType.LBRACE

    def _parse_alias(self) -> None:
        """Parse: typedef Type Name;  or  typedef Return (^Name)(Params);"""
        start = self._current()
        aliased, block_name = self.parse_type(TypeContext.MENTION)
        if aliased.is_block:
            if block_name is None:
                tok = self._current()
                raise GrammarMismatch("Block typedef without a name", tok.line, tok.column)
            self._skip_trailing_macros()
            self._expect(TokenType.SEMICOLON)
            self._result.declarations.append(
                BlockTypeAlias(name=block_name, signature=aliased, **self._located(start))
            )
            return
        name = self._expect(TokenType.IDENTIFIER).value
        while self._check(TokenType.LBRACKET):
            self._skip_group()
        self._skip_trailing_macros()
        self._expect(TokenType.SEMICOLON)
        self._result.declarations.append(TypeAlias(name=name, aliased_type=aliased, **self._located(start)))

    # ------------------------------------------------------------------
    # Structs and enums
    # ------------------------------------------------------------------

    def _parse_struct_body(self, typedef: bool) -> None:
        """Parse the part after ``struct``: [Tag] [{ fields }] [Alias] ;"""
        start = self._tokens[self._pos - 1]
        tag: str | None = None
        if self._check(TokenType.IDENTIFIER):
            tag = self._advance().value
        if not self._check(TokenType.LBRACE):
            # `struct Tag;` or `struct Tag var;` introduce no definition.
            self._skip_statement_tail()
            return
        self._skip_group()
        alias = self._parse_trailing_alias() if typedef else None
        if not typedef:
            self._skip_statement_tail()
        self._result.declarations.append(
            StructDeclaration(
                name=tag if tag is not None else alias,
                is_anonymous=tag is None,
                alias_name=alias,
                **self._located(start),
            )
        )

    def _parse_enum_body(self, typedef: bool) -> None:
        """Parse the part after ``enum``: [Tag] [: RawType] [{ cases }] [Alias] ;"""
        start = self._tokens[self._pos - 1]
        tag: str | None = None
        if self._check(TokenType.IDENTIFIER):
            tag = self._advance().value
        raw_type: TypeReference | None = None
        if self._check(TokenType.COLON):
            self._advance()
            raw_type, _ = self.parse_type(TypeContext.MENTION)
        if self._check(TokenType.LBRACE):
            self._skip_group()
        alias = self._parse_trailing_alias() if typedef else None
        if not typedef:
            self._skip_statement_tail()
        self._result.declarations.append(
            EnumDeclaration(
                name=tag if tag is not None else alias,
                is_anonymous=tag is None,
                alias_name=alias,
                raw_type=raw_type,
                **self._located(start),
            )
        )

    def _parse_enum_macro(self, typedef: bool) -> None:
        """Parse: NS_ENUM(RawType, Name) { cases };  and the other enum macros."""
        start = self._current()
        macro = self._advance().value
        self._expect(TokenType.LPAREN)
        first, _ = self.parse_type(TypeContext.MENTION)
        name: str | None = None
        if self._check(TokenType.COMMA):
            self._advance()
            name = self._expect(TokenType.IDENTIFIER).value
        self._expect(TokenType.RPAREN)
        self._skip_trailing_macros()
        if self._check(TokenType.LBRACE):
            self._skip_group()
        self._skip_statement_tail()

        raw_type: TypeReference | None = first
        error_domain: str | None = None
        if macro == "NS_ERROR_ENUM":
            error_domain = first.base_name
            raw_type = TypeReference(base_name="NSInteger", line=first.line, column=first.column)
        self._result.declarations.append(
            EnumDeclaration(
                name=name,
                is_anonymous=name is None,
                raw_type=raw_type,
                is_options_style=_ENUM_MACROS[macro],
                macro=macro,
                error_domain=error_domain,
                **self._located(start),
            )
        )

    def _parse_trailing_alias(self) -> str | None:
        """Parse ``Alias [, *Other]* ;`` after a typedef'd body and return the first alias."""
        self._skip_trailing_macros()
        while self._check(TokenType.STAR):
            self._advance()
        alias: str | None = None
        if self._check(TokenType.IDENTIFIER):
            alias = self._advance().value
        self._skip_statement_tail()
        return alias

    def _skip_statement_tail(self) -> None:
        """Consume the remainder of a definition statement through its ';'."""
        while not self._at_end() and not self._check(TokenType.SEMICOLON):
            if self._starts_statement():
                # Definitions missing their ';' still end at the next statement.
                return
            self._advance()
        if self._check(TokenType.SEMICOLON):
            self._advance()
