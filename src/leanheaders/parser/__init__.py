# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tokenizer, type grammar, declaration parser and pragma dialect parser for headers."""

from leanheaders.parser.declarations import ParsedHeader, parse_declarations
from leanheaders.parser.directives import DialectMismatch, parse_directive
from leanheaders.parser.lexer import (
    DEFAULT_PRAGMA_PREFIX,
    UNIQUE_PRAGMA_PREFIX,
    Token,
    TokenType,
    read_balanced,
    tokenize,
)
from leanheaders.parser.type_grammar import (
    GrammarMismatch,
    TypeContext,
    classify_angle_list,
    match_type_reference,
    parse_declarator,
    parse_type_reference,
)

__all__ = [
    "DEFAULT_PRAGMA_PREFIX",
    "UNIQUE_PRAGMA_PREFIX",
    "DialectMismatch",
    "GrammarMismatch",
    "ParsedHeader",
    "Token",
    "TokenType",
    "TypeContext",
    "classify_angle_list",
    "match_type_reference",
    "parse_declarations",
    "parse_declarator",
    "parse_directive",
    "parse_type_reference",
    "read_balanced",
    "tokenize",
]
