# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for Objective-C header files.

Converts raw header text into a flat sequence of classified tokens. The
scanner never fails: characters it does not recognize become UNKNOWN tokens
so that the parsers can decide whether to skip them. Comments and ordinary
preprocessor lines are dropped, while pragma lines of the tool's own dialect
and ``#import``/``#include`` lines are preserved as whole-line tokens.
"""

import enum
import re
from dataclasses import dataclass

# ###############
# Public Interface
# ###############

DEFAULT_PRAGMA_PREFIX = "LeanHeaders"
UNIQUE_PRAGMA_PREFIX = "ca.brach.LeanHeaders"


class TokenType(enum.Enum):
    """All token types produced by the header scanner."""

    # Objective-C @-keywords
    AT_INTERFACE = "@interface"
    AT_IMPLEMENTATION = "@implementation"
    AT_PROTOCOL = "@protocol"
    AT_CLASS = "@class"
    AT_PROPERTY = "@property"
    AT_END = "@end"
    AT_OPTIONAL = "@optional"
    AT_REQUIRED = "@required"
    AT_KEYWORD = "@keyword"

    # Delimiters
    LANGLE = "<"
    RANGLE = ">"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    # Punctuation
    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    STAR = "*"
    CARET = "^"
    EQUALS = "="
    PLUS = "+"
    MINUS = "-"
    ELLIPSIS = "..."
    AT = "@"
    PUNCTUATION = "PUNCTUATION"

    # Literals
    NUMBER = "NUMBER"
    STRING = "STRING"
    CHAR = "CHAR"

    # Identifiers
    IDENTIFIER = "IDENTIFIER"

    # Whole preprocessor lines
    PRAGMA = "PRAGMA"
    INCLUDE = "INCLUDE"

    # Unrecognized input
    UNKNOWN = "UNKNOWN"

    # End of file
    EOF = "EOF"


OPENING_DELIMITERS: dict[TokenType, TokenType] = {
    TokenType.LANGLE: TokenType.RANGLE,
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACE: TokenType.RBRACE,
    TokenType.LBRACKET: TokenType.RBRACKET,
}


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location and nesting context.

    Attributes:
        type: The kind of token.
        value: The raw text of the token. PRAGMA and INCLUDE tokens carry the
            full preprocessor line; STRING tokens carry the decoded contents.
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
        angle_depth: Number of unclosed ``<`` before this token.
        paren_depth: Number of unclosed ``(`` before this token.
        brace_depth: Number of unclosed ``{`` before this token.
    """

    type: TokenType
    value: str
    line: int
    column: int
    angle_depth: int = 0
    paren_depth: int = 0
    brace_depth: int = 0


def tokenize(source: str, *, pragma_prefix: str = DEFAULT_PRAGMA_PREFIX) -> list[Token]:
    """Tokenize header source text into a sequence of tokens.

    Returns a list of tokens. The final token is always an EOF token.
    Whitespace, comments and preprocessor lines other than dialect pragmas
    and import/include lines are consumed and not included in the output.

    Args:
        source: The full text of a header file.
        pragma_prefix: The word following ``#pragma`` that marks a line as
            belonging to the tool's directive dialect.

    Returns:
        A list of Token objects ending with a single EOF token.
    """
    return _Lexer(source, pragma_prefix).tokenize()


def matching_close(tokens: list[Token], start: int) -> int | None:
    """Return the index of the delimiter closing ``tokens[start]``.

    Only delimiters of the same kind as the opening one are counted, so the
    nesting of the other delimiter kinds is ignored.

    Args:
        tokens: A token sequence as produced by :func:`tokenize`.
        start: Index of an opening delimiter token.

    Returns:
        The index of the matching closing delimiter, or None if the group is
        never closed before EOF.

    Raises:
        ValueError: If ``tokens[start]`` is not an opening delimiter.
    """
    open_type = tokens[start].type
    if open_type not in OPENING_DELIMITERS:
        raise ValueError(f"Token {tokens[start].value!r} does not open a balanced group")
    close_type = OPENING_DELIMITERS[open_type]
    depth = 0
    for index in range(start, len(tokens)):
        tok_type = tokens[index].type
        if tok_type == open_type:
            depth += 1
        elif tok_type == close_type:
            depth -= 1
            if depth == 0:
                return index
    return None


def read_balanced(tokens: list[Token], start: int) -> list[Token]:
    """Return the balanced span starting at the opening delimiter ``tokens[start]``.

    The span includes both the opening and the matching closing delimiter.
    An unclosed group extends up to (but not including) the EOF token.
    """
    end = matching_close(tokens, start)
    if end is None:
        end = len(tokens) - 1 if tokens[-1].type == TokenType.EOF else len(tokens)
        return tokens[start:end]
    return tokens[start : end + 1]


# ################
# Implementation
# ################

_AT_KEYWORDS: dict[str, TokenType] = {
    "interface": TokenType.AT_INTERFACE,
    "implementation": TokenType.AT_IMPLEMENTATION,
    "protocol": TokenType.AT_PROTOCOL,
    "class": TokenType.AT_CLASS,
    "property": TokenType.AT_PROPERTY,
    "end": TokenType.AT_END,
    "optional": TokenType.AT_OPTIONAL,
    "required": TokenType.AT_REQUIRED,
}

_SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "<": TokenType.LANGLE,
    ">": TokenType.RANGLE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    "*": TokenType.STAR,
    "^": TokenType.CARET,
    "=": TokenType.EQUALS,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
}

_OTHER_PUNCTUATION = frozenset("&|!?~%/.#\\")

_INCLUDE_LINE = re.compile(r"#\s*(?:import|include)\b")


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str, pragma_prefix: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._column = 1
        self._tokens: list[Token] = []
        self._at_line_start = True
        self._pragma_line = re.compile(rf"#\s*pragma\s+{re.escape(pragma_prefix)}(?=\s|$)")
        self._angle = 0
        self._paren = 0
        self._brace = 0

    def tokenize(self) -> list[Token]:
        """Run the scanner and return all tokens including the terminal EOF."""
        while self._pos < len(self._source):
            self._skip_whitespace_and_comments()
            if self._pos >= len(self._source):
                break
            self._scan_token()
        self._tokens.append(
            Token(TokenType.EOF, "", self._line, self._column, self._angle, self._paren, self._brace)
        )
        return self._tokens

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self, offset: int = 1) -> str:
        """Return the character *offset* positions ahead, or '' past end of input."""
        if self._pos + offset < len(self._source):
            return self._source[self._pos + offset]
        return ""

    def _advance(self) -> str:
        """Consume the current character, update position tracking, and return it."""
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._column = 1
            self._at_line_start = True
        else:
            self._column += 1
        return ch

    # ------------------------------------------------------------------
    # Whitespace and comment skipping
    # ------------------------------------------------------------------

    def _skip_whitespace_and_comments(self) -> None:
        """Skip all whitespace and comment runs at the current position."""
        while self._pos < len(self._source):
            ch = self._current()
            if ch in " \t\r\n\f\v":
                self._advance()
            elif ch == "/" and self._peek() == "/":
                self._skip_line_comment()
            elif ch == "/" and self._peek() == "*":
                self._skip_block_comment()
            else:
                break

    def _skip_line_comment(self) -> None:
        """Consume from '//' through end-of-line (exclusive of the newline itself)."""
        while self._pos < len(self._source) and self._current() != "\n":
            self._advance()

    def _skip_block_comment(self) -> None:
        """Consume from '/*' through the matching '*/', or to end of input."""
        self._advance()  # /
        self._advance()  # *
        while self._pos < len(self._source):
            if self._current() == "*" and self._peek() == "/":
                self._advance()  # *
                self._advance()  # /
                return
            self._advance()

    # ------------------------------------------------------------------
    # Token emission and nesting bookkeeping
    # ------------------------------------------------------------------

    def _emit(self, token_type: TokenType, value: str, line: int, col: int) -> None:
        """Append a token, recording the nesting depths that enclose it."""
        if token_type == TokenType.RANGLE:
            self._angle = max(self._angle - 1, 0)
        elif token_type == TokenType.RPAREN:
            self._paren = max(self._paren - 1, 0)
        elif token_type == TokenType.RBRACE:
            self._brace = max(self._brace - 1, 0)
        self._tokens.append(Token(token_type, value, line, col, self._angle, self._paren, self._brace))
        if token_type == TokenType.LANGLE:
            self._angle += 1
        elif token_type == TokenType.LPAREN:
            self._paren += 1
        elif token_type == TokenType.LBRACE:
            self._brace += 1
        # Angle brackets never span statements; a stray '<<' must not leak.
        if token_type in (TokenType.SEMICOLON, TokenType.LBRACE, TokenType.RBRACE):
            self._angle = 0
        self._at_line_start = False

    # ------------------------------------------------------------------
    # Token scanning dispatcher
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        """Dispatch to the appropriate handler based on the current character."""
        ch = self._current()
        line = self._line
        col = self._column

        if ch == "#" and self._at_line_start:
            self._scan_preprocessor_line(line, col)
        elif ch in _SINGLE_CHAR_TOKENS:
            self._advance()
            self._emit(_SINGLE_CHAR_TOKENS[ch], ch, line, col)
        elif ch == "." and self._peek() == "." and self._peek(2) == ".":
            for _ in range(3):
                self._advance()
            self._emit(TokenType.ELLIPSIS, "...", line, col)
        elif ch == "@":
            self._scan_at(line, col)
        elif ch == '"':
            self._emit(TokenType.STRING, self._scan_quoted('"'), line, col)
        elif ch == "'":
            self._emit(TokenType.CHAR, self._scan_quoted("'"), line, col)
        elif ch.isdigit():
            self._scan_number(line, col)
        elif ch.isalpha() or ch in "_$":
            self._emit(TokenType.IDENTIFIER, self._scan_word(), line, col)
        elif ch in _OTHER_PUNCTUATION:
            self._advance()
            self._emit(TokenType.PUNCTUATION, ch, line, col)
        else:
            self._advance()
            self._emit(TokenType.UNKNOWN, ch, line, col)

    # ------------------------------------------------------------------
    # Preprocessor lines
    # ------------------------------------------------------------------

    def _scan_preprocessor_line(self, line: int, col: int) -> None:
        """Consume a whole preprocessor line, keeping only dialect and import lines."""
        chars: list[str] = []
        while self._pos < len(self._source) and self._current() != "\n":
            if self._current() == "\\" and self._peek() == "\n":
                self._advance()  # \
                self._advance()  # newline
                chars.append(" ")
            elif self._current() == "/" and self._peek() == "/":
                self._skip_line_comment()
            elif self._current() == "/" and self._peek() == "*":
                self._skip_block_comment()
                chars.append(" ")
            else:
                chars.append(self._advance())
        text = " ".join("".join(chars).split())
        if self._pragma_line.match(text):
            self._emit(TokenType.PRAGMA, text, line, col)
        elif _INCLUDE_LINE.match(text):
            self._emit(TokenType.INCLUDE, text, line, col)
        self._at_line_start = True

    # ------------------------------------------------------------------
    # Literal and word scanners
    # ------------------------------------------------------------------

    def _scan_at(self, line: int, col: int) -> None:
        """Scan an @-keyword, an Objective-C string literal, or a bare '@'."""
        self._advance()  # @
        nxt = self._current()
        if nxt.isalpha() or nxt == "_":
            word = self._scan_word()
            self._emit(_AT_KEYWORDS.get(word, TokenType.AT_KEYWORD), f"@{word}", line, col)
        elif nxt == '"':
            self._emit(TokenType.STRING, self._scan_quoted('"'), line, col)
        else:
            self._emit(TokenType.AT, "@", line, col)

    def _scan_quoted(self, quote: str) -> str:
        """Scan a quoted literal; an unterminated literal ends at the line break."""
        self._advance()  # opening quote
        chars: list[str] = []
        while self._pos < len(self._source):
            ch = self._current()
            if ch == quote:
                self._advance()
                break
            if ch == "\n":
                break
            if ch == "\\" and self._peek():
                chars.append(self._advance())
            chars.append(self._advance())
        return "".join(chars)

    def _scan_number(self, line: int, col: int) -> None:
        """Scan a numeric literal including hex digits, suffixes and decimals."""
        start = self._pos
        while self._pos < len(self._source) and (self._current().isalnum() or self._current() in "._"):
            self._advance()
        self._emit(TokenType.NUMBER, self._source[start : self._pos], line, col)

    def _scan_word(self) -> str:
        """Scan an identifier-shaped word and return its text."""
        start = self._pos
        while self._pos < len(self._source) and (self._current().isalnum() or self._current() in "_$"):
            self._advance()
        return self._source[start : self._pos]
