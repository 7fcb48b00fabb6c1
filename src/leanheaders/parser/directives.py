# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Parser for the ``#pragma LeanHeaders`` directive dialect.

Accepted shapes::

    #pragma LeanHeaders <need|have> <import|forward> <class|protocol> Name[, Name]*
    #pragma LeanHeaders <need|have> import file FileName[, FileName]*

Every listed name yields one :class:`~leanheaders.model.entities.Directive`.
"""

import re
from typing import TypeVar

from leanheaders.model.entities import Directive, DirectiveStrength, DirectiveTarget, SymbolKind
from leanheaders.parser.lexer import DEFAULT_PRAGMA_PREFIX

# ###############
# Public Interface
# ###############


class DialectMismatch(Exception):
    """Raised when a dialect pragma line has an invalid keyword combination or shape.

    Attributes:
        line: 1-based line number of the pragma line.
        column: 1-based column number of the pragma line.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def parse_directive(
    text: str,
    *,
    line: int = 0,
    column: int = 0,
    pragma_prefix: str = DEFAULT_PRAGMA_PREFIX,
    source_file: str = "",
) -> list[Directive]:
    """Parse one dialect pragma line into its directives.

    Args:
        text: The full pragma line, starting with ``#``.
        line: Line number of the pragma, recorded on each directive.
        column: Column number of the pragma, recorded on each directive.
        pragma_prefix: The dialect word following ``#pragma``.
        source_file: Identifier of the file containing the line.

    Returns:
        One Directive per listed name, in source order.

    Raises:
        DialectMismatch: If the line is not a well-formed dialect directive.
    """
    match = re.match(rf"#\s*pragma\s+{re.escape(pragma_prefix)}(?:\s+(.*))?$", text.strip())
    if match is None:
        raise DialectMismatch(f"Not a '{pragma_prefix}' pragma: {text!r}", line, column)
    words = (match.group(1) or "").split(None, 3)
    if len(words) < 4:
        raise DialectMismatch(
            f"Expected '<need|have> <import|forward> <class|protocol|file> <name>', got {text!r}",
            line,
            column,
        )

    strength = _lookup(_STRENGTHS, words[0], "'need' or 'have'", line, column)
    target = _lookup(_TARGETS, words[1], "'import' or 'forward'", line, column)
    symbol_kind = _lookup(_KINDS, words[2], "'class', 'protocol' or 'file'", line, column)
    if symbol_kind == SymbolKind.FILE and target == DirectiveTarget.FORWARD:
        raise DialectMismatch("A file cannot be forward declared; use 'import file'", line, column)

    name_pattern = _FILE_NAME if symbol_kind == SymbolKind.FILE else _SYMBOL_NAME
    directives: list[Directive] = []
    for raw_name in words[3].split(","):
        name = raw_name.strip()
        if not name_pattern.fullmatch(name):
            raise DialectMismatch(f"Invalid {symbol_kind.value} name {name!r}", line, column)
        directives.append(
            Directive(
                strength=strength,
                target=target,
                symbol_kind=symbol_kind,
                name=name,
                source_file=source_file,
                line=line,
                column=column,
            )
        )
    return directives


# ################
# Implementation
# ################

_STRENGTHS: dict[str, DirectiveStrength] = {
    "need": DirectiveStrength.NEED,
    "have": DirectiveStrength.HAVE,
}

_TARGETS: dict[str, DirectiveTarget] = {
    "import": DirectiveTarget.IMPORT,
    "forward": DirectiveTarget.FORWARD,
}

_KINDS: dict[str, SymbolKind] = {
    "class": SymbolKind.CLASS,
    "protocol": SymbolKind.PROTOCOL,
    "file": SymbolKind.FILE,
}

_SYMBOL_NAME = re.compile(r"[A-Za-z_$][\w$]*")
_FILE_NAME = re.compile(r"[\w.+\-/]+")


_T = TypeVar("_T")


def _lookup(table: dict[str, _T], word: str, expected: str, line: int, column: int) -> _T:
    """Map a dialect keyword through *table*, raising DialectMismatch if unknown."""
    if word not in table:
        raise DialectMismatch(f"Expected {expected}, got {word!r}", line, column)
    return table[word]
