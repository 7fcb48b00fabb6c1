# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the pragma dialect parser."""

import pytest

from leanheaders.model.entities import DirectiveStrength, DirectiveTarget, SymbolKind
from leanheaders.parser.directives import DialectMismatch, parse_directive
from leanheaders.parser.lexer import UNIQUE_PRAGMA_PREFIX

# ###############
# Well-formed Directives
# ###############


class TestWellFormedDirectives:
    @pytest.mark.parametrize(
        ("text", "strength", "target", "kind", "name"),
        [
            (
                "#pragma LeanHeaders need import class RequiredBaseClass",
                DirectiveStrength.NEED,
                DirectiveTarget.IMPORT,
                SymbolKind.CLASS,
                "RequiredBaseClass",
            ),
            (
                "#pragma LeanHeaders need import protocol RequiredBaseProtocol",
                DirectiveStrength.NEED,
                DirectiveTarget.IMPORT,
                SymbolKind.PROTOCOL,
                "RequiredBaseProtocol",
            ),
            (
                "#pragma LeanHeaders need import file FileWithNeeded+Category.h",
                DirectiveStrength.NEED,
                DirectiveTarget.IMPORT,
                SymbolKind.FILE,
                "FileWithNeeded+Category.h",
            ),
            (
                "#pragma LeanHeaders need forward class RequiredCompositionClass",
                DirectiveStrength.NEED,
                DirectiveTarget.FORWARD,
                SymbolKind.CLASS,
                "RequiredCompositionClass",
            ),
            (
                "#pragma LeanHeaders have import protocol SuppliedBaseProtocol",
                DirectiveStrength.HAVE,
                DirectiveTarget.IMPORT,
                SymbolKind.PROTOCOL,
                "SuppliedBaseProtocol",
            ),
            (
                "#pragma LeanHeaders have forward protocol SuppliedCompositionProtocol",
                DirectiveStrength.HAVE,
                DirectiveTarget.FORWARD,
                SymbolKind.PROTOCOL,
                "SuppliedCompositionProtocol",
            ),
        ],
    )
    def test_single_name(
        self,
        text: str,
        strength: DirectiveStrength,
        target: DirectiveTarget,
        kind: SymbolKind,
        name: str,
    ) -> None:
        (directive,) = parse_directive(text, line=3, column=1, source_file="A.h")
        assert directive.strength == strength
        assert directive.target == target
        assert directive.symbol_kind == kind
        assert directive.name == name
        assert (directive.source_file, directive.line, directive.column) == ("A.h", 3, 1)

    def test_comma_separated_names(self) -> None:
        directives = parse_directive("#pragma LeanHeaders have forward class A, B,C")
        assert [d.name for d in directives] == ["A", "B", "C"]

    def test_file_name_with_path(self) -> None:
        (directive,) = parse_directive("#pragma LeanHeaders need import file Module/Sub-Dir/File.h")
        assert directive.name == "Module/Sub-Dir/File.h"

    def test_unique_prefix(self) -> None:
        text = f"#pragma {UNIQUE_PRAGMA_PREFIX} need import class Foo"
        (directive,) = parse_directive(text, pragma_prefix=UNIQUE_PRAGMA_PREFIX)
        assert directive.name == "Foo"

    def test_describe_round_trips_surface_form(self) -> None:
        (directive,) = parse_directive("#pragma LeanHeaders need forward protocol Foo")
        assert directive.describe() == "need forward protocol Foo"


# ###############
# Malformed Directives
# ###############


class TestMalformedDirectives:
    @pytest.mark.parametrize(
        ("text", "fragment"),
        [
            ("#pragma LeanHeaders need import class", "Expected '<need|have>"),
            ("#pragma LeanHeaders want import class Foo", "'need' or 'have'"),
            ("#pragma LeanHeaders need include class Foo", "'import' or 'forward'"),
            ("#pragma LeanHeaders need import struct Foo", "'class', 'protocol' or 'file'"),
            ("#pragma LeanHeaders need forward file Foo.h", "cannot be forward declared"),
            ("#pragma LeanHeaders need import class Foo Bar", "Invalid class name"),
            ("#pragma LeanHeaders need import class A,,B", "Invalid class name"),
            ("#pragma LeanHeaders", "Expected '<need|have>"),
        ],
    )
    def test_malformed_line_raises(self, text: str, fragment: str) -> None:
        with pytest.raises(DialectMismatch) as info:
            parse_directive(text, line=7, column=1)
        assert fragment in str(info.value)
        assert info.value.line == 7
        assert str(info.value).startswith("Line 7, column 1:")

    def test_other_prefix_raises(self) -> None:
        with pytest.raises(DialectMismatch):
            parse_directive("#pragma Other need import class Foo")
