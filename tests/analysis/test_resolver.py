# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for cross-file dependency resolution."""

from __future__ import annotations

import logging

import pytest

from leanheaders.analysis.analyzer import analyze_file
from leanheaders.analysis.resolver import (
    Requirement,
    Supply,
    build_symbol_graph,
    requirements_of,
    resolve,
    resolve_file,
)
from leanheaders.model.entities import (
    DirectiveTarget,
    FileAnalysis,
    ImportPlan,
    PlannedSymbol,
    SymbolKind,
    UnsatisfiedNeed,
)
from leanheaders.workspace.config import LeanHeadersConfig

# ###############
# Test Helpers
# ###############

_STRICT = LeanHeadersConfig(inheritance_requires_import=True)


def _analyses(sources: dict[str, str]) -> list[FileAnalysis]:
    return [analyze_file(file_id, source) for file_id, source in sources.items()]


def _plans(sources: dict[str, str], config: LeanHeadersConfig | None = None) -> dict[str, ImportPlan]:
    """Analyze and resolve every file in *sources*."""
    return resolve(_analyses(sources), config=config)


def _plan(sources: dict[str, str], file_id: str, config: LeanHeadersConfig | None = None) -> ImportPlan:
    return _plans(sources, config)[file_id]


_FOO = "@interface Foo\n@end\n"


# ###############
# Minimal Strength
# ###############


class TestStrength:
    def test_type_mention_is_forward_sufficient(self) -> None:
        plan = _plan({"Foo.h": _FOO, "User.h": "@interface User\n- (Foo *)foo;\n@end"}, "User.h")
        assert plan.forward_symbols == [PlannedSymbol(kind=SymbolKind.CLASS, name="Foo")]
        assert plan.import_symbols == []
        assert plan.import_files == []
        assert plan.is_satisfied

    def test_superclass_is_forward_sufficient_by_default(self) -> None:
        plan = _plan({"Foo.h": _FOO, "Sub.h": "@interface Sub : Foo\n@end"}, "Sub.h")
        assert [p.name for p in plan.forward_symbols] == ["Foo"]
        assert plan.import_symbols == []

    def test_inheritance_requires_import_when_enabled(self) -> None:
        plan = _plan({"Foo.h": _FOO, "Sub.h": "@interface Sub : Foo\n@end"}, "Sub.h", _STRICT)
        assert plan.import_symbols == [PlannedSymbol(kind=SymbolKind.CLASS, name="Foo", source_file="Foo.h")]
        assert plan.import_files == ["Foo.h"]
        assert plan.forward_symbols == []

    def test_conformance_requires_import_when_enabled(self) -> None:
        sources = {"Proto.h": "@protocol Delegate\n@end", "Impl.h": "@interface Impl <Delegate>\n@end"}
        plan = _plan(sources, "Impl.h", _STRICT)
        assert plan.import_symbols == [PlannedSymbol(kind=SymbolKind.PROTOCOL, name="Delegate", source_file="Proto.h")]

    def test_need_import_forces_import(self) -> None:
        user = "#pragma LeanHeaders need import class Foo\n@interface User\n- (Foo *)foo;\n@end"
        plan = _plan({"Foo.h": _FOO, "User.h": user}, "User.h")
        assert [p.name for p in plan.import_symbols] == ["Foo"]
        assert plan.forward_symbols == []

    @pytest.mark.parametrize(
        ("definition", "kind"),
        [
            ("typedef struct { int x; } Point;", SymbolKind.STRUCT),
            ("typedef NS_ENUM(NSInteger, Point) { PointA };", SymbolKind.ENUM),
            ("typedef double Point;", SymbolKind.TYPEDEF),
        ],
    )
    def test_non_forward_declarable_kinds_escalate_to_import(self, definition: str, kind: SymbolKind) -> None:
        sources = {"Types.h": definition, "User.h": "@interface User\n- (Point)origin;\n@end"}
        plan = _plan(sources, "User.h")
        assert plan.import_symbols == [PlannedSymbol(kind=kind, name="Point", source_file="Types.h")]
        assert plan.import_files == ["Types.h"]

    def test_reference_and_need_merge_to_stronger(self) -> None:
        user = "@interface User\n- (Foo *)foo;\n@end\n#pragma LeanHeaders need import class Foo\n"
        analysis = analyze_file("User.h", user)
        (req,) = requirements_of(analysis)
        assert req.target == DirectiveTarget.IMPORT
        assert req.kind == SymbolKind.CLASS
        assert (req.line, req.column) == (2, 4)

    def test_kind_hint_prefers_matching_supplier(self) -> None:
        sources = {
            "Alias.h": "typedef int Thing;",
            "Proto.h": "@protocol Thing\n@end",
            "User.h": "@interface User <Thing>\n@end",
        }
        plan = _plan(sources, "User.h")
        assert plan.forward_symbols == [PlannedSymbol(kind=SymbolKind.PROTOCOL, name="Thing")]

    def test_kind_hint_falls_back_to_other_kinds(self) -> None:
        sources = {"Alias.h": "typedef int Thing;", "User.h": "@interface User <Thing>\n@end"}
        plan = _plan(sources, "User.h")
        assert plan.import_symbols == [PlannedSymbol(kind=SymbolKind.TYPEDEF, name="Thing", source_file="Alias.h")]

    @pytest.mark.parametrize("target", ["import", "forward"])
    def test_need_is_not_satisfied_by_other_kind(self, target: str) -> None:
        sources = {
            "A.h": f"#pragma LeanHeaders need {target} class Foo",
            "B.h": "@protocol Foo\n@end",
        }
        plan = _plan(sources, "A.h")
        assert plan.import_symbols == []
        assert plan.forward_symbols == []
        assert plan.unsatisfied == [
            UnsatisfiedNeed(
                kind=SymbolKind.CLASS,
                name="Foo",
                strength=DirectiveTarget(target),
                needed_by="A.h",
                line=1,
                column=1,
            )
        ]

    def test_need_kind_overrides_reference_hint(self) -> None:
        sources = {
            "A.h": "@interface A <Foo>\n@end\n#pragma LeanHeaders need forward class Foo",
            "B.h": "@protocol Foo\n@end",
        }
        plan = _plan(sources, "A.h")
        assert [(n.kind, n.name) for n in plan.unsatisfied] == [(SymbolKind.CLASS, "Foo")]


# ###############
# Builtins and Local Supply
# ###############


class TestLocalAndBuiltin:
    def test_builtin_names_need_nothing(self) -> None:
        source = (
            "@interface User\n"
            "- (int)count;\n"
            "- (unsigned long)size;\n"
            "- (BOOL)flag;\n"
            "- (instancetype)initWithId:(id)value selector:(SEL)sel;\n"
            "@property (nonatomic, copy) void (^handler)(void);\n"
            "@end\n"
        )
        analysis = analyze_file("User.h", source)
        assert requirements_of(analysis) == []

    def test_configured_builtins(self) -> None:
        config = LeanHeadersConfig(builtin_symbols={"NSObject", "NSString"})
        analysis = analyze_file("User.h", "@interface User : NSObject\n- (NSString *)name;\n@end")
        assert requirements_of(analysis, config=config) == []
        assert [r.name for r in requirements_of(analysis)] == ["NSObject", "NSString"]

    def test_need_satisfied_by_own_declaration(self) -> None:
        analysis = analyze_file("Foo.h", "#pragma LeanHeaders need import class Foo\n@interface Foo\n@end")
        assert requirements_of(analysis) == []

    def test_forward_need_satisfied_by_own_forward(self) -> None:
        analysis = analyze_file("User.h", "@class Foo;\n#pragma LeanHeaders need forward class Foo")
        assert requirements_of(analysis) == []

    def test_import_need_not_satisfied_by_own_forward(self) -> None:
        analysis = analyze_file("User.h", "@class Foo;\n#pragma LeanHeaders need import class Foo")
        assert requirements_of(analysis) == [
            Requirement("Foo", SymbolKind.CLASS, DirectiveTarget.IMPORT, 2, 1, exact_kind=True)
        ]

    def test_need_not_satisfied_by_own_declaration_of_other_kind(self) -> None:
        analysis = analyze_file("User.h", "@protocol Foo\n@end\n#pragma LeanHeaders need import class Foo")
        assert requirements_of(analysis) == [
            Requirement("Foo", SymbolKind.CLASS, DirectiveTarget.IMPORT, 3, 1, exact_kind=True)
        ]

    def test_own_forward_satisfies_implementing_reference_by_default(self) -> None:
        analysis = analyze_file("A.h", "@class B;\n@interface A : B\n@end")
        assert requirements_of(analysis) == []

    def test_own_forward_does_not_satisfy_inheritance_import(self) -> None:
        sources = {"A.h": "@class B;\n@interface A : B\n@end", "B.h": "@interface B\n@end"}
        plan = _plan(sources, "A.h", _STRICT)
        assert plan.import_symbols == [PlannedSymbol(kind=SymbolKind.CLASS, name="B", source_file="B.h")]
        assert plan.import_files == ["B.h"]
        assert plan.forward_symbols == []
        assert plan.is_satisfied

    def test_own_protocol_forward_does_not_satisfy_conformance_import(self) -> None:
        sources = {
            "Proto.h": "@protocol Delegate\n@end",
            "Impl.h": "@protocol Delegate;\n@interface Impl <Delegate>\n- (id<Delegate>)delegate;\n@end",
        }
        plan = _plan(sources, "Impl.h", _STRICT)
        assert plan.import_symbols == [PlannedSymbol(kind=SymbolKind.PROTOCOL, name="Delegate", source_file="Proto.h")]

    def test_requirements_are_ordered_by_name(self) -> None:
        analysis = analyze_file("User.h", "@interface User\n- (Zeta *)z:(Alpha *)a m:(Mid *)m;\n@end")
        assert [r.name for r in requirements_of(analysis)] == ["Alpha", "Mid", "Zeta"]


# ###############
# Have Directives
# ###############


class TestHaveDirectives:
    def test_have_import_supplies_without_source_file(self) -> None:
        sources = {
            "Shim.h": "#pragma LeanHeaders have import class Vendor",
            "User.h": "@interface User : Vendor\n@end",
        }
        plan = _plan(sources, "User.h", _STRICT)
        assert plan.import_symbols == [PlannedSymbol(kind=SymbolKind.CLASS, name="Vendor")]
        assert plan.import_files == []

    def test_declaration_preferred_over_have_import(self) -> None:
        sources = {
            "A.h": "#pragma LeanHeaders have import class Vendor",
            "Real.h": "@interface Vendor\n@end",
            "User.h": "@interface User : Vendor\n@end",
        }
        plan = _plan(sources, "User.h", _STRICT)
        assert plan.import_symbols == [PlannedSymbol(kind=SymbolKind.CLASS, name="Vendor", source_file="Real.h")]

    def test_have_forward_satisfies_only_forward_needs(self) -> None:
        sources = {
            "Shim.h": "#pragma LeanHeaders have forward class Vendor",
            "Weak.h": "@interface Weak\n- (Vendor *)vendor;\n@end",
            "Strong.h": "#pragma LeanHeaders need import class Vendor",
        }
        plans = _plans(sources)
        assert plans["Weak.h"].forward_symbols == [PlannedSymbol(kind=SymbolKind.CLASS, name="Vendor")]
        assert plans["Strong.h"].unsatisfied == [
            UnsatisfiedNeed(
                kind=SymbolKind.CLASS,
                name="Vendor",
                strength=DirectiveTarget.IMPORT,
                needed_by="Strong.h",
                line=1,
                column=1,
            )
        ]

    def test_forward_declaration_elsewhere_does_not_supply_import(self) -> None:
        sources = {"A.h": "@class Foo;", "B.h": "#pragma LeanHeaders need import class Foo"}
        plan = _plan(sources, "B.h")
        assert [n.name for n in plan.unsatisfied] == ["Foo"]


# ###############
# Unsatisfied Needs
# ###############


class TestUnsatisfied:
    def test_missing_reference_is_reported(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="leanheaders.analysis.resolver"):
            plan = _plan({"User.h": "@interface User\n- (Missing *)m;\n@end"}, "User.h")
        assert plan.unsatisfied == [
            UnsatisfiedNeed(name="Missing", strength=DirectiveTarget.FORWARD, needed_by="User.h", line=2, column=4)
        ]
        assert not plan.is_satisfied
        assert "Missing" in caplog.text

    def test_own_declarations_never_supply_other_files_only(self) -> None:
        plans = _plans({"Foo.h": _FOO + "@interface Bar : Foo\n@end"})
        assert plans["Foo.h"].forward_symbols == []
        assert plans["Foo.h"].is_satisfied


# ###############
# File Needs
# ###############


class TestFileNeeds:
    def test_file_need_matches_analyzed_file_by_name(self) -> None:
        sources = {
            "Sources/Foo+Cat.h": "@protocol Cat\n@end",
            "User.h": "#pragma LeanHeaders need import file Foo+Cat.h",
        }
        plan = _plan(sources, "User.h")
        assert plan.import_files == ["Sources/Foo+Cat.h"]
        assert plan.is_satisfied

    def test_file_need_satisfied_by_have_file(self) -> None:
        sources = {
            "Gen.h": "#pragma LeanHeaders have import file Generated.h",
            "User.h": "#pragma LeanHeaders need import file Generated.h",
        }
        assert _plan(sources, "User.h").import_files == ["Generated.h"]

    def test_own_have_file_satisfies_file_need(self) -> None:
        source = "#pragma LeanHeaders have import file Generated.h\n#pragma LeanHeaders need import file Generated.h"
        plan = _plan({"User.h": source}, "User.h")
        assert plan.import_files == []
        assert plan.is_satisfied

    def test_missing_file_is_unsatisfied(self) -> None:
        plan = _plan({"User.h": "#pragma LeanHeaders need import file Gone.h"}, "User.h")
        assert [(n.kind, n.name, n.strength) for n in plan.unsatisfied] == [
            (SymbolKind.FILE, "Gone.h", DirectiveTarget.IMPORT)
        ]


# ###############
# Redundancy
# ###############


class TestRedundancy:
    def test_unneeded_quoted_import_is_redundant(self) -> None:
        sources = {
            "Foo.h": _FOO,
            "Bar.h": "@interface Bar\n@end",
            "User.h": '#import "Foo.h"\n#import "Bar.h"\n#import <UIKit/UIKit.h>\n@interface User : Foo\n@end',
        }
        plan = _plan(sources, "User.h", _STRICT)
        assert plan.import_files == ["Foo.h"]
        assert plan.redundant_imports == ["Bar.h"]

    def test_import_replaceable_by_forward_is_redundant(self) -> None:
        sources = {"Foo.h": _FOO, "User.h": '#import "Foo.h"\n@interface User\n- (Foo *)foo;\n@end'}
        assert _plan(sources, "User.h").redundant_imports == ["Foo.h"]

    def test_unknown_import_is_not_judged(self) -> None:
        plan = _plan({"User.h": '#import "Elsewhere.h"\n@interface User\n@end'}, "User.h")
        assert plan.redundant_imports == []

    def test_unused_forward_is_redundant(self) -> None:
        source = "@class Used, Unused;\n@protocol Needed;\n#pragma LeanHeaders need forward protocol Needed\n"
        source += "@interface User\n- (Used *)u;\n@end\n"
        plan = _plan({"User.h": source}, "User.h")
        assert plan.redundant_forwards == ["Unused"]


# ###############
# Symbol Graph
# ###############


class TestSymbolGraph:
    def test_supplies_are_ordered_by_file(self) -> None:
        graph = build_symbol_graph(_analyses({"B.h": _FOO, "A.h": "@class Foo;"}))
        assert graph.file_ids == ["A.h", "B.h"]
        assert graph.supplies["Foo"] == [
            Supply(kind=SymbolKind.CLASS, name="Foo", file_id="A.h", target=DirectiveTarget.FORWARD),
            Supply(kind=SymbolKind.CLASS, name="Foo", file_id="B.h", target=DirectiveTarget.IMPORT),
        ]

    def test_suppliers_exclude_own_file(self) -> None:
        graph = build_symbol_graph(_analyses({"A.h": _FOO, "B.h": _FOO}))
        assert [s.file_id for s in graph.suppliers("Foo", exclude_file="A.h")] == ["B.h"]
        assert graph.suppliers("Nothing") == []

    def test_find_file_by_last_component(self) -> None:
        graph = build_symbol_graph(_analyses({"Module/Sub/Foo.h": _FOO}))
        assert graph.find_file("Foo.h") == "Module/Sub/Foo.h"
        assert graph.find_file("Sub/Foo.h") is None

    def test_resolution_is_independent_of_input_order(self) -> None:
        sources = {
            "Foo.h": _FOO,
            "Types.h": "typedef struct { int x; } Point;",
            "User.h": "@interface User : Foo\n- (Point)p;\n- (Gone *)g;\n@end",
        }
        forward = resolve(_analyses(sources))
        backward = resolve(list(reversed(_analyses(sources))))
        assert forward == backward
        assert list(forward) == ["Foo.h", "Types.h", "User.h"]

    def test_resolve_file_without_prebuilt_requirements(self) -> None:
        foo, user = _analyses({"Foo.h": _FOO, "User.h": "@interface User\n- (Foo *)f;\n@end"})
        graph = build_symbol_graph([foo])
        plan = resolve_file(user, graph)
        assert [p.name for p in plan.forward_symbols] == ["Foo"]
