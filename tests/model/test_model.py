# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""High-level tests demonstrating how to construct the LeanHeaders model."""

import pytest
from pydantic import TypeAdapter, ValidationError

from leanheaders.model import (
    BLOCK_MARKER,
    BlockParameter,
    ClassDeclaration,
    Counts,
    Declaration,
    Directive,
    DirectiveStrength,
    DirectiveTarget,
    FileAnalysis,
    ForwardDeclaration,
    ImportPlan,
    Include,
    MethodDeclaration,
    PropertyDeclaration,
    Qualifier,
    QualifierKind,
    Reference,
    ReferenceRole,
    SelectorPart,
    SymbolKind,
    TypeReference,
    UnsatisfiedNeed,
)


def test_plain_mention() -> None:
    """A plain type reference mentions only its base name."""
    ref = TypeReference(base_name="Foo", indirection_depth=1, line=3, column=5)
    assert ref.mentioned_names() == ["Foo"]
    mention = next(ref.iter_mentions())
    assert (mention.line, mention.column, mention.is_conformance) == (3, 5, False)


def test_generic_and_conformance_mentions() -> None:
    """Generic arguments and conformances are yielded after the base name."""
    ref = TypeReference(
        base_name="NSDictionary",
        generic_arguments=[
            TypeReference(base_name="NSString", indirection_depth=1),
            TypeReference(base_name="id", conformances=["Record"]),
        ],
    )
    mentions = list(ref.iter_mentions())
    assert [m.name for m in mentions] == ["NSDictionary", "NSString", "id", "Record"]
    assert [m.is_conformance for m in mentions] == [False, False, False, True]


def test_block_mentions_skip_the_marker() -> None:
    """A block contributes its return and parameter types, never the marker."""
    block = TypeReference(
        base_name=BLOCK_MARKER,
        is_block=True,
        block_return=TypeReference(base_name="void"),
        block_parameters=[
            BlockParameter(name="error", type=TypeReference(base_name="NSError", indirection_depth=1)),
            BlockParameter(type=TypeReference(base_name="BOOL")),
        ],
    )
    assert block.mentioned_names() == ["void", "NSError", "BOOL"]


def test_explicit_void_parameter_list() -> None:
    """An explicit ``(void)`` parameter list mentions ``void`` once more."""
    block = TypeReference(
        base_name=BLOCK_MARKER,
        is_block=True,
        block_return=TypeReference(base_name="Result"),
        explicit_void=True,
    )
    assert block.mentioned_names() == ["Result", "void"]


def test_qualifiers_bind_to_levels() -> None:
    ref = TypeReference(
        base_name="Foo",
        indirection_depth=2,
        qualifiers=[
            Qualifier(kind=QualifierKind.CONST, level=0),
            Qualifier(kind=QualifierKind.NULLABLE, level=2),
        ],
    )
    assert ref.qualifiers_at(0) == {QualifierKind.CONST}
    assert ref.qualifiers_at(1) == set()
    assert ref.qualifiers_at(2) == {QualifierKind.NULLABLE}


def test_unary_and_keyword_selectors() -> None:
    """Unary selectors have no colon; keyword selectors join every label with one."""
    unary = MethodDeclaration(selector_parts=[SelectorPart(label="count")])
    keyword = MethodDeclaration(
        selector_parts=[
            SelectorPart(label="initWith", parameter_name="obj"),
            SelectorPart(label="onClose", parameter_name="block"),
        ]
    )
    anonymous = MethodDeclaration(
        selector_parts=[SelectorPart(label="move", parameter_name="x"), SelectorPart(label="", parameter_name="y")]
    )
    assert unary.selector == "count"
    assert keyword.selector == "initWith:onClose:"
    assert anonymous.selector == "move::"


def test_property_accessors() -> None:
    prop = PropertyDeclaration(
        attributes=["nonatomic", "getter=isEnabled", "setter=setOn:"],
        type=TypeReference(base_name="BOOL"),
        name="enabled",
    )
    assert prop.getter == "isEnabled"
    assert prop.setter == "setOn:"
    assert PropertyDeclaration(type=TypeReference(base_name="BOOL")).getter is None


def test_category_flag() -> None:
    assert ClassDeclaration(name="Foo", category="Extras").is_category
    assert not ClassDeclaration(name="Foo", superclass="NSObject").is_category


def test_include_file_name() -> None:
    """The file name of an include is its last path component."""
    assert Include(path="UIKit/UIKit.h", is_system=True).file_name == "UIKit.h"
    assert Include(path="Foo.h").file_name == "Foo.h"


def test_directive_surface_form() -> None:
    directive = Directive(
        strength=DirectiveStrength.HAVE,
        target=DirectiveTarget.FORWARD,
        symbol_kind=SymbolKind.PROTOCOL,
        name="Delegate",
    )
    assert directive.describe() == "have forward protocol Delegate"


def test_implementing_references() -> None:
    """Superclass, extended-class and conformance references are implementing."""
    assert Reference(name="Base", role=ReferenceRole.SUPERCLASS).is_implementing
    assert Reference(name="Foo", role=ReferenceRole.EXTENDED_CLASS).is_implementing
    assert Reference(name="P", role=ReferenceRole.CONFORMANCE).is_implementing
    assert not Reference(name="Bar").is_implementing


def test_counts_tuple() -> None:
    assert Counts(declared=2, announced=4, referenced=0).as_tuple() == (2, 4, 0)
    assert Counts().as_tuple() == (0, 0, 0)


def test_declaration_union_is_discriminated() -> None:
    """Declarations are restored to their concrete class from the ``kind`` field."""
    adapter = TypeAdapter(Declaration)
    decl = adapter.validate_python({"kind": "forward", "symbol_kind": "class", "names": ["A", "B"]})
    assert isinstance(decl, ForwardDeclaration)
    assert decl.symbol_kind == SymbolKind.CLASS

    with pytest.raises(ValidationError):
        adapter.validate_python({"kind": "unknown", "name": "X"})


def test_file_analysis_json_round_trip() -> None:
    """A FileAnalysis survives a JSON round trip with its declarations intact."""
    analysis = FileAnalysis(
        file_id="Foo.h",
        declarations=[
            ClassDeclaration(name="Foo", superclass="NSObject", line=3, column=1),
            MethodDeclaration(
                owner_context="Foo",
                return_type=TypeReference(base_name="Bar", indirection_depth=1),
                selector_parts=[SelectorPart(label="bar")],
            ),
        ],
        counts=Counts(declared=1, referenced=2),
    )
    restored = FileAnalysis.model_validate_json(analysis.model_dump_json())
    assert restored == analysis
    assert isinstance(restored.declarations[1], MethodDeclaration)


def test_models_are_frozen() -> None:
    ref = TypeReference(base_name="Foo")
    with pytest.raises(ValidationError):
        ref.base_name = "Bar"  # type: ignore[misc]


def test_plan_satisfaction() -> None:
    assert ImportPlan(file_id="A.h").is_satisfied
    plan = ImportPlan(
        file_id="A.h",
        unsatisfied=[UnsatisfiedNeed(kind=SymbolKind.CLASS, name="Gone", strength=DirectiveTarget.IMPORT, needed_by="A.h")],
    )
    assert not plan.is_satisfied
