"""Tests for symbol tree collection and documentation nodes."""

from __future__ import annotations

from symdoc.collector import SymbolTreeCollector
from symdoc.models import Symbol, SymbolKind
from tests._fixtures.model_builder import ModelBuilder


def test_subtypes_are_sorted_case_insensitively(
    model: ModelBuilder, collector: SymbolTreeCollector
) -> None:
    for name in ("Zebra", "apple", "Banana"):
        model.add(name)

    names = [node.name for node in collector.collect_subtypes(model.program)]
    assert names == ["apple", "Banana", "Zebra"]


def test_enum_members_keep_declaration_order(
    model: ModelBuilder, collector: SymbolTreeCollector
) -> None:
    color = model.add("Color", SymbolKind.ENUM)
    for index, name in enumerate(("Red", "Green", "Blue")):
        model.add(name, SymbolKind.CONSTANT, parent=color, value=str(index))

    names = [node.name for node in collector.collect_constants(color)]
    assert names == ["Red", "Green", "Blue"]
    assert [node.value for node in collector.collect_constants(color)] == ["0", "1", "2"]


def test_constants_of_non_enum_types_are_sorted(
    model: ModelBuilder, collector: SymbolTreeCollector
) -> None:
    config = model.add("Config", SymbolKind.MODULE)
    model.add("TIMEOUT", SymbolKind.CONSTANT, parent=config, value="30")
    model.add("RETRIES", SymbolKind.CONSTANT, parent=config, value="3")
    model.add("Nested", parent=config)

    assert [node.name for node in collector.collect_constants(config)] == ["RETRIES", "TIMEOUT"]
    assert [node.name for node in collector.collect_subtypes(config)] == ["Nested"]


def test_collection_returns_identical_nodes(
    model: ModelBuilder, collector: SymbolTreeCollector
) -> None:
    model.add("Foo")
    model.add("Bar")

    first = collector.collect_subtypes(model.program)
    second = collector.collect_subtypes(model.program)

    assert len(first) == 2
    for left, right in zip(first, second):
        assert left is right


def test_nodes_are_keyed_by_identity_not_name(
    model: ModelBuilder, collector: SymbolTreeCollector
) -> None:
    outer = model.add("Outer", SymbolKind.MODULE)
    top_node = model.add("Node")
    nested_node = model.add("Node", parent=outer)

    assert collector.type(top_node) is not collector.type(nested_node)
    assert collector.type(nested_node).full_name == "Outer::Node"
    assert collector.type(top_node) is collector.type(top_node)


def test_excluded_children_and_libs_are_skipped(
    model: ModelBuilder, collector: SymbolTreeCollector
) -> None:
    model.add("Shown")
    model.add("Hidden", doc=":nodoc:")
    model.add("External", file="lib/external.cr")
    model.add("LibC", SymbolKind.LIB)
    model.add("VERSION", SymbolKind.CONSTANT)

    assert [node.name for node in collector.collect_subtypes(model.program)] == ["Shown"]
    assert [node.name for node in collector.collect_constants(model.program)] == ["VERSION"]


def test_type_node_children_are_cached(model: ModelBuilder, collector: SymbolTreeCollector) -> None:
    foo = model.add("Foo")
    model.add("Inner", parent=foo)
    node = collector.type(foo)

    assert node.types is node.types
    assert [child.name for child in node.types] == ["Inner"]
    assert node.types[0].parent is node


def test_methods_and_macros_are_filtered_and_sorted(
    model: ModelBuilder, collector: SymbolTreeCollector
) -> None:
    foo = model.add("Foo")
    model.method(foo, "zeta")
    model.method(foo, "Alpha")
    model.method(foo, "hidden", doc=":nodoc:")
    model.method(foo, "build", class_method=True)
    model.macro(foo, "property")
    model.macro(foo, "getter", file="lib/macros.cr")
    node = collector.type(foo)

    assert [method.name for method in node.instance_methods] == ["Alpha", "zeta"]
    assert [method.name for method in node.class_methods] == ["build"]
    assert node.class_methods[0].prefix == "."
    assert [a_macro.name for a_macro in node.macros] == ["property"]


def test_superclass_and_included_modules_follow_references(
    model: ModelBuilder, collector: SymbolTreeCollector
) -> None:
    base = model.add("Base")
    comparable = model.add("Comparable", SymbolKind.MODULE)
    hidden = model.add("Internal", SymbolKind.MODULE, doc=":nodoc:")
    child = model.add("Child")
    child.superclass = Symbol(name="Base", kind=SymbolKind.INHERITED_CLASS, target=base)
    child.ancestors = [
        Symbol(name="Comparable", kind=SymbolKind.INCLUDED_MODULE, target=comparable),
        hidden,
    ]
    node = collector.type(child)

    assert node.superclass is collector.type(base)
    assert node.included_modules == [collector.type(comparable)]


def test_paths_and_relative_links(model: ModelBuilder, collector: SymbolTreeCollector) -> None:
    foo = model.add("Foo")
    inner = model.add("Inner", parent=foo)
    deep = model.add("Deep", parent=inner)
    bar = model.add("Bar")

    program_node = collector.type(model.program)
    deep_node = collector.type(deep)
    bar_node = collector.type(bar)

    assert program_node.path == "toplevel.html"
    assert deep_node.path == "Foo/Inner/Deep.html"
    assert deep_node.href_to(bar_node) == "../../Bar.html"
    assert bar_node.href_to(deep_node, "x") == "Foo/Inner/Deep.html#x"
    assert deep_node.href_to(deep_node) == "Deep.html"
    assert program_node.href_to(bar_node) == "Bar.html"


def test_lookup_type_searches_enclosing_scopes(
    model: ModelBuilder, collector: SymbolTreeCollector
) -> None:
    foo = model.add("Foo", SymbolKind.MODULE)
    inner = model.add("Inner", parent=foo)
    helper = model.add("Helper", parent=foo)
    model.add("Secret", doc=":nodoc:")
    model.add("LIMIT", SymbolKind.CONSTANT)
    node = collector.type(inner)

    assert node.lookup_type(["Helper"]) is collector.type(helper)
    assert node.lookup_type(["Foo", "Inner"]) is node
    assert node.lookup_type(["Secret"]) is None
    assert node.lookup_type(["LIMIT"]) is None
    assert node.lookup_type(["Missing"]) is None


def test_all_types_flattens_in_pre_order(
    model: ModelBuilder, collector: SymbolTreeCollector
) -> None:
    foo = model.add("Foo")
    model.add("Inner", parent=foo)
    model.add("Bar")

    roots = collector.collect_subtypes(model.program)
    assert [node.full_name for node in collector.all_types(roots)] == ["Bar", "Foo", "Foo::Inner"]


def test_reference_requires_every_enclosing_namespace_to_have_a_page(
    model: ModelBuilder, collector: SymbolTreeCollector
) -> None:
    hidden = model.add("Hidden", SymbolKind.MODULE, doc=":nodoc:")
    visible = model.add("Visible", parent=hidden)
    lib = model.add("LibC", SymbolKind.LIB)
    foo = model.add("Foo")
    foo.superclass = Symbol(name="Visible", kind=SymbolKind.INHERITED_CLASS, target=visible)
    shown = model.add("Shown", SymbolKind.MODULE)
    nested = model.add("Nested", parent=shown)
    node = collector.type(foo)

    assert collector.reference(visible) is None
    assert collector.reference(lib) is None
    assert collector.reference(nested) is collector.type(nested)
    assert node.superclass is None
    assert node.lookup_type(["Hidden", "Visible"]) is None
    assert node.lookup_type(["LibC"]) is None
    assert node.lookup_type(["Shown", "Nested"]) is collector.type(nested)
