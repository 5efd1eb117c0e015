"""Builds the documentation node tree from the symbol model."""

from __future__ import annotations

from typing import Dict, List, Optional, Union, cast

from .filters import InclusionFilter
from .logging import get_logger
from .models import Symbol, SymbolKind, resolve_reference
from .nodes import ConstantNode, MacroNode, MethodNode, TypeNode

_SKIPPED_SUBTYPE_KINDS = frozenset({SymbolKind.CONSTANT, SymbolKind.LIB})

Node = Union[TypeNode, ConstantNode]


class SymbolTreeCollector:
    """Collects included children of containers into memoised nodes.

    Nodes are keyed by ``id(symbol)``: a symbol reached through several paths
    (reopened definitions, include or inherit references) yields the same
    node every time within one run.
    """

    def __init__(self, inclusion_filter: InclusionFilter) -> None:
        self.filter = inclusion_filter
        self._nodes: Dict[int, Node] = {}
        self.logger = get_logger("collector")

    def type(self, symbol: Symbol) -> TypeNode:
        node = self._nodes.get(id(symbol))
        if node is None:
            node = TypeNode(self, symbol)
            self._nodes[id(symbol)] = node
        return cast(TypeNode, node)

    def constant(self, symbol: Symbol) -> ConstantNode:
        node = self._nodes.get(id(symbol))
        if node is None:
            owner = self.type(symbol.parent) if symbol.parent is not None else None
            if owner is None:
                raise ValueError(f"Constant {symbol.name} has no enclosing type")
            node = ConstantNode(owner, symbol)
            self._nodes[id(symbol)] = node
        return cast(ConstantNode, node)

    def reference(self, symbol: Symbol | None) -> Optional[TypeNode]:
        """Node for ``symbol`` (following references) when it has its own page.

        A page exists only when the symbol and every enclosing namespace are
        collected as subtypes, so each level must pass the same checks.
        """
        if symbol is None:
            return None
        target = resolve_reference(symbol)
        current: Optional[Symbol] = target
        while current is not None and not current.is_program:
            if current.kind in _SKIPPED_SUBTYPE_KINDS:
                return None
            if not self.filter.must_include(current):
                return None
            current = current.parent
        return self.type(target)

    def collect_subtypes(self, parent: Symbol) -> List[TypeNode]:
        types: List[TypeNode] = []
        for symbol in parent.types.values():
            if symbol.kind in _SKIPPED_SUBTYPE_KINDS:
                continue
            if self.filter.must_include(symbol):
                types.append(self.type(resolve_reference(symbol)))
        return self._sorted(parent, types)

    def collect_constants(self, parent: Symbol) -> List[ConstantNode]:
        constants: List[ConstantNode] = []
        for symbol in parent.types.values():
            if symbol.kind is SymbolKind.CONSTANT and self.filter.must_include(symbol):
                constants.append(self.constant(symbol))
        return self._sorted(parent, constants)

    def collect_methods(self, owner: TypeNode, *, class_methods: bool) -> List[MethodNode]:
        definitions = owner.symbol.class_methods if class_methods else owner.symbol.instance_methods
        methods = [
            MethodNode(owner, definition, class_methods)
            for definition in definitions
            if self.filter.must_include(definition)
        ]
        return sorted(methods, key=lambda method: method.name.lower())

    def collect_macros(self, owner: TypeNode) -> List[MacroNode]:
        macros = [
            MacroNode(owner, a_macro)
            for a_macro in owner.symbol.macros
            if self.filter.must_include(a_macro)
        ]
        return sorted(macros, key=lambda a_macro: a_macro.name.lower())

    def all_types(self, roots: List[TypeNode]) -> List[TypeNode]:
        """Flatten ``roots`` and their subtypes in pre-order."""
        flat: List[TypeNode] = []
        stack = list(reversed(roots))
        while stack:
            node = stack.pop()
            flat.append(node)
            if not node.is_program:
                stack.extend(reversed(node.types))
        return flat

    @staticmethod
    def _sorted(parent: Symbol, nodes: List) -> List:
        # Enum member order is meaningful.
        if parent.kind is SymbolKind.ENUM:
            return nodes
        return sorted(nodes, key=lambda node: node.name.lower())


__all__ = ["SymbolTreeCollector"]
