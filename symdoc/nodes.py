"""Documentation nodes wrapping symbols of the program model."""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING, List, Optional, Sequence

from .models import Def, Location, Macro, Symbol, SymbolKind, resolve_reference

if TYPE_CHECKING:  # pragma: no cover
    from .collector import SymbolTreeCollector

TOPLEVEL_PAGE = "toplevel.html"


class TypeNode:
    """Documentation node for one type or namespace symbol.

    Created by :class:`SymbolTreeCollector` only, so that each symbol maps to
    exactly one node for the whole run. Child collections are computed on
    first access and cached.
    """

    def __init__(self, collector: "SymbolTreeCollector", symbol: Symbol) -> None:
        self._collector = collector
        self.symbol = symbol

    def __repr__(self) -> str:
        return f"TypeNode({self.full_name or 'Top Level'!r})"

    @property
    def name(self) -> str:
        return self.symbol.name

    @property
    def full_name(self) -> str:
        return self.symbol.full_name

    @property
    def kind(self) -> str:
        return self.symbol.kind.value

    @property
    def doc(self) -> Optional[str]:
        return self.symbol.doc

    @property
    def locations(self) -> List[Location]:
        return self.symbol.locations

    @property
    def is_program(self) -> bool:
        return self.symbol.is_program

    @property
    def is_enum(self) -> bool:
        return self.symbol.kind is SymbolKind.ENUM

    @property
    def parent(self) -> Optional["TypeNode"]:
        if self.symbol.parent is None:
            return None
        return self._collector.type(self.symbol.parent)

    @cached_property
    def types(self) -> List["TypeNode"]:
        return self._collector.collect_subtypes(self.symbol)

    @cached_property
    def constants(self) -> List["ConstantNode"]:
        return self._collector.collect_constants(self.symbol)

    @cached_property
    def class_methods(self) -> List["MethodNode"]:
        return self._collector.collect_methods(self, class_methods=True)

    @cached_property
    def instance_methods(self) -> List["MethodNode"]:
        return self._collector.collect_methods(self, class_methods=False)

    @cached_property
    def macros(self) -> List["MacroNode"]:
        return self._collector.collect_macros(self)

    @cached_property
    def superclass(self) -> Optional["TypeNode"]:
        return self._collector.reference(self.symbol.superclass)

    @cached_property
    def included_modules(self) -> List["TypeNode"]:
        modules: List[TypeNode] = []
        for ancestor in self.symbol.ancestors:
            target = resolve_reference(ancestor)
            if target.kind is not SymbolKind.MODULE:
                continue
            node = self._collector.reference(ancestor)
            if node is not None:
                modules.append(node)
        return modules

    # ------------------------------------------------------------------
    # Paths

    @property
    def dir_names(self) -> List[str]:
        """Names of the enclosing namespaces, outermost first."""
        names: List[str] = []
        current = self.symbol.parent
        while current is not None and not current.is_program:
            names.append(current.name)
            current = current.parent
        names.reverse()
        return names

    @property
    def path(self) -> str:
        """Page path relative to the output directory."""
        if self.is_program:
            return TOPLEVEL_PAGE
        return "/".join(self.dir_names + [f"{self.name}.html"])

    def path_to_root(self) -> str:
        return "../" * len(self.dir_names)

    def href_to(self, other: "TypeNode", anchor: str | None = None) -> str:
        """Relative link from this node's page to ``other``'s page."""
        if other is self:
            href = self.path.rsplit("/", 1)[-1]
        else:
            href = f"{self.path_to_root()}{other.path}"
        if anchor:
            href = f"{href}#{anchor}"
        return href

    # ------------------------------------------------------------------
    # Cross-reference lookups

    def lookup_type(self, names: Sequence[str]) -> Optional["TypeNode"]:
        """Find an included type by relative path, searching enclosing scopes."""
        if not names:
            return None
        scope: Optional[Symbol] = self.symbol
        while scope is not None:
            found = _descend(scope, names)
            if found is not None:
                return self._collector.reference(found)
            scope = scope.parent
        return None

    def lookup_method(self, name: str, *, class_method: bool | None = None) -> Optional["MethodNode"]:
        candidates: List[MethodNode] = []
        if class_method is not True:
            candidates.extend(self.instance_methods)
        if class_method is not False:
            candidates.extend(self.class_methods)
        for method in candidates:
            if method.name == name:
                return method
        return None

    def lookup_macro(self, name: str) -> Optional["MacroNode"]:
        for a_macro in self.macros:
            if a_macro.name == name:
                return a_macro
        return None


def _descend(scope: Symbol, names: Sequence[str]) -> Optional[Symbol]:
    current: Optional[Symbol] = scope
    for name in names:
        if current is None:
            return None
        current = current.types.get(name)
    return current


class ConstantNode:
    """Documentation node for a constant or enum member."""

    def __init__(self, owner: TypeNode, symbol: Symbol) -> None:
        self.owner = owner
        self.symbol = symbol

    @property
    def name(self) -> str:
        return self.symbol.name

    @property
    def value(self) -> Optional[str]:
        return self.symbol.value

    @property
    def doc(self) -> Optional[str]:
        return self.symbol.doc

    @property
    def anchor(self) -> str:
        return self.name

    @property
    def context(self) -> TypeNode:
        return self.owner


class MethodNode:
    """A class-level or instance-level method of a type."""

    def __init__(self, owner: TypeNode, definition: Def, class_method: bool) -> None:
        self.owner = owner
        self.definition = definition
        self.class_method = class_method

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def args(self) -> List[str]:
        return self.definition.args

    @property
    def doc(self) -> Optional[str]:
        return self.definition.doc

    @property
    def location(self) -> Optional[Location]:
        return self.definition.location

    @property
    def kind(self) -> str:
        return "class" if self.class_method else "instance"

    @property
    def prefix(self) -> str:
        return "." if self.class_method else "#"

    @property
    def signature(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}({', '.join(self.args)})"

    @property
    def anchor(self) -> str:
        return f"{self.name}({','.join(self.args)})-{self.kind}-method"

    @property
    def context(self) -> TypeNode:
        return self.owner


class MacroNode:
    """A macro defined on a type."""

    def __init__(self, owner: TypeNode, macro: Macro) -> None:
        self.owner = owner
        self.macro = macro

    @property
    def name(self) -> str:
        return self.macro.name

    @property
    def args(self) -> List[str]:
        return self.macro.args

    @property
    def doc(self) -> Optional[str]:
        return self.macro.doc

    @property
    def location(self) -> Optional[Location]:
        return self.macro.location

    @property
    def signature(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}({', '.join(self.args)})"

    @property
    def anchor(self) -> str:
        return f"{self.name}({','.join(self.args)})-macro"

    @property
    def context(self) -> TypeNode:
        return self.owner


__all__ = ["ConstantNode", "MacroNode", "MethodNode", "TOPLEVEL_PAGE", "TypeNode"]
