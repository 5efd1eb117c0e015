"""Decides which symbols are eligible for documentation."""

from __future__ import annotations

from typing import Callable, Optional, Sequence, Union

from .git.repository import RepositoryContext
from .models import Def, Location, Macro, Primitive, Symbol, VirtualFile
from .nodes import ConstantNode, MacroNode, MethodNode, TypeNode

NODOC_MARKERS = frozenset({":nodoc:", "nodoc"})

PrimitiveDoc = Callable[[Def, Primitive], Optional[str]]

Documentable = Union[
    TypeNode, ConstantNode, MethodNode, MacroNode, Symbol, Def, Macro, Location, None
]


def primitive_own_doc(a_def: Def, body: Primitive) -> Optional[str]:
    """Default primitive doc lookup: the text synthesised on the primitive itself."""
    return body.doc


def nodoc(doc: Optional[str]) -> bool:
    """True when ``doc`` is exactly a suppression marker once trimmed."""
    if doc is None:
        return False
    return doc.strip() in NODOC_MARKERS


class InclusionFilter:
    """Applies suppression markers and included source roots to symbols.

    Definitions backed by a compiler primitive get special treatment only when
    the repository context says the standard library itself is being
    documented: they are then included unless the primitive's own doc is a
    suppression marker, whatever their location.
    """

    def __init__(
        self,
        included_dirs: Sequence[str],
        repository: RepositoryContext | None = None,
        *,
        primitive_doc: PrimitiveDoc = primitive_own_doc,
    ) -> None:
        self.included_dirs = tuple(included_dirs)
        self.standard_library = bool(repository and repository.is_standard_library)
        self._primitive_doc = primitive_doc

    def must_include(self, entity: Documentable) -> bool:
        if entity is None:
            return False
        if isinstance(entity, (TypeNode, ConstantNode)):
            return self.must_include(entity.symbol)
        if isinstance(entity, MethodNode):
            return self.must_include(entity.definition)
        if isinstance(entity, MacroNode):
            return self.must_include(entity.macro)
        if isinstance(entity, Symbol):
            return self._include_symbol(entity)
        if isinstance(entity, Def):
            return self._include_def(entity)
        if isinstance(entity, Macro):
            if nodoc(entity.doc):
                return False
            return self.must_include(entity.location)
        if isinstance(entity, Location):
            return self._include_location(entity)
        raise TypeError(f"Cannot decide inclusion for {type(entity).__name__}")

    def _include_symbol(self, symbol: Symbol) -> bool:
        if symbol.is_reference:
            return self.must_include(symbol.target)
        if nodoc(symbol.doc):
            return False
        # Namespaces can be reopened across files; one qualifying site is enough.
        return any(self._include_location(location) for location in symbol.locations)

    def _include_def(self, a_def: Def) -> bool:
        body = a_def.body
        if self.standard_library and isinstance(body, Primitive):
            return not nodoc(self._primitive_doc(a_def, body))
        if nodoc(a_def.doc):
            return False
        return self.must_include(a_def.location)

    def _include_location(self, location: Location) -> bool:
        filename = location.filename
        if isinstance(filename, str):
            return any(filename.startswith(root) for root in self.included_dirs)
        if isinstance(filename, VirtualFile):
            return self.must_include(filename.expanded_location)
        return False


__all__ = ["InclusionFilter", "NODOC_MARKERS", "nodoc", "primitive_own_doc"]
