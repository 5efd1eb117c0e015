"""Symbol model consumed by the documentation generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union


class SymbolKind(str, Enum):
    """Kinds of symbols produced by the upstream semantic model."""

    PROGRAM = "program"
    MODULE = "module"
    CLASS = "class"
    STRUCT = "struct"
    ENUM = "enum"
    CONSTANT = "constant"
    ALIAS = "alias"
    LIB = "lib"
    INCLUDED_MODULE = "included_module"
    INHERITED_CLASS = "inherited_class"


REFERENCE_KINDS = frozenset({SymbolKind.INCLUDED_MODULE, SymbolKind.INHERITED_CLASS})


@dataclass(frozen=True)
class VirtualFile:
    """Source synthesised during expansion (for example by a macro)."""

    source: str
    expanded_location: Optional["Location"] = None


@dataclass(frozen=True)
class Location:
    """A position in a source file."""

    filename: Union[str, VirtualFile, None]
    line_number: int
    column_number: int = 1


@dataclass(eq=False)
class Primitive:
    """Compiler-internal body of a definition."""

    name: str
    doc: Optional[str] = None


@dataclass(eq=False)
class Def:
    """A method definition."""

    name: str
    args: List[str] = field(default_factory=list)
    location: Optional[Location] = None
    doc: Optional[str] = None
    body: Optional[Primitive] = None


@dataclass(eq=False)
class Macro:
    """A macro definition."""

    name: str
    args: List[str] = field(default_factory=list)
    location: Optional[Location] = None
    doc: Optional[str] = None


@dataclass(eq=False)
class Symbol:
    """A named entity of the program.

    Equality and hashing are by identity: two symbols may share a name in
    different scopes.
    """

    name: str
    kind: SymbolKind
    locations: List[Location] = field(default_factory=list)
    doc: Optional[str] = None
    types: Dict[str, "Symbol"] = field(default_factory=dict)
    class_methods: List[Def] = field(default_factory=list)
    instance_methods: List[Def] = field(default_factory=list)
    macros: List[Macro] = field(default_factory=list)
    parent: Optional["Symbol"] = None
    superclass: Optional["Symbol"] = None
    ancestors: List["Symbol"] = field(default_factory=list)
    target: Optional["Symbol"] = None
    type_args: List[str] = field(default_factory=list)
    value: Optional[str] = None

    def add(self, child: "Symbol") -> "Symbol":
        """Attach ``child`` under this container and return it."""
        child.parent = self
        self.types[child.name] = child
        return child

    @property
    def is_program(self) -> bool:
        return self.kind is SymbolKind.PROGRAM

    @property
    def is_reference(self) -> bool:
        return self.kind in REFERENCE_KINDS

    @property
    def full_name(self) -> str:
        names: List[str] = []
        current: Optional[Symbol] = self
        while current is not None and not current.is_program:
            names.append(current.name)
            current = current.parent
        return "::".join(reversed(names))


def resolve_reference(symbol: Symbol) -> Symbol:
    """Follow included-module and inherited-class references to their target."""
    while symbol.is_reference and symbol.target is not None:
        symbol = symbol.target
    return symbol


__all__ = [
    "Def",
    "Location",
    "Macro",
    "Primitive",
    "REFERENCE_KINDS",
    "Symbol",
    "SymbolKind",
    "VirtualFile",
    "resolve_reference",
]
