"""Loads a symbol model exported by the upstream semantic analyzer as JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from .logging import get_logger
from .models import Def, Location, Macro, Primitive, Symbol, SymbolKind, VirtualFile

logger = get_logger("loader")


class ModelError(ValueError):
    """Raised when the symbol model payload is malformed."""


def load_program(path: Path) -> Symbol:
    """Read ``path`` and return the program symbol."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ModelError(f"{path.name} is not valid JSON: {exc}") from exc
    program = parse_program(data)
    logger.debug("Loaded symbol model from %s", path)
    return program


def parse_program(data: Any) -> Symbol:
    """Build the symbol tree from a decoded JSON payload.

    Named references (superclass, included modules, alias targets) are bound
    after the whole tree exists, so forward references are fine.
    """
    if not isinstance(data, dict):
        raise ModelError("Symbol model must be a JSON object")
    payload = dict(data.get("program", data))
    payload.setdefault("name", "Top Level")
    payload["kind"] = SymbolKind.PROGRAM.value

    pending: List[Callable[[Mapping[str, Symbol]], None]] = []
    index: Dict[str, Symbol] = {}
    program = _parse_symbol(payload, None, index, pending)
    for bind in pending:
        bind(index)
    return program


def _parse_symbol(
    data: Any,
    parent: Optional[Symbol],
    index: Dict[str, Symbol],
    pending: List[Callable[[Mapping[str, Symbol]], None]],
) -> Symbol:
    if not isinstance(data, dict):
        raise ModelError("Symbol entries must be objects")
    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise ModelError("Symbol entries require a name")
    kind = _parse_kind(data.get("kind", "class"), name)

    symbol = Symbol(
        name=name,
        kind=kind,
        locations=[_parse_location(entry) for entry in _as_list(data.get("locations"))],
        doc=_optional_str(data.get("doc")),
        parent=parent,
        value=_optional_str(data.get("value")),
    )
    symbol.class_methods = [_parse_def(entry) for entry in _as_list(data.get("class_methods"))]
    symbol.instance_methods = [
        _parse_def(entry) for entry in _as_list(data.get("instance_methods"))
    ]
    symbol.macros = [_parse_macro(entry) for entry in _as_list(data.get("macros"))]
    if not symbol.is_program:
        index[symbol.full_name] = symbol

    types = data.get("types") or {}
    if not isinstance(types, dict):
        raise ModelError(f"{name}: types must be an object")
    for child_name, child_data in types.items():
        if isinstance(child_data, dict):
            child_data = {"name": child_name, **child_data}
        child = _parse_symbol(child_data, symbol, index, pending)
        symbol.types[child.name] = child

    superclass = data.get("superclass")
    if superclass is not None:
        pending.append(
            lambda found: setattr(
                symbol,
                "superclass",
                _reference(found, superclass, SymbolKind.INHERITED_CLASS, symbol),
            )
        )
    modules = _as_list(data.get("included_modules"))
    if modules:
        pending.append(
            lambda found: symbol.ancestors.extend(
                _reference(found, entry, SymbolKind.INCLUDED_MODULE, symbol) for entry in modules
            )
        )
    target = data.get("target")
    if target is not None:
        pending.append(
            lambda found: setattr(symbol, "target", _lookup(found, _as_ref_name(target), symbol))
        )
    return symbol


def _reference(found: Mapping[str, Symbol], entry: Any, kind: SymbolKind, owner: Symbol) -> Symbol:
    if isinstance(entry, dict) and entry.get("args"):
        referenced = _lookup(found, _as_ref_name(entry), owner)
        return Symbol(
            name=referenced.name,
            kind=kind,
            target=referenced,
            type_args=[str(arg) for arg in _as_list(entry.get("args"))],
        )
    return _lookup(found, _as_ref_name(entry), owner)


def _lookup(found: Mapping[str, Symbol], name: str, owner: Symbol) -> Symbol:
    name = name.lstrip(":")
    scope: Optional[Symbol] = owner
    while scope is not None:
        prefix = scope.full_name
        candidate = f"{prefix}::{name}" if prefix else name
        if candidate in found:
            return found[candidate]
        scope = scope.parent
    raise ModelError(f"{owner.full_name or owner.name}: unknown reference {name!r}")


def _as_ref_name(entry: Any) -> str:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict) and isinstance(entry.get("ref"), str):
        return entry["ref"]
    raise ModelError(f"Invalid reference {entry!r}")


def _parse_kind(value: Any, name: str) -> SymbolKind:
    try:
        return SymbolKind(value)
    except ValueError as exc:
        raise ModelError(f"{name}: unknown kind {value!r}") from exc


def _parse_location(data: Any) -> Location:
    if not isinstance(data, dict):
        raise ModelError("Locations must be objects")
    line = _as_int(data.get("line"), 1)
    column = _as_int(data.get("column"), 1)
    virtual = data.get("virtual")
    if isinstance(virtual, dict):
        expanded = virtual.get("expanded_from")
        filename: Any = VirtualFile(
            source=str(virtual.get("source", "")),
            expanded_location=_parse_location(expanded) if expanded else None,
        )
    else:
        filename = _optional_str(data.get("filename"))
    return Location(filename=filename, line_number=line, column_number=column)


def _parse_def(data: Any) -> Def:
    if not isinstance(data, dict) or not isinstance(data.get("name"), str):
        raise ModelError("Method entries require a name")
    location = data.get("location")
    primitive = data.get("primitive")
    body = None
    if isinstance(primitive, dict):
        body = Primitive(name=str(primitive.get("name", "")), doc=_optional_str(primitive.get("doc")))
    return Def(
        name=data["name"],
        args=[str(arg) for arg in _as_list(data.get("args"))],
        location=_parse_location(location) if location else None,
        doc=_optional_str(data.get("doc")),
        body=body,
    )


def _parse_macro(data: Any) -> Macro:
    if not isinstance(data, dict) or not isinstance(data.get("name"), str):
        raise ModelError("Macro entries require a name")
    location = data.get("location")
    return Macro(
        name=data["name"],
        args=[str(arg) for arg in _as_list(data.get("args"))],
        location=_parse_location(location) if location else None,
        doc=_optional_str(data.get("doc")),
    )


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return default


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


__all__ = ["ModelError", "load_program", "parse_program"]
