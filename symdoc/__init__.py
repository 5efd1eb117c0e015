"""Static HTML documentation sites from a program's symbol model."""

from .collector import SymbolTreeCollector
from .filters import InclusionFilter
from .generator import Generator
from .locations import LocationResolver, RelativeLocation, ResolvedLocation
from .rendering import DocRenderer

__all__ = [
    "DocRenderer",
    "Generator",
    "InclusionFilter",
    "LocationResolver",
    "RelativeLocation",
    "ResolvedLocation",
    "SymbolTreeCollector",
]
