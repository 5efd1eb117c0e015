"""Maps source locations to project-relative filenames and pinned URLs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

from .git.repository import RepositoryContext
from .models import Location, Symbol, VirtualFile

SRC_SEP = f"src{os.sep}"


@dataclass(frozen=True)
class ResolvedLocation:
    """A location inside the project, with its browsable URL when known."""

    filename: str
    line_number: int
    url: Optional[str] = None


@dataclass(frozen=True)
class RelativeLocation:
    """A declaration site as listed on a type page."""

    filename: str
    url: Optional[str] = None


class LocationResolver:
    """Resolves locations against the project root and repository context."""

    def __init__(self, base_dir: str, repository: RepositoryContext | None = None) -> None:
        self.base_dir = base_dir
        self.repository = repository

    def relative_location(self, location: Location | None) -> Optional[Location]:
        """Return the real location behind ``location``, expanding virtual files."""
        if location is None:
            return None
        if isinstance(location.filename, VirtualFile):
            return location.filename.expanded_location
        return location

    def relative_filename(self, location: Location) -> Optional[str]:
        """Strip the project root from the filename; None for external files."""
        filename = location.filename
        if not isinstance(filename, str):
            return None
        if not filename.startswith(self.base_dir):
            return None
        return filename[len(self.base_dir):]

    def resolve(self, location: Location | None) -> Optional[ResolvedLocation]:
        real = self.relative_location(location)
        if real is None:
            return None
        filename = self.relative_filename(real)
        if filename is None:
            return None
        url = None
        if self.repository is not None:
            url = f"{self.repository.base_url}{filename}#L{real.line_number}"
        return ResolvedLocation(filename=filename, line_number=real.line_number, url=url)

    def source_link(self, location: Location | None) -> Optional[str]:
        resolved = self.resolve(location)
        return resolved.url if resolved else None

    def relative_locations(self, symbol: Symbol) -> List[RelativeLocation]:
        """List every declaration site of ``symbol`` in discovery order."""
        base_url = self.repository.base_url if self.repository else None
        locations: List[RelativeLocation] = []
        for location in symbol.locations:
            resolved = self.resolve(location)
            if resolved is None:
                continue

            url = f"{base_url}{resolved.filename}" if base_url else None

            filename = resolved.filename
            if filename.startswith(os.sep):
                filename = filename[1:]
            if filename.startswith(SRC_SEP):
                filename = filename[len(SRC_SEP):]

            locations.append(RelativeLocation(filename=filename, url=url))
        return locations


__all__ = ["LocationResolver", "RelativeLocation", "ResolvedLocation"]
