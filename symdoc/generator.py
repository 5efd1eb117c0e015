"""Writes the static documentation site."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .collector import SymbolTreeCollector
from .config import DEFAULT_README_CANDIDATES
from .filters import InclusionFilter, PrimitiveDoc, primitive_own_doc
from .git.repository import RepositoryContext
from .locations import LocationResolver
from .logging import get_logger
from .models import Symbol
from .nodes import TypeNode
from .rendering.markdown import DocRenderer


class Generator:
    """Generates one HTML page per documented type, mirroring the symbol tree.

    ``base_dir`` is the project root used both to relativise source locations
    and to find the readme; it defaults to the current working directory.
    """

    def __init__(
        self,
        program: Symbol,
        included_dirs: Sequence[str],
        output_dir: Path | str = "./doc",
        *,
        base_dir: str | None = None,
        repository: RepositoryContext | None = None,
        readme_candidates: Sequence[str] = DEFAULT_README_CANDIDATES,
        templates_dir: Path | None = None,
        primitive_doc: PrimitiveDoc = primitive_own_doc,
        renderer: DocRenderer | None = None,
    ) -> None:
        self.program = program
        self.dir = Path(output_dir)
        self.base_dir = base_dir if base_dir is not None else os.getcwd()
        self.repository = repository
        self.readme_candidates = list(readme_candidates)
        self.filter = InclusionFilter(included_dirs, repository, primitive_doc=primitive_doc)
        self.collector = SymbolTreeCollector(self.filter)
        self.locations = LocationResolver(self.base_dir, repository)
        self.renderer = renderer or DocRenderer()
        self.logger = get_logger("generator")
        self._env = self._create_env(templates_dir)

    def run(self) -> List[TypeNode]:
        """Generate the whole site and return the top-level entries."""
        self.logger.info("Generating documentation into %s", self.dir)
        self.dir.mkdir(parents=True, exist_ok=True)

        types = self.collector.collect_subtypes(self.program)

        program_type = self.collector.type(self.program)
        if program_type.class_methods:
            types.insert(0, program_type)

        self.generate_docs(program_type, types)
        self.logger.info("Documented %d top-level entries", len(types))
        return types

    def generate_docs(self, program_type: TypeNode, types: List[TypeNode]) -> None:
        self.copy_files()
        self.generate_list(types)
        self.generate_types_docs(types, self.dir)
        self.generate_readme(program_type)

    def generate_readme(self, program_type: TypeNode) -> None:
        body = ""
        filename = self._find_readme()
        if filename is not None:
            self.logger.debug("Rendering readme from %s", filename)
            body = filename.read_text(encoding="utf-8")

        rendered = self.renderer.doc_text(program_type, body)
        self.write_template(self.dir / "main.html", "main.html.j2", body=rendered)

    def copy_files(self) -> None:
        (self.dir / "css").mkdir(parents=True, exist_ok=True)
        (self.dir / "js").mkdir(parents=True, exist_ok=True)

        self.write_template(self.dir / "index.html", "index.html.j2")
        self.write_template(self.dir / "css" / "style.css", "style.css.j2")
        self.write_template(self.dir / "js" / "type.js", "type.js.j2")

    def generate_list(self, types: List[TypeNode]) -> None:
        self.write_template(self.dir / "list.html", "list.html.j2", types=types)

    def generate_types_docs(self, types: List[TypeNode], directory: Path) -> None:
        for type_node in types:
            if type_node.is_program:
                filename = directory / "toplevel.html"
            else:
                filename = directory / f"{type_node.name}.html"

            self.write_template(filename, "type.html.j2", type=type_node)

            if type_node.is_program:
                continue

            subtypes = type_node.types
            if subtypes:
                dirname = directory / type_node.name
                dirname.mkdir(parents=True, exist_ok=True)
                self.generate_types_docs(subtypes, dirname)

    def write_template(self, filename: Path, template_name: str, **context: object) -> None:
        template = self._env.get_template(template_name)
        filename.write_text(template.render(**context), encoding="utf-8")
        self.logger.debug("Wrote %s", filename)

    def _find_readme(self) -> Optional[Path]:
        for candidate in self.readme_candidates:
            path = Path(self.base_dir) / candidate
            if path.is_file():
                return path
        return None

    def _create_env(self, templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=select_autoescape(["html.j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        env.globals.update(
            summary=self.renderer.summary,
            doc=self.renderer.doc,
            source_link=self.locations.source_link,
            relative_locations=self.locations.relative_locations,
            repository=self.repository,
        )
        return env


__all__ = ["Generator"]
