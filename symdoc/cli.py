"""CLI entrypoints for symdoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, RepositoryConfig, SymdocConfig, load_config
from .generator import Generator
from .git.repository import RepositoryContext, RepositoryResolver
from .loader import ModelError, load_program
from .logging import configure_logging, get_logger


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="symdoc",
        description="Generate a static HTML documentation site from a symbol model.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate the documentation site.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "model",
        help="Path to the symbol model JSON exported by the semantic analyzer.",
    )
    generate_parser.add_argument(
        "--project-root",
        default=".",
        help="Project root holding .symdoc.yml and the readme (defaults to current directory).",
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output directory (defaults to output_dir from .symdoc.yml, or doc/).",
    )
    generate_parser.add_argument(
        "--include",
        action="append",
        default=None,
        metavar="DIR",
        help="Source directory to document; repeatable. Overrides included_dirs.",
    )
    generate_parser.add_argument(
        "--no-repository",
        action="store_true",
        help="Do not derive source links from the git remote.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for symdoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))
    logger = get_logger("cli")

    if args.command == "generate":
        root = Path(args.project_root).resolve()
        try:
            config = load_config(root)
        except ConfigError as exc:
            parser.exit(1, f"{exc}\n")
        _apply_overrides(config, args)

        try:
            program = load_program(Path(args.model))
        except (ModelError, OSError) as exc:
            parser.exit(1, f"Cannot load symbol model: {exc}\n")

        repository = None
        if config.repository.enabled and not args.no_repository:
            repository = _resolve_repository(config.root, config.repository)
        else:
            logger.debug("Source links disabled")

        generator = Generator(
            program,
            config.included_roots(),
            config.output_dir,
            base_dir=str(config.root),
            repository=repository,
            readme_candidates=config.readme_candidates,
            templates_dir=config.templates_dir,
        )
        try:
            types = generator.run()
        except OSError as exc:
            parser.exit(1, f"symdoc generate failed: {exc}\n")
        print(f"Documented {len(types)} top-level entries in {_relativize(config.output_dir)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _apply_overrides(config: SymdocConfig, args: argparse.Namespace) -> None:
    if args.output:
        config.output_dir = Path(args.output).resolve()
    if args.include:
        config.included_dirs = list(args.include)


def _resolve_repository(root: Path, settings: RepositoryConfig) -> RepositoryContext | None:
    resolver = RepositoryResolver(
        url_template=settings.url_template,
        hosts=settings.hosts,
        standard_library=settings.standard_library,
    )
    return resolver.resolve(root)


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
