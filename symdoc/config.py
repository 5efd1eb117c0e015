"""Configuration loading for symdoc (.symdoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".symdoc.yml"

DEFAULT_URL_TEMPLATE = "https://{host}/{user}/{project}/blob/{revision}"
DEFAULT_HOSTS = ("github.com", "gitlab.com")
DEFAULT_README_CANDIDATES = ("README.md", "Readme.md")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class RepositoryConfig:
    """How source links are derived from the checked-out repository."""

    enabled: bool = True
    url_template: str = DEFAULT_URL_TEMPLATE
    hosts: List[str] = field(default_factory=lambda: list(DEFAULT_HOSTS))
    standard_library: List[str] = field(default_factory=list)


@dataclass
class SymdocConfig:
    """Represents the settings defined in .symdoc.yml."""

    root: Path
    output_dir: Path
    included_dirs: List[str] = field(default_factory=list)
    readme_candidates: List[str] = field(default_factory=lambda: list(DEFAULT_README_CANDIDATES))
    templates_dir: Optional[Path] = None
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)

    def included_roots(self) -> List[str]:
        """Return the included directories as absolute path prefixes."""
        return [_absolute_prefix(self.root, entry) for entry in self.included_dirs]


def default_config(root: Path) -> SymdocConfig:
    root = root.resolve()
    return SymdocConfig(root=root, output_dir=root / "doc", included_dirs=["src"])


def load_config(config_path: Path) -> SymdocConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return default_config(root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = default_config(root)

    output_dir = _as_str(data.get("output_dir"))
    if output_dir:
        config.output_dir = root / output_dir

    if "included_dirs" in data:
        config.included_dirs = _as_str_list(data.get("included_dirs"))

    readme = _as_str_list(data.get("readme"))
    if readme:
        config.readme_candidates = readme

    templates_dir = _as_str(data.get("templates_dir"))
    if templates_dir:
        config.templates_dir = root / templates_dir

    repo_data = data.get("repository")
    if repo_data is not None and not isinstance(repo_data, dict):
        raise ConfigError("repository must be a mapping")
    if repo_data:
        repository = config.repository
        enabled = _as_bool(repo_data.get("enabled"))
        if enabled is not None:
            repository.enabled = enabled
        template = _as_str(repo_data.get("url_template"))
        if template:
            _validate_template(template)
            repository.url_template = template
        hosts = _as_str_list(repo_data.get("hosts"))
        if hosts:
            repository.hosts = hosts
        repository.standard_library = _as_str_list(repo_data.get("standard_library"))

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _validate_template(template: str) -> None:
    try:
        template.format(host="h", user="u", project="p", revision="r")
    except (KeyError, IndexError, ValueError) as exc:
        raise ConfigError(f"Invalid repository.url_template {template!r}: {exc}") from exc


def _absolute_prefix(root: Path, entry: str) -> str:
    path = Path(entry).expanduser()
    if not path.is_absolute():
        path = root / path
    return str(path)


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_URL_TEMPLATE",
    "RepositoryConfig",
    "SymdocConfig",
    "default_config",
    "load_config",
]
