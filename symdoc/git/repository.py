"""Repository detection for pinned source links."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

from ..config import DEFAULT_HOSTS, DEFAULT_URL_TEMPLATE
from ..logging import get_logger


@dataclass(frozen=True)
class RepositoryContext:
    """Remote coordinates of the documented project, computed once per run."""

    host: str
    user: str
    project: str
    revision: str
    base_url: str
    is_standard_library: bool = False

    @property
    def slug(self) -> str:
        return f"{self.user}/{self.project}"


class RepositoryResolver:
    """Derives a RepositoryContext from ``git remote -v`` and ``git rev-parse``."""

    def __init__(
        self,
        runner: Callable[..., str] | None = None,
        *,
        url_template: str = DEFAULT_URL_TEMPLATE,
        hosts: Sequence[str] = DEFAULT_HOSTS,
        standard_library: Sequence[str] = (),
    ) -> None:
        self._runner = runner or self._default_runner
        self._url_template = url_template
        self._hosts = tuple(hosts)
        self._standard_library = frozenset(standard_library)
        self.logger = get_logger("git")

    def resolve(self, repo_path: str | Path) -> Optional[RepositoryContext]:
        """Return the repository context, or None when no known remote exists."""
        repo = Path(repo_path)
        try:
            remotes = self._run(["git", "remote", "-v"], cwd=repo)
        except (OSError, subprocess.CalledProcessError) as exc:
            self.logger.debug("git remote lookup failed for %s: %s", repo, exc)
            return None

        match = self._match_remote(remotes)
        if match is None:
            self.logger.debug("No supported remote found in %s", repo)
            return None
        host, user, project = match

        try:
            revision = self._run(["git", "rev-parse", "HEAD"], cwd=repo).strip()
        except (OSError, subprocess.CalledProcessError) as exc:
            self.logger.debug("git rev-parse failed for %s: %s", repo, exc)
            return None
        if not revision:
            return None

        base_url = self._url_template.format(
            host=host, user=user, project=project, revision=revision
        )
        context = RepositoryContext(
            host=host,
            user=user,
            project=project,
            revision=revision,
            base_url=base_url,
            is_standard_library=f"{user}/{project}" in self._standard_library,
        )
        self.logger.info("Linking sources to %s", base_url)
        return context

    def _match_remote(self, remotes: str) -> Optional[tuple[str, str, str]]:
        if not self._hosts:
            return None
        hosts = "|".join(re.escape(host) for host in self._hosts)
        pattern = re.compile(rf"({hosts})(?::|/)([\w-]+)/([\w-]+)")
        for line in remotes.splitlines():
            match = pattern.search(line)
            if match:
                return match.group(1), match.group(2), match.group(3)
        return None

    def _run(self, args: Iterable[str], *, cwd: Path) -> str:
        return self._runner(args, cwd=cwd, capture_output=True)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


__all__ = ["RepositoryContext", "RepositoryResolver"]
