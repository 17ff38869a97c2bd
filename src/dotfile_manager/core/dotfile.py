"""Dotfile entries and path resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Type, Union

from .config import Config, home_dir
from .errors import DotfilesReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dotfile:
    """A dotfile as declared in a dotfiles list.

    Attributes:
        repo: The dotfile's path, relative to the dotfile repository.
        installed: The dotfile's path, relative to the home directory. If left
            unspecified, this is the same as ``repo``.
    """

    repo: Path
    installed: Optional[Path] = None

    @property
    def installed_path(self) -> Path:
        """Return the installed path, defaulting to ``repo``."""
        return self.installed if self.installed is not None else self.repo


@dataclass(frozen=True)
class PathSpec:
    """A dotfile declared as a bare path."""

    path: Path

    def to_dotfile(self) -> Dotfile:
        return Dotfile(repo=self.path)


@dataclass(frozen=True)
class ObjectSpec:
    """A dotfile declared as ``{repo = ..., installed = ...}``."""

    repo: Path
    installed: Optional[Path] = None

    def to_dotfile(self) -> Dotfile:
        return Dotfile(repo=self.repo, installed=self.installed)


DotfileSpec = Union[PathSpec, ObjectSpec]


def parse_spec(value: Any, error: Type[DotfilesReadError]) -> DotfileSpec:
    """Parse one entry of a dotfiles list.

    Strings become a ``PathSpec`` and mappings become an ``ObjectSpec``; keys
    other than ``repo`` and ``installed`` are ignored.

    Args:
        value: The decoded entry.
        error: Error type to raise when the entry has the wrong shape.

    Raises:
        DotfilesReadError: An instance of ``error`` for malformed entries.
    """
    if isinstance(value, str):
        return PathSpec(Path(value))
    if isinstance(value, dict):
        repo = value.get("repo")
        if not isinstance(repo, str):
            raise error(f"dotfile entry is missing a string 'repo': {value!r}")
        installed = value.get("installed")
        if installed is not None and not isinstance(installed, str):
            raise error(f"dotfile 'installed' must be a string: {value!r}")
        return ObjectSpec(
            repo=Path(repo),
            installed=Path(installed) if installed is not None else None,
        )
    raise error(f"dotfile entry must be a path or a table: {value!r}")


def make_absolute(base: Path, target: Path) -> Path:
    """Resolve ``target`` to an absolute path, relative to ``base``.

    The result is canonicalized when possible. Paths that do not exist yet
    (or otherwise fail to resolve) are returned joined but unresolved.
    """
    target = Path(target)
    path = target if target.is_absolute() else Path(base) / target
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        return path


@dataclass(frozen=True)
class AbsDotfile:
    """A ``Dotfile`` resolved to absolute paths.

    Attributes:
        repo: The dotfile's path in the dotfile repository.
        installed: The dotfile's path in the user environment.
    """

    repo: Path
    installed: Path

    @classmethod
    def from_dotfile(
        cls, dotfile: Dotfile, config: Config, home: Optional[Path] = None
    ) -> AbsDotfile:
        """Resolve ``dotfile`` against the repository and home directory.

        Raises:
            NoHomeError: If ``home`` is not given and cannot be determined.
        """
        if home is None:
            home = home_dir()
        abs_dotfile = cls(
            repo=make_absolute(config.dotfile_repo, dotfile.repo),
            installed=make_absolute(home, dotfile.installed_path),
        )
        logger.debug("Resolved %s -> %s", dotfile, abs_dotfile)
        return abs_dotfile
