"""Symlink installation for dotfiles."""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Tuple

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm

from .config import Config
from .dotfile import AbsDotfile, Dotfile
from .errors import AlreadyExistsError, InstallIOError

logger = logging.getLogger(__name__)


class ConfirmPolicy(Protocol):
    """Decides whether an existing file may be overwritten."""

    def confirm(self, prompt: str) -> bool:
        """Return ``True`` to accept ``prompt``."""
        ...


class TerminalConfirm:
    """Ask the user on the terminal."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize policy."""
        self.console = console or Console()

    def confirm(self, prompt: str) -> bool:
        return Confirm.ask(escape(prompt), console=self.console, default=False)


class StaticConfirm:
    """Always give the same answer, and remember what was asked."""

    def __init__(self, answer: bool) -> None:
        """Initialize policy."""
        self.answer = answer
        self.prompts: List[str] = []

    def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.answer


class InstallState(str, Enum):
    """What is currently at a dotfile's installed path."""

    ABSENT = "absent"
    LINKED = "linked"
    CONFLICT = "conflict"


def _lexists(path: Path) -> bool:
    """Like ``Path.exists`` but true for dangling symlinks."""
    return path.is_symlink() or path.exists()


def _points_at(installed: Path, repo: Path) -> bool:
    """Check whether ``installed`` already refers to ``repo``."""
    if installed == repo:
        return True
    if not installed.is_symlink():
        return False
    target = Path(os.readlink(installed))
    if not target.is_absolute():
        target = installed.parent / target
    return os.path.normpath(target) == os.path.normpath(repo) or (
        target.exists() and repo.exists() and os.path.samefile(target, repo)
    )


def link(entry: AbsDotfile) -> None:
    """Create a symlink at ``entry.installed`` pointing at ``entry.repo``.

    Directory links are only distinguished from file links on Windows.

    Raises:
        InstallIOError: If the link cannot be created.
    """
    target_is_directory = os.name == "nt" and entry.repo.is_dir()
    try:
        os.symlink(entry.repo, entry.installed, target_is_directory=target_is_directory)
    except OSError as e:
        raise InstallIOError(
            f"couldn't link {entry.installed} to {entry.repo}: {e}", entry.installed
        ) from e
    logger.info("Linked %s -> %s", entry.installed, entry.repo)


def remove(path: Path) -> None:
    """Remove a file, symlink or empty directory.

    Non-empty directories are never removed.

    Raises:
        InstallIOError: If removal fails.
    """
    try:
        if path.is_dir() and not path.is_symlink():
            path.rmdir()
        else:
            path.unlink()
    except OSError as e:
        raise InstallIOError(f"couldn't remove {path}: {e}", path) from e
    logger.info("Removed %s", path)


class DotfileInstaller:
    """Resolves dotfiles and links them into place.

    Attributes:
        config: The loaded configuration.
        policy: Decides whether existing files may be overwritten.
        home: Home directory that installed paths are relative to.
    """

    def __init__(
        self, config: Config, policy: ConfirmPolicy, home: Optional[Path] = None
    ) -> None:
        """Initialize installer."""
        self.config = config
        self.policy = policy
        self.home = home

    def resolve(self, dotfile: Dotfile) -> AbsDotfile:
        """Resolve ``dotfile`` to absolute paths."""
        return AbsDotfile.from_dotfile(dotfile, self.config, home=self.home)

    def state(self, entry: AbsDotfile) -> InstallState:
        """Return what is currently at ``entry.installed``."""
        if not _lexists(entry.installed):
            return InstallState.ABSENT
        if _points_at(entry.installed, entry.repo):
            return InstallState.LINKED
        return InstallState.CONFLICT

    def plan(self, dotfiles: Iterable[Dotfile]) -> List[Tuple[AbsDotfile, InstallState]]:
        """Resolve every dotfile and report its state, without side effects."""
        plan = []
        for dotfile in dotfiles:
            entry = self.resolve(dotfile)
            plan.append((entry, self.state(entry)))
        return plan

    def install(self, entry: AbsDotfile) -> None:
        """Link a single dotfile, asking before replacing anything.

        Raises:
            AlreadyExistsError: If the installed path exists and overwriting
                was declined.
            InstallIOError: If removal or linking fails.
        """
        if _lexists(entry.installed):
            if entry.installed == entry.repo:
                # The installed path resolved through an existing link into the repo.
                logger.info("%s is already linked", entry.installed)
                return
            prompt = f"Overwrite {entry.installed} with a link to {entry.repo}?"
            if not self.policy.confirm(prompt):
                raise AlreadyExistsError(
                    f"link source already exists: {entry.installed}", entry.installed
                )
            remove(entry.installed)
        link(entry)

    def install_all(self, dotfiles: Iterable[Dotfile]) -> List[AbsDotfile]:
        """Resolve and install dotfiles in order, stopping at the first error.

        Returns:
            The installed entries.
        """
        installed = []
        for dotfile in dotfiles:
            entry = self.resolve(dotfile)
            self.install(entry)
            installed.append(entry)
        return installed
