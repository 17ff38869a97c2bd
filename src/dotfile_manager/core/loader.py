"""Dotfile list discovery and parsing.

A dotfile list lives next to the dotfiles themselves, at
``<dotfile_repo>/<dotfiles_basename>.<ext>``. Several formats are supported and
checked in a fixed priority order; the first file that exists is used:

1. Nix (``.nix``), evaluated with ``nix-instantiate``
2. JSON (``.json``)
3. TOML (``.toml``)
4. YAML (``.yaml``, then ``.yml``)

The static formats share one document shape::

    {
        "$schema": "optional, ignored",
        "dotfiles": [".vimrc", {"repo": "gitconfig", "installed": ".gitconfig"}]
    }

Nix files evaluate to the bare list, without the wrapper.

Example:
    ```python
    from dotfile_manager.core.config import load_config
    from dotfile_manager.core.loader import load_dotfiles

    config = load_config()
    for dotfile in load_dotfiles(config):
        print(dotfile.repo, "->", dotfile.installed_path)
    ```
"""

from __future__ import annotations

import json
import logging
import tomllib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any, List, Optional, Sequence, Tuple, Type

import yaml

from . import nix
from .config import Config
from .dotfile import Dotfile, parse_spec
from .errors import (
    DotfilesIOError,
    DotfilesReadError,
    JSONParseError,
    NoDotfilesFoundError,
    TOMLParseError,
    YAMLParseError,
)

logger = logging.getLogger(__name__)


def dotfiles_from_list(value: Any, error: Type[DotfilesReadError]) -> List[Dotfile]:
    """Convert a decoded list of dotfile entries into ``Dotfile`` objects."""
    if not isinstance(value, list):
        raise error(f"dotfiles must be a list, got {type(value).__name__}")
    return [parse_spec(entry, error).to_dotfile() for entry in value]


def dotfiles_from_document(document: Any, error: Type[DotfilesReadError]) -> List[Dotfile]:
    """Convert a decoded ``{"$schema": ..., "dotfiles": [...]}`` document."""
    if not isinstance(document, dict):
        raise error("dotfiles list must be a table with a 'dotfiles' key")
    if "dotfiles" not in document:
        raise error("missing field 'dotfiles'")
    schema = document.get("$schema")
    if schema is not None and not isinstance(schema, str):
        raise error("'$schema' must be a string")
    return dotfiles_from_list(document["dotfiles"], error)


class DotfileListSource(ABC):
    """A dotfiles list file format.

    Subclasses set ``name`` and ``extensions`` and implement ``read``.
    """

    name: str = ""
    extensions: Tuple[str, ...] = ()

    @abstractmethod
    def read(self, path: Path) -> List[Dotfile]:
        """Read the dotfiles list at ``path``."""

    def __repr__(self) -> str:
        """Return string representation."""
        return f"{type(self).__name__}()"

    def _open(self, path: Path) -> IO[str]:
        try:
            return open(path, "r", encoding="utf-8")
        except OSError as e:
            raise DotfilesIOError(f"couldn't open dotfiles list {path}: {e}") from e


class JSONSource(DotfileListSource):
    """Dotfiles lists in JSON."""

    name = "JSON"
    extensions = ("json",)

    def read(self, path: Path) -> List[Dotfile]:
        with self._open(path) as f:
            try:
                document = json.load(f)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise JSONParseError(f"failed to parse {path} as JSON: {e}") from e
        return dotfiles_from_document(document, JSONParseError)


class YAMLSource(DotfileListSource):
    """Dotfiles lists in YAML."""

    name = "YAML"
    extensions = ("yaml", "yml")

    def read(self, path: Path) -> List[Dotfile]:
        with self._open(path) as f:
            try:
                document = yaml.safe_load(f)
            except (yaml.YAMLError, UnicodeDecodeError) as e:
                raise YAMLParseError(f"failed to parse {path} as YAML: {e}") from e
        return dotfiles_from_document(document, YAMLParseError)


class TOMLSource(DotfileListSource):
    """Dotfiles lists in TOML."""

    name = "TOML"
    extensions = ("toml",)

    def read(self, path: Path) -> List[Dotfile]:
        with self._open(path) as f:
            try:
                text = f.read()
            except UnicodeDecodeError as e:
                raise TOMLParseError(f"failed to parse {path} as TOML: {e}") from e
            except OSError as e:
                raise DotfilesIOError(f"couldn't read dotfiles list {path}: {e}") from e
        try:
            document = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise TOMLParseError(f"failed to parse {path} as TOML: {e}") from e
        return dotfiles_from_document(document, TOMLParseError)


class NixSource(DotfileListSource):
    """Dotfiles lists written in the Nix expression language.

    The file must evaluate to a list of dotfile entries.
    """

    name = "Nix"
    extensions = ("nix",)

    def __init__(
        self,
        command: Sequence[str] = (nix.NIX_INSTANTIATE,),
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize source."""
        self.command = tuple(command)
        self.timeout = timeout

    def __repr__(self) -> str:
        """Return string representation."""
        return f"NixSource(command={self.command!r}, timeout={self.timeout!r})"

    def read(self, path: Path) -> List[Dotfile]:
        if not path.is_file():
            raise DotfilesIOError(f"couldn't open dotfiles list {path}")
        value = nix.eval_file(path, command=self.command, timeout=self.timeout)
        return dotfiles_from_list(value, JSONParseError)


def default_sources() -> List[DotfileListSource]:
    """Return the list sources in priority order."""
    return [NixSource(), JSONSource(), TOMLSource(), YAMLSource()]


def candidate_paths(
    config: Config, sources: Optional[Sequence[DotfileListSource]] = None
) -> List[Tuple[Path, DotfileListSource]]:
    """Return every possible dotfiles list path, in priority order."""
    if sources is None:
        sources = default_sources()
    candidates = []
    for source in sources:
        for extension in source.extensions:
            filename = config.dotfiles_basename.with_suffix(f".{extension}")
            candidates.append((config.dotfile_repo / filename, source))
    return candidates


def find_dotfiles_list(
    config: Config, sources: Optional[Sequence[DotfileListSource]] = None
) -> Tuple[Path, DotfileListSource]:
    """Return the first dotfiles list that exists, with its source.

    Raises:
        NoDotfilesFoundError: If no candidate file exists.
    """
    for path, source in candidate_paths(config, sources):
        logger.debug("Checking for %s dotfiles list at %s", source.name, path)
        if path.exists():
            return path, source
    raise NoDotfilesFoundError()


def load_dotfiles(
    config: Config, sources: Optional[Sequence[DotfileListSource]] = None
) -> List[Dotfile]:
    """Find and read the dotfiles list for ``config``.

    Args:
        config: The loaded configuration.
        sources: List sources in priority order; defaults to
            ``default_sources()``.

    Raises:
        DotfilesReadError: If no list exists or the list cannot be read.
    """
    path, source = find_dotfiles_list(config, sources)
    logger.debug("Reading %s dotfiles list %s", source.name, path)
    dotfiles = source.read(path)
    logger.debug("Found %d dotfiles in %s", len(dotfiles), path)
    return dotfiles
