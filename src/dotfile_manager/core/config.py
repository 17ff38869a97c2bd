"""Configuration management for dotfile-manager."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import click

from .errors import (
    ConfigIOError,
    ConfigNotFoundError,
    ConfigParseError,
    NoHomeError,
)

logger = logging.getLogger(__name__)

APP_NAME = "dotfile-manager"
CONFIG_FILE_NAME = "dotfile-manager.toml"
DEFAULT_DOTFILE_REPO_NAME = ".dotfiles"
DEFAULT_DOTFILES_BASENAME = "dotfiles"

CONFIG_KEYS = ("dotfile_repo", "dotfiles_basename")


def home_dir() -> Path:
    """Return the user's home directory.

    Raises:
        NoHomeError: If the home directory cannot be determined.
    """
    try:
        return Path.home()
    except (RuntimeError, KeyError) as e:
        raise NoHomeError() from e


def default_config_dir() -> Path:
    """Return the platform user-config directory for dotfile-manager."""
    return Path(click.get_app_dir(APP_NAME))


def default_config_file() -> Path:
    """Return the default location of the configuration file."""
    return default_config_dir() / CONFIG_FILE_NAME


@dataclass(frozen=True)
class Config:
    """Configuration for dotfile-manager.

    Attributes:
        dotfile_repo: The directory where dotfiles are stored. Always absolute
            once loaded; relative values in the config file are interpreted
            relative to the user's home directory.
        dotfiles_basename: Basename of the dotfiles list file, without an
            extension, relative to ``dotfile_repo``.
    """

    dotfile_repo: Path
    dotfiles_basename: Path

    @classmethod
    def default(cls, home: Optional[Path] = None) -> Config:
        """Return the default configuration (``~/.dotfiles``, ``dotfiles``)."""
        if home is None:
            home = home_dir()
        return cls(
            dotfile_repo=home / DEFAULT_DOTFILE_REPO_NAME,
            dotfiles_basename=Path(DEFAULT_DOTFILES_BASENAME),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any], home: Optional[Path] = None) -> Config:
        """Build a configuration from a parsed config document.

        Args:
            data: The parsed top-level table of the config file.
            home: Home directory to resolve relative paths against; looked up
                when needed if not given.

        Raises:
            ConfigParseError: On unknown keys or values of the wrong type.
            NoHomeError: If the home directory is needed but cannot be found.
        """
        unknown = sorted(set(data) - set(CONFIG_KEYS))
        if unknown:
            raise ConfigParseError(f"unknown config keys: {', '.join(unknown)}")
        for key in CONFIG_KEYS:
            if key in data and not isinstance(data[key], str):
                raise ConfigParseError(f"{key} must be a string")
        if "dotfiles_basename" in data and Path(data["dotfiles_basename"]).name == "":
            raise ConfigParseError("dotfiles_basename must name a file")

        if "dotfile_repo" in data:
            dotfile_repo = Path(data["dotfile_repo"]).expanduser()
            if not dotfile_repo.is_absolute():
                dotfile_repo = (home if home is not None else home_dir()) / dotfile_repo
        else:
            dotfile_repo = (home if home is not None else home_dir()) / DEFAULT_DOTFILE_REPO_NAME

        return cls(
            dotfile_repo=dotfile_repo,
            dotfiles_basename=Path(data.get("dotfiles_basename", DEFAULT_DOTFILES_BASENAME)),
        )


def resolve_config(path: Path, home: Optional[Path] = None) -> Config:
    """Read and parse the configuration file at ``path``.

    Raises:
        ConfigNotFoundError: If ``path`` does not exist.
        ConfigIOError: If the file cannot be read.
        ConfigParseError: If the file is not valid TOML or has unknown keys.
        NoHomeError: If the home directory is needed but cannot be found.
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise ConfigNotFoundError(path)

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"failed to parse {path}: {e}") from e
    except OSError as e:
        raise ConfigIOError(f"couldn't read {path}: {e}") from e

    logger.debug("Loaded config file %s", path)
    return Config.from_dict(data, home=home)


def load_config(path: Optional[Path] = None, home: Optional[Path] = None) -> Config:
    """Load the configuration, falling back to defaults if the file is missing.

    Args:
        path: Config file to read. Defaults to ``default_config_file()``.
        home: Home directory override.

    Raises:
        ConfigReadError: For every failure except a missing config file.
    """
    explicit = path is not None
    if path is None:
        path = default_config_file()

    try:
        return resolve_config(path, home=home)
    except ConfigNotFoundError:
        if explicit:
            logger.warning("Config file %s not found, using defaults", path)
        else:
            logger.debug("No config file at %s, using defaults", path)
        return Config.default(home=home)
