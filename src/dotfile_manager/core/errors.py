"""Error types for dotfile-manager.

Every stage of the pipeline raises exactly its own family of errors:

- ``ConfigReadError`` while locating and parsing the configuration file.
- ``DotfilesReadError`` while finding, reading or evaluating the dotfile list.
- ``InstallError`` while linking a dotfile into place.

All of them derive from ``DotfileManagerError`` so the command line interface
can report any failure uniformly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class DotfileManagerError(Exception):
    """Base class for all dotfile-manager errors."""


# Configuration


class ConfigReadError(DotfileManagerError):
    """Error while reading the configuration file."""


class NoHomeError(ConfigReadError):
    """The user's home directory could not be determined."""

    def __init__(self, message: str = "home directory not found") -> None:
        """Initialize error."""
        super().__init__(message)


class ConfigNotFoundError(ConfigReadError):
    """The configuration file does not exist."""

    def __init__(self, path: Path) -> None:
        """Initialize error."""
        super().__init__(f"config file not found: {path}")
        self.path = path


class ConfigIOError(ConfigReadError):
    """The configuration file exists but could not be read."""


class ConfigParseError(ConfigReadError):
    """The configuration file is malformed or has unknown keys."""


# Dotfile lists


class DotfilesReadError(DotfileManagerError):
    """Error while reading a dotfiles list file."""


class NoDotfilesFoundError(DotfilesReadError):
    """No dotfiles list file exists for any supported format."""

    def __init__(self, message: str = "no dotfiles lists found") -> None:
        """Initialize error."""
        super().__init__(message)


class DotfilesIOError(DotfilesReadError):
    """A dotfiles list file could not be opened or read."""


class JSONParseError(DotfilesReadError):
    """Failed to parse JSON, or the JSON has an incorrect schema.

    Also raised for the JSON printed by the Nix evaluator.
    """


class YAMLParseError(DotfilesReadError):
    """Failed to parse YAML, or the YAML has an incorrect schema."""


class TOMLParseError(DotfilesReadError):
    """Failed to parse TOML, or the TOML has an incorrect schema."""


class EvaluatorNotFoundError(DotfilesReadError):
    """The Nix evaluator binary could not be found."""

    def __init__(self, command: str) -> None:
        """Initialize error."""
        super().__init__(f"{command} binary not found")
        self.command = command


class EvaluatorCommandError(DotfilesIOError):
    """Running the Nix evaluator failed for a reason other than it being missing."""


class EvaluationFailedError(DotfilesReadError):
    """The Nix evaluator reported an error on standard error."""

    def __init__(self, message: str) -> None:
        """Initialize error."""
        super().__init__(f"Nix evaluation failed: {message!r}")
        self.message = message


# Installation


class InstallError(DotfileManagerError):
    """Error while installing a dotfile."""

    def __init__(self, message: str, installed: Optional[Path] = None) -> None:
        """Initialize error."""
        super().__init__(message)
        self.installed = installed


class AlreadyExistsError(InstallError):
    """The installed path exists and the user declined to overwrite it."""


class InstallIOError(InstallError):
    """Removing the old entry or creating the link failed."""
