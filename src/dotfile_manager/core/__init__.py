"""Core functionality for dotfile-manager."""

from .config import Config, load_config, resolve_config
from .dotfile import AbsDotfile, Dotfile, make_absolute
from .install import DotfileInstaller, StaticConfirm, TerminalConfirm
from .loader import load_dotfiles

__all__ = [
    "AbsDotfile",
    "Config",
    "Dotfile",
    "DotfileInstaller",
    "StaticConfirm",
    "TerminalConfirm",
    "load_config",
    "load_dotfiles",
    "make_absolute",
    "resolve_config",
]
