"""Test configuration."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Tuple

import pytest

from dotfile_manager.core.config import Config

Evaluator = Tuple[str, ...]

DOTFILES_JSON = """{
  "$schema": "https://example.com/dotfiles.schema.json",
  "dotfiles": [
    ".vimrc",
    {"repo": "gitconfig", "installed": ".gitconfig"},
    {"repo": "nvim"}
  ]
}
"""

DOTFILES_TOML = """dotfiles = [
  ".vimrc",
  { repo = "gitconfig", installed = ".gitconfig" },
  { repo = "nvim" },
]
"""

DOTFILES_YAML = """$schema: https://example.com/dotfiles.schema.json
dotfiles:
  - .vimrc
  - repo: gitconfig
    installed: .gitconfig
  - repo: nvim
"""

DOTFILES_NIX_OUTPUT = '[".vimrc",{"installed":".gitconfig","repo":"gitconfig"},{"repo":"nvim"}]'


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Create a fake home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def dotfile_repo(home: Path) -> Path:
    """Create an empty dotfile repository in the fake home directory."""
    repo = home / ".dotfiles"
    repo.mkdir()
    return repo


@pytest.fixture
def config(dotfile_repo: Path) -> Config:
    """Create a configuration pointing at the test dotfile repository."""
    return Config(dotfile_repo=dotfile_repo, dotfiles_basename=Path("dotfiles"))


@pytest.fixture
def make_evaluator(tmp_path: Path) -> Callable[..., Evaluator]:
    """Return a factory for fake ``nix-instantiate`` commands.

    The fake prints ``stdout`` and ``stderr`` and exits with ``returncode``.
    With ``echo_file=True`` it prints the contents of the evaluated file
    instead, after checking that it was called with the evaluation flags.
    """
    counter = [0]

    def factory(
        stdout: str = "", stderr: str = "", returncode: int = 0, echo_file: bool = False
    ) -> Evaluator:
        counter[0] += 1
        script = tmp_path / f"fake_nix_{counter[0]}.py"
        if echo_file:
            script.write_text(
                "import sys\n"
                "if sys.argv[1:4] != ['--strict', '--json', '--eval']:\n"
                "    sys.stderr.write('bad arguments: %r' % sys.argv[1:])\n"
                "    sys.exit(1)\n"
                "with open(sys.argv[4]) as f:\n"
                "    sys.stdout.write(f.read())\n"
            )
        else:
            script.write_text(
                "import sys\n"
                f"sys.stdout.write({stdout!r})\n"
                f"sys.stderr.write({stderr!r})\n"
                f"sys.exit({returncode!r})\n"
            )
        return (sys.executable, str(script))

    return factory
