"""Tests for dotfile list discovery and parsing."""

from pathlib import Path
from typing import Callable, List

import pytest

from dotfile_manager.core.config import Config
from dotfile_manager.core.dotfile import Dotfile
from dotfile_manager.core.errors import (
    DotfilesIOError,
    JSONParseError,
    NoDotfilesFoundError,
    TOMLParseError,
    YAMLParseError,
)
from dotfile_manager.core.loader import (
    DotfileListSource,
    JSONSource,
    NixSource,
    TOMLSource,
    YAMLSource,
    candidate_paths,
    default_sources,
    find_dotfiles_list,
    load_dotfiles,
)

from .conftest import DOTFILES_JSON, DOTFILES_TOML, DOTFILES_YAML, Evaluator

EXPECTED = [
    Dotfile(repo=Path(".vimrc")),
    Dotfile(repo=Path("gitconfig"), installed=Path(".gitconfig")),
    Dotfile(repo=Path("nvim")),
]


def sources_with(evaluator: Evaluator) -> List[DotfileListSource]:
    """Return the default sources with a fake Nix evaluator."""
    return [NixSource(command=evaluator), JSONSource(), TOMLSource(), YAMLSource()]


@pytest.mark.parametrize(
    "filename, text",
    [
        ("dotfiles.json", DOTFILES_JSON),
        ("dotfiles.toml", DOTFILES_TOML),
        ("dotfiles.yaml", DOTFILES_YAML),
        ("dotfiles.yml", DOTFILES_YAML),
    ],
)
def test_static_formats_are_equivalent(config: Config, filename: str, text: str) -> None:
    """Every static format produces the same dotfiles."""
    (config.dotfile_repo / filename).write_text(text)
    assert load_dotfiles(config) == EXPECTED


def test_nix_format_is_equivalent(
    config: Config, make_evaluator: Callable[..., Evaluator]
) -> None:
    """The Nix format produces the same dotfiles as the static formats."""
    (config.dotfile_repo / "dotfiles.nix").write_text(
        '[".vimrc", {"repo": "gitconfig", "installed": ".gitconfig"}, {"repo": "nvim"}]'
    )
    evaluator = make_evaluator(echo_file=True)
    assert load_dotfiles(config, sources_with(evaluator)) == EXPECTED


def test_candidate_order(config: Config) -> None:
    """Candidates are listed in priority order."""
    names = [path.name for path, _ in candidate_paths(config)]
    assert names == [
        "dotfiles.nix",
        "dotfiles.json",
        "dotfiles.toml",
        "dotfiles.yaml",
        "dotfiles.yml",
    ]
    assert all(path.parent == config.dotfile_repo for path, _ in candidate_paths(config))
    assert [source.name for source in default_sources()] == ["Nix", "JSON", "TOML", "YAML"]


def test_nix_wins_over_static_formats(
    config: Config, make_evaluator: Callable[..., Evaluator]
) -> None:
    """A Nix list is preferred over every other format."""
    repo = config.dotfile_repo
    (repo / "dotfiles.nix").write_text('["from-nix"]')
    (repo / "dotfiles.json").write_text('{"dotfiles": ["from-json"]}')
    (repo / "dotfiles.toml").write_text('dotfiles = ["from-toml"]')
    (repo / "dotfiles.yaml").write_text("dotfiles: [from-yaml]")
    sources = sources_with(make_evaluator(echo_file=True))

    assert load_dotfiles(config, sources) == [Dotfile(repo=Path("from-nix"))]


@pytest.mark.parametrize(
    "present, expected",
    [
        (["json", "toml", "yaml", "yml"], "from-json"),
        (["toml", "yaml", "yml"], "from-toml"),
        (["yaml", "yml"], "from-yaml"),
        (["yml"], "from-yml"),
    ],
)
def test_priority_order(config: Config, present: List[str], expected: str) -> None:
    """JSON beats TOML beats YAML, and .yaml beats .yml."""
    contents = {
        "json": '{"dotfiles": ["from-json"]}',
        "toml": 'dotfiles = ["from-toml"]',
        "yaml": "dotfiles: [from-yaml]",
        "yml": "dotfiles: [from-yml]",
    }
    for extension in present:
        (config.dotfile_repo / f"dotfiles.{extension}").write_text(contents[extension])

    path, _ = find_dotfiles_list(config)
    assert path.suffix == f".{present[0]}"
    assert load_dotfiles(config) == [Dotfile(repo=Path(expected))]


def test_custom_basename(dotfile_repo: Path) -> None:
    """The configured basename selects the list file."""
    config = Config(dotfile_repo=dotfile_repo, dotfiles_basename=Path("links"))
    (dotfile_repo / "dotfiles.json").write_text('{"dotfiles": ["ignored"]}')
    (dotfile_repo / "links.yml").write_text("dotfiles:\n  - used\n")
    assert load_dotfiles(config) == [Dotfile(repo=Path("used"))]


def test_none_found(config: Config) -> None:
    """No list file raises NoDotfilesFoundError."""
    with pytest.raises(NoDotfilesFoundError):
        load_dotfiles(config)


def test_schema_is_optional(config: Config) -> None:
    """The $schema key may be omitted."""
    (config.dotfile_repo / "dotfiles.json").write_text('{"dotfiles": []}')
    assert load_dotfiles(config) == []


@pytest.mark.parametrize(
    "filename, text, error",
    [
        ("dotfiles.json", "{not json", JSONParseError),
        ("dotfiles.json", '{"files": []}', JSONParseError),
        ("dotfiles.json", '{"dotfiles": "vimrc"}', JSONParseError),
        ("dotfiles.json", '{"$schema": 1, "dotfiles": []}', JSONParseError),
        ("dotfiles.json", "[]", JSONParseError),
        ("dotfiles.toml", "dotfiles = [", TOMLParseError),
        ("dotfiles.toml", "other = 1", TOMLParseError),
        ("dotfiles.yaml", "dotfiles: [unterminated", YAMLParseError),
        ("dotfiles.yaml", "", YAMLParseError),
        ("dotfiles.yml", "dotfiles:\n  - {installed: x}\n", YAMLParseError),
    ],
)
def test_parse_errors(config: Config, filename: str, text: str, error: type) -> None:
    """Malformed lists raise the error for their format."""
    (config.dotfile_repo / filename).write_text(text)
    with pytest.raises(error):
        load_dotfiles(config)


def test_unreadable_list(config: Config) -> None:
    """A list path that cannot be opened raises DotfilesIOError."""
    (config.dotfile_repo / "dotfiles.json").mkdir()
    with pytest.raises(DotfilesIOError):
        load_dotfiles(config)


def test_source_must_implement_read() -> None:
    """A list source without ``read`` cannot be instantiated."""

    class INISource(DotfileListSource):
        name = "INI"
        extensions = ("ini",)

    with pytest.raises(TypeError):
        INISource()
