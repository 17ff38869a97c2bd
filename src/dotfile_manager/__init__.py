"""Link dotfiles from a repository into the home directory."""

__version__ = "0.1.0"
