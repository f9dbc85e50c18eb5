"""gitgate command-line interface."""

from gitgate import __version__

__all__ = ["__version__"]
