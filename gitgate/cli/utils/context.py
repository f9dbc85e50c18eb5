"""CLI context management."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rich.console import Console

from gitgate.cli.utils.output import OutputFormatter
from gitgate.core.config import Settings


@dataclass
class CLIContext:
    """Context object passed through CLI commands."""

    debug: bool
    settings: Settings
    formatter: OutputFormatter
    console: Console
    config_file: Optional[Path] = None

    def create_engine(self, repo: Optional[Path] = None):
        """
        Build a hook engine for the repository.

        Returns:
            HookEngine instance
        """
        from gitgate.core.engine import HookEngine

        return HookEngine.create(
            repo_path=repo,
            settings=self.settings,
            config_file=self.config_file,
        )
