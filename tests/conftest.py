"""Pytest configuration and fixtures"""

import logging
import subprocess
from pathlib import Path
from typing import Callable

import pytest

from gitgate.core.hooks import HookName
from gitgate.plugins.base import Capability, CheckResult, PluginDescriptor

ZERO_SHA = "0" * 40


def run_git(repo: Path, *args: str) -> str:
    """Run a git command in a test repository and return its stdout"""
    completed = subprocess.run(
        ["git", *args],
        cwd=str(repo),
        check=True,
        capture_output=True,
        text=True,
    )
    return completed.stdout


def commit_all(repo: Path, message: str = "Initial commit") -> str:
    run_git(repo, "add", "-A")
    run_git(repo, "commit", "-q", "-m", message)
    return run_git(repo, "rev-parse", "HEAD").strip()


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create an empty non-bare repository on branch main"""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()

    run_git(repo_path, "init", "-q")
    run_git(repo_path, "symbolic-ref", "HEAD", "refs/heads/main")
    run_git(repo_path, "config", "user.name", "Test User")
    run_git(repo_path, "config", "user.email", "test@example.com")
    run_git(repo_path, "config", "commit.gpgsign", "false")

    return repo_path


@pytest.fixture
def make_descriptor() -> Callable[..., PluginDescriptor]:
    """Factory for plugin descriptors with sensible defaults"""

    def _make(
        name: str,
        priority: int = 50,
        hooks=(HookName.PRE_COMMIT,),
        capability: Capability = Capability.FILE_CHECK,
        check_fn=None,
        **kwargs,
    ) -> PluginDescriptor:
        return PluginDescriptor(
            name=name,
            applicable_hooks=frozenset(hooks),
            capability=capability,
            check_fn=check_fn or (lambda context, target: CheckResult.passed()),
            priority=priority,
            **kwargs,
        )

    return _make


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers the CLI installs so later tests never log to closed streams"""
    yield
    logging.getLogger().handlers.clear()
