"""Installs and removes the gitgate hook scripts in a repository."""

import stat
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from gitgate.core.hooks import HookName
from gitgate.infrastructure.logging import get_logger

logger = get_logger(__name__)

HOOK_MARKER = "# installed by gitgate"

HOOK_TEMPLATE = """#!/bin/sh
{marker}
exec "{python}" -m gitgate run {hook} "$@"
"""


@dataclass
class InstallReport:
    """What an install or uninstall pass did per hook"""

    changed: List[HookName] = field(default_factory=list)
    skipped: List[HookName] = field(default_factory=list)


def render_hook(hook: HookName, python: Optional[str] = None) -> str:
    return HOOK_TEMPLATE.format(
        marker=HOOK_MARKER,
        python=python or sys.executable,
        hook=hook.value,
    )


def is_managed(path: Path) -> bool:
    """True when the hook file was written by gitgate"""
    try:
        return HOOK_MARKER in path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False


class HookInstaller:
    """Copies the hook entrypoint template into a hooks directory"""

    def __init__(self, hooks_dir: Path, python: Optional[str] = None):
        self.hooks_dir = hooks_dir
        self.python = python

    def _selected(self, hooks: Optional[Iterable[HookName]]) -> List[HookName]:
        return list(HookName) if not hooks else [HookName.parse(hook) for hook in hooks]

    def install(
        self,
        hooks: Optional[Iterable[HookName]] = None,
        force: bool = False,
    ) -> InstallReport:
        """
        Write a hook script for every selected hook.

        Hooks that already exist and were not written by gitgate are left
        alone unless force is set.
        """
        selected = self._selected(hooks)
        self.hooks_dir.mkdir(parents=True, exist_ok=True)
        report = InstallReport()

        for hook in selected:
            path = self.hooks_dir / hook.value
            if path.exists() and not is_managed(path) and not force:
                logger.warning("Existing hook left in place", hook=hook.value, path=str(path))
                report.skipped.append(hook)
                continue

            path.write_text(render_hook(hook, self.python), encoding="utf-8")
            path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            report.changed.append(hook)
            logger.info("Installed hook", hook=hook.value, path=str(path))

        return report

    def uninstall(self, hooks: Optional[Iterable[HookName]] = None) -> InstallReport:
        """Remove gitgate's hook scripts; foreign hooks are never touched."""
        report = InstallReport()

        for hook in self._selected(hooks):
            path = self.hooks_dir / hook.value
            if not path.exists():
                continue
            if not is_managed(path):
                report.skipped.append(hook)
                continue

            path.unlink()
            report.changed.append(hook)
            logger.info("Removed hook", hook=hook.value, path=str(path))

        return report
