"""Runs plugin checks against a hook context and records verdicts."""

import time
from fnmatch import fnmatchcase
from pathlib import PurePosixPath
from typing import Iterable, List, Optional

from gitgate.core.context import HookContext, Target, describe_target
from gitgate.git.git_types import FileChange
from gitgate.infrastructure.logging import bind_context, get_logger, unbind_context
from gitgate.plugins.base import CheckResult, PluginDescriptor, Verdict, VerdictStatus

logger = get_logger(__name__)


def matches_patterns(path: str, patterns: Iterable[str]) -> bool:
    """Glob match against the full path or the file name; no patterns matches all."""
    patterns = list(patterns)
    if not patterns:
        return True
    name = PurePosixPath(path).name
    return any(fnmatchcase(path, p) or fnmatchcase(name, p) for p in patterns)


class PluginExecutor:
    """
    Sequential plugin runner.

    Every plugin runs even after earlier ones failed, so one invocation
    reports every problem at once. A check that raises becomes an ``error``
    verdict for that target; it never aborts the run and never passes.
    """

    def run(self, plugins: Iterable[PluginDescriptor], context: HookContext) -> List[Verdict]:
        verdicts: List[Verdict] = []
        start_time = time.perf_counter()
        count = 0

        for plugin in plugins:
            count += 1
            verdicts.extend(self._run_plugin(plugin, context))

        logger.debug(
            "Executed plugins",
            hook=context.hook_name.value,
            total_plugins=count,
            verdicts=len(verdicts),
            time_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return verdicts

    def _run_plugin(self, plugin: PluginDescriptor, context: HookContext) -> List[Verdict]:
        if not plugin.capability.matches(context):
            return [
                Verdict(
                    plugin.name,
                    VerdictStatus.SKIP,
                    f"{plugin.capability.value} does not apply to {context.hook_name.value}",
                )
            ]

        if not plugin.per_target:
            return [self._invoke(plugin, context, None)]

        targets = context.targets()
        if not targets:
            return [Verdict(plugin.name, VerdictStatus.SKIP, "nothing to check")]

        return [self._check_target(plugin, context, target) for target in targets]

    def _check_target(
        self,
        plugin: PluginDescriptor,
        context: HookContext,
        target: Target,
    ) -> Verdict:
        if isinstance(target, FileChange):
            if not matches_patterns(target.path, plugin.file_patterns):
                return Verdict(plugin.name, VerdictStatus.SKIP, "path not matched", target.path)
            if plugin.needs_content and target.is_deleted:
                return Verdict(plugin.name, VerdictStatus.SKIP, "file deleted", target.path)
            if plugin.needs_content and target.binary:
                return Verdict(plugin.name, VerdictStatus.SKIP, "binary file", target.path)
            if plugin.needs_content and target.submodule:
                return Verdict(plugin.name, VerdictStatus.SKIP, "submodule", target.path)

        return self._invoke(plugin, context, target)

    def _invoke(
        self,
        plugin: PluginDescriptor,
        context: HookContext,
        target: Optional[Target],
    ) -> Verdict:
        label = describe_target(target)

        bind_context(plugin=plugin.name)
        try:
            result = plugin.check_fn(context, target)
        except Exception as e:
            logger.error(
                "Plugin check raised",
                plugin=plugin.name,
                target=label,
                error=str(e),
                exc_info=True,
            )
            return Verdict(plugin.name, VerdictStatus.ERROR, f"{type(e).__name__}: {e}", label)
        finally:
            unbind_context("plugin")

        if not isinstance(result, CheckResult):
            logger.error(
                "Plugin returned an invalid result",
                plugin=plugin.name,
                result_type=type(result).__name__,
            )
            return Verdict(
                plugin.name,
                VerdictStatus.ERROR,
                f"check returned {type(result).__name__}, expected CheckResult",
                label,
            )

        return Verdict(plugin.name, result.status, result.message, label)
