"""Reduces plugin verdicts to one decision and a report."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from gitgate.core.hooks import HookName
from gitgate.plugins.base import Verdict, VerdictStatus


class Decision(str, Enum):
    """Overall outcome gating the git operation"""

    ACCEPT = "accept"
    REJECT = "reject"


@dataclass(frozen=True)
class RunResult:
    """Terminal artifact of one hook invocation"""

    verdicts: Tuple[Verdict, ...]
    overall: Decision
    hook_name: Optional[HookName] = None

    @property
    def accepted(self) -> bool:
        return self.overall == Decision.ACCEPT

    @property
    def exit_code(self) -> int:
        return 0 if self.accepted else 1

    def _plugins_with(self, status: VerdictStatus) -> List[str]:
        names: List[str] = []
        for verdict in self.verdicts:
            if verdict.status == status and verdict.plugin_name not in names:
                names.append(verdict.plugin_name)
        return names

    @property
    def failed_plugins(self) -> List[str]:
        return self._plugins_with(VerdictStatus.FAIL)

    @property
    def errored_plugins(self) -> List[str]:
        return self._plugins_with(VerdictStatus.ERROR)

    def by_plugin(self) -> Dict[str, List[Verdict]]:
        """Verdicts grouped per plugin, in run order"""
        grouped: Dict[str, List[Verdict]] = {}
        for verdict in self.verdicts:
            grouped.setdefault(verdict.plugin_name, []).append(verdict)
        return grouped

    def to_dict(self) -> dict:
        return {
            "hook": self.hook_name.value if self.hook_name else None,
            "overall": self.overall.value,
            "verdicts": [verdict.to_dict() for verdict in self.verdicts],
        }


def aggregate(verdicts: Iterable[Verdict], hook_name: Optional[HookName] = None) -> RunResult:
    """Reject when any verdict failed or errored; skips never count."""
    ordered = tuple(verdicts)
    rejected = any(verdict.status.rejects for verdict in ordered)
    return RunResult(
        verdicts=ordered,
        overall=Decision.REJECT if rejected else Decision.ACCEPT,
        hook_name=hook_name,
    )


def _format_verdict(verdict: Verdict) -> str:
    head = f"[{verdict.plugin_name}]"
    if verdict.target:
        head = f"{head} {verdict.target}"

    message = verdict.message or "check failed"
    if verdict.status == VerdictStatus.ERROR:
        message = f"error: {message}"

    first, *rest = message.splitlines() or [""]
    lines = [f"{head}: {first}"]
    lines.extend(f"    {line}" for line in rest)
    return "\n".join(lines)


def format_report(result: RunResult) -> List[str]:
    """
    One entry per failing or erroring verdict, grouped by plugin in run
    order, then a summary line. Accepted runs report nothing.
    """
    if result.accepted:
        return []

    lines = []
    for verdicts in result.by_plugin().values():
        for verdict in verdicts:
            if verdict.status.rejects:
                lines.append(_format_verdict(verdict))

    failed = len(result.failed_plugins)
    errored = len(result.errored_plugins)
    hook = result.hook_name.value if result.hook_name else "hook"
    lines.append(
        f"{hook} rejected: {failed} plugin(s) failed, {errored} plugin(s) errored"
    )
    return lines
