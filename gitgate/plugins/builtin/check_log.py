"""Commit message shape plugin for gitgate."""

import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gitgate.core.context import HookContext, Target
from gitgate.core.hooks import HookName
from gitgate.core.message import CommitMessage
from gitgate.infrastructure.logging import get_logger
from gitgate.plugins.base import (
    Capability,
    CheckResult,
    Plugin,
    PluginMetadata,
    PluginPriority,
)

logger = get_logger(__name__)


class CheckLogSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    allow_empty: bool = Field(False, description="Accept empty commit messages")
    summary_max_width: int = Field(50, ge=0, description="0 disables the limit")
    body_max_width: int = Field(72, ge=0, description="0 disables the limit")
    require_blank_line: bool = Field(True, description="Blank line after the summary")
    summary_pattern: Optional[str] = Field(None, description="Regex the summary must match")
    ignore_merges: bool = Field(True, description="Accept git's generated merge messages")

    @field_validator("summary_pattern")
    @classmethod
    def compile_pattern(cls, v):
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"invalid regex {v!r}: {e}")
        return v


class CheckLogPlugin(Plugin):
    """Plugin for validating the shape of commit messages."""

    name = "check_log"

    def __init__(self, config=None, git=None):
        super().__init__(config, git)
        self.settings = self.load_settings(CheckLogSettings)

    @property
    def metadata(self) -> PluginMetadata:
        """Return plugin metadata."""
        return PluginMetadata(
            name=self.name,
            description="Validates commit message summary, separator and line widths",
            capability=Capability.MESSAGE_CHECK,
            hooks=[HookName.COMMIT_MSG, HookName.APPLYPATCH_MSG],
            priority=PluginPriority.HIGH,
            tags=["message", "builtin"],
        )

    def problems(self, message: CommitMessage) -> List[str]:
        """Every rule the message breaks, in a stable order."""
        settings = self.settings
        problems = []

        summary = message.summary
        if settings.summary_max_width and len(summary) > settings.summary_max_width:
            problems.append(
                f"summary is {len(summary)} characters long, limit is {settings.summary_max_width}"
            )

        if settings.summary_pattern and not re.search(settings.summary_pattern, summary):
            problems.append(f"summary does not match {settings.summary_pattern!r}")

        if settings.require_blank_line and not message.has_separator:
            problems.append("summary must be followed by a blank line")

        if settings.body_max_width:
            for number, line in enumerate(message.lines(), start=1):
                if len(line) > settings.body_max_width:
                    problems.append(
                        f"body line {number} is {len(line)} characters long, "
                        f"limit is {settings.body_max_width}"
                    )

        return problems

    def check(self, context: HookContext, target: Optional[Target]) -> CheckResult:
        message = target if isinstance(target, CommitMessage) else context.message

        if message.is_empty:
            if self.settings.allow_empty:
                return CheckResult.passed("empty message allowed")
            return CheckResult.fail("commit message is empty")

        if self.settings.ignore_merges and message.summary.startswith("Merge "):
            return CheckResult.skip("merge commit")

        problems = self.problems(message)
        if problems:
            return CheckResult.fail("\n".join(problems))

        return CheckResult.passed()
