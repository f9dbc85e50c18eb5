"""Staged content scanning plugin for gitgate."""

import re
from typing import List, Optional, Pattern, Tuple

from pydantic import BaseModel, ConfigDict, Field

from gitgate.core.context import HookContext, Target
from gitgate.core.hooks import HookName
from gitgate.git.git_types import FileChange
from gitgate.infrastructure.logging import get_logger
from gitgate.plugins.base import (
    Capability,
    CheckResult,
    Plugin,
    PluginError,
    PluginMetadata,
    PluginPriority,
)

logger = get_logger(__name__)

CONFLICT_MARKER = re.compile(r"^(<{7}|>{7})( |$)")

DEFAULT_SENSITIVE = [
    (r"-----BEGIN (RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----", "Private key"),
    (r"(?i)aws_secret_access_key\s*[:=]\s*['\"]?[a-zA-Z0-9/+=]{40}", "AWS secret key"),
    (r"(?i)(api[_-]?key|apikey)\s*[:=]\s*['\"]?[a-zA-Z0-9]{20,}", "API key"),
]


class CheckContentSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    file_patterns: Optional[List[str]] = Field(None, description="Glob filter for checked paths")
    conflict_markers: bool = Field(True, description="Reject unresolved merge conflict markers")
    sensitive_patterns: Optional[List[Tuple[str, str]]] = Field(
        None, description="(regex, description) pairs of content that may not be committed"
    )
    max_reported_lines: int = Field(5, ge=1, description="Line numbers listed per problem")


class CheckContentPlugin(Plugin):
    """Plugin for scanning staged text for conflict markers and secrets."""

    name = "check_content"

    def __init__(self, config=None, git=None):
        super().__init__(config, git)
        self.settings = self.load_settings(CheckContentSettings)
        self.sensitive_patterns = self._compile_sensitive_patterns()

    @property
    def metadata(self) -> PluginMetadata:
        """Return plugin metadata."""
        return PluginMetadata(
            name=self.name,
            description="Rejects merge conflict markers and secrets in staged text files",
            capability=Capability.FILE_CHECK,
            hooks=[HookName.PRE_COMMIT, HookName.PRE_MERGE_COMMIT, HookName.PRE_APPLYPATCH],
            priority=PluginPriority.NORMAL,
            needs_content=True,
            tags=["content", "security", "builtin"],
        )

    def _compile_sensitive_patterns(self) -> List[Tuple[Pattern, str]]:
        configured = self.settings.sensitive_patterns
        pattern_tuples = DEFAULT_SENSITIVE if configured is None else configured

        patterns = []
        for pattern_str, description in pattern_tuples:
            try:
                patterns.append((re.compile(pattern_str), description))
            except re.error as e:
                logger.warning("Invalid sensitive pattern", pattern=pattern_str, error=str(e))
        return patterns

    def _line_list(self, numbers: List[int]) -> str:
        shown = numbers[: self.settings.max_reported_lines]
        text = ", ".join(str(n) for n in shown)
        if len(numbers) > len(shown):
            text += f" (+{len(numbers) - len(shown)} more)"
        return text

    def scan(self, text: str) -> List[str]:
        """Problems found in one file's text."""
        conflicts: List[int] = []
        secrets = {}

        for number, line in enumerate(text.splitlines(), start=1):
            if self.settings.conflict_markers and CONFLICT_MARKER.match(line):
                conflicts.append(number)
            for pattern, description in self.sensitive_patterns:
                if pattern.search(line):
                    secrets.setdefault(description, []).append(number)

        problems = []
        if conflicts:
            problems.append(f"merge conflict markers on line(s) {self._line_list(conflicts)}")
        for description, numbers in secrets.items():
            problems.append(f"{description} on line(s) {self._line_list(numbers)}")
        return problems

    def check(self, context: HookContext, target: Optional[Target]) -> CheckResult:
        if not isinstance(target, FileChange):
            return CheckResult.skip("not a file change")
        if target.submodule:
            return CheckResult.skip("submodule")
        if self.git is None:
            raise PluginError("check_content needs repository access")

        data = self.git.staged_content(target.path)
        if b"\0" in data[:8000]:
            return CheckResult.skip("binary file")

        problems = self.scan(data.decode("utf-8", errors="replace"))
        if problems:
            return CheckResult.fail("\n".join(problems))
        return CheckResult.passed()
