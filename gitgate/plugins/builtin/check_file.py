"""Staged file name and size plugin for gitgate."""

import re
from typing import List, Optional, Pattern

from pydantic import BaseModel, ConfigDict, Field

from gitgate.core.context import HookContext, Target
from gitgate.core.hooks import HookName
from gitgate.git.git_types import FileChange
from gitgate.infrastructure.logging import get_logger
from gitgate.plugins.base import (
    Capability,
    CheckResult,
    Plugin,
    PluginMetadata,
    PluginPriority,
)

logger = get_logger(__name__)

DEFAULT_FORBIDDEN = [
    r"(^|/)\.env$",
    r"(^|/)\.env\.",
    r"\.pem$",
    r"\.key$",
    r"\.p12$",
    r"\.pfx$",
    r"(^|/)id_rsa",
    r"(^|/)id_dsa",
    r"(^|/)id_ed25519",
    r"\.aws/credentials",
    r"(^|/)\.ssh/",
    r"(^|/)\.gnupg/",
]


class CheckFileSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    file_patterns: Optional[List[str]] = Field(None, description="Glob filter for checked paths")
    forbidden_files: Optional[List[str]] = Field(
        None, description="Regexes of paths that may never be committed"
    )
    max_file_size: int = Field(10 * 1024 * 1024, ge=0, description="Bytes; 0 disables")
    file_size_exceptions: List[str] = Field(
        default_factory=list, description="Path suffixes exempt from the size limit"
    )


class CheckFilePlugin(Plugin):
    """Plugin for rejecting forbidden and oversized staged files."""

    name = "check_file"

    def __init__(self, config=None, git=None):
        super().__init__(config, git)
        self.settings = self.load_settings(CheckFileSettings)
        self.forbidden_files = self._compile_forbidden_patterns()

    @property
    def metadata(self) -> PluginMetadata:
        """Return plugin metadata."""
        return PluginMetadata(
            name=self.name,
            description="Rejects forbidden file names and files over the size limit",
            capability=Capability.FILE_CHECK,
            hooks=[HookName.PRE_COMMIT, HookName.PRE_MERGE_COMMIT, HookName.PRE_APPLYPATCH],
            priority=PluginPriority.HIGH,
            tags=["security", "files", "builtin"],
        )

    def _compile_forbidden_patterns(self) -> List[Pattern]:
        """Compile forbidden file patterns."""
        configured = self.settings.forbidden_files
        pattern_strings = DEFAULT_FORBIDDEN if configured is None else configured

        patterns = []
        for pattern_str in pattern_strings:
            try:
                patterns.append(re.compile(pattern_str))
            except re.error as e:
                logger.warning("Invalid forbidden pattern", pattern=pattern_str, error=str(e))
        return patterns

    def _size_limited(self, path: str) -> bool:
        if not self.settings.max_file_size:
            return False
        return not any(path.endswith(suffix) for suffix in self.settings.file_size_exceptions)

    def check(self, context: HookContext, target: Optional[Target]) -> CheckResult:
        if not isinstance(target, FileChange):
            return CheckResult.skip("not a file change")
        if target.is_deleted:
            return CheckResult.skip("file deleted")

        for pattern in self.forbidden_files:
            if pattern.search(target.path):
                return CheckResult.fail(f"forbidden file (matches {pattern.pattern!r})")

        if target.submodule:
            return CheckResult.passed()

        if self._size_limited(target.path) and self.git is not None:
            size = self.git.blob_size(target.path)
            if size > self.settings.max_file_size:
                size_mb = size / (1024 * 1024)
                max_mb = self.settings.max_file_size / (1024 * 1024)
                return CheckResult.fail(
                    f"file is {size_mb:.2f}MB, exceeds maximum size ({max_mb:.2f}MB)"
                )

        return CheckResult.passed()
