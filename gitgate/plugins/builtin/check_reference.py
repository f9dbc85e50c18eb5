"""Branch protection plugin for gitgate."""

from fnmatch import fnmatchcase
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from gitgate.core.context import HookContext, Target
from gitgate.core.hooks import HookName
from gitgate.git.git_types import GitCommandError, RefUpdate
from gitgate.infrastructure.logging import get_logger
from gitgate.plugins.base import (
    Capability,
    CheckResult,
    Plugin,
    PluginMetadata,
    PluginPriority,
)

logger = get_logger(__name__)


class CheckReferenceSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    protected_refs: List[str] = Field(
        default_factory=lambda: ["refs/heads/main", "refs/heads/master"],
        description="Glob patterns of refs that may not be deleted or rewritten",
    )
    allow_delete_protected: bool = Field(False, description="Allow deleting protected refs")
    allow_force_push: bool = Field(False, description="Allow non-fast-forward updates")
    allowed_ref_patterns: List[str] = Field(
        default_factory=list,
        description="Glob patterns new refs must match; empty allows any name",
    )


class CheckReferencePlugin(Plugin):
    """Plugin for enforcing branch protection rules."""

    name = "check_reference"

    def __init__(self, config=None, git=None):
        super().__init__(config, git)
        self.settings = self.load_settings(CheckReferenceSettings)

    @property
    def metadata(self) -> PluginMetadata:
        """Return plugin metadata."""
        return PluginMetadata(
            name=self.name,
            description="Protects refs from deletion and rewrites, enforces ref naming",
            capability=Capability.REF_CHECK,
            hooks=[HookName.PRE_PUSH, HookName.PRE_RECEIVE, HookName.UPDATE],
            priority=PluginPriority.CRITICAL,
            tags=["security", "branch-protection", "builtin"],
        )

    def is_protected(self, ref_name: str) -> bool:
        return any(fnmatchcase(ref_name, pattern) for pattern in self.settings.protected_refs)

    def _is_fast_forward(self, update: RefUpdate) -> bool:
        if self.git is None:
            return True
        try:
            return self.git.is_ancestor(update.old_sha, update.new_sha)
        except GitCommandError as e:
            # pre-push: the remote tip is unknown locally, so it cannot be
            # an ancestor of what is being pushed
            logger.debug("Ancestry check failed", ref=update.ref_name, error=e.stderr)
            return False

    def check(self, context: HookContext, target: Optional[Target]) -> CheckResult:
        if not isinstance(target, RefUpdate):
            return CheckResult.skip("not a ref update")

        update = target
        patterns = self.settings.allowed_ref_patterns
        if update.is_create and patterns and not any(
            fnmatchcase(update.ref_name, p) for p in patterns
        ):
            return CheckResult.fail(
                f"ref name not allowed, must match one of: {', '.join(patterns)}"
            )

        if not self.is_protected(update.ref_name):
            return CheckResult.passed()

        if update.is_delete and not self.settings.allow_delete_protected:
            return CheckResult.fail(f"deleting protected ref {update.short_name} is not allowed")

        if update.is_update and not self.settings.allow_force_push:
            if not self._is_fast_forward(update):
                return CheckResult.fail(
                    f"non-fast-forward update of protected ref {update.short_name} is not allowed"
                )

        return CheckResult.passed()
