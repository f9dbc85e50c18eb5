"""Base plugin interface and types for the gitgate plugin system."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from gitgate.core.context import (
    FileListContext,
    HookContext,
    MessageContext,
    RefUpdateContext,
    Target,
)
from gitgate.core.errors import GitGateError
from gitgate.core.hooks import HookKind, HookName
from gitgate.git.query import GitQueryService


class PluginPriority(Enum):
    """Plugin execution priority levels."""
    CRITICAL = 0  # Executed first
    HIGH = 10
    NORMAL = 50
    LOW = 100


class Capability(str, Enum):
    """What a plugin checks; each capability pairs with one context variant."""
    FILE_CHECK = "file_check"
    MESSAGE_CHECK = "message_check"
    REF_CHECK = "ref_check"

    @property
    def hook_kind(self) -> HookKind:
        return _CAPABILITY_KINDS[self]

    @property
    def context_type(self) -> type:
        return _CAPABILITY_CONTEXTS[self]

    def matches(self, context: HookContext) -> bool:
        return isinstance(context, self.context_type)


_CAPABILITY_KINDS = {
    Capability.FILE_CHECK: HookKind.FILES,
    Capability.MESSAGE_CHECK: HookKind.MESSAGE,
    Capability.REF_CHECK: HookKind.REFS,
}

_CAPABILITY_CONTEXTS = {
    Capability.FILE_CHECK: FileListContext,
    Capability.MESSAGE_CHECK: MessageContext,
    Capability.REF_CHECK: RefUpdateContext,
}


class VerdictStatus(str, Enum):
    """Outcome of one check against one target."""
    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"
    ERROR = "error"

    @property
    def rejects(self) -> bool:
        return self in (VerdictStatus.FAIL, VerdictStatus.ERROR)


@dataclass(frozen=True)
class CheckResult:
    """Result returned by a plugin check."""
    status: VerdictStatus
    message: Optional[str] = None

    @classmethod
    def passed(cls, message: Optional[str] = None) -> "CheckResult":
        """Create a passing result."""
        return cls(status=VerdictStatus.PASS, message=message)

    @classmethod
    def fail(cls, message: str) -> "CheckResult":
        """Create a rejecting result."""
        return cls(status=VerdictStatus.FAIL, message=message)

    @classmethod
    def skip(cls, message: Optional[str] = None) -> "CheckResult":
        """Create a skipped result for a target the check does not apply to."""
        return cls(status=VerdictStatus.SKIP, message=message)


@dataclass(frozen=True)
class Verdict:
    """The recorded outcome of one plugin against one target."""
    plugin_name: str
    status: VerdictStatus
    message: Optional[str] = None
    target: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "plugin": self.plugin_name,
            "status": self.status.value,
            "message": self.message,
            "target": self.target,
        }


CheckFn = Callable[[HookContext, Optional[Target]], CheckResult]
SettingsT = TypeVar("SettingsT", bound=BaseModel)


@dataclass(frozen=True)
class PluginDescriptor:
    """
    Immutable registration record for one plugin.

    ``check_fn`` is called as ``check_fn(context, target)``. Per-target
    plugins get one call per file change, ref update or message; aggregate
    plugins (``per_target=False``) get a single call with ``target=None``.
    """
    name: str
    applicable_hooks: FrozenSet[HookName]
    capability: Capability
    check_fn: CheckFn
    priority: int = PluginPriority.NORMAL.value
    file_patterns: Tuple[str, ...] = ()
    needs_content: bool = False
    per_target: bool = True
    description: str = ""

    def __post_init__(self):
        if not self.name:
            raise PluginValidationError("Plugin descriptor missing name")

        try:
            hooks = frozenset(HookName(hook) for hook in self.applicable_hooks)
        except ValueError as e:
            raise PluginValidationError(f"Plugin {self.name}: {e}")
        object.__setattr__(self, "applicable_hooks", hooks)
        object.__setattr__(self, "capability", Capability(self.capability))
        object.__setattr__(self, "file_patterns", tuple(self.file_patterns))

        for hook in hooks:
            if hook.kind != self.capability.hook_kind:
                raise PluginValidationError(
                    f"Plugin {self.name}: {self.capability.value} cannot run on {hook.value}"
                )

        if not callable(self.check_fn):
            raise PluginValidationError(f"Plugin {self.name}: check_fn is not callable")

    def with_priority(self, priority: int) -> "PluginDescriptor":
        return PluginDescriptor(
            name=self.name,
            applicable_hooks=self.applicable_hooks,
            capability=self.capability,
            check_fn=self.check_fn,
            priority=priority,
            file_patterns=self.file_patterns,
            needs_content=self.needs_content,
            per_target=self.per_target,
            description=self.description,
        )


@dataclass
class PluginMetadata:
    """Plugin metadata information."""
    name: str
    description: str
    capability: Capability
    hooks: List[HookName]
    version: str = "1.0.0"
    priority: PluginPriority = PluginPriority.NORMAL
    file_patterns: List[str] = field(default_factory=list)
    needs_content: bool = False
    per_target: bool = True
    tags: List[str] = field(default_factory=list)


class Plugin(ABC):
    """Abstract base class for class-based plugins."""

    # Registry name; also the key of the plugin's configuration block
    name: str = ""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git: Optional[GitQueryService] = None,
    ):
        """
        Initialize plugin with configuration.

        Args:
            config: Plugin-specific settings
            git: Read-only git queries for checks that need repository data
        """
        self.config = config or {}
        self.git = git

    @property
    @abstractmethod
    def metadata(self) -> PluginMetadata:
        """
        Return plugin metadata.

        Returns:
            PluginMetadata object with plugin information
        """
        pass

    @abstractmethod
    def check(self, context: HookContext, target: Optional[Target]) -> CheckResult:
        """
        Check one target (or the whole context for aggregate plugins).

        Args:
            context: Immutable hook context
            target: File change, ref update or commit message; None for
                aggregate plugins

        Returns:
            CheckResult with the outcome
        """
        pass

    def load_settings(self, model: Type[SettingsT]) -> SettingsT:
        """
        Validate this plugin's settings block.

        Raises:
            PluginValidationError: If the settings do not fit the model
        """
        try:
            return model.model_validate(self.config)
        except ValidationError as e:
            raise PluginValidationError(f"Invalid settings for plugin '{self.name}': {e}")

    def file_patterns(self) -> Iterable[str]:
        """Glob patterns restricting which paths a file check sees."""
        return self.config.get("file_patterns") or self.metadata.file_patterns

    def descriptor(self) -> PluginDescriptor:
        """Freeze this plugin into the descriptor the registry works with."""
        metadata = self.metadata
        return PluginDescriptor(
            name=metadata.name,
            applicable_hooks=frozenset(metadata.hooks),
            capability=metadata.capability,
            check_fn=self.check,
            priority=metadata.priority.value,
            file_patterns=tuple(self.file_patterns()),
            needs_content=metadata.needs_content,
            per_target=metadata.per_target,
            description=metadata.description,
        )


# Exception classes for plugin errors

class PluginError(GitGateError):
    """Base exception for plugin-related errors."""
    pass


class PluginValidationError(PluginError):
    """Raised when a plugin or descriptor is malformed."""
    pass
