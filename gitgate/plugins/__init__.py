"""gitgate plugin system.

Plugins are checks registered against hook names and a capability (file,
message or ref check). The executor runs them against the hook context and
records one verdict per target.
"""

from gitgate.plugins.base import (
    Capability,
    CheckResult,
    Plugin,
    PluginDescriptor,
    PluginError,
    PluginMetadata,
    PluginPriority,
    PluginValidationError,
    Verdict,
    VerdictStatus,
)
from gitgate.plugins.executor import PluginExecutor
from gitgate.plugins.registry import PluginRegistry

__all__ = [
    "Capability",
    "CheckResult",
    "Plugin",
    "PluginDescriptor",
    "PluginError",
    "PluginMetadata",
    "PluginPriority",
    "PluginValidationError",
    "Verdict",
    "VerdictStatus",
    "PluginExecutor",
    "PluginRegistry",
]
