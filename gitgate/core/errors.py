"""Base exception classes for gitgate"""

from typing import Any, Dict, Optional


class GitGateError(Exception):
    """Base exception for all gitgate errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class UnsupportedHookError(GitGateError):
    """Raised when a hook name is not one gitgate knows how to run"""

    def __init__(self, hook_name: str):
        self.hook_name = hook_name
        super().__init__(
            f"Unsupported hook: {hook_name}",
            {"hook_name": hook_name},
        )


class HookArgumentError(GitGateError):
    """Raised when git-supplied hook arguments cannot be parsed"""

    def __init__(self, hook_name: str, reason: str):
        self.hook_name = hook_name
        self.reason = reason
        super().__init__(
            f"Invalid arguments for hook '{hook_name}': {reason}",
            {"hook_name": hook_name, "reason": reason},
        )


class DuplicatePluginError(GitGateError):
    """Raised when two plugins are registered under the same name"""

    def __init__(self, plugin_name: str):
        self.plugin_name = plugin_name
        super().__init__(
            f"Plugin already registered: {plugin_name}",
            {"plugin_name": plugin_name},
        )


class ConfigurationError(GitGateError):
    """Raised when configuration is invalid"""
    pass


class PluginLoadError(GitGateError):
    """Raised when a configured plugin cannot be imported or instantiated"""
    pass
