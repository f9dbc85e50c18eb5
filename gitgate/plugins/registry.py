"""Plugin registry for the plugins available to one process."""

from typing import Dict, Iterable, List, Optional

from gitgate.core.context import HookContext
from gitgate.core.errors import DuplicatePluginError
from gitgate.core.hooks import HookName
from gitgate.infrastructure.logging import get_logger
from gitgate.plugins.base import PluginDescriptor
from gitgate.plugins.config import HookConfig

logger = get_logger(__name__)


class PluginRegistry:
    """
    Registry of plugin descriptors.

    Built once at startup from an explicit descriptor list and only read
    afterwards. The optional config is consulted by plugin name to exclude
    plugins and override priorities; it is never inspected beyond that.
    """

    def __init__(
        self,
        descriptors: Iterable[PluginDescriptor] = (),
        config: Optional[HookConfig] = None,
    ):
        """
        Initialize plugin registry.

        Raises:
            DuplicatePluginError: If two descriptors share a name
        """
        self._plugins: Dict[str, PluginDescriptor] = {}
        self.config = config

        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: PluginDescriptor) -> None:
        """
        Register a plugin.

        Args:
            descriptor: Plugin descriptor to register

        Raises:
            DuplicatePluginError: If plugin with same name already registered
        """
        if descriptor.name in self._plugins:
            raise DuplicatePluginError(descriptor.name)

        self._plugins[descriptor.name] = descriptor

        logger.debug(
            "Registered plugin",
            name=descriptor.name,
            capability=descriptor.capability.value,
            priority=descriptor.priority,
        )

    def get(self, plugin_name: str) -> Optional[PluginDescriptor]:
        return self._plugins.get(plugin_name)

    def list_plugins(self) -> List[str]:
        """Registered plugin names in run order (ignoring hook filters)."""
        return [descriptor.name for descriptor in self._sorted(self._plugins.values())]

    def effective_priority(self, descriptor: PluginDescriptor) -> int:
        if self.config is not None:
            override = self.config.plugin_priority_override(descriptor.name)
            if override is not None:
                return override
        return descriptor.priority

    def is_enabled(self, descriptor: PluginDescriptor, hook_name: HookName) -> bool:
        if self.config is None:
            return True
        return self.config.is_plugin_enabled(descriptor.name, hook_name)

    def applicable_plugins(self, hook_name, context: HookContext) -> List[PluginDescriptor]:
        """
        Plugins that run for this hook and context, in run order.

        A plugin applies when it declares the hook, its capability matches the
        context variant, and configuration does not exclude it. Order is by
        effective priority, then name.
        """
        hook = HookName.parse(hook_name)
        applicable = [
            descriptor
            for descriptor in self._plugins.values()
            if hook in descriptor.applicable_hooks
            and descriptor.capability.matches(context)
            and self.is_enabled(descriptor, hook)
        ]
        ordered = self._sorted(applicable)

        logger.debug(
            "Resolved applicable plugins",
            hook=hook.value,
            plugins=[descriptor.name for descriptor in ordered],
        )
        return ordered

    def _sorted(self, descriptors: Iterable[PluginDescriptor]) -> List[PluginDescriptor]:
        resolved = []
        for descriptor in descriptors:
            priority = self.effective_priority(descriptor)
            if priority != descriptor.priority:
                descriptor = descriptor.with_priority(priority)
            resolved.append(descriptor)
        return sorted(resolved, key=lambda d: (d.priority, d.name))

    def __len__(self) -> int:
        return len(self._plugins)

    def __contains__(self, plugin_name: object) -> bool:
        return plugin_name in self._plugins
