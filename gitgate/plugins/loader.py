"""Plugin loader for built-in and configured plugin classes."""

import importlib
import inspect
from typing import Dict, Iterable, List, Optional, Type

from gitgate.core.errors import PluginLoadError
from gitgate.git.query import GitQueryService
from gitgate.infrastructure.logging import get_logger
from gitgate.plugins.base import Plugin, PluginDescriptor
from gitgate.plugins.builtin import BUILTIN_PLUGINS
from gitgate.plugins.config import HookConfig

logger = get_logger(__name__)


class PluginLoader:
    """Resolves plugin classes and turns them into descriptors."""

    def __init__(self, builtin_plugins: Optional[Iterable[Type[Plugin]]] = None):
        """
        Initialize plugin loader.

        Args:
            builtin_plugins: Classes always available (defaults to BUILTIN_PLUGINS)
        """
        self.builtin_plugins = list(BUILTIN_PLUGINS if builtin_plugins is None else builtin_plugins)
        self._plugin_classes: Dict[str, Type[Plugin]] = {}

    def load_plugin_class(self, spec: str) -> Type[Plugin]:
        """
        Load a plugin class.

        Args:
            spec: "package.module:ClassName" or "package.module.ClassName"

        Returns:
            Plugin class

        Raises:
            PluginLoadError: If the class cannot be imported or is not a plugin
        """
        if spec in self._plugin_classes:
            return self._plugin_classes[spec]

        if ":" in spec:
            module_name, class_name = spec.split(":", 1)
        elif "." in spec:
            module_name, class_name = spec.rsplit(".", 1)
        else:
            raise PluginLoadError(f"Plugin spec must name a module and a class: {spec}")

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise PluginLoadError(f"Could not import plugin module {module_name}: {e}")

        plugin_class = getattr(module, class_name, None)
        if not (
            inspect.isclass(plugin_class)
            and issubclass(plugin_class, Plugin)
            and not inspect.isabstract(plugin_class)
        ):
            raise PluginLoadError(f"Plugin class not found: {spec}")
        if not plugin_class.name:
            raise PluginLoadError(f"Plugin class {spec} does not set a name")

        self._plugin_classes[spec] = plugin_class
        logger.debug("Loaded plugin class", spec=spec, name=plugin_class.name)
        return plugin_class

    def plugin_classes(self, config: HookConfig) -> List[Type[Plugin]]:
        """Built-in classes followed by the ones configuration adds."""
        classes = list(self.builtin_plugins)
        for spec in config.plugin_modules:
            classes.append(self.load_plugin_class(spec))
        return classes

    def build_descriptors(
        self,
        config: HookConfig,
        git: Optional[GitQueryService] = None,
    ) -> List[PluginDescriptor]:
        """
        Instantiate every known plugin with its settings block.

        Raises:
            PluginLoadError: If a configured class cannot be loaded
            PluginValidationError: If a plugin rejects its settings
        """
        descriptors = []
        for plugin_class in self.plugin_classes(config):
            plugin = plugin_class(config=config.settings_for(plugin_class.name), git=git)
            descriptors.append(plugin.descriptor())

        known = {descriptor.name for descriptor in descriptors}
        for name in config.plugins:
            if name not in known:
                logger.warning("Configuration for unknown plugin", plugin=name)

        return descriptors
