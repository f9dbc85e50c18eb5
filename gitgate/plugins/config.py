"""Plugin configuration management system."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gitgate.core.errors import ConfigurationError
from gitgate.core.hooks import HookName
from gitgate.infrastructure.logging import get_logger
from gitgate.plugins.base import PluginPriority

logger = get_logger(__name__)


class PluginConfig(BaseModel):
    """Configuration for a single plugin."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(True, description="Whether plugin is enabled")
    hooks: Optional[List[HookName]] = Field(
        None, description="Restrict the plugin to these hooks"
    )
    disabled_hooks: List[HookName] = Field(
        default_factory=list, description="Hooks the plugin must not run on"
    )
    priority: Optional[int] = Field(None, description="Execution priority override")

    # Plugin-specific settings
    settings: Dict[str, Any] = Field(
        default_factory=dict, description="Plugin-specific settings"
    )

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, v):
        if isinstance(v, str) and not v.lstrip("-").isdigit():
            try:
                return PluginPriority[v.upper()].value
            except KeyError:
                names = ", ".join(p.name for p in PluginPriority)
                raise ValueError(f"unknown priority '{v}', use an integer or one of {names}")
        return v


class HookConfig(BaseModel):
    """Resolved configuration consulted by the engine."""

    model_config = ConfigDict(extra="forbid")

    disabled_plugins: List[str] = Field(
        default_factory=list, description="Plugins that never run"
    )
    plugin_modules: List[str] = Field(
        default_factory=list,
        description="Extra plugin classes to load, as 'module:Class' or 'module.Class'",
    )
    plugins: Dict[str, PluginConfig] = Field(
        default_factory=dict, description="Per-plugin configuration"
    )

    def is_plugin_enabled(self, plugin_name: str, hook_name: Union[str, HookName]) -> bool:
        """True unless configuration turns the plugin off for this hook."""
        if plugin_name in self.disabled_plugins:
            return False

        plugin_config = self.plugins.get(plugin_name)
        if plugin_config is None:
            return True
        if not plugin_config.enabled:
            return False

        hook = HookName.parse(hook_name)
        if plugin_config.hooks is not None and hook not in plugin_config.hooks:
            return False
        return hook not in plugin_config.disabled_hooks

    def plugin_priority_override(self, plugin_name: str) -> Optional[int]:
        plugin_config = self.plugins.get(plugin_name)
        return plugin_config.priority if plugin_config else None

    def settings_for(self, plugin_name: str) -> Dict[str, Any]:
        plugin_config = self.plugins.get(plugin_name)
        return dict(plugin_config.settings) if plugin_config else {}


class PluginConfigManager:
    """Locates, loads and validates the hook configuration file."""

    def __init__(self, config_file_name: str = ".gitgate.yml"):
        """
        Initialize configuration manager.

        Args:
            config_file_name: File name looked up at the repository top level
        """
        self.config_file_name = config_file_name

    def load_config_file(self, file_path: Union[str, Path]) -> HookConfig:
        """
        Load hook configuration from a file.

        Args:
            file_path: Path to configuration file (YAML or JSON)

        Returns:
            Validated HookConfig

        Raises:
            ConfigurationError: If configuration is invalid
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise ConfigurationError(f"Configuration file not found: {file_path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                if file_path.suffix == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Failed to read configuration from {file_path}: {e}",
                {"file": str(file_path)},
            )

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration in {file_path} must be a mapping",
                {"file": str(file_path)},
            )

        try:
            config = HookConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration in {file_path}: {e}",
                {"file": str(file_path)},
            )

        logger.debug(
            "Loaded hook configuration",
            file=str(file_path),
            plugins=list(config.plugins.keys()),
        )
        return config

    def load(
        self,
        repository_root: Optional[Path] = None,
        explicit_file: Optional[Path] = None,
    ) -> HookConfig:
        """
        Resolve the configuration for a repository.

        An explicit file must exist. Otherwise the configuration file at the
        repository top level is used when present, and defaults when not.
        """
        if explicit_file is not None:
            return self.load_config_file(explicit_file)

        if repository_root is not None:
            candidate = repository_root / self.config_file_name
            if candidate.exists():
                return self.load_config_file(candidate)

        logger.debug("No hook configuration found, using defaults", root=str(repository_root))
        return HookConfig()

    def export_schema(self, output_path: Path):
        """
        Export JSON schema for hook configuration.

        Args:
            output_path: Path to write schema file
        """
        schema = HookConfig.model_json_schema()

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(schema, f, indent=2)

        logger.info("Exported configuration schema", path=str(output_path))
