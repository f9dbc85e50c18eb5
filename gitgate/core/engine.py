"""Hook engine orchestrating one invocation end to end."""

from pathlib import Path
from typing import Optional

from gitgate.core.config import Settings, get_settings
from gitgate.core.context import ContextBuilder, HookContext
from gitgate.core.hooks import HookInvocation
from gitgate.core.results import RunResult, aggregate
from gitgate.git.command_executor import GitCommandExecutor
from gitgate.git.query import GitQueryService
from gitgate.infrastructure.logging import bind_context, get_logger, unbind_context
from gitgate.plugins.config import HookConfig, PluginConfigManager
from gitgate.plugins.executor import PluginExecutor
from gitgate.plugins.loader import PluginLoader
from gitgate.plugins.registry import PluginRegistry

logger = get_logger(__name__)


class HookEngine:
    """
    Builds the context, picks the plugins, runs them and folds the verdicts.

    Context building and registry construction may raise; once plugins start
    running, every applicable plugin runs and the outcome is a RunResult.
    """

    def __init__(
        self,
        registry: PluginRegistry,
        builder: ContextBuilder,
        executor: Optional[PluginExecutor] = None,
    ):
        self.registry = registry
        self.builder = builder
        self.executor = executor or PluginExecutor()

    @classmethod
    def create(
        cls,
        repo_path: Optional[Path] = None,
        settings: Optional[Settings] = None,
        config_file: Optional[Path] = None,
        loader: Optional[PluginLoader] = None,
    ) -> "HookEngine":
        """
        Assemble an engine for the repository at repo_path (or the current
        directory), loading configuration and all plugins.

        Raises:
            ConfigurationError: If the configuration file is invalid
            PluginError: If a plugin cannot be loaded or rejects its settings
            DuplicatePluginError: If two plugins share a name
            GitError: If the repository cannot be queried
        """
        settings = settings or get_settings()
        executor = GitCommandExecutor(
            git_binary=settings.git_binary_path,
            timeout=settings.git_timeout_seconds,
            cwd=repo_path,
        )
        git = GitQueryService(executor, repo_path=repo_path)

        config = cls.load_config(git, settings, config_file)
        loader = loader or PluginLoader()
        registry = PluginRegistry(loader.build_descriptors(config, git), config)

        logger.debug("Engine ready", plugins=registry.list_plugins())
        return cls(registry, ContextBuilder(git))

    @staticmethod
    def load_config(
        git: GitQueryService,
        settings: Settings,
        config_file: Optional[Path] = None,
    ) -> HookConfig:
        explicit = config_file or settings.config_file
        manager = PluginConfigManager(settings.config_file_name)
        if explicit is not None:
            return manager.load(explicit_file=explicit)
        return manager.load(repository_root=git.top_level())

    def run(self, invocation: HookInvocation) -> RunResult:
        """
        Run one hook invocation.

        Raises:
            UnsupportedHookError: If the hook name is unknown (no plugin runs)
            HookArgumentError: If git's arguments do not fit the hook
        """
        bind_context(hook=invocation.hook_name)
        try:
            context = self.builder.build(invocation.hook_name, invocation.raw_arguments)
            return self.evaluate(context)
        finally:
            unbind_context("hook")

    def evaluate(self, context: HookContext) -> RunResult:
        """Run the applicable plugins against an already built context."""
        plugins = self.registry.applicable_plugins(context.hook_name, context)
        verdicts = self.executor.run(plugins, context)
        result = aggregate(verdicts, context.hook_name)

        logger.info(
            "Hook finished",
            hook=context.hook_name.value,
            overall=result.overall.value,
            plugins=len(plugins),
            failed=result.failed_plugins,
            errored=result.errored_plugins,
        )
        return result
