"""gitgate command-line entry point."""

import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from gitgate import __version__
from gitgate.cli.utils.context import CLIContext
from gitgate.cli.utils.output import OutputFormatter
from gitgate.core.config import get_settings
from gitgate.core.errors import GitGateError
from gitgate.core.hooks import HookInvocation, HookName
from gitgate.git.command_executor import GitCommandExecutor
from gitgate.git.query import GitQueryService
from gitgate.infrastructure.logging import bind_context, clear_context, get_logger, setup_logging
from gitgate.installer import HookInstaller
from gitgate.plugins.config import PluginConfigManager

app = typer.Typer(
    name="gitgate",
    help="gitgate - run pluggable checks from git hooks",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    pretty_exceptions_enable=False,
)

console = Console()
logger = get_logger(__name__)

ENGINE_ERROR_EXIT_CODE = 2


def version_callback(value: bool):
    """Display version and exit."""
    if value:
        console.print(f"gitgate v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging",
    ),
    output_format: str = typer.Option(
        "text",
        "--output",
        "-o",
        help="Output format: text, json, yaml",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the hook configuration file",
    ),
):
    """
    gitgate

    Runs the configured plugins for a git hook and decides whether git may proceed.
    """
    settings = get_settings()
    if debug:
        settings.log_level = "DEBUG"
    setup_logging(settings)

    ctx.obj = CLIContext(
        debug=debug,
        settings=settings,
        formatter=OutputFormatter(output_format, Console(stderr=True)),
        console=console,
        config_file=config_file,
    )


def _selected_hooks(hooks: Optional[List[str]]) -> List[HookName]:
    return [HookName.parse(hook) for hook in hooks or []]


def _hooks_dir(cli_ctx: CLIContext, repo: Optional[Path]) -> Path:
    executor = GitCommandExecutor(
        git_binary=cli_ctx.settings.git_binary_path,
        timeout=cli_ctx.settings.git_timeout_seconds,
        cwd=repo,
    )
    return GitQueryService(executor, repo_path=repo).hooks_dir()


@app.command(
    "run",
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def run_command(
    ctx: typer.Context,
    hook: str = typer.Argument(..., help="Hook name as git invokes it"),
    args: Optional[List[str]] = typer.Argument(None, help="Arguments git passed to the hook"),
    repo: Optional[Path] = typer.Option(None, "--repo", "-r", help="Repository path"),
    verbose: bool = typer.Option(False, "--verbose", help="Print every verdict"),
):
    """
    Run the plugins for one hook invocation.

    Exits 0 when git may proceed, 1 when a plugin rejected the change and
    2 when the hook itself could not run.

    Examples:
        gitgate run pre-commit
        gitgate run commit-msg .git/COMMIT_EDITMSG
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = cli_ctx.formatter
    clear_context()
    bind_context(repository=str(repo or Path.cwd()))

    try:
        HookName.parse(hook)
        invocation = HookInvocation.from_process(hook, args or [], sys.stdin)
        engine = cli_ctx.create_engine(repo)
        result = engine.run(invocation)
    except GitGateError as e:
        logger.error("Hook could not run", hook=hook, error=e.message)
        formatter.print_error(e.message)
        raise typer.Exit(ENGINE_ERROR_EXIT_CODE)

    formatter.print_report(result, verbose=verbose or cli_ctx.debug)
    raise typer.Exit(result.exit_code)


@app.command("install")
def install_command(
    ctx: typer.Context,
    hooks: Optional[List[str]] = typer.Option(
        None, "--hook", "-k", help="Hook to install (repeatable, default: all)"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite hooks gitgate did not write"),
    repo: Optional[Path] = typer.Option(None, "--repo", "-r", help="Repository path"),
):
    """
    Install gitgate hook scripts into a repository.

    Examples:
        gitgate install
        gitgate install --hook pre-commit --hook commit-msg
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = cli_ctx.formatter

    try:
        selected = _selected_hooks(hooks)
        hooks_dir = _hooks_dir(cli_ctx, repo)
        report = HookInstaller(hooks_dir).install(selected, force=force)
    except (GitGateError, OSError) as e:
        formatter.print_error(f"Install failed: {e}")
        raise typer.Exit(1)

    for hook in report.changed:
        formatter.print_success(f"Installed {hook.value}")
    for hook in report.skipped:
        formatter.print_warning(f"Skipped {hook.value}: existing hook not managed by gitgate (use --force)")


@app.command("uninstall")
def uninstall_command(
    ctx: typer.Context,
    hooks: Optional[List[str]] = typer.Option(
        None, "--hook", "-k", help="Hook to remove (repeatable, default: all)"
    ),
    repo: Optional[Path] = typer.Option(None, "--repo", "-r", help="Repository path"),
):
    """Remove gitgate hook scripts; hooks it did not write are kept."""
    cli_ctx: CLIContext = ctx.obj
    formatter = cli_ctx.formatter

    try:
        selected = _selected_hooks(hooks)
        hooks_dir = _hooks_dir(cli_ctx, repo)
        report = HookInstaller(hooks_dir).uninstall(selected)
    except (GitGateError, OSError) as e:
        formatter.print_error(f"Uninstall failed: {e}")
        raise typer.Exit(1)

    for hook in report.changed:
        formatter.print_success(f"Removed {hook.value}")
    for hook in report.skipped:
        formatter.print_warning(f"Kept {hook.value}: not managed by gitgate")


@app.command("plugins")
def plugins_command(
    ctx: typer.Context,
    repo: Optional[Path] = typer.Option(None, "--repo", "-r", help="Repository path"),
):
    """List the plugins available in a repository, in run order."""
    cli_ctx: CLIContext = ctx.obj

    try:
        registry = cli_ctx.create_engine(repo).registry
    except GitGateError as e:
        cli_ctx.formatter.print_error(e.message)
        raise typer.Exit(ENGINE_ERROR_EXIT_CODE)

    rows = []
    for name in registry.list_plugins():
        descriptor = registry.get(name)
        rows.append(
            {
                "name": descriptor.name,
                "capability": descriptor.capability.value,
                "hooks": sorted(hook.value for hook in descriptor.applicable_hooks),
                "priority": registry.effective_priority(descriptor),
                "description": descriptor.description,
            }
        )
    rows.sort(key=lambda row: (row["priority"], row["name"]))

    formatter = OutputFormatter(cli_ctx.formatter.format.value, cli_ctx.console)
    formatter.print_list(rows, title="Plugins")


@app.command("schema")
def schema_command(
    ctx: typer.Context,
    output: Path = typer.Argument(..., help="File to write the JSON schema to"),
):
    """Export the JSON schema of the hook configuration file."""
    cli_ctx: CLIContext = ctx.obj

    try:
        PluginConfigManager(cli_ctx.settings.config_file_name).export_schema(output)
    except OSError as e:
        cli_ctx.formatter.print_error(f"Could not write schema: {e}")
        raise typer.Exit(1)

    cli_ctx.formatter.print_success(f"Schema written to {output}")


if __name__ == "__main__":
    app()
