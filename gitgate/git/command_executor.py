"""Read-only Git command execution"""
import os
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from .git_types import CommandResult, GitCommandError, GitSecurityError, GitTimeoutError


class GitCommandExecutor:
    """Handles Git command execution only"""

    # Hooks only ever query the repository
    ALLOWED_COMMANDS = {
        'diff', 'rev-parse', 'rev-list', 'log', 'merge-base', 'cat-file',
        'show', 'ls-files', 'config', 'for-each-ref',
    }

    def __init__(
        self,
        git_binary: str = 'git',
        timeout: int = 60,
        cwd: Optional[Path] = None,
    ):
        """
        Initialize executor

        Args:
            git_binary: Path to git binary
            timeout: Command timeout in seconds
            cwd: Default working directory for commands
        """
        self.git_binary = git_binary
        self.timeout = timeout
        self.cwd = cwd

    def execute(
        self,
        args: List[str],
        cwd: Optional[Path] = None,
        input_data: Optional[bytes] = None,
        env: Optional[Dict[str, str]] = None,
        check: bool = True,
    ) -> CommandResult:
        """
        Execute Git command safely

        Args:
            args: Git command arguments (without 'git')
            cwd: Working directory
            input_data: Input to send to command
            env: Environment variables
            check: Raise GitCommandError on a non-zero exit code

        Returns:
            CommandResult with output

        Raises:
            GitSecurityError: If command is not allowed
            GitCommandError: If command fails
            GitTimeoutError: If command times out
        """
        if not args or args[0] not in self.ALLOWED_COMMANDS:
            raise GitSecurityError(f"Command not allowed: {args[0] if args else 'empty'}")

        self._validate_args_security(args)

        cmd = [self.git_binary] + args

        cmd_env = os.environ.copy()
        if env:
            cmd_env.update(env)

        cmd_env.update({
            'GIT_TERMINAL_PROMPT': '0',  # Disable prompts
            'GIT_ASKPASS': '/bin/echo',   # Disable password prompts
            'LC_ALL': 'C',                # Consistent output
        })

        try:
            completed = subprocess.run(
                cmd,
                input=input_data,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=cwd or self.cwd,
                env=cmd_env,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise GitTimeoutError(' '.join(args), self.timeout)

        result = CommandResult(
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

        if check and not result.success:
            raise GitCommandError(
                ' '.join(args),
                result.exit_code,
                completed.stderr.decode('utf-8', errors='replace').strip(),
            )

        return result

    def _validate_args_security(self, args: List[str]) -> None:
        """
        Validate command arguments for security

        Arguments are passed to exec directly, so only characters git itself
        cannot take in argv are rejected.

        Raises:
            GitSecurityError: If arguments are unsafe
        """
        for arg in args:
            if '\x00' in arg:
                raise GitSecurityError(f"NUL byte in argument: {arg!r}")
