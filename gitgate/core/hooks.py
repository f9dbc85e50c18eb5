"""Supported git hooks and the shape of input each one receives"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, TextIO, Tuple

from gitgate.core.errors import UnsupportedHookError


class HookKind(str, Enum):
    """What a hook gives its plugins to look at"""

    FILES = "files"
    MESSAGE = "message"
    REFS = "refs"


class HookName(str, Enum):
    """Types of hook events"""

    PRE_COMMIT = "pre-commit"
    PRE_MERGE_COMMIT = "pre-merge-commit"
    PRE_APPLYPATCH = "pre-applypatch"
    COMMIT_MSG = "commit-msg"
    APPLYPATCH_MSG = "applypatch-msg"
    PRE_PUSH = "pre-push"
    PRE_RECEIVE = "pre-receive"
    UPDATE = "update"
    POST_RECEIVE = "post-receive"

    @property
    def kind(self) -> HookKind:
        return HOOK_KINDS[self]

    @property
    def reads_stdin(self) -> bool:
        return self in STDIN_HOOKS

    @classmethod
    def parse(cls, name: str) -> "HookName":
        """
        Resolve a hook name as git passes it (argv[0] basename).

        Raises:
            UnsupportedHookError: If the name is not a supported hook
        """
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedHookError(name)


HOOK_KINDS = {
    HookName.PRE_COMMIT: HookKind.FILES,
    HookName.PRE_MERGE_COMMIT: HookKind.FILES,
    HookName.PRE_APPLYPATCH: HookKind.FILES,
    HookName.COMMIT_MSG: HookKind.MESSAGE,
    HookName.APPLYPATCH_MSG: HookKind.MESSAGE,
    HookName.PRE_PUSH: HookKind.REFS,
    HookName.PRE_RECEIVE: HookKind.REFS,
    HookName.UPDATE: HookKind.REFS,
    HookName.POST_RECEIVE: HookKind.REFS,
}

STDIN_HOOKS = frozenset(
    {HookName.PRE_PUSH, HookName.PRE_RECEIVE, HookName.POST_RECEIVE}
)


@dataclass(frozen=True)
class HookInvocation:
    """One hook run exactly as git started it"""

    hook_name: str
    raw_arguments: Tuple[str, ...] = ()

    @classmethod
    def from_process(
        cls,
        hook_name: str,
        argv: Iterable[str],
        stdin: Optional[TextIO] = None,
    ) -> "HookInvocation":
        """
        Build an invocation from argv, appending stdin lines for the hooks
        git feeds on stdin (pre-push, pre-receive, post-receive).
        """
        arguments = list(argv)
        if hook_name in {hook.value for hook in STDIN_HOOKS}:
            stream = stdin if stdin is not None else sys.stdin
            arguments.extend(line.rstrip("\n") for line in stream if line.strip())
        return cls(hook_name=hook_name, raw_arguments=tuple(arguments))
