"""Typed hook contexts and the builder that produces them"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from gitgate.core.errors import HookArgumentError
from gitgate.core.hooks import HookKind, HookName
from gitgate.core.message import CommitMessage, strip_comments
from gitgate.git.git_types import FileChange, RefUpdate
from gitgate.git.query import GitQueryService
from gitgate.infrastructure.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FileListContext:
    """Staged file changes for pre-commit style hooks"""

    hook_name: HookName
    files: Tuple[FileChange, ...] = ()

    def targets(self) -> Tuple[FileChange, ...]:
        return self.files


@dataclass(frozen=True)
class MessageContext:
    """The commit message for commit-msg style hooks"""

    hook_name: HookName
    message: CommitMessage
    path: Optional[str] = None

    def targets(self) -> Tuple[CommitMessage, ...]:
        return (self.message,)


@dataclass(frozen=True)
class RefUpdateContext:
    """Ref moves for push and receive hooks"""

    hook_name: HookName
    updates: Tuple[RefUpdate, ...] = ()
    remote_name: Optional[str] = None
    remote_url: Optional[str] = None

    def targets(self) -> Tuple[RefUpdate, ...]:
        return self.updates


HookContext = Union[FileListContext, MessageContext, RefUpdateContext]
Target = Union[FileChange, CommitMessage, RefUpdate]


def describe_target(target: Optional[Target]) -> Optional[str]:
    """Label used for a target in verdicts and the report"""
    if isinstance(target, FileChange):
        return target.path
    if isinstance(target, RefUpdate):
        return target.ref_name
    return None


class ContextBuilder:
    """Turns a hook name and its git-supplied arguments into a HookContext"""

    def __init__(self, git: GitQueryService):
        self.git = git

    def build(self, hook_name: str, raw_arguments: Sequence[str] = ()) -> HookContext:
        """
        Build the context for one hook invocation.

        Raises:
            UnsupportedHookError: If hook_name is not a supported hook
            HookArgumentError: If the arguments do not fit the hook
        """
        hook = HookName.parse(hook_name)
        arguments = list(raw_arguments)

        if hook.kind == HookKind.FILES:
            context = self._build_file_list(hook)
        elif hook.kind == HookKind.MESSAGE:
            context = self._build_message(hook, arguments)
        else:
            context = self._build_ref_updates(hook, arguments)

        logger.debug(
            "context_built",
            hook=hook.value,
            context_type=type(context).__name__,
            targets=len(context.targets()),
        )
        return context

    def _build_file_list(self, hook: HookName) -> FileListContext:
        files = self.git.changed_files("HEAD", None)
        return FileListContext(hook_name=hook, files=tuple(files))

    def _build_message(self, hook: HookName, arguments: list) -> MessageContext:
        if not arguments:
            raise HookArgumentError(hook.value, "missing commit message file path")

        path = arguments[0]
        try:
            raw = self.git.read_commit_message(path)
        except OSError as e:
            raise HookArgumentError(hook.value, f"cannot read message file {path}: {e}")

        return MessageContext(
            hook_name=hook,
            message=CommitMessage(strip_comments(raw, self.git.comment_char())),
            path=path,
        )

    def _build_ref_updates(self, hook: HookName, arguments: list) -> RefUpdateContext:
        if hook == HookName.UPDATE:
            if len(arguments) != 3:
                raise HookArgumentError(hook.value, "expected <ref> <old-sha> <new-sha>")
            ref_name, old_sha, new_sha = arguments
            update = RefUpdate(ref_name=ref_name, old_sha=old_sha, new_sha=new_sha)
            return RefUpdateContext(hook_name=hook, updates=(update,))

        if hook == HookName.PRE_PUSH:
            return self._build_push(hook, arguments)

        try:
            updates = self.git.ref_updates(arguments)
        except ValueError as e:
            raise HookArgumentError(hook.value, str(e))
        return RefUpdateContext(hook_name=hook, updates=tuple(updates))

    def _build_push(self, hook: HookName, arguments: list) -> RefUpdateContext:
        if len(arguments) < 2:
            raise HookArgumentError(hook.value, "expected <remote-name> <remote-url>")

        remote_name, remote_url, lines = arguments[0], arguments[1], arguments[2:]
        updates = []
        for line in lines:
            fields = line.split()
            if not fields:
                continue
            if len(fields) != 4:
                raise HookArgumentError(
                    hook.value,
                    f"expected '<local-ref> <local-sha> <remote-ref> <remote-sha>', got {line!r}",
                )
            _, local_sha, remote_ref, remote_sha = fields
            # the remote side is what moves, from its current sha to ours
            updates.append(RefUpdate(ref_name=remote_ref, old_sha=remote_sha, new_sha=local_sha))

        return RefUpdateContext(
            hook_name=hook,
            updates=tuple(updates),
            remote_name=remote_name,
            remote_url=remote_url,
        )
