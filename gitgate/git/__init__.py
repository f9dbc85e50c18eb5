"""Git query layer"""
from .command_executor import GitCommandExecutor
from .git_types import (
    EMPTY_TREE_SHA,
    ChangeKind,
    CommandResult,
    FileChange,
    GitCommandError,
    GitError,
    GitSecurityError,
    GitTimeoutError,
    RefUpdate,
    is_zero_sha,
)
from .query import GitQueryService

__all__ = [
    'GitCommandExecutor',
    'GitQueryService',
    'EMPTY_TREE_SHA',
    'ChangeKind',
    'CommandResult',
    'FileChange',
    'RefUpdate',
    'is_zero_sha',
    'GitError',
    'GitCommandError',
    'GitTimeoutError',
    'GitSecurityError',
]
