"""Git-related type definitions and exceptions"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from gitgate.core.errors import GitGateError


# Hash of the empty tree, used as the diff base before the first commit
EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

# Index mode of a submodule entry; it points at a commit, not a blob
GITLINK_MODE = "160000"


def is_zero_sha(sha: Optional[str]) -> bool:
    """True for an absent sha or git's all-zero placeholder (any hash length)"""
    return not sha or set(sha) == {"0"}


class ChangeKind(str, Enum):
    """Kinds of staged change reported by git diff"""
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"

    @classmethod
    def from_status(cls, status: str) -> "ChangeKind":
        """Map a git --name-status letter (A, M, D, R100, C75, T...) to a kind"""
        letter = status[:1].upper()
        if letter in ("A", "C"):
            return cls.ADDED
        if letter == "D":
            return cls.DELETED
        if letter == "R":
            return cls.RENAMED
        return cls.MODIFIED


@dataclass
class CommandResult:
    """Result of Git command execution"""
    exit_code: int
    stdout: bytes
    stderr: bytes

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class FileChange:
    """One staged path and how it changed"""
    path: str
    kind: ChangeKind
    old_path: Optional[str] = None
    binary: bool = False
    submodule: bool = False

    @property
    def is_deleted(self) -> bool:
        return self.kind == ChangeKind.DELETED


@dataclass(frozen=True)
class RefUpdate:
    """Reference update information"""
    ref_name: str
    old_sha: str
    new_sha: str

    @property
    def is_delete(self) -> bool:
        return is_zero_sha(self.new_sha)

    @property
    def is_create(self) -> bool:
        return is_zero_sha(self.old_sha)

    @property
    def is_update(self) -> bool:
        return not (self.is_create or self.is_delete)

    @property
    def is_branch(self) -> bool:
        return self.ref_name.startswith("refs/heads/")

    @property
    def is_tag(self) -> bool:
        return self.ref_name.startswith("refs/tags/")

    @property
    def short_name(self) -> str:
        for prefix in ("refs/heads/", "refs/tags/"):
            if self.ref_name.startswith(prefix):
                return self.ref_name[len(prefix):]
        return self.ref_name


# Git-specific exceptions
class GitError(GitGateError):
    """Base class for Git errors"""
    pass


class GitCommandError(GitError):
    """Git command execution failed"""
    def __init__(self, command: str, exit_code: int, stderr: str):
        super().__init__(
            f"Git command '{command}' failed with exit code {exit_code}: {stderr}",
            {"command": command, "exit_code": exit_code},
        )
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr


class GitTimeoutError(GitError):
    """Git operation timed out"""
    def __init__(self, command: str, timeout: int):
        super().__init__(
            f"Git command '{command}' timed out after {timeout} seconds",
            {"command": command, "timeout": timeout},
        )
        self.command = command
        self.timeout = timeout


class GitSecurityError(GitError):
    """Security violation in Git operation"""
    pass
