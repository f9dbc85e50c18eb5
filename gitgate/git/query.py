"""Structured read-only queries against the repository a hook runs in"""
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from gitgate.infrastructure.logging import get_logger

from .command_executor import GitCommandExecutor
from .git_types import (
    EMPTY_TREE_SHA,
    GITLINK_MODE,
    ChangeKind,
    FileChange,
    GitCommandError,
    RefUpdate,
    is_zero_sha,
)

logger = get_logger(__name__)


class GitQueryService:
    """Answers "what changed" questions for one hook invocation"""

    def __init__(
        self,
        executor: Optional[GitCommandExecutor] = None,
        repo_path: Optional[Path] = None,
    ):
        self.executor = executor or GitCommandExecutor(cwd=repo_path)
        self.repo_path = repo_path

    def _run(self, args: List[str], check: bool = True):
        return self.executor.execute(args, cwd=self.repo_path, check=check)

    def has_head(self) -> bool:
        """True once the repository has at least one commit on HEAD"""
        result = self._run(["rev-parse", "--verify", "--quiet", "HEAD"], check=False)
        return result.success

    def top_level(self) -> Path:
        """Work tree root, or the git directory for bare repositories"""
        result = self._run(["rev-parse", "--show-toplevel"], check=False)
        if result.success and result.text.strip():
            return Path(result.text.strip())
        result = self._run(["rev-parse", "--absolute-git-dir"])
        return Path(result.text.strip())

    def git_dir(self) -> Path:
        result = self._run(["rev-parse", "--absolute-git-dir"])
        return Path(result.text.strip())

    def hooks_dir(self) -> Path:
        """Directory git runs hooks from, honouring core.hooksPath"""
        result = self._run(["rev-parse", "--git-path", "hooks"])
        path = Path(result.text.strip())
        if not path.is_absolute():
            path = (self.repo_path or Path.cwd()) / path
        return path

    def changed_files(self, base: str = "HEAD", head: Optional[str] = None) -> List[FileChange]:
        """
        List changed paths between two trees.

        Args:
            base: Tree-ish to diff against. "HEAD" falls back to the empty
                tree when the repository has no commits yet.
            head: Tree-ish to diff to, or None for the index (staged changes)

        Returns:
            File changes in git's path order
        """
        if base == "HEAD" and not self.has_head():
            base = EMPTY_TREE_SHA

        revs = [base] if head is None else [base, head]
        cached = ["--cached"] if head is None else []

        status = self._run(["diff", *cached, "--raw", "-z", "-M", *revs])
        numstat = self._run(["diff", *cached, "--numstat", "-z", "-M", *revs])

        binary_paths = self._parse_binary_paths(numstat.text)
        changes = []
        for kind, path, old_path, submodule in self._parse_raw(status.text):
            changes.append(
                FileChange(
                    path=path,
                    kind=kind,
                    old_path=old_path,
                    binary=binary_paths.get(path, False),
                    submodule=submodule,
                )
            )

        logger.debug("changed_files", base=base, head=head, count=len(changes))
        return changes

    @staticmethod
    def _parse_raw(output: str):
        # each entry is ":<old-mode> <new-mode> <old-sha> <new-sha> <status>"
        # followed by one path, or two for renames and copies
        tokens = output.split("\0")
        i = 0
        while i < len(tokens):
            entry = tokens[i]
            if not entry:
                i += 1
                continue
            old_mode, new_mode, _, _, status = entry.lstrip(":").split()
            submodule = GITLINK_MODE in (old_mode, new_mode)
            kind = ChangeKind.from_status(status)
            if status[:1] in ("R", "C"):
                old_path, path = tokens[i + 1], tokens[i + 2]
                i += 3
                yield kind, path, old_path if kind == ChangeKind.RENAMED else None, submodule
            else:
                yield kind, tokens[i + 1], None, submodule
                i += 2

    @staticmethod
    def _parse_binary_paths(output: str) -> Dict[str, bool]:
        # numstat prints "-\t-\t" for binary blobs; renames put the paths in
        # the two following NUL-separated fields
        binary = {}
        tokens = output.split("\0")
        i = 0
        while i < len(tokens):
            entry = tokens[i]
            if not entry:
                i += 1
                continue
            added, deleted, path = entry.split("\t", 2)
            if path:
                i += 1
            else:
                path = tokens[i + 2]
                i += 3
            binary[path] = added == "-" and deleted == "-"
        return binary

    def read_commit_message(self, path: str) -> str:
        """Read the message file git hands to commit-msg hooks"""
        message_path = Path(path)
        if not message_path.is_absolute() and self.repo_path:
            message_path = self.repo_path / message_path
        return message_path.read_text(encoding="utf-8", errors="replace")

    def comment_char(self) -> str:
        """Prefix of the comment lines git writes into message files (core.commentChar)"""
        result = self._run(["config", "--get", "core.commentChar"], check=False)
        value = result.text.strip() if result.success else ""
        # "auto" lets git pick a character per message; it still offers "#" first
        if not value or value == "auto":
            return "#"
        return value

    def ref_updates(self, lines: Iterable[str]) -> List[RefUpdate]:
        """
        Parse "<old-sha> <new-sha> <ref-name>" lines as git feeds them to
        pre-receive and post-receive on stdin.

        Raises:
            ValueError: If a non-blank line does not have three fields
        """
        updates = []
        for line in lines:
            fields = line.split()
            if not fields:
                continue
            if len(fields) != 3:
                raise ValueError(f"expected '<old> <new> <ref>', got {line.strip()!r}")
            old_sha, new_sha, ref_name = fields
            updates.append(RefUpdate(ref_name=ref_name, old_sha=old_sha, new_sha=new_sha))
        return updates

    def commits_between(self, old_sha: str, new_sha: str) -> List[str]:
        """
        Commits introduced by moving a ref from old_sha to new_sha, oldest first.

        For a new ref only commits not reachable from any existing ref count.
        """
        if is_zero_sha(new_sha):
            return []
        if is_zero_sha(old_sha):
            args = ["rev-list", "--reverse", new_sha, "--not", "--all"]
        else:
            args = ["rev-list", "--reverse", f"{old_sha}..{new_sha}"]
        return [line for line in self._run(args).text.splitlines() if line]

    def commit_message(self, sha: str) -> str:
        return self._run(["log", "-1", "--format=%B", sha]).text

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        """True when ancestor is reachable from descendant (a fast-forward)"""
        result = self._run(["merge-base", "--is-ancestor", ancestor, descendant], check=False)
        if result.exit_code in (0, 1):
            return result.exit_code == 0
        raise GitCommandError(
            f"merge-base --is-ancestor {ancestor} {descendant}",
            result.exit_code,
            result.stderr.decode("utf-8", errors="replace").strip(),
        )

    def blob_size(self, path: str, rev: str = "") -> int:
        """Size in bytes of a blob; the staged copy when rev is empty"""
        return int(self._run(["cat-file", "-s", f"{rev}:{path}"]).text.strip())

    def staged_content(self, path: str, rev: str = "") -> bytes:
        """Blob contents; the staged copy when rev is empty"""
        return self._run(["cat-file", "blob", f"{rev}:{path}"]).stdout
