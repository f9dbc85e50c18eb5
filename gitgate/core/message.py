"""Commit message model shared by message checks and the report"""

from pathlib import Path
from typing import List, Optional, Tuple, Union

SCISSORS_LINE = "------------------------ >8 ------------------------"


def strip_comments(raw: str, comment_char: str = "#") -> str:
    """
    Drop the comment lines git leaves in the message file.

    git runs commit-msg before its own cleanup, so the file still holds the
    "# Please enter the commit message..." block and, with --verbose, a
    scissors line followed by the diff.
    """
    kept = []
    for line in raw.splitlines(keepends=True):
        if line.startswith(comment_char):
            if SCISSORS_LINE in line:
                break
            continue
        kept.append(line)
    return "".join(kept)


class CommitMessage:
    """
    An immutable commit message split into summary line and body.

    The split is computed on first access and cached; attributes cannot be
    reassigned, so the cached parts never go stale.
    """

    __slots__ = ("_raw", "_parsed")

    def __init__(self, raw: Optional[str] = None):
        object.__setattr__(self, "_raw", (raw or "").replace("\r\n", "\n"))
        object.__setattr__(self, "_parsed", None)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def from_file(cls, path: Union[str, Path], comment_char: str = "#") -> "CommitMessage":
        text = Path(path).read_text(encoding="utf-8", errors="replace")
        return cls(strip_comments(text, comment_char))

    @property
    def raw(self) -> str:
        return self._raw

    def _content(self) -> str:
        # blank and whitespace-only leading lines never make it into a commit
        lines = self._raw.split("\n")
        while lines and not lines[0].strip():
            lines.pop(0)
        return "\n".join(lines)

    def _parse(self) -> Tuple[str, str]:
        if self._parsed is None:
            first, _, rest = self._content().partition("\n")

            separator, newline, remainder = rest.partition("\n")
            if separator.strip() == "":
                body = remainder if newline else ""
            else:
                body = rest

            object.__setattr__(self, "_parsed", (first.rstrip(), body))
        return self._parsed

    @property
    def summary(self) -> str:
        """First line of the message, trailing whitespace trimmed"""
        return self._parse()[0]

    @property
    def body(self) -> str:
        """Everything after the summary, minus the conventional blank line"""
        return self._parse()[1]

    @property
    def is_empty(self) -> bool:
        return self._raw.strip() == ""

    @property
    def has_separator(self) -> bool:
        """True when the summary is followed by a blank line or nothing at all"""
        _, newline, rest = self._content().partition("\n")
        if not newline or not rest.strip():
            return True
        return rest.partition("\n")[0].strip() == ""

    def lines(self) -> List[str]:
        """Body lines without line terminators"""
        return self.body.splitlines()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommitMessage):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    def __repr__(self) -> str:
        return f"CommitMessage(summary={self.summary!r})"
