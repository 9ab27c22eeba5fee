from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, NamedTuple

from .models import (
    ChangedFile,
    Commit,
    DiffFile,
    DiffHunk,
    DiffStats,
    FileChangeStatus,
    GitStatus,
    ParsedDiff,
)

# Chosen so arbitrary commit text (tabs, pipes, newlines) cannot collide.
FIELD_DELIMITER = "\x1e"
COMMIT_DELIMITER = "\x1f"
LOG_FIELDS = ("%H", "%h", "%an", "%ae", "%aI", "%s", "%b")
LOG_FORMAT = FIELD_DELIMITER.join(LOG_FIELDS) + COMMIT_DELIMITER

_QUOTED_PATH = r'"(?:[^"\\]|\\.)*"'
_QUOTED_HEADER_RE = re.compile(rf"^({_QUOTED_PATH}|\S+) ({_QUOTED_PATH}|\S+)$")
_UNQUOTED_HEADER_RE = re.compile(r"^a/(.+?) b/(.+)$")
_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
DEV_NULL = "/dev/null"


def unquote_path(path: str) -> str:
    """Undo git's C-style quoting of paths with spaces or special bytes."""
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        inner = path[1:-1]
        raw = inner.encode("utf-8").decode("unicode_escape")
        return raw.encode("latin-1").decode("utf-8", errors="replace")
    return path


def _strip_prefix(path: str, prefix: str) -> str:
    return path[len(prefix):] if path.startswith(prefix) else path


def parse_diff_header(line: str) -> tuple[str, str] | None:
    """
    Split a `diff --git a/<old> b/<new>` line into (old, new).

    Either side may be C-quoted. Unquoted paths may contain spaces, even
    " b/"; when both sides name the same file the line splits at its
    midpoint. Returns None when the line cannot be split; the `---`/`+++`
    and `rename` lines that follow still name the file.
    """
    rest = line[len("diff --git "):]

    if '"' in rest:
        m = _QUOTED_HEADER_RE.match(rest)
        if not m:
            return None
        old, new = unquote_path(m.group(1)), unquote_path(m.group(2))
        return _strip_prefix(old, "a/"), _strip_prefix(new, "b/")

    if rest.startswith("a/") and (len(rest) - 5) % 2 == 0:
        n = (len(rest) - 5) // 2
        old, sep, new = rest[2 : 2 + n], rest[2 + n : 5 + n], rest[5 + n :]
        if sep == " b/" and old == new:
            return old, new

    m = _UNQUOTED_HEADER_RE.match(rest)
    if m:
        return m.group(1), m.group(2)
    return None


def _marker_path(value: str, prefix: str) -> str | None:
    """Path from a `--- a/x` / `+++ b/x` line, or None for /dev/null."""
    # git appends a tab after names containing spaces
    value = value.rstrip("\t")
    if value == DEV_NULL:
        return None
    return _strip_prefix(unquote_path(value), prefix)


@dataclass(frozen=True)
class PorcelainEntry:
    xy: str
    path: str
    orig_path: str | None = None


def parse_status_porcelain(lines: Iterable[str]) -> list[PorcelainEntry]:
    """
    Parses `git status --porcelain` (v1) lines:
      XY <path>
      XY <orig> -> <path>   (rename/copy)
    """
    out: list[PorcelainEntry] = []
    for raw in lines:
        line = raw.rstrip("\n")
        if len(line) < 4:
            continue
        xy = line[:2]
        rest = line[3:]
        if xy[0] in "RC" and " -> " in rest:
            a, b = rest.split(" -> ", 1)
            out.append(PorcelainEntry(xy=xy, path=unquote_path(b), orig_path=unquote_path(a)))
        else:
            out.append(PorcelainEntry(xy=xy, path=unquote_path(rest)))
    return out


def classify_status(entries: Iterable[PorcelainEntry]) -> GitStatus:
    """
    Index column (X) drives `staged`; worktree column (Y) drives
    `modified`/`deleted`; `??` is untracked. A staged deletion (`D `) is
    staged, not deleted.
    """
    staged: list[str] = []
    modified: list[str] = []
    untracked: list[str] = []
    deleted: list[str] = []

    for e in entries:
        if e.xy == "??":
            untracked.append(e.path)
            continue
        if e.xy == "!!":
            continue

        index_status, worktree_status = e.xy[0], e.xy[1]

        if index_status not in (" ", "?"):
            staged.append(e.path)

        if worktree_status not in (" ", "?"):
            if worktree_status == "D":
                if e.path not in deleted:
                    deleted.append(e.path)
            else:
                modified.append(e.path)

    return GitStatus(staged=staged, modified=modified, untracked=untracked, deleted=deleted)


def changed_files_from_status(status: GitStatus) -> list[ChangedFile]:
    files: list[ChangedFile] = []
    files.extend(ChangedFile(path=p, status="staged") for p in status.staged)
    files.extend(ChangedFile(path=p, status="modified") for p in status.modified)
    files.extend(ChangedFile(path=p, status="untracked") for p in status.untracked)
    files.extend(ChangedFile(path=p, status="deleted") for p in status.deleted)
    return files


class AheadBehind(NamedTuple):
    """Fields follow git's column order; read them by name."""

    behind: int = 0
    ahead: int = 0


def parse_ahead_behind(output: str) -> AheadBehind:
    """`rev-list --left-right --count <upstream>...HEAD` prints "behind\\tahead"."""
    parts = output.strip().split()
    if len(parts) != 2:
        return AheadBehind()
    try:
        behind, ahead = int(parts[0]), int(parts[1])
    except ValueError:
        return AheadBehind()
    return AheadBehind(behind=max(behind, 0), ahead=max(ahead, 0))


def _parse_date(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return datetime.now(timezone.utc)


def parse_log(output: str) -> list[Commit]:
    """
    Parses output of `git log --pretty=format:<LOG_FORMAT>`. Records with
    fewer than 7 fields are skipped.
    """
    commits: list[Commit] = []
    for record in output.split(COMMIT_DELIMITER):
        if not record.strip():
            continue
        fields = record.split(FIELD_DELIMITER)
        if len(fields) < len(LOG_FIELDS):
            continue

        hash_, short_hash, author, email, date_str, subject = fields[:6]
        body = FIELD_DELIMITER.join(fields[6:]).rstrip("\n")

        commits.append(
            Commit(
                hash=hash_.strip(),
                short_hash=short_hash.strip(),
                author=author,
                email=email,
                date=_parse_date(date_str),
                message=subject + "\n\n" + body,
                subject=subject,
                body=body,
            )
        )
    return commits


@dataclass
class _FileBuilder:
    path: str
    old_path: str | None
    status: FileChangeStatus = "modified"
    additions: int = 0
    deletions: int = 0
    binary: bool = False
    hunks: list[DiffHunk] = field(default_factory=list)

    def freeze(self) -> DiffFile:
        old_path = self.old_path
        if self.status == "added" or old_path == self.path:
            old_path = None
        return DiffFile(
            path=self.path,
            old_path=old_path,
            status=self.status,
            additions=self.additions,
            deletions=self.deletions,
            hunks=[] if self.binary else list(self.hunks),
            binary=self.binary,
        )


def parse_unified_diff(output: str) -> list[DiffFile]:
    """
    Line-by-line parse of `git diff --patch` output with a file cursor and a
    hunk cursor. Omitted hunk counts default to 1.
    """
    files: list[DiffFile] = []
    current: _FileBuilder | None = None
    hunk: DiffHunk | None = None

    def flush() -> None:
        nonlocal current, hunk
        if current is not None and current.path:
            if hunk is not None:
                current.hunks.append(hunk)
            files.append(current.freeze())
        current, hunk = None, None

    for line in output.split("\n"):
        if line.startswith("diff --git "):
            flush()
            old_path, new_path = parse_diff_header(line) or ("", "")
            current = _FileBuilder(path=new_path, old_path=old_path or None)
            continue

        if current is None:
            continue

        if hunk is None:
            if line.startswith("new file mode"):
                current.status = "added"
                continue
            if line.startswith("deleted file mode"):
                current.status = "deleted"
                continue
            if line.startswith("rename from "):
                current.status = "renamed"
                current.old_path = unquote_path(line[len("rename from "):])
                continue
            if line.startswith("rename to "):
                current.path = unquote_path(line[len("rename to "):])
                continue
            if line.startswith("Binary files") or line.startswith("GIT binary patch"):
                current.binary = True
                continue
            if line.startswith("--- "):
                old_path = _marker_path(line[4:], "a/")
                if old_path is not None:
                    current.old_path = old_path
                    if not current.path:
                        current.path = old_path
                continue
            if line.startswith("+++ "):
                new_path = _marker_path(line[4:], "b/")
                if new_path is not None:
                    current.path = new_path
                continue

        if line.startswith("@@"):
            m = _HUNK_HEADER_RE.match(line)
            if m:
                if hunk is not None:
                    current.hunks.append(hunk)
                hunk = DiffHunk(
                    old_start=int(m.group(1)),
                    old_lines=int(m.group(2) if m.group(2) is not None else 1),
                    new_start=int(m.group(3)),
                    new_lines=int(m.group(4) if m.group(4) is not None else 1),
                    lines=[],
                )
            continue

        if hunk is not None and line[:1] in ("+", "-", " "):
            hunk.lines.append(line)
            if line[0] == "+":
                current.additions += 1
            elif line[0] == "-":
                current.deletions += 1

    flush()
    return files


def diff_stats_from_files(files: list[DiffFile]) -> DiffStats:
    return DiffStats(
        files_changed=len(files),
        additions=sum(f.additions for f in files),
        deletions=sum(f.deletions for f in files),
    )


def parse_diff(output: str) -> ParsedDiff:
    if not output.strip():
        return ParsedDiff()
    files = parse_unified_diff(output)
    return ParsedDiff(files=files, stats=diff_stats_from_files(files))


def parse_numstat(lines: Iterable[str]) -> DiffStats:
    """
    Parses `git diff --numstat` lines: "<added>\\t<deleted>\\t<path>".
    Binary files report "-" for both counts.
    """
    files_changed = 0
    additions = 0
    deletions = 0
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        parts = line.split("\t")
        if len(parts) < 2:
            continue
        files_changed += 1
        if parts[0].isdigit():
            additions += int(parts[0])
        if parts[1].isdigit():
            deletions += int(parts[1])
    return DiffStats(files_changed=files_changed, additions=additions, deletions=deletions)
