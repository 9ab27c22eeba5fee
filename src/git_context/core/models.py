from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

FileChangeStatus = Literal["added", "modified", "deleted", "renamed"]
ChangedFileStatus = Literal["staged", "modified", "untracked", "deleted"]


@dataclass(frozen=True)
class GitRunResult:
    argv: list[str]
    stdout: str
    stderr: str
    exit_code: int
    duration_ms: int = 0
    timed_out: bool = False
    output_truncated: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "argv": self.argv,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
            "duration_ms": self.duration_ms,
            "timed_out": self.timed_out,
            "output_truncated": self.output_truncated,
        }


@dataclass(frozen=True)
class RepositoryInfo:
    root: str
    remote: str | None
    is_clean: bool

    def to_dict(self) -> dict[str, Any]:
        return {"root": self.root, "remote": self.remote, "isClean": self.is_clean}


@dataclass(frozen=True)
class BranchInfo:
    """`current` is "HEAD" when detached. Counts are 0 unless tracking."""

    current: str
    upstream: str | None = None
    tracking: bool = False
    commits_ahead: int = 0
    commits_behind: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "current": self.current,
            "upstream": self.upstream,
            "tracking": self.tracking,
            "commitsAhead": self.commits_ahead,
            "commitsBehind": self.commits_behind,
        }


@dataclass(frozen=True)
class GitStatus:
    staged: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    untracked: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.staged or self.modified or self.untracked or self.deleted)

    def to_dict(self) -> dict[str, Any]:
        return {
            "staged": list(self.staged),
            "modified": list(self.modified),
            "untracked": list(self.untracked),
            "deleted": list(self.deleted),
        }


@dataclass(frozen=True)
class ChangedFile:
    path: str
    status: ChangedFileStatus

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "status": self.status}


@dataclass(frozen=True)
class Commit:
    hash: str
    short_hash: str
    author: str
    email: str
    date: datetime
    message: str
    subject: str
    body: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "hash": self.hash,
            "shortHash": self.short_hash,
            "author": self.author,
            "email": self.email,
            "date": self.date.isoformat(),
            "message": self.message,
            "subject": self.subject,
            "body": self.body,
        }


@dataclass(frozen=True)
class DiffHunk:
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "oldStart": self.old_start,
            "oldLines": self.old_lines,
            "newStart": self.new_start,
            "newLines": self.new_lines,
            "lines": list(self.lines),
        }


@dataclass(frozen=True)
class DiffFile:
    path: str
    old_path: str | None
    status: FileChangeStatus
    additions: int = 0
    deletions: int = 0
    hunks: list[DiffHunk] = field(default_factory=list)
    binary: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "oldPath": self.old_path,
            "status": self.status,
            "additions": self.additions,
            "deletions": self.deletions,
            "binary": self.binary,
            "hunks": [h.to_dict() for h in self.hunks],
        }


@dataclass(frozen=True)
class DiffStats:
    files_changed: int = 0
    additions: int = 0
    deletions: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "filesChanged": self.files_changed,
            "additions": self.additions,
            "deletions": self.deletions,
        }


@dataclass(frozen=True)
class ParsedDiff:
    files: list[DiffFile] = field(default_factory=list)
    stats: DiffStats = field(default_factory=DiffStats)

    def to_dict(self) -> dict[str, Any]:
        return {"files": [f.to_dict() for f in self.files], "stats": self.stats.to_dict()}


@dataclass(frozen=True)
class GitContext:
    """Point-in-time snapshot of a repository, built fresh per request."""

    repository: RepositoryInfo
    branch: BranchInfo
    status: GitStatus
    recent_commits: list[Commit]
    diff: ParsedDiff
    changed_files: list[ChangedFile]

    def to_dict(self) -> dict[str, Any]:
        return {
            "repository": self.repository.to_dict(),
            "branch": self.branch.to_dict(),
            "status": self.status.to_dict(),
            "recentCommits": [c.to_dict() for c in self.recent_commits],
            "diff": self.diff.to_dict(),
            "changedFiles": [f.to_dict() for f in self.changed_files],
        }
