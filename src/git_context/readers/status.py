from __future__ import annotations

from ..core.git_runner import exec_git_safe
from ..core.models import ChangedFile, GitStatus
from ..core.parsers import changed_files_from_status, classify_status, parse_status_porcelain
from .common import PathLike


def get_git_status(cwd: PathLike = None, *, include_untracked: bool = True) -> GitStatus:
    """
    Staged, modified, untracked and deleted paths from `git status --porcelain`.
    """
    args = ["status", "--porcelain"]
    if not include_untracked:
        args.append("--untracked-files=no")

    output = exec_git_safe(args, cwd=cwd)
    return classify_status(parse_status_porcelain(output.splitlines()))


def get_changed_files_from_status(status: GitStatus) -> list[ChangedFile]:
    """Flatten an already-fetched status; does not call git."""
    return changed_files_from_status(status)


def get_changed_files(cwd: PathLike = None, *, include_untracked: bool = True) -> list[ChangedFile]:
    return changed_files_from_status(get_git_status(cwd, include_untracked=include_untracked))


def is_working_directory_clean(cwd: PathLike = None) -> bool:
    """True when nothing is staged, modified or deleted. Untracked files are ignored."""
    status = get_git_status(cwd, include_untracked=False)
    return not (status.staged or status.modified or status.deleted)
