from __future__ import annotations

import logging
from datetime import datetime

from ..core.errors import ExecutionError
from ..core.git_runner import exec_git_safe
from ..core.models import Commit
from ..core.parsers import LOG_FORMAT, parse_log
from ..core.sanitize import sanitize_commits
from ..core.validators import validate_branch_name, validate_positive_int
from .common import PathLike

logger = logging.getLogger(__name__)

_EMPTY_HISTORY_MARKERS = ("does not have any commits", "bad default revision 'HEAD'")


def _is_empty_history(err: ExecutionError) -> bool:
    return any(marker in err.stderr for marker in _EMPTY_HISTORY_MARKERS)


def _run_log(args: list[str], cwd: PathLike, sanitize: bool) -> list[Commit]:
    try:
        output = exec_git_safe(args, cwd=cwd)
    except ExecutionError as e:
        if _is_empty_history(e):
            logger.debug("repository has no commits yet")
            return []
        raise

    commits = parse_log(output)
    return sanitize_commits(commits) if sanitize else commits


def get_recent_commits(
    cwd: PathLike = None,
    *,
    limit: int = 10,
    sanitize: bool = True,
    branch: str | None = None,
) -> list[Commit]:
    """
    The `limit` most recent commits, newest first. A repository without
    commits yields an empty list.
    """
    validate_positive_int(limit, "limit")
    args = ["log", f"--pretty=format:{LOG_FORMAT}", f"-{limit}"]
    if branch:
        args.extend([validate_branch_name(branch), "--"])
    return _run_log(args, cwd, sanitize)


def get_latest_commit(cwd: PathLike = None, *, sanitize: bool = True) -> Commit | None:
    commits = get_recent_commits(cwd, limit=1, sanitize=sanitize)
    return commits[0] if commits else None


def get_commits_since(
    since: datetime,
    cwd: PathLike = None,
    *,
    limit: int = 100,
    sanitize: bool = True,
) -> list[Commit]:
    validate_positive_int(limit, "limit")
    args = [
        "log",
        f"--pretty=format:{LOG_FORMAT}",
        f"--since={since.isoformat(timespec='seconds')}",
        f"-{limit}",
    ]
    return _run_log(args, cwd, sanitize)
