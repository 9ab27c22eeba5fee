from __future__ import annotations

import logging

from ..core.git_runner import exec_git_safe
from ..core.models import BranchInfo
from ..core.parsers import parse_ahead_behind
from .common import PathLike, make_runner

logger = logging.getLogger(__name__)

DETACHED_HEAD = "HEAD"


def get_current_branch(cwd: PathLike = None) -> BranchInfo:
    """
    Current branch, its upstream and ahead/behind counts.

    Detached HEAD reports "HEAD". No upstream is not an error: the branch
    is simply not tracking and both counts stay 0.
    """
    r = make_runner(cwd)
    current = exec_git_safe(["branch", "--show-current"], cwd=r.cwd).strip() or DETACHED_HEAD

    upstream_res = r.run(["rev-parse", "--abbrev-ref", "@{u}"])
    if upstream_res.exit_code != 0 or not upstream_res.stdout.strip():
        logger.debug("branch %s has no upstream", current)
        return BranchInfo(current=current)

    upstream = upstream_res.stdout.strip()
    commits_ahead = commits_behind = 0

    counts_res = r.run(["rev-list", "--left-right", "--count", f"{upstream}...HEAD"])
    if counts_res.exit_code == 0:
        counts = parse_ahead_behind(counts_res.stdout)
        commits_ahead, commits_behind = counts.ahead, counts.behind
    else:
        logger.debug("could not count commits against %s", upstream)

    return BranchInfo(
        current=current,
        upstream=upstream,
        tracking=True,
        commits_ahead=commits_ahead,
        commits_behind=commits_behind,
    )


def get_current_branch_name(cwd: PathLike = None) -> str:
    return get_current_branch(cwd).current


def is_tracking_upstream(cwd: PathLike = None) -> bool:
    return get_current_branch(cwd).tracking


def get_upstream_branch(cwd: PathLike = None) -> str | None:
    return get_current_branch(cwd).upstream
