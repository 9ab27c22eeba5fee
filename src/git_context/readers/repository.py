from __future__ import annotations

import logging

from ..core.errors import ExecutionError
from ..core.git_runner import exec_git_safe
from ..core.models import RepositoryInfo
from ..core.sanitize import sanitize_remote_url
from .common import PathLike, make_runner

logger = logging.getLogger(__name__)


def find_git_root(cwd: PathLike = None) -> str:
    """Absolute path of the repository root. Raises ExecutionError outside a repo."""
    return exec_git_safe(["rev-parse", "--show-toplevel"], cwd=cwd).strip()


def get_remote_url(cwd: PathLike = None, *, sanitize: bool = True) -> str | None:
    """
    URL of `origin`, or None when no such remote is configured.
    """
    res = make_runner(cwd).run(["remote", "get-url", "origin"])
    if res.exit_code != 0:
        logger.debug("no origin remote configured")
        return None
    url = res.stdout.strip() or None
    return sanitize_remote_url(url) if sanitize else url


def get_repository_info(cwd: PathLike = None, *, sanitize: bool = True) -> RepositoryInfo:
    root = find_git_root(cwd)
    remote = get_remote_url(cwd, sanitize=sanitize)
    status = exec_git_safe(["status", "--porcelain"], cwd=cwd)
    return RepositoryInfo(root=root, remote=remote, is_clean=not status.strip())


def is_inside_git_repo(cwd: PathLike = None) -> bool:
    try:
        find_git_root(cwd)
    except ExecutionError:
        return False
    return True
