from __future__ import annotations

import logging
from typing import Any, Mapping

from .core.models import GitContext
from .core.options import GitContextOptions, coerce_options
from .core.sanitize import sanitize_for_ai_context
from .readers.branch import get_current_branch
from .readers.common import PathLike
from .readers.diff import get_parsed_diff
from .readers.log import get_recent_commits
from .readers.repository import get_repository_info
from .readers.status import get_changed_files_from_status, get_git_status

logger = logging.getLogger(__name__)


def get_git_context(
    options: GitContextOptions | Mapping[str, Any] | None = None,
    *,
    cwd: PathLike = None,
    **overrides: Any,
) -> GitContext:
    """
    Snapshot of repository state for an LLM context window.

    Readers run one after another and nothing is cached. They are not an
    atomic view: a concurrent writer can make `status` and `diff` disagree.
    Any reader failure aborts the whole call.

    Readers run unsanitized; when `sanitize_for_ai` is set the assembled
    snapshot is sanitized once at the end.
    """
    opts = coerce_options(options, **overrides)

    repository = get_repository_info(cwd, sanitize=False)
    branch = get_current_branch(cwd)
    status = get_git_status(cwd, include_untracked=opts.include_untracked)
    recent_commits = get_recent_commits(cwd, limit=opts.max_commits, sanitize=False)
    diff = get_parsed_diff(cwd, context=opts.diff_context)

    context = GitContext(
        repository=repository,
        branch=branch,
        status=status,
        recent_commits=recent_commits,
        diff=diff,
        changed_files=get_changed_files_from_status(status),
    )
    logger.debug(
        "git context: branch=%s commits=%d changed=%d diff_files=%d",
        branch.current,
        len(recent_commits),
        len(context.changed_files),
        len(diff.files),
    )

    return sanitize_for_ai_context(context) if opts.sanitize_for_ai else context
