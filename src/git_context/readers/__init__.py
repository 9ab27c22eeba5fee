from .branch import get_current_branch, get_current_branch_name, get_upstream_branch, is_tracking_upstream
from .diff import get_diff_file_count, get_diff_stats, get_parsed_diff
from .log import get_commits_since, get_latest_commit, get_recent_commits
from .repository import find_git_root, get_remote_url, get_repository_info, is_inside_git_repo
from .status import (
    get_changed_files,
    get_changed_files_from_status,
    get_git_status,
    is_working_directory_clean,
)

__all__ = [
    "find_git_root",
    "get_remote_url",
    "get_repository_info",
    "is_inside_git_repo",
    "get_current_branch",
    "get_current_branch_name",
    "get_upstream_branch",
    "is_tracking_upstream",
    "get_git_status",
    "get_changed_files",
    "get_changed_files_from_status",
    "is_working_directory_clean",
    "get_recent_commits",
    "get_latest_commit",
    "get_commits_since",
    "get_parsed_diff",
    "get_diff_stats",
    "get_diff_file_count",
]
