from .context import get_git_context
from .core.errors import ExecutionError, GitContextError, InvalidRootError, ValidationError
from .core.git_runner import (
    GitRunnerConfig,
    SafeGitRunner,
    exec_git_safe,
    exec_git_safe_detailed,
    sanitize_error,
)
from .core.models import (
    BranchInfo,
    ChangedFile,
    Commit,
    DiffFile,
    DiffHunk,
    DiffStats,
    GitContext,
    GitRunResult,
    GitStatus,
    ParsedDiff,
    RepositoryInfo,
)
from .core.options import GitContextOptions
from .core.sanitize import (
    sanitize_commit_message,
    sanitize_file_path,
    sanitize_for_ai_context,
    sanitize_remote_url,
)
from .core.validators import (
    validate_branch_name,
    validate_commit_hash,
    validate_file_path,
    validate_git_args,
    validate_non_negative_int,
    validate_positive_int,
    validate_remote_url,
    validate_short_commit_hash,
)
from .readers import (
    find_git_root,
    get_changed_files,
    get_changed_files_from_status,
    get_commits_since,
    get_current_branch,
    get_current_branch_name,
    get_diff_file_count,
    get_diff_stats,
    get_git_status,
    get_latest_commit,
    get_parsed_diff,
    get_recent_commits,
    get_remote_url,
    get_repository_info,
    get_upstream_branch,
    is_inside_git_repo,
    is_tracking_upstream,
    is_working_directory_clean,
)

__all__ = [
    "get_git_context",
    "GitContextOptions",
    "exec_git_safe",
    "exec_git_safe_detailed",
    "sanitize_error",
    "SafeGitRunner",
    "GitRunnerConfig",
    "GitContextError",
    "ValidationError",
    "InvalidRootError",
    "ExecutionError",
    "BranchInfo",
    "ChangedFile",
    "Commit",
    "DiffFile",
    "DiffHunk",
    "DiffStats",
    "GitContext",
    "GitRunResult",
    "GitStatus",
    "ParsedDiff",
    "RepositoryInfo",
    "sanitize_commit_message",
    "sanitize_file_path",
    "sanitize_for_ai_context",
    "sanitize_remote_url",
    "validate_branch_name",
    "validate_commit_hash",
    "validate_file_path",
    "validate_git_args",
    "validate_non_negative_int",
    "validate_positive_int",
    "validate_remote_url",
    "validate_short_commit_hash",
    "find_git_root",
    "get_changed_files",
    "get_changed_files_from_status",
    "get_commits_since",
    "get_current_branch",
    "get_current_branch_name",
    "get_diff_file_count",
    "get_diff_stats",
    "get_git_status",
    "get_latest_commit",
    "get_parsed_diff",
    "get_recent_commits",
    "get_remote_url",
    "get_repository_info",
    "get_upstream_branch",
    "is_inside_git_repo",
    "is_tracking_upstream",
    "is_working_directory_clean",
]
