from __future__ import annotations

from ..core.git_runner import exec_git_safe
from ..core.models import DiffStats, ParsedDiff
from ..core.parsers import parse_diff, parse_numstat
from ..core.validators import validate_non_negative_int, validate_ref
from .common import PathLike, clean_lines

# Pin prefixes and disable external drivers so user config cannot change the format.
_DIFF_BASE_ARGS = [
    "diff",
    "--no-color",
    "--no-ext-diff",
    "--find-renames",
    "--src-prefix=a/",
    "--dst-prefix=b/",
]


def _revision_args(commit_a: str | None, commit_b: str | None) -> list[str]:
    if commit_a and commit_b:
        return [f"{validate_ref(commit_a)}..{validate_ref(commit_b)}", "--"]
    if commit_a:
        return [validate_ref(commit_a), "--"]
    return []


def get_parsed_diff(
    cwd: PathLike = None,
    *,
    context: int = 3,
    staged: bool = False,
    commit_a: str | None = None,
    commit_b: str | None = None,
) -> ParsedDiff:
    """
    Unstaged changes by default; `staged=True` diffs the index, `commit_a`
    (and `commit_b`) select a revision or range.
    """
    validate_non_negative_int(context, "context")
    args = [*_DIFF_BASE_ARGS, f"--unified={context}", "--patch"]
    if staged:
        args.append("--cached")
    args.extend(_revision_args(commit_a, commit_b))

    return parse_diff(exec_git_safe(args, cwd=cwd))


def get_diff_stats(cwd: PathLike = None, *, staged: bool = False) -> DiffStats:
    """Totals via `--numstat`, without hunk bodies."""
    args = ["diff", "--no-color", "--no-ext-diff", "--numstat"]
    if staged:
        args.append("--cached")
    return parse_numstat(clean_lines(exec_git_safe(args, cwd=cwd)))


def get_diff_file_count(cwd: PathLike = None, *, staged: bool = False) -> int:
    return get_diff_stats(cwd, staged=staged).files_changed
