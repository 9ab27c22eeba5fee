from __future__ import annotations

import logging
import sys

from mcp.server.fastmcp import FastMCP

from git_context.context import get_git_context
from git_context.core.sanitize import sanitize_file_path, sanitize_remote_url
from git_context.readers import (
    get_current_branch,
    get_diff_stats,
    get_git_status,
    get_parsed_diff,
    get_recent_commits,
    get_repository_info,
)

mcp = FastMCP("git-context")


@mcp.tool()
def git_context_tool(
    root: str = ".",
    include_untracked: bool = True,
    max_commits: int = 10,
    diff_context: int = 3,
) -> dict:
    """Sanitized snapshot of repository, branch, status, recent commits and diff."""
    return get_git_context(
        cwd=root,
        include_untracked=include_untracked,
        max_commits=max_commits,
        diff_context=diff_context,
        sanitize_for_ai=True,
    ).to_dict()


@mcp.tool()
def repository_info_tool(root: str = ".") -> dict:
    info = get_repository_info(root)
    out = info.to_dict()
    out["root"] = sanitize_file_path(info.root)
    out["remote"] = sanitize_remote_url(info.remote)
    return out


@mcp.tool()
def branch_info_tool(root: str = ".") -> dict:
    return get_current_branch(root).to_dict()


@mcp.tool()
def status_tool(root: str = ".", include_untracked: bool = True) -> dict:
    status = get_git_status(root, include_untracked=include_untracked)
    return {k: [sanitize_file_path(p) for p in v] for k, v in status.to_dict().items()}


@mcp.tool()
def recent_commits_tool(root: str = ".", limit: int = 10) -> dict:
    commits = get_recent_commits(root, limit=limit, sanitize=True)
    return {"commits": [c.to_dict() for c in commits], "count": len(commits)}


@mcp.tool()
def diff_tool(root: str = ".", staged: bool = False, context: int = 3) -> dict:
    """Parsed unified diff (hunks included). File paths are sanitized."""
    diff = get_parsed_diff(root, staged=staged, context=context).to_dict()
    for f in diff["files"]:
        f["path"] = sanitize_file_path(f["path"])
        if f["oldPath"]:
            f["oldPath"] = sanitize_file_path(f["oldPath"])
    return diff


@mcp.tool()
def diff_stats_tool(root: str = ".", staged: bool = False) -> dict:
    return get_diff_stats(root, staged=staged).to_dict()


def main() -> None:
    # stdout carries the MCP stdio transport.
    logging.basicConfig(stream=sys.stderr, level=logging.INFO)
    mcp.run()


if __name__ == "__main__":
    main()
