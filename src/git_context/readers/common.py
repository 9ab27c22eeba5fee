from __future__ import annotations

from pathlib import Path

from ..core.git_runner import GitRunnerConfig, SafeGitRunner

PathLike = str | Path | None

_DEFAULT_CFG = GitRunnerConfig()


def make_runner(cwd: PathLike = None, config: GitRunnerConfig | None = None) -> SafeGitRunner:
    return SafeGitRunner(cwd, config=config or _DEFAULT_CFG)


def clean_lines(s: str) -> list[str]:
    return [ln for ln in s.splitlines() if ln.strip()]
