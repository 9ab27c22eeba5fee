from __future__ import annotations

import subprocess
from pathlib import Path

import pytest


def _run(cmd: list[str], cwd: Path) -> str:
    out = subprocess.check_output(
        cmd,
        cwd=str(cwd),
        stderr=subprocess.STDOUT,
        text=True,
        encoding="utf-8",
        errors="replace",
    )
    return out.strip()


def _init_repo(repo: Path) -> Path:
    repo.mkdir(parents=True, exist_ok=True)
    _run(["git", "init"], repo)
    _run(["git", "symbolic-ref", "HEAD", "refs/heads/main"], repo)
    _run(["git", "config", "user.email", "ci@example.com"], repo)
    _run(["git", "config", "user.name", "CI"], repo)
    _run(["git", "config", "commit.gpgsign", "false"], repo)
    return repo


@pytest.fixture()
def git():
    """Run a git command in a directory and return stripped output."""
    def _git(cwd: Path, *args: str) -> str:
        return _run(["git", *args], cwd)
    return _git


@pytest.fixture()
def empty_git_repo(tmp_path: Path) -> Path:
    """Initialized repository on `main` with no commits."""
    return _init_repo(tmp_path / "empty")


@pytest.fixture()
def tmp_git_repo(tmp_path: Path) -> Path:
    """
    Creates a small deterministic git repo:
      - 1 initial commit on `main`
      - known author identity
      - a couple of files + subdir
    """
    repo = _init_repo(tmp_path / "repo")

    (repo / "README.md").write_text("# dummy\n", encoding="utf-8")
    (repo / "src").mkdir()
    (repo / "src" / "app.py").write_text("print('hi')\n", encoding="utf-8")

    _run(["git", "add", "-A"], repo)
    _run(["git", "commit", "-m", "initial"], repo)

    return repo


@pytest.fixture()
def git_head(tmp_git_repo: Path) -> str:
    return _run(["git", "rev-parse", "HEAD"], tmp_git_repo)


@pytest.fixture()
def make_change(tmp_git_repo: Path):
    """
    Helper: make working tree dirty in a predictable way.
    """
    def _maker(relpath: str = "README.md", text: str = "changed\n") -> Path:
        p = tmp_git_repo / relpath
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return p
    return _maker


@pytest.fixture()
def commit_file(tmp_git_repo: Path):
    """
    Helper: write a file and commit it with the given message.
    """
    def _commit(relpath: str, content: str, msg: str) -> None:
        p = tmp_git_repo / relpath
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")
        _run(["git", "add", "-A"], tmp_git_repo)
        _run(["git", "commit", "-m", msg], tmp_git_repo)
    return _commit


@pytest.fixture()
def tracking_repo(tmp_git_repo: Path, tmp_path: Path) -> Path:
    """
    tmp_git_repo with a bare `origin`, `main` tracking `origin/main`,
    1 commit behind and 2 commits ahead of it.
    """
    origin = tmp_path / "origin.git"
    _run(["git", "init", "--bare", str(origin)], tmp_path)
    _run(["git", "remote", "add", "origin", str(origin)], tmp_git_repo)

    _run(["git", "commit", "--allow-empty", "-m", "pushed"], tmp_git_repo)
    _run(["git", "push", "-u", "origin", "main"], tmp_git_repo)
    _run(["git", "reset", "--hard", "HEAD~1"], tmp_git_repo)

    _run(["git", "commit", "--allow-empty", "-m", "local 1"], tmp_git_repo)
    _run(["git", "commit", "--allow-empty", "-m", "local 2"], tmp_git_repo)
    return tmp_git_repo
