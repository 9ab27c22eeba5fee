from __future__ import annotations

import posixpath
import re
from pathlib import PurePosixPath, PureWindowsPath
from typing import Iterable

from .errors import ValidationError

_BRANCH_RE = re.compile(r"^[A-Za-z0-9/_.-]+$")
_COMMIT_HASH_RE = re.compile(r"^(?:[a-f0-9]{40}|[a-f0-9]{64})$")
_SHORT_HASH_RE = re.compile(r"^[a-f0-9]+$")
_SHELL_META_RE = re.compile(r"[;&|`$()<>]")
_ANCESTRY_SUFFIX_RE = re.compile(r"(?:[~^][0-9]*)+$")

REMOTE_URL_PREFIXES: tuple[str, ...] = ("https://", "http://", "ssh://", "git@", "file://")


def validate_file_path(path: str) -> str:
    """
    Relative, traversal-free path that git cannot mistake for a flag.
    """
    if not isinstance(path, str) or not path:
        raise ValidationError("file_path.empty", "File path cannot be empty")
    if "\0" in path:
        raise ValidationError("file_path.null_byte", "Null byte injection detected")
    if PurePosixPath(path).is_absolute() or PureWindowsPath(path).is_absolute():
        raise ValidationError("file_path.absolute", "Absolute paths not allowed")
    if ".." in posixpath.normpath(path.replace("\\", "/")):
        raise ValidationError("file_path.traversal", "Path traversal detected")
    if path.startswith("-"):
        raise ValidationError("file_path.flag", "Flag injection detected")
    return path


def validate_branch_name(name: str) -> str:
    if not isinstance(name, str) or not name:
        raise ValidationError("branch_name.empty", "Branch name cannot be empty")
    if len(name) > 255:
        raise ValidationError("branch_name.length", "Branch name too long")
    if not _BRANCH_RE.match(name):
        raise ValidationError(
            "branch_name.charset",
            "Invalid branch name (only alphanumeric, /, _, -, . allowed)",
        )
    if ".." in name:
        raise ValidationError("branch_name.dotdot", 'Branch name cannot contain ".."')
    if name.endswith(".lock"):
        raise ValidationError("branch_name.lock", 'Branch name cannot end with ".lock"')
    return name


def validate_commit_hash(value: str) -> str:
    if not isinstance(value, str) or not _COMMIT_HASH_RE.match(value):
        raise ValidationError(
            "commit_hash",
            "Invalid commit hash (must be 40-character SHA-1 or 64-character SHA-256)",
        )
    return value


def validate_short_commit_hash(value: str) -> str:
    if not isinstance(value, str) or len(value) < 7:
        raise ValidationError("short_commit_hash.length", "Short commit hash must be at least 7 characters")
    if len(value) > 40:
        raise ValidationError("short_commit_hash.length", "Short commit hash too long")
    if not _SHORT_HASH_RE.match(value):
        raise ValidationError("short_commit_hash.hex", "Invalid short commit hash (must be hexadecimal)")
    return value


def validate_remote_url(url: str) -> str:
    # http:// is tolerated for local test remotes only.
    if not isinstance(url, str) or not url:
        raise ValidationError("remote_url.empty", "Remote URL cannot be empty")
    if not url.startswith(REMOTE_URL_PREFIXES):
        raise ValidationError(
            "remote_url.protocol",
            "Invalid remote URL protocol (must be https://, ssh://, git@, or file://)",
        )
    return url


def validate_positive_int(value: int, name: str = "value") -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError("positive_int", f"{name} must be a positive integer")
    return value


def validate_non_negative_int(value: int, name: str = "value") -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError("non_negative_int", f"{name} must be a non-negative integer")
    return value


def validate_ref(ref: str) -> str:
    """
    A revision given by callers: a (short) commit hash or a branch-like name,
    optionally followed by ancestry suffixes such as `~2` or `^`.
    """
    if not isinstance(ref, str):
        raise ValidationError("ref.type", "Revision must be a string")
    if ref.startswith("-"):
        raise ValidationError("ref.flag", "Flag injection detected")
    m = _ANCESTRY_SUFFIX_RE.search(ref)
    base = ref[: m.start()] if m else ref
    if _SHORT_HASH_RE.match(base) and 7 <= len(base) <= 64:
        return ref
    validate_branch_name(base)
    return ref


def validate_git_args(args: Iterable[str]) -> list[str]:
    """
    Rejects, on the first offending element, any argument carrying a shell
    metacharacter. Runs immediately before every subprocess launch.
    """
    out: list[str] = []
    for arg in args:
        if not isinstance(arg, str):
            raise ValidationError("git_args.type", f"git arguments must be strings, got {type(arg).__name__}")
        if _SHELL_META_RE.search(arg):
            raise ValidationError("git_args.shell_meta", "Shell metacharacter detected in git argument")
        out.append(arg)
    return out
