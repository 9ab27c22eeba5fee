from __future__ import annotations

import logging
import os
import re
import signal
import subprocess
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .errors import ExecutionError, InvalidRootError, ValidationError
from .models import GitRunResult
from .validators import validate_git_args

logger = logging.getLogger(__name__)

MAX_OUTPUT_BYTES = 10 * 1024 * 1024
_READ_CHUNK = 64 * 1024

# Subcommands whose trailing arguments may be file paths.
SEPARATOR_SUBCOMMANDS = frozenset(
    {
        "diff",
        "log",
        "show",
        "add",
        "rm",
        "mv",
        "checkout",
        "reset",
        "restore",
        "grep",
        "blame",
    }
)

_ERROR_REDACTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"/Users/[^/\s]+"), "~"),
    (re.compile(r"/home/[^/\s]+"), "~"),
    (re.compile(r"C:\\Users\\[^\\\s]+", re.IGNORECASE), "~"),
    (re.compile(r"([A-Za-z][A-Za-z0-9+.-]*://)[^\s:@/]+:[^\s@/]+@"), r"\1***:***@"),
    (re.compile(r"/var/tmp/[^/\s]+"), "/var/tmp/***"),
    (re.compile(r"(?<!/var)/tmp/[^/\s]+"), "/tmp/***"),
)


def sanitize_error(message: str) -> str:
    """
    Redact home directories, URL credentials and temp paths from a message
    before it reaches a caller or a log line.
    """
    out = message or ""
    for pattern, repl in _ERROR_REDACTIONS:
        out = pattern.sub(repl, out)
    return out


def insert_path_separator(args: list[str]) -> list[str]:
    """
    For path-accepting subcommands, splice `--` in front of the first
    argument after the subcommand that is not a flag.

    Callers that pass revisions place their own `--` after them; an
    explicit separator is left alone.

    Option values must be attached (`--max-count=5`, `-n5`, `-U0`): a
    detached value such as `-n 5` is taken for the first path.
    """
    if not args or args[0] not in SEPARATOR_SUBCOMMANDS or "--" in args:
        return list(args)
    for i in range(1, len(args)):
        if not args[i].startswith("-"):
            return [*args[:i], "--", *args[i:]]
    return list(args)


def _kill_process_tree_windows(pid: int) -> None:
    """
    Kill a process tree on Windows (git may spawn helper processes such as
    credential managers, ssh, pagers, etc.).
    """
    subprocess.run(
        ["taskkill", "/PID", str(pid), "/T", "/F"],
        capture_output=True,
        text=True,
    )


def _kill_process_group_posix(p: subprocess.Popen) -> None:
    try:
        os.killpg(p.pid, signal.SIGKILL)
    except OSError:
        try:
            p.kill()
        except OSError:
            pass


def _kill(p: subprocess.Popen) -> None:
    if os.name == "nt":
        _kill_process_tree_windows(p.pid)
    else:
        _kill_process_group_posix(p)


def resolve_cwd(cwd: str | Path | None) -> Path:
    """Resolve and validate the directory git runs in."""
    p = Path(cwd if cwd is not None else os.getcwd()).expanduser().resolve()

    if not p.exists():
        raise InvalidRootError(sanitize_error(f"Directory does not exist: {p}"))
    if not p.is_dir():
        raise InvalidRootError(sanitize_error(f"Not a directory: {p}"))

    return p


@dataclass(frozen=True)
class GitRunnerConfig:
    """
    Safe runner configuration.

    timeout_s=None means no library-level timeout; the caller's process
    timeout is the only backstop.
    """
    max_output_bytes: int = MAX_OUTPUT_BYTES
    timeout_s: float | None = None
    git_binary: str = "git"


class SafeGitRunner:
    """
    Safe git runner:
      - No shell, argv passed as a list
      - Shell metacharacters rejected before spawning
      - `--` separator for path-accepting subcommands
      - Pipes read incrementally; git is killed once a stream passes the
        output ceiling, so memory stays bounded
      - stderr sanitized before it leaves the runner
    """

    def __init__(self, cwd: str | Path | None = None, config: GitRunnerConfig | None = None) -> None:
        self.cwd = resolve_cwd(cwd)
        self.config = config or GitRunnerConfig()

    def run(self, args: Iterable[str], *, env: dict[str, str] | None = None) -> GitRunResult:
        args_list = self._validate_args(args)
        final_args = insert_path_separator(args_list)

        argv = [self.config.git_binary, *final_args]
        merged_env = self._build_env(env)

        start = time.perf_counter()
        stdout_b, stderr_b, exit_code, timed_out = self._run_process(
            argv=argv,
            cwd=self.cwd,
            env=merged_env,
            timeout_s=self.config.timeout_s,
        )
        duration_ms = int((time.perf_counter() - start) * 1000)

        stdout_b, stderr_b, output_truncated = self._apply_output_ceiling(stdout_b, stderr_b)
        stdout = stdout_b.decode("utf-8", errors="replace")
        stderr = sanitize_error(stderr_b.decode("utf-8", errors="replace"))

        logger.debug(
            "git %s -> exit=%s in %dms",
            sanitize_error(" ".join(final_args)),
            exit_code,
            duration_ms,
        )
        if output_truncated:
            logger.warning("git %s output exceeded %d bytes; truncated", final_args[0], self.config.max_output_bytes)
        if timed_out:
            logger.warning("git %s timed out after %ss", final_args[0], self.config.timeout_s)

        return GitRunResult(
            argv=argv,
            stdout=stdout,
            stderr=stderr,
            exit_code=exit_code,
            duration_ms=duration_ms,
            timed_out=timed_out,
            output_truncated=output_truncated,
        )

    def _validate_args(self, args: Iterable[str]) -> list[str]:
        if isinstance(args, str):
            raise ValidationError("git_args.type", "git arguments must be a list, not a string")
        args_list = validate_git_args(args)
        if not args_list:
            raise ValidationError("git_args.empty", "Empty git args are not allowed.")
        return args_list

    def _build_env(self, extra_env: dict[str, str] | None) -> dict[str, str]:
        """
        Build a controlled environment that prevents interactive hangs.
        """
        merged_env = dict(os.environ)
        merged_env.update(
            {
                "GIT_TERMINAL_PROMPT": "0",
                "GCM_INTERACTIVE": "Never",
                "GIT_PAGER": "cat",
                "LC_ALL": "C",
                "GIT_OPTIONAL_LOCKS": "0",
            }
        )

        if extra_env:
            merged_env.update(extra_env)

        return merged_env

    def _run_process(
        self,
        *,
        argv: list[str],
        cwd: Path,
        env: dict[str, str],
        timeout_s: float | None,
    ) -> tuple[bytes, bytes, int, bool]:
        """
        Returns: (stdout, stderr, exit_code, timed_out)
        """
        popen_kwargs: dict = {}
        if os.name != "nt":
            popen_kwargs["start_new_session"] = True

        try:
            p = subprocess.Popen(
                argv,
                cwd=str(cwd),
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                shell=False,
                **popen_kwargs,
            )
        except FileNotFoundError as e:
            raise ExecutionError("Git command failed: git executable not found in PATH.") from e
        except OSError as e:
            raise ExecutionError(f"Git command failed: {sanitize_error(f'{type(e).__name__}: {e}')}") from e

        # Each pipe is drained into a buffer holding at most limit+1 bytes;
        # the extra byte marks overflow, at which point git is killed.
        limit = max(1, int(self.config.max_output_bytes))
        stdout_buf = bytearray()
        stderr_buf = bytearray()
        reader_errors: list[BaseException] = []

        def _drain(stream, buf: bytearray) -> None:
            try:
                while True:
                    chunk = stream.read(_READ_CHUNK)
                    if not chunk:
                        break
                    buf.extend(chunk[: limit + 1 - len(buf)])
                    if len(buf) > limit:
                        _kill(p)
                        break
            except Exception as e:
                reader_errors.append(e)
            finally:
                stream.close()

        readers = [
            threading.Thread(target=_drain, args=(p.stdout, stdout_buf), daemon=True),
            threading.Thread(target=_drain, args=(p.stderr, stderr_buf), daemon=True),
        ]
        for t in readers:
            t.start()

        timed_out = False
        try:
            try:
                p.wait(timeout=timeout_s)
            except subprocess.TimeoutExpired:
                timed_out = True
                _kill(p)
                p.wait()
        except Exception as e:
            try:
                _kill(p)
            except OSError:
                pass
            raise ExecutionError(
                f"Git command failed: {sanitize_error(f'{type(e).__name__}: {e}')}"
            ) from e
        finally:
            for t in readers:
                t.join()

        if reader_errors:
            e = reader_errors[0]
            raise ExecutionError(
                f"Git command failed: {sanitize_error(f'{type(e).__name__}: {e}')}"
            ) from e

        exit_code = 124 if timed_out else int(p.returncode or 0)
        return bytes(stdout_buf), bytes(stderr_buf), exit_code, timed_out

    def _apply_output_ceiling(self, stdout: bytes, stderr: bytes) -> tuple[bytes, bytes, bool]:
        max_bytes = max(1, int(self.config.max_output_bytes))
        output_truncated = len(stdout) > max_bytes or len(stderr) > max_bytes

        if not output_truncated:
            return stdout, stderr, False

        return stdout[:max_bytes], stderr[:max_bytes], True


def exec_git_safe_detailed(
    args: Iterable[str],
    *,
    cwd: str | Path | None = None,
    config: GitRunnerConfig | None = None,
) -> GitRunResult:
    """
    Run git and return stdout, sanitized stderr and the exit code as-is.
    Raises only when arguments are invalid or git cannot be started.
    """
    return SafeGitRunner(cwd, config).run(args)


def exec_git_safe(
    args: Iterable[str],
    *,
    cwd: str | Path | None = None,
    allow_non_zero_exit: bool = False,
    config: GitRunnerConfig | None = None,
) -> str:
    """
    Run git and return raw stdout.

    A non-zero exit raises ExecutionError unless allow_non_zero_exit is set.
    Truncated output always raises: a partial diff or log must not be parsed.
    """
    res = exec_git_safe_detailed(args, cwd=cwd, config=config)
    if res.output_truncated:
        raise ExecutionError(
            "Git command failed: output exceeded the configured ceiling",
            exit_code=res.exit_code,
        )
    if res.exit_code != 0 and not allow_non_zero_exit:
        raise ExecutionError(
            f"Git command failed with exit code {res.exit_code}: {res.stderr.strip() or 'No error message'}",
            exit_code=res.exit_code,
            stderr=res.stderr,
        )
    return res.stdout

