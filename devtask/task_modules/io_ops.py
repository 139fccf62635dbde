"""I/O boundary module -- ALL external I/O goes through here.

This is the single mock point for the entire test suite.
Steps and the dispatcher never touch the filesystem, PATH
or subprocess directly; they call io_ops functions.
"""
from __future__ import annotations

import os
import shutil
import subprocess
import sys
from pathlib import Path

from returns.io import IOFailure, IOResult, IOSuccess

from devtask.task_modules.errors import PipelineError
from devtask.task_modules.types import ProcessRequest, ProcessResult

TOOL_ROOT_ENV = "DEVTASK_ROOT"


def read_file(path: Path) -> IOResult[str, PipelineError]:
    """Read file contents. Returns IOResult, never raises."""
    try:
        return IOSuccess(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return IOFailure(
            PipelineError(
                step_name="io_ops.read_file",
                error_type="FileNotFoundError",
                message=f"File not found: {path}",
                context={"path": str(path)},
            ),
        )
    except PermissionError:
        return IOFailure(
            PipelineError(
                step_name="io_ops.read_file",
                error_type="PermissionError",
                message=f"Permission denied: {path}",
                context={"path": str(path)},
            ),
        )
    except (OSError, UnicodeDecodeError) as exc:
        return IOFailure(
            PipelineError(
                step_name="io_ops.read_file",
                error_type=type(exc).__name__,
                message=f"Error reading {path}: {exc}",
                context={"path": str(path)},
            ),
        )


# --- Env file io_ops ---


def find_tool_root() -> Path:
    """Find the tool root by locating pyproject.toml.

    DEVTASK_ROOT, when set, names the root directly; use it
    for non-editable installs, where this file lives under
    site-packages. Otherwise walks up from this file's
    directory until pyproject.toml is found, falling back to
    the directory containing the devtask package.
    """
    override = os.environ.get(TOOL_ROOT_ENV)
    if override:
        return Path(override).expanduser().resolve()
    here = Path(__file__).resolve().parent
    current = here
    while current != current.parent:
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    return here.parent.parent


def resolve_env_path(name: str) -> Path:
    """Resolve an env file name against the tool root.

    Absolute paths are returned unchanged. Relative paths are
    anchored at find_tool_root(), never at the caller's cwd.
    """
    path = Path(name)
    if path.is_absolute():
        return path
    return find_tool_root() / path


def read_env_file(path: Path) -> IOResult[str, PipelineError]:
    """Read an env file if it names an existing regular file.

    Anything that is not a regular file (missing, directory,
    socket, ...) yields a FileNotFoundError failure so callers
    treat it as absent.
    """
    if not path.is_file():
        return IOFailure(
            PipelineError(
                step_name="io_ops.read_env_file",
                error_type="FileNotFoundError",
                message=f"Env file not found: {path}",
                context={"path": str(path)},
            ),
        )
    return read_file(path)


# --- Tool lookup and process io_ops ---


def find_executable(name: str) -> IOResult[str, PipelineError]:
    """Resolve an executable on PATH. Returns IOResult, never raises."""
    found = shutil.which(name)
    if found is None:
        return IOFailure(
            PipelineError(
                step_name="io_ops.find_executable",
                error_type="MissingToolError",
                message=f"Required command not found: {name}",
                context={"tool": name},
            ),
        )
    return IOSuccess(found)


def _exit_status(returncode: int) -> int:
    """Map a signal death (-N from Popen) to the shell's 128+N."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def _wait_for_child(
    process: subprocess.Popen[bytes],
) -> bytes | None:
    """Wait for the child to exit, riding out Ctrl-C.

    SIGINT reaches the child through the shared process group;
    the child decides how to stop and is never killed from here.
    """
    while True:
        try:
            stdout, _ = process.communicate()
        except KeyboardInterrupt:
            continue
        return stdout


def run_process(
    request: ProcessRequest,
) -> IOResult[ProcessResult, PipelineError]:
    """Spawn a process and wait for it. Returns IOResult, never raises.

    stdin, stderr (and stdout unless capture_stdout is set) are
    inherited from this process. request.env is merged over
    os.environ for the child only. No timeout is applied.
    Nonzero exit codes are valid results, not errors; a child
    killed by signal N reports 128+N.
    """
    env = {**os.environ, **request.env}
    try:
        process = subprocess.Popen(  # noqa: S603
            request.argv,
            env=env,
            stdout=subprocess.PIPE if request.capture_stdout else None,
        )
    except FileNotFoundError:
        return IOFailure(
            PipelineError(
                step_name="io_ops.run_process",
                error_type="SpawnError",
                message=f"Command not found: {request.program}",
                context={"argv": request.argv},
            ),
        )
    except OSError as exc:
        return IOFailure(
            PipelineError(
                step_name="io_ops.run_process",
                error_type="SpawnError",
                message=(
                    f"Failed to run {request.command_line}: {exc}"
                ),
                context={
                    "argv": request.argv,
                    "os_error": type(exc).__name__,
                },
            ),
        )
    stdout = _wait_for_child(process)
    return IOSuccess(
        ProcessResult(
            return_code=_exit_status(process.returncode),
            argv=list(request.argv),
            stdout=stdout or b"",
        ),
    )


# --- Schema output io_ops ---


def make_directory(path: Path) -> IOResult[Path, PipelineError]:
    """Create a directory and its parents (mkdir -p semantics)."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return IOFailure(
            PipelineError(
                step_name="io_ops.make_directory",
                error_type="DirectoryCreateError",
                message=f"Failed to create directory {path}: {exc}",
                context={"path": str(path)},
            ),
        )
    return IOSuccess(path)


def write_bytes(
    path: Path,
    content: bytes,
) -> IOResult[Path, PipelineError]:
    """Write content verbatim, replacing any existing file."""
    try:
        path.write_bytes(content)
    except OSError as exc:
        return IOFailure(
            PipelineError(
                step_name="io_ops.write_bytes",
                error_type="FileWriteError",
                message=f"Failed to write {path}: {exc}",
                context={"path": str(path)},
            ),
        )
    return IOSuccess(path)


# --- Console io_ops ---


def write_stderr(
    message: str,
) -> IOResult[None, PipelineError]:
    """Write message to stderr.

    Returns IOSuccess(None) or IOFailure on error.
    """
    try:
        sys.stderr.write(message)
        sys.stderr.flush()
    except OSError as exc:
        return IOFailure(
            PipelineError(
                step_name="io_ops.write_stderr",
                error_type="StderrWriteError",
                message=f"Failed to write to stderr: {exc}",
                context={"original_message": message},
            ),
        )
    return IOSuccess(None)


def write_stdout(
    message: str,
) -> IOResult[None, PipelineError]:
    """Write message to stdout.

    Returns IOSuccess(None) or IOFailure on error.
    """
    try:
        sys.stdout.write(message)
        sys.stdout.flush()
    except OSError as exc:
        return IOFailure(
            PipelineError(
                step_name="io_ops.write_stdout",
                error_type="StdoutWriteError",
                message=f"Failed to write to stdout: {exc}",
                context={"original_message": message},
            ),
        )
    return IOSuccess(None)
