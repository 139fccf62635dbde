"""Dump the Diesel schema into the project's schema module."""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from devtask.task_modules import io_ops
from devtask.task_modules.commands.registry import SCHEMA_DIR, SCHEMA_FILE

if TYPE_CHECKING:
    from returns.io import IOResult

    from devtask.task_modules.errors import PipelineError
    from devtask.task_modules.types import ProcessRequest, ProcessResult


def write_schema(
    request: ProcessRequest,
) -> IOResult[int, PipelineError]:
    """Run request with stdout captured into the schema file.

    Creates SCHEMA_DIR (relative to the current working
    directory) first. The captured output is written verbatim
    whatever the exit code, mirroring a shell redirect; the
    child's exit code is returned.
    """
    target = Path(SCHEMA_FILE)
    captured = request.model_copy(update={"capture_stdout": True})

    def _spawn(_: Path) -> IOResult[ProcessResult, PipelineError]:
        return io_ops.run_process(captured)

    def _write(
        result: ProcessResult,
    ) -> IOResult[int, PipelineError]:
        return io_ops.write_bytes(target, result.stdout).map(
            lambda _: result.return_code,
        )

    return (
        io_ops.make_directory(Path(SCHEMA_DIR))
        .bind(_spawn)
        .bind(_write)
    )
