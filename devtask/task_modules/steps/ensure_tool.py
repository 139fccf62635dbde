"""Check that a command's required tool is on PATH."""
from __future__ import annotations

from typing import TYPE_CHECKING

from returns.io import IOResult, IOSuccess

from devtask.task_modules import io_ops

if TYPE_CHECKING:
    from devtask.task_modules.commands.types import CommandEntry
    from devtask.task_modules.errors import PipelineError


def ensure_tool(
    entry: CommandEntry,
) -> IOResult[CommandEntry, PipelineError]:
    """Verify entry.requires_tool resolves on PATH.

    Entries without a required tool pass through untouched.
    A missing tool yields the io_ops MissingToolError failure.
    """
    if entry.requires_tool is None:
        return IOSuccess(entry)
    return io_ops.find_executable(entry.requires_tool).map(
        lambda _: entry,
    )
