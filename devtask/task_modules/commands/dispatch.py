"""Command dispatch -- central entry point for all commands.

Looks the command name up in the registry, then runs the
resolving phase (tool check, env file load) and the executing
phase (spawn and wait) through the io_ops boundary. The
child's exit code is the successful result; only dispatcher
errors (unknown command, missing tool, spawn failure) become
IOFailure.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from returns.io import IOFailure, IOResult, IOSuccess

from devtask.task_modules import io_ops
from devtask.task_modules.commands.help import render_help
from devtask.task_modules.commands.registry import (
    available_names,
    get_command,
)
from devtask.task_modules.errors import PipelineError
from devtask.task_modules.steps.build_argv import build_argv
from devtask.task_modules.steps.ensure_tool import ensure_tool
from devtask.task_modules.steps.load_env import load_env_file
from devtask.task_modules.steps.write_schema import write_schema
from devtask.task_modules.types import EMPTY_OVERLAY, ProcessRequest

if TYPE_CHECKING:
    from collections.abc import Sequence

    from devtask.task_modules.commands.types import CommandEntry
    from devtask.task_modules.types import EnvOverlay


def _load_overlay(
    entry: CommandEntry,
) -> IOResult[EnvOverlay, PipelineError]:
    """Load the entry's env file, or return the empty overlay."""
    if entry.env_file is None:
        return IOSuccess(EMPTY_OVERLAY)
    return load_env_file(entry.env_file)


def _execute(
    entry: CommandEntry,
    overlay: EnvOverlay,
    trailing_args: Sequence[str],
) -> IOResult[int, PipelineError]:
    """Spawn the entry's program and return the child's exit code."""
    request = ProcessRequest(
        argv=build_argv(entry, trailing_args),
        env=dict(overlay.values),
    )
    if entry.action == "schema":
        return write_schema(request)
    return io_ops.run_process(request).map(
        lambda result: result.return_code,
    )


def run_command(
    name: str,
    trailing_args: Sequence[str] = (),
) -> IOResult[int, PipelineError]:
    """Dispatch a command by name.

    Help renders to stdout and returns 0 without spawning.
    Unknown commands return IOFailure with available names.
    Otherwise the required tool is checked, the env file (if
    any) loaded, and the program run to completion; its exit
    code is returned verbatim, nonzero included.
    """
    entry = get_command(name)
    if entry is None:
        available = available_names()
        return IOFailure(
            PipelineError(
                step_name="commands.dispatch",
                error_type="UnknownCommandError",
                message=f"Unknown command: {name}",
                context={
                    "command_name": name,
                    "available": available,
                },
            ),
        )

    if not entry.spawns:
        return io_ops.write_stdout(render_help()).map(lambda _: 0)

    def _run_with_overlay(
        overlay: EnvOverlay,
    ) -> IOResult[int, PipelineError]:
        return _execute(entry, overlay, trailing_args)

    return (
        ensure_tool(entry)
        .bind(_load_overlay)
        .bind(_run_with_overlay)
    )
