#!/usr/bin/env python3
"""Developer workflow command runner.

Maps short commands to cargo, diesel and docker invocations,
loading .env.* overrides first where the command calls for it.
The child's exit code becomes this process's exit code.

Usage:
    devtask <command> [-- <args...>]
    uv run devtask/task_run.py <command> [-- <args...>]

Examples:
    # Run the API binary with .env.local loaded
    devtask dev -- --bin api --features tracing

    # Create a new Diesel migration
    devtask db:migration:create add_users

Exit codes: 0 on success or help, 1 for an unknown command,
a missing required tool or a spawn failure, otherwise the
spawned program's own exit code.
"""
from __future__ import annotations

import sys
from pathlib import Path

# When run as a script, add the project root to sys.path so that
# absolute imports like "from devtask.task_modules..." resolve correctly.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import logging
from typing import TYPE_CHECKING

from returns.io import IOFailure
from returns.unsafe import unsafe_perform_io

from devtask.task_modules import io_ops
from devtask.task_modules.commands.dispatch import run_command
from devtask.task_modules.commands.help import render_help

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "help"
CLI_SEPARATOR = "--"

__all__ = [
    "execute",
    "main",
    "split_invocation",
]


def split_invocation(
    argv: Sequence[str],
) -> tuple[str, list[str]]:
    """Split argv into the command name and trailing args.

    An empty argv means "help". A single "--" directly after
    the command is the CLI separator and is dropped; any other
    "--" is forwarded as-is.
    """
    if not argv:
        return DEFAULT_COMMAND, []
    command, *trailing = argv
    if trailing and trailing[0] == CLI_SEPARATOR:
        trailing = trailing[1:]
    return command, trailing


def execute(argv: Sequence[str]) -> int:
    """Dispatch argv and return the process exit code."""
    command, trailing = split_invocation(argv)
    result = run_command(command, trailing)
    if isinstance(result, IOFailure):
        err = unsafe_perform_io(result.failure())
        logger.debug("dispatch failed: %s", err)
        io_ops.write_stderr(f"{err.message}\n")
        if err.error_type == "UnknownCommandError":
            io_ops.write_stderr("\n")
            io_ops.write_stderr(render_help())
        return 1
    return unsafe_perform_io(result.unwrap())


# --- CLI Entry Point ---

import click  # noqa: E402


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
        "help_option_names": [],
    },
)
@click.argument("argv", nargs=-1, type=click.UNPROCESSED)
def main(argv: tuple[str, ...]) -> None:
    """Run a developer workflow command (see `devtask help`)."""
    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    sys.exit(execute(argv))


if __name__ == "__main__":
    main()
