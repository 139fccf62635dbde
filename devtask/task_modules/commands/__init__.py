"""Commands package -- static command table and dispatcher.

Public API: CommandEntry, the registry lookups, the help
renderer and run_command.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from devtask.task_modules.commands.help import render_help, render_usage
from devtask.task_modules.commands.registry import (
    COMMAND_REGISTRY,
    available_names,
    get_command,
    list_commands,
    resolve_alias,
)
from devtask.task_modules.commands.types import CommandEntry

# dispatch pulls in the steps package, whose modules import
# from this package; load it lazily to keep imports acyclic.
if TYPE_CHECKING:
    from devtask.task_modules.commands.dispatch import run_command


def __getattr__(name: str) -> object:
    """Lazy import run_command on first attribute access."""
    if name == "run_command":
        from devtask.task_modules.commands.dispatch import (  # noqa: PLC0415
            run_command,
        )

        return run_command
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "COMMAND_REGISTRY",
    "CommandEntry",
    "available_names",
    "get_command",
    "list_commands",
    "render_help",
    "render_usage",
    "resolve_alias",
    "run_command",
]
