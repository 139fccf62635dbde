"""Build the final argument vector for a command entry."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from devtask.task_modules.commands.types import CommandEntry

SEPARATOR = "--"


def build_argv(
    entry: CommandEntry,
    trailing_args: Sequence[str],
) -> list[str]:
    """Return [program, *fixed_args, ("--"), *trailing_args].

    The separator is appended only for entries that declare
    it (dev, dev:staging), even when trailing_args is empty.
    Trailing args are appended verbatim and in order only when
    the entry forwards them.

    Raises:
        ValueError: If the entry has no program to run.
    """
    if entry.program is None:
        msg = f"Command '{entry.name}' has no program to run"
        raise ValueError(msg)
    argv = [entry.program, *entry.fixed_args]
    if entry.separator:
        argv.append(SEPARATOR)
    if entry.forward_args:
        argv.extend(trailing_args)
    return argv
