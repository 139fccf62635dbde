"""Command type definitions for the devtask command table."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

CommandAction = Literal["exec", "help", "schema"]


@dataclass(frozen=True)
class CommandEntry:
    """One row of the static command table.

    action tags the variant: "exec" spawns program with the
    built argv, "help" renders the help body without spawning,
    "schema" runs program with stdout redirected into the
    schema file.

    separator appends a literal "--" after fixed_args, before
    any forwarded arguments. env_file is resolved against the
    tool root; requires_tool must be on PATH before spawning.
    """

    name: str
    description: str
    category: str
    action: CommandAction = "exec"
    program: str | None = None
    fixed_args: tuple[str, ...] = ()
    separator: bool = False
    forward_args: bool = False
    env_file: str | None = None
    requires_tool: str | None = None
    usage_hint: str = ""

    @property
    def spawns(self) -> bool:
        """Whether running this entry starts an external process."""
        return self.action != "help"
