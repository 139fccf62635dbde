"""Help text rendering, generated from the command registry."""
from __future__ import annotations

from devtask.task_modules.commands.registry import (
    CATEGORY_ORDER,
    list_commands,
)

PROG_NAME = "devtask"

_NAME_WIDTH = 26

_EXAMPLES: tuple[str, ...] = (
    "dev -- --bin api --features tracing",
    "db:migration:create add_users",
)


def render_usage(prog: str = PROG_NAME) -> str:
    """Return the one-line usage string."""
    return f"Usage: {prog} <command> [-- <args...>]"


def render_help(prog: str = PROG_NAME) -> str:
    """Return the full help body.

    Commands are grouped by category in CATEGORY_ORDER and
    listed in table order within each group. The help entry
    itself is not listed; its aliases are mentioned in the
    usage line instead.
    """
    lines = [render_usage(prog), ""]
    commands = list_commands()
    for category in CATEGORY_ORDER:
        lines.append(f"{category}:")
        for entry in commands:
            if entry.category != category:
                continue
            label = entry.name
            if entry.usage_hint:
                label = f"{label} {entry.usage_hint}"
            lines.append(f"  {label:<{_NAME_WIDTH}} {entry.description}")
        lines.append("")
    lines.append("Examples:")
    lines.extend(f"  {prog} {example}" for example in _EXAMPLES)
    lines.append("")
    lines.append(f"Help: {prog} help | -h | --help")
    return "\n".join(lines) + "\n"
