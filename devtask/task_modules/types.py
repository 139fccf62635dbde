"""Shared type definitions for devtask."""
from __future__ import annotations

import shlex
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class EnvOverlay:
    """Environment values loaded from an env file.

    Frozen dataclass: the values dict is shallow-frozen, callers
    MUST NOT mutate it in place. The overlay is merged over the
    inherited environment only when a child process is spawned,
    so the parent's os.environ is never touched.

    loaded is False when the file was absent or unreadable; values
    is then empty.
    """

    path: str = ""
    values: dict[str, str] = field(default_factory=dict)
    loaded: bool = False


EMPTY_OVERLAY = EnvOverlay()


@dataclass(frozen=True)
class ProcessResult:
    """Result of a spawned external process.

    stdout is only populated when the request asked for capture;
    otherwise the child wrote straight to the inherited stream.
    """

    return_code: int
    argv: list[str]
    stdout: bytes = b""


class ProcessRequest(BaseModel):
    """Request payload for the process spawning boundary."""

    model_config = ConfigDict(frozen=True)

    argv: list[str] = Field(min_length=1)
    env: dict[str, str] = Field(default_factory=dict)
    capture_stdout: bool = False

    @property
    def program(self) -> str:
        """Executable name (first argv token)."""
        return self.argv[0]

    @property
    def command_line(self) -> str:
        """Shell-quoted rendering of argv for diagnostics."""
        return shlex.join(self.argv)
