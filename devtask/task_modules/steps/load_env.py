"""Env file loading step.

Reads a KEY=VALUE env file through io_ops and parses it
with python-dotenv. A missing or unreadable file is not an
error: a diagnostic is written and an empty overlay is
returned, so this step always yields IOSuccess.
"""
from __future__ import annotations

import io

from dotenv import dotenv_values
from returns.io import IOFailure, IOResult, IOSuccess
from returns.unsafe import unsafe_perform_io

from devtask.task_modules import io_ops
from devtask.task_modules.errors import PipelineError
from devtask.task_modules.types import EnvOverlay


def parse_env_text(
    text: str,
    source: str,
) -> tuple[dict[str, str], list[str]]:
    """Parse env file text into values and warnings.

    Blank lines and # comments are ignored, "export KEY=VALUE"
    is accepted, ${VAR} references are expanded against earlier
    keys and the inherited environment. A bare KEY without "="
    is skipped and reported in the returned warnings.
    """
    raw = dotenv_values(stream=io.StringIO(text), interpolate=True)
    values: dict[str, str] = {}
    warnings: list[str] = []
    for key, value in raw.items():
        if value is None:
            warnings.append(
                f"Skipping malformed line in {source}:"
                f" {key} has no value",
            )
            continue
        values[key] = value
    return values, warnings


def load_env_file(
    name: str,
) -> IOResult[EnvOverlay, PipelineError]:
    """Load an env file into an EnvOverlay.

    name is resolved against the tool root unless absolute.
    Never returns IOFailure: absence and read errors are
    reported on stderr and produce an unloaded, empty overlay.
    """
    path = io_ops.resolve_env_path(name)
    read_result = io_ops.read_env_file(path)
    if isinstance(read_result, IOFailure):
        err = unsafe_perform_io(read_result.failure())
        if err.error_type == "FileNotFoundError":
            io_ops.write_stderr(
                f"(env file not found, skipping): {path}\n",
            )
        else:
            io_ops.write_stderr(
                f"(env file unreadable, skipping): {err.message}\n",
            )
        return IOSuccess(EnvOverlay(path=str(path)))

    io_ops.write_stderr(f"Loading env: {path}\n")
    text = unsafe_perform_io(read_result.unwrap())
    values, warnings = parse_env_text(text, str(path))
    for warning in warnings:
        io_ops.write_stderr(f"{warning}\n")
    return IOSuccess(
        EnvOverlay(path=str(path), values=values, loaded=True),
    )
