"""Shared test fixtures for devtask test suite."""
from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture


@pytest.fixture
def tool_root(tmp_path: Path, mocker: MockerFixture) -> Path:
    """Point io_ops.find_tool_root at an empty temp directory."""
    root = tmp_path / "tool_root"
    root.mkdir()
    mocker.patch(
        "devtask.task_modules.io_ops.find_tool_root",
        return_value=root,
    )
    return root
