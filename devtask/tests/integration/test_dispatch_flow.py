"""End-to-end dispatch flow tests.

Drive the click entry point with real env files on disk and
the registry, mocking only subprocess.Popen and shutil.which
inside io_ops.
"""
from __future__ import annotations

import os
import signal
import subprocess
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

import click.testing
import pytest

from devtask.task_run import main

if TYPE_CHECKING:
    from unittest.mock import MagicMock

    from pytest_mock import MockerFixture

_IO = "devtask.task_modules.io_ops"


def _patch_popen(
    mocker: MockerFixture,
    return_code: int = 0,
    stdout: bytes | None = None,
) -> MagicMock:
    """Patch subprocess.Popen inside io_ops with a finished child."""
    process = mocker.MagicMock()
    process.communicate.return_value = (stdout, None)
    process.returncode = return_code
    return mocker.patch(f"{_IO}.subprocess.Popen", return_value=process)


@pytest.fixture
def mock_spawn(mocker: MockerFixture) -> MagicMock:
    """Patch subprocess.Popen inside io_ops; children exit 0."""
    return _patch_popen(mocker)


@pytest.fixture
def all_tools_present(mocker: MockerFixture) -> None:
    """Every required tool resolves on PATH."""
    mocker.patch(
        f"{_IO}.shutil.which",
        side_effect=lambda name: f"/usr/bin/{name}",
    )


def test_dev_without_env_file_spawns_cargo(
    tool_root: Path,
    mocker: MockerFixture,
) -> None:
    """dev -- --bin api: not-found note, cargo run -- -- --bin api."""
    mock_run = _patch_popen(mocker, return_code=42)
    runner = click.testing.CliRunner()
    result = runner.invoke(main, ["dev", "--", "--bin", "api"])
    assert result.exit_code == 42
    assert "(env file not found, skipping)" in result.output
    assert str(tool_root / ".env.local") in result.output
    mock_run.assert_called_once()
    assert mock_run.call_args.args[0] == [
        "cargo", "run", "--", "--", "--bin", "api",
    ]


def test_dev_with_env_file_passes_values_to_child(
    tool_root: Path,
    mock_spawn: MagicMock,
) -> None:
    """FOO=bar in .env.local reaches the child environment."""
    (tool_root / ".env.local").write_text("# local\nFOO=bar\n")
    runner = click.testing.CliRunner()
    result = runner.invoke(main, ["dev"])
    assert result.exit_code == 0
    assert "Loading env:" in result.output
    env = mock_spawn.call_args.kwargs["env"]
    assert env["FOO"] == "bar"
    assert mock_spawn.call_args.args[0] == [
        "cargo", "run", "--", "--",
    ]


def test_env_file_presence_does_not_change_outcome(
    tool_root: Path,
    mock_spawn: MagicMock,
) -> None:
    """dev spawns with and without .env.local present."""
    runner = click.testing.CliRunner()
    without = runner.invoke(main, ["dev"])
    (tool_root / ".env.local").write_text("FOO=bar\n")
    with_file = runner.invoke(main, ["dev"])
    assert without.exit_code == with_file.exit_code == 0
    assert mock_spawn.call_count == 2


def test_env_file_overrides_inherited_value(
    tool_root: Path,
    mock_spawn: MagicMock,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Env file values win over the inherited environment."""
    monkeypatch.setenv("RUST_LOG", "warn")
    (tool_root / ".env.production").write_text("RUST_LOG=info\n")
    runner = click.testing.CliRunner()
    result = runner.invoke(main, ["start", "--", "--port", "80"])
    assert result.exit_code == 0
    assert mock_spawn.call_args.args[0] == [
        "cargo", "run", "--release", "--", "--port", "80",
    ]
    env = mock_spawn.call_args.kwargs["env"]
    assert env["RUST_LOG"] == "info"


def test_docker_up_with_docker_present(
    tool_root: Path,
    mock_spawn: MagicMock,
    all_tools_present: None,
) -> None:
    """docker:up spawns docker compose up -d --build, no env file."""
    runner = click.testing.CliRunner()
    result = runner.invoke(main, ["docker:up"])
    assert result.exit_code == 0
    assert mock_spawn.call_args.args[0] == [
        "docker", "compose", "up", "-d", "--build",
    ]
    assert "env" not in result.output.lower()
    assert list(tool_root.iterdir()) == []


def test_bogus_command(mock_spawn: MagicMock) -> None:
    """bogus: usage on stderr, exit 1, nothing spawned."""
    runner = click.testing.CliRunner()
    result = runner.invoke(main, ["bogus"])
    assert result.exit_code == 1
    assert "Unknown command: bogus" in result.output
    assert "Usage: devtask <command> [-- <args...>]" in result.output
    mock_spawn.assert_not_called()


@pytest.mark.parametrize(
    ("command", "tool"),
    [
        ("db:migration:create", "diesel"),
        ("db:migration:schema", "diesel"),
        ("docker:down", "docker"),
    ],
)
def test_missing_tool_exits_one(
    mocker: MockerFixture,
    mock_spawn: MagicMock,
    command: str,
    tool: str,
) -> None:
    """A missing diesel/docker exits 1 before any spawn."""
    mocker.patch(f"{_IO}.shutil.which", return_value=None)
    runner = click.testing.CliRunner()
    result = runner.invoke(main, [command, "--", "x"])
    assert result.exit_code == 1
    assert f"Required command not found: {tool}" in result.output
    mock_spawn.assert_not_called()


def test_spawn_failure_exits_one(mocker: MockerFixture) -> None:
    """cargo missing from PATH at spawn time exits 1 with a message."""
    mocker.patch(
        f"{_IO}.subprocess.Popen",
        side_effect=FileNotFoundError("cargo"),
    )
    runner = click.testing.CliRunner()
    result = runner.invoke(main, ["format"])
    assert result.exit_code == 1
    assert "Command not found: cargo" in result.output


def test_child_killed_by_signal_exits_128_plus_n(mocker: MockerFixture) -> None:
    """A child dying of SIGKILL makes the CLI exit 137."""
    _patch_popen(mocker, return_code=-9)
    runner = click.testing.CliRunner()
    result = runner.invoke(main, ["check"])
    assert result.exit_code == 137


def test_migration_create_forwards_name(
    mock_spawn: MagicMock,
    all_tools_present: None,
) -> None:
    """db:migration:create add_users forwards the migration name."""
    runner = click.testing.CliRunner()
    result = runner.invoke(main, ["db:migration:create", "add_users"])
    assert result.exit_code == 0
    assert mock_spawn.call_args.args[0] == [
        "diesel", "migration", "create", "add_users",
    ]


def test_schema_written_relative_to_cwd(
    mocker: MockerFixture,
    all_tools_present: None,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """db:migration:schema writes diesel's stdout to src/schema/table.rs."""
    monkeypatch.chdir(tmp_path)
    _patch_popen(mocker, stdout=b"diesel::table! {}\n")
    runner = click.testing.CliRunner()
    result = runner.invoke(main, ["db:migration:schema"])
    assert result.exit_code == 0
    table = tmp_path / "src" / "schema" / "table.rs"
    assert table.read_bytes() == b"diesel::table! {}\n"


# --- module execution ---


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


@pytest.mark.parametrize(
    ("args", "code"),
    [(["help"], 0), ([], 0), (["bogus"], 1)],
)
def test_python_m_devtask(args: list[str], code: int) -> None:
    """python -m devtask runs without spawning anything for help/bogus."""
    proc = subprocess.run(  # noqa: S603
        [sys.executable, "-m", "devtask", *args],
        cwd=_project_root(),
        capture_output=True,
        text=True,
        check=False,
    )
    assert proc.returncode == code
    stream = proc.stdout if code == 0 else proc.stderr
    assert "Usage: devtask" in stream


# --- real children and signals ---

_FAKE_CARGO = '''#!{python}
import pathlib
import signal
import sys
import time
import time

READY = pathlib.Path({ready!r})
STOPPED = pathlib.Path({stopped!r})


def _shutdown(signum, frame):
    time.sleep(0.5)
    STOPPED.write_text("clean")
    sys.exit(0)


signal.signal(signal.SIGINT, _shutdown)
if sys.argv[1:2] == ["build"]:
    signal.raise_signal(signal.SIGTERM)
READY.write_text("up")
while True:
    time.sleep(0.1)
'''


@pytest.fixture
def fake_cargo_env(tmp_path: Path) -> dict[str, str]:
    """Environment with a fake cargo first on PATH.

    The fake traps SIGINT, takes a moment to shut down, then
    writes tmp_path/stopped and exits 0. `cargo build` kills
    itself with SIGTERM instead.
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    cargo = bin_dir / "cargo"
    cargo.write_text(
        _FAKE_CARGO.format(
            python=sys.executable,
            ready=str(tmp_path / "ready"),
            stopped=str(tmp_path / "stopped"),
        ),
    )
    cargo.chmod(0o755)
    path = os.environ.get("PATH", "")
    return {**os.environ, "PATH": f"{bin_dir}{os.pathsep}{path}"}


def _wait_for(path: Path, proc: subprocess.Popen[bytes]) -> None:
    deadline = time.monotonic() + 30
    while not path.exists():
        assert proc.poll() is None, "devtask exited before the child was up"
        assert time.monotonic() < deadline, f"timed out waiting for {path}"
        time.sleep(0.05)


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
def test_ctrl_c_lets_child_shut_down_and_returns_its_code(
    tmp_path: Path,
    fake_cargo_env: dict[str, str],
) -> None:
    """SIGINT to the process group reaches the child, which exits 0."""
    proc = subprocess.Popen(  # noqa: S603
        [sys.executable, "-m", "devtask", "check"],
        cwd=_project_root(),
        env=fake_cargo_env,
        start_new_session=True,
    )
    try:
        _wait_for(tmp_path / "ready", proc)
        os.killpg(proc.pid, signal.SIGINT)
        assert proc.wait(timeout=30) == 0
    finally:
        if proc.poll() is None:
            os.killpg(proc.pid, signal.SIGKILL)
            proc.wait()
    assert (tmp_path / "stopped").read_text() == "clean"


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
def test_child_sigterm_gives_shell_exit_status(
    fake_cargo_env: dict[str, str],
) -> None:
    """A child killed by SIGTERM makes devtask exit 143."""
    proc = subprocess.run(  # noqa: S603
        [sys.executable, "-m", "devtask", "build"],
        cwd=_project_root(),
        env=fake_cargo_env,
        check=False,
        timeout=60,
    )
    assert proc.returncode == 143
