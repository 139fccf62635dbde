"""Command registry and lookup functions."""
from __future__ import annotations

from types import MappingProxyType

from devtask.task_modules.commands.types import CommandEntry

_APP = "App"
_DB = "Database (Diesel)"
_DOCKER = "Docker"
_QUALITY = "Code Quality"
_HELP = "Help"

SCHEMA_DIR = "src/schema"
SCHEMA_FILE = "src/schema/table.rs"

COMMAND_REGISTRY: MappingProxyType[str, CommandEntry] = (
    MappingProxyType(
        {
            "help": CommandEntry(
                name="help",
                description="Show this help (aliases: -h, --help)",
                category=_HELP,
                action="help",
            ),
            # App
            "start": CommandEntry(
                name="start",
                description=(
                    "Load .env.production, run cargo run --release"
                ),
                category=_APP,
                program="cargo",
                fixed_args=("run", "--release", "--"),
                forward_args=True,
                env_file=".env.production",
            ),
            "dev": CommandEntry(
                name="dev",
                description="Load .env.local, run cargo run",
                category=_APP,
                program="cargo",
                fixed_args=("run", "--"),
                separator=True,
                forward_args=True,
                env_file=".env.local",
            ),
            "dev:staging": CommandEntry(
                name="dev:staging",
                description="Load .env.staging, run cargo run",
                category=_APP,
                program="cargo",
                fixed_args=("run", "--"),
                separator=True,
                forward_args=True,
                env_file=".env.staging",
            ),
            "dev:production": CommandEntry(
                name="dev:production",
                description=(
                    "Load .env.production, run cargo run --release"
                ),
                category=_APP,
                program="cargo",
                fixed_args=("run", "--release", "--"),
                forward_args=True,
                env_file=".env.production",
            ),
            "build": CommandEntry(
                name="build",
                description="cargo build --release",
                category=_APP,
                program="cargo",
                fixed_args=("build", "--release"),
                forward_args=True,
            ),
            "build:staging": CommandEntry(
                name="build:staging",
                description="Load .env.staging, build --release",
                category=_APP,
                program="cargo",
                fixed_args=("build", "--release"),
                forward_args=True,
                env_file=".env.staging",
            ),
            "build:production": CommandEntry(
                name="build:production",
                description="Load .env.production, build --release",
                category=_APP,
                program="cargo",
                fixed_args=("build", "--release"),
                forward_args=True,
                env_file=".env.production",
            ),
            # Database (Diesel)
            "db:migration:create": CommandEntry(
                name="db:migration:create",
                description="diesel migration create NAME",
                category=_DB,
                program="diesel",
                fixed_args=("migration", "create"),
                forward_args=True,
                requires_tool="diesel",
                usage_hint="NAME",
            ),
            "db:migration:run": CommandEntry(
                name="db:migration:run",
                description="diesel migration run",
                category=_DB,
                program="diesel",
                fixed_args=("migration", "run"),
                forward_args=True,
                requires_tool="diesel",
            ),
            "db:migration:revert": CommandEntry(
                name="db:migration:revert",
                description="diesel migration revert",
                category=_DB,
                program="diesel",
                fixed_args=("migration", "revert"),
                forward_args=True,
                requires_tool="diesel",
            ),
            "db:migration:reset": CommandEntry(
                name="db:migration:reset",
                description="diesel migration redo",
                category=_DB,
                program="diesel",
                fixed_args=("migration", "redo"),
                forward_args=True,
                requires_tool="diesel",
            ),
            "db:migration:status": CommandEntry(
                name="db:migration:status",
                description="diesel migration list",
                category=_DB,
                program="diesel",
                fixed_args=("migration", "list"),
                forward_args=True,
                requires_tool="diesel",
            ),
            "db:migration:schema": CommandEntry(
                name="db:migration:schema",
                description=(
                    f"mkdir -p {SCHEMA_DIR} &&"
                    f" diesel print-schema > {SCHEMA_FILE}"
                ),
                category=_DB,
                action="schema",
                program="diesel",
                fixed_args=("print-schema",),
                requires_tool="diesel",
            ),
            # Docker
            "docker:up": CommandEntry(
                name="docker:up",
                description="docker compose up -d --build",
                category=_DOCKER,
                program="docker",
                fixed_args=("compose", "up", "-d", "--build"),
                requires_tool="docker",
            ),
            "docker:down": CommandEntry(
                name="docker:down",
                description="docker compose down",
                category=_DOCKER,
                program="docker",
                fixed_args=("compose", "down"),
                requires_tool="docker",
            ),
            # Code quality
            "check": CommandEntry(
                name="check",
                description="cargo check",
                category=_QUALITY,
                program="cargo",
                fixed_args=("check",),
            ),
            "lint": CommandEntry(
                name="lint",
                description="cargo clippy -- -D warnings",
                category=_QUALITY,
                program="cargo",
                fixed_args=("clippy", "--", "-D", "warnings"),
            ),
            "lint:fix": CommandEntry(
                name="lint:fix",
                description=(
                    "cargo clippy --fix --allow-dirty --allow-staged"
                ),
                category=_QUALITY,
                program="cargo",
                fixed_args=(
                    "clippy",
                    "--fix",
                    "--allow-dirty",
                    "--allow-staged",
                ),
            ),
            "format": CommandEntry(
                name="format",
                description="cargo fmt",
                category=_QUALITY,
                program="cargo",
                fixed_args=("fmt",),
            ),
            "format:check": CommandEntry(
                name="format:check",
                description="cargo fmt -- --check",
                category=_QUALITY,
                program="cargo",
                fixed_args=("fmt", "--", "--check"),
            ),
        }
    )
)

COMMAND_ALIASES: MappingProxyType[str, str] = MappingProxyType(
    {"-h": "help", "--help": "help"},
)

CATEGORY_ORDER: tuple[str, ...] = (_APP, _DB, _DOCKER, _QUALITY)


def resolve_alias(name: str) -> str:
    """Map an alias to its canonical command name."""
    return COMMAND_ALIASES.get(name, name)


def get_command(name: str) -> CommandEntry | None:
    """Look up a command by name or alias. Returns None if not found.

    Matching is exact and case-sensitive.
    """
    return COMMAND_REGISTRY.get(resolve_alias(name))


def list_commands() -> list[CommandEntry]:
    """Return all registered commands in table order."""
    return list(COMMAND_REGISTRY.values())


def available_names() -> list[str]:
    """Return every accepted command token, aliases included, sorted."""
    return sorted([*COMMAND_REGISTRY, *COMMAND_ALIASES])
