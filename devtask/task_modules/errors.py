"""Error types for the devtask command dispatcher."""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PipelineError:
    """Structured error for dispatch and I/O boundary failures.

    step_name names the function that failed (e.g.
    "io_ops.run_process"), error_type is a short machine
    readable tag (e.g. "MissingToolError").
    """

    step_name: str
    error_type: str
    message: str
    context: dict[str, object] = field(default_factory=dict)

    def __str__(self) -> str:
        """Human-readable one-liner used for debug logging."""
        max_len = 300
        base = f"{self.error_type}: {self.message}"
        if self.context:
            ctx_str = str(self.context)
            if len(ctx_str) > max_len:
                ctx_str = ctx_str[: max_len - 3] + "..."
            base += f" | context={ctx_str}"
        return base
