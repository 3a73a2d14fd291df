"""PipelineTrace and TraceEntry — debug execution recording."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from todo_server.stage import StageCategory


@dataclass(frozen=True)
class TraceEntry:
    """Single stage execution record."""

    stage_name: str
    category: StageCategory
    duration_ms: float
    outcome: Literal["OK", "RESPONDED", "FAILED"]
    reason: str | None = None


@dataclass
class PipelineTrace:
    """Structured record of a single pipeline execution."""

    entries: list[TraceEntry] = field(default_factory=list)
    total_duration_ms: float = 0.0
    outcome: Literal["OK", "NOT_FOUND", "ERROR"] = "OK"
    error: Exception | None = None

    def summary(self) -> str:
        stages = ", ".join(
            f"{e.stage_name}={e.outcome}({e.duration_ms:.2f}ms)" for e in self.entries
        )
        return f"{self.outcome} in {self.total_duration_ms:.2f}ms [{stages}]"
