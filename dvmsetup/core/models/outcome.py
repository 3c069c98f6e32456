"""
PhaseOutcome — the result type every remediation phase returns.

Phases never decide whether the action continues. They report what
happened; the engine (``core.engine.executor``) reads ``halts`` and
short-circuits.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

FailureKind = Literal["precondition", "transfer", "command", "io"]


class PhaseOutcome(BaseModel):
    """What a single phase did."""

    phase: str
    status: Literal["ok", "skipped", "failed"] = "ok"
    kind: FailureKind | None = None     # set only when status == "failed"
    message: str = ""
    details: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def halts(self) -> bool:
        """Whether the action must stop after this phase."""
        return self.failed

    @classmethod
    def success(cls, phase: str, message: str = "", **details: Any) -> PhaseOutcome:
        return cls(phase=phase, status="ok", message=message, details=details)

    @classmethod
    def skip(cls, phase: str, message: str = "", **details: Any) -> PhaseOutcome:
        return cls(phase=phase, status="skipped", message=message, details=details)

    @classmethod
    def failure(
        cls,
        phase: str,
        message: str,
        kind: FailureKind = "command",
        **details: Any,
    ) -> PhaseOutcome:
        return cls(phase=phase, status="failed", kind=kind, message=message, details=details)
