"""
Probe models — what a read-only host check reports.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class ProbeStatus(StrEnum):
    """Outcome of a probe.

    INDETERMINATE means the probe could not observe the state (a file or
    checker binary is missing). NOT_APPLICABLE means the check does not
    apply to this hardware. Neither is ever folded into UNSATISFIED.
    """

    SATISFIED = "satisfied"
    UNSATISFIED = "unsatisfied"
    INDETERMINATE = "indeterminate"
    NOT_APPLICABLE = "not_applicable"


class ProbeResult(BaseModel):
    """A single probe outcome plus the evidence that produced it."""

    identifier: str
    title: str = ""
    group: str = ""
    status: ProbeStatus
    evidence: str = ""

    @property
    def satisfied(self) -> bool:
        return self.status is ProbeStatus.SATISFIED

    @property
    def needs_action(self) -> bool:
        """Whether a remediation would change something."""
        return self.status is ProbeStatus.UNSATISFIED
