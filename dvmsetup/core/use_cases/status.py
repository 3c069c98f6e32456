"""
Status use case — run every probe and report the host's state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dvmsetup.core.context import RunContext
from dvmsetup.core.models.host import HostProfile
from dvmsetup.core.models.probe import ProbeResult
from dvmsetup.core.services.probes import count_statuses, group_results


@dataclass
class StatusResult:
    """Probe results for one host."""

    profile: HostProfile | None = None
    results: list[ProbeResult] = field(default_factory=list)

    @property
    def grouped(self) -> dict[str, list[ProbeResult]]:
        return group_results(self.results)

    @property
    def counts(self) -> dict[str, int]:
        return count_statuses(self.results)

    @property
    def needs_action(self) -> bool:
        return any(r.needs_action for r in self.results)

    def to_dict(self) -> dict:
        return {
            "host": self.profile.model_dump(mode="json") if self.profile else None,
            "summary": self.counts,
            "probes": [r.model_dump(mode="json") for r in self.results],
        }


def get_status(ctx: RunContext) -> StatusResult:
    """Run all probes against the context's host."""
    return StatusResult(profile=ctx.profile, results=ctx.probes().run_all())
