"""
Engine executor — runs a remediation action as an ordered list of phases.

Each phase returns a PhaseOutcome. The executor records it, logs it, and
stops at the first outcome that halts. Phases never decide whether the
action continues, and an exception escaping a phase becomes a failed
outcome of kind ``io`` rather than a traceback.

Flow:
    phases → run in order → short-circuit on failure → ActionReport → audit
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from dvmsetup.core.models.outcome import PhaseOutcome
from dvmsetup.core.persistence.audit import AuditEntry, AuditWriter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_PRECONDITION = 2


@dataclass
class Phase:
    """A named step of a remediation action."""

    name: str
    fn: Callable[[], PhaseOutcome]


@dataclass
class ActionReport:
    """Result of running an action's phases."""

    operation_id: str = ""
    action: str = ""
    outcomes: list[PhaseOutcome] = field(default_factory=list)
    phases_total: int = 0

    @property
    def failure(self) -> PhaseOutcome | None:
        """The outcome that stopped the action, if any."""
        for outcome in self.outcomes:
            if outcome.failed:
                return outcome
        return None

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "skipped")

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def status(self) -> str:
        failure = self.failure
        if failure is None:
            return "ok"
        if failure.kind == "precondition":
            return "precondition_failed"
        return "failed"

    @property
    def exit_code(self) -> int:
        status = self.status
        if status == "ok":
            return EXIT_OK
        if status == "precondition_failed":
            return EXIT_PRECONDITION
        return EXIT_FAILED

    @property
    def reboot_required(self) -> bool:
        return any(o.ok and o.details.get("reboot_required") for o in self.outcomes)

    @property
    def files(self) -> list[str]:
        """Files the phases reported writing (backups, edits, configs)."""
        paths: list[str] = []
        for outcome in self.outcomes:
            paths.extend(outcome.details.get("files", []))
        return paths

    def get(self, phase: str) -> PhaseOutcome | None:
        for outcome in self.outcomes:
            if outcome.phase == phase:
                return outcome
        return None

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "action": self.action,
            "status": self.status,
            "exit_code": self.exit_code,
            "reboot_required": self.reboot_required,
            "phases_total": self.phases_total,
            "phases_run": len(self.outcomes),
            "outcomes": [o.model_dump(mode="json") for o in self.outcomes],
        }


def run_phases(
    action: str,
    phases: list[Phase],
    operation_id: str | None = None,
) -> ActionReport:
    """Run phases in order, stopping at the first failure.

    Args:
        action: Action name (``prepare``, ``install``).
        phases: Phases to run.
        operation_id: Identifier for the audit ledger. Generated if None.

    Returns:
        ActionReport with one outcome per phase that ran.
    """
    report = ActionReport(
        operation_id=operation_id or generate_operation_id(),
        action=action,
        phases_total=len(phases),
    )

    for phase in phases:
        try:
            outcome = phase.fn()
        except Exception as e:
            logger.error("Phase %s raised: %s", phase.name, e)
            outcome = PhaseOutcome.failure(phase.name, f"Unexpected error: {e}", kind="io")

        report.outcomes.append(outcome)

        status_marker = "✓" if outcome.ok else "✗" if outcome.failed else "⊘"
        logger.info("%s %s:%s → %s %s", status_marker, action, phase.name,
                    outcome.status, outcome.message)

        if outcome.halts:
            logger.warning("%s stopped at %s: %s", action, phase.name, outcome.message)
            break

    return report


def write_audit_entry(
    report: ActionReport,
    audit_writer: AuditWriter,
    context: dict | None = None,
) -> None:
    """Append the report to the audit ledger."""
    entry = AuditEntry(
        operation_id=report.operation_id,
        operation_type=report.action,
        status=report.status,
        exit_code=report.exit_code,
        phases_total=report.phases_total,
        phases_ok=report.succeeded,
        phases_skipped=report.skipped,
        phases_failed=report.failed,
        files=report.files,
        errors=[f"{o.phase}: {o.message}" for o in report.outcomes if o.failed],
        context=context or {},
    )
    audit_writer.write(entry)


def generate_operation_id() -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"op-{now}-{short}"
