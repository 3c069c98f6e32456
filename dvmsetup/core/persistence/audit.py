"""
Audit ledger — one NDJSON line per prepare, install or configure run.

The ledger lives at ``<state_dir>/audit.ndjson``. It answers the
questions an operator has after a reboot: which boot files were backed
up and to where, which configs a session wrote, and why a run stopped.
Lines are only ever appended.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_AUDIT_FILE = "audit.ndjson"


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()


class AuditEntry(BaseModel):
    """One run of one action."""

    timestamp: str = Field(default_factory=_utc_now)
    operation_id: str = ""
    operation_type: str = ""       # prepare | install | configure

    status: str = ""               # ok | failed | precondition_failed
    exit_code: int = 0
    phases_total: int = 0
    phases_ok: int = 0
    phases_skipped: int = 0
    phases_failed: int = 0

    files: list[str] = Field(default_factory=list)     # backups and generated configs
    errors: list[str] = Field(default_factory=list)
    context: dict[str, Any] = Field(default_factory=dict)


def default_audit_path(state_dir: str | Path) -> Path:
    return Path(state_dir) / DEFAULT_AUDIT_FILE


class AuditWriter:
    """Appends entries to, and reads them back from, one ledger file."""

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def write(self, entry: AuditEntry) -> None:
        """Append ``entry``, creating the state directory if needed.

        A ledger write error is logged and swallowed so that it cannot
        turn a completed action into a failed one.
        """
        line = json.dumps(entry.model_dump(mode="json"), ensure_ascii=False)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            logger.error("Cannot append to audit ledger %s: %s", self._path, e)
            return
        logger.debug("Audited %s %s (%s)", entry.operation_type, entry.operation_id, entry.status)

    def read_all(self) -> list[AuditEntry]:
        """Every readable entry, oldest first. Corrupt lines are skipped."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error("Cannot read audit ledger %s: %s", self._path, e)
            return []

        entries: list[AuditEntry] = []
        for number, raw in enumerate(text.splitlines(), start=1):
            if not raw.strip():
                continue
            try:
                entries.append(AuditEntry.model_validate(json.loads(raw)))
            except (ValueError, ValidationError) as e:
                logger.warning("%s:%d: skipping unreadable entry (%s)", self._path, number, e)
        return entries

    def read_recent(self, n: int = 20) -> list[AuditEntry]:
        return self.read_all()[-n:] if n > 0 else []
