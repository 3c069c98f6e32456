"""
Error taxonomy.

    PreconditionFailure  unsupported OS or hardware, missing config directory.
    TransferFailure      network fetch or download failed. Aborts the action/session.
    FetchError           a template could not be fetched.
    InputExhausted       end of input while a value was still required.

A failed command is not an exception: the phase returns a failed
PhaseOutcome of kind ``command``. Probes report ``indeterminate`` rather
than raise, and empty input is re-prompted.
"""

from __future__ import annotations


class DvmSetupError(Exception):
    """Base class for every error this tool raises on purpose."""


class PreconditionFailure(DvmSetupError):
    """A hard precondition does not hold. Never retried."""


class TransferFailure(DvmSetupError):
    """A network transfer failed."""


class FetchError(TransferFailure):
    """A template could not be retrieved."""

    def __init__(self, template_id: str, url: str, reason: str):
        super().__init__(f"Failed to fetch template {template_id} from {url}: {reason}")
        self.template_id = template_id
        self.url = url
        self.reason = reason


class InputExhausted(DvmSetupError):
    """Input ended before a required answer was given."""
