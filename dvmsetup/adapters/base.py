"""
Adapter contract — how remediation phases reach external tools.

An adapter wraps one kind of side effect (running a process, downloading
a URL). Phases build an Action and pass it to the registry; the adapter
turns it into a Receipt.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from dvmsetup.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """The action being executed and its parameters."""

    action: Action
    params: dict[str, Any] = Field(default_factory=dict)


class Adapter(ABC):
    """Base class for the shell and http adapters (and their mocks)."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Key that ``Action.adapter`` refers to."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying tool exists on this host."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Check params before executing. Returns (ok, reason)."""

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Perform the side effect.

        Failures (non-zero exit, HTTP error, missing binary) are returned
        as failed receipts, never raised.
        """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
