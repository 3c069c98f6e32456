"""
Action and Receipt — what a phase asks an adapter to do, and what came back.

A phase never runs ``apt-get`` or opens a URL itself. It builds an Action
(``core.services.commands``) and the registry hands back a Receipt. A
failed command is a failed Receipt, not an exception.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class Action(BaseModel):
    """One external side effect.

    ``id`` is stable and descriptive (``apt:install_dependencies``,
    ``systemctl-mask:hciuart.service``) so tests and ``--mock`` output
    can refer to it.
    """

    id: str
    adapter: str                    # "shell" or "http"
    name: str = ""                  # command line or URL, for logs
    params: dict[str, Any] = Field(default_factory=dict)


class Receipt(BaseModel):
    """Result of executing an Action."""

    adapter: str
    action_id: str
    status: Literal["ok", "failed"] = "ok"
    duration_ms: int = 0

    output: str = ""                # stdout, or a download summary
    error: str | None = None        # stderr or transport error when failed

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, output=output, **kwargs)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **kwargs)
