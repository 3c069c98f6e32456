"""
Adapter registry — the single dispatch point for commands and downloads.

Remediation phases hand an Action to ``execute_action`` and get a
Receipt back. With mock mode on (``--mock``), nothing is executed: every
action is logged and reported as successful, unless a replacement
adapter is supplied to record the calls instead.
"""

from __future__ import annotations

import logging
import time

from dvmsetup.adapters.base import Adapter, ExecutionContext
from dvmsetup.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Adapters by name, plus mock mode."""

    def __init__(self, mock_mode: bool = False):
        self._adapters: dict[str, Adapter] = {}
        self._mock_mode = mock_mode
        self._mock_adapter: Adapter | None = None

    @property
    def mock_mode(self) -> bool:
        return self._mock_mode

    def set_mock_mode(self, enabled: bool, mock_adapter: Adapter | None = None) -> None:
        self._mock_mode = enabled
        self._mock_adapter = mock_adapter

    def register(self, adapter: Adapter) -> None:
        if adapter.name in self._adapters:
            logger.warning("Replacing adapter %s", adapter.name)
        self._adapters[adapter.name] = adapter

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def _resolve(self, action: Action) -> Adapter | None:
        if self._mock_mode:
            return self._mock_adapter
        return self._adapters.get(action.adapter)

    def execute_action(self, action: Action) -> Receipt:
        """Run ``action`` and return its receipt. Never raises."""
        if self._mock_mode and self._mock_adapter is None:
            logger.info("[mock] %s (%s)", action.id, action.name or action.adapter)
            return Receipt.success(
                adapter=action.adapter,
                action_id=action.id,
                output=f"[mock] {action.id}",
                metadata={"mock": True},
            )

        adapter = self._resolve(action)
        if adapter is None:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"No adapter registered for '{action.adapter}'",
            )
        if not adapter.is_available():
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Adapter '{adapter.name}' is not available on this host",
            )

        context = ExecutionContext(action=action, params=action.params)
        start = time.monotonic()
        try:
            valid, reason = adapter.validate(context)
            if not valid:
                return Receipt.failure(
                    adapter=action.adapter,
                    action_id=action.id,
                    error=f"Validation failed: {reason}",
                )
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("Adapter %s raised on %s: %s", action.adapter, action.id, e)
            receipt = Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Unexpected error: {e}",
            )

        receipt.duration_ms = int((time.monotonic() - start) * 1000)
        if receipt.failed:
            logger.debug("%s failed: %s", action.id, receipt.error)
        return receipt


def build_default_registry(mock_mode: bool = False) -> AdapterRegistry:
    """Registry with the shell and http adapters registered."""
    from dvmsetup.adapters.net.http import HttpDownloadAdapter
    from dvmsetup.adapters.shell.command import ShellCommandAdapter

    registry = AdapterRegistry(mock_mode=mock_mode)
    registry.register(ShellCommandAdapter())
    registry.register(HttpDownloadAdapter())
    return registry
