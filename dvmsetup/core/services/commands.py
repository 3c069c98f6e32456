"""
Command helpers — build Actions for the shell and http adapters.

Remediation phases call these instead of building Action objects by
hand, so every external command is dispatched (and mockable) the same way.
"""

from __future__ import annotations

from dvmsetup.adapters.registry import AdapterRegistry
from dvmsetup.core.models.action import Action, Receipt


def run_command(
    registry: AdapterRegistry,
    action_id: str,
    argv: list[str],
    *,
    env: dict[str, str] | None = None,
) -> Receipt:
    """Run ``argv`` through the shell adapter."""
    params: dict = {"argv": argv}
    if env:
        params["env"] = env
    return registry.execute_action(
        Action(id=action_id, name=" ".join(argv), adapter="shell", params=params),
    )


def download(registry: AdapterRegistry, action_id: str, url: str, dest: str) -> Receipt:
    """Download ``url`` to ``dest`` through the http adapter."""
    return registry.execute_action(
        Action(
            id=action_id,
            name=f"download {url}",
            adapter="http",
            params={"url": url, "dest": dest},
        ),
    )
