"""
Reconciliation menu — the interactive loop over probes and actions.

Each iteration re-runs every probe, shows the grouped status, and reads
one choice:

    1  host preparation
    2  application installation
    3  both (install only if preparation succeeded)
    4  refresh status
    q  quit

Invalid input redisplays the menu. End of input quits. An action that
fails (including on a precondition) is reported and the loop continues;
quitting is the only way out.

Rendering and input are supplied by a MenuView so this loop knows
nothing about terminals.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import StrEnum

from dvmsetup.core.engine.executor import ActionReport
from dvmsetup.core.models.probe import ProbeResult

logger = logging.getLogger(__name__)


class MenuChoice(StrEnum):
    PREPARE = "1"
    INSTALL = "2"
    BOTH = "3"
    REFRESH = "4"
    QUIT = "q"


MENU_OPTIONS: list[tuple[MenuChoice, str]] = [
    (MenuChoice.PREPARE, "Run Pi preparation"),
    (MenuChoice.INSTALL, "Run DVMHost installation"),
    (MenuChoice.BOTH, "Run both (preparation, then installation)"),
    (MenuChoice.REFRESH, "Refresh status"),
    (MenuChoice.QUIT, "Quit"),
]


def parse_choice(raw: str) -> MenuChoice | None:
    """Map raw input to a choice, or None if it is not one."""
    try:
        return MenuChoice(raw.strip().lower())
    except ValueError:
        return None


class MenuView(ABC):
    """Presentation side of the menu."""

    @abstractmethod
    def show_status(self, results: list[ProbeResult]) -> None:
        ...

    @abstractmethod
    def show_options(self, options: list[tuple[MenuChoice, str]]) -> None:
        ...

    @abstractmethod
    def read_choice(self) -> str | None:
        """Next line of input, or None at end of input."""

    @abstractmethod
    def show_invalid(self, raw: str) -> None:
        ...

    @abstractmethod
    def show_starting(self, action: str) -> None:
        ...

    @abstractmethod
    def show_report(self, report: ActionReport) -> None:
        ...

    def show_skipped(self, action: str, reason: str) -> None:
        """An action that was not started."""


class ReconciliationMenu:
    """Menu loop.

    Args:
        run_probes: Returns fresh probe results. Called every iteration.
        prepare: Runs host preparation.
        install: Runs application installation.
        view: Rendering and input.
    """

    def __init__(
        self,
        run_probes: Callable[[], list[ProbeResult]],
        prepare: Callable[[], ActionReport],
        install: Callable[[], ActionReport],
        view: MenuView,
    ):
        self._run_probes = run_probes
        self._prepare = prepare
        self._install = install
        self._view = view
        self.reports: list[ActionReport] = []

    def _run(self, name: str, action: Callable[[], ActionReport]) -> ActionReport:
        self._view.show_starting(name)
        report = action()
        self.reports.append(report)
        self._view.show_report(report)
        return report

    def handle(self, choice: MenuChoice) -> bool:
        """Act on one choice. Returns False when the menu should exit."""
        if choice is MenuChoice.QUIT:
            return False
        if choice is MenuChoice.PREPARE:
            self._run("prepare", self._prepare)
        elif choice is MenuChoice.INSTALL:
            self._run("install", self._install)
        elif choice is MenuChoice.BOTH:
            report = self._run("prepare", self._prepare)
            if report.ok:
                self._run("install", self._install)
            else:
                self._view.show_skipped("install", "preparation did not succeed")
        return True

    def run(self) -> list[ActionReport]:
        """Loop until quit or end of input. Returns every action report."""
        while True:
            self._view.show_status(self._run_probes())
            self._view.show_options(MENU_OPTIONS)

            raw = self._view.read_choice()
            if raw is None:
                logger.debug("End of input, leaving menu")
                break

            choice = parse_choice(raw)
            if choice is None:
                self._view.show_invalid(raw)
                continue

            if not self.handle(choice):
                break

        return self.reports
