"""
Value collection — one non-empty value per placeholder.

The collector decides what to ask and validates the answer. Input
providers decide where answers come from:

    PromptInput     the terminal, via click.prompt
    ScriptedInput   a fixed list of lines, consumed in order
    AnswersInput    a mapping keyed by placeholder name (answers file)

Every provider raises InputExhausted when it has nothing left to give.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping

import click

from dvmsetup.core.errors import InputExhausted
from dvmsetup.core.services.templating.placeholders import display_label

logger = logging.getLogger(__name__)

EMPTY_VALUE_WARNING = "Value cannot be empty"


class InputProvider(ABC):
    """Source of answers."""

    @abstractmethod
    def ask(self, placeholder: str, label: str) -> str:
        """Return the raw answer for ``placeholder``.

        Raises:
            InputExhausted: No more input is available.
        """

    def warn(self, message: str) -> None:
        """Tell whoever is answering that the last answer was rejected."""
        logger.warning(message)


class PromptInput(InputProvider):
    """Interactive terminal prompt."""

    def ask(self, placeholder: str, label: str) -> str:
        try:
            return click.prompt(
                f"Enter value for {label}", default="", show_default=False,
            )
        except (click.Abort, EOFError) as e:
            raise InputExhausted(f"No input for {placeholder}") from e

    def warn(self, message: str) -> None:
        logger.debug(message)
        click.secho(f"  ⚠ {message}", fg="yellow", err=True)


class ScriptedInput(InputProvider):
    """Answers from a list, in order."""

    def __init__(self, lines: Iterable[str]):
        self._lines = list(lines)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._lines) - self._pos

    def ask(self, placeholder: str, label: str) -> str:
        if self._pos >= len(self._lines):
            raise InputExhausted(f"No input for {placeholder}")
        line = self._lines[self._pos]
        self._pos += 1
        return line


class AnswersInput(InputProvider):
    """Answers keyed by placeholder name.

    A blank answer cannot be corrected by asking again, so it is treated
    the same as a missing one.
    """

    def __init__(self, answers: Mapping[str, object]):
        self._answers = {str(k): "" if v is None else str(v) for k, v in answers.items()}

    def ask(self, placeholder: str, label: str) -> str:
        value = self._answers.get(placeholder, "")
        if not value.strip():
            raise InputExhausted(f"No answer for {placeholder}")
        return value


class ValueCollector:
    """Ask until every placeholder has a non-empty value."""

    def __init__(self, provider: InputProvider):
        self.provider = provider

    def collect(self, placeholder: str) -> str:
        label = display_label(placeholder)
        while True:
            value = self.provider.ask(placeholder, label).strip()
            if value:
                return value
            self.provider.warn(EMPTY_VALUE_WARNING)

    def collect_all(self, placeholders: Iterable[str]) -> dict[str, str]:
        return {name: self.collect(name) for name in sorted(placeholders)}
