"""
Placeholder discovery and substitution.

A placeholder is ``${NAME}``: a dollar sign, an opening brace, one or
more characters other than ``}``, and a closing brace.

Substitution is a single ``re.sub`` pass with a function replacement.
Values are inserted literally, so ``/``, ``&``, backslashes, ``\\1`` and
even ``${OTHER}`` inside a value come out exactly as typed and are never
re-scanned.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")


def extract(text: str) -> tuple[str, ...]:
    """Unique placeholder names in ``text``, sorted."""
    return tuple(sorted(set(PLACEHOLDER_RE.findall(text))))


def substitute(text: str, bindings: Mapping[str, str]) -> str:
    """Replace every bound placeholder; leave unbound ones untouched."""

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in bindings:
            return bindings[name]
        return match.group(0)

    return PLACEHOLDER_RE.sub(_replace, text)


def display_label(name: str) -> str:
    """``SITE_NAME`` → ``site name``."""
    return " ".join(name.replace("_", " ").lower().split())
