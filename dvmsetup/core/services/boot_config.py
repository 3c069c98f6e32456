"""
Boot-file text edits — pure functions over cmdline.txt and config.txt.

Probes and remediation share these predicates, so a file that has been
edited always probes as satisfied, and re-applying an edit is a no-op.

An "active line" is a line whose stripped text equals the directive.
Commented-out directives (``#dtoverlay=disable-bt``) do not count.
"""

from __future__ import annotations


def has_token(text: str, token: str) -> bool:
    """Whether ``token`` appears as a whitespace-delimited word."""
    return token in text.split()


def remove_cmdline_token(text: str, token: str) -> str:
    """Remove every occurrence of ``token`` from a kernel command line.

    Whitespace is collapsed to single spaces and a trailing newline is
    preserved. Text without the token is returned unchanged.
    """
    if not has_token(text, token):
        return text
    kept = [word for word in text.split() if word != token]
    result = " ".join(kept)
    if text.endswith("\n"):
        result += "\n"
    return result


def has_active_line(text: str, line: str) -> bool:
    return any(row.strip() == line for row in text.splitlines())


def ensure_line(text: str, line: str) -> str:
    """Append ``line`` unless an active copy already exists."""
    if has_active_line(text, line):
        return text
    if text and not text.endswith("\n"):
        text += "\n"
    return text + line + "\n"


def ensure_uart_block(text: str, section: str, lines: list[str]) -> str:
    """Make sure ``section`` exists and each of ``lines`` is active.

    Missing lines go directly after the first ``section`` header, in the
    order given. Lines that are already active elsewhere are left alone.
    """
    text = ensure_line(text, section)
    missing = [line for line in lines if not has_active_line(text, line)]
    if not missing:
        return text

    trailing = text.endswith("\n")
    rows = text.splitlines()
    header = next(i for i, row in enumerate(rows) if row.strip() == section)
    rows[header + 1:header + 1] = missing

    result = "\n".join(rows)
    return result + "\n" if trailing else result


def uart_configured(text: str, lines: list[str]) -> tuple[bool, list[str]]:
    """Whether all UART lines are active, and which ones are missing."""
    missing = [line for line in lines if not has_active_line(text, line)]
    return not missing, missing
