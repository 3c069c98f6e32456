"""
Atomic file replacement.

Boot-file edits and generated site configs are written to a staging
file in the same directory, then renamed over the target. A reader (or
a reboot) sees either the old content or the new content, never a
partial write. If anything fails, the staging file is removed.

Content is encoded with ``surrogateescape``: a boot file that carried
non-UTF-8 bytes when it was read gets the same bytes back.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def write_atomic(path: Path, content: str, *, mode: int | None = None) -> None:
    """Replace ``path`` with ``content`` via stage-then-rename.

    Args:
        path: Target file. Its parent directory must already exist.
        content: Full new content.
        mode: Permission bits for the new file. Defaults to the mode of
            the file being replaced, or 0o644 for a new file.
    """
    if mode is None:
        try:
            mode = path.stat().st_mode & 0o777
        except FileNotFoundError:
            mode = 0o644

    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".staging",
    )
    tmp = Path(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        tmp.chmod(mode)
        tmp.replace(path)
        logger.debug("Wrote %s (%d bytes)", path, len(content))
    except Exception:
        tmp.unlink(missing_ok=True)
        logger.error("Failed to write %s; staging file removed", path)
        raise
