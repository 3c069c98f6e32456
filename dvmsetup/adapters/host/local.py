"""
LocalHost — HostView backed by the real machine.

Files through pathlib, services through ``systemctl``, packages through
``dpkg-query``. Query helpers never raise: a missing checker binary
returns None, a failing one is logged and treated as "no".
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path

from dvmsetup.adapters.host.view import HostView
from dvmsetup.core.persistence.atomic_write import write_atomic

logger = logging.getLogger(__name__)

_QUERY_TIMEOUT = 10


class LocalHost(HostView):
    """The machine dvmsetup is running on."""

    # ── Files ───────────────────────────────────────────────────

    def read_text(self, path: str) -> str | None:
        try:
            return Path(path).read_text(encoding="utf-8", errors="surrogateescape")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.debug("Cannot read %s: %s", path, e)
            return None

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def is_dir(self, path: str) -> bool:
        return Path(path).is_dir()

    def list_dir(self, path: str) -> list[str]:
        try:
            return sorted(os.listdir(path))
        except OSError:
            return []

    def write_text_atomic(self, path: str, content: str) -> None:
        write_atomic(Path(path), content)

    def copy_file(self, src: str, dst: str) -> None:
        shutil.copy2(src, dst)

    def make_dirs(self, path: str) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def remove_tree(self, path: str) -> None:
        shutil.rmtree(path)

    def make_temp_file(self, suffix: str = "") -> str:
        fd, name = tempfile.mkstemp(prefix="dvmsetup-", suffix=suffix)
        os.close(fd)
        return name

    def remove_file(self, path: str) -> None:
        Path(path).unlink(missing_ok=True)

    # ── Commands, services, packages ────────────────────────────

    def has_command(self, name: str) -> bool:
        return shutil.which(name) is not None

    def _query(self, argv: list[str]) -> subprocess.CompletedProcess[str] | None:
        """Run a read-only query. None if the binary is missing."""
        try:
            return subprocess.run(
                argv, capture_output=True, text=True, timeout=_QUERY_TIMEOUT,
            )
        except FileNotFoundError:
            logger.debug("Checker not found: %s", argv[0])
            return None
        except (subprocess.TimeoutExpired, OSError) as e:
            logger.warning("Query %s failed: %s", " ".join(argv), e)
            return subprocess.CompletedProcess(argv, 1, "", str(e))

    def unit_file_exists(self, unit: str) -> bool | None:
        r = self._query(["systemctl", "list-unit-files", "--no-legend", unit])
        if r is None:
            return None
        return any(line.split()[0] == unit for line in r.stdout.splitlines() if line.strip())

    def unit_is_enabled(self, unit: str) -> bool | None:
        r = self._query(["systemctl", "is-enabled", unit])
        if r is None:
            return None
        return r.stdout.strip() in ("enabled", "enabled-runtime")

    def package_installed(self, package: str) -> bool | None:
        r = self._query(["dpkg-query", "-W", "-f=${Status}", package])
        if r is None:
            return None
        return "install ok installed" in r.stdout
