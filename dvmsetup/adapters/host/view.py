"""
HostView — abstract interface over the filesystem, the service manager
and the package database.

Probes use only the read-side methods. Boot-file edits, backups and the
config session use the write side. Anything that starts a long-running
process (apt-get, tar, the mesh installer) is not here; it goes through
the adapter registry instead.

Queries that depend on a checker binary (systemctl, dpkg-query) return
``None`` when the binary is missing, so callers can tell "not installed"
apart from "could not ask".
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class HostView(ABC):
    """Read and write access to one host."""

    # ── Files ───────────────────────────────────────────────────

    @abstractmethod
    def read_text(self, path: str) -> str | None:
        """File content, or None if the file does not exist or cannot be read.

        Bytes that are not UTF-8 decode as surrogate escapes, so text read
        here and passed back to ``write_text_atomic`` keeps them unchanged.
        """

    @abstractmethod
    def exists(self, path: str) -> bool:
        ...

    @abstractmethod
    def is_dir(self, path: str) -> bool:
        ...

    @abstractmethod
    def list_dir(self, path: str) -> list[str]:
        """Entry names in a directory. Empty if it is missing."""

    @abstractmethod
    def write_text_atomic(self, path: str, content: str) -> None:
        """Replace a file through a staging file and a rename."""

    @abstractmethod
    def copy_file(self, src: str, dst: str) -> None:
        """Copy a file, preserving its metadata."""

    @abstractmethod
    def make_dirs(self, path: str) -> None:
        """Create a directory and any missing parents."""

    @abstractmethod
    def remove_tree(self, path: str) -> None:
        """Remove a directory and everything under it."""

    @abstractmethod
    def make_temp_file(self, suffix: str = "") -> str:
        """Create an empty temporary file and return its path."""

    @abstractmethod
    def remove_file(self, path: str) -> None:
        """Remove a file. Missing files are ignored."""

    # ── Commands, services, packages ────────────────────────────

    @abstractmethod
    def has_command(self, name: str) -> bool:
        """Whether ``name`` resolves on PATH."""

    @abstractmethod
    def unit_file_exists(self, unit: str) -> bool | None:
        """Whether the service manager knows ``unit``. None if systemctl is absent."""

    @abstractmethod
    def unit_is_enabled(self, unit: str) -> bool | None:
        """Whether ``unit`` is enabled. None if systemctl is absent."""

    @abstractmethod
    def package_installed(self, package: str) -> bool | None:
        """Whether a dpkg package is installed. None if dpkg-query is absent."""

    def is_non_empty_dir(self, path: str) -> bool:
        return self.is_dir(path) and bool(self.list_dir(path))
