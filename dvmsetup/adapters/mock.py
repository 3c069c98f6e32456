"""
Test doubles — MockAdapter for command dispatch, FakeHost for host state.

MockAdapter is what ``--mock`` and the tests put in front of the
registry. FakeHost is an in-memory HostView: files, directories, units
and packages are plain dicts and sets that a test can seed and inspect.
"""

from __future__ import annotations

import posixpath

from dvmsetup.adapters.base import Adapter, ExecutionContext
from dvmsetup.adapters.host.view import HostView
from dvmsetup.core.models.action import Receipt


class MockAdapter(Adapter):
    """Universal mock adapter for testing.

    By default, returns success for everything. Can be configured
    with custom responses per action ID.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def action_ids(self) -> list[str]:
        """Action IDs in the order they were executed."""
        return [ctx.action.id for ctx in self._call_log]

    def is_available(self) -> bool:
        return self._available

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        self._responses[action_id] = receipt

    def set_failure(self, action_id: str, error: str = "Mock failure") -> None:
        """Configure a specific action to fail."""
        self._responses[action_id] = Receipt.failure(
            adapter=self._name,
            action_id=action_id,
            error=error,
        )

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._call_log.append(context)

        if context.action.id in self._responses:
            return self._responses[context.action.id]

        return Receipt.success(
            adapter=self._name,
            action_id=context.action.id,
            output=self._default_output,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        self._call_log.clear()
        self._responses.clear()


def _norm(path: str) -> str:
    return posixpath.normpath(str(path))


class FakeHost(HostView):
    """In-memory host.

    Args:
        files: Initial file contents by path. Parent directories are
            created implicitly.
        dirs: Extra directories.
        commands: Names that resolve on PATH.
        units: Known systemd units mapped to their enabled state. None
            means systemctl is absent.
        packages: Installed dpkg packages. None means dpkg-query is absent.
    """

    def __init__(
        self,
        files: dict[str, str] | None = None,
        dirs: list[str] | None = None,
        commands: list[str] | None = None,
        units: dict[str, bool] | None = None,
        packages: list[str] | None = None,
    ):
        self.files: dict[str, str] = {}
        self.dirs: set[str] = {"/"}
        self.commands: set[str] = set(commands or [])
        self.units = dict(units) if units is not None else None
        self.packages = set(packages) if packages is not None else None
        self.removed: list[str] = []
        self._temp_counter = 0

        for d in dirs or []:
            self.make_dirs(d)
        for path, content in (files or {}).items():
            self.make_dirs(posixpath.dirname(_norm(path)))
            self.files[_norm(path)] = content

    # ── Files ───────────────────────────────────────────────────

    def read_text(self, path: str) -> str | None:
        return self.files.get(_norm(path))

    def exists(self, path: str) -> bool:
        p = _norm(path)
        return p in self.files or p in self.dirs

    def is_dir(self, path: str) -> bool:
        return _norm(path) in self.dirs

    def list_dir(self, path: str) -> list[str]:
        p = _norm(path)
        if p not in self.dirs:
            return []
        children = {
            posixpath.basename(entry)
            for entry in [*self.files, *self.dirs]
            if entry != p and posixpath.dirname(entry) == p
        }
        return sorted(children)

    def _require_parent(self, path: str) -> None:
        parent = posixpath.dirname(path)
        if parent not in self.dirs:
            raise FileNotFoundError(f"No such directory: {parent}")

    def write_text_atomic(self, path: str, content: str) -> None:
        p = _norm(path)
        self._require_parent(p)
        self.files[p] = content

    def copy_file(self, src: str, dst: str) -> None:
        s, d = _norm(src), _norm(dst)
        if s not in self.files:
            raise FileNotFoundError(f"No such file: {s}")
        self._require_parent(d)
        self.files[d] = self.files[s]

    def make_dirs(self, path: str) -> None:
        p = _norm(path)
        while p not in self.dirs:
            self.dirs.add(p)
            p = posixpath.dirname(p)

    def remove_tree(self, path: str) -> None:
        p = _norm(path)
        if p not in self.dirs:
            raise FileNotFoundError(f"No such directory: {p}")
        prefix = p.rstrip("/") + "/"
        self.files = {k: v for k, v in self.files.items() if not k.startswith(prefix)}
        self.dirs = {d for d in self.dirs if d != p and not d.startswith(prefix)}
        self.removed.append(p)

    def make_temp_file(self, suffix: str = "") -> str:
        self._temp_counter += 1
        self.make_dirs("/tmp")
        path = f"/tmp/dvmsetup-{self._temp_counter}{suffix}"
        self.files[path] = ""
        return path

    def remove_file(self, path: str) -> None:
        p = _norm(path)
        if self.files.pop(p, None) is not None:
            self.removed.append(p)

    # ── Commands, services, packages ────────────────────────────

    def has_command(self, name: str) -> bool:
        return name in self.commands

    def unit_file_exists(self, unit: str) -> bool | None:
        if self.units is None:
            return None
        return unit in self.units

    def unit_is_enabled(self, unit: str) -> bool | None:
        if self.units is None:
            return None
        return self.units.get(unit, False)

    def package_installed(self, package: str) -> bool | None:
        if self.packages is None:
            return None
        return package in self.packages

    def temp_files(self) -> list[str]:
        """Temp files created through make_temp_file and not yet removed."""
        return sorted(p for p in self.files if p.startswith("/tmp/dvmsetup-"))
