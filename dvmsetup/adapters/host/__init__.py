"""
Host view — the only way dvmsetup reads or writes host state.

    HostView    abstract interface (files, service manager, package db)
    LocalHost   the real machine
    FakeHost    in-memory double, see ``dvmsetup.adapters.mock``
"""

from dvmsetup.adapters.host.local import LocalHost
from dvmsetup.adapters.host.view import HostView

__all__ = ["HostView", "LocalHost"]
