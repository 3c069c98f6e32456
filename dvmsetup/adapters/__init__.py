"""
Adapters — the boundary between dvmsetup and the host it changes.

Three families live here:

    host/     HostView: reading and writing files, asking the service
              manager and package database. Used by probes and edits.
    shell/    ShellCommandAdapter: running apt-get, systemctl, sh, tar.
    net/      HttpDownloadAdapter: downloading installers and archives.

Command and download adapters are dispatched through AdapterRegistry,
which is also where ``--mock`` swaps them out.
"""

from dvmsetup.adapters.base import Adapter, ExecutionContext
from dvmsetup.adapters.registry import AdapterRegistry

__all__ = ["Adapter", "AdapterRegistry", "ExecutionContext"]
