"""
Shared test fixtures and configuration.

Nothing here touches the real host: boot files, units and packages live
in a FakeHost, and commands and downloads go to MockAdapters.
"""

import logging
from pathlib import Path

import pytest

from dvmsetup.adapters.mock import FakeHost, MockAdapter
from dvmsetup.adapters.registry import AdapterRegistry
from dvmsetup.core.context import RunContext
from dvmsetup.core.models.host import HostProfile
from dvmsetup.core.models.settings import Settings
from dvmsetup.core.persistence.audit import AuditWriter, default_audit_path

PI5_MODEL = "Raspberry Pi 5 Model B Rev 1.0"
PI4_MODEL = "Raspberry Pi 4 Model B Rev 1.5"

CMDLINE = "console=serial0,115200 console=tty1 root=PARTUUID=1234-02 rootfstype=ext4 rootwait\n"
CONFIG_TXT = "# For more options see config.txt docs\ndtparam=audio=on\n\n[all]\narm_64bit=1\n"

SERVICES = [
    "serial-getty@ttyAMA0.service",
    "hciuart.service",
    "bluealsa.service",
    "bluetooth.service",
]


def os_release(version: str = "12") -> str:
    return f'PRETTY_NAME="Debian GNU/Linux {version}"\nNAME="Debian GNU/Linux"\nVERSION_ID="{version}"\nID=debian\n'


def make_host(
    os_version: str = "12",
    model: str = PI5_MODEL,
    cmdline: str | None = CMDLINE,
    config_txt: str | None = CONFIG_TXT,
    **kwargs,
) -> FakeHost:
    """FakeHost that looks like a freshly flashed Pi."""
    files = {
        "/etc/os-release": os_release(os_version),
        "/proc/device-tree/model": model + "\x00",
    }
    if cmdline is not None:
        files["/boot/firmware/cmdline.txt"] = cmdline
    if config_txt is not None:
        files["/boot/firmware/config.txt"] = config_txt
    files.update(kwargs.pop("files", {}))
    kwargs.setdefault("units", {unit: True for unit in SERVICES})
    kwargs.setdefault("packages", ["git"])
    return FakeHost(files=files, **kwargs)


@pytest.fixture(autouse=True)
def _reset_root_logger():
    """Drop handlers that setup_logging (via the CLI) attached to the root logger."""
    root = logging.getLogger()
    before, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Default settings with the audit ledger under tmp_path."""
    return Settings(state_dir=str(tmp_path / "state"))


@pytest.fixture
def pi5_profile() -> HostProfile:
    return HostProfile(os_version_id="12", hardware_model=PI5_MODEL)


@pytest.fixture
def pi4_profile() -> HostProfile:
    return HostProfile(os_version_id="12", hardware_model=PI4_MODEL)


@pytest.fixture
def shell_mock() -> MockAdapter:
    return MockAdapter(adapter_name="shell")


@pytest.fixture
def http_mock() -> MockAdapter:
    return MockAdapter(adapter_name="http")


@pytest.fixture
def registry(shell_mock: MockAdapter, http_mock: MockAdapter) -> AdapterRegistry:
    """Registry whose shell and http adapters are mocks."""
    reg = AdapterRegistry()
    reg.register(shell_mock)
    reg.register(http_mock)
    return reg


@pytest.fixture
def host() -> FakeHost:
    return make_host()


@pytest.fixture
def run_ctx(settings: Settings, host: FakeHost, registry: AdapterRegistry,
            pi5_profile: HostProfile) -> RunContext:
    return RunContext(
        settings=settings,
        host=host,
        registry=registry,
        profile=pi5_profile,
        audit=AuditWriter(default_audit_path(settings.state_dir)),
    )


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Mock template repository served through file:// URLs."""
    root = tmp_path / "templates"
    root.mkdir()
    (root / "configCC.yml").write_text(
        "# Control Channel Configuration\n"
        "site_name: ${SITE_NAME}\n"
        "site_id: ${SITE_ID}\n"
        "channel_id: ${CC_CHANNEL_ID}\n"
        "frequency: ${CC_FREQUENCY}\n"
        "peer_id: ${PEER_ID}\n"
        "network_id: ${NETWORK_ID}\n"
        "system_id: ${SYSTEM_ID}\n"
        "color_code: ${COLOR_CODE}\n"
    )
    (root / "configVC.yml").write_text(
        "# Voice Channel Configuration\n"
        "site_name: ${SITE_NAME}\n"
        "site_id: ${SITE_ID}\n"
        "channel_id: ${VC_CHANNEL_ID}\n"
        "frequency: ${VC_FREQUENCY}\n"
        "peer_id: ${PEER_ID}\n"
        "network_id: ${NETWORK_ID}\n"
        "system_id: ${SYSTEM_ID}\n"
        "color_code: ${COLOR_CODE}\n"
    )
    (root / "configCONVENTIONAL.yml").write_text(
        "# Conventional Configuration\n"
        "site_name: ${SITE_NAME}\n"
        "frequency: ${FREQUENCY}\n"
        "peer_id: ${PEER_ID}\n"
        "network_id: ${NETWORK_ID}\n"
        "tx_power: ${TX_POWER}\n"
        "channel_spacing: ${CHANNEL_SPACING}\n"
    )
    return root


CC_ANSWERS = {
    "CC_CHANNEL_ID": "1",
    "CC_FREQUENCY": "851.0125",
    "COLOR_CODE": "1",
    "NETWORK_ID": "BEE00",
    "PEER_ID": "9000123",
    "SITE_ID": "1",
    "SITE_NAME": "TestSite",
    "SYSTEM_ID": "001",
}
