"""
Settings model — every fixed path, token, and URL the tool relies on.

Defaults are the production values for a Raspberry Pi running DVMHost.
A settings file (see ``core.config.loader``) may override any of them,
which is also how tests point the tool at a temporary directory.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class HostSettings(BaseModel):
    """Where the host identity comes from and what is accepted."""

    os_release_file: str = "/etc/os-release"
    model_file: str = "/proc/device-tree/model"
    supported_os_versions: list[str] = Field(default_factory=lambda: ["12", "13"])
    supported_models: list[str] = Field(
        default_factory=lambda: ["Raspberry Pi 4", "Raspberry Pi 5"]
    )


class BootSettings(BaseModel):
    """Boot files and the tokens the preparation action manages."""

    cmdline_file: str = "/boot/firmware/cmdline.txt"
    config_file: str = "/boot/firmware/config.txt"
    console_token: str = "console=serial0,115200"
    bluetooth_overlay: str = "dtoverlay=disable-bt"
    uart_section: str = "[all]"
    uart_lines: list[str] = Field(
        default_factory=lambda: ["enable_uart=1", "dtoverlay=uart0,ctsrts"]
    )


class MeshSettings(BaseModel):
    """Peer-mesh VPN client."""

    command: str = "netbird"
    installer_url: str = "https://pkgs.netbird.io/install.sh"


class InstallSettings(BaseModel):
    """Application directory tree and binary archive."""

    log_dir: str = "/var/log/centrunk"
    root_dir: str = "/opt/centrunk"
    config_dir: str = "/opt/centrunk/configs"
    app_dir: str = "/opt/centrunk/dvmhost"
    archive_url: str = (
        "https://github.com/Centrunk/dvmbins/releases/latest/download/dvmhost-arm64.tar.xz"
    )

    @property
    def directories(self) -> list[str]:
        """Directories that must exist before the archive is extracted."""
        return [self.log_dir, self.root_dir, self.config_dir]


class SiteType(BaseModel):
    """A selectable site type and the templates it generates."""

    label: str
    templates: list[str]


def _default_site_types() -> dict[str, SiteType]:
    return {
        "cc-vc": SiteType(
            label="CC/VC (Control Channel / Voice Channel)",
            templates=["configCC.yml", "configVC.yml"],
        ),
        "conventional": SiteType(
            label="Conventional",
            templates=["configCONVENTIONAL.yml"],
        ),
    }


class TemplateSettings(BaseModel):
    """Remote template repository."""

    base_url: str = (
        "https://raw.githubusercontent.com/Centrunk/centrunk-config-generator/templates"
    )
    site_types: dict[str, SiteType] = Field(default_factory=_default_site_types)


class Settings(BaseModel):
    """Root settings model — loaded from settings.yml or built from defaults."""

    version: int = 1

    host: HostSettings = Field(default_factory=HostSettings)
    boot: BootSettings = Field(default_factory=BootSettings)
    services: list[str] = Field(
        default_factory=lambda: [
            "serial-getty@ttyAMA0.service",
            "hciuart.service",
            "bluealsa.service",
            "bluetooth.service",
        ]
    )
    packages: list[str] = Field(
        default_factory=lambda: ["git", "nano", "stm32flash", "xz-utils"]
    )
    mesh: MeshSettings = Field(default_factory=MeshSettings)
    install: InstallSettings = Field(default_factory=InstallSettings)
    templates: TemplateSettings = Field(default_factory=TemplateSettings)

    state_dir: str = "/var/lib/dvmsetup"

    def get_site_type(self, name: str) -> SiteType | None:
        """Look up a site type by key."""
        return self.templates.site_types.get(name)
