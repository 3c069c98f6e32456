"""dvmsetup — Raspberry Pi preparation and DVMHost site configuration."""

__version__ = "0.1.0"
