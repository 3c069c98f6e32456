"""
Tests for host profile detection and the supported-host check.
"""

import logging

import pytest
from conftest import PI4_MODEL, PI5_MODEL, make_host

from dvmsetup.adapters.mock import FakeHost
from dvmsetup.core.models.host import HostProfile
from dvmsetup.core.models.settings import Settings
from dvmsetup.core.services.host_profile import (
    TEST_MODE_VAR,
    TEST_MODEL_VAR,
    TEST_OS_VAR,
    check_os_version,
    check_supported,
    detect_host_profile,
    parse_os_release,
)


class TestParseOsRelease:
    def test_quoted_and_unquoted(self):
        values = parse_os_release(
            'PRETTY_NAME="Debian GNU/Linux 12 (bookworm)"\n'
            "VERSION_ID='12'\n"
            "ID=debian\n"
            "# comment\n"
            "\n"
            "garbage line\n"
        )
        assert values["VERSION_ID"] == "12"
        assert values["ID"] == "debian"
        assert values["PRETTY_NAME"] == "Debian GNU/Linux 12 (bookworm)"
        assert "garbage line" not in values


class TestDetectHostProfile:
    def test_reads_host(self):
        profile = detect_host_profile(make_host(os_version="13"), Settings(), environ={})
        assert profile.os_version_id == "13"
        assert profile.hardware_model == PI5_MODEL
        assert profile.source == "host"

    def test_unreadable(self):
        profile = detect_host_profile(FakeHost(), Settings(), environ={})
        assert profile.os_version_id is None
        assert profile.hardware_model is None

    def test_missing_version_id(self):
        host = FakeHost(files={"/etc/os-release": "ID=debian\n"})
        assert detect_host_profile(host, Settings(), environ={}).os_version_id is None

    def test_override_in_test_mode(self, caplog):
        env = {TEST_MODE_VAR: "1", TEST_OS_VAR: "13", TEST_MODEL_VAR: PI4_MODEL}

        with caplog.at_level(logging.WARNING):
            profile = detect_host_profile(make_host(), Settings(), environ=env)

        assert profile.os_version_id == "13"
        assert profile.hardware_model == PI4_MODEL
        assert profile.source == "override"
        assert "Test mode" in caplog.text

    def test_partial_override(self):
        env = {TEST_MODE_VAR: "1", TEST_OS_VAR: "13"}
        profile = detect_host_profile(make_host(), Settings(), environ=env)
        assert profile.os_version_id == "13"
        assert profile.hardware_model == PI5_MODEL

    @pytest.mark.parametrize("mode", [None, "0", "true", "yes"])
    def test_override_ignored_outside_test_mode(self, mode):
        env = {TEST_OS_VAR: "11", TEST_MODEL_VAR: "Something Else"}
        if mode is not None:
            env[TEST_MODE_VAR] = mode
        profile = detect_host_profile(make_host(), Settings(), environ=env)
        assert profile.os_version_id == "12"
        assert profile.source == "host"


class TestCheckSupported:
    @pytest.mark.parametrize("version,model", [
        ("12", PI5_MODEL),
        ("13", PI5_MODEL),
        ("12", PI4_MODEL),
        ("13", "Raspberry Pi 4 Model B Rev 1.4"),
    ])
    def test_supported(self, version, model):
        profile = HostProfile(os_version_id=version, hardware_model=model)
        assert check_supported(profile, Settings()) is None

    def test_old_os(self):
        profile = HostProfile(os_version_id="11", hardware_model=PI5_MODEL)
        assert check_supported(profile, Settings()) == (
            "Unsupported OS version: 11 (must be 12 or 13)"
        )

    def test_unknown_os(self):
        profile = HostProfile(hardware_model=PI5_MODEL)
        assert "Cannot determine OS version" in check_supported(profile, Settings())

    def test_old_hardware(self):
        profile = HostProfile(os_version_id="12", hardware_model="Raspberry Pi 3 Model B+")
        assert check_supported(profile, Settings()) == (
            "Unsupported hardware: Raspberry Pi 3 Model B+ "
            "(must be Raspberry Pi 4 or Raspberry Pi 5)"
        )

    def test_unknown_hardware(self):
        profile = HostProfile(os_version_id="12")
        assert "Cannot determine hardware model" in check_supported(profile, Settings())

    def test_os_checked_first(self):
        profile = HostProfile(os_version_id="10", hardware_model="Raspberry Pi 3")
        assert check_supported(profile, Settings()).startswith("Unsupported OS version")

    def test_os_version_ignores_hardware(self):
        profile = HostProfile(os_version_id="13", hardware_model="Raspberry Pi 3")
        assert check_os_version(profile, Settings()) is None
        assert check_os_version(HostProfile(os_version_id="11"), Settings()).startswith(
            "Unsupported OS version"
        )


class TestPiGeneration:
    def test_generations(self):
        assert HostProfile(hardware_model=PI5_MODEL).pi_generation == 5
        assert HostProfile(hardware_model=PI4_MODEL).pi_generation == 4
        assert HostProfile(hardware_model="Raspberry Pi 3").pi_generation is None
        assert HostProfile().pi_generation is None
        assert HostProfile(hardware_model=PI5_MODEL).is_pi5
