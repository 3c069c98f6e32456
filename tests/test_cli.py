"""
Tests for the CLI commands.

FakeHost and the mock registry are injected through ``obj``; the root
check is satisfied by patching ``os.geteuid``.
"""

import json

import pytest
import yaml
from click.testing import CliRunner
from conftest import make_host

from dvmsetup import __version__
from dvmsetup.core.config.loader import SETTINGS_ENV_VAR
from dvmsetup.core.persistence.audit import AuditWriter, default_audit_path
from dvmsetup.main import cli
from dvmsetup.ui.cli.common import ROOT_REQUIRED_MESSAGE

CONFIG_DIR = "/opt/centrunk/configs"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in (SETTINGS_ENV_VAR, "DVMSETUP_TEST_MODE", "DVMSETUP_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def as_root(monkeypatch):
    monkeypatch.setattr("os.geteuid", lambda: 0)


@pytest.fixture
def as_user(monkeypatch):
    monkeypatch.setattr("os.geteuid", lambda: 1000)


@pytest.fixture
def runner():
    return CliRunner()


def _obj(settings, registry, host=None):
    return {"settings": settings, "registry": registry, "host": host or make_host()}


class TestCliBasics:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("status", "menu", "prepare", "install", "configure", "history"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    @pytest.mark.parametrize("args", [
        ["status"],
        ["prepare"],
        ["install"],
        ["menu"],
        ["configure", "--site-type", "conventional"],
    ])
    def test_requires_root(self, runner, as_user, settings, registry, args):
        result = runner.invoke(cli, args, obj=_obj(settings, registry))
        assert result.exit_code == 1
        assert ROOT_REQUIRED_MESSAGE in result.output


class TestStatusCommand:
    def test_json(self, runner, as_root, settings, registry):
        result = runner.invoke(cli, ["-q", "status", "--json"], obj=_obj(settings, registry))

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["host"]["os_version_id"] == "12"
        assert len(data["probes"]) == 10
        assert data["probes"][0]["identifier"] == "os_version"

    def test_text(self, runner, as_root, settings, registry):
        result = runner.invoke(cli, ["status"], obj=_obj(settings, registry))
        assert result.exit_code == 0
        assert "DVMHost host status" in result.output
        assert "satisfied" in result.output


class TestPrepareCommand:
    def test_success(self, runner, as_root, settings, registry):
        result = runner.invoke(cli, ["-q", "prepare", "--json"], obj=_obj(settings, registry))

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["status"] == "ok"
        assert data["reboot_required"] is True

    def test_unsupported_os_exits_2(self, runner, as_root, settings, registry, shell_mock):
        host = make_host(os_version="11")
        result = runner.invoke(cli, ["prepare"], obj=_obj(settings, registry, host))

        assert result.exit_code == 2
        assert "precondition_failed" in result.output
        assert shell_mock.call_count == 0

    def test_mock_flag(self, runner, as_root, settings, registry, shell_mock):
        result = runner.invoke(cli, ["prepare", "--mock"], obj=_obj(settings, registry))
        assert result.exit_code == 0
        assert "[mock]" in result.output
        assert shell_mock.call_count == 0

    def test_audited(self, runner, as_root, settings, registry):
        runner.invoke(cli, ["prepare"], obj=_obj(settings, registry))
        entries = AuditWriter(default_audit_path(settings.state_dir)).read_all()
        assert [e.operation_type for e in entries] == ["prepare"]


class TestInstallCommand:
    def test_success(self, runner, as_root, settings, registry):
        result = runner.invoke(cli, ["install", "--yes"], obj=_obj(settings, registry))
        assert result.exit_code == 0

    def test_failure_exits_1(self, runner, as_root, settings, registry, shell_mock):
        shell_mock.set_failure("apt:refresh_package_index", error="no network")
        result = runner.invoke(cli, ["install"], obj=_obj(settings, registry))
        assert result.exit_code == 1


class TestSetupAllCommand:
    def test_both_run(self, runner, as_root, settings, registry):
        result = runner.invoke(cli, ["setup-all", "--yes"], obj=_obj(settings, registry))
        assert result.exit_code == 0
        entries = AuditWriter(default_audit_path(settings.state_dir)).read_all()
        assert [e.operation_type for e in entries] == ["prepare", "install"]

    def test_install_skipped_after_failed_prepare(self, runner, as_root, settings, registry):
        host = make_host(config_txt=None)
        result = runner.invoke(cli, ["setup-all"], obj=_obj(settings, registry, host))

        assert result.exit_code == 1
        assert "Installation was not run" in result.output


class TestMenuCommand:
    def test_quit(self, runner, as_root, settings, registry):
        result = runner.invoke(cli, ["menu"], input="q\n", obj=_obj(settings, registry))
        assert result.exit_code == 0
        assert "Bye." in result.output

    def test_invalid_then_eof(self, runner, as_root, settings, registry):
        result = runner.invoke(cli, ["menu"], input="9\n", obj=_obj(settings, registry))
        assert result.exit_code == 0
        assert "Invalid option" in result.output

    def test_prepare_then_quit(self, runner, as_root, settings, registry):
        result = runner.invoke(cli, ["menu"], input="1\nq\n", obj=_obj(settings, registry))
        assert result.exit_code == 0
        entries = AuditWriter(default_audit_path(settings.state_dir)).read_all()
        assert [e.operation_type for e in entries] == ["prepare"]


class TestConfigCheckCommand:
    def test_defaults(self, runner):
        result = runner.invoke(cli, ["config", "check", "--json"], obj={})
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["valid"] is True

    def test_file(self, runner, tmp_path):
        path = tmp_path / "settings.yml"
        path.write_text(yaml.safe_dump({"packages": ["git"]}))

        result = runner.invoke(cli, ["--config", str(path), "config", "check"])

        assert result.exit_code == 0
        assert "Settings are valid" in result.output
        assert f"Source: {path}" in result.output

    def test_invalid(self, runner, tmp_path):
        path = tmp_path / "settings.yml"
        path.write_text("- not\n- a mapping\n")

        result = runner.invoke(cli, ["--config", str(path), "config", "check"])

        assert result.exit_code == 1
        assert "Settings errors" in result.output

    def test_missing_explicit_file(self, runner, tmp_path):
        missing = tmp_path / "missing.yml"
        result = runner.invoke(cli, ["--config", str(missing), "config", "check"])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestHistoryCommand:
    def test_empty(self, runner, settings):
        result = runner.invoke(cli, ["history"], obj={"settings": settings})
        assert result.exit_code == 0
        assert "No entries" in result.output

    def test_after_prepare(self, runner, as_root, settings, registry):
        runner.invoke(cli, ["prepare"], obj=_obj(settings, registry))

        result = runner.invoke(cli, ["history", "--json"], obj={"settings": settings})

        data = json.loads(result.stdout)
        assert len(data) == 1
        assert data[0]["operation_type"] == "prepare"
        assert data[0]["status"] == "ok"

    def test_state_dir_from_config_file(self, runner, tmp_path):
        path = tmp_path / "settings.yml"
        path.write_text(yaml.safe_dump({"state_dir": str(tmp_path / "state")}))

        result = runner.invoke(cli, ["--config", str(path), "history"])

        assert result.exit_code == 0
        assert str(tmp_path / "state") in result.output


class TestConfigureCommand:
    ANSWERS = {
        "SITE_NAME": "TestSite",
        "FREQUENCY": "451.1",
        "PEER_ID": "9000123",
        "NETWORK_ID": "BEE00",
        "TX_POWER": "10",
        "CHANNEL_SPACING": "12.5",
    }

    def _answers_file(self, tmp_path):
        path = tmp_path / "answers.yml"
        path.write_text(yaml.safe_dump(self.ANSWERS))
        return path

    def test_answers_file(self, runner, as_root, settings, registry, tmp_path, template_dir):
        host = make_host(dirs=[CONFIG_DIR])
        result = runner.invoke(cli, [
            "configure",
            "--site-type", "conventional",
            "--answers", str(self._answers_file(tmp_path)),
            "--template-url", template_dir.as_uri(),
        ], obj=_obj(settings, registry, host))

        assert result.exit_code == 0
        assert "Configuration complete" in result.output
        content = host.read_text(f"{CONFIG_DIR}/configCONVENTIONAL.yml")
        assert "site_name: TestSite" in content
        assert "${" not in content

    def test_site_type_prompt(self, runner, as_root, settings, registry, tmp_path,
                              template_dir):
        host = make_host(dirs=[CONFIG_DIR])
        result = runner.invoke(cli, [
            "configure",
            "--answers", str(self._answers_file(tmp_path)),
            "--template-url", template_dir.as_uri(),
        ], input="2\n", obj=_obj(settings, registry, host))

        assert result.exit_code == 0
        assert "Please select your site type" in result.output
        assert host.read_text(f"{CONFIG_DIR}/configCONVENTIONAL.yml") is not None

    def test_interactive_values(self, runner, as_root, settings, registry, template_dir):
        host = make_host(dirs=[CONFIG_DIR])
        # Sorted: CHANNEL_SPACING FREQUENCY NETWORK_ID PEER_ID SITE_NAME TX_POWER
        lines = ["12.5", "", "451.1", "BEE00", "9000123", "TestSite", "10"]
        result = runner.invoke(cli, [
            "configure", "--site-type", "conventional",
            "--template-url", template_dir.as_uri(),
        ], input="\n".join(lines) + "\n", obj=_obj(settings, registry, host))

        assert result.exit_code == 0
        assert "Enter value for channel spacing" in result.output
        assert "frequency: 451.1" in host.read_text(f"{CONFIG_DIR}/configCONVENTIONAL.yml")

    def test_unknown_site_type(self, runner, as_root, settings, registry):
        result = runner.invoke(cli, ["configure", "--site-type", "trunked"],
                               obj=_obj(settings, registry))
        assert result.exit_code == 1
        assert "Unknown site type" in result.output

    def test_missing_config_dir_exits_2(self, runner, as_root, settings, registry, tmp_path,
                                        template_dir):
        result = runner.invoke(cli, [
            "configure",
            "--site-type", "conventional",
            "--answers", str(self._answers_file(tmp_path)),
            "--template-url", template_dir.as_uri(),
        ], obj=_obj(settings, registry))
        assert result.exit_code == 2

    def test_json(self, runner, as_root, settings, registry, tmp_path, template_dir):
        host = make_host(dirs=[CONFIG_DIR])
        result = runner.invoke(cli, [
            "-q", "configure",
            "--site-type", "conventional",
            "--answers", str(self._answers_file(tmp_path)),
            "--template-url", template_dir.as_uri(),
            "--json",
        ], obj=_obj(settings, registry, host))

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["status"] == "ok"
        assert data["files"][0]["path"] == f"{CONFIG_DIR}/configCONVENTIONAL.yml"

    def test_json_without_answers_is_rejected(self, runner, as_root, settings, registry,
                                              template_dir):
        host = make_host(dirs=[CONFIG_DIR])
        result = runner.invoke(cli, [
            "-q", "configure",
            "--site-type", "conventional",
            "--template-url", template_dir.as_uri(),
            "--json",
        ], input="TestSite\n", obj=_obj(settings, registry, host))

        assert result.exit_code == 1
        assert result.stdout == ""
        assert "--json needs --site-type and --answers" in result.stderr
        assert host.list_dir(CONFIG_DIR) == []

    def test_unsupported_os_writes_nothing(self, runner, as_root, settings, registry, tmp_path,
                                           template_dir):
        host = make_host(os_version="11", dirs=[CONFIG_DIR])
        result = runner.invoke(cli, [
            "configure",
            "--site-type", "conventional",
            "--answers", str(self._answers_file(tmp_path)),
            "--template-url", template_dir.as_uri(),
        ], obj=_obj(settings, registry, host))

        assert result.exit_code == 2
        assert "Unsupported OS version: 11" in result.stderr
        assert host.list_dir(CONFIG_DIR) == []
