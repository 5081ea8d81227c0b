"""
Unit tests for applying pool settings to disk.

Service-manager calls are intercepted at ``subprocess.run``.
"""

import io
import subprocess

import pytest

from php_tuner.apply import (
    apply_configuration,
    confirm,
    find_config_file,
    find_service_name,
    list_config_files,
    restart_service,
    validate_config_path,
)
from php_tuner.apply import applier
from php_tuner.calculator import PoolType, PreforkConfig
from php_tuner.exceptions import (
    BackupWriteError,
    ConfigNotFoundError,
    ConfigWriteError,
    InvalidConfigPathError,
    RestartError,
)


@pytest.fixture
def dynamic_pool():
    return PreforkConfig(
        pool_type=PoolType.DYNAMIC,
        max_workers=46,
        start_workers=16,
        min_spare_workers=8,
        max_spare_workers=16,
        max_requests_per_worker=500,
        idle_timeout="5s",
        reserved_memory_mb=1126,
        available_memory_mb=2970,
        process_memory_mb=64.0,
    )


class FakeRun:
    """Records commands and answers with a fixed return code and stdout."""

    def __init__(self, returncode=0, stdout="", active=None, error=None):
        self.returncode = returncode
        self.stdout = stdout
        self.active = active
        self.error = error
        self.commands = []

    def __call__(self, command, **kwargs):
        self.commands.append(command)
        if self.error is not None:
            raise self.error
        returncode = self.returncode
        if self.active is not None:
            returncode = 0 if command[-1] == self.active else 3
        if kwargs.get("check") and returncode != 0:
            raise subprocess.CalledProcessError(returncode, command)
        return subprocess.CompletedProcess(command, returncode, stdout=self.stdout, stderr="")


@pytest.fixture
def fake_run(monkeypatch):
    def _install(**kwargs):
        fake = FakeRun(**kwargs)
        monkeypatch.setattr(applier.subprocess, "run", fake)
        return fake

    return _install


class TestConfigDiscovery:

    def test_first_existing_candidate(self, tmp_path):
        present = tmp_path / "www.conf"
        present.write_text("[www]\n")
        candidates = [str(tmp_path / "missing.conf"), str(present)]

        assert find_config_file(candidates) == present
        assert list_config_files(candidates) == [present]

    def test_nothing_found_lists_candidates(self, tmp_path):
        candidates = [str(tmp_path / "a.conf"), str(tmp_path / "b.conf")]

        with pytest.raises(ConfigNotFoundError) as exc_info:
            find_config_file(candidates)

        assert exc_info.value.candidates == candidates
        assert "Use --config to specify the path" in exc_info.value.message


class TestValidateConfigPath:

    def test_accepts_conf_file(self, pool_config_file):
        assert validate_config_path(pool_config_file) == pool_config_file

    def test_accepts_no_extension(self, tmp_path):
        path = tmp_path / "php-fpm"
        path.write_text("[www]\n")

        assert validate_config_path(str(path)) == path

    def test_missing(self, tmp_path):
        with pytest.raises(InvalidConfigPathError, match="file not found"):
            validate_config_path(tmp_path / "nope.conf")

    def test_directory(self, tmp_path):
        with pytest.raises(InvalidConfigPathError, match="path is a directory, not a file"):
            validate_config_path(tmp_path)

    def test_wrong_extension(self, tmp_path):
        path = tmp_path / "php.ini"
        path.write_text("memory_limit = 128M\n")

        with pytest.raises(InvalidConfigPathError, match="expected .conf extension") as exc_info:
            validate_config_path(path)

        assert exc_info.value.path == str(path)


class TestServiceDetection:

    def test_linux_first_active_unit(self, fake_run):
        fake = fake_run(active="php8.2-fpm")

        assert find_service_name(platform="linux") == "php8.2-fpm"
        assert fake.commands[0] == ["systemctl", "is-active", "--quiet", "php-fpm"]

    def test_linux_none_active(self, fake_run):
        fake_run(returncode=3)

        assert find_service_name(["php-fpm"], platform="linux") is None

    def test_linux_without_systemctl(self, fake_run):
        fake_run(error=FileNotFoundError("systemctl"))

        assert find_service_name(platform="linux") is None

    def test_darwin_brew_services(self, fake_run):
        stdout = (
            "Name    Status  User File\n"
            "nginx   started me   ~/Library/LaunchAgents/homebrew.mxcl.nginx.plist\n"
            "php@8.2 started me   ~/Library/LaunchAgents/homebrew.mxcl.php@8.2.plist\n"
        )
        fake_run(stdout=stdout)

        assert find_service_name(platform="darwin") == "php@8.2"

    def test_other_platform(self):
        assert find_service_name(platform="win32") is None


class TestRestartService:

    def test_linux_uses_systemctl(self, fake_run):
        fake = fake_run()

        restart_service("php-fpm", platform="linux")

        assert fake.commands == [["sudo", "systemctl", "restart", "php-fpm"]]

    def test_darwin_uses_brew(self, fake_run):
        fake = fake_run()

        restart_service("php", platform="darwin")

        assert fake.commands == [["brew", "services", "restart", "php"]]

    def test_failure(self, fake_run):
        fake_run(returncode=1)

        with pytest.raises(RestartError) as exc_info:
            restart_service("php-fpm", platform="linux")

        assert exc_info.value.context.service_name == "php-fpm"

    def test_unsupported_platform(self):
        with pytest.raises(RestartError, match="unsupported platform"):
            restart_service("php-fpm", platform="win32")


class TestApplyConfiguration:

    def test_writes_backup_then_config(self, pool_config_file, dynamic_pool):
        original = pool_config_file.read_bytes()

        result = apply_configuration(dynamic_pool, pool_config_file)

        assert result.backup_path.read_bytes() == original
        assert "pm.max_children = 46" in pool_config_file.read_text()
        assert result.changes[0] == "pm.max_children: 5 -> 46"
        assert result.restarted is False
        assert result.service_name is None

    def test_patch_result_records_backup(self, pool_config_file, dynamic_pool):
        result = apply_configuration(dynamic_pool, pool_config_file)

        assert result.patch.backup_path == str(result.backup_path)
        assert result.patch.change_log == tuple(result.changes)
        assert result.patch.updated_text == pool_config_file.read_text()

    def test_second_apply_changes_nothing(self, pool_config_file, dynamic_pool):
        apply_configuration(dynamic_pool, pool_config_file)
        patched = pool_config_file.read_bytes()

        result = apply_configuration(dynamic_pool, pool_config_file)

        assert result.changes == []
        assert pool_config_file.read_bytes() == patched

    def test_backup_failure_leaves_original(self, pool_config_file, dynamic_pool):
        original = pool_config_file.read_bytes()
        pool_config_file.with_name("www.conf.backup").mkdir()

        with pytest.raises(BackupWriteError):
            apply_configuration(dynamic_pool, pool_config_file)

        assert pool_config_file.read_bytes() == original

    def test_unreadable_config(self, tmp_path, dynamic_pool):
        with pytest.raises(ConfigWriteError, match="failed to read config file"):
            apply_configuration(dynamic_pool, tmp_path / "missing.conf")

    def test_restart_success(self, pool_config_file, dynamic_pool, fake_run):
        fake = fake_run()

        result = apply_configuration(
            dynamic_pool, pool_config_file, restart=True, service_name="php8.2-fpm", platform="linux"
        )

        assert result.restarted is True
        assert fake.commands == [["sudo", "systemctl", "restart", "php8.2-fpm"]]

    def test_restart_failure_keeps_written_config(self, pool_config_file, dynamic_pool, fake_run):
        fake_run(returncode=1)

        with pytest.raises(RestartError) as exc_info:
            apply_configuration(
                dynamic_pool, pool_config_file, restart=True, service_name="php-fpm", platform="linux"
            )

        error = exc_info.value
        assert error.message.startswith("config applied but failed to restart service")
        assert error.result.restarted is False
        assert error.result.changes
        assert "pm.max_children = 46" in pool_config_file.read_text()

    def test_restart_without_service(self, pool_config_file, dynamic_pool, fake_run):
        fake_run(returncode=3)

        result = apply_configuration(dynamic_pool, pool_config_file, restart=True, platform="linux")

        assert result.restarted is False
        assert result.service_name is None

    def test_preserves_undecodable_bytes(self, tmp_path, dynamic_pool):
        path = tmp_path / "www.conf"
        path.write_bytes(b"[www]\n; caf\xe9\npm = static\n")

        apply_configuration(dynamic_pool, path)

        assert b"; caf\xe9\n" in path.read_bytes()


class TestConfirm:

    @pytest.mark.parametrize("answer,expected", [
        ("y\n", True),
        ("YES\n", True),
        ("n\n", False),
        ("\n", False),
        ("", False),
    ])
    def test_answers(self, answer, expected):
        output = io.StringIO()

        assert confirm("Apply these settings?", io.StringIO(answer), output) is expected
        assert output.getvalue() == "Apply these settings? [y/N]: "
