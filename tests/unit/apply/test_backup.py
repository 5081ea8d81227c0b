"""Unit tests for pre-write backups."""

import pytest

from php_tuner.apply import backup_path_for, write_backup
from php_tuner.exceptions import BackupWriteError, ErrorCategory


class TestBackupPath:

    def test_sibling_with_suffix(self, tmp_path):
        assert backup_path_for(tmp_path / "www.conf") == tmp_path / "www.conf.backup"

    def test_custom_suffix(self, tmp_path):
        assert backup_path_for(tmp_path / "www.conf", ".orig") == tmp_path / "www.conf.orig"


class TestWriteBackup:

    def test_byte_exact_copy(self, pool_config_file):
        original = pool_config_file.read_bytes()

        backup = write_backup(pool_config_file)

        assert backup == pool_config_file.with_name("www.conf.backup")
        assert backup.read_bytes() == original
        assert not backup.with_name("www.conf.backup.tmp").exists()

    def test_uses_supplied_content(self, pool_config_file):
        backup = write_backup(pool_config_file, content=b"pm = static\n")

        assert backup.read_bytes() == b"pm = static\n"

    def test_replaces_existing_backup(self, pool_config_file):
        stale = pool_config_file.with_name("www.conf.backup")
        stale.write_text("old backup")

        write_backup(pool_config_file)

        assert stale.read_bytes() == pool_config_file.read_bytes()

    def test_missing_source(self, tmp_path):
        with pytest.raises(BackupWriteError) as exc_info:
            write_backup(tmp_path / "absent.conf")

        assert exc_info.value.category is ErrorCategory.FILESYSTEM
        assert "failed to create backup" in exc_info.value.message

    def test_blocked_destination_cleans_up(self, pool_config_file):
        """Test a directory squatting on the backup name fails without leftovers."""
        blocker = pool_config_file.with_name("www.conf.backup")
        blocker.mkdir()
        (blocker / "keep").write_text("x")

        with pytest.raises(BackupWriteError):
            write_backup(pool_config_file)

        assert not pool_config_file.with_name("www.conf.backup.tmp").exists()
        assert blocker.is_dir()
