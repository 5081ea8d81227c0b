"""Unit tests for structured logging."""

import json
import logging

from php_tuner import logger as tuner_logger
from php_tuner.logger import JSONFormatter, configure_logging, default_logger, get_logger


class TestTunerLogger:

    def test_console_line_carries_fields(self, capsys):
        log = get_logger(run_id="run-console", log_level="INFO")

        log.info("backup written", path="/etc/php-fpm.d/www.conf.backup", bytes=12)
        log.close()

        err = capsys.readouterr().err
        assert "[INFO] backup written" in err
        assert "path=/etc/php-fpm.d/www.conf.backup bytes=12" in err

    def test_level_threshold(self, capsys):
        log = get_logger(run_id="run-threshold", log_level="WARNING")

        log.info("hidden")
        log.warning("shown")
        log.close()

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_json_file_output(self, tmp_path, capsys):
        log = get_logger(run_id="run-json", log_level="DEBUG", log_dir=tmp_path / "logs")

        log.debug("system detected", cpu_cores=4)
        log.close()

        lines = (tmp_path / "logs" / "php-tuner.log").read_text().splitlines()
        record = json.loads(lines[-1])
        assert record["run_id"] == "run-json"
        assert record["level"] == "DEBUG"
        assert record["message"] == "system detected"
        assert record["cpu_cores"] == 4

    def test_exception_includes_traceback(self, capsys):
        log = get_logger(run_id="run-exc", log_level="ERROR")
        formatter = JSONFormatter("run-exc")
        captured = []

        class Collect(logging.Handler):
            def emit(self, record):
                captured.append(formatter.format(record))

        log.logger.addHandler(Collect())
        try:
            raise ValueError("bad value")
        except ValueError:
            log.exception("probe failed")
        log.close()

        record = json.loads(captured[0])
        assert record["exception"]["type"] == "ValueError"
        assert "bad value" in record["exception"]["traceback"]


class TestProcessLogger:

    def test_default_logger_is_shared(self):
        assert default_logger() is default_logger()
        assert default_logger().log_level == logging.WARNING

    def test_configure_replaces_default(self):
        first = default_logger()

        configured = configure_logging("DEBUG")

        assert configured is not first
        assert default_logger() is configured
        assert tuner_logger._default_logger.log_level == logging.DEBUG
