"""
Tests for logging configuration.
"""

import logging

from formulakit.core.observability.logging_config import formula_log_file, setup_logging


class TestSetupLogging:
    def test_console_level(self):
        setup_logging(level="INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_invalid_level_falls_back(self):
        setup_logging(level="LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_build_log_file(self, tmp_path):
        log = tmp_path / "logs" / "matplotlib.log"
        setup_logging(level="WARNING", log_file=log)
        logging.getLogger("formulakit.test").debug("==> python setup.py install")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "python setup.py install" in log.read_text()
        assert logging.getLogger().level == logging.DEBUG
        setup_logging(level="WARNING")

    def test_formula_log_file(self, tmp_path):
        assert formula_log_file(tmp_path, "matplotlib") == tmp_path / "matplotlib.log"
