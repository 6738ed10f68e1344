"""Tests for logging_config.py."""

import logging

from refdoc.logging_config import get_logger, setup_logging


class TestGetLogger:
    def test_namespaced(self):
        assert get_logger("reference.entity").name == "refdoc.reference.entity"

    def test_module_name_kept(self):
        assert get_logger("refdoc.store.memory").name == "refdoc.store.memory"

    def test_root(self):
        assert get_logger().name == "refdoc"
        assert get_logger("refdoc").name == "refdoc"

    def test_similar_prefix_is_namespaced(self):
        assert get_logger("refdocs").name == "refdoc.refdocs"


class TestSetupLogging:
    def teardown_method(self):
        logger = logging.getLogger("refdoc")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)

    def test_levels(self):
        assert setup_logging().level == logging.WARNING
        assert setup_logging(verbose=True).level == logging.DEBUG
        assert setup_logging(verbose=True, quiet=True).level == logging.ERROR

    def test_repeated_setup_replaces_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "refdoc.log"
        logger = setup_logging(log_file=str(log_file))
        get_logger("reference.source").warning("could not read source")
        for handler in logger.handlers:
            handler.flush()
        assert "could not read source" in log_file.read_text()
