"""
Unit Tests for Logging Configuration
Tests loguru sinks and the standard-library bridge
"""

import logging
import sys

import pytest
from loguru import logger

from claimdesk.utils.logging import get_logger, setup_logging


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / "logs" / "claimdesk.log"
    setup_logging(level="DEBUG", log_file=str(path))
    yield path
    logger.remove()
    logger.add(sys.stderr)


@pytest.mark.unit
class TestSetupLogging:
    """Test sink configuration"""

    def test_bound_logger_writes_name(self, log_file):
        get_logger("claimdesk.test").warning("Version conflict on claim")
        content = log_file.read_text()
        assert "claimdesk.test - Version conflict on claim" in content
        assert "WARNING" in content

    def test_stdlib_records_reach_loguru(self, log_file):
        logging.getLogger("claimdesk.services.premium_service").info("Rated premium")
        assert "claimdesk.services.premium_service - Rated premium" in log_file.read_text()

    def test_level_filters(self, tmp_path):
        path = tmp_path / "warn.log"
        setup_logging(level="WARNING", log_file=str(path))
        try:
            get_logger("claimdesk.test").info("hidden")
            get_logger("claimdesk.test").error("shown")
            content = path.read_text()
            assert "hidden" not in content
            assert "shown" in content
        finally:
            logger.remove()
            logger.add(sys.stderr)
