"""loguru sink setup and component names."""

import sys

import pytest
from loguru import logger

from config.settings import LoggingSettings, Settings
from utils.logger import DEFAULT_COMPONENT, get_logger, setup_logging


@pytest.fixture
def file_logging(tmp_path):
    settings = Settings(
        environment="testing",
        logging=LoggingSettings(
            console_enabled=False,
            file_enabled=True,
            file_path=tmp_path / "logs" / "keepalive.log",
        ),
    )
    setup_logging(settings)
    yield settings.logging
    logger.remove()
    logger.add(sys.stderr)


def test_records_carry_component_name(file_logging):
    get_logger("Registry").info("target added")
    logger.remove()

    lines = file_logging.file_path.read_text().splitlines()
    assert any("| Registry:" in line and "target added" in line for line in lines)


def test_unnamed_records_use_default_component(file_logging):
    get_logger().info("plain record")
    logger.remove()

    text = file_logging.file_path.read_text()
    assert f"| {DEFAULT_COMPONENT}:" in text


def test_errors_go_to_separate_file(file_logging):
    get_logger("Scheduler").warning("slow tick")
    get_logger("Scheduler").error("tick failed")
    logger.remove()

    errors = (file_logging.logs_dir / "errors.log").read_text()
    assert "tick failed" in errors
    assert "slow tick" not in errors
