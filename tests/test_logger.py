import logging

import pytest

from appstage.logger import DEFAULT_FORMAT, VERBOSE_FORMAT, setup_logger


@pytest.fixture
def package_logger():
    logger = logging.getLogger("appstage")
    saved = logger.handlers[:], logger.level, logger.propagate
    logger.handlers.clear()
    yield logger
    logger.handlers[:], logger.level, logger.propagate = saved


def test_default_format_omits_logger_name(package_logger: logging.Logger) -> None:
    setup_logger()

    (handler,) = package_logger.handlers
    assert handler.formatter._fmt == DEFAULT_FORMAT
    assert package_logger.level == logging.INFO
    assert not package_logger.propagate


def test_verbose_format_names_the_logger(package_logger: logging.Logger) -> None:
    setup_logger(verbose=True)

    (handler,) = package_logger.handlers
    assert handler.formatter._fmt == VERBOSE_FORMAT
    assert "%(name)s" in VERBOSE_FORMAT
    assert package_logger.level == logging.DEBUG


def test_repeat_setup_only_changes_level(package_logger: logging.Logger) -> None:
    setup_logger()
    setup_logger(verbose=True)

    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.DEBUG
