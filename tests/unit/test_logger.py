import logging

import colorlog

from magicbind.utils.logger import get_logger, setup_logger


def test_setup_logger_returns_logger():
    logger = setup_logger(name="magicbind.test", level=logging.INFO)
    assert logger.name == "magicbind.test"
    assert logger.level == logging.INFO


def test_setup_logger_uses_colored_console_handler():
    logger = setup_logger(name="magicbind.test_color", level=logging.DEBUG)
    formatters = [handler.formatter for handler in logger.handlers]
    assert any(isinstance(formatter, colorlog.ColoredFormatter) for formatter in formatters)


def test_setup_logger_does_not_duplicate_handlers():
    logger = setup_logger(name="magicbind.test_dup")
    count = len(logger.handlers)
    setup_logger(name="magicbind.test_dup")
    assert len(logger.handlers) == count


def test_setup_logger_with_file(tmp_path):
    log_file = tmp_path / "logs" / "magicbind.log"
    logger = setup_logger(name="magicbind.test_file", log_file=log_file)
    logger.info("hello")
    for handler in logger.handlers:
        handler.flush()
    assert "hello" in log_file.read_text()


def test_get_logger_returns_existing():
    logger = setup_logger(name="magicbind.test2", level=logging.DEBUG)
    fetched = get_logger("magicbind.test2")
    assert fetched is logger


def test_package_logger_has_null_handler():
    import magicbind

    package_logger = logging.getLogger(magicbind.__name__)
    assert any(isinstance(handler, logging.NullHandler) for handler in package_logger.handlers)
