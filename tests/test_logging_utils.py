from __future__ import annotations

import logging

from brotherlink import logging_utils
from brotherlink.settings import LoggingSettings


def test_logprintf_maps_levels(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="brotherlink"):
        logging_utils.set_debug(True)
        logging_utils.logprintf(0, "err %d", 1)
        logging_utils.logprintf(1, "warn")
        logging_utils.logprintf(2, "info %s", "x")
        logging_utils.logprintf(3, "debug")
        logging_utils.set_debug(False)

    levels = [(r.levelno, r.getMessage()) for r in caplog.records]
    assert levels == [
        (logging.ERROR, "err 1"),
        (logging.WARNING, "warn"),
        (logging.INFO, "info x"),
        (logging.DEBUG, "debug"),
    ]


def test_configure_logging_file(tmp_path) -> None:
    logfile = logging_utils.configure_logging(
        LoggingSettings(debug=False, log_dir=str(tmp_path / "logs"))
    )
    try:
        assert logfile == str(tmp_path / "logs" / "brotherlink.log")
        logging_utils.logprintf(2, "hello file")
        for handler in logging_utils.logger.handlers:
            handler.flush()
        assert "hello file" in (tmp_path / "logs" / "brotherlink.log").read_text()
    finally:
        for handler in list(logging_utils.logger.handlers):
            if isinstance(handler, logging.FileHandler):
                logging_utils.logger.removeHandler(handler)
                handler.close()


def test_configure_logging_without_dir() -> None:
    assert logging_utils.configure_logging(LoggingSettings()) is None
