import logging
from pathlib import Path

import structlog

LOG_FILE_NAME = "wikiterm.log"


def configure_logging(level, log_dir):
    """Send the ``wikiterm`` loggers to a JSON lines file.

    Nothing goes to the console, the screen belongs to the reader.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    logger = logging.getLogger("wikiterm")
    logger.setLevel(_resolve_level(level))
    logger.propagate = False
    _reset_handlers(logger)

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            ],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(sort_keys=True),
            ],
        )
    )
    logger.addHandler(handler)
    return log_file


def _resolve_level(raw):
    resolved = getattr(logging, str(raw).strip().upper(), None)
    if isinstance(resolved, int):
        return resolved
    return logging.INFO


def _reset_handlers(logger):
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
