import logging
import os
import sys
import uuid
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from typing import Optional

from .configs import EngineConfig, engine_config

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def request_id_generator() -> str:
    return str(uuid.uuid4().hex)


def init_logging(config: EngineConfig | None = None) -> None:
    config = config or engine_config
    log_handlers: list[logging.Handler] = []
    log_file = config.LOG_FILE
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        log_handlers.append(
            RotatingFileHandler(
                filename=log_file,
                maxBytes=config.LOG_FILE_MAX_SIZE * 1024 * 1024,
                backupCount=config.LOG_FILE_BACKUP_COUNT,
            )
        )

    # Always add StreamHandler to log to console
    sh = logging.StreamHandler(sys.stdout)
    log_handlers.append(sh)

    for handler in log_handlers:
        handler.addFilter(RequestIdFilter())

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATEFORMAT,
        handlers=log_handlers,
        force=True,
    )

    for handler in logging.root.handlers:
        if handler.formatter:
            handler.formatter = RequestIdFormatter(config.LOG_FORMAT, config.LOG_DATEFORMAT)


class RequestIdFilter(logging.Filter):
    # Stamps each record with the id of the send in progress on this thread or
    # task, so the log lines of every hop of one request can be grouped.
    def filter(self, record):
        record.request_id = request_id_var.get()
        return True


class RequestIdFormatter(logging.Formatter):
    def format(self, record):
        if getattr(record, "request_id", None) is None:
            record.request_id = ""
        return super().format(record)
