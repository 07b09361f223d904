"""Structured logging setup with stdlib integration."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import structlog


def setup_logging(
    level: str = "INFO",
    file_path: str = "",
    rotation_max_mb: int = 5,
    rotation_backups: int = 3,
) -> None:
    """Configure structlog integrated with standard library logging.

    Flow internals log through logging.getLogger(); the host logs through
    structlog.get_logger(). Both end up in the same handlers and format.
    JSON output unless level is DEBUG (console renderer).

    If file_path is set, logs also go to that file, rotated at
    rotation_max_mb with rotation_backups files kept.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    use_json = level.upper() != "DEBUG"

    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer = structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(log_level)
    root.addHandler(stream_handler)

    if file_path and file_path.strip():
        path = Path(file_path.strip()).resolve()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                path,
                maxBytes=rotation_max_mb * 1024 * 1024,
                backupCount=rotation_backups,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            file_handler.setLevel(log_level)
            root.addHandler(file_handler)
        except OSError as e:
            # Keep stdout only
            sys.stderr.write(f"Log file disabled: could not open {path}: {e}\n")

    # uvicorn access lines carry request paths only; keep them at WARNING unless debugging
    if use_json:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
