"""
Structured logging for rapidgen.

Library modules log through structlog with snake_case event names and
key/value context; the CLI decides once how the events are rendered::

    from rapidgen.core.logging import configure_logging, get_logger

    configure_logging(level="DEBUG")
    logger = get_logger(__name__)
    logger.info("rapid_program_generated", declarations=12, instructions=30)
"""

import logging
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Route structlog events through the standard library root logger.

    Args:
        level: Minimum log level name.
        json_output: Write one JSON object per line (with a timestamp)
                     instead of console lines.
        log_file: Optional file receiving the same output as stderr.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=handlers,
        force=True,
    )

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    if json_output:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )
    for handler in handlers:
        handler.setFormatter(formatter)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


@contextmanager
def generation_context(module_name: str, robot_name: str) -> Iterator[None]:
    """Bind the module and robot name to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(module=module_name, robot=robot_name):
        yield
