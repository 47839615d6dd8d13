"""Structured logging setup."""

import logging
import sys
from typing import List, Optional, TextIO
import structlog
from structlog.types import Processor

_CALLSITE_PARAMETERS = {
    structlog.processors.CallsiteParameter.FILENAME,
    structlog.processors.CallsiteParameter.FUNC_NAME,
    structlog.processors.CallsiteParameter.LINENO,
}


def _processors(json_format: bool, with_callsite: bool) -> List[Processor]:
    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if with_callsite:
        processors.append(structlog.processors.CallsiteParameterAdder(_CALLSITE_PARAMETERS))

    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def setup_logging(
    level: str = "INFO",
    service_name: Optional[str] = None,
    json_format: bool = True,
    stream: Optional[TextIO] = None,
) -> structlog.BoundLogger:
    """
    Configure structlog and the stdlib root logger.

    Log lines go to stderr unless another stream is given, so that command
    output on stdout stays machine-readable. Naming a service also adds the
    call site (file, function, line) to every event.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        service_name: Bound as ``service`` on the returned logger
        json_format: JSON lines if True, plain console lines otherwise
        stream: Destination for log lines (default: sys.stderr)

    Returns:
        Logger bound to the service name

    Raises:
        ValueError: If the level name is unknown
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level '{level}'")

    stream = stream or sys.stderr

    # aiohttp and asyncio log through the stdlib
    logging.basicConfig(format="%(message)s", stream=stream, level=numeric_level)

    structlog.configure(
        processors=_processors(json_format, with_callsite=service_name is not None),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger()
    if service_name:
        logger = logger.bind(service=service_name)
    return logger
