"""
Loguru configuration for the orchestrator.

This module configures loguru with:
- Automatic Trace ID in each log (one per job)
- Configurable format from settings
- Redirection of standard library logs (paramiko, pypsrp, uvicorn) to loguru
"""

import logging
import sys
from typing import Any

from loguru import logger

from jks_orchestrator.config import settings
from jks_orchestrator.core.trace_context import trace_id_context


def add_trace_id(record: dict[str, Any]) -> bool:
    """
    Adds the trace_id to the log record.

    The trace_id is obtained from the current job context,
    allowing tracking of every remote call made by the same job.

    Args:
        record: Loguru record

    Returns:
        True to indicate that the filter passed
    """
    trace_id = trace_id_context.get()
    record["extra"]["trace_id"] = trace_id if trace_id else "N/A"
    return True


def configure_logger() -> None:
    """
    Configures loguru with service settings.

    Removes the default loguru handler and adds a stderr handler
    with the configured level and format.
    """
    logger.remove()

    logger.add(
        sink=sys.stderr,
        level=settings.log_level.upper(),
        format=settings.log_format,
        filter=add_trace_id,
        colorize=True,
        serialize=False,
        backtrace=True,
        diagnose=False,
        enqueue=settings.logger_enqueue,
    )


configure_logger()


__all__ = ["logger", "InterceptHandler", "intercept_standard_logging"]


class InterceptHandler(logging.Handler):
    """
    Handler to redirect standard logging logs to loguru.

    paramiko and pypsrp log through the standard library; this handler
    lets their transport-level messages share the job trace id.
    """

    def emit(self, record: logging.LogRecord) -> None:
        """
        Redirects a standard logging record to loguru.

        Args:
            record: logging.LogRecord record
        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def intercept_standard_logging() -> None:
    """
    Configures redirection of standard logging to loguru.

    Intercepts logs from:
    - paramiko (SSH transport)
    - pypsrp (WinRM / PowerShell remoting)
    - uvicorn, uvicorn.access, uvicorn.error (HTTP job endpoint)
    """
    logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO)

    for logger_name in [
        "paramiko",
        "pypsrp",
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "fastapi",
    ]:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False

    # paramiko is very chatty at INFO
    logging.getLogger("paramiko").setLevel(logging.WARNING)
