# src/flowblob/core/logging.py
"""Structured logging configuration for flowblob.

Uses structlog for structured logging. Both structlog loggers and stdlib
loggers (logging.getLogger) are rendered through the same processor chain,
so Azure SDK warnings and activity events share one output format.

Evaluation-scoped fields (activity name, method, container) are bound with
structlog contextvars for the duration of a single evaluate() call.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TextIO

import structlog
from structlog.stdlib import ProcessorFormatter

# The Azure SDK logs every HTTP request/response at INFO/DEBUG. Pin these to
# WARNING even when flowblob runs in DEBUG mode.
_NOISY_LOGGERS: tuple[str, ...] = (
    # Azure SDK: request/response headers for every create, upload and list call
    "azure",
    "azure.core",
    "azure.core.pipeline",
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.storage",
    "azure.storage.blob",
    # urllib3: connection pool churn underneath the SDK transport
    "urllib3",
    "urllib3.connectionpool",
)

_VALID_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def _remove_internal_fields(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Drop the bookkeeping keys ProcessorFormatter always adds."""
    # Both keys are always present at this point; del fails loudly if that ever changes
    # _record holds the LogRecord itself, which JSONRenderer would stringify into noise
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and stdlib logging.

    Args:
        json_output: If True, output JSON lines. If False, human-readable.
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        stream: Where to write log lines (default: stdout). The CLI passes
            stderr so command output on stdout stays machine-readable.

    Raises:
        ValueError: If level is not a known log level name.
    """
    level_name = level.upper()
    if level_name not in _VALID_LEVELS:
        raise ValueError(f"Unknown log level '{level}'. Expected one of: {', '.join(sorted(_VALID_LEVELS))}")
    log_level = getattr(logging, level_name)
    target = stream if stream is not None else sys.stdout

    # Run for every record, whether it came from structlog or a stdlib logger
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        final_processors: list[Any] = [
            _remove_internal_fields,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(default=str),
        ]
    else:
        final_processors = [
            _remove_internal_fields,
            structlog.dev.ConsoleRenderer(colors=target.isatty()),
        ]

    # structlog events are handed to stdlib logging; wrap_for_formatter packs the
    # event_dict so ProcessorFormatter can finish rendering it
    structlog.configure(
        processors=[*shared_processors, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Tests reconfigure logging; cached loggers would keep the old config
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(target)
    handler.setFormatter(
        ProcessorFormatter(
            processors=final_processors,
            # Records from stdlib loggers (the Azure SDK) never saw shared_processors;
            # without this they would lack level, timestamp and bound context
            foreign_pre_chain=shared_processors,
        )
    )

    # Replace, not append: configure_logging may run more than once per process
    root = logging.getLogger()
    root.handlers = []
    root.addHandler(handler)
    root.setLevel(log_level)

    # Never make noisy loggers less restrictive than the root level
    noisy_level = max(log_level, logging.WARNING)
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a bound logger for a module.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Bound structlog logger.
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


@contextmanager
def bound_context(**fields: Any) -> Iterator[None]:
    """Bind fields to every log event emitted inside the block.

    Example:
        with bound_context(activity="azure_blob", method="list"):
            logger.info("Listing blobs")  # carries activity= and method=
    """
    with structlog.contextvars.bound_contextvars(**fields):
        yield
