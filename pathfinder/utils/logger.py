"""
Structured Logger Module

Configures structlog for JSON-formatted structured logging with correlation IDs.
Every component (form, generator, renderer, exporter, coordinator) logs through
this module so a single pathway request can be traced end to end.

Example Usage:
    from pathfinder.utils.logger import get_logger

    logger = get_logger(
        correlation_id="a1b2c3d4-e5f6-7890-abcd-ef1234567890",
        phase="generation",
        component="pathway_generator",
    )

    logger.info("Pathway generated", step_count=6)
    logger.warning("Unknown step type", step_type="Bootcamp")
    logger.error("Generation failed", error="Timeout after 180s")

Log Levels:
    - DEBUG: Prompt and response sizes, template rendering
    - INFO: State transitions, successful generation, exports, storage writes
    - WARNING: Corrupted storage, unknown enum values, failed share/clipboard
    - ERROR: Upstream failures, unparsable responses, export failures
    - CRITICAL: Unrecoverable failures requiring user intervention

Learner free text (skills, aspirations) is never logged; log lengths instead.
"""

import logging
import sys
import uuid
from pathlib import Path
from typing import Optional
import structlog
from structlog.types import BindableLogger, EventDict, WrappedLogger


def mask_credentials(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Processor to mask sensitive credentials in log output.

    Args:
        logger: Logger instance
        method_name: Logging method name
        event_dict: Event dictionary to process

    Returns:
        Event dictionary with masked credentials

    Masks:
        - password, api_key, token, secret, credential, auth fields
        - Replaces values with "***MASKED***"
        - Uses word boundary matching to avoid false positives
    """
    sensitive_fields = {"password", "api_key", "token", "secret", "credential", "auth"}

    for key in list(event_dict.keys()):
        key_lower = key.lower()
        for sensitive in sensitive_fields:
            if (
                key_lower == sensitive
                or key_lower.endswith(f"_{sensitive}")
                or key_lower.endswith(f"-{sensitive}")
                or key_lower.startswith(f"{sensitive}_")
                or key_lower.startswith(f"{sensitive}-")
            ):
                event_dict[key] = "***MASKED***"
                break

    return event_dict


def configure_logging(
    log_file: str = "logs/talent-pathfinder.log",
    log_level: str = "INFO",
    console_level: str = "WARNING",
) -> None:
    """
    Configure structlog with JSON output and file logging.

    The file handler receives everything at ``log_level``. The console handler
    writes to stderr at ``console_level`` so the interactive terminal UI on
    stdout is not interleaved with log lines.

    Args:
        log_file: Path to log file (default: "logs/talent-pathfinder.log")
        log_level: Logging level for the log file (default: "INFO")
        console_level: Logging level for stderr (default: "WARNING")

    Log Format (JSON):
        {
            "timestamp": "2026-10-17T10:30:45Z",
            "level": "info",
            "correlation_id": "a1b2c3d4-...",
            "phase": "generation",
            "component": "pathway_generator",
            "event": "Pathway generated",
            "step_count": 6
        }
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(getattr(logging, log_level.upper()))
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, console_level.upper()))

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper()),
        handlers=[file_handler, console_handler],
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            mask_credentials,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(
    correlation_id: Optional[str] = None,
    phase: Optional[str] = None,
    component: Optional[str] = None,
) -> BindableLogger:
    """
    Get structured logger with bound context.

    Args:
        correlation_id: Correlation ID for request tracing (generates UUID if not provided)
        phase: Application phase (e.g., "generation", "export")
        component: Component name (e.g., "pathway_generator", "pathway_store")

    Returns:
        BoundLogger with correlation_id, phase, and component bound to context
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    logger = structlog.get_logger()

    if correlation_id:
        logger = logger.bind(correlation_id=correlation_id)
    if phase:
        logger = logger.bind(phase=phase)
    if component:
        logger = logger.bind(component=component)

    return logger


# Initialize logging on module import with default settings
configure_logging()
