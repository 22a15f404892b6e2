"""
Logging system using structlog.
Provides structured logging with different output formats and levels.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import structlog
from structlog.stdlib import LoggerFactory


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[str] = None,
    debug: bool = False
) -> None:
    """
    Set up structured logging with configurable output formats.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional log file path
        debug: Add call-site information to every event
    """

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(getattr(logging, log_level.upper()))
        file_handler.setFormatter(logging.Formatter('%(message)s'))
        logging.getLogger().addHandler(file_handler)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def mask_email(email: str) -> str:
    """Keep the first character and the domain: ``r***@hogwarts.edu``."""
    local, sep, domain = email.partition("@")
    if not sep:
        return email[:1] + "***"
    return f"{local[:1]}***@{domain}"


class AuthLogger:
    """
    Logger for credential events.

    Email addresses are masked; passwords, hashes and answers are never
    passed to it.
    """

    def __init__(self, name: str = "auth"):
        self.logger = structlog.get_logger(name)

    def log_registration(self, email: str, success: bool, reason: Optional[str] = None) -> None:
        level = "info" if success else "warning"
        getattr(self.logger, level)(
            "Account registration",
            email=mask_email(email),
            success=success,
            reason=reason
        )

    def log_login(self, email: str, success: bool) -> None:
        level = "info" if success else "warning"
        getattr(self.logger, level)(
            "Login attempt",
            email=mask_email(email),
            success=success
        )

    def log_security_check(self, email: str, success: bool, operation: str) -> None:
        """Log a security question check made by a reset or verify call."""
        level = "info" if success else "warning"
        getattr(self.logger, level)(
            "Security questions checked",
            email=mask_email(email),
            operation=operation,
            success=success
        )

    def log_password_reset(self, email: str) -> None:
        self.logger.info(
            "Password reset",
            email=mask_email(email)
        )
