"""Logging configuration for CCE.

Logging is off by default and controlled by environment variables, so that
the wrapper never writes anything the forwarded command did not ask for.

Environment Variables:
    CCE_LOG: Set to "true" to enable logging (default: "false")
    CCE_LOG_FILE: Path to log file (default: ~/.cce.log)
"""

import logging
import os
from pathlib import Path

# Environment variable configuration
LOG_ENABLED = os.environ.get("CCE_LOG", "false").lower() == "true"
LOG_FILE = Path(os.environ.get("CCE_LOG_FILE", str(Path.home() / ".cce.log")))

# Module-level logger instance
_logger: logging.Logger | None = None


def setup_logging() -> logging.Logger:
    """Configure logging based on environment variables.

    Creates a logger that writes to the configured log file when
    CCE_LOG is set to "true". Otherwise, uses a NullHandler
    to suppress all log output.

    Returns:
        Configured logger instance
    """
    global _logger

    if _logger is not None:
        return _logger

    logger = logging.getLogger("cce")
    logger.handlers.clear()

    if LOG_ENABLED:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(LOG_FILE)
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    else:
        logger.addHandler(logging.NullHandler())

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the configured logger instance, creating it if necessary."""
    global _logger
    if _logger is None:
        return setup_logging()
    return _logger


def log_message(message: str) -> None:
    """Log a message if logging is enabled.

    Args:
        message: Message to log
    """
    logger = get_logger()
    logger.info(message)


def set_verbose(enabled: bool) -> None:
    """Include debug messages in the log file while --verbose is active."""
    get_logger().setLevel(logging.DEBUG if enabled else logging.INFO)


def log_debug(message: str) -> None:
    """Log a message that is only kept at verbose level."""
    get_logger().debug(message)


def log_command(command: str, exit_code: int = 0) -> None:
    """Log command execution with exit code.

    Args:
        command: The command that was executed
        exit_code: The exit code returned by the command
    """
    logger = get_logger()
    logger.info(f"COMMAND: {command} | EXIT_CODE: {exit_code}")


__all__ = [
    "LOG_ENABLED",
    "LOG_FILE",
    "setup_logging",
    "get_logger",
    "log_message",
    "log_debug",
    "log_command",
    "set_verbose",
]
