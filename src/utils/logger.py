"""
Logging configuration for BriefDeck using Logfire.
"""
import logging
import os
from typing import Optional

import logfire

from config.settings import get_settings

# Configure Logfire once at module import
LOGFIRE_CONFIGURED = False

_settings = get_settings()

if _settings.LOGFIRE_TOKEN:
    os.environ['LOGFIRE_CONSOLE_NO_SHOW'] = '1'
    try:
        logfire.configure(
            token=_settings.LOGFIRE_TOKEN,
            service_name="briefdeck",
            console=False,
        )
        LOGFIRE_CONFIGURED = True
    except Exception as config_error:  # fall back to stdlib logging
        logging.getLogger(__name__).warning("Logfire disabled: %s", config_error)
        LOGFIRE_CONFIGURED = False


class LogfireLogger:
    """Wrapper to make Logfire work like standard Python logging."""

    def __init__(self, name: str):
        self.name = name

    def info(self, message, *args, **kwargs):
        # Handle % formatting if args provided
        if args:
            message = message % args
        logfire.info(f"[{self.name}] {message}", **kwargs)

    def warning(self, message, *args, **kwargs):
        if args:
            message = message % args
        logfire.warn(f"[{self.name}] {message}", **kwargs)

    def error(self, message, *args, **kwargs):
        kwargs.pop('exc_info', None)
        if args:
            message = message % args
        logfire.error(f"[{self.name}] {message}", **kwargs)

    def debug(self, message, *args, **kwargs):
        if args:
            message = message % args
        logfire.debug(f"[{self.name}] {message}", **kwargs)

    def exception(self, message, *args, **kwargs):
        if args:
            message = message % args
        logfire.exception(f"[{self.name}] {message}", **kwargs)

    def setLevel(self, level):
        # No-op for compatibility
        pass


class StandardLogger:
    """Standard Python logger when Logfire is not configured."""

    def __init__(self, name: str, level: Optional[str] = None):
        self.logger = logging.getLogger(name)

        # LOG_LEVEL from settings, default to INFO
        log_level_str = (level or _settings.LOG_LEVEL or 'INFO').upper()
        log_level = getattr(logging, log_level_str, logging.INFO)
        self.logger.setLevel(log_level)

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(log_level)
            formatter = logging.Formatter(
                '[%(levelname)s %(name)s] %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def info(self, message, *args, **kwargs):
        self.logger.info(message, *args, **{k: v for k, v in kwargs.items() if k != 'exc_info'})

    def warning(self, message, *args, **kwargs):
        self.logger.warning(message, *args, **{k: v for k, v in kwargs.items() if k != 'exc_info'})

    def error(self, message, *args, **kwargs):
        exc_info = kwargs.pop('exc_info', False)
        self.logger.error(message, *args, exc_info=exc_info, **kwargs)

    def debug(self, message, *args, **kwargs):
        self.logger.debug(message, *args, **{k: v for k, v in kwargs.items() if k != 'exc_info'})

    def exception(self, message, *args, **kwargs):
        self.logger.exception(message, *args, **{k: v for k, v in kwargs.items() if k != 'exc_info'})

    def setLevel(self, level):
        self.logger.setLevel(level)


def setup_logger(name: str, level: Optional[str] = None):
    """
    Set up a logger using Logfire or standard Python logging if not configured.

    Args:
        name: Logger name (usually __name__)
        level: Logging level (used for standard logger)

    Returns:
        LogfireLogger or StandardLogger instance
    """
    if LOGFIRE_CONFIGURED:
        return LogfireLogger(name)
    return StandardLogger(name, level)
