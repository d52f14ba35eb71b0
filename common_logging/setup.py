"""
Common Logging Setup Module

Loggers handed out here carry no handlers of their own. Output is configured
only when an application calls setup_logging (or one of its presets); a
library importing this module leaves the host's logging untouched.
"""

import logging
import os
from typing import Dict, Optional

from . import JSONFormatter, StructuredFormatter, ServiceFilter


LIBRARY_LOGGER = "metadata_registry"

# Global logger cache
_loggers: Dict[str, logging.Logger] = {}


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance by name

    Args:
        name: Logger name (defaults to caller's module)
    """
    if name is None:
        import inspect
        frame = inspect.currentframe().f_back
        name = frame.f_globals.get('__name__', 'unknown')

    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)
    return _loggers[name]


def silence_library_logger(name: str = LIBRARY_LOGGER) -> logging.Logger:
    """Give a library's top-level logger a NullHandler so unconfigured hosts stay quiet"""
    logger = get_logger(name)
    if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
        logger.addHandler(logging.NullHandler())
    return logger


def setup_logging(
    service: str = "metadata-registry",
    version: str = "1.0.0",
    level: str = "INFO",
    format_type: str = "structured",
    logger_name: Optional[str] = None,
) -> logging.Handler:
    """
    Attach a formatted stream handler; meant to be called by applications

    Args:
        service: Service name stamped on every record
        version: Service version
        level: Logging level
        format_type: 'json' or 'structured'
        logger_name: Logger to configure; the root logger when None

    Returns:
        The installed handler
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    target = logging.getLogger(logger_name)
    target.setLevel(numeric_level)

    # Only replace handlers this module installed earlier
    for handler in target.handlers[:]:
        if getattr(handler, '_common_logging', False):
            target.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(numeric_level)
    handler._common_logging = True
    handler.setFormatter(JSONFormatter() if format_type.lower() == "json" else StructuredFormatter())
    handler.addFilter(ServiceFilter(service, version))
    target.addHandler(handler)
    return handler


def setup_development_logging(service: str = "metadata-registry", level: str = "DEBUG") -> logging.Handler:
    """Structured text output for local runs"""
    return setup_logging(service=service, level=level, format_type="structured")


def setup_production_logging(service: str = "metadata-registry", level: str = "INFO") -> logging.Handler:
    """JSON output for collected logs"""
    return setup_logging(service=service, level=level, format_type="json")


def setup_from_environment(service: str = "metadata-registry") -> logging.Handler:
    """Pick a preset from ENVIRONMENT (production/prod/staging use JSON)"""
    env = os.getenv("ENVIRONMENT", "development").lower()

    if env in ["production", "prod", "staging"]:
        return setup_production_logging(service)
    return setup_development_logging(service)
