"""
Common Logging Module for the metadata registry client
Structured and JSON log formatting shared by every package in this repo
"""

import json
import logging
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'service': getattr(record, 'service', None),
        }

        # Call sites pass extra={'extra_fields': {...}}
        extra_fields = getattr(record, 'extra_fields', None)
        if isinstance(extra_fields, dict):
            log_data.update(extra_fields)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class StructuredFormatter(logging.Formatter):
    """Structured text formatter"""

    def __init__(self):
        super().__init__(
            fmt='%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s%(context)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def format(self, record):
        extra_fields = getattr(record, 'extra_fields', None)
        if isinstance(extra_fields, dict) and extra_fields:
            record.context = ' ' + ' '.join(f'{k}={v}' for k, v in extra_fields.items())
        else:
            record.context = ''
        return super().format(record)


class ServiceFilter(logging.Filter):
    """Add service info to log records"""

    def __init__(self, service_name: str = "metadata-registry", version: str = "1.0.0"):
        super().__init__()
        self.service_name = service_name
        self.version = version

    def filter(self, record):
        record.service = self.service_name
        record.version = self.version
        return True


__all__ = [
    'JSONFormatter',
    'StructuredFormatter',
    'ServiceFilter'
]
