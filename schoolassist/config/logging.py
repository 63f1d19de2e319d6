"""
Logging configuration for the school assistant scheduling core.
Provides console, JSON and rotating-file output through dictConfig.
"""

import logging
import logging.config
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from schoolassist.config.settings import Settings, get_settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON lines tagged with timestamp, level, logger and deployment environment"""

    def __init__(self, *args, environment: str = "development", **kwargs):
        super().__init__(*args, **kwargs)
        self.environment = environment

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['environment'] = self.environment

        exc_type, exc_value, _ = record.exc_info or (None, None, None)
        if exc_type is not None:
            log_record['exception'] = {
                'type': exc_type.__name__,
                'message': str(exc_value),
                'traceback': self.formatException(record.exc_info),
            }


def build_logging_config(settings: Settings) -> Dict[str, Any]:
    """Build the dictConfig mapping for the given settings"""
    console_formatter = 'json' if settings.LOG_FORMAT == 'json' else (
        'colored' if settings.is_development() else 'standard'
    )

    handlers: Dict[str, Dict[str, Any]] = {
        'console': {
            'level': 'DEBUG' if settings.DEBUG else settings.LOG_LEVEL,
            'class': 'logging.StreamHandler',
            'formatter': console_formatter,
        },
    }

    if settings.LOG_FILE:
        Path(settings.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
        handlers['file'] = {
            'level': settings.LOG_LEVEL,
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': settings.LOG_FILE,
            'maxBytes': 10 * 1024 * 1024,
            'backupCount': 10,
            'formatter': 'json' if settings.LOG_FORMAT == 'json' else 'standard',
            'encoding': 'utf8',
        }

    handler_names = list(handlers)

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
            },
            'json': {
                '()': CustomJsonFormatter,
                'fmt': '%(timestamp)s %(level)s %(logger)s %(message)s',
                'environment': settings.ENVIRONMENT,
            },
            'colored': {
                '()': 'colorlog.ColoredFormatter',
                'fmt': '%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                'log_colors': {
                    'DEBUG': 'cyan',
                    'INFO': 'green',
                    'WARNING': 'yellow',
                    'ERROR': 'red',
                    'CRITICAL': 'red,bg_white',
                }
            }
        },
        'handlers': handlers,
        'loggers': {
            '': {
                'handlers': handler_names,
                'level': settings.LOG_LEVEL,
            },
            'schoolassist': {
                'handlers': handler_names,
                'level': 'DEBUG' if settings.DEBUG else settings.LOG_LEVEL,
                'propagate': False
            },
            'sqlalchemy.engine': {
                'handlers': handler_names,
                'level': 'INFO' if settings.DB_ECHO else 'WARNING',
                'propagate': False
            },
        }
    }


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Install handlers for ``settings`` and return the package logger"""
    settings = settings or get_settings()
    logging.config.dictConfig(build_logging_config(settings))
    logger = logging.getLogger("schoolassist")
    logger.debug("Logging initialized with level: %s", settings.LOG_LEVEL)
    return logger
