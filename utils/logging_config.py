"""
Logging configuration with optional structured output and rotating files.

Library modules only ask for loggers; handlers are installed when an
application calls LoggerFactory.configure().
"""
import logging
import logging.handlers
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional
import traceback


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        # Fields passed through logger.debug(..., extra={'extra_fields': {...}})
        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class LoggerFactory:
    """Factory for creating and tuning the engine's loggers."""

    _loggers: Dict[str, logging.Logger] = {}
    _handlers: list = []
    _level: Optional[int] = None
    _configured = False

    @classmethod
    def configure(
        cls,
        log_level: str = "INFO",
        enable_console: bool = True,
        log_dir: Optional[str] = None,
        enable_structured: bool = False,
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5
    ):
        """Install console and (optionally) rotating file handlers on the root logger."""
        if cls._configured:
            return

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, log_level.upper()))

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            if enable_structured:
                console_handler.setFormatter(StructuredFormatter())
            else:
                console_handler.setFormatter(
                    logging.Formatter(
                        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
                    )
                )
            root_logger.addHandler(console_handler)
            cls._handlers.append(console_handler)

        if log_dir is not None:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_path / "parameter_schema.log",
                maxBytes=max_bytes,
                backupCount=backup_count
            )
            if enable_structured:
                file_handler.setFormatter(StructuredFormatter())
            else:
                file_handler.setFormatter(
                    logging.Formatter(
                        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
                    )
                )
            root_logger.addHandler(file_handler)
            cls._handlers.append(file_handler)

        cls._configured = True

    @classmethod
    def reset(cls):
        """Remove handlers installed by configure()."""
        root_logger = logging.getLogger()
        for handler in cls._handlers:
            root_logger.removeHandler(handler)
            handler.close()
        cls._handlers = []
        cls._configured = False

    @classmethod
    def set_level(cls, log_level: str):
        """Set the level of every logger handed out so far, and of later ones."""
        cls._level = getattr(logging, log_level.upper())
        for logger in cls._loggers.values():
            logger.setLevel(cls._level)

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get or create a logger with the given name."""
        if name not in cls._loggers:
            logger = logging.getLogger(name)
            if cls._level is not None:
                logger.setLevel(cls._level)
            cls._loggers[name] = logger

        return cls._loggers[name]


def get_logger(name: str) -> logging.Logger:
    """Get a logger managed by LoggerFactory."""
    return LoggerFactory.get_logger(name)
