import os
import logging
import logging.handlers
import sys
import re
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional
from functools import reduce

from ..config import Config, quiet_external_loggers, suppress_external_warnings
from .validators import sanitize_log_data

LOGGER_NAME = 'rentaldocs'

# UK driving licence, NI number, e-mail address
DEFAULT_SENSITIVE_PATTERNS = (
    r'\b[A-Z9]{5}\d{6}[A-Z9]{2}\d[A-Z]{2}\b,'
    r'\b[A-CEGHJ-PR-TW-Z]{2}\s?\d{2}\s?\d{2}\s?\d{2}\s?[A-D]\b,'
    r'\b[\w.+-]+@[\w-]+\.[\w.-]+\b'
)


class SensitiveDataFilter(logging.Filter):
    def __init__(self):
        super().__init__()
        patterns_str = os.getenv('SENSITIVE_DATA_PATTERNS', DEFAULT_SENSITIVE_PATTERNS)
        self.sensitive_patterns = [pattern.strip() for pattern in patterns_str.split(',') if pattern.strip()]

    def filter(self, record: logging.LogRecord) -> bool:
        sanitized_value = os.getenv('LOG_SANITIZED_VALUE', '***')

        for pattern in self.sensitive_patterns:
            record.msg = re.sub(pattern, sanitized_value, str(record.msg))

        if record.args:
            record.args = tuple(
                arg if not isinstance(arg, str)
                else reduce(lambda s, p: re.sub(p, sanitized_value, s), self.sensitive_patterns, arg)
                for arg in record.args
            )
        return True


class StructuredFormatter(logging.Formatter):
    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        log_format = os.getenv('LOG_BASE_FORMAT', "%(asctime)s - %(name)s - %(levelname)s")

        if self.include_extra:
            extra_formats = []
            if hasattr(record, 'operation'):
                extra_formats.append(" - Op:%(operation)s")
            if hasattr(record, 'duration_seconds'):
                extra_formats.append(" - %(duration_seconds).3fs")
            log_format += "".join(extra_formats)

        message_format = os.getenv('LOG_MESSAGE_FORMAT', " - %(message)s")
        return logging.Formatter(log_format + message_format).format(record)


def setup_logging(config: Optional[Config] = None) -> logging.Logger:
    config = config or Config()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, config.LOG_LEVEL.upper()))

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    log_dir = Path(config.LOGS_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    log_encoding = os.getenv('LOG_ENCODING', 'utf-8')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(StructuredFormatter(include_extra=False))
    console_handler.addFilter(SensitiveDataFilter())
    logger.addHandler(console_handler)

    file_formatter = StructuredFormatter(include_extra=True)
    file_handler = logging.handlers.RotatingFileHandler(
        log_dir / os.getenv('LOG_FILENAME', 'rentaldocs.log'),
        maxBytes=config.LOG_MAX_BYTES,
        backupCount=config.LOG_BACKUP_COUNT,
        encoding=log_encoding
    )
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(file_formatter)
    file_handler.addFilter(SensitiveDataFilter())
    logger.addHandler(file_handler)

    error_handler = logging.handlers.RotatingFileHandler(
        log_dir / os.getenv('LOG_ERROR_FILENAME', 'rentaldocs_errors.log'),
        maxBytes=config.LOG_MAX_BYTES // 2,
        backupCount=config.LOG_BACKUP_COUNT,
        encoding=log_encoding
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(file_formatter)
    error_handler.addFilter(SensitiveDataFilter())
    logger.addHandler(error_handler)

    quiet_external_loggers()
    suppress_external_warnings()

    logger.info('Logging initialised')
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f'{LOGGER_NAME}.{name}')


@contextmanager
def log_performance(operation: str, logger: Optional[logging.Logger] = None, **context):
    logger = logger or get_logger('performance')
    extra = {'operation': operation, **sanitize_log_data(context)}
    started = time.perf_counter()
    logger.debug(f"Starting operation: {operation}", extra=extra)
    try:
        yield
    except Exception as e:
        logger.error(
            f"Operation failed: {operation}",
            extra={**extra, 'duration_seconds': time.perf_counter() - started, 'error_type': type(e).__name__},
            exc_info=True
        )
        raise
    else:
        logger.info(
            f"Operation completed: {operation}",
            extra={**extra, 'duration_seconds': time.perf_counter() - started}
        )


class LoggerMixin:
    @property
    def logger(self) -> logging.Logger:
        return get_logger(self.__class__.__name__)

    def log_operation(self, operation: str, **kwargs) -> None:
        self.logger.info(f"Operation: {operation}", extra=sanitize_log_data(kwargs) if kwargs else {})

    def log_warning(self, message: str, **kwargs) -> None:
        context = sanitize_log_data(kwargs) if kwargs else {}
        self.logger.warning(message, extra=context)
