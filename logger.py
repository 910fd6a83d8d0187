"""
Logging Framework for TableView

This module provides the logging infrastructure used across the renderer:
- Multiple output targets (rotating file, console)
- Configurable log levels and formats
- Performance tracking
- Context tracking for debugging

Usage:
    from logger import get_logger

    logger = get_logger(__name__)
    logger.info("Table constructed")
    logger.warning("Invalid sort order")

    # Performance tracking
    with logger.track_time("render_table"):
        html = view.render()
"""

import logging
import logging.handlers
import sys
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, ClassVar, Dict, Optional

from config import CONFIG


class PerformanceLogger:
    """
    Track and log performance metrics.
    """

    def __init__(self, logger: logging.Logger):
        """
        Create a PerformanceLogger bound to a standard logger and prepare storage for timing data.

        Initializes the instance with the given `logging.Logger` and an empty dict that maps operation names to lists of elapsed times (in seconds).
        """
        self.logger = logger
        self.timings: Dict[str, list] = {}
        self._lock = threading.Lock()

    @contextmanager
    def track_time(self, operation: str, log_level: str = "DEBUG"):
        """
        Context manager that measures and logs the elapsed time of a named operation.

        If CONFIG['logging.log_performance'] is falsy, the context yields without measuring or logging. When enabled, the elapsed time is appended to self.timings[operation] and a message is emitted on the wrapped logger at the requested log level.

        Parameters:
            operation (str): Name of the operation to record and log.
            log_level (str): Name of the logger method to call (e.g., "DEBUG", "INFO"); falls back to debug if unavailable.
        """
        if not CONFIG.get('logging.log_performance'):
            yield
            return

        start_time = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start_time

            with self._lock:
                self.timings.setdefault(operation, []).append(elapsed)

            log_method = getattr(self.logger, log_level.lower(), self.logger.debug)
            log_method(f"{operation} completed in {elapsed:.6f}s")

    def get_timings(self, operation: Optional[str] = None) -> Dict[str, list]:
        """
        Return recorded performance timings.

        If `operation` is provided, return a dict containing only that operation mapped to its list of timings (empty list if none were recorded). Otherwise return the full timings mapping.
        """
        if operation:
            return {operation: self.timings.get(operation, [])}
        return self.timings


class ContextFilter(logging.Filter):
    """
    Add context information to log records.
    """

    def __init__(self):
        super().__init__()
        self.context: Dict[str, Any] = {}

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Attach stored context key/value pairs as attributes on the given LogRecord.

        Parameters:
            record (logging.LogRecord): The log record to augment.

        Returns:
            bool: `True` to allow the record to be processed by logging handlers.
        """
        for key, value in self.context.items():
            setattr(record, key, value)
        return True

    def set_context(self, **kwargs) -> None:
        """Add or update contextual key-value pairs attached to subsequent log records."""
        self.context.update(kwargs)

    def clear_context(self) -> None:
        """Remove all stored context key/value pairs."""
        self.context.clear()


class LoggerFactory:
    """
    Factory for creating and managing loggers.
    """

    _loggers: ClassVar[Dict[str, 'Logger']] = {}
    _context_filter: Optional[ContextFilter] = None
    _perf_logger: Optional[PerformanceLogger] = None
    _configured = False
    _lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def configure(cls) -> None:
        """
        Perform one-time configuration of the logging system using values from CONFIG.

        Reads logging settings (level, format, date format) and attaches the enabled handlers (file/console) to the root logger together with a shared ContextFilter. If CONFIG disables logging, logging is globally disabled. The method is idempotent. On error it prints a warning to stderr and marks configuration as complete to avoid repeated attempts.
        """
        if cls._configured:
            return

        try:
            cls._context_filter = ContextFilter()

            if not CONFIG.get('logging.enabled'):
                logging.disable(logging.CRITICAL)
                cls._configured = True
                return

            log_level = CONFIG.get('logging.level', 'INFO')
            formatter = logging.Formatter(
                CONFIG.get('logging.format'),
                datefmt=CONFIG.get('logging.date_format'),
            )

            root_logger = logging.getLogger()
            numeric_level = getattr(logging, str(log_level).upper(), None)
            if not isinstance(numeric_level, int):
                print(f"[WARNING] Invalid log level '{log_level}', defaulting to INFO", file=sys.stderr)
                numeric_level = logging.INFO
            root_logger.setLevel(numeric_level)

            if CONFIG.get('logging.file_enabled'):
                cls._setup_file_logging(root_logger, formatter)

            if CONFIG.get('logging.console_enabled'):
                cls._setup_console_logging(root_logger, formatter)

            cls._configured = True

        except Exception as e:
            print(f"[WARNING] Logging configuration failed: {e}", file=sys.stderr)
            cls._configured = True

    @classmethod
    def _setup_file_logging(cls, root_logger: logging.Logger, formatter: logging.Formatter) -> None:
        """
        Configure rotating file logging for the given root logger using settings from CONFIG.

        Creates the log directory if missing and attaches a RotatingFileHandler formatted with `formatter`. On any setup error a warning is printed to stderr and the function returns without raising.

        Notes:
            Uses CONFIG keys: 'logging.log_dir', 'logging.log_file',
            'logging.max_log_size' and 'logging.backup_count'.
        """
        try:
            log_dir = Path(CONFIG.get('logging.log_dir', 'logs'))
            log_dir.mkdir(exist_ok=True, parents=True)

            handler = logging.handlers.RotatingFileHandler(
                log_dir / CONFIG.get('logging.log_file', 'tableview.log'),
                maxBytes=CONFIG.get('logging.max_log_size', 10485760),
                backupCount=CONFIG.get('logging.backup_count', 5),
            )
            handler.setFormatter(formatter)
            handler.addFilter(cls._context_filter)
            root_logger.addHandler(handler)

        except Exception as e:
            print(f"[WARNING] Failed to setup file logging: {e}", file=sys.stderr)

    @classmethod
    def _setup_console_logging(cls, root_logger: logging.Logger, formatter: logging.Formatter) -> None:
        """
        Configure console (stderr) logging for the given root logger using the provided formatter.

        Reads the console log level from CONFIG['logging.console_level'] (defaults to 'WARNING').
        """
        try:
            console_handler = logging.StreamHandler(sys.stderr)
            console_level = CONFIG.get('logging.console_level', 'WARNING')
            console_handler.setLevel(getattr(logging, str(console_level).upper(), logging.WARNING))
            console_handler.setFormatter(formatter)
            console_handler.addFilter(cls._context_filter)
            root_logger.addHandler(console_handler)

        except Exception as e:
            print(f"[WARNING] Failed to setup console logging: {e}", file=sys.stderr)

    @classmethod
    def get_logger(cls, name: str) -> 'Logger':
        """
        Retrieve a cached custom Logger by name, configuring the logging system on first use if necessary.

        Parameters:
            name (str): Logger name (typically __name__).

        Returns:
            Logger: Custom Logger instance associated with `name`.
        """
        if not cls._configured:
            cls.configure()

        with cls._lock:
            if name not in cls._loggers:
                cls._loggers[name] = Logger(logging.getLogger(name), cls._context_filter)
            return cls._loggers[name]

    @classmethod
    def get_performance_logger(cls) -> PerformanceLogger:
        """Return the shared PerformanceLogger, creating it on first access."""
        if cls._perf_logger is None:
            cls._perf_logger = PerformanceLogger(logging.getLogger('performance'))
        return cls._perf_logger


class Logger:
    """
    Wrapper around standard logger with additional features.
    """

    def __init__(self, standard_logger: logging.Logger, context_filter: Optional[ContextFilter] = None):
        """
        Wrap the provided standard logger with contextual and performance-tracking support.

        Parameters:
            standard_logger (logging.Logger): The underlying Python logger to delegate log calls to.
            context_filter (ContextFilter | None): Optional ContextFilter whose context will be applied to log records.
        """
        self._logger = standard_logger
        self._context_filter = context_filter
        self._perf_logger = LoggerFactory.get_performance_logger()

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, msg: str, *args, **kwargs) -> None:
        """Log debug message."""
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        """Log an informational message via the wrapped logger."""
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        """
        Log a message with severity WARNING.
        """
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        """
        Log a message with ERROR severity.

        Parameters:
            msg (str): The message format string.
            *args: Positional arguments used for message formatting.
            **kwargs: Keyword arguments forwarded to the underlying logger (for example, `exc_info`).
        """
        self._logger.error(msg, *args, **kwargs)

    def critical(self, msg: str, *args, **kwargs) -> None:
        self._logger.critical(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs) -> None:
        """
        Log a message and include the current exception traceback.
        """
        self._logger.exception(msg, *args, **kwargs)

    def log_operation(self, operation: str, status: str = "started", **details) -> None:
        """
        Log an operation event with optional details.

        Builds a single-line message containing the operation name in brackets, an uppercase status, and any key=value pairs provided in `details`. Uses the ERROR level when `status` is "failed" (case-insensitive), WARNING when it is "skipped", and DEBUG otherwise.

        Parameters:
            operation (str): Name of the operation.
            status (str): Operation status such as "started", "completed", "skipped" or "failed".
            **details: Additional key/value pairs to include in the log message.
        """
        msg_parts = [f"[{operation}]"]

        if status:
            msg_parts.append(status.upper())

        if details:
            msg_parts.append(" | ".join(f"{k}={v}" for k, v in details.items()))

        msg = " ".join(msg_parts)

        if status.lower() == "failed":
            self.error(msg)
        elif status.lower() == "skipped":
            self.warning(msg)
        else:
            self.debug(msg)

    def log_table_summary(self, table_name: str, shape: tuple, n_labels: int) -> None:
        """
        Log a concise summary of a validated dataset.

        Emitted only when CONFIG['logging.log_data_operations'] is truthy.

        Parameters:
            table_name (str): Identifier of the table (usually its id or class name).
            shape (tuple): Tuple of (entries, entry size).
            n_labels (int): Number of labels found in the dataset.
        """
        if CONFIG.get('logging.log_data_operations'):
            self.debug(f"{table_name}: shape={shape}, labels={n_labels}")

    @contextmanager
    def track_time(self, operation: str, log_level: str = "DEBUG"):
        """
        Provide a context manager that records elapsed time for the named operation and logs the duration at the specified level.
        """
        with self._perf_logger.track_time(operation, log_level):
            yield

    def get_timings(self) -> Dict[str, list]:
        """Retrieve recorded performance timings for all tracked operations."""
        return self._perf_logger.get_timings()

    def set_context(self, **kwargs) -> None:
        """
        Attach key-value context that will be included on subsequent log records.
        """
        if self._context_filter:
            self._context_filter.set_context(**kwargs)

    def clear_context(self) -> None:
        if self._context_filter:
            self._context_filter.clear_context()


def get_logger(name: str) -> Logger:
    """
    Obtain a configured logger for the given name.

    Parameters:
        name (str): The logger name, typically `__name__`.

    Returns:
        Logger: A Logger instance configured according to the module's logging settings.
    """
    return LoggerFactory.get_logger(name)
