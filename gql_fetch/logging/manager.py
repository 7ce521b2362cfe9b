"""
Logging manager for gql_fetch.

This module provides centralized logging configuration and management.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Optional

from ..config.models import LoggingConfig, LogLevel
from .filters import SensitiveDataFilter
from .formatters import ColoredFormatter, StructuredFormatter


class LoggingManager:
    """Centralized logging manager."""

    def __init__(self) -> None:
        """Initialize logging manager."""
        self._configured = False
        self._handlers: Dict[str, logging.Handler] = {}
        self._loggers: Dict[str, logging.Logger] = {}

    def setup_logging(self, config: LoggingConfig) -> None:
        """
        Setup logging based on configuration.

        Args:
            config: Logging configuration
        """
        if self._configured:
            self.cleanup()

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, config.level.value))

        if config.enable_console:
            self._setup_console_handler(config)

        if config.enable_file and config.file_path:
            self._setup_file_handler(config)

        self._setup_component_loggers(config)

        self._configured = True

        logger = logging.getLogger(__name__)
        logger.debug("Logging system configured successfully")

    def _build_formatter(self, config: LoggingConfig, console: bool) -> logging.Formatter:
        if config.enable_structured:
            return StructuredFormatter()
        if console:
            return ColoredFormatter(config.format)
        return logging.Formatter(config.format)

    def _setup_console_handler(self, config: LoggingConfig) -> None:
        """Setup console logging handler."""
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(self._build_formatter(config, console=True))
        handler.setLevel(getattr(logging, config.level.value))
        handler.addFilter(SensitiveDataFilter())

        logging.getLogger().addHandler(handler)
        self._handlers["console"] = handler

    def _setup_file_handler(self, config: LoggingConfig) -> None:
        """Setup rotating file logging handler."""
        log_path = Path(str(config.file_path))
        log_path.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.handlers.RotatingFileHandler(
            filename=str(log_path),
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(self._build_formatter(config, console=False))
        handler.setLevel(getattr(logging, config.level.value))
        handler.addFilter(SensitiveDataFilter())

        logging.getLogger().addHandler(handler)
        self._handlers["file"] = handler

    def _setup_component_loggers(self, config: LoggingConfig) -> None:
        """Setup component-specific loggers."""
        for component, level in config.component_levels.items():
            logger = logging.getLogger(component)
            logger.setLevel(getattr(logging, level.value))
            self._loggers[component] = logger

    def get_logger(self, name: str) -> logging.Logger:
        """
        Get logger for specific component.

        Args:
            name: Logger name

        Returns:
            Logger instance
        """
        return logging.getLogger(name)

    def set_level(self, level: LogLevel, component: Optional[str] = None) -> None:
        """
        Set logging level.

        Args:
            level: New logging level
            component: Specific component (None for root logger)
        """
        log_level = getattr(logging, level.value)

        if component:
            logging.getLogger(component).setLevel(log_level)
        else:
            logging.getLogger().setLevel(log_level)
            for handler in self._handlers.values():
                handler.setLevel(log_level)

    def cleanup(self) -> None:
        """Remove and close the handlers this manager installed."""
        root_logger = logging.getLogger()
        for handler in list(self._handlers.values()):
            root_logger.removeHandler(handler)
            handler.close()

        self._handlers.clear()
        self._loggers.clear()
        self._configured = False

    @property
    def handlers(self) -> Dict[str, logging.Handler]:
        """Installed handlers by name."""
        return dict(self._handlers)

    def is_configured(self) -> bool:
        """Check if logging is configured."""
        return self._configured


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(config: Optional[LoggingConfig] = None) -> LoggingManager:
    """
    Setup logging with configuration.

    Args:
        config: Logging configuration (defaults apply if None)

    Returns:
        The global LoggingManager
    """
    _logging_manager.setup_logging(config or LoggingConfig())
    return _logging_manager


def get_logger(name: str) -> logging.Logger:
    """
    Get logger for component.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return _logging_manager.get_logger(name)


def cleanup_logging() -> None:
    """Cleanup logging system."""
    _logging_manager.cleanup()
