"""
Centralized logging configuration for Patriot Thanks.
Provides component-specific loggers with separate log files.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime

from ..config import get_config

DETAILED_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - "
    "%(funcName)s() - %(message)s"
)
SIMPLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class ComponentLogger:
    """Manages component-specific logging with separate files."""

    _loggers: Dict[str, logging.Logger] = {}
    _initialized = False
    _log_dir: Optional[Path] = None
    _debug = False

    # Component definitions with their log levels
    COMPONENTS = {
        "api": {"level": logging.INFO, "file": "api.log"},
        "database": {"level": logging.INFO, "file": "database.log"},
        "services": {"level": logging.INFO, "file": "services.log"},
        "domain": {"level": logging.INFO, "file": "domain.log"},
        "main": {"level": logging.INFO, "file": "main.log"},
        "error": {"level": logging.ERROR, "file": "errors.log"},  # Centralized error log
    }

    @classmethod
    def initialize(cls, log_dir: Optional[str] = None, debug: bool = False) -> None:
        """
        Initialize the logging system with component-specific loggers.

        Args:
            log_dir: Directory for log files. Defaults to config.app.log_dir
            debug: Enable debug logging for all components
        """
        if cls._initialized:
            return

        config = get_config()
        debug = debug or config.server.debug
        cls._debug = debug
        to_file = config.app.log_to_file

        if to_file:
            base_dir = Path(log_dir) if log_dir else Path(config.app.log_dir)
            session_dir = datetime.now().strftime("%Y%m%d_%H%M%S")
            cls._log_dir = base_dir / session_dir
            cls._log_dir.mkdir(parents=True, exist_ok=True)

        root_level = logging.DEBUG if debug else logging.INFO
        logging.getLogger().setLevel(root_level)

        for component_name, component_config in cls.COMPONENTS.items():
            level = logging.DEBUG if debug else component_config["level"]
            cls._build_logger(component_name, level, component_config["file"])

        # Mark as initialized before logging to avoid recursion
        cls._initialized = True

        main_logger = cls._loggers.get("main")
        if main_logger:
            main_logger.info("Patriot Thanks logging initialized")
            main_logger.info(f"Log directory: {cls._log_dir}")
            main_logger.info(f"Debug mode: {debug}")

    @classmethod
    def _build_logger(cls, component: str, level: int, file_name: str) -> logging.Logger:
        """Create and register the logger for one component."""
        logger = logging.getLogger(f"patriot.{component}")

        # Clear existing handlers
        logger.handlers.clear()
        logger.propagate = False
        logger.setLevel(level)

        if cls._log_dir is not None:
            file_handler = logging.handlers.RotatingFileHandler(
                cls._log_dir / file_name,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(
                logging.Formatter(DETAILED_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
            )
            logger.addHandler(file_handler)

        # Console handler for errors and critical
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.ERROR)
        console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(console_handler)

        cls._loggers[component] = logger
        return logger

    @classmethod
    def get_logger(cls, component: str) -> logging.Logger:
        """
        Get a logger for a specific component.

        Args:
            component: Component name (api, database, services, ...) or a
                      module path like 'patriot_thanks.services.business_service'

        Returns:
            Logger instance for the component
        """
        if not cls._initialized:
            cls.initialize()

        if component.startswith("patriot_thanks."):
            parts = component.split(".")
            if parts[1] in ("db", "repositories"):
                component = "database"
            elif len(parts) > 2:
                component = parts[1]
            else:
                component = "main"

        if component not in cls._loggers:
            level = logging.DEBUG if cls._debug else logging.INFO
            cls._build_logger(component, level, f"{component}.log")

        return cls._loggers[component]

    @classmethod
    def log_exception(
        cls, component: str, exc: Exception, context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log an exception with context to both component and error logs.

        Args:
            component: Component where the exception occurred
            exc: The exception to log
            context: Additional context information
        """
        component_logger = cls.get_logger(component)
        error_logger = cls.get_logger("error")

        context_str = ""
        if context:
            context_str = " | Context: " + ", ".join(f"{k}={v}" for k, v in context.items())

        component_logger.error(
            f"Exception in {component}: {type(exc).__name__}: {exc}{context_str}",
            exc_info=exc,
        )
        if error_logger is not component_logger:
            error_logger.error(
                f"[{component}] {type(exc).__name__}: {exc}{context_str}", exc_info=exc
            )


# Convenience functions
def get_logger(component: str) -> logging.Logger:
    """Get a logger for a specific component."""
    return ComponentLogger.get_logger(component)


def initialize_logging(log_dir: Optional[str] = None, debug: bool = False) -> None:
    """Initialize the logging system."""
    ComponentLogger.initialize(log_dir=log_dir, debug=debug)


def log_exception(component: str, exc: Exception, context: Optional[Dict[str, Any]] = None) -> None:
    """Log an exception with context."""
    ComponentLogger.log_exception(component, exc, context)
