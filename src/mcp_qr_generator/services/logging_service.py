# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/services/logging_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

Logging Service Implementation.
Installs a text handler on stderr and, when a log file is configured, a
rotating JSON file handler on the root logger.
"""

# Standard
import logging
from logging.handlers import RotatingFileHandler
import os
import sys
from typing import Dict, List

# Third-Party
from pythonjsonlogger import jsonlogger

# First-Party
from mcp_qr_generator.config import ServerConfig

# Create a text formatter
text_formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

# Create a JSON formatter
json_formatter = jsonlogger.JsonFormatter("%(asctime)s %(name)s %(levelname)s %(message)s")

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class LoggingService:
    """Logging setup and logger lookup.

    Examples:
        >>> service = LoggingService()
        >>> service.get_logger("mcp_qr_generator.test").name
        'mcp_qr_generator.test'
    """

    def __init__(self):
        """Initialize logging service."""
        self._handlers: List[logging.Handler] = []
        self._loggers: Dict[str, logging.Logger] = {}

    def configure(self, config: ServerConfig) -> None:
        """Install handlers on the root logger according to the configuration.

        Calling this again replaces the handlers installed by the previous call.

        Args:
            config: Server configuration (enable_logging, log_level, log_file).
        """
        self.shutdown()
        root = logging.getLogger()
        root.setLevel(LOG_LEVELS[config.log_level])

        if config.enable_logging:
            text_handler = logging.StreamHandler(sys.stderr)
            text_handler.setFormatter(text_formatter)
            self._install(root, text_handler)

        if config.log_file:
            folder = os.path.dirname(config.log_file)
            if folder:
                os.makedirs(folder, exist_ok=True)
            file_handler = RotatingFileHandler(config.log_file, maxBytes=1024 * 1024, backupCount=5)
            file_handler.setFormatter(json_formatter)
            self._install(root, file_handler)

        if not self._handlers:
            # keeps logging's last-resort handler from printing to stderr
            self._install(root, logging.NullHandler())

        logging.getLogger(__name__).info("Logging configured: level=%s file=%s", config.log_level, config.log_file or "-")

    def _install(self, root: logging.Logger, handler: logging.Handler) -> None:
        root.addHandler(handler)
        self._handlers.append(handler)

    def shutdown(self) -> None:
        """Remove and close the handlers installed by this service."""
        root = logging.getLogger()
        for handler in self._handlers:
            root.removeHandler(handler)
            handler.close()
        self._handlers.clear()

    def get_logger(self, name: str) -> logging.Logger:
        """Get or create logger instance.

        Args:
            name: Logger name.

        Returns:
            logging.Logger: Logger instance.
        """
        if name not in self._loggers:
            self._loggers[name] = logging.getLogger(name)
        return self._loggers[name]
