# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging configuration for the terrain awareness pipeline

Every module logs through ``logging.getLogger(__name__)``, so all pipeline
loggers hang below the ``pytaws`` package logger configured here.
"""

import copy
import logging
import sys
from enum import Enum
from typing import Optional

ROOT_LOGGER = "pytaws"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_DATEFMT = '%H:%M:%S'
FILE_DATEFMT = '%Y-%m-%d %H:%M:%S'


class LogLevel(Enum):
    """Log levels for the system"""
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


# Per-sample pipeline internals log at TRACE
logging.addLevelName(LogLevel.TRACE.value, "TRACE")


def _trace(self, message, *args, **kwargs):
    if self.isEnabledFor(LogLevel.TRACE.value):
        self._log(LogLevel.TRACE.value, message, args, **kwargs)


logging.Logger.trace = _trace


def level_value(level) -> int:
    """Numeric value of a level given by name, ``LogLevel`` or int

    Raises
    ------
    ValueError
        If a level name is not one of the ``LogLevel`` members
    """
    if isinstance(level, LogLevel):
        return level.value
    if isinstance(level, int):
        return level
    try:
        return LogLevel[str(level).upper()].value
    except KeyError:
        raise ValueError(f"Unknown log level: {level}") from None


class ColoredFormatter(logging.Formatter):
    """Console formatter that colours the level name with ANSI codes"""

    COLORS = {
        'TRACE': '\033[36m',     # Cyan
        'DEBUG': '\033[34m',     # Blue
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        # other handlers share the record, colour a copy only
        colored = copy.copy(record)
        colored.levelname = f"{self.COLORS.get(record.levelname, self.RESET)}{record.levelname}{self.RESET}"
        return super().format(colored)


def _attach(logger: logging.Logger, handler: logging.Handler, level: int,
            formatter: logging.Formatter):
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def setup_logger(name: str = ROOT_LOGGER,
                 level: str = "INFO",
                 log_file: Optional[str] = None,
                 console: bool = True) -> logging.Logger:
    """Replace the handlers of a logger

    Parameters
    ----------
    name : str
        Logger name, the package logger by default
    level : str
        TRACE, DEBUG, INFO, WARNING, ERROR or CRITICAL
    log_file : str, optional
        Also write plain (uncoloured) records to this file
    console : bool
        Write coloured records to stdout

    Returns
    -------
    logging.Logger
        The configured logger
    """
    value = level_value(level)
    logger = logging.getLogger(name)
    logger.setLevel(value)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console:
        _attach(logger, logging.StreamHandler(sys.stdout), value,
                ColoredFormatter(LOG_FORMAT, datefmt=CONSOLE_DATEFMT))
    if log_file:
        _attach(logger, logging.FileHandler(log_file), value,
                logging.Formatter(LOG_FORMAT, datefmt=FILE_DATEFMT))
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get logger by name"""
    return logging.getLogger(name)


class LogContext:
    """Temporarily change the level of a logger

    Examples
    --------
    >>> with LogContext(logging.getLogger('pytaws.terrain'), 'DEBUG'):
    ...     model.load('alps.mbtiles')
    """

    def __init__(self, logger: logging.Logger, level: str):
        self.logger = logger
        self.level = level_value(level)
        self._saved = None

    def __enter__(self):
        self._saved = self.logger.level
        self.logger.setLevel(self.level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.setLevel(self._saved)


class LoggerConfig:
    """Package-wide logging settings with per-module level overrides"""

    OPTIONS = ('default_level', 'log_file', 'console', 'module_levels')

    def __init__(self):
        self.default_level = "INFO"
        self.log_file = None
        self.console = True
        self.module_levels = {}

    def set_module_level(self, module_name: str, level: str):
        """Override the level of a module logger such as ``pytaws.terrain.model``"""
        value = level_value(level)
        self.module_levels[module_name] = level
        logging.getLogger(module_name).setLevel(value)

    def get_level_for_module(self, module_name: str) -> str:
        """Level of the closest configured ancestor, else the default"""
        parts = module_name.split('.')
        while parts:
            candidate = '.'.join(parts)
            if candidate in self.module_levels:
                return self.module_levels[candidate]
            parts.pop()
        return self.default_level

    def configure_from_dict(self, config: dict):
        """Update the settings from a dictionary (see :func:`setup_logger_from_config`)"""
        unknown = set(config) - set(self.OPTIONS)
        if unknown:
            raise ValueError(f"Unknown logging option(s): {sorted(unknown)}")
        if 'default_level' in config:
            level_value(config['default_level'])
            self.default_level = config['default_level']
        self.log_file = config.get('log_file', self.log_file)
        self.console = bool(config.get('console', self.console))
        for module, level in config.get('module_levels', {}).items():
            self.set_module_level(module, level)

    def setup_all_loggers(self) -> logging.Logger:
        """Attach handlers to the package logger and apply module levels"""
        root = setup_logger(ROOT_LOGGER, self.default_level, self.log_file, self.console)
        if self.module_levels:
            # handlers must pass records from more verbose modules
            lowest = min(level_value(lv) for lv in [self.default_level, *self.module_levels.values()])
            for handler in root.handlers:
                handler.setLevel(lowest)
        for module, level in self.module_levels.items():
            logging.getLogger(module).setLevel(level_value(level))
        return root


# Global logger configuration
logger_config = LoggerConfig()


def setup_logger_from_config(config: dict) -> logging.Logger:
    """Setup loggers from configuration dictionary

    Example config:
    {
        'default_level': 'INFO',
        'log_file': 'taws.log',
        'console': True,
        'module_levels': {
            'pytaws.terrain': 'DEBUG',
            'pytaws.prediction': 'TRACE',
            'pytaws.io': 'WARNING'
        }
    }
    """
    logger_config.configure_from_dict(config)
    return logger_config.setup_all_loggers()
