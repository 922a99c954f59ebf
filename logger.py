import logging
import sys
import os
from datetime import datetime
from colorama import init, Fore, Style

# Initialize colorama for cross-platform colored output
init()

SUCCESS = 25
logging.addLevelName(SUCCESS, 'SUCCESS')

LOGS_DIR = "logs"


class ColoredFormatter(logging.Formatter):
    """Custom formatter to add colors to log levels"""

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.BLUE,
        'SUCCESS': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.MAGENTA
    }

    def format(self, record):
        # Color a copy so the file handler keeps the plain level name
        record = logging.makeLogRecord(record.__dict__)
        if record.levelname in self.COLORS:
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{Style.RESET_ALL}"

        return super().format(record)


class DelayedFileHandler(logging.FileHandler):
    """File handler that only creates the file when the first record is written"""

    def __init__(self, filename, mode='a', encoding='utf-8'):
        super().__init__(filename, mode, encoding, delay=True)

    def emit(self, record):
        if self.stream is None:
            try:
                os.makedirs(os.path.dirname(self.baseFilename), exist_ok=True)
                self.stream = self._open()
            except OSError:
                self.handleError(record)
                return
        super().emit(record)


_log_file = None


def get_log_file():
    """Return the log file shared by every logger of this run"""
    global _log_file
    if _log_file is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        _log_file = os.path.join(LOGS_DIR, f"migration_{timestamp}.log")
    return _log_file


def setup_logger(name="migration", level="INFO"):
    """Set up logger with both file and console output"""

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Clear any existing handlers
    logger.handlers = []

    file_handler = DelayedFileHandler(get_log_file(), encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))

    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    console_formatter = ColoredFormatter('[%(levelname)s] %(message)s')

    file_handler.setFormatter(file_formatter)
    console_handler.setFormatter(console_formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def set_console_level(level):
    """Apply a console log level to every logger created by setup_logger"""
    numeric = getattr(logging, level.upper(), logging.INFO)
    for logger in logging.Logger.manager.loggerDict.values():
        if not isinstance(logger, logging.Logger):
            continue
        for handler in logger.handlers:
            if type(handler) is logging.StreamHandler:
                handler.setLevel(numeric)
