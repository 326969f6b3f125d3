import os
import logging
from logging.handlers import RotatingFileHandler

LOG_FILE = "log.txt"
FORMAT = "[%(asctime)s] %(name)s %(levelname)s: %(message)s"


def enable_debug_logging(path: str = LOG_FILE):
    """
    path - file debug output is appended to

    Prints debug information of the pyigd loggers to console and writes it to file
    Calling it again with the same path does not add handlers twice
    """

    logger = logging.getLogger("pyigd")
    logger.setLevel(logging.DEBUG)

    filename = os.path.abspath(path)
    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler) and handler.baseFilename == filename:
            return logger

    formatter = logging.Formatter(FORMAT)

    file_handler = RotatingFileHandler(filename, maxBytes=5 * 1024 * 1024, backupCount=5)
    console_handler = logging.StreamHandler()
    for handler in (file_handler, console_handler):
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Debug logging enabled")
    return logger
