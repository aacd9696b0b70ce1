# loguru setup
from loguru import logger
import sys

FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | {message}"

def setup_logging(level="INFO", sink=None):
    logger.remove()
    logger.add(sink or sys.stderr, level=str(level).upper(), format=FORMAT,
               backtrace=False, diagnose=False)
    return logger
