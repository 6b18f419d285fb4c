import logging
import os

logger = logging.getLogger("pacdb")

_handler = logging.StreamHandler()
_handler.setFormatter(logging.Formatter("%(message)s"))
logger.addHandler(_handler)


def _debug_requested() -> bool:
    return os.environ.get("PACDB_DEBUG", "") != ""


def enable_debug():
    """
    Log cache hits, directory scans and skipped entries.
    """
    logger.setLevel(logging.DEBUG)


logger.setLevel(logging.DEBUG if _debug_requested() else logging.INFO)


def debug(msg: str, *args: object):
    logger.debug(msg, *args)


def info(msg: str, *args: object):
    logger.info(msg, *args)


def warning(msg: str, *args: object):
    logger.warning(msg, *args)


def error(msg: str, *args: object):
    logger.error(msg, *args)
