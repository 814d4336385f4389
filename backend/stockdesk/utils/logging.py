import logging
import sys

from stockdesk.config import settings


def get_logger(name: str) -> logging.Logger:
    """
    Return a module logger writing to stdout as "[NAME] message".
    The handler is attached once, so repeated imports don't duplicate output.
    """
    log = logging.getLogger(f"stockdesk.{name}")
    log.setLevel(settings.LOG_LEVEL.upper())
    if not log.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter(f"[{name.upper()}] %(levelname)s %(message)s"))
        log.addHandler(h)
        log.propagate = False
    return log
