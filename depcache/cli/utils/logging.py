import logging
import sys


logger = logging.getLogger("depcache")

_DEBUG_FORMAT = "%(asctime)s %(threadName)s %(name)s: %(message)s"


def configure_logging(debug: bool):
    """
    Configure the depcache logger for command line use.

    Messages go to stdout as-is. In debug mode each line also carries the time,
    thread and logger name, which tells interleaved managers apart.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        logger.addHandler(logging.StreamHandler(sys.stdout))

    fmt = _DEBUG_FORMAT if debug else "%(message)s"
    for handler in logger.handlers:
        handler.setFormatter(logging.Formatter(fmt))
