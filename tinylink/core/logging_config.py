import logging
import sys

from tinylink.core.config import settings

PROJECT_LOGGER = "tinylink"

# Third-party loggers that only matter when something is wrong
QUIET_LOGGERS = ("sqlalchemy.engine", "redis", "httpx")


def configure_logging(level=None, access_log=None):
    """Set up stdout logging and return the ``tinylink`` logger.

    Every module logs under ``tinylink.*`` (collisions from
    ``tinylink.services.shortener``, cache hits from
    ``tinylink.services.cache_store``), so ``level`` applies to all of them.
    """
    level = level or settings.LOG_LEVEL
    access_log = settings.LOG_ACCESS if access_log is None else access_log

    logging.basicConfig(
        level=level,
        format='%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    logging.getLogger("uvicorn.error").propagate = True
    logging.getLogger("uvicorn.access").disabled = not access_log

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    project_logger = logging.getLogger(PROJECT_LOGGER)
    project_logger.setLevel(level)
    return project_logger
