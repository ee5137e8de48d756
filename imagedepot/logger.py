from loguru import logger
import sys
import logging
from .settings import settings


CONSOLE_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | {message}"
INTERCEPTED_LOGGERS = ("uvicorn.access", "uvicorn.error", "fastapi", "sqlalchemy.engine")


class InterceptHandler(logging.Handler):
    """Forward standard library log records to loguru.

    uvicorn and SQLAlchemy log through the logging module; routing them here
    keeps every line in the same sinks and format as the service's own logs.
    """

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        # depth=6 skips the logging module frames so loguru reports the real caller
        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def configure(level: str = settings.LOG_LEVEL):
    """(Re)install the console and file sinks at the given level."""
    settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
    logger.remove()

    # Console sink: human readable, colorized
    logger.add(sys.stdout, level=level, format=CONSOLE_FORMAT, colorize=True)

    # File sink: daily rotation, JSON serialized, asynchronous (enqueue)
    logger.add(
        str(settings.LOG_DIR / "imagedepot-{time:YYYY-MM-DD}.log"),
        level=level,
        rotation="00:00",
        retention="14 days",
        serialize=True,
        enqueue=True,
        compression="zip",
    )

    logging.root.handlers = [InterceptHandler()]
    for name in INTERCEPTED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        # sqlalchemy.engine echoes every statement at INFO
        std_logger.setLevel("WARNING" if name.startswith("sqlalchemy") else level)


configure()
