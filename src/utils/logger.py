import os
import sys

from loguru import logger


def setup_logger(*, json_logs: bool = False, level: str = "INFO", log_file: bool = True) -> None:
    """Configure loguru for the analysis service.

    Console level comes from LOG_LEVEL env when set. The file sink always
    keeps DEBUG so router fallbacks can be traced after the fact.
    """
    console_level = os.getenv("LOG_LEVEL", level).upper()
    logger.remove()

    if json_logs:
        logger.add(sys.stderr, serialize=True, level=console_level)
    else:
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
                "<level>{message}</level>"
            ),
            level=console_level,
            colorize=True,
        )

    if log_file:
        logger.add(
            "logs/risk_{time:YYYY-MM-DD}.log",
            rotation="20 MB",
            retention="7 days",
            compression="gz",
            level="DEBUG",
            serialize=json_logs,
        )
