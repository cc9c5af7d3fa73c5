import logging
import sys

from tasky.core.config import settings


def setup_logging(level: int | str | None = None) -> None:
    logger = logging.getLogger()
    if logger.handlers:
        return  # 중복 설정 방지
    logger.setLevel(level or settings.log_level.upper())
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s - %(message)s"
    ))
    logger.addHandler(h)
