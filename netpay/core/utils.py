import logging
import os
from decimal import Decimal, ROUND_HALF_UP
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Union

from netpay.core.config import settings

CENT = Decimal("0.01")

def mkdir_safe(path: Union[str, Path]):
    Path(path).mkdir(parents=True, exist_ok=True)

def to_decimal(value: Any) -> Decimal:
    """Coerce int/float/str/Decimal to Decimal; floats go through str() to avoid binary noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)

def round2(value: Any) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)

def setup_logging(name: str = "engine", *, log_level: str = None):
    logger_name = f"{settings.APP_NAME}.{name}"
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        return logger
    level = log_level or getattr(settings, "LOG_LEVEL", "INFO")
    logger.setLevel(getattr(logging, level.upper()))
    log_dir = getattr(settings, "LOG_PATH", "./data/logs")
    mkdir_safe(log_dir)
    logfile = Path(log_dir) / f"{name}.log"
    handler = RotatingFileHandler(str(logfile), maxBytes=10_000_000, backupCount=5)
    formatter = logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    if os.getenv("DEV", "").lower() in ("1","true","yes"):
        ch = logging.StreamHandler()
        ch.setFormatter(formatter)
        logger.addHandler(ch)
    logger.propagate = False
    return logger
