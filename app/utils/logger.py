import logging
import sys

from app.core.config import settings

logger = logging.getLogger("reservas_backend")

if not logger.handlers:
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    )
    logger.addHandler(_handler)
    logger.setLevel(settings.log_level.upper())
    logger.propagate = False
