"""
Logging setup for the pricing service.
"""

import logging
import sys

from ooh_billing.core.config import settings


def setup_logging() -> None:
    """
    Configure root logging to stdout at the level named in settings.
    """
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    # Set log levels for specific libraries
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("openpyxl").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info("Logging configured", extra={"log_level": settings.LOG_LEVEL})
