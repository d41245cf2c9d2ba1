import logging
import sys

from tasklist.core.config import get_settings


def setup_logging() -> None:
    """Configure root logging to stdout at the configured LOG_LEVEL."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
