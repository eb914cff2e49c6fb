# file: OSAKEL/core/logger.py
import sys
import logging

from OSAKEL.core.config import CLOUD_LOGGING, LOG_LEVEL


def setup_logging(level: str = LOG_LEVEL, cloud: bool = CLOUD_LOGGING) -> None:
    """
    Console logging for operator runs; Google Cloud Logging when enabled.
    """
    numeric = getattr(logging, str(level).upper(), logging.INFO)

    if cloud:
        import google.cloud.logging

        client = google.cloud.logging.Client()
        client.setup_logging(log_level=numeric)
        return

    logging.basicConfig(
        level=numeric,
        stream=sys.stdout,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger().setLevel(numeric)


def log_to_cloud(category: str, severity: str, message: str, metadata: dict = None):
    logging.log(
        getattr(logging, severity.upper(), logging.INFO),
        f"[{category}] {message}",
        extra={"metadata": metadata or {}}
    )
