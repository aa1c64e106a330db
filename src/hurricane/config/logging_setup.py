import logging

from hurricane.config.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    # No-op when the root logger already has handlers.
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)
