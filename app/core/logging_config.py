# app/core/logging_config.py

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s :: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """루트 로거를 설정합니다. 이미 핸들러가 있으면 레벨만 맞춥니다."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger().setLevel(level.upper())
