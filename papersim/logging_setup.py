"""Настройка loguru для хост-приложения."""

import sys
from typing import Optional

from loguru import logger

from papersim.config import LogConfig

_CONFIGURED = False


def configure_logging(config: Optional[LogConfig] = None, force: bool = False) -> None:
    """
    Настройка sink'ов loguru (выполняется один раз на процесс).

    Args:
        config: Параметры логирования (default: LogConfig())
        force: Переконфигурировать даже если уже настроено
    """
    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    config = config or LogConfig()
    logger.remove()
    logger.add(
        sys.stderr,
        level=config.level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message}",
    )
    if config.file_path:
        logger.add(
            config.file_path,
            level=config.level,
            rotation=config.rotation,
            retention=config.retention,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message}",
            enqueue=True,
        )

    _CONFIGURED = True
    logger.info("papersim logging configured (level={})", config.level)
