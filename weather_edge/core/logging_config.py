# =============================================================================
# WEATHER EDGE - LOGGING CONFIGURATION
# =============================================================================
#
# Все модули пишут в логгеры иерархии "weather_edge.*"
# (logging.getLogger(__name__)). Компоненты с состоянием (SignalGenerator,
# RiskManager) принимают логгер в конструкторе; setup_logging лишь
# настраивает обработчики корневого логгера пакета.
#
# =============================================================================

import logging
from pathlib import Path
from typing import Final, Optional


ROOT_LOGGER_NAME: Final[str] = "weather_edge"

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: int = logging.INFO,
    console_output: bool = True,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Настройка логгера пакета.

    Args:
        level: Уровень логирования
        console_output: Писать ли в stderr
        log_file: Путь к файлу лога (None — без файла)

    Returns:
        Настроенный логгер "weather_edge"
    """
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Удаляем существующие обработчики, чтобы избежать дублей
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized for %s", ROOT_LOGGER_NAME)
    return logger

