"""
Configuración de logging del proyecto.

Aplica el formato de `LoggingConfig` a un handler de consola y,
opcionalmente, a un archivo rotativo. Los módulos de la librería solo
obtienen su logger con `logging.getLogger(__name__)`; la configuración
la hace el programa anfitrión llamando a `setup_logging` una vez.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from .config import LoggingConfig


def setup_logging(level: Optional[Union[int, str]] = None,
                  log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Configura el logger raíz del paquete.

    Args:
        level: Nivel mínimo (ej: logging.DEBUG o "INFO"). Por defecto LoggingConfig.LOG_LEVEL
        log_file: Archivo de log rotativo. Si es None, solo se loguea a consola

    Returns:
        logging.Logger: Logger del paquete `trafficsim`
    """
    logger = logging.getLogger("trafficsim")
    logger.setLevel(level if level is not None else LoggingConfig.LOG_LEVEL)

    fmt = logging.Formatter(LoggingConfig.LOG_FORMAT)

    logger.handlers.clear()

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file is not None:
        fh = RotatingFileHandler(
            str(log_file),
            maxBytes=LoggingConfig.LOG_FILE_MAX_BYTES,
            backupCount=LoggingConfig.LOG_FILE_BACKUPS,
        )
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger
