"""
Utilidades: configuración, logging, métricas y visualización.
"""

from .logging_setup import setup_logging
from .metrics import MetricsCalculator

__all__ = [
    'setup_logging',
    'MetricsCalculator'
]
