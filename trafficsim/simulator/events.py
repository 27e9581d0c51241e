"""
Canal de eventos del simulador.

Observadores registrados por nombre de evento, invocados de forma
sincrónica en orden de registro.
"""

import logging
from typing import Callable, Dict, Generic, List, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

UPDATE_EVENT = "update"


class EventEmitter(Generic[T]):
    """
    Tabla de callbacks por nombre de evento.

    Registrar un nombre que nunca se emite es válido: el callback
    simplemente no se invoca.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Callable[[T], None]]] = {}

    def on(self, event_type: str, handler: Callable[[T], None]):
        """
        Registra un observador.

        Args:
            event_type: Nombre del evento (ej: "update")
            handler: Función que recibe el dato del evento
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug("Observador registrado para '%s'", event_type)

    def handler_count(self, event_type: str) -> int:
        return len(self._handlers.get(event_type, []))

    def emit(self, event_type: str, event: T):
        """Invoca los observadores de `event_type` en orden de registro."""
        # Copia: un observador puede registrar otros durante la emisión
        for handler in list(self._handlers.get(event_type, [])):
            handler(event)
