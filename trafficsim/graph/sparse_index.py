"""
Índice disperso no acotado.

Asocia claves enteras no negativas a valores opcionales. Escribir en una
posición mayor que la capacidad actual extiende la lista rellenando con
"ausente"; leer una posición fuera de rango o vacía devuelve None.
"""

import operator
from typing import Generic, Iterator, List, Optional, Tuple, TypeVar

V = TypeVar("V")


class _Absent:
    """Centinela de posición vacía, distinto de cualquier valor del dominio."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<absent>"


_ABSENT = _Absent()


def _slot_index(key) -> Optional[int]:
    """Clave como int (acepta enteros de numpy), o None si no es entera."""
    if isinstance(key, bool):
        return None
    try:
        return operator.index(key)
    except TypeError:
        return None


class SparseIndex(Generic[V]):
    """
    Lista indexada que crece bajo demanda.

    Se usa para colgar estado auxiliar (semáforos por intersección,
    listas de adyacencia) de identificadores enteros sin dimensionar
    nada de antemano.
    """

    def __init__(self):
        self._slots: List[object] = []

    def get(self, key: int) -> Optional[V]:
        """
        Retorna el valor guardado en `key`, o None si la posición está vacía.

        Nunca falla, sin importar cuán grande sea la clave.
        """
        key = _slot_index(key)
        if key is None or key < 0 or key >= len(self._slots):
            return None
        value = self._slots[key]
        return None if value is _ABSENT else value

    def set(self, key: int, value: Optional[V]):
        """
        Guarda `value` en `key`, extendiendo la capacidad si hace falta.

        Args:
            key: Posición (entero no negativo)
            value: Valor a guardar. None vacía la posición

        Raises:
            IndexError: Si la clave es negativa
            TypeError: Si la clave no es entera
        """
        key = operator.index(key)
        if key < 0:
            raise IndexError(f"Clave negativa: {key}")

        if key >= len(self._slots):
            self._slots.extend([_ABSENT] * (key + 1 - len(self._slots)))

        self._slots[key] = _ABSENT if value is None else value

    def discard(self, key: int) -> bool:
        """Vacía la posición `key`. Retorna True si había un valor."""
        if key not in self:
            return False
        self._slots[_slot_index(key)] = _ABSENT
        return True

    def items(self) -> List[Tuple[int, V]]:
        """Pares (clave, valor) presentes, en orden ascendente de clave."""
        return [(k, v) for k, v in enumerate(self._slots) if v is not _ABSENT]

    def keys(self) -> List[int]:
        return [k for k, _ in self.items()]

    def values(self) -> List[V]:
        return [v for _, v in self.items()]

    def clear(self):
        self._slots.clear()

    def __getitem__(self, key: int) -> Optional[V]:
        return self.get(key)

    def __setitem__(self, key: int, value: Optional[V]):
        self.set(key, value)

    def __contains__(self, key) -> bool:
        key = _slot_index(key)
        return key is not None and 0 <= key < len(self._slots) and self._slots[key] is not _ABSENT

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[Optional[V]]:
        for value in self._slots:
            yield None if value is _ABSENT else value

    def __repr__(self) -> str:
        return f"SparseIndex({dict(self.items())})"
