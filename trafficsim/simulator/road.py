"""
Atributos físicos de los tramos de calle.

Cada arista (origen, destino) puede tener un registro con ancho, nombre y
calidad del pavimento. Las aristas sin registro explícito usan los valores
por defecto de `RoadConfig`.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..utils.config import RoadConfig


@dataclass(frozen=True)
class RoadAttributes:
    """
    Metadatos de un tramo de calle.

    Attributes:
        width: Ancho en metros (> 0)
        label: Nombre del tramo (ej: "Av. Brasil")
        quality: Factor de velocidad en (0, 1]. La velocidad máxima efectiva
                 de un vehículo sobre el tramo es max_speed * quality
    """

    width: float = RoadConfig.DEFAULT_WIDTH
    label: str = RoadConfig.DEFAULT_LABEL
    quality: float = RoadConfig.DEFAULT_QUALITY

    def __post_init__(self):
        if self.width <= 0:
            raise ValueError(f"Ancho de calle inválido: {self.width} (debe ser > 0)")
        if not 0 < self.quality <= 1:
            raise ValueError(f"Calidad de calle inválida: {self.quality} (debe estar en (0, 1])")

    def __str__(self) -> str:
        name = f"'{self.label}' " if self.label else ""
        return f"Road({name}width={self.width}m, quality={self.quality})"


DEFAULT_ROAD = RoadAttributes()


class RoadTable:
    """
    Tabla de atributos por arista.

    Se arma durante la configuración y el motor solo la lee.
    """

    def __init__(self, roads: Optional[Dict[Tuple[int, int], RoadAttributes]] = None,
                 default: RoadAttributes = DEFAULT_ROAD):
        """
        Inicializa la tabla.

        Args:
            roads: Diccionario {(origen, destino): RoadAttributes}
            default: Atributos para aristas sin registro explícito
        """
        self.default = default
        self._roads: Dict[Tuple[int, int], RoadAttributes] = dict(roads or {})

    def get(self, from_id: int, to_id: int) -> RoadAttributes:
        """Atributos del tramo, o los de por defecto si no tiene registro."""
        return self._roads.get((from_id, to_id), self.default)

    def set(self, from_id: int, to_id: int, attributes: RoadAttributes):
        self._roads[(from_id, to_id)] = attributes

    def items(self) -> List[Tuple[Tuple[int, int], RoadAttributes]]:
        return sorted(self._roads.items())

    def __contains__(self, key) -> bool:
        return key in self._roads

    def __len__(self) -> int:
        return len(self._roads)

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        return iter(sorted(self._roads))

    def __repr__(self) -> str:
        return f"RoadTable({len(self._roads)} roads, default={self.default})"
