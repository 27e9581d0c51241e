"""
Excepciones del simulador.

Todas son errores locales y sincrónicos de configuración: se lanzan al
construir la red o al cargar la flota, nunca como resultado normal de un
paso de simulación bien configurado.
"""


class TrafficSimError(Exception):
    """Clase base de los errores del simulador."""


class UnknownVertex(TrafficSimError, LookupError):
    """Se referenció un vértice que nunca fue registrado."""

    def __init__(self, vertex):
        self.vertex = vertex
        super().__init__(f"El vértice {vertex} no existe")


class InvalidWeight(TrafficSimError, ValueError):
    """Se intentó agregar una arista con peso no positivo."""

    def __init__(self, from_id: int, to_id: int, weight):
        self.from_id = from_id
        self.to_id = to_id
        self.weight = weight
        super().__init__(f"Peso inválido para la arista {from_id}->{to_id}: {weight} (debe ser > 0)")


class NoSuchEdge(TrafficSimError, LookupError):
    """Consulta sobre una arista inexistente."""

    def __init__(self, from_id: int, to_id: int):
        self.from_id = from_id
        self.to_id = to_id
        super().__init__(f"La arista {from_id}->{to_id} no existe")


class RouteExhausted(TrafficSimError, RuntimeError):
    """Se pidió avanzar un vehículo que ya terminó su ruta."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"El vehículo '{label}' ya completó su ruta")
