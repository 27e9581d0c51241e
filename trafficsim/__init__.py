"""
trafficsim - Simulación de tráfico vehicular sobre grafos dirigidos.

Vehículos con rutas fijas recorren una red de calles con pesos, frenan
al azar y respetan semáforos de ciclo fijo en las intersecciones.
"""

from .errors import TrafficSimError, UnknownVertex, InvalidWeight, NoSuchEdge, RouteExhausted
from .graph import (
    DirectedGraph,
    AdjacencyListGraph,
    AdjacencyMatrixGraph,
    SparseIndex,
    create_graph
)
from .simulator import (
    RoadAttributes,
    TrafficLight,
    Vehicle,
    TrafficSimulator,
    load_scenario
)

__version__ = "1.0.0"

__all__ = [
    'TrafficSimError',
    'UnknownVertex',
    'InvalidWeight',
    'NoSuchEdge',
    'RouteExhausted',
    'DirectedGraph',
    'AdjacencyListGraph',
    'AdjacencyMatrixGraph',
    'SparseIndex',
    'create_graph',
    'RoadAttributes',
    'TrafficLight',
    'Vehicle',
    'TrafficSimulator',
    'load_scenario'
]
