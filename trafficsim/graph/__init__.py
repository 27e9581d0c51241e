"""
Estructuras de la red vial.

Este módulo contiene:
- Contrato del grafo dirigido y sus dos representaciones (matriz y lista)
- Índice disperso no acotado para estado auxiliar por ID
- Utilidades de construcción, ruta más corta y estadísticas
"""

from .sparse_index import SparseIndex
from .directed_graph import (
    DirectedGraph,
    AdjacencyListGraph,
    AdjacencyMatrixGraph,
    create_graph,
    create_adjacency_list_graph,
    create_adjacency_matrix_graph,
    to_networkx,
    shortest_path,
    network_stats
)

__all__ = [
    'SparseIndex',
    'DirectedGraph',
    'AdjacencyListGraph',
    'AdjacencyMatrixGraph',
    'create_graph',
    'create_adjacency_list_graph',
    'create_adjacency_matrix_graph',
    'to_networkx',
    'shortest_path',
    'network_stats'
]
