"""
Red vial como grafo dirigido y ponderado.

Este módulo define el contrato de consulta del grafo (vértices enteros no
negativos, aristas dirigidas con peso positivo) y dos representaciones
intercambiables detrás de ese contrato:

- AdjacencyMatrixGraph: matriz densa (numpy) indexada por ID de vértice.
- AdjacencyListGraph: lista de adyacencia dispersa.

También incluye utilidades de construcción y de análisis (ruta más corta,
estadísticas) apoyadas en networkx.
"""

import math
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import networkx as nx
import numpy as np

from ..errors import InvalidWeight, NoSuchEdge, UnknownVertex
from ..utils.config import GraphConfig
from .sparse_index import SparseIndex

Edge = Tuple[int, int, float]


class DirectedGraph(ABC):
    """
    Contrato común de las representaciones del grafo.

    Los llamadores solo deben depender de estas operaciones; en particular
    el orden en que `neighbors` enumera los vecinos depende de la
    representación y no debe asumirse.
    """

    @abstractmethod
    def has_vertex(self, vertex: int) -> bool:
        """Indica si el vértice fue registrado."""

    @abstractmethod
    def vertices(self) -> List[int]:
        """Lista de vértices registrados, en orden ascendente."""

    @abstractmethod
    def neighbors(self, vertex: int) -> List[int]:
        """
        Vértices alcanzables por una arista saliente de `vertex`.

        Raises:
            UnknownVertex: Si el vértice no fue registrado
        """

    @abstractmethod
    def add_vertex(self, vertex: int):
        """Registra un vértice. Registrar dos veces el mismo ID no tiene efecto."""

    @abstractmethod
    def remove_vertex(self, vertex: int) -> bool:
        """Elimina el vértice y todas sus aristas. Retorna False si no existía."""

    @abstractmethod
    def _get_weight(self, from_id: int, to_id: int) -> Optional[float]:
        """Peso guardado o None. Ambos extremos ya fueron validados."""

    @abstractmethod
    def _store_edge(self, from_id: int, to_id: int, weight: float):
        """Guarda (o sobrescribe) la arista. Ambos extremos ya fueron validados."""

    @abstractmethod
    def _delete_edge(self, from_id: int, to_id: int) -> bool:
        """Borra la arista si existe. Ambos extremos ya fueron validados."""

    @abstractmethod
    def clear(self):
        """Elimina todos los vértices y aristas."""

    def add_edge(self, from_id: int, to_id: int, weight: float):
        """
        Agrega una arista dirigida `from_id -> to_id`.

        Si la arista ya existía, su peso se sobrescribe.

        Args:
            from_id: Vértice de origen (debe estar registrado)
            to_id: Vértice de destino (debe estar registrado)
            weight: Longitud o costo del tramo, estrictamente positivo

        Raises:
            UnknownVertex: Si alguno de los extremos no fue registrado
            InvalidWeight: Si el peso no es un real finito > 0
        """
        self._check_has_vertex(from_id)
        self._check_has_vertex(to_id)
        self._store_edge(from_id, to_id, self._validate_weight(from_id, to_id, weight))

    def weight(self, from_id: int, to_id: int) -> float:
        """
        Retorna el peso de la arista `from_id -> to_id`.

        Raises:
            NoSuchEdge: Si la arista no existe
        """
        if not self.has_vertex(from_id) or not self.has_vertex(to_id):
            raise NoSuchEdge(from_id, to_id)
        value = self._get_weight(from_id, to_id)
        if value is None:
            raise NoSuchEdge(from_id, to_id)
        return value

    def has_edge(self, from_id: int, to_id: int) -> bool:
        if not self.has_vertex(from_id) or not self.has_vertex(to_id):
            return False
        return self._get_weight(from_id, to_id) is not None

    def remove_edge(self, from_id: int, to_id: int) -> bool:
        """Elimina la arista. Retorna False si no existía."""
        self._check_has_vertex(from_id)
        self._check_has_vertex(to_id)
        return self._delete_edge(from_id, to_id)

    def edges(self) -> List[Edge]:
        """Lista de aristas como tripletas (origen, destino, peso)."""
        return [(u, v, self._get_weight(u, v))
                for u in self.vertices()
                for v in sorted(self.neighbors(u))]

    def _check_has_vertex(self, vertex: int):
        if not self.has_vertex(vertex):
            raise UnknownVertex(vertex)

    @staticmethod
    def _check_vertex_id(vertex) -> int:
        if isinstance(vertex, bool) or not isinstance(vertex, (int, np.integer)) or vertex < 0:
            raise UnknownVertex(vertex)
        return int(vertex)

    @staticmethod
    def _validate_weight(from_id: int, to_id: int, weight) -> float:
        try:
            value = float(weight)
        except (TypeError, ValueError):
            raise InvalidWeight(from_id, to_id, weight) from None
        if not math.isfinite(value) or value <= 0:
            raise InvalidWeight(from_id, to_id, weight)
        return value

    def __contains__(self, vertex) -> bool:
        return self.has_vertex(vertex)

    def __len__(self) -> int:
        return len(self.vertices())

    def __str__(self) -> str:
        lines = []
        for vertex in self.vertices():
            lines.append(f"{vertex}")
            for neighbor in sorted(self.neighbors(vertex)):
                lines.append(f" ---{self._get_weight(vertex, neighbor)}--->{neighbor}")
        return "\n".join(lines)


class AdjacencyListGraph(DirectedGraph):
    """
    Grafo sobre lista de adyacencia.

    Memoria O(V + E). Consultar peso o buscar una arista cuesta O(grado).
    Conviene para espacios de IDs grandes y redes poco conectadas.
    """

    def __init__(self):
        self._adjacency: SparseIndex[List[List]] = SparseIndex()

    def has_vertex(self, vertex) -> bool:
        if isinstance(vertex, bool) or not isinstance(vertex, (int, np.integer)):
            return False
        return int(vertex) in self._adjacency

    def vertices(self) -> List[int]:
        return self._adjacency.keys()

    def neighbors(self, vertex: int) -> List[int]:
        self._check_has_vertex(vertex)
        return [neighbor for neighbor, _ in self._adjacency[vertex]]

    def add_vertex(self, vertex: int):
        vertex = self._check_vertex_id(vertex)
        if vertex not in self._adjacency:
            self._adjacency[vertex] = []

    def remove_vertex(self, vertex: int) -> bool:
        if not self.has_vertex(vertex):
            return False
        for _, pairs in self._adjacency.items():
            pairs[:] = [pair for pair in pairs if pair[0] != vertex]
        self._adjacency.discard(vertex)
        return True

    def _find(self, from_id: int, to_id: int) -> Optional[List]:
        for pair in self._adjacency[from_id]:
            if pair[0] == to_id:
                return pair
        return None

    def _get_weight(self, from_id: int, to_id: int) -> Optional[float]:
        pair = self._find(from_id, to_id)
        return None if pair is None else pair[1]

    def _store_edge(self, from_id: int, to_id: int, weight: float):
        pair = self._find(from_id, to_id)
        if pair is None:
            self._adjacency[from_id].append([int(to_id), weight])
        else:
            pair[1] = weight

    def _delete_edge(self, from_id: int, to_id: int) -> bool:
        pair = self._find(from_id, to_id)
        if pair is None:
            return False
        self._adjacency[from_id].remove(pair)
        return True

    def clear(self):
        self._adjacency.clear()

    def __repr__(self) -> str:
        return f"AdjacencyListGraph(vertices={len(self.vertices())}, edges={len(self.edges())})"


class AdjacencyMatrixGraph(DirectedGraph):
    """
    Grafo sobre matriz de adyacencia (numpy).

    La celda [u, v] guarda el peso de la arista u -> v, o NaN si no existe.
    Memoria O(V²) sobre el mayor ID registrado; consulta e inserción O(1).
    Conviene cuando los IDs son pocos y casi contiguos.
    """

    def __init__(self, capacity: int = GraphConfig.INITIAL_MATRIX_CAPACITY):
        capacity = max(1, capacity)
        self._weights = np.full((capacity, capacity), np.nan)
        self._registered = np.zeros(capacity, dtype=bool)

    @property
    def capacity(self) -> int:
        return self._registered.shape[0]

    def _ensure_capacity(self, vertex: int):
        size = self.capacity
        if vertex < size:
            return

        # Crecimiento geométrico para amortizar las copias
        new_size = max(vertex + 1, size * 2)
        weights = np.full((new_size, new_size), np.nan)
        weights[:size, :size] = self._weights
        registered = np.zeros(new_size, dtype=bool)
        registered[:size] = self._registered

        self._weights = weights
        self._registered = registered

    def has_vertex(self, vertex) -> bool:
        if isinstance(vertex, bool) or not isinstance(vertex, (int, np.integer)):
            return False
        return 0 <= vertex < self.capacity and bool(self._registered[vertex])

    def vertices(self) -> List[int]:
        return [int(v) for v in np.flatnonzero(self._registered)]

    def neighbors(self, vertex: int) -> List[int]:
        self._check_has_vertex(vertex)
        return [int(v) for v in np.flatnonzero(~np.isnan(self._weights[vertex]))]

    def add_vertex(self, vertex: int):
        vertex = self._check_vertex_id(vertex)
        self._ensure_capacity(vertex)
        self._registered[vertex] = True

    def remove_vertex(self, vertex: int) -> bool:
        if not self.has_vertex(vertex):
            return False
        self._weights[vertex, :] = np.nan
        self._weights[:, vertex] = np.nan
        self._registered[vertex] = False
        return True

    def _get_weight(self, from_id: int, to_id: int) -> Optional[float]:
        value = self._weights[from_id, to_id]
        return None if np.isnan(value) else float(value)

    def _store_edge(self, from_id: int, to_id: int, weight: float):
        self._weights[from_id, to_id] = weight

    def _delete_edge(self, from_id: int, to_id: int) -> bool:
        if np.isnan(self._weights[from_id, to_id]):
            return False
        self._weights[from_id, to_id] = np.nan
        return True

    def clear(self):
        self._weights[:, :] = np.nan
        self._registered[:] = False

    def __repr__(self) -> str:
        return (f"AdjacencyMatrixGraph(vertices={len(self.vertices())}, "
                f"edges={len(self.edges())}, capacity={self.capacity})")


VertexIds = Union[int, Iterable[int]]


def _init_graph(graph: DirectedGraph, vertices: VertexIds,
                edges: Sequence[Edge]) -> DirectedGraph:
    # Un entero significa "vértices 0..n-1"
    vertex_ids = range(vertices) if isinstance(vertices, int) else vertices
    for vertex in vertex_ids:
        graph.add_vertex(vertex)
    for from_id, to_id, weight in edges:
        graph.add_edge(from_id, to_id, weight)
    return graph


def create_adjacency_list_graph(vertices: VertexIds,
                                edges: Sequence[Edge] = ()) -> AdjacencyListGraph:
    """Crea un grafo disperso con los vértices y aristas dados."""
    return _init_graph(AdjacencyListGraph(), vertices, edges)


def create_adjacency_matrix_graph(vertices: VertexIds,
                                  edges: Sequence[Edge] = ()) -> AdjacencyMatrixGraph:
    """Crea un grafo denso con los vértices y aristas dados."""
    vertex_ids = list(range(vertices)) if isinstance(vertices, int) else list(vertices)
    capacity = max(vertex_ids) + 1 if vertex_ids else GraphConfig.INITIAL_MATRIX_CAPACITY
    return _init_graph(AdjacencyMatrixGraph(capacity), vertex_ids, edges)


def create_graph(vertices: VertexIds, edges: Sequence[Edge] = ()) -> DirectedGraph:
    """
    Crea el grafo con la representación más conveniente.

    La desventaja de la matriz es su memoria O(V²), que no importa si
    el espacio de IDs es chico o si el grafo es casi completo. En esos
    casos se usa la matriz; en cualquier otro, la lista de adyacencia.

    Args:
        vertices: Cantidad de vértices (IDs 0..n-1) o iterable de IDs
        edges: Tripletas (origen, destino, peso)

    Returns:
        DirectedGraph: Grafo construido
    """
    vertex_ids = list(range(vertices)) if isinstance(vertices, int) else list(vertices)
    id_space = max(vertex_ids) + 1 if vertex_ids else 0

    near_complete = len(edges) >= id_space * (id_space - GraphConfig.DENSE_EDGE_MARGIN)
    if id_space < GraphConfig.DENSE_VERTEX_LIMIT or near_complete:
        return create_adjacency_matrix_graph(vertex_ids, edges)
    return create_adjacency_list_graph(vertex_ids, edges)


def to_networkx(graph: DirectedGraph) -> nx.DiGraph:
    """Convierte el grafo a un nx.DiGraph con el peso en el atributo 'weight'."""
    digraph = nx.DiGraph()
    digraph.add_nodes_from(graph.vertices())
    digraph.add_weighted_edges_from(graph.edges())
    return digraph


def shortest_path(graph: DirectedGraph, origin: int,
                  destination: int) -> Optional[Tuple[float, List[int]]]:
    """
    Calcula la ruta más corta entre dos vértices.

    Usa el algoritmo de Dijkstra sobre los pesos de las aristas.

    Args:
        graph: Grafo de la red
        origin: Vértice de origen
        destination: Vértice de destino

    Returns:
        (longitud, ruta) con la ruta incluyendo ambos extremos, o None si no hay ruta

    Raises:
        UnknownVertex: Si alguno de los extremos no fue registrado
    """
    if not graph.has_vertex(origin):
        raise UnknownVertex(origin)
    if not graph.has_vertex(destination):
        raise UnknownVertex(destination)
    if origin == destination:
        return 0.0, [origin]

    try:
        length, path = nx.single_source_dijkstra(
            to_networkx(graph), origin, destination, weight='weight'
        )
    except nx.NetworkXNoPath:
        return None
    return float(length), [int(v) for v in path]


def network_stats(graph: DirectedGraph) -> dict:
    """
    Calcula estadísticas de la red.

    Returns:
        dict: Diccionario con estadísticas de la red
    """
    weights = [w for _, _, w in graph.edges()]
    digraph = to_networkx(graph)

    return {
        'num_vertices': digraph.number_of_nodes(),
        'num_edges': digraph.number_of_edges(),
        'total_weight': float(np.sum(weights)) if weights else 0.0,
        'avg_edge_weight': float(np.mean(weights)) if weights else 0.0,
        'is_connected': nx.is_weakly_connected(digraph) if digraph.number_of_nodes() else False,
        'representation': type(graph).__name__
    }
