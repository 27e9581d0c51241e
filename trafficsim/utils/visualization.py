"""
Visualización de la red vial y del estado de la simulación.
"""

from typing import Dict, Optional, Tuple

import matplotlib.pyplot as plt
import networkx as nx

from ..graph import DirectedGraph, to_networkx
from .config import VisualizationConfig


def vehicle_positions(simulator, coordinates: Dict[int, Tuple[float, float]]) -> Dict[str, Tuple[float, float]]:
    """
    Interpola la posición en el plano de cada vehículo activo.

    Args:
        simulator: TrafficSimulator
        coordinates: Coordenadas {vértice: (x, y)}

    Returns:
        dict: {nombre del vehículo: (x, y)}
    """
    positions = {}
    for car in simulator.cars:
        from_id, to_id = car.current_edge()
        fraction = car.edge_progress / simulator.graph.weight(from_id, to_id)
        (x0, y0), (x1, y1) = coordinates[from_id], coordinates[to_id]
        positions[simulator.car_name(car)] = (x0 + (x1 - x0) * fraction, y0 + (y1 - y0) * fraction)
    return positions


def plot_network(graph: DirectedGraph, coordinates: Dict[int, Tuple[float, float]],
                 simulator=None, show_labels: bool = True,
                 figsize: Optional[Tuple[int, int]] = None):
    """
    Dibuja la red vial y, si se pasa un simulador, semáforos y vehículos.

    Args:
        graph: Red vial
        coordinates: Coordenadas {vértice: (x, y)} de cada vértice
        simulator: TrafficSimulator opcional para dibujar su estado actual
        show_labels: Si True, muestra los IDs de los vértices y los pesos
        figsize: Tamaño de la figura

    Returns:
        matplotlib.figure.Figure: Figura generada
    """
    fig, ax = plt.subplots(figsize=figsize or VisualizationConfig.FIGURE_SIZE,
                           dpi=VisualizationConfig.DPI)

    nx_graph = to_networkx(graph)
    pos = {vertex: coordinates[vertex] for vertex in nx_graph.nodes()}

    # Intersecciones con semáforo en otro color
    node_colors = []
    for vertex in nx_graph.nodes():
        if simulator is not None and simulator.traffic_lights.get(vertex) is not None:
            node_colors.append(VisualizationConfig.SIGNAL_NODE_COLOR)
        else:
            node_colors.append(VisualizationConfig.NODE_COLOR)

    nx.draw_networkx_nodes(nx_graph, pos, node_color=node_colors,
                           node_size=500, alpha=0.9, ax=ax)
    nx.draw_networkx_edges(nx_graph, pos, edge_color=VisualizationConfig.EDGE_COLOR,
                           width=2, alpha=0.6, arrows=True,
                           arrowsize=20, arrowstyle='->', ax=ax)

    if show_labels:
        nx.draw_networkx_labels(nx_graph, pos, font_size=10, ax=ax)
        edge_labels = {(u, v): f"{w:g}" for u, v, w in nx_graph.edges(data='weight')}
        nx.draw_networkx_edge_labels(nx_graph, pos, edge_labels=edge_labels,
                                     font_size=8, ax=ax)

    title = "Red vial"
    if simulator is not None:
        positions = vehicle_positions(simulator, coordinates)
        if positions:
            xs, ys = zip(*positions.values())
            ax.scatter(xs, ys, c=VisualizationConfig.VEHICLE_COLOR, s=80,
                       zorder=3, label="Vehículos")
            for name, (x, y) in positions.items():
                ax.annotate(name, (x, y), textcoords="offset points",
                            xytext=(5, 5), fontsize=8)
            ax.legend(loc="upper right")
        title = f"Red vial - t = {simulator.current_time:.1f}s"

    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3)
    fig.tight_layout()

    return fig
