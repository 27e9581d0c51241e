"""
Carga de escenarios de simulación desde archivos JSON.

Un escenario describe la red (vértices y aristas con peso), los semáforos,
los atributos de tramos, los vehículos y los parámetros del motor.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from ..graph import (
    DirectedGraph,
    SparseIndex,
    create_adjacency_list_graph,
    create_adjacency_matrix_graph,
    create_graph
)
from ..utils.config import DEFAULT_SCENARIO_FILE, RoadConfig, TrafficLightConfig
from .road import RoadAttributes, RoadTable
from .traffic_light import TrafficLight
from .traffic_simulator import TrafficSimulator
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

GRAPH_BUILDERS = {
    'auto': create_graph,
    'list': create_adjacency_list_graph,
    'matrix': create_adjacency_matrix_graph
}

ENGINE_OPTIONS = ('horizon', 'time_step', 'max_tps', 'seed', 'stop_when_idle',
                  'auto_traffic_lights', 'record_history')


def read_scenario(filepath: Union[str, Path]) -> Dict:
    """
    Lee el archivo JSON de un escenario.

    Args:
        filepath: Ruta al archivo

    Returns:
        dict: Contenido del escenario

    Raises:
        FileNotFoundError: Si el archivo no existe
        json.JSONDecodeError: Si el archivo no es JSON válido
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"No se encontró el archivo: {filepath}")

    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def build_graph(data: Dict, representation: str = "auto") -> DirectedGraph:
    """
    Construye el grafo de un escenario.

    Args:
        data: Contenido del escenario
        representation: "auto", "list" o "matrix"

    Raises:
        ValueError: Si la representación no existe
    """
    if representation not in GRAPH_BUILDERS:
        raise ValueError(f"Representación desconocida: {representation!r} "
                         f"(opciones: {', '.join(GRAPH_BUILDERS)})")

    edges = [(e['from_id'], e['to_id'], e['weight']) for e in data.get('edges', [])]
    return GRAPH_BUILDERS[representation](data['vertices'], edges)


def build_traffic_lights(data: Dict) -> SparseIndex:
    lights: SparseIndex = SparseIndex()
    for light_data in data.get('traffic_lights', []):
        lights[light_data['vertex']] = TrafficLight(
            duty_cycle=light_data.get('duty_cycle', TrafficLightConfig.DEFAULT_DUTY_CYCLE),
            cycle_length=light_data.get('cycle_length', TrafficLightConfig.DEFAULT_CYCLE_LENGTH),
            controlled_edges=light_data.get('controlled_edges', []),
            offset=light_data.get('offset', 0.0),
            auto_adjust=light_data.get('auto_adjust', False)
        )
    return lights


def build_roads(data: Dict) -> RoadTable:
    roads = RoadTable()
    for road_data in data.get('roads', []):
        roads.set(road_data['from_id'], road_data['to_id'], RoadAttributes(
            width=road_data.get('width', RoadConfig.DEFAULT_WIDTH),
            label=road_data.get('label', RoadConfig.DEFAULT_LABEL),
            quality=road_data.get('quality', RoadConfig.DEFAULT_QUALITY)
        ))
    return roads


def load_coordinates(filepath: Union[str, Path] = DEFAULT_SCENARIO_FILE) -> Dict[int, Tuple[float, float]]:
    """Coordenadas de dibujo de los vértices (vacío si el escenario no las trae)."""
    data = read_scenario(filepath)
    return {int(vertex): (float(x), float(y))
            for vertex, (x, y) in data.get('coordinates', {}).items()}


def load_scenario(filepath: Union[str, Path] = DEFAULT_SCENARIO_FILE,
                  representation: str = "auto",
                  engine_overrides: Optional[Dict] = None) -> TrafficSimulator:
    """
    Carga un escenario y retorna el simulador listo para correr.

    Args:
        filepath: Ruta al archivo JSON del escenario
        representation: Representación del grafo ("auto", "list" o "matrix")
        engine_overrides: Parámetros del motor que reemplazan a los del archivo

    Returns:
        TrafficSimulator: Simulador configurado con los vehículos del escenario

    Raises:
        FileNotFoundError: Si el archivo no existe
        json.JSONDecodeError: Si el archivo no es JSON válido
        KeyError: Si falta un campo obligatorio
    """
    data = read_scenario(filepath)

    graph = build_graph(data, representation)
    engine_options = {k: v for k, v in data.get('engine', {}).items() if k in ENGINE_OPTIONS}
    engine_options.update(engine_overrides or {})

    simulator = TrafficSimulator(graph, build_traffic_lights(data), build_roads(data),
                                 **engine_options)

    for vehicle_data in data.get('vehicles', []):
        simulator.add_car(Vehicle(
            max_speed=vehicle_data['max_speed'],
            misbehavior_probability=vehicle_data.get('misbehavior_probability', 0.0),
            route=vehicle_data['route'],
            label=vehicle_data.get('label', ''),
            acceleration=vehicle_data.get('acceleration')
        ))

    logger.info("Escenario cargado: %s (%d vértices, %d aristas, %d vehículos)",
                data.get('network_name', Path(filepath).name),
                len(graph.vertices()), len(graph.edges()), len(simulator.cars))
    return simulator
