"""
Motor principal de simulación de tráfico vehicular.

Este módulo implementa el simulador que coordina todos los componentes:
red vial, semáforos, atributos de tramos y vehículos. Cada paso avanza
los semáforos, luego los vehículos en orden de inserción, retira los que
terminaron su ruta y notifica a los observadores del evento "update".
"""

import logging
import math
import sys
import time as timer
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, TextIO, Tuple, Union

import numpy as np
import pandas as pd

from ..errors import NoSuchEdge, UnknownVertex
from ..graph import DirectedGraph, SparseIndex
from ..utils.config import SimulatorConfig, TrafficLightConfig
from ..utils.metrics import MetricsCalculator
from .events import UPDATE_EVENT, EventEmitter
from .road import RoadAttributes, RoadTable
from .traffic_light import TrafficLight
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

HISTORY_COLUMNS = ['tick', 'time', 'vehicle', 'from_id', 'to_id',
                   'edge_progress', 'speed', 'state']

RoadsInput = Union[RoadTable, Mapping[Tuple[int, int], RoadAttributes],
                  Iterable[Tuple[int, int, RoadAttributes]], None]


class EngineState(Enum):
    """Ciclo de vida del simulador."""
    CONFIGURED = "configured"
    RUNNING = "running"
    STOPPED = "stopped"


class TrafficSimulator(EventEmitter[float]):
    """
    Motor principal de simulación de tráfico.

    Es dueño del grafo, del índice de semáforos (por ID de intersección),
    de la tabla de tramos y del conjunto ordenado de vehículos activos.
    El orden de inserción de los vehículos es también su orden de
    procesamiento en cada paso, lo que hace la simulación determinista
    para una semilla y una secuencia de pasos dadas.

    `add_car` y `on` pueden llamarse en cualquier momento; si se llaman
    durante un paso, tienen efecto a partir del paso siguiente. Los
    observadores no deben llamar a `step` ni a `start`.
    """

    def __init__(self, graph: DirectedGraph,
                 traffic_lights: Union[SparseIndex, Mapping[int, TrafficLight], None] = None,
                 roads: RoadsInput = None,
                 horizon: Optional[float] = None,
                 time_step: Optional[float] = SimulatorConfig.TIME_STEP,
                 max_tps: float = SimulatorConfig.DEFAULT_MAX_TPS,
                 seed: Optional[int] = None,
                 stop_when_idle: bool = True,
                 auto_traffic_lights: bool = False,
                 record_history: bool = False):
        """
        Inicializa el simulador.

        Args:
            graph: Red vial
            traffic_lights: Semáforos indexados por el vértice donde están
            roads: Atributos de tramos (RoadTable, dict {(u, v): attrs} o tripletas)
            horizon: Tiempo simulado total en segundos. None = sin horizonte
            time_step: Paso fijo en segundos. None = medir el tiempo real de cada paso
            max_tps: Máximo de pasos por segundo real (0 = sin límite)
            seed: Semilla del generador aleatorio de frenadas
            stop_when_idle: Si True, `start` termina cuando no quedan vehículos
            auto_traffic_lights: Si True, al iniciar se agregan semáforos por defecto
                                 en intersecciones con muchas salidas
            record_history: Si True, guarda las posiciones de cada paso

        Raises:
            UnknownVertex: Si un semáforo está en un vértice inexistente
            NoSuchEdge: Si un semáforo o un tramo refieren a una arista inexistente
        """
        super().__init__()

        if time_step is not None and time_step <= 0:
            raise ValueError(f"Paso de tiempo inválido: {time_step} (debe ser > 0)")
        if horizon is not None and horizon < 0:
            raise ValueError(f"Horizonte inválido: {horizon} (debe ser >= 0)")

        self.graph = graph
        self.traffic_lights = self._as_sparse_index(traffic_lights)
        self.roads = self._as_road_table(roads)
        self._validate_configuration()

        self.horizon = horizon
        self.time_step = time_step
        self.max_tps = max_tps
        self.stop_when_idle = stop_when_idle
        self.auto_traffic_lights = auto_traffic_lights
        self.record_history = record_history

        self.seed = seed
        self.rng = np.random.default_rng(seed)

        # Vehículos
        self.cars: List[Vehicle] = []
        self.completed_vehicles: List[Vehicle] = []
        self._pending_cars: List[Vehicle] = []
        # Nombres estables dentro de esta instancia (etiqueta o "#orden de alta")
        self._car_names: Dict[int, str] = {}

        # Estado de simulación
        self.state = EngineState.CONFIGURED
        self.current_time = 0.0
        self.tick_count = 0
        self.history: List[Dict] = []

        # Control de simulación
        self._in_tick = False
        self._looping = False
        self._stop_requested = False
        self._last_tick_duration = 0.0
        self.real_time_start: Optional[float] = None

        logger.info("Simulador inicializado: %d vértices, %d semáforos, %d tramos con atributos",
                    len(graph.vertices()), len(self.traffic_lights.keys()), len(self.roads))

    @staticmethod
    def _as_sparse_index(traffic_lights) -> SparseIndex:
        if isinstance(traffic_lights, SparseIndex):
            return traffic_lights
        index: SparseIndex = SparseIndex()
        for vertex, light in dict(traffic_lights or {}).items():
            index[vertex] = light
        return index

    @staticmethod
    def _as_road_table(roads: RoadsInput) -> RoadTable:
        if isinstance(roads, RoadTable):
            return roads
        if roads is None:
            return RoadTable()
        if isinstance(roads, Mapping):
            return RoadTable(dict(roads))
        return RoadTable({(from_id, to_id): road for from_id, to_id, road in roads})

    def _validate_configuration(self):
        """Verifica que semáforos y tramos refieran a topología existente."""
        for vertex, light in self.traffic_lights.items():
            if not self.graph.has_vertex(vertex):
                raise UnknownVertex(vertex)
            for approach in light.controlled_edges:
                if not self.graph.has_edge(approach, vertex):
                    raise NoSuchEdge(approach, vertex)

        for from_id, to_id in self.roads:
            if not self.graph.has_edge(from_id, to_id):
                raise NoSuchEdge(from_id, to_id)

    def _validate_route(self, route: List[int]):
        for from_id, to_id in zip(route, route[1:]):
            if not self.graph.has_vertex(from_id):
                raise UnknownVertex(from_id)
            if not self.graph.has_vertex(to_id):
                raise UnknownVertex(to_id)
            self.graph.weight(from_id, to_id)

    def add_car(self, vehicle: Vehicle) -> Vehicle:
        """
        Agrega un vehículo a la simulación.

        Si se llama durante un paso (por ejemplo desde un observador),
        el vehículo empieza a moverse en el paso siguiente.

        Args:
            vehicle: Vehículo con ruta sobre la red

        Returns:
            Vehicle: El mismo vehículo

        Raises:
            UnknownVertex: Si la ruta usa un vértice inexistente
            NoSuchEdge: Si la ruta usa un tramo inexistente
        """
        self._validate_route(vehicle.route)
        self._car_names[vehicle.id] = vehicle.label or f"#{len(self._car_names)}"

        if self._in_tick:
            self._pending_cars.append(vehicle)
        else:
            self.cars.append(vehicle)

        logger.debug("Vehículo %s agregado (ruta %s)", self.car_name(vehicle), vehicle.route)
        return vehicle

    def car_name(self, vehicle: Vehicle) -> str:
        """Nombre del vehículo en esta simulación: su etiqueta o su orden de alta."""
        return self._car_names.get(vehicle.id, vehicle.name)

    def _prepare(self):
        """Preparación previa al primer paso."""
        if self.auto_traffic_lights:
            self._create_default_traffic_lights()
        self.real_time_start = timer.time()
        self.state = EngineState.RUNNING

    def _create_default_traffic_lights(self):
        """
        Crea semáforos por defecto en intersecciones con muchas salidas.

        Cada semáforo nuevo regula la primera mitad de los accesos de la
        intersección; la otra mitad queda libre.
        """
        vertices = self.graph.vertices()
        for vertex in vertices:
            if vertex in self.traffic_lights:
                continue
            if len(self.graph.neighbors(vertex)) < TrafficLightConfig.AUTO_MIN_NEIGHBORS:
                continue

            approaches = [u for u in vertices if self.graph.has_edge(u, vertex)]
            self.traffic_lights[vertex] = TrafficLight(
                controlled_edges=approaches[:len(approaches) // 2]
            )
            logger.info("Semáforo por defecto creado en el vértice %d", vertex)

    def _resolve_delta(self, delta: Optional[float]) -> float:
        if delta is not None:
            if delta < 0:
                raise ValueError(f"Paso de tiempo negativo: {delta}")
            return float(delta)
        if self.time_step is not None:
            return self.time_step
        return self._last_tick_duration

    def step(self, delta: Optional[float] = None) -> float:
        """
        Ejecuta un paso de simulación.

        Args:
            delta: Paso de tiempo en segundos. Si es None se usa `time_step`
                   (o el tiempo real del paso anterior si `time_step` es None)

        Returns:
            float: Paso de tiempo aplicado

        Raises:
            RuntimeError: Si se llama desde un observador o con el simulador detenido
        """
        if self._in_tick:
            raise RuntimeError("No se puede avanzar el simulador desde un observador")
        if self.state == EngineState.STOPPED:
            raise RuntimeError("El simulador ya está detenido")
        if self.state == EngineState.CONFIGURED:
            self._prepare()

        delta = self._resolve_delta(delta)
        tick_start = timer.perf_counter()

        self._in_tick = True
        try:
            # 1. Actualizar semáforos
            for _, light in self.traffic_lights.items():
                light.advance(delta)

            # 2. Actualizar vehículos
            for car in self.cars:
                car.advance(delta, self.graph, self.roads, self.traffic_lights, self.rng)

            # 3. Retirar vehículos que terminaron
            self._prune_finished()

            # 4. Avanzar tiempo
            self.current_time += delta
            self.tick_count += 1
            if self.record_history:
                self._record_history()

            # 5. Notificar observadores
            self.emit(UPDATE_EVENT, delta)
        finally:
            self._in_tick = False
            self.cars.extend(self._pending_cars)
            self._pending_cars.clear()

        self._last_tick_duration = timer.perf_counter() - tick_start
        return delta

    def _prune_finished(self):
        finished = [car for car in self.cars if car.finished]
        if not finished:
            return

        self.cars = [car for car in self.cars if not car.finished]
        self.completed_vehicles.extend(finished)
        for car in finished:
            logger.debug("Vehículo %s llegó a %d en el paso %d",
                         self.car_name(car), car.route[-1], self.tick_count + 1)

    def _horizon_reached(self) -> bool:
        if self.horizon is None:
            return False
        # current_time es una suma de pasos: 10 x 0.1 da 0.9999999999999999
        return self.current_time >= self.horizon or math.isclose(self.current_time, self.horizon)

    def _should_stop(self, ticks: int, max_ticks: Optional[int]) -> bool:
        if self._stop_requested:
            return True
        if self._horizon_reached():
            return True
        if self.stop_when_idle and not self.cars and not self._pending_cars:
            return True
        return max_ticks is not None and ticks >= max_ticks

    def start(self, max_ticks: Optional[int] = None) -> Dict:
        """
        Ejecuta la simulación hasta que se cumpla una condición de parada.

        Condiciones: `stop()`, horizonte alcanzado, no quedan vehículos
        (con `stop_when_idle`) o `max_ticks` pasos. Sin ninguna de ellas
        el bucle corre hasta que se llame a `stop()`.

        Args:
            max_ticks: Cantidad máxima de pasos de esta ejecución

        Returns:
            dict: Métricas finales de la simulación

        Raises:
            RuntimeError: Si el simulador ya está corriendo o terminó
        """
        if self._looping or self._in_tick:
            raise RuntimeError("El simulador ya está corriendo")
        if self.state == EngineState.STOPPED:
            raise RuntimeError("El simulador ya está detenido")
        if self.state == EngineState.CONFIGURED:
            self._prepare()

        logger.info("Iniciando simulación (horizonte=%s, paso=%s, vehículos=%d)",
                    self.horizon, self.time_step, len(self.cars))

        self._stop_requested = False
        self._looping = True
        ticks = 0
        try:
            while not self._should_stop(ticks, max_ticks):
                iteration_start = timer.perf_counter()
                self.step()
                ticks += 1
                self._throttle(iteration_start)
        finally:
            self._looping = False
            self.state = EngineState.STOPPED

        metrics = self.calculate_final_metrics()
        logger.info("Simulación completada: t=%.1fs, %d pasos, %d vehículos completados, %d activos",
                    self.current_time, self.tick_count,
                    metrics['vehicles_completed'], metrics['vehicles_active'])
        return metrics

    def _throttle(self, iteration_start: float):
        """Duerme lo necesario para no superar `max_tps` pasos por segundo."""
        if self.max_tps > 0:
            elapsed = timer.perf_counter() - iteration_start
            min_duration = 1.0 / self.max_tps
            if elapsed < min_duration:
                timer.sleep(min_duration - elapsed)
        self._last_tick_duration = timer.perf_counter() - iteration_start

    def stop(self):
        """
        Pide detener la simulación; se verifica entre pasos.

        Antes del primer paso no tiene efecto: un simulador sin iniciar
        no tiene nada que detener y puede seguir arrancándose con `start`.
        """
        if self.state == EngineState.CONFIGURED:
            logger.info("Detención ignorada: el simulador todavía no inició")
            return

        self._stop_requested = True
        if not self._looping:
            self.state = EngineState.STOPPED
        logger.info("Detención solicitada en t=%.1fs", self.current_time)

    def dump_cars(self, stream: Optional[TextIO] = None):
        """
        Escribe una línea por vehículo activo con su estado actual.

        Args:
            stream: Salida de texto (por defecto stdout)
        """
        stream = stream if stream is not None else sys.stdout
        for i, car in enumerate(self.cars):
            label = f"'{car.label}' " if car.label else ""
            from_id, to_id = car.current_edge()
            percent = int(car.edge_progress / self.graph.weight(from_id, to_id) * 100)
            print(f"Car #{i} {label}{from_id}----{percent}%--->{to_id} "
                  f"(speed: max: {car.max_speed:.2f}, current: {car.current_speed:.2f}, "
                  f"state: {car.state.value})", file=stream)

    def dump_traffic_lights(self, stream: Optional[TextIO] = None):
        """
        Escribe una línea por semáforo con su estado actual.

        Args:
            stream: Salida de texto (por defecto stdout)
        """
        stream = stream if stream is not None else sys.stdout
        for vertex, light in self.traffic_lights.items():
            status = "ON " if light.is_on() else "OFF"
            phase = int(light.phase_clock / light.cycle_length * 100)
            print(f"Traffic light #{vertex} {status} {sorted(light.controlled_edges)} "
                  f"{phase}%/{int(light.duty_cycle * 100)}% "
                  f"(waiting: {light.waiting_time:.2f})", file=stream)

    def _record_history(self):
        for car in self.cars:
            from_id, to_id = car.current_edge()
            self.history.append({
                'tick': self.tick_count,
                'time': self.current_time,
                'vehicle': self.car_name(car),
                'from_id': from_id,
                'to_id': to_id,
                'edge_progress': car.edge_progress,
                'speed': car.current_speed,
                'state': car.state.value
            })

    def history_frame(self) -> pd.DataFrame:
        """Historial de posiciones por paso como DataFrame."""
        return pd.DataFrame(self.history, columns=HISTORY_COLUMNS)

    def get_current_state(self) -> Dict:
        """
        Retorna el estado actual completo de la simulación.

        Returns:
            dict: Estado actual
        """
        return {
            'time': self.current_time,
            'tick': self.tick_count,
            'state': self.state.value,
            'active_vehicles': len(self.cars),
            'completed_vehicles': len(self.completed_vehicles),
            'vehicles': [car.get_statistics() for car in self.cars],
            'traffic_lights': {
                vertex: {
                    'state': light.state.value,
                    'phase_clock': light.phase_clock,
                    'cycles_completed': light.total_cycles_completed,
                    'waiting_time': light.waiting_time
                }
                for vertex, light in self.traffic_lights.items()
            }
        }

    def calculate_final_metrics(self) -> Dict:
        """
        Calcula métricas de la simulación hasta el momento.

        Returns:
            dict: Diccionario con todas las métricas
        """
        calc = MetricsCalculator
        completed = self.completed_vehicles

        computation_time = 0.0
        if self.real_time_start:
            computation_time = timer.time() - self.real_time_start

        return {
            'avg_travel_time': calc.average_travel_time(completed),
            'avg_waiting_time': calc.average_waiting_time(completed),
            'avg_stops': calc.average_stops(completed),
            'avg_speed': calc.average_speed(completed),
            'throughput': len(completed),
            'throughput_per_hour': calc.throughput(completed, self.current_time),
            'light_waiting_time': sum(light.waiting_time for light in self.traffic_lights.values()),
            'vehicles_completed': len(completed),
            'vehicles_active': len(self.cars),
            'simulation_time': self.current_time,
            'ticks': self.tick_count,
            'computation_time': computation_time
        }

    def __repr__(self) -> str:
        return (f"TrafficSimulator(state={self.state.value}, t={self.current_time:.1f}s, "
                f"cars={len(self.cars)}, lights={len(self.traffic_lights.keys())})")
