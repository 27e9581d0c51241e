"""
Modelo de vehículo que sigue una ruta fija.

Este módulo implementa el movimiento de un vehículo individual sobre la
red: avance por el tramo actual, cruce de intersecciones respetando
semáforos, frenadas aleatorias y recolección de estadísticas del viaje.
"""

from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..errors import RouteExhausted
from ..utils.config import SimulatorConfig


class VehicleState(Enum):
    """Estados posibles de un vehículo."""
    MOVING = "moving"              # A velocidad máxima del tramo
    STOPPED_AT_LIGHT = "stopped"   # Detenido en semáforo cerrado
    ACCELERATING = "accelerating"  # Acelerando
    BRAKING = "braking"            # Frenada aleatoria
    ARRIVED = "arrived"            # Llegó a destino


class Vehicle:
    """
    Representa un vehículo individual en la simulación.

    El vehículo recorre `route` tramo a tramo. `route_cursor` apunta al
    vértice de origen del tramo actual y `edge_progress` es la distancia
    recorrida sobre ese tramo; siempre vale entre 0 y el peso del tramo.

    Al llegar al final de un tramo intermedio el vehículo queda detenido
    exactamente en el borde; en el paso siguiente consulta el semáforo de
    la intersección y, si puede, cruza al tramo siguiente. Al llegar al
    final del último tramo termina su ruta sin consultar semáforos.

    Modelo de velocidad: en cada paso se hace un sorteo independiente.
    Con probabilidad `misbehavior_probability` el vehículo frena (su
    velocidad se multiplica por `braking_factor`); si no, acelera hacia la
    velocidad máxima del tramo (`max_speed * quality`). Sin `acceleration`
    la aceleración es instantánea; con ella, gana `acceleration * delta`
    por paso.
    """

    # Contador global para IDs únicos
    _next_id = 1

    def __init__(self, max_speed: float, misbehavior_probability: float,
                 route: Sequence[int], label: str = "",
                 acceleration: Optional[float] = None,
                 braking_factor: float = SimulatorConfig.DEFAULT_BRAKING_FACTOR):
        """
        Inicializa un vehículo.

        Args:
            max_speed: Velocidad máxima en unidades de peso por segundo (> 0)
            misbehavior_probability: Probabilidad de frenada aleatoria por paso, en [0, 1]
            route: IDs de vértices a recorrer en orden (al menos 2; puede repetir vértices)
            label: Nombre del vehículo para diagnósticos
            acceleration: Aceleración en unidades/s². None = instantánea
            braking_factor: Fracción de la velocidad que conserva al frenar, en [0, 1)

        Raises:
            ValueError: Si algún parámetro no es válido
        """
        if max_speed <= 0:
            raise ValueError(f"Velocidad máxima inválida: {max_speed} (debe ser > 0)")
        if not 0 <= misbehavior_probability <= 1:
            raise ValueError(f"Probabilidad inválida: {misbehavior_probability} (debe estar en [0, 1])")
        if len(route) < 2:
            raise ValueError(f"La ruta necesita al menos 2 vértices: {list(route)}")
        if acceleration is not None and acceleration <= 0:
            raise ValueError(f"Aceleración inválida: {acceleration} (debe ser > 0)")
        if not 0 <= braking_factor < 1:
            raise ValueError(f"Factor de frenado inválido: {braking_factor} (debe estar en [0, 1))")

        # Identificación
        self.id = Vehicle._next_id
        Vehicle._next_id += 1
        self.label = label

        # Comportamiento
        self.max_speed = float(max_speed)
        self.misbehavior_probability = float(misbehavior_probability)
        self.acceleration = acceleration
        self.braking_factor = braking_factor

        # Ruta y ubicación
        self.route: List[int] = [int(v) for v in route]
        self.route_cursor = 0
        self.edge_progress = 0.0
        self.current_speed = 0.0

        # Estado
        self.state = VehicleState.MOVING

        # Estadísticas
        self.travel_time = 0.0  # segundos desde el primer paso
        self.total_waiting_time = 0.0  # segundos detenido
        self.num_stops = 0  # veces que se detuvo completamente
        self.distance_traveled = 0.0
        self._was_stopped = False

        # Generador propio, solo si no se recibe uno en `advance`
        self._rng: Optional[np.random.Generator] = None

    @property
    def finished(self) -> bool:
        """Indica si el vehículo completó su ruta."""
        return self.state == VehicleState.ARRIVED

    @property
    def name(self) -> str:
        return self.label or f"#{self.id}"

    def current_edge(self) -> Tuple[int, int]:
        """
        Retorna el tramo actual como par (origen, destino).

        Raises:
            RouteExhausted: Si el vehículo ya terminó su ruta
        """
        if self.finished:
            raise RouteExhausted(self.name)
        return self.route[self.route_cursor], self.route[self.route_cursor + 1]

    def remaining_route(self) -> List[int]:
        """Vértices que faltan visitar, empezando por el origen del tramo actual."""
        return self.route[self.route_cursor:]

    def advance(self, delta: float, graph, roads, traffic_lights,
                rng: Optional[np.random.Generator] = None):
        """
        Avanza el vehículo un paso de simulación.

        Args:
            delta: Paso de tiempo en segundos
            graph: Grafo de la red (para el peso de cada tramo)
            roads: Tabla de atributos de tramos (RoadTable)
            traffic_lights: Índice de semáforos por intersección (cualquier
                            objeto con `get(vertice)`)
            rng: Generador aleatorio para las frenadas. Si es None el vehículo
                 usa uno propio, sin semilla, creado en el primer paso

        Raises:
            RouteExhausted: Si el vehículo ya terminó su ruta
        """
        from_id, to_id = self.current_edge()
        self.travel_time += delta
        length = graph.weight(from_id, to_id)

        # 1. Cruce de intersección si quedó detenido en el borde
        if self.edge_progress >= length:
            light = traffic_lights.get(to_id)
            if light is not None and not light.is_open(from_id):
                self.current_speed = 0.0
                self.state = VehicleState.STOPPED_AT_LIGHT
                light.record_wait(delta, from_id)
                self._update_statistics(delta)
                return

            self.route_cursor += 1
            self.edge_progress = 0.0
            from_id, to_id = self.current_edge()
            length = graph.weight(from_id, to_id)

        # 2. Velocidad para este paso
        speed_cap = self.max_speed * roads.get(from_id, to_id).quality
        self.current_speed = self._next_speed(delta, speed_cap, rng)

        # 3. Desplazamiento, sin pasarse del final del tramo
        remaining = length - self.edge_progress
        displacement = self.current_speed * delta
        if displacement >= remaining:
            displacement = remaining
            self.edge_progress = length
        else:
            self.edge_progress += displacement
        self.distance_traveled += displacement

        # 4. Fin del último tramo: llegó a destino
        if self.edge_progress >= length and self.route_cursor + 2 == len(self.route):
            self.route_cursor += 1
            self.edge_progress = 0.0
            self.state = VehicleState.ARRIVED

        self._update_statistics(delta)

    def _next_speed(self, delta: float, speed_cap: float,
                    rng: Optional[np.random.Generator]) -> float:
        """
        Calcula la velocidad del paso según el modelo de frenadas aleatorias.

        Args:
            delta: Paso de tiempo en segundos
            speed_cap: Velocidad máxima en el tramo actual
            rng: Generador aleatorio

        Returns:
            float: Velocidad en [0, speed_cap]
        """
        if rng is None:
            if self._rng is None:
                self._rng = np.random.default_rng()
            rng = self._rng

        if rng.random() < self.misbehavior_probability:
            speed = self.current_speed * self.braking_factor
            self.state = VehicleState.BRAKING
        else:
            if self.acceleration is None:
                speed = speed_cap
            else:
                speed = self.current_speed + self.acceleration * delta
            self.state = VehicleState.MOVING if speed >= speed_cap else VehicleState.ACCELERATING

        return max(0.0, min(speed, speed_cap))

    def _update_statistics(self, delta: float):
        """Actualiza tiempo de espera y cantidad de paradas."""
        is_stopped = self.current_speed == 0.0 and not self.finished

        if is_stopped:
            self.total_waiting_time += delta

            # Contar nueva parada
            if not self._was_stopped:
                self.num_stops += 1
                self._was_stopped = True
        else:
            self._was_stopped = False

    def get_average_speed(self) -> float:
        """Velocidad promedio del viaje (distancia / tiempo)."""
        if self.travel_time == 0:
            return 0.0
        return self.distance_traveled / self.travel_time

    def get_statistics(self) -> dict:
        """
        Retorna un diccionario con todas las estadísticas del vehículo.

        Returns:
            dict: Estadísticas completas
        """
        return {
            'vehicle_id': self.id,
            'label': self.label,
            'origin': self.route[0],
            'destination': self.route[-1],
            'route_cursor': self.route_cursor,
            'edge_progress': self.edge_progress,
            'current_speed': self.current_speed,
            'travel_time': self.travel_time,
            'distance_traveled': self.distance_traveled,
            'avg_speed': self.get_average_speed(),
            'total_waiting_time': self.total_waiting_time,
            'num_stops': self.num_stops,
            'arrived': self.finished
        }

    def get_status_string(self) -> str:
        """
        Retorna una representación del estado actual.

        Returns:
            str: String con estado formateado
        """
        if self.finished:
            return f"✓ Vehículo {self.name} - ARRIBÓ AL DESTINO"

        from_id, to_id = self.current_edge()
        return (f"🚗 Vehículo {self.name} | "
                f"Estado: {self.state.value.upper()} | "
                f"Velocidad: {self.current_speed:.1f} | "
                f"Tramo: {from_id}→{to_id} | "
                f"Posición: {self.edge_progress:.1f} | "
                f"Paradas: {self.num_stops}")

    def __str__(self) -> str:
        return f"Vehicle({self.name}, {self.route[0]}→{self.route[-1]})"

    def __repr__(self) -> str:
        return (f"Vehicle(id={self.id}, label='{self.label}', route={self.route}, "
                f"state={self.state.value}, speed={self.current_speed:.2f})")
