"""
Tests para el módulo de vehículos (Vehicle).
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Agregar la raíz del proyecto al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from trafficsim.errors import RouteExhausted
from trafficsim.graph import SparseIndex, create_graph
from trafficsim.simulator.road import RoadAttributes, RoadTable
from trafficsim.simulator.traffic_light import TrafficLight
from trafficsim.simulator.vehicle import Vehicle, VehicleState


def make_network():
    """Circuito de cuatro esquinas con la diagonal 0 -> 2 de calidad 0.5."""
    graph = create_graph(4, [
        (0, 1, 1000),
        (0, 2, 1400),
        (1, 2, 1000),
        (2, 3, 1000),
        (3, 0, 1000),
    ])
    roads = RoadTable({(0, 2): RoadAttributes(label="kar", quality=0.5)})
    return graph, roads


class TestVehicle:
    """Tests para la clase Vehicle."""

    def test_vehicle_creation(self):
        """Test de creación de vehículo."""
        vehicle = Vehicle(100, 0.5, [0, 1, 2, 3], label="car1")

        assert vehicle.max_speed == 100
        assert vehicle.misbehavior_probability == 0.5
        assert vehicle.route == [0, 1, 2, 3]
        assert vehicle.route_cursor == 0
        assert vehicle.edge_progress == 0.0
        assert vehicle.current_speed == 0.0
        assert vehicle.state == VehicleState.MOVING
        assert not vehicle.finished
        assert vehicle.current_edge() == (0, 1)
        assert vehicle.name == "car1"

    def test_unique_ids(self):
        """Cada vehículo recibe un ID distinto."""
        v1 = Vehicle(10, 0, [0, 1])
        v2 = Vehicle(10, 0, [0, 1])

        assert v1.id != v2.id
        assert v2.name == f"#{v2.id}"

    def test_validation(self):
        """Test de validación de parámetros."""
        with pytest.raises(ValueError):
            Vehicle(0, 0.5, [0, 1])

        with pytest.raises(ValueError):
            Vehicle(10, 1.5, [0, 1])

        with pytest.raises(ValueError):
            Vehicle(10, -0.1, [0, 1])

        with pytest.raises(ValueError):
            Vehicle(10, 0.5, [0])

        with pytest.raises(ValueError):
            Vehicle(10, 0.5, [0, 1], acceleration=0)

    def test_reaches_edge_end_after_ten_ticks(self):
        """Velocidad 100 sobre un tramo de 1000: 10 pasos de 1s llegan al borde."""
        graph, roads = make_network()
        lights = SparseIndex()
        rng = np.random.default_rng(0)
        vehicle = Vehicle(100, 0.0, [0, 1, 2, 3])

        for _ in range(10):
            vehicle.advance(1.0, graph, roads, lights, rng)

        assert vehicle.current_edge() == (0, 1)
        assert vehicle.edge_progress == 1000
        assert vehicle.current_speed == 100

        # El cruce ocurre en el paso siguiente
        vehicle.advance(1.0, graph, roads, lights, rng)
        assert vehicle.current_edge() == (1, 2)
        assert vehicle.edge_progress == 100

    def test_progress_never_exceeds_edge(self):
        """edge_progress queda en [0, peso] y solo se cambia de tramo desde el final."""
        graph, roads = make_network()
        lights = SparseIndex()
        lights[2] = TrafficLight(duty_cycle=0.5, cycle_length=90, controlled_edges=[1])
        rng = np.random.default_rng(123)
        vehicle = Vehicle(130, 0.4, [0, 1, 2, 3, 0, 2, 3, 0, 1])

        crossings = 0
        while not vehicle.finished:
            cursor, progress = vehicle.route_cursor, vehicle.edge_progress
            length = graph.weight(*vehicle.current_edge())

            lights[2].advance(0.7)
            vehicle.advance(0.7, graph, roads, lights, rng)

            assert vehicle.route_cursor - cursor in (0, 1)
            if vehicle.route_cursor > cursor and not vehicle.finished:
                # El cruce parte del borde del tramo anterior
                assert progress == length
                crossings += 1
            if not vehicle.finished:
                from_id, to_id = vehicle.current_edge()
                assert 0 <= vehicle.edge_progress <= graph.weight(from_id, to_id)

        assert crossings == len(vehicle.route) - 2

    def test_own_rng_created_once(self):
        """Sin generador externo el vehículo reutiliza el suyo en cada paso."""
        graph, roads = make_network()
        vehicle = Vehicle(10, 0.5, [0, 1, 2])

        vehicle.advance(1.0, graph, roads, SparseIndex())
        own_rng = vehicle._rng
        vehicle.advance(1.0, graph, roads, SparseIndex())

        assert own_rng is not None
        assert vehicle._rng is own_rng

    def test_external_rng_preferred(self):
        """Con generador externo no se crea uno propio."""
        graph, roads = make_network()
        vehicle = Vehicle(10, 0.5, [0, 1, 2])
        vehicle.advance(1.0, graph, roads, SparseIndex(), np.random.default_rng(0))

        assert vehicle._rng is None

    def test_no_spontaneous_deceleration(self):
        """Con probabilidad 0 de frenar la velocidad nunca baja sin un semáforo."""
        graph, roads = make_network()
        lights = SparseIndex()
        rng = np.random.default_rng(7)
        vehicle = Vehicle(60, 0.0, [0, 1, 2, 3, 0], acceleration=7)

        speeds = []
        while not vehicle.finished:
            vehicle.advance(1.0, graph, roads, lights, rng)
            speeds.append(vehicle.current_speed)

        assert speeds == sorted(speeds)
        assert vehicle.num_stops == 0

    def test_acceleration(self):
        """Con aceleración finita la velocidad sube de a acceleration * delta."""
        graph, roads = make_network()
        lights = SparseIndex()
        vehicle = Vehicle(25, 0.0, [0, 1], acceleration=10)

        vehicle.advance(1.0, graph, roads, lights)
        assert vehicle.current_speed == 10
        assert vehicle.state == VehicleState.ACCELERATING

        vehicle.advance(1.0, graph, roads, lights)
        vehicle.advance(1.0, graph, roads, lights)
        assert vehicle.current_speed == 25
        assert vehicle.state == VehicleState.MOVING

    def test_road_quality_caps_speed(self):
        """La velocidad en un tramo es max_speed * quality."""
        graph, roads = make_network()
        vehicle = Vehicle(90, 0.0, [0, 2, 3])

        vehicle.advance(1.0, graph, roads, SparseIndex())

        assert vehicle.current_speed == 45
        assert vehicle.edge_progress == 45

    def test_always_braking(self):
        """Con probabilidad 1 de frenar el vehículo nunca arranca."""
        graph, roads = make_network()
        vehicle = Vehicle(90, 1.0, [0, 1])
        rng = np.random.default_rng(1)

        for _ in range(5):
            vehicle.advance(1.0, graph, roads, SparseIndex(), rng)

        assert vehicle.current_speed == 0
        assert vehicle.edge_progress == 0
        assert vehicle.state == VehicleState.BRAKING
        assert vehicle.num_stops == 1
        assert vehicle.total_waiting_time == 5

    def test_stops_at_closed_light(self):
        """Un semáforo cerrado sobre el acceso retiene al vehículo en el borde."""
        graph, roads = make_network()
        lights = SparseIndex()
        light = TrafficLight(duty_cycle=0.5, cycle_length=90, controlled_edges=[1], offset=45)
        lights[2] = light
        vehicle = Vehicle(100, 0.0, [1, 2, 3])

        for _ in range(10):
            vehicle.advance(1.0, graph, roads, lights)
        assert vehicle.edge_progress == 1000

        vehicle.advance(1.0, graph, roads, lights)

        assert vehicle.current_edge() == (1, 2)
        assert vehicle.edge_progress == 1000
        assert vehicle.current_speed == 0
        assert vehicle.state == VehicleState.STOPPED_AT_LIGHT
        assert light.waiting_time == 1.0
        assert light.controlled_waiting_time == 1.0

        # Al abrirse, cruza
        light.advance(45)
        vehicle.advance(1.0, graph, roads, lights)
        assert vehicle.current_edge() == (2, 3)
        assert vehicle.edge_progress == 100

    def test_uncontrolled_approach_passes(self):
        """Un semáforo cerrado no afecta a los accesos que no controla."""
        graph, roads = make_network()
        lights = SparseIndex()
        lights[2] = TrafficLight(duty_cycle=0.5, cycle_length=90, controlled_edges=[1], offset=45)
        vehicle = Vehicle(140, 0.0, [0, 2, 3])

        for _ in range(21):
            vehicle.advance(1.0, graph, roads, lights)

        assert vehicle.current_edge() == (2, 3)

    def test_arrival(self):
        """El último tramo termina la ruta sin consultar semáforos."""
        graph, roads = make_network()
        lights = SparseIndex()
        lights[1] = TrafficLight(duty_cycle=0.5, cycle_length=90, controlled_edges=[0], offset=45)
        vehicle = Vehicle(100, 0.0, [0, 1])

        for _ in range(10):
            vehicle.advance(1.0, graph, roads, lights)

        assert vehicle.finished
        assert vehicle.state == VehicleState.ARRIVED
        assert vehicle.route_cursor == 1
        assert vehicle.edge_progress == 0.0
        assert vehicle.remaining_route() == [1]
        assert vehicle.distance_traveled == 1000

    def test_advance_after_arrival(self):
        """Avanzar un vehículo que ya llegó es un error."""
        graph, roads = make_network()
        vehicle = Vehicle(2000, 0.0, [0, 1])
        vehicle.advance(1.0, graph, roads, SparseIndex())

        assert vehicle.finished
        with pytest.raises(RouteExhausted):
            vehicle.advance(1.0, graph, roads, SparseIndex())
        with pytest.raises(RouteExhausted):
            vehicle.current_edge()

    def test_statistics(self):
        """Test de estadísticas del viaje."""
        graph, roads = make_network()
        vehicle = Vehicle(100, 0.0, [0, 1], label="car1")

        for _ in range(5):
            vehicle.advance(1.0, graph, roads, SparseIndex())

        stats = vehicle.get_statistics()
        assert stats['label'] == "car1"
        assert stats['origin'] == 0
        assert stats['destination'] == 1
        assert stats['edge_progress'] == 500
        assert stats['travel_time'] == 5
        assert stats['avg_speed'] == 100
        assert not stats['arrived']

    def test_status_string(self):
        """Test de representación de estado."""
        vehicle = Vehicle(100, 0.0, [0, 1], label="car1")

        assert "car1" in vehicle.get_status_string()
        assert "0→1" in vehicle.get_status_string()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
