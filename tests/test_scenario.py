"""
Tests para la carga de escenarios desde JSON.
"""

import json
import pytest
import sys
from pathlib import Path

# Agregar la raíz del proyecto al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from trafficsim.graph import AdjacencyListGraph, AdjacencyMatrixGraph
from trafficsim.simulator import EngineState, load_coordinates, load_scenario
from trafficsim.utils.config import DEFAULT_SCENARIO_FILE


class TestLoadScenario:
    """Tests para load_scenario."""

    def test_default_scenario(self):
        """Test de carga del escenario de demostración."""
        simulator = load_scenario(DEFAULT_SCENARIO_FILE)

        assert isinstance(simulator.graph, AdjacencyMatrixGraph)
        assert simulator.graph.vertices() == [0, 1, 2, 3]
        assert len(simulator.graph.edges()) == 5
        assert simulator.graph.weight(0, 2) == 1400

        assert simulator.traffic_lights.keys() == [2]
        assert simulator.traffic_lights[2].controlled_edges == frozenset({1})
        assert simulator.roads.get(0, 2).label == "kar"
        assert simulator.roads.get(0, 2).quality == 0.5

        assert [car.label for car in simulator.cars] == ["car1", "car2"]
        assert simulator.horizon == 200
        assert simulator.state == EngineState.CONFIGURED

    def test_list_representation(self):
        """Se puede forzar la lista de adyacencia."""
        simulator = load_scenario(DEFAULT_SCENARIO_FILE, representation="list")

        assert isinstance(simulator.graph, AdjacencyListGraph)
        assert simulator.graph.weight(3, 0) == 1000

    def test_unknown_representation(self):
        """Test de representación inexistente."""
        with pytest.raises(ValueError):
            load_scenario(DEFAULT_SCENARIO_FILE, representation="csr")

    def test_engine_overrides(self):
        """Los parámetros pasados reemplazan a los del archivo."""
        simulator = load_scenario(DEFAULT_SCENARIO_FILE,
                                  engine_overrides={'horizon': 15, 'record_history': True})

        simulator.start()
        assert simulator.current_time == 15
        assert not simulator.history_frame().empty

    def test_run_default_scenario(self):
        """El escenario completo corre hasta el horizonte o hasta vaciarse."""
        simulator = load_scenario(DEFAULT_SCENARIO_FILE)
        metrics = simulator.start()

        assert simulator.current_time <= 200
        assert simulator.current_time == 200 or not simulator.cars
        assert metrics['vehicles_completed'] + metrics['vehicles_active'] == 2

    def test_missing_file(self, tmp_path):
        """Un archivo inexistente falla."""
        with pytest.raises(FileNotFoundError):
            load_scenario(tmp_path / "no_existe.json")

    def test_invalid_json(self, tmp_path):
        """Un archivo que no es JSON falla."""
        path = tmp_path / "roto.json"
        path.write_text("{ vertices: ", encoding="utf-8")

        with pytest.raises(json.JSONDecodeError):
            load_scenario(path)

    def test_missing_key(self, tmp_path):
        """Faltar la lista de vértices es un error."""
        path = tmp_path / "incompleto.json"
        path.write_text(json.dumps({"edges": []}), encoding="utf-8")

        with pytest.raises(KeyError):
            load_scenario(path)

    def test_minimal_scenario(self, tmp_path):
        """Solo vértices y aristas; el resto es opcional."""
        path = tmp_path / "minimo.json"
        path.write_text(json.dumps({
            "vertices": [0, 1],
            "edges": [{"from_id": 0, "to_id": 1, "weight": 50}],
            "vehicles": [{"max_speed": 10, "route": [0, 1]}]
        }), encoding="utf-8")

        simulator = load_scenario(path)
        simulator.start()

        assert simulator.tick_count == 5
        assert len(simulator.completed_vehicles) == 1

    def test_light_auto_adjust(self, tmp_path):
        """El semáforo acepta auto_adjust; por defecto está desactivado."""
        path = tmp_path / "ajuste.json"
        path.write_text(json.dumps({
            "vertices": [0, 1, 2],
            "edges": [{"from_id": 0, "to_id": 1, "weight": 50},
                      {"from_id": 1, "to_id": 2, "weight": 50}],
            "traffic_lights": [{"vertex": 1, "controlled_edges": [0], "auto_adjust": True}]
        }), encoding="utf-8")

        simulator = load_scenario(path)

        assert simulator.traffic_lights[1].auto_adjust
        assert not load_scenario(DEFAULT_SCENARIO_FILE).traffic_lights[2].auto_adjust

    def test_coordinates(self):
        """Test de coordenadas de dibujo."""
        coordinates = load_coordinates(DEFAULT_SCENARIO_FILE)

        assert set(coordinates) == {0, 1, 2, 3}
        assert coordinates[2] == (1000.0, 1000.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
