"""
Script de ejemplo: Circuito de cuatro esquinas

Arma la red de demostración a mano (cuatro intersecciones, dos autos, un
semáforo en la intersección 2 y un tramo con nombre de mala calidad),
imprime el estado de autos y semáforos en cada paso y al final muestra
las métricas. Con `--scenario` carga la misma red desde JSON.
"""

import argparse
import sys
from pathlib import Path

# Agregar la raíz del proyecto al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from trafficsim.graph import SparseIndex, create_graph
from trafficsim.simulator import (
    RoadAttributes,
    TrafficLight,
    TrafficSimulator,
    UPDATE_EVENT,
    Vehicle,
    load_scenario
)
from trafficsim.utils import MetricsCalculator, setup_logging
from trafficsim.utils.config import DEFAULT_SCENARIO_FILE, SimulatorConfig


def build_demo_simulator(seed=None) -> TrafficSimulator:
    """
    Construye el simulador de demostración.

    Returns:
        TrafficSimulator: Simulador con los dos autos ya agregados
    """
    graph = create_graph(4, [
        (0, 1, 1000),
        (0, 2, 1400),
        (1, 2, 1000),
        (2, 3, 1000),
        (3, 0, 1000),
    ])

    # Semáforo en la intersección 2, regula a quienes llegan desde 1
    lights = SparseIndex()
    lights[2] = TrafficLight(duty_cycle=0.5, cycle_length=90, controlled_edges=[1])

    roads = {(0, 2): RoadAttributes(width=3.0, label="kar", quality=0.5)}

    simulator = TrafficSimulator(graph, lights, roads,
                                 horizon=SimulatorConfig.DEFAULT_HORIZON, seed=seed)

    simulator.add_car(Vehicle(100, 0.5, [0, 1, 2, 3, 0, 1, 2, 3], label="car1"))
    simulator.add_car(Vehicle(90, 0.7, [0, 2, 3, 0, 2, 3], label="car2"))

    return simulator


def main():
    """Función principal del ejemplo."""
    parser = argparse.ArgumentParser(description="Simulación del circuito de cuatro esquinas")
    parser.add_argument("--scenario", action="store_true",
                        help=f"Cargar la red desde {DEFAULT_SCENARIO_FILE.name}")
    parser.add_argument("--seed", type=int, default=None, help="Semilla de las frenadas")
    parser.add_argument("--quiet", action="store_true", help="No imprimir cada paso")
    args = parser.parse_args()

    setup_logging()

    print("="*80)
    print("SIMULACIÓN DE TRÁFICO - CIRCUITO DE CUATRO ESQUINAS")
    print("="*80)

    if args.scenario:
        simulator = load_scenario(DEFAULT_SCENARIO_FILE,
                                  engine_overrides={'seed': args.seed} if args.seed is not None else None)
    else:
        simulator = build_demo_simulator(seed=args.seed)

    def print_tick(delta):
        print(f"\n--- t = {simulator.current_time:.1f}s (paso {simulator.tick_count}, dt = {delta:.2f}s) ---")
        simulator.dump_cars()
        simulator.dump_traffic_lights()

    if not args.quiet:
        simulator.on(UPDATE_EVENT, print_tick)

    metrics = simulator.start()

    print("\n" + "="*80)
    print("MÉTRICAS FINALES")
    print("="*80)
    print(MetricsCalculator.summarize(metrics))

    vehicles = simulator.completed_vehicles + simulator.cars
    if vehicles:
        print("\nVehículos:")
        print(MetricsCalculator.create_vehicle_dataframe(vehicles).to_string(index=False))


if __name__ == "__main__":
    main()
