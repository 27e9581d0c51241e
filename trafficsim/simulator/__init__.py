"""
Simulador de tráfico vehicular.

Este módulo contiene el motor de simulación que modela:
- Atributos de tramos de calle
- Semáforos de ciclo fijo
- Movimiento de vehículos sobre rutas fijas
- Motor por pasos con observadores y carga de escenarios
"""

from .road import RoadAttributes, RoadTable, DEFAULT_ROAD
from .traffic_light import TrafficLight, LightState
from .vehicle import Vehicle, VehicleState
from .events import EventEmitter, UPDATE_EVENT
from .traffic_simulator import TrafficSimulator, EngineState
from .scenario import load_scenario, load_coordinates, read_scenario

__all__ = [
    'RoadAttributes',
    'RoadTable',
    'DEFAULT_ROAD',
    'TrafficLight',
    'LightState',
    'Vehicle',
    'VehicleState',
    'EventEmitter',
    'UPDATE_EVENT',
    'TrafficSimulator',
    'EngineState',
    'load_scenario',
    'load_coordinates',
    'read_scenario'
]
