"""
Configuración global del simulador de tráfico.

Este módulo contiene todas las constantes y parámetros de configuración
utilizados en el proyecto.
"""

from pathlib import Path

# Rutas del proyecto
PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"
SCENARIOS_DIR = DATA_DIR / "scenarios"

# Archivos de datos
DEFAULT_SCENARIO_FILE = SCENARIOS_DIR / "four_way_loop.json"


# Parámetros del simulador
class SimulatorConfig:
    """Configuración del motor de simulación."""

    # Tiempo
    TIME_STEP = 1.0  # Paso de simulación en segundos
    DEFAULT_HORIZON = 200.0  # Tiempo simulado total en segundos

    # Límite de ticks por segundo real (0 = sin límite)
    DEFAULT_MAX_TPS = 0.0

    # Vehículos
    DEFAULT_BRAKING_FACTOR = 0.5  # Fracción de velocidad que conserva al frenar


# Parámetros de semáforos
class TrafficLightConfig:
    """Configuración de semáforos."""

    DEFAULT_CYCLE_LENGTH = 90.0  # segundos
    DEFAULT_DUTY_CYCLE = 0.5  # fracción del ciclo en verde

    # Semáforos automáticos: intersecciones con al menos esta cantidad de salidas
    AUTO_MIN_NEIGHBORS = 3

    # Ajuste automático del verde
    AUTO_ADJUST_WINDOW = 300.0  # segundos de espera acumulada antes de reajustar
    AUTO_ADJUST_IMBALANCE = 0.1  # diferencia relativa mínima entre accesos
    AUTO_ADJUST_MIN_DUTY = 0.1
    AUTO_ADJUST_MAX_DUTY = 0.9


# Parámetros de tramos de calle
class RoadConfig:
    """Valores por defecto de los atributos de un tramo."""

    DEFAULT_WIDTH = 3.0  # metros (un carril)
    DEFAULT_LABEL = ""
    DEFAULT_QUALITY = 1.0  # factor de velocidad


# Parámetros del grafo
class GraphConfig:
    """Configuración de la elección de representación del grafo."""

    # Por debajo de esta cantidad de vértices la matriz de adyacencia siempre conviene
    DENSE_VERTEX_LIMIT = 500
    # Margen usado para decidir si el grafo es "casi completo"
    DENSE_EDGE_MARGIN = 100
    # Capacidad inicial de la matriz densa
    INITIAL_MATRIX_CAPACITY = 8


# Visualización
class VisualizationConfig:
    """Configuración de visualización."""

    FIGURE_SIZE = (12, 8)
    DPI = 100

    NODE_COLOR = "#4ECDC4"
    SIGNAL_NODE_COLOR = "#FF6B6B"
    EDGE_COLOR = "gray"
    VEHICLE_COLOR = "#1f77b4"


# Logging
class LoggingConfig:
    """Configuración de logging."""

    LOG_LEVEL = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE = PROJECT_ROOT / "simulation.log"
    LOG_FILE_MAX_BYTES = 1_000_000
    LOG_FILE_BACKUPS = 2


if __name__ == "__main__":
    print(f"Directorio del proyecto: {PROJECT_ROOT}")
    print(f"Directorio de escenarios: {SCENARIOS_DIR}")
    print(f"Escenario por defecto: {DEFAULT_SCENARIO_FILE}")
