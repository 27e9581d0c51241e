"""
Modelo de semáforo periódico.

Este módulo implementa un semáforo de dos estados (abierto / cerrado) que
alterna con un ciclo fijo: abierto durante la fracción `duty_cycle` del
ciclo y cerrado durante el resto. Solo restringe los accesos que lista
explícitamente; cualquier otro acceso se considera siempre abierto.
"""

import logging
from enum import Enum
from typing import Iterable, Optional

from ..utils.config import TrafficLightConfig

logger = logging.getLogger(__name__)


class LightState(Enum):
    """Estados posibles de un semáforo."""
    OPEN = "open"
    CLOSED = "closed"


class TrafficLight:
    """
    Semáforo de ciclo fijo ubicado en una intersección.

    El semáforo se guarda en el índice del motor bajo el ID del vértice
    donde está. Los accesos controlados se identifican por el vértice de
    origen de la arista que llega a la intersección: un semáforo en el
    vértice 2 con `controlled_edges={1}` regula a los vehículos que llegan
    por 1 -> 2 antes de entrar a su siguiente tramo.

    Con `auto_adjust` el semáforo reparte el verde según la espera que
    registra: cuando la espera acumulada llega a
    `TrafficLightConfig.AUTO_ADJUST_WINDOW` y los accesos controlados y no
    controlados difieren lo suficiente, recalcula `duty_cycle` en
    proporción a la espera de cada grupo por segundo de exposición.
    """

    def __init__(self, duty_cycle: float = TrafficLightConfig.DEFAULT_DUTY_CYCLE,
                 cycle_length: float = TrafficLightConfig.DEFAULT_CYCLE_LENGTH,
                 controlled_edges: Iterable[int] = (),
                 offset: float = 0.0,
                 auto_adjust: bool = False):
        """
        Inicializa un semáforo.

        Args:
            duty_cycle: Fracción del ciclo en que está abierto, en (0, 1]
            cycle_length: Duración del ciclo completo en segundos (> 0)
            controlled_edges: Accesos que regula (vértices de origen)
            offset: Desfase inicial del reloj de fase, para coordinar
                    semáforos consecutivos (ondas verdes)
            auto_adjust: Si True, reajusta la fracción de verde según la espera

        Raises:
            ValueError: Si la configuración no es válida
        """
        if not 0 < duty_cycle <= 1:
            raise ValueError(f"Fracción de verde inválida: {duty_cycle} (debe estar en (0, 1])")
        if cycle_length <= 0:
            raise ValueError(f"Duración de ciclo inválida: {cycle_length}s (debe ser > 0)")

        self.duty_cycle = float(duty_cycle)
        self.cycle_length = float(cycle_length)
        self.controlled_edges = frozenset(int(edge) for edge in controlled_edges)
        self.offset = float(offset)
        self.auto_adjust = auto_adjust
        self.initial_duty_cycle = self.duty_cycle

        self.phase_clock = self.offset % self.cycle_length
        self.state = self._compute_state()

        # Estadísticas
        self.total_cycles_completed = 0
        self.waiting_time = 0.0  # tiempo acumulado de vehículos detenidos aquí
        self.total_adjustments = 0

        # Espera de la ventana de ajuste actual, por grupo de accesos
        self.controlled_waiting_time = 0.0
        self.uncontrolled_waiting_time = 0.0

    def _compute_state(self) -> LightState:
        if self.phase_clock < self.open_time():
            return LightState.OPEN
        return LightState.CLOSED

    def open_time(self) -> float:
        """Segundos de cada ciclo durante los cuales el semáforo está abierto."""
        return self.duty_cycle * self.cycle_length

    def advance(self, delta: float):
        """
        Avanza el reloj de fase.

        Args:
            delta: Tiempo transcurrido en segundos (>= 0)
        """
        if delta < 0:
            raise ValueError(f"Paso de tiempo negativo: {delta}")

        clock = self.phase_clock + delta
        self.total_cycles_completed += int(clock // self.cycle_length)
        self.phase_clock = clock % self.cycle_length

        # El módulo en punto flotante puede devolver exactamente cycle_length
        if self.phase_clock >= self.cycle_length:
            self.phase_clock = 0.0

        if self.auto_adjust:
            self._rebalance()

        self.state = self._compute_state()

    def is_on(self) -> bool:
        """Indica si el semáforo está en verde, sin importar el acceso."""
        return self.state == LightState.OPEN

    def is_open(self, edge: int) -> bool:
        """
        Determina si un vehículo que llega por `edge` puede cruzar.

        Args:
            edge: Acceso del vehículo (vértice de origen de su tramo actual)

        Returns:
            bool: True si el acceso no está controlado o si el semáforo está abierto
        """
        if edge not in self.controlled_edges:
            return True
        return self.is_on()

    def time_until_change(self) -> float:
        """Segundos hasta el próximo cambio de estado."""
        if self.is_on():
            return self.open_time() - self.phase_clock
        return self.cycle_length - self.phase_clock

    def record_wait(self, delta: float, edge: Optional[int] = None):
        """
        Registra tiempo de un vehículo detenido en esta intersección.

        Args:
            delta: Segundos de espera
            edge: Acceso por el que espera el vehículo. None cuenta como controlado
        """
        self.waiting_time += delta
        if edge is None or edge in self.controlled_edges:
            self.controlled_waiting_time += delta
        else:
            self.uncontrolled_waiting_time += delta

    def _rebalance(self):
        controlled = self.controlled_waiting_time
        uncontrolled = self.uncontrolled_waiting_time
        total = controlled + uncontrolled

        if total < TrafficLightConfig.AUTO_ADJUST_WINDOW:
            return
        if abs(controlled - uncontrolled) / total <= TrafficLightConfig.AUTO_ADJUST_IMBALANCE:
            return

        if self.duty_cycle >= 1.0:
            # Sin rojo no hay exposición del acceso controlado
            duty = controlled / total
        else:
            controlled_rate = controlled / (1 - self.duty_cycle)
            uncontrolled_rate = uncontrolled / self.duty_cycle
            duty = controlled_rate / (controlled_rate + uncontrolled_rate)

        duty = min(max(duty, TrafficLightConfig.AUTO_ADJUST_MIN_DUTY),
                   TrafficLightConfig.AUTO_ADJUST_MAX_DUTY)

        logger.info("Semáforo %s: verde %.0f%% -> %.0f%% (espera %.1fs / %.1fs)",
                    sorted(self.controlled_edges), self.duty_cycle * 100, duty * 100,
                    controlled, uncontrolled)

        self.duty_cycle = duty
        self.total_adjustments += 1
        self.controlled_waiting_time = 0.0
        self.uncontrolled_waiting_time = 0.0

    def reset(self):
        """Reinicia el semáforo al inicio del ciclo (respetando el offset y el verde inicial)."""
        self.duty_cycle = self.initial_duty_cycle
        self.phase_clock = self.offset % self.cycle_length
        self.state = self._compute_state()
        self.total_cycles_completed = 0
        self.waiting_time = 0.0
        self.total_adjustments = 0
        self.controlled_waiting_time = 0.0
        self.uncontrolled_waiting_time = 0.0

    def get_status_string(self) -> str:
        """
        Retorna una representación del estado actual.

        Returns:
            str: String con estado formateado
        """
        symbol = "🟢" if self.is_on() else "🔴"
        return (f"{symbol} {self.state.value.upper()} | "
                f"Reloj: {self.phase_clock:.1f}s / {self.cycle_length:.1f}s | "
                f"Verde: {self.duty_cycle:.0%} | "
                f"Ciclos: {self.total_cycles_completed}")

    def __str__(self) -> str:
        return f"TrafficLight({sorted(self.controlled_edges)}, {self.state.value})"

    def __repr__(self) -> str:
        return (f"TrafficLight(duty_cycle={self.duty_cycle}, "
                f"cycle={self.cycle_length}s, "
                f"controlled={sorted(self.controlled_edges)}, "
                f"offset={self.offset}s)")
