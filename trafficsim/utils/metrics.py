"""
Sistema de métricas y análisis de resultados.

Este módulo proporciona funciones para calcular y analizar métricas
de los vehículos que recorrieron la red.
"""

from typing import Dict, List

import numpy as np
import pandas as pd


class MetricsCalculator:
    """
    Calculadora de métricas de evaluación para simulaciones de tráfico.

    Proporciona métodos estáticos que reciben listas de vehículos
    (normalmente `TrafficSimulator.completed_vehicles`).
    """

    @staticmethod
    def average_waiting_time(vehicles: List) -> float:
        """
        Calcula el tiempo de espera promedio por vehículo.

        Args:
            vehicles: Lista de vehículos completados

        Returns:
            float: Espera promedio en segundos
        """
        if not vehicles:
            return 0.0

        waits = [v.total_waiting_time for v in vehicles]
        return float(np.mean(waits))

    @staticmethod
    def median_waiting_time(vehicles: List) -> float:
        if not vehicles:
            return 0.0

        return float(np.median([v.total_waiting_time for v in vehicles]))

    @staticmethod
    def percentile_waiting_time(vehicles: List, percentile: float = 95) -> float:
        """
        Calcula el percentil del tiempo de espera.

        Args:
            vehicles: Lista de vehículos completados
            percentile: Percentil a calcular (0-100)

        Returns:
            float: Espera en el percentil dado
        """
        if not vehicles:
            return 0.0

        waits = [v.total_waiting_time for v in vehicles]
        return float(np.percentile(waits, percentile))

    @staticmethod
    def average_travel_time(vehicles: List) -> float:
        if not vehicles:
            return 0.0

        return float(np.mean([v.travel_time for v in vehicles]))

    @staticmethod
    def throughput(vehicles: List, simulation_time: float) -> float:
        """
        Calcula el throughput (vehículos procesados por hora).

        Args:
            vehicles: Lista de vehículos completados
            simulation_time: Tiempo total de simulación en segundos

        Returns:
            float: Vehículos procesados por hora
        """
        if simulation_time <= 0:
            return 0.0

        return (len(vehicles) / simulation_time) * 3600

    @staticmethod
    def average_stops(vehicles: List) -> float:
        """
        Calcula el número promedio de paradas por vehículo.

        Args:
            vehicles: Lista de vehículos completados

        Returns:
            float: Número promedio de paradas
        """
        if not vehicles:
            return 0.0

        return float(np.mean([v.num_stops for v in vehicles]))

    @staticmethod
    def average_speed(vehicles: List) -> float:
        """
        Calcula la velocidad promedio de los vehículos.

        Args:
            vehicles: Lista de vehículos

        Returns:
            float: Velocidad promedio (unidades de peso por segundo)
        """
        if not vehicles:
            return 0.0

        return float(np.mean([v.get_average_speed() for v in vehicles]))

    @staticmethod
    def create_vehicle_dataframe(vehicles: List) -> pd.DataFrame:
        """
        Crea un DataFrame con una fila de estadísticas por vehículo.

        Args:
            vehicles: Lista de vehículos

        Returns:
            pd.DataFrame: Estadísticas ordenadas por ID de vehículo
        """
        columns = ['vehicle_id', 'label', 'origin', 'destination', 'travel_time',
                   'distance_traveled', 'avg_speed', 'total_waiting_time',
                   'num_stops', 'arrived']

        rows = [{k: v.get_statistics()[k] for k in columns} for v in vehicles]
        df = pd.DataFrame(rows, columns=columns)

        return df.sort_values('vehicle_id').reset_index(drop=True)

    @staticmethod
    def summarize(metrics: Dict) -> str:
        """
        Formatea las métricas finales de una simulación.

        Args:
            metrics: Diccionario de `TrafficSimulator.calculate_final_metrics`

        Returns:
            str: Resumen de varias líneas
        """
        return "\n".join([
            f"  Tiempo simulado:       {metrics.get('simulation_time', 0):.1f} s",
            f"  Pasos:                 {metrics.get('ticks', 0)}",
            f"  Vehículos completados: {metrics.get('vehicles_completed', 0)}",
            f"  Vehículos activos:     {metrics.get('vehicles_active', 0)}",
            f"  Viaje promedio:        {metrics.get('avg_travel_time', 0):.1f} s",
            f"  Espera promedio:       {metrics.get('avg_waiting_time', 0):.1f} s",
            f"  Paradas promedio:      {metrics.get('avg_stops', 0):.2f}",
            f"  Velocidad promedio:    {metrics.get('avg_speed', 0):.2f}",
            f"  Throughput:            {metrics.get('throughput_per_hour', 0):.0f} veh/h",
        ])
