"""
Tests para los atributos de tramos (RoadAttributes, RoadTable).
"""

import dataclasses
import pytest
import sys
from pathlib import Path

# Agregar la raíz del proyecto al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from trafficsim.simulator.road import DEFAULT_ROAD, RoadAttributes, RoadTable


class TestRoadAttributes:
    """Tests para la clase RoadAttributes."""

    def test_defaults(self):
        """Test de valores por defecto."""
        road = RoadAttributes()

        assert road.width == 3.0
        assert road.label == ""
        assert road.quality == 1.0

    def test_validation(self):
        """Ancho y calidad fuera de rango son rechazados."""
        with pytest.raises(ValueError):
            RoadAttributes(width=0)

        with pytest.raises(ValueError):
            RoadAttributes(quality=0)

        with pytest.raises(ValueError):
            RoadAttributes(quality=1.5)

    def test_immutable(self):
        """Los atributos no se modifican después de creados."""
        road = RoadAttributes(label="kar", quality=0.5)

        with pytest.raises(dataclasses.FrozenInstanceError):
            road.quality = 1.0

    def test_str(self):
        """Test de representación en texto."""
        assert str(RoadAttributes(label="kar", quality=0.5)) == "Road('kar' width=3.0m, quality=0.5)"


class TestRoadTable:
    """Tests para la clase RoadTable."""

    def test_default_fallback(self):
        """Aristas sin registro usan los atributos por defecto."""
        table = RoadTable({(0, 2): RoadAttributes(label="kar", quality=0.5)})

        assert table.get(0, 2).label == "kar"
        assert table.get(0, 1) is DEFAULT_ROAD
        assert (0, 2) in table
        assert (0, 1) not in table
        assert len(table) == 1

    def test_custom_default(self):
        """Test de atributos por defecto propios."""
        table = RoadTable(default=RoadAttributes(width=6.0))

        assert table.get(5, 6).width == 6.0

    def test_set_and_iteration_order(self):
        """Las aristas se recorren ordenadas."""
        table = RoadTable()
        table.set(3, 0, RoadAttributes(label="b"))
        table.set(0, 1, RoadAttributes(label="a"))

        assert list(table) == [(0, 1), (3, 0)]
        assert [road.label for _, road in table.items()] == ["a", "b"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
