"""Tests for range and full-tank cost predictions."""

from decimal import Decimal

import pytest

from fueltrack.domain.predictions import estimate_full_tank_cost, estimate_range
from fueltrack.exceptions import InvalidTankCapacity


class TestEstimateRange:
    """Tests for estimate_range(average_efficiency, tank_capacity)."""

    def test_known_values(self) -> None:
        # 15 distance/unit * 50 units = 750
        assert estimate_range(Decimal("15"), Decimal("50")) == Decimal("750")

    def test_missing_efficiency_returns_none(self) -> None:
        assert estimate_range(None, Decimal("50")) is None

    def test_zero_efficiency_is_zero_range(self) -> None:
        assert estimate_range(Decimal("0"), Decimal("50")) == Decimal("0")

    @pytest.mark.parametrize("capacity", ["0", "-10"])
    def test_non_positive_capacity_rejected(self, capacity: str) -> None:
        with pytest.raises(InvalidTankCapacity, match="Tank capacity must be positive"):
            estimate_range(Decimal("15"), Decimal(capacity))

    def test_capacity_checked_before_missing_efficiency(self) -> None:
        """A bad capacity fails even while there is not enough data."""
        with pytest.raises(InvalidTankCapacity):
            estimate_range(None, Decimal("0"))


class TestEstimateFullTankCost:
    """Tests for estimate_full_tank_cost(cost_per_distance, efficiency, capacity)."""

    def test_known_values(self) -> None:
        # range 750 * 0.1 per distance unit = 75
        assert estimate_full_tank_cost(
            Decimal("0.1"), Decimal("15"), Decimal("50")
        ) == Decimal("75")

    def test_missing_cost_returns_none(self) -> None:
        assert estimate_full_tank_cost(None, Decimal("15"), Decimal("50")) is None

    def test_missing_efficiency_returns_none(self) -> None:
        assert estimate_full_tank_cost(Decimal("0.1"), None, Decimal("50")) is None

    def test_capacity_error_propagates(self) -> None:
        with pytest.raises(InvalidTankCapacity):
            estimate_full_tank_cost(Decimal("0.1"), Decimal("15"), Decimal("-1"))

    def test_chained_from_calculator_output(self) -> None:
        """Full-tank cost equals tank capacity * fuel price when metrics are consistent."""
        efficiency = Decimal("500") / Decimal("35")
        cost_per_distance = Decimal("35") * Decimal("1.6") / Decimal("500")
        result = estimate_full_tank_cost(cost_per_distance, efficiency, Decimal("50"))
        assert result is not None
        assert result.quantize(Decimal("0.01")) == Decimal("80.00")
