"""Tests for simulation parameters and their validation."""

import pytest

from config import Algorithm, ConfigurationError, SimulationConfig, parse_number


class TestParseNumber:
    """Verify command line numbers are parsed or rejected."""

    def test_valid_number(self) -> None:
        """Digits parse to an int, surrounding spaces ignored."""
        assert parse_number("frame count", " 12 ") == 12

    def test_zero_is_a_number(self) -> None:
        """Zero parses; range checks happen in SimulationConfig."""
        assert parse_number("tau", "0") == 0

    def test_missing_value(self) -> None:
        """None means the argument was not given."""
        with pytest.raises(ConfigurationError, match="No tau provided"):
            parse_number("tau", None)

    @pytest.mark.parametrize("text", ["", "abc", "-3", "2.5"])
    def test_invalid_value(self, text: str) -> None:
        """Anything but a non-negative integer is rejected."""
        with pytest.raises(ConfigurationError, match="Invalid frame count provided"):
            parse_number("frame count", text)


class TestSimulationConfig:
    """Verify validation of a run's parameters."""

    def test_valid_config(self) -> None:
        """validate() returns the config itself when it is valid."""
        config = SimulationConfig(Algorithm.WSCLOCK, capacity=3, tau=2)
        assert config.validate() is config

    def test_zero_capacity_rejected(self) -> None:
        """At least one frame is required."""
        with pytest.raises(ConfigurationError):
            SimulationConfig(Algorithm.OPTIMAL, capacity=0).validate()

    def test_negative_tau_rejected(self) -> None:
        """Tau cannot be negative."""
        with pytest.raises(ConfigurationError):
            SimulationConfig(Algorithm.WSCLOCK, capacity=1, tau=-1).validate()

    def test_unknown_algorithm_rejected(self) -> None:
        """Only the three known algorithms are accepted."""
        with pytest.raises(ConfigurationError, match="Unknown algorithm"):
            SimulationConfig("LRU", capacity=1).validate()

    def test_all_algorithms_listed(self) -> None:
        """ALL lists every algorithm once."""
        assert set(Algorithm.ALL) == {Algorithm.OPTIMAL, Algorithm.SECOND_CHANCE, Algorithm.WSCLOCK}
