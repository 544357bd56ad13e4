# config.py

from dataclasses import dataclass
from typing import Optional


class ConfigurationError(ValueError):
    """Raised for bad simulation parameters, before any access is processed."""


class Algorithm:
    """
    Names of the available page replacement algorithms.

    OPTIMAL:       Belady's oracle, evicts the page used farthest in the future
    SECOND_CHANCE: Clock, FIFO order with a reference bit reprieve
    WSCLOCK:       Working-set clock, reference bit + age threshold + dirty bit
    """
    OPTIMAL = "Optimal"
    SECOND_CHANCE = "Second-Chance"
    WSCLOCK = "WSClock"

    ALL = (OPTIMAL, SECOND_CHANCE, WSCLOCK)


def parse_number(kind: str, text: Optional[str]) -> int:
    """
    Parse a non-negative integer parameter given as text.

    Args:
        kind (str): Human name of the parameter, used in error messages
        text (Optional[str]): Raw value, None when it was not supplied

    Raises:
        ConfigurationError: If the value is missing or not a non-negative int
    """
    if text is None:
        raise ConfigurationError(f"No {kind} provided")
    text = text.strip()
    if not (text.isascii() and text.isdigit()):
        raise ConfigurationError(f"Invalid {kind} provided")
    return int(text)


@dataclass
class SimulationConfig:
    """
    Parameters of one simulation run.

    Attributes:
        algorithm (str): One of Algorithm.ALL
        capacity (int): Number of physical frames, at least 1
        tau (int): WSClock age threshold in accesses (ignored by the others)
    """
    algorithm: str
    capacity: int
    tau: int = 0

    def validate(self) -> "SimulationConfig":
        if self.algorithm not in Algorithm.ALL:
            raise ConfigurationError(f"Unknown algorithm: {self.algorithm}")
        if self.capacity < 1:
            raise ConfigurationError("Frame count must be at least 1")
        if self.tau < 0:
            raise ConfigurationError("Tau must not be negative")
        return self
