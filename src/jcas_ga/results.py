"""Result types produced by the optimizer drivers.

- HistoryRecord: one periodic snapshot of a run
- OptimizationResult: running-best individual, its fitness breakdown, the
  snapshot history and run metadata

Both classes are immutable (frozen dataclasses). OptimizationResult.to_dict()
returns plain Python types suitable for a JSON results document.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np

from jcas_ga.beamforming import RadiationPattern, radiation_pattern
from jcas_ga.config import ScenarioConfig
from jcas_ga.fitness import FitnessBreakdown
from jcas_ga.population import Individual, Population

STOP_REASONS = ("max_generations", "budget", "stagnation", "callback")


@dataclass(frozen=True)
class HistoryRecord:
    """Snapshot of a run at one cycle.

    Attributes:
        cycle: Cycle index (0 is the evaluated initial population).
        evaluations: Fitness evaluations performed so far.
        best_fitness: Running-best fitness at this cycle.
        average_fitness: Mean fitness of the current population.
        diversity: Population diversity at this cycle.
    """

    cycle: int
    evaluations: int
    best_fitness: float
    average_fitness: float
    diversity: float

    def to_dict(self) -> dict[str, float | int]:
        return {
            "cycle": self.cycle,
            "evaluations": self.evaluations,
            "best_fitness": self.best_fitness,
            "average_fitness": self.average_fitness,
            "diversity": self.diversity,
        }


def _weights_to_list(weights: np.ndarray | None) -> list[list[float]] | None:
    if weights is None:
        return None
    return [[float(w.real), float(w.imag)] for w in weights]


@dataclass(frozen=True)
class OptimizationResult:
    """Outcome of one optimizer run.

    Attributes:
        best: Running-best individual seen during the run (evaluated).
        history: Snapshots in cycle order.
        population: Final population.
        cycles: Number of cycles completed.
        evaluations: Fitness evaluations performed. For the steady-state driver
            this counts the budgeted evaluations after initialization.
        stop_reason: One of "max_generations", "budget", "stagnation", "callback",
            or None for an intermediate result handed to a callback.
        scenario: Scenario the run optimized for.

    Example:
        >>> result = generational_ga(scenario, config=GenerationalConfig(max_generations=5), seed=1)
        >>> result.best_fitness == result.best.fitness
        True
        >>> pattern = result.pattern(step=0.5)
    """

    best: Individual
    history: tuple[HistoryRecord, ...]
    population: Population
    cycles: int
    evaluations: int
    stop_reason: str | None
    scenario: ScenarioConfig

    def __post_init__(self) -> None:
        if self.best.fitness is None:
            raise ValueError("best individual must be evaluated")
        if self.stop_reason is not None and self.stop_reason not in STOP_REASONS:
            raise ValueError(f"stop_reason must be one of {STOP_REASONS}, got {self.stop_reason!r}")
        object.__setattr__(self, "history", tuple(self.history))

    @property
    def best_fitness(self) -> float:
        assert self.best.fitness is not None  # Guaranteed by __post_init__
        return self.best.fitness

    @property
    def breakdown(self) -> FitnessBreakdown | None:
        return self.best.breakdown

    @property
    def best_fitness_curve(self) -> np.ndarray:
        return np.array([r.best_fitness for r in self.history])

    def pattern(self, step: float = 1.0) -> RadiationPattern:
        """Radiation pattern of the best individual over -90..90 degrees."""
        return radiation_pattern(self.best, step=step, rho=self.scenario.rho, spacing=self.scenario.spacing)

    def to_dict(self) -> dict[str, Any]:
        return {
            "best_fitness": self.best_fitness,
            "breakdown": None if self.breakdown is None else self.breakdown.to_dict(),
            "comm_weights": _weights_to_list(self.best.comm_weights),
            "sensing_weights": _weights_to_list(self.best.sensing_weights),
            "cycles": self.cycles,
            "evaluations": self.evaluations,
            "stop_reason": self.stop_reason,
            "scenario": self.scenario.to_dict(),
            "history": [r.to_dict() for r in self.history],
        }
