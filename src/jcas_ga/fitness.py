"""Fitness functions for JCAS beamforming individuals.

Two objectives are provided, both maximized:

- BeamFitness: weighted communication gain, sensing term and sidelobe penalty
  (the default "penalty" objective)
- PatternMatchFitness: negative mean-squared error between the achieved
  combined pattern and a desired main-lobe mask (the "mask" objective)

Steering matrices are precomputed from the immutable scenario and fitness
configuration when the evaluator is built, so evaluation is a pure function
of the individual's weights.
"""

from dataclasses import dataclass

import numpy as np

from jcas_ga.array import angle_sweep, steering_matrix
from jcas_ga.config import FitnessConfig, ScenarioConfig
from jcas_ga.population import Individual


@dataclass(frozen=True)
class FitnessBreakdown:
    """Scalar fitness and its components.

    Attributes:
        fitness: Final objective value (higher is better).
        comm_gain: Gain toward the communication direction (unweighted).
        sensing_term: Signed, weighted sensing contribution to fitness.
        sensing_penalty: Unweighted sum of squared shortfalls below Gmin
            (0.0 in "average" mode).
        sidelobe_penalty: Unweighted sidelobe penalty (or pattern MSE for the
            mask objective).
    """

    fitness: float
    comm_gain: float
    sensing_term: float
    sensing_penalty: float
    sidelobe_penalty: float

    def to_dict(self) -> dict[str, float]:
        return {
            "fitness": self.fitness,
            "comm_gain": self.comm_gain,
            "sensing_term": self.sensing_term,
            "sensing_penalty": self.sensing_penalty,
            "sidelobe_penalty": self.sidelobe_penalty,
        }


class _SteeredEvaluator:
    """Shared response computation over a fixed set of angles."""

    def __init__(self, scenario: ScenarioConfig, angles: np.ndarray) -> None:
        self.scenario = scenario
        self._angles = np.asarray(angles, dtype=np.float64)
        self._steering_conj = steering_matrix(scenario.n_antennas, self._angles, scenario.spacing).conj()

    def _responses(self, individual: Individual) -> np.ndarray:
        if individual.n_antennas != self.scenario.n_antennas:
            raise ValueError(
                f"individual has {individual.n_antennas} antennas, scenario expects {self.scenario.n_antennas}"
            )
        comm = self._steering_conj @ individual.comm_weights
        if individual.sensing_weights is None:
            return comm
        rho = self.scenario.rho
        sensing = self._steering_conj @ individual.sensing_weights
        return np.sqrt(rho) * np.abs(comm) + np.sqrt(1.0 - rho) * np.abs(sensing)


class BeamFitness(_SteeredEvaluator):
    """Weighted comm-gain / sensing / sidelobe objective.

    fitness = a1 * G(comm) + sensing_term - a3 * sum((G - SLmax)^2 for sidelobe G > SLmax)

    where sensing_term is +a2 * mean(G(sensing)) in "average" mode, or
    -a2 * sum((Gmin - G)^2 for G < Gmin) in "penalty" mode. G is the power gain
    |response|^2 unless config.power_gain is False.

    Example:
        >>> scenario = ScenarioConfig(n_antennas=4, sensing_directions=())
        >>> evaluate = BeamFitness(scenario, FitnessConfig(sidelobe_weight=0.0))
        >>> ind = Individual(comm_weights=np.full(4, 0.5 + 0j))
        >>> round(evaluate(ind).fitness, 6)
        4.0
    """

    def __init__(self, scenario: ScenarioConfig, config: FitnessConfig | None = None) -> None:
        self.config = config if config is not None else FitnessConfig()
        sweep = angle_sweep(-90.0, 90.0, self.config.sidelobe_step)
        main_beams = np.array((scenario.comm_direction, *scenario.sensing_directions))
        in_main_beam = np.any(np.abs(sweep[:, np.newaxis] - main_beams[np.newaxis, :]) < self.config.exclusion_window, axis=1)
        self.sidelobe_angles = sweep[~in_main_beam]
        self._n_sensing = len(scenario.sensing_directions)
        # Row 0: comm direction, then sensing directions, then sidelobe sweep.
        angles = np.concatenate([[scenario.comm_direction], scenario.sensing_directions, self.sidelobe_angles])
        super().__init__(scenario, angles)

    def gains(self, individual: Individual) -> np.ndarray:
        magnitude = np.abs(self._responses(individual))
        return magnitude**2 if self.config.power_gain else magnitude

    def __call__(self, individual: Individual) -> FitnessBreakdown:
        cfg = self.config
        gains = self.gains(individual)
        comm_gain = float(gains[0])
        sensing = gains[1 : 1 + self._n_sensing]
        sidelobes = gains[1 + self._n_sensing :]

        sensing_penalty = 0.0
        if self._n_sensing == 0:
            sensing_term = 0.0
        elif cfg.sensing_mode == "average":
            sensing_term = cfg.sensing_weight * float(np.mean(sensing))
        else:
            shortfall = np.clip(cfg.min_sensing_gain - sensing, 0.0, None)
            sensing_penalty = float(np.sum(shortfall**2))
            sensing_term = -cfg.sensing_weight * sensing_penalty

        excess = np.clip(sidelobes - cfg.max_sidelobe, 0.0, None)
        sidelobe_penalty = float(np.sum(excess**2))

        fitness = cfg.comm_weight * comm_gain + sensing_term - cfg.sidelobe_weight * sidelobe_penalty
        return FitnessBreakdown(
            fitness=float(fitness),
            comm_gain=comm_gain,
            sensing_term=float(sensing_term),
            sensing_penalty=sensing_penalty,
            sidelobe_penalty=sidelobe_penalty,
        )


def mainlobe_width(n_antennas: int, scale: float = 1.0) -> float:
    """Approximate main-lobe width in degrees, 2 * asin(1.2 / (scale * M)).

    The argument is capped at 1 for very small arrays.
    """
    return float(np.rad2deg(2.0 * np.arcsin(min(1.0, 1.2 / (scale * n_antennas)))))


class PatternMatchFitness(_SteeredEvaluator):
    """Negative MSE between the achieved pattern and a desired main-lobe mask.

    The desired level at each of n_samples angles in [-90, 90) is
    max(sqrt(rho) * comm_mask, sqrt(1 - rho) * sensing_mask) for dual-beam
    scenarios and max(comm_mask, sensing_mask) otherwise, where a mask is 1
    within half a main-lobe width of its direction. The sensing main lobe uses
    an array scaled by 0.75, i.e. it is slightly wider than the comm lobe.
    """

    def __init__(self, scenario: ScenarioConfig, n_samples: int = 160) -> None:
        if n_samples <= 0:
            raise ValueError(f"n_samples must be positive, got {n_samples}")
        angles = -90.0 + (180.0 / n_samples) * np.arange(n_samples)
        super().__init__(scenario, angles)
        if scenario.dual_beam:
            comm_level, sensing_level = np.sqrt(scenario.rho), np.sqrt(1.0 - scenario.rho)
        else:
            comm_level = sensing_level = 1.0
        comm_half = mainlobe_width(scenario.n_antennas) / 2.0
        sensing_half = mainlobe_width(scenario.n_antennas, scale=0.75) / 2.0
        comm_mask = (np.abs(angles - scenario.comm_direction) <= comm_half).astype(np.float64)
        sensing_mask = np.zeros(n_samples)
        for direction in scenario.sensing_directions:
            sensing_mask = np.maximum(sensing_mask, np.abs(angles - direction) <= sensing_half)
        self.desired = np.maximum(comm_level * comm_mask, sensing_level * sensing_mask)
        self._comm_index = int(np.argmin(np.abs(angles - scenario.comm_direction)))

    def __call__(self, individual: Individual) -> FitnessBreakdown:
        magnitude = np.abs(self._responses(individual))
        mse = float(np.mean((magnitude - self.desired) ** 2))
        return FitnessBreakdown(
            fitness=-mse,
            comm_gain=float(magnitude[self._comm_index]),
            sensing_term=0.0,
            sensing_penalty=0.0,
            sidelobe_penalty=mse,
        )


def build_fitness(
    objective: str, scenario: ScenarioConfig, config: FitnessConfig | None = None
) -> BeamFitness | PatternMatchFitness:
    """Build the evaluator named by objective ("penalty" or "mask")."""
    if objective == "penalty":
        return BeamFitness(scenario, config)
    if objective == "mask":
        return PatternMatchFitness(scenario)
    raise ValueError(f"unknown objective {objective!r}, expected 'penalty' or 'mask'")
