"""Population data structures for beamforming weight optimization.

This module provides the core data structures of the optimizer:

- Individual: An immutable candidate solution (one or two complex weight
  vectors plus cached fitness and age)
- Population: An owned, fixed-size container of individuals addressed by
  stable integer slots, mutated in place by the optimizer drivers

and the population-level operations: random initialization, unit-power
normalization, explicit cloning and diversity measurement.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from jcas_ga.primitives import ComplexWeight, from_polar

if TYPE_CHECKING:
    from jcas_ga.fitness import FitnessBreakdown


def _as_weight_vector(name: str, weights: np.ndarray) -> np.ndarray:
    if not isinstance(weights, np.ndarray):
        raise TypeError(f"{name} must be a numpy array, got {type(weights).__name__}")
    if weights.ndim != 1 or weights.shape[0] == 0:
        raise ValueError(f"{name} must be a non-empty 1D array, got shape {weights.shape}")
    return weights.astype(np.complex128, copy=True)


@dataclass(frozen=True, eq=False)
class Individual:
    """Immutable candidate beamforming solution.

    Weight arrays are copied on construction, so no two individuals ever share
    weight storage. Updating the cached fitness or the age returns a new
    Individual.

    Attributes:
        comm_weights: Communication beam weights, complex array of shape (M,).
        sensing_weights: Sensing beam weights for dual-beam individuals, shape (M,),
            or None for single-beam individuals.
        fitness: Cached scalar fitness, or None if the individual needs evaluation.
        breakdown: Cached fitness components, or None.
        age: Number of cycles this individual has survived.

    Example:
        >>> ind = Individual(comm_weights=np.array([0.6 + 0j, 0.8 + 0j]))
        >>> ind.n_antennas
        2
        >>> ind.fitness is None
        True
    """

    comm_weights: np.ndarray
    sensing_weights: np.ndarray | None = None
    fitness: float | None = None
    breakdown: FitnessBreakdown | None = None
    age: int = 0

    def __post_init__(self) -> None:
        """Validate shapes and copy weight arrays.

        Raises:
            TypeError: If weights are not numpy arrays.
            ValueError: If weight shapes are invalid or inconsistent, or age is negative.
        """
        object.__setattr__(self, "comm_weights", _as_weight_vector("comm_weights", self.comm_weights))
        if self.sensing_weights is not None:
            sensing = _as_weight_vector("sensing_weights", self.sensing_weights)
            if sensing.shape != self.comm_weights.shape:
                raise ValueError(
                    f"sensing_weights has shape {sensing.shape}, expected {self.comm_weights.shape} to match comm_weights"
                )
            object.__setattr__(self, "sensing_weights", sensing)
        if self.fitness is not None:
            object.__setattr__(self, "fitness", float(self.fitness))
        if self.age < 0:
            raise ValueError(f"age must be non-negative, got {self.age}")

    @property
    def n_antennas(self) -> int:
        return self.comm_weights.shape[0]

    @property
    def dual_beam(self) -> bool:
        return self.sensing_weights is not None

    @property
    def evaluated(self) -> bool:
        return self.fitness is not None

    @property
    def weight_vectors(self) -> tuple[np.ndarray, ...]:
        """All weight vectors of the individual (one for single-beam, two for dual-beam)."""
        if self.sensing_weights is None:
            return (self.comm_weights,)
        return (self.comm_weights, self.sensing_weights)

    def with_fitness(self, fitness: float, breakdown: FitnessBreakdown | None = None) -> Individual:
        return dataclasses.replace(self, fitness=fitness, breakdown=breakdown)

    def invalidated(self) -> Individual:
        """Return a copy whose cached fitness is cleared."""
        return dataclasses.replace(self, fitness=None, breakdown=None)

    def aged(self, cycles: int = 1) -> Individual:
        return dataclasses.replace(self, age=self.age + cycles)

    def as_complex_weights(self) -> tuple[ComplexWeight, ...]:
        """Communication weights as ComplexWeight values."""
        return tuple(ComplexWeight.from_complex(w) for w in self.comm_weights)

    def same_weights(self, other: Individual) -> bool:
        """True if both individuals carry value-identical weight vectors."""
        if self.dual_beam != other.dual_beam or self.n_antennas != other.n_antennas:
            return False
        return all(np.array_equal(a, b) for a, b in zip(self.weight_vectors, other.weight_vectors))


def normalize(weights: np.ndarray) -> np.ndarray:
    """Scale a weight vector to unit total radiated power.

    A zero-power vector has no direction to preserve; its magnitudes are reset
    to equal values (keeping phases) before scaling.

    Args:
        weights: Complex array of shape (M,).

    Returns:
        New complex array with sum(|w|^2) == 1.

    Example:
        >>> w = normalize(np.array([3.0 + 0j, 4.0 + 0j]))
        >>> float(np.sum(np.abs(w) ** 2))
        1.0
    """
    weights = np.asarray(weights, dtype=np.complex128)
    power = float(np.sum(np.abs(weights) ** 2))
    if not power > 0.0 or not np.isfinite(power):
        weights = from_polar(np.ones(len(weights)), np.angle(weights))
        power = float(len(weights))
    return weights / np.sqrt(power)


def random_weights(rng: np.random.Generator, n_antennas: int) -> np.ndarray:
    """Draw magnitudes from U[0, 1) and phases from U[-pi, pi), then normalize."""
    magnitude = rng.uniform(0.0, 1.0, size=n_antennas)
    phase = rng.uniform(-np.pi, np.pi, size=n_antennas)
    return normalize(from_polar(magnitude, phase))


def random_individual(rng: np.random.Generator, n_antennas: int, dual_beam: bool = False) -> Individual:
    comm = random_weights(rng, n_antennas)
    sensing = random_weights(rng, n_antennas) if dual_beam else None
    return Individual(comm_weights=comm, sensing_weights=sensing)


def initialize(rng: np.random.Generator, pop_size: int, n_antennas: int, dual_beam: bool = False) -> Population:
    """Create a population of pop_size random, unit-power, unevaluated individuals."""
    if pop_size <= 0:
        raise ValueError(f"pop_size must be positive, got {pop_size}")
    return Population([random_individual(rng, n_antennas, dual_beam) for _ in range(pop_size)])


def clone(individual: Individual) -> Individual:
    """Explicit deep value copy of an individual (weights, cached fitness and age)."""
    return Individual(
        comm_weights=individual.comm_weights.copy(),
        sensing_weights=None if individual.sensing_weights is None else individual.sensing_weights.copy(),
        fitness=individual.fitness,
        breakdown=individual.breakdown,
        age=individual.age,
    )


def _magnitude_matrix(individuals: Sequence[Individual]) -> np.ndarray:
    return np.stack([np.concatenate([np.abs(w) for w in ind.weight_vectors]) for ind in individuals])


def diversity(population: Population | Sequence[Individual]) -> float:
    """Mean pairwise Euclidean distance between per-element magnitude vectors.

    For dual-beam individuals the sensing magnitudes are appended to the
    communication magnitudes before measuring distance. Populations with fewer
    than two individuals have zero diversity.
    """
    individuals = list(population)
    n = len(individuals)
    if n < 2:
        return 0.0
    mags = _magnitude_matrix(individuals)
    diff = mags[:, np.newaxis, :] - mags[np.newaxis, :, :]
    distances = np.sqrt(np.sum(diff**2, axis=-1))
    upper = np.triu_indices(n, k=1)
    return float(np.mean(distances[upper]))


class Population:
    """Fixed-size, slot-addressed container of individuals.

    The optimizer driver owns its Population exclusively and overwrites slots
    in place. Slots hold immutable Individuals, so a replaced slot never
    aliases another one.

    Example:
        >>> rng = np.random.default_rng(0)
        >>> pop = initialize(rng, pop_size=4, n_antennas=8)
        >>> len(pop)
        4
        >>> pop.unevaluated_indices().tolist()
        [0, 1, 2, 3]
    """

    def __init__(self, individuals: Sequence[Individual]) -> None:
        individuals = list(individuals)
        if not individuals:
            raise ValueError("population must contain at least one individual")
        for ind in individuals:
            if not isinstance(ind, Individual):
                raise TypeError(f"population entries must be Individual, got {type(ind).__name__}")
        first = individuals[0]
        self._n_antennas = first.n_antennas
        self._dual_beam = first.dual_beam
        for ind in individuals[1:]:
            self._check_compatible(ind)
        self._individuals = individuals

    def _check_compatible(self, individual: Individual) -> None:
        if individual.n_antennas != self._n_antennas:
            raise ValueError(
                f"individual has {individual.n_antennas} antennas, expected {self._n_antennas} to match population"
            )
        if individual.dual_beam != self._dual_beam:
            raise ValueError("cannot mix single-beam and dual-beam individuals in one population")

    def __len__(self) -> int:
        return len(self._individuals)

    def __iter__(self) -> Iterator[Individual]:
        return iter(self._individuals)

    def __getitem__(self, idx: int) -> Individual:
        if not isinstance(idx, (int, np.integer)):
            raise TypeError(f"indices must be integers, got {type(idx).__name__}")
        return self._individuals[idx]

    def __setitem__(self, idx: int, individual: Individual) -> None:
        if not isinstance(idx, (int, np.integer)):
            raise TypeError(f"indices must be integers, got {type(idx).__name__}")
        if not isinstance(individual, Individual):
            raise TypeError(f"population entries must be Individual, got {type(individual).__name__}")
        self._check_compatible(individual)
        self._individuals[idx] = individual

    @property
    def n_antennas(self) -> int:
        return self._n_antennas

    @property
    def dual_beam(self) -> bool:
        return self._dual_beam

    @property
    def fitness(self) -> np.ndarray:
        """Cached fitness per slot, NaN where the individual is unevaluated."""
        return np.array([np.nan if ind.fitness is None else ind.fitness for ind in self._individuals])

    def unevaluated_indices(self) -> np.ndarray:
        return np.array([i for i, ind in enumerate(self._individuals) if ind.fitness is None], dtype=np.intp)

    def require_evaluated(self) -> np.ndarray:
        """Return the fitness array, raising if any slot is unevaluated.

        Raises:
            ValueError: If at least one individual has no cached fitness.
        """
        missing = self.unevaluated_indices()
        if len(missing) > 0:
            raise ValueError(f"population has {len(missing)} unevaluated individuals (first at slot {missing[0]})")
        return self.fitness

    def best_index(self) -> int:
        """Slot of the highest fitness; the first one wins ties."""
        return int(np.argmax(self.require_evaluated()))

    def ranked_indices(self, descending: bool = True) -> np.ndarray:
        """Slots sorted by fitness with stable tie-breaking (best first by default)."""
        fitness = self.require_evaluated()
        keys = -fitness if descending else fitness
        return np.argsort(keys, kind="stable").astype(np.intp)

    def copy(self) -> Population:
        return Population([clone(ind) for ind in self._individuals])
