"""Shared test fixtures for jcas-ga tests.

This module provides common fixtures used across test modules:
- rng: Seeded random number generator
- Small scenarios (single- and dual-beam) and their fitness evaluators
- Evaluated populations with known fitness values
"""

import numpy as np
import pytest

from jcas_ga import BeamFitness, FitnessConfig, Individual, Population, ScenarioConfig, initialize
from jcas_ga.population import normalize


@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random number generator for deterministic tests."""
    return np.random.default_rng(42)


@pytest.fixture
def small_scenario() -> ScenarioConfig:
    """An 8-element array with one sensing beam."""
    return ScenarioConfig(n_antennas=8, comm_direction=0.0, sensing_directions=(40.0,))


@pytest.fixture
def dual_scenario() -> ScenarioConfig:
    """An 8-element dual-beam scenario with rho = 0.6."""
    return ScenarioConfig(n_antennas=8, comm_direction=-20.0, sensing_directions=(30.0, 50.0), rho=0.6, dual_beam=True)


@pytest.fixture
def comm_only_scenario() -> ScenarioConfig:
    """A 4-element array with only a communication beam at broadside."""
    return ScenarioConfig(n_antennas=4, comm_direction=0.0, sensing_directions=())


@pytest.fixture
def comm_only_fitness(comm_only_scenario: ScenarioConfig) -> BeamFitness:
    """Pure comm-gain objective: fitness is |sum(w)|^2, maximal (4.0) for equal in-phase weights."""
    return BeamFitness(comm_only_scenario, FitnessConfig(sidelobe_weight=0.0))


def make_individual(values, fitness: float | None = None, sensing=None) -> Individual:
    """Build a unit-power individual from raw complex values."""
    comm = normalize(np.asarray(values, dtype=np.complex128))
    sensing_weights = None if sensing is None else normalize(np.asarray(sensing, dtype=np.complex128))
    return Individual(comm_weights=comm, sensing_weights=sensing_weights, fitness=fitness)


@pytest.fixture
def individual_factory():
    """Factory building unit-power individuals from raw values: (values, fitness=None, sensing=None)."""
    return make_individual


@pytest.fixture
def scored_population() -> Population:
    """Five single-beam individuals with fitness [3.0, 1.0, 4.0, 1.0, 5.0]."""
    fitness = [3.0, 1.0, 4.0, 1.0, 5.0]
    return Population([make_individual(np.arange(1, 5) + k, fitness=f) for k, f in enumerate(fitness)])


@pytest.fixture
def random_population(rng: np.random.Generator, small_scenario: ScenarioConfig) -> Population:
    """Ten random unevaluated individuals for the small scenario."""
    return initialize(rng, 10, small_scenario.n_antennas)


@pytest.fixture
def evaluated_population(random_population: Population, small_scenario: ScenarioConfig) -> Population:
    """random_population with every slot evaluated by the default objective."""
    evaluate = BeamFitness(small_scenario)
    pop = random_population.copy()
    for i in range(len(pop)):
        breakdown = evaluate(pop[i])
        pop[i] = pop[i].with_fitness(breakdown.fitness, breakdown)
    return pop
