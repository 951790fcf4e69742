"""jcas-ga: Genetic optimization of JCAS beamforming weights.

A pure numpy implementation of two genetic algorithm drivers, generational and
steady-state, that search complex antenna weights of a uniform linear array for
a strong communication beam, adequate sensing beams and low sidelobes.

Example (generational GA):
    >>> from jcas_ga import GenerationalConfig, ScenarioConfig, generational_ga
    >>> scenario = ScenarioConfig(n_antennas=8, sensing_directions=(40.0,))
    >>> result = generational_ga(scenario, GenerationalConfig(pop_size=20, max_generations=10), seed=42)
    >>> result.stop_reason
    'max_generations'

Example (steady-state GA):
    >>> from jcas_ga import SteadyStateConfig, steady_state_ga
    >>> config = SteadyStateConfig(pop_size=20, max_evaluations=200, replacement="tournament")
    >>> result = steady_state_ga(scenario, config, seed=42)
    >>> result.cycles
    100
"""

from jcas_ga.algorithms import GenerationalGA, SteadyStateGA, generational_ga, steady_state_ga
from jcas_ga.array import angle_sweep, array_response, steering_matrix
from jcas_ga.beamforming import RadiationPattern, beam_gain, beam_gains, combined_response, radiation_pattern
from jcas_ga.config import (
    EvolutionConfig,
    FitnessConfig,
    GenerationalConfig,
    ScenarioConfig,
    SteadyStateConfig,
)
from jcas_ga.fitness import BeamFitness, FitnessBreakdown, PatternMatchFitness, build_fitness
from jcas_ga.operators import blend_crossover, gaussian_mutation, single_point_crossover, uniform_crossover
from jcas_ga.population import Individual, Population, clone, diversity, initialize, normalize
from jcas_ga.primitives import ComplexWeight, gaussian_noise
from jcas_ga.registry import (
    CrossoverRegistry,
    ReplacementRegistry,
    SelectionRegistry,
    list_crossovers,
    list_replacements,
    list_selections,
)
from jcas_ga.replacement import replace_worst, reverse_tournament
from jcas_ga.results import HistoryRecord, OptimizationResult
from jcas_ga.selection import fitness_tournament, roulette_wheel

__all__ = [
    # Algorithms
    "generational_ga",
    "steady_state_ga",
    "GenerationalGA",
    "SteadyStateGA",
    # Configuration
    "ScenarioConfig",
    "FitnessConfig",
    "EvolutionConfig",
    "GenerationalConfig",
    "SteadyStateConfig",
    # Fitness
    "BeamFitness",
    "PatternMatchFitness",
    "FitnessBreakdown",
    "build_fitness",
    # Selection strategies
    "fitness_tournament",
    "roulette_wheel",
    # Variation operators
    "single_point_crossover",
    "uniform_crossover",
    "blend_crossover",
    "gaussian_mutation",
    # Replacement policies
    "replace_worst",
    "reverse_tournament",
    # Registry system
    "SelectionRegistry",
    "CrossoverRegistry",
    "ReplacementRegistry",
    "list_selections",
    "list_crossovers",
    "list_replacements",
    # Array and beamforming
    "array_response",
    "steering_matrix",
    "angle_sweep",
    "beam_gain",
    "beam_gains",
    "combined_response",
    "radiation_pattern",
    "RadiationPattern",
    # Data structures
    "ComplexWeight",
    "Individual",
    "Population",
    "initialize",
    "normalize",
    "clone",
    "diversity",
    "gaussian_noise",
    # Result types
    "OptimizationResult",
    "HistoryRecord",
]
