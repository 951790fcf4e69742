"""Variation operators for beamforming individuals.

This package provides:
- single_point_crossover, uniform_crossover, blend_crossover: crossover factories
- gaussian_mutation: Box-Muller magnitude/phase mutation factory
"""

from jcas_ga.operators.crossover import blend_crossover, single_point_crossover, uniform_crossover
from jcas_ga.operators.mutation import gaussian_mutation
from jcas_ga.registry import CrossoverRegistry

# Register built-in crossover operators
CrossoverRegistry.register("single_point", single_point_crossover)
CrossoverRegistry.register("uniform", uniform_crossover)
CrossoverRegistry.register("blend", blend_crossover)

__all__ = ["single_point_crossover", "uniform_crossover", "blend_crossover", "gaussian_mutation"]
