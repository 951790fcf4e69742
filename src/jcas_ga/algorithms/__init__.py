"""Optimizer drivers.

This module provides the generational and steady-state drivers with
configurable selection, crossover and replacement strategies.
"""

from jcas_ga.algorithms.generational import GenerationalGA, generational_ga
from jcas_ga.algorithms.steady_state import SteadyStateGA, steady_state_ga

__all__ = ["GenerationalGA", "SteadyStateGA", "generational_ga", "steady_state_ga"]
