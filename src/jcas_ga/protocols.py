"""Protocol definitions for the pluggable parts of the optimizer.

The drivers only depend on these call signatures, so any callable with the
matching shape can be passed directly instead of a registered name:

1. **ParentSelector**: choose parent slots from an evaluated population.
2. **Crossover**: recombine two parents into two children.
3. **Mutation**: perturb one individual.
4. **ReplacementPolicy**: choose which slots the steady-state driver overwrites.

Example usage:
    ```python
    parents = selector(pop, 2, rng)
    child1, child2 = crossover(pop[parents[0]], pop[parents[1]], rng)
    child1 = mutate(child1, rng)
    slots = replacement(pop, 2, rng)
    ```
"""

from typing import Protocol, runtime_checkable

import numpy as np

from jcas_ga.population import Individual, Population


@runtime_checkable
class ParentSelector(Protocol):
    """Select parent slot indices from an evaluated population.

    Returns:
        Array of shape (n_parents,) and dtype np.intp with values in [0, len(pop)).
        The same slot may be selected more than once.
    """

    def __call__(self, pop: Population, n_parents: int, rng: np.random.Generator) -> np.ndarray: ...


@runtime_checkable
class Crossover(Protocol):
    """Recombine two parents into two normalized, unevaluated children."""

    def __call__(
        self, parent1: Individual, parent2: Individual, rng: np.random.Generator
    ) -> tuple[Individual, Individual]: ...


@runtime_checkable
class Mutation(Protocol):
    """Return a perturbed, normalized copy of an individual."""

    def __call__(self, individual: Individual, rng: np.random.Generator) -> Individual: ...


@runtime_checkable
class ReplacementPolicy(Protocol):
    """Choose distinct slots to overwrite with n_children new individuals.

    Returns:
        Array of shape (n_children,) and dtype np.intp with unique values in
        [0, len(pop)).
    """

    def __call__(self, pop: Population, n_children: int, rng: np.random.Generator) -> np.ndarray: ...
