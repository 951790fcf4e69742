"""Replace-worst policy for steady-state evolution."""

import numpy as np

from jcas_ga.population import Population


def replace_worst():
    """Create a replace-worst policy.

    The population is sorted by fitness ascending (stable, so the lowest slot
    index wins ties) and the first n_children slots are overwritten.

    Returns:
        A ReplacementPolicy callable.

    Example:
        >>> policy = replace_worst()
        >>> slots = policy(pop, n_children=2, rng=rng)
    """

    def policy(pop: Population, n_children: int, rng: np.random.Generator) -> np.ndarray:
        """Return the n_children lowest-fitness slots, worst first.

        Raises:
            ValueError: If n_children is not in [1, len(pop)] or the population
                has unevaluated individuals.
        """
        if n_children <= 0 or n_children > len(pop):
            raise ValueError(f"n_children must be in [1, {len(pop)}], got {n_children}")
        return pop.ranked_indices(descending=False)[:n_children]

    return policy
