"""Roulette wheel (fitness-proportionate) selection."""

import numpy as np

from jcas_ga.population import Population


def roulette_wheel():
    """Create a roulette wheel parent selector.

    Fitness may be negative, so values are shifted until the minimum is 1:

        weights_i = f_i - min(f) + 1
        p_i = weights_i / sum(weights_j)

    The worst individual therefore keeps a non-zero selection probability.

    Returns:
        A ParentSelector callable.

    Example:
        >>> selector = roulette_wheel()
        >>> parents = selector(pop, n_parents=2, rng=rng)
    """

    def selector(pop: Population, n_parents: int, rng: np.random.Generator) -> np.ndarray:
        """Select parents with probability proportional to shifted fitness.

        Raises:
            ValueError: If any individual in the population is unevaluated.
        """
        fitness = pop.require_evaluated()
        weights = fitness - np.min(fitness) + 1.0
        probs = weights / weights.sum()
        return rng.choice(len(pop), size=n_parents, replace=True, p=probs).astype(np.intp)

    return selector
