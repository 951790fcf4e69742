"""Fitness tournament selection (maximization)."""

import numpy as np

from jcas_ga.population import Population


def fitness_tournament(tournament_size: int = 3):
    """Create a fitness tournament parent selector.

    Each tournament draws tournament_size slots uniformly with replacement and
    returns the one with the highest cached fitness. On ties the first
    candidate drawn wins.

    Args:
        tournament_size: Number of individuals competing in each tournament (default: 3).

    Returns:
        A ParentSelector callable.

    Raises:
        ValueError: If tournament_size is not positive.

    Example:
        >>> selector = fitness_tournament(tournament_size=3)
        >>> parents = selector(pop, n_parents=2, rng=rng)
    """
    if tournament_size <= 0:
        raise ValueError(f"tournament_size must be positive, got {tournament_size}")

    def selector(pop: Population, n_parents: int, rng: np.random.Generator) -> np.ndarray:
        """Select parents using fitness tournament selection.

        Raises:
            ValueError: If any individual in the population is unevaluated.
        """
        fitness = pop.require_evaluated()
        pop_size = len(pop)

        selected = np.empty(n_parents, dtype=np.intp)
        for i in range(n_parents):
            candidates = rng.integers(0, pop_size, size=tournament_size)

            # Strictly greater keeps the first maximum on ties
            best_idx = candidates[0]
            for c in candidates[1:]:
                if fitness[c] > fitness[best_idx]:
                    best_idx = c

            selected[i] = best_idx

        return selected

    return selector
