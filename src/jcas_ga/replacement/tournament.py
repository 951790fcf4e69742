"""Reverse tournament replacement for steady-state evolution."""

import numpy as np

from jcas_ga.population import Population


def reverse_tournament(tournament_size: int = 3):
    """Create a reverse tournament replacement policy.

    For each child, tournament_size slots are drawn uniformly with replacement
    from the slots not yet chosen this cycle; the one with the lowest fitness
    is overwritten (first candidate drawn wins ties). Good individuals can
    therefore be replaced, which keeps selection pressure milder than
    replace-worst.

    Args:
        tournament_size: Number of candidates per replacement tournament (default 3).

    Returns:
        A ReplacementPolicy callable.

    Raises:
        ValueError: If tournament_size is not positive.
    """
    if tournament_size <= 0:
        raise ValueError(f"tournament_size must be positive, got {tournament_size}")

    def policy(pop: Population, n_children: int, rng: np.random.Generator) -> np.ndarray:
        """Return n_children distinct slots chosen by reverse tournaments.

        Raises:
            ValueError: If n_children is not in [1, len(pop)] or the population
                has unevaluated individuals.
        """
        if n_children <= 0 or n_children > len(pop):
            raise ValueError(f"n_children must be in [1, {len(pop)}], got {n_children}")
        fitness = pop.require_evaluated()
        available = np.arange(len(pop), dtype=np.intp)

        chosen = np.empty(n_children, dtype=np.intp)
        for i in range(n_children):
            candidates = available[rng.integers(0, len(available), size=tournament_size)]

            loser = candidates[0]
            for c in candidates[1:]:
                if fitness[c] < fitness[loser]:
                    loser = c

            chosen[i] = loser
            available = available[available != loser]

        return chosen

    return policy
