"""Crossover operators for complex weight vectors.

All operators are factories returning a Crossover callable
``(parent1, parent2, rng) -> (child1, child2)``:

- single_point_crossover: swap tails after a random cut index
- uniform_crossover: swap each element with probability 0.5
- blend_crossover: BLX-alpha on magnitude and phase

With probability 1 - crossover_rate no recombination happens and the children
are value copies of the parents. Every child is renormalized to unit power,
unevaluated and of age 0. Dual-beam individuals apply the same cut or swap
mask to both weight vectors.
"""

from collections.abc import Callable

import numpy as np

from jcas_ga.population import Individual, normalize
from jcas_ga.primitives import from_polar, to_polar, wrap_phase

Pair = tuple[Individual, Individual]

MIN_BLEND_MAGNITUDE = 0.01


def _check_rate(crossover_rate: float) -> None:
    if not 0.0 <= crossover_rate <= 1.0:
        raise ValueError(f"crossover_rate must be in [0, 1], got {crossover_rate}")


def _check_parents(parent1: Individual, parent2: Individual) -> None:
    if parent1.n_antennas != parent2.n_antennas:
        raise ValueError(f"parents have {parent1.n_antennas} and {parent2.n_antennas} antennas")
    if parent1.dual_beam != parent2.dual_beam:
        raise ValueError("cannot cross a single-beam with a dual-beam individual")


def _child(vectors: list[np.ndarray]) -> Individual:
    comm = normalize(vectors[0])
    sensing = normalize(vectors[1]) if len(vectors) > 1 else None
    return Individual(comm_weights=comm, sensing_weights=sensing)


def _copy_children(parent1: Individual, parent2: Individual) -> Pair:
    return _child(list(parent1.weight_vectors)), _child(list(parent2.weight_vectors))


def _masked_crossover(
    crossover_rate: float,
    make_mask: Callable[[int, np.random.Generator], np.ndarray],
) -> Callable[[Individual, Individual, np.random.Generator], Pair]:
    """Build a crossover where child1 takes parent2's element wherever the mask is True."""
    _check_rate(crossover_rate)

    def crossover(parent1: Individual, parent2: Individual, rng: np.random.Generator) -> Pair:
        _check_parents(parent1, parent2)
        if rng.random() >= crossover_rate:
            return _copy_children(parent1, parent2)

        swap = make_mask(parent1.n_antennas, rng)
        vectors1, vectors2 = [], []
        for w1, w2 in zip(parent1.weight_vectors, parent2.weight_vectors):
            vectors1.append(np.where(swap, w2, w1))
            vectors2.append(np.where(swap, w1, w2))
        return _child(vectors1), _child(vectors2)

    return crossover


def single_point_crossover(crossover_rate: float = 0.8):
    """Create a single-point crossover.

    A cut index c is drawn uniformly from [0, M); child1 = p1[:c] + p2[c:] and
    child2 = p2[:c] + p1[c:].

    Example:
        >>> crossover = single_point_crossover(crossover_rate=1.0)
        >>> child1, child2 = crossover(p1, p2, rng)
    """

    def tail_mask(n: int, rng: np.random.Generator) -> np.ndarray:
        cut = int(rng.integers(0, n))
        return np.arange(n) >= cut

    return _masked_crossover(crossover_rate, tail_mask)


def uniform_crossover(crossover_rate: float = 0.8):
    """Create a uniform crossover: each element comes from either parent with probability 0.5."""

    def coin_mask(n: int, rng: np.random.Generator) -> np.ndarray:
        return rng.random(n) >= 0.5

    return _masked_crossover(crossover_rate, coin_mask)


def blend_crossover(crossover_rate: float = 0.8, blend_alpha: float = 0.5):
    """Create a BLX-alpha crossover on magnitude and phase.

    For every element, each child's magnitude and phase are sampled uniformly
    from [lo - alpha * r, hi + alpha * r] where lo/hi are the parents' values
    and r = hi - lo. Magnitudes are floored at 0.01 and phases wrapped into
    [-pi, pi) before normalization.

    Args:
        crossover_rate: Probability of recombining (default 0.8).
        blend_alpha: Interval extension factor on each side (default 0.5).

    Raises:
        ValueError: If crossover_rate is outside [0, 1] or blend_alpha is negative.
    """
    _check_rate(crossover_rate)
    if blend_alpha < 0:
        raise ValueError(f"blend_alpha must be non-negative, got {blend_alpha}")

    def blend(w1: np.ndarray, w2: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        mag1, phase1 = to_polar(w1)
        mag2, phase2 = to_polar(w2)
        n = len(w1)

        mag_lo, mag_hi = np.minimum(mag1, mag2), np.maximum(mag1, mag2)
        mag_range = mag_hi - mag_lo
        magnitude = mag_lo - blend_alpha * mag_range + rng.random(n) * mag_range * (1.0 + 2.0 * blend_alpha)

        phase_lo, phase_hi = np.minimum(phase1, phase2), np.maximum(phase1, phase2)
        phase_range = phase_hi - phase_lo
        phase = phase_lo - blend_alpha * phase_range + rng.random(n) * phase_range * (1.0 + 2.0 * blend_alpha)

        return from_polar(np.maximum(MIN_BLEND_MAGNITUDE, magnitude), wrap_phase(phase))

    def crossover(parent1: Individual, parent2: Individual, rng: np.random.Generator) -> Pair:
        _check_parents(parent1, parent2)
        if rng.random() >= crossover_rate:
            return _copy_children(parent1, parent2)

        vectors1, vectors2 = [], []
        for w1, w2 in zip(parent1.weight_vectors, parent2.weight_vectors):
            vectors1.append(blend(w1, w2, rng))
            vectors2.append(blend(w1, w2, rng))
        return _child(vectors1), _child(vectors2)

    return crossover
