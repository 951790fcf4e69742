"""Gaussian mutation of complex weight magnitudes and phases."""

import math

import numpy as np

from jcas_ga.population import Individual, normalize
from jcas_ga.primitives import from_polar, gaussian_noise, to_polar, wrap_phase


def gaussian_mutation(
    mutation_rate: float = 0.1,
    magnitude_sigma: float = 0.1,
    phase_sigma: float = math.pi / 6,
    max_magnitude: float = 2.0,
):
    """Create a Gaussian mutation operator.

    Each element independently has its magnitude perturbed with probability
    mutation_rate and, in a separate draw, its phase perturbed with
    probability mutation_rate. Perturbations are Box-Muller normal deviates.
    Magnitudes are clamped to [0, max_magnitude], phases wrapped into
    [-pi, pi), and the vector renormalized to unit power.

    An individual that was actually changed comes back unevaluated; an
    untouched one keeps its cached fitness.

    Args:
        mutation_rate: Per-element perturbation probability (default 0.1).
        magnitude_sigma: Standard deviation of magnitude noise (default 0.1).
        phase_sigma: Standard deviation of phase noise in radians (default pi/6).
        max_magnitude: Upper magnitude clamp before normalization (default 2.0).

    Returns:
        A Mutation callable ``(individual, rng) -> individual``.

    Raises:
        ValueError: If mutation_rate is outside [0, 1], a sigma is negative or
            max_magnitude is not positive.

    Example:
        >>> mutate = gaussian_mutation(mutation_rate=0.2)
        >>> child = mutate(child, rng)
    """
    if not 0.0 <= mutation_rate <= 1.0:
        raise ValueError(f"mutation_rate must be in [0, 1], got {mutation_rate}")
    if magnitude_sigma < 0 or phase_sigma < 0:
        raise ValueError(f"sigmas must be non-negative, got {magnitude_sigma} and {phase_sigma}")
    if max_magnitude <= 0:
        raise ValueError(f"max_magnitude must be positive, got {max_magnitude}")

    def perturb(weights: np.ndarray, rng: np.random.Generator) -> tuple[np.ndarray, bool]:
        n = len(weights)
        magnitude, phase = to_polar(weights)

        mag_mask = rng.random(n) < mutation_rate
        phase_mask = rng.random(n) < mutation_rate
        if not (np.any(mag_mask) or np.any(phase_mask)):
            return weights, False

        magnitude = np.where(mag_mask, magnitude + gaussian_noise(rng, n, magnitude_sigma), magnitude)
        phase = np.where(phase_mask, phase + gaussian_noise(rng, n, phase_sigma), phase)
        mutated = from_polar(np.clip(magnitude, 0.0, max_magnitude), wrap_phase(phase))
        return normalize(mutated), True

    def mutate(individual: Individual, rng: np.random.Generator) -> Individual:
        comm, comm_changed = perturb(individual.comm_weights, rng)
        sensing, sensing_changed = None, False
        if individual.sensing_weights is not None:
            sensing, sensing_changed = perturb(individual.sensing_weights, rng)

        if not (comm_changed or sensing_changed):
            return individual
        return Individual(comm_weights=comm, sensing_weights=sensing, age=individual.age)

    return mutate
