"""Complex-number primitives for beamforming weights.

This module provides the scalar and vector building blocks shared by the
array-response model, the fitness function and the genetic operators:

- ComplexWeight: immutable (real, imag) value type with polar conversions,
  used by the per-angle gain and by Individual.as_complex_weights
- from_polar / to_polar: vectorised conversions on numpy complex arrays
- wrap_phase: map phases into the canonical interval [-pi, pi)
- total_power: radiated power (sum of squared magnitudes) of a weight vector
- gaussian_noise: Box-Muller normal deviates drawn from a seeded generator
"""

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ComplexWeight:
    """Immutable complex beamforming weight.

    Attributes:
        real: Real (in-phase) component.
        imag: Imaginary (quadrature) component.

    Example:
        >>> w = ComplexWeight.from_polar(1.0, 0.0)
        >>> w.multiply(ComplexWeight(0.0, 1.0))
        ComplexWeight(real=0.0, imag=1.0)
    """

    real: float
    imag: float = 0.0

    @classmethod
    def from_polar(cls, magnitude: float, phase: float) -> "ComplexWeight":
        """Build a weight from magnitude and phase (radians)."""
        return cls(magnitude * math.cos(phase), magnitude * math.sin(phase))

    @classmethod
    def from_complex(cls, value: complex) -> "ComplexWeight":
        return cls(float(value.real), float(value.imag))

    def add(self, other: "ComplexWeight") -> "ComplexWeight":
        return ComplexWeight(self.real + other.real, self.imag + other.imag)

    def multiply(self, other: "ComplexWeight") -> "ComplexWeight":
        """Complex product: (a+bi)(c+di) = (ac-bd) + (ad+bc)i."""
        return ComplexWeight(
            self.real * other.real - self.imag * other.imag,
            self.real * other.imag + self.imag * other.real,
        )

    def conjugate(self) -> "ComplexWeight":
        return ComplexWeight(self.real, -self.imag)

    @property
    def magnitude(self) -> float:
        return math.hypot(self.real, self.imag)

    @property
    def phase(self) -> float:
        """Phase angle in radians, atan2(imag, real); 0.0 for the zero weight."""
        return math.atan2(self.imag, self.real)

    def __complex__(self) -> complex:
        return complex(self.real, self.imag)


def from_polar(magnitude: np.ndarray, phase: np.ndarray) -> np.ndarray:
    """Vectorised polar to rectangular conversion.

    Args:
        magnitude: Non-negative magnitudes, shape (M,).
        phase: Phases in radians, shape (M,).

    Returns:
        Complex array of shape (M,).
    """
    return np.asarray(magnitude, dtype=np.float64) * np.exp(1j * np.asarray(phase, dtype=np.float64))


def to_polar(weights: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Split a complex weight vector into (magnitude, phase) arrays."""
    return np.abs(weights), np.angle(weights)


def wrap_phase(phase: np.ndarray | float) -> np.ndarray:
    """Wrap phases into [-pi, pi)."""
    return np.mod(np.asarray(phase, dtype=np.float64) + np.pi, 2.0 * np.pi) - np.pi


def total_power(weights: np.ndarray) -> float:
    """Return sum of squared magnitudes of a weight vector."""
    return float(np.sum(np.abs(weights) ** 2))


def gaussian_noise(rng: np.random.Generator, size: int, sigma: float = 1.0) -> np.ndarray:
    """Draw zero-mean normal deviates with the Box-Muller transform.

    Two uniform streams u1, u2 are turned into z = sqrt(-2 ln u1) cos(2 pi u2).
    u1 is drawn from (0, 1] so the logarithm stays finite.

    Args:
        rng: Seeded random number generator.
        size: Number of deviates.
        sigma: Standard deviation.

    Returns:
        Array of shape (size,).
    """
    u1 = 1.0 - rng.random(size)
    u2 = rng.random(size)
    return sigma * np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)
