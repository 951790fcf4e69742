"""Beamforming gain and radiation-pattern evaluation.

Gains are computed as |sum_m w[m] * conj(a[m])| where a is the ULA steering
vector. The conjugate is always taken on the steering vector. For dual-beam
individuals the communication and sensing beams are combined by magnitude as
sqrt(rho) * |comm| + sqrt(1 - rho) * |sensing|, so the two beams never cancel.
"""

from dataclasses import dataclass

import numpy as np

from jcas_ga.array import HALF_WAVELENGTH, angle_sweep, array_response, steering_matrix
from jcas_ga.population import Individual
from jcas_ga.primitives import ComplexWeight

DB_EPSILON = 1e-10


def _responses(weights: np.ndarray, angles_deg: np.ndarray, spacing: float) -> np.ndarray:
    steering = steering_matrix(len(weights), angles_deg, spacing)
    return steering.conj() @ weights


def beam_gain(weights: np.ndarray, angle_deg: float, spacing: float = HALF_WAVELENGTH) -> float:
    """Return the response magnitude of a weight vector toward one angle.

    The response sum_m w[m] * conj(a[m]) is accumulated element by element
    with ComplexWeight arithmetic. beam_gains is the vectorised equivalent.

    Example:
        >>> beam_gain(np.array([1.0 + 0j]), 37.0)
        1.0
    """
    weights = np.asarray(weights, dtype=np.complex128)
    steering = array_response(len(weights), angle_deg, spacing)
    response = ComplexWeight(0.0)
    for w, a in zip(weights, steering):
        response = response.add(ComplexWeight.from_complex(w).multiply(ComplexWeight.from_complex(a).conjugate()))
    return response.magnitude


def beam_gains(weights: np.ndarray, angles_deg: np.ndarray, spacing: float = HALF_WAVELENGTH) -> np.ndarray:
    """Vectorised beam_gain over several angles, shape (K,)."""
    return np.abs(_responses(np.asarray(weights), angles_deg, spacing))


def combined_response(
    comm_weights: np.ndarray,
    sensing_weights: np.ndarray,
    angles_deg: np.ndarray,
    rho: float,
    spacing: float = HALF_WAVELENGTH,
) -> np.ndarray:
    """Dual-beam response magnitude sqrt(rho) * |comm| + sqrt(1 - rho) * |sensing|.

    The result is real and non-negative. Phases of the two beams do not interact.
    """
    if not 0.0 <= rho <= 1.0:
        raise ValueError(f"rho must be in [0, 1], got {rho}")
    comm = _responses(comm_weights, angles_deg, spacing)
    sensing = _responses(sensing_weights, angles_deg, spacing)
    return np.sqrt(rho) * np.abs(comm) + np.sqrt(1.0 - rho) * np.abs(sensing)


def individual_gains(
    individual: Individual,
    angles_deg: np.ndarray,
    rho: float = 1.0,
    spacing: float = HALF_WAVELENGTH,
) -> np.ndarray:
    """Gains of an individual: single-beam response, or the combined dual-beam response."""
    if individual.sensing_weights is None:
        return beam_gains(individual.comm_weights, angles_deg, spacing)
    return combined_response(individual.comm_weights, individual.sensing_weights, angles_deg, rho, spacing)


@dataclass(frozen=True)
class RadiationPattern:
    """Sampled radiation pattern.

    Attributes:
        angles: Sweep angles in degrees, shape (K,).
        magnitude: Response magnitude per angle, shape (K,).
        magnitude_db: 20 * log10(magnitude + 1e-10), shape (K,).
    """

    angles: np.ndarray
    magnitude: np.ndarray
    magnitude_db: np.ndarray

    def __post_init__(self) -> None:
        n = len(self.angles)
        if len(self.magnitude) != n or len(self.magnitude_db) != n:
            raise ValueError("angles, magnitude and magnitude_db must have the same length")
        object.__setattr__(self, "angles", np.array(self.angles, dtype=np.float64))
        object.__setattr__(self, "magnitude", np.array(self.magnitude, dtype=np.float64))
        object.__setattr__(self, "magnitude_db", np.array(self.magnitude_db, dtype=np.float64))

    def __len__(self) -> int:
        return len(self.angles)

    def rows(self) -> list[tuple[float, float, float]]:
        """Return (angle, magnitude, magnitude_db) triples in sweep order."""
        return [(float(a), float(m), float(db)) for a, m, db in zip(self.angles, self.magnitude, self.magnitude_db)]

    @property
    def peak_angle(self) -> float:
        """Angle of the strongest response (first one on ties)."""
        return float(self.angles[int(np.argmax(self.magnitude))])

    def to_dict(self) -> dict[str, list[float]]:
        return {
            "angles": self.angles.tolist(),
            "magnitude": self.magnitude.tolist(),
            "magnitude_db": self.magnitude_db.tolist(),
        }


def radiation_pattern(
    source: Individual | np.ndarray,
    step: float = 1.0,
    rho: float = 1.0,
    spacing: float = HALF_WAVELENGTH,
) -> RadiationPattern:
    """Evaluate the response over the -90..90 degree sweep.

    Args:
        source: A weight vector or an Individual (dual-beam individuals use the
            combined response weighted by rho).
        step: Angular resolution in degrees.
        rho: Communication power ratio for dual-beam individuals.
        spacing: Element spacing in wavelengths.

    Returns:
        RadiationPattern with one entry per sweep angle.
    """
    angles = angle_sweep(-90.0, 90.0, step)
    if isinstance(source, Individual):
        magnitude = individual_gains(source, angles, rho, spacing)
    else:
        magnitude = beam_gains(np.asarray(source), angles, spacing)
    return RadiationPattern(angles=angles, magnitude=magnitude, magnitude_db=20.0 * np.log10(magnitude + DB_EPSILON))
