"""Uniform linear array (ULA) response model.

The far-field steering vector of an M-element ULA with element spacing d
(in wavelengths) toward angle theta has unit-magnitude entries with phase
2 * pi * d * m * sin(theta). At the default half-wavelength spacing this is
pi * m * sin(theta).
"""

import numpy as np

HALF_WAVELENGTH = 0.5


def _check_array(n_antennas: int, spacing: float) -> None:
    if not isinstance(n_antennas, (int, np.integer)) or isinstance(n_antennas, bool):
        raise TypeError(f"n_antennas must be an integer, got {type(n_antennas).__name__}")
    if n_antennas <= 0:
        raise ValueError(f"n_antennas must be positive, got {n_antennas}")
    if spacing <= 0:
        raise ValueError(f"spacing must be positive, got {spacing}")


def array_response(n_antennas: int, angle_deg: float, spacing: float = HALF_WAVELENGTH) -> np.ndarray:
    """Compute the ULA steering vector toward one angle.

    Args:
        n_antennas: Number of array elements M.
        angle_deg: Angle from broadside in degrees.
        spacing: Element spacing in wavelengths (default 0.5).

    Returns:
        Complex array of shape (M,) with unit-magnitude entries.

    Example:
        >>> a = array_response(4, 0.0)
        >>> np.allclose(a, 1.0)
        True
    """
    _check_array(n_antennas, spacing)
    m = np.arange(n_antennas)
    return np.exp(1j * 2.0 * np.pi * spacing * m * np.sin(np.deg2rad(angle_deg)))


def steering_matrix(n_antennas: int, angles_deg: np.ndarray, spacing: float = HALF_WAVELENGTH) -> np.ndarray:
    """Stack steering vectors for several angles.

    Args:
        n_antennas: Number of array elements M.
        angles_deg: Angles in degrees, shape (K,).
        spacing: Element spacing in wavelengths.

    Returns:
        Complex array of shape (K, M); row k is array_response(M, angles_deg[k]).
    """
    _check_array(n_antennas, spacing)
    angles = np.atleast_1d(np.asarray(angles_deg, dtype=np.float64))
    m = np.arange(n_antennas)
    return np.exp(1j * 2.0 * np.pi * spacing * np.outer(np.sin(np.deg2rad(angles)), m))


def angle_sweep(start: float = -90.0, stop: float = 90.0, step: float = 1.0) -> np.ndarray:
    """Return the inclusive angular grid start, start + step, ..., stop."""
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    if stop < start:
        raise ValueError(f"stop ({stop}) must not be below start ({start})")
    n_steps = int(np.floor((stop - start) / step + 1e-9))
    return start + step * np.arange(n_steps + 1)
