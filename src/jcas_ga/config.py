"""Immutable run configuration for the beamforming optimizers.

Every tunable of a run lives in one of these frozen dataclasses and is
validated at construction time. Invalid values raise immediately; nothing is
silently clamped.

- ScenarioConfig: array geometry and the angular scenario (comm/sensing directions)
- FitnessConfig: objective weights and thresholds
- EvolutionConfig: settings shared by both drivers
- GenerationalConfig: generational driver (generation count, elitism)
- SteadyStateConfig: steady-state driver (evaluation budget, replacement,
  stagnation and diversity-injection settings)
"""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np

# Import strategy packages to trigger registration
import jcas_ga.operators  # noqa: F401
import jcas_ga.replacement  # noqa: F401
import jcas_ga.selection  # noqa: F401
from jcas_ga.registry import CrossoverRegistry, ReplacementRegistry, SelectionRegistry

SENSING_MODES = ("penalty", "average")
OBJECTIVES = ("penalty", "mask")


def _check_int(config: Any, name: str, minimum: int = 1) -> None:
    """Validate an integer field, storing numpy integers as plain ints."""
    value = getattr(config, name)
    if not isinstance(value, (int, np.integer)) or isinstance(value, bool):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if value < minimum:
        qualifier = "positive" if minimum == 1 else f">= {minimum}"
        raise ValueError(f"{name} must be {qualifier}, got {value}")
    object.__setattr__(config, name, int(value))


def _check_unit_interval(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in [0, 1], got {value}")


def _check_non_negative(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} must be a finite non-negative number, got {value}")


def _check_angle(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    if not -90.0 <= value <= 90.0:
        raise ValueError(f"{name} must be in [-90, 90] degrees, got {value}")


class _ConfigMixin:
    """to_dict/from_dict shared by all config dataclasses."""

    def to_dict(self) -> dict[str, Any]:
        out = dataclasses.asdict(self)  # type: ignore[call-overload]
        return {k: list(v) if isinstance(v, tuple) else v for k, v in out.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        """Build a config from a plain mapping.

        Raises:
            KeyError: If the mapping holds keys that are not fields of this config.
        """
        known = {f.name for f in dataclasses.fields(cls)}  # type: ignore[arg-type]
        unknown = sorted(set(data) - known)
        if unknown:
            raise KeyError(f"unknown {cls.__name__} keys: {', '.join(unknown)}")
        return cls(**dict(data))


@dataclass(frozen=True)
class ScenarioConfig(_ConfigMixin):
    """Array geometry and angular scenario, fixed for a run.

    Attributes:
        n_antennas: Number of ULA elements M.
        comm_direction: Communication direction in degrees.
        sensing_directions: Sensing directions in degrees (may be empty).
        rho: Communication power ratio for dual-beam individuals.
        dual_beam: Optimize separate comm and sensing weight vectors.
        spacing: Element spacing in wavelengths.
    """

    n_antennas: int = 16
    comm_direction: float = 0.0
    sensing_directions: tuple[float, ...] = (30.0, 45.0, 60.0)
    rho: float = 0.5
    dual_beam: bool = False
    spacing: float = 0.5

    def __post_init__(self) -> None:
        _check_int(self, "n_antennas")
        _check_angle("comm_direction", self.comm_direction)
        object.__setattr__(self, "sensing_directions", tuple(float(a) for a in self.sensing_directions))
        for angle in self.sensing_directions:
            _check_angle("sensing_directions entry", angle)
        _check_unit_interval("rho", self.rho)
        if not isinstance(self.dual_beam, bool):
            raise TypeError(f"dual_beam must be a bool, got {type(self.dual_beam).__name__}")
        if not self.spacing > 0:
            raise ValueError(f"spacing must be positive, got {self.spacing}")


@dataclass(frozen=True)
class FitnessConfig(_ConfigMixin):
    """Objective weights and thresholds.

    Attributes:
        comm_weight: Weight of the communication gain (alpha1).
        sensing_weight: Weight of the sensing term (alpha2).
        sidelobe_weight: Weight of the sidelobe penalty (alpha3).
        sensing_mode: "penalty" (squared shortfall below min_sensing_gain) or
            "average" (mean sensing gain rewarded).
        min_sensing_gain: Gmin.
        max_sidelobe: SLmax.
        exclusion_window: Sweep angles closer than this to a comm or sensing
            direction are main-beam and exempt from the sidelobe penalty.
        sidelobe_step: Resolution of the sidelobe sweep in degrees.
        power_gain: Use |response|^2 (True) or |response| (False) for every term.
    """

    comm_weight: float = 1.0
    sensing_weight: float = 0.5
    sidelobe_weight: float = 0.3
    sensing_mode: str = "penalty"
    min_sensing_gain: float = 0.5
    max_sidelobe: float = 0.1
    exclusion_window: float = 10.0
    sidelobe_step: float = 2.0
    power_gain: bool = True

    def __post_init__(self) -> None:
        _check_non_negative("comm_weight", self.comm_weight)
        _check_non_negative("sensing_weight", self.sensing_weight)
        _check_non_negative("sidelobe_weight", self.sidelobe_weight)
        if self.sensing_mode not in SENSING_MODES:
            raise ValueError(f"sensing_mode must be one of {SENSING_MODES}, got {self.sensing_mode!r}")
        _check_non_negative("min_sensing_gain", self.min_sensing_gain)
        _check_non_negative("max_sidelobe", self.max_sidelobe)
        _check_non_negative("exclusion_window", self.exclusion_window)
        if not self.sidelobe_step > 0:
            raise ValueError(f"sidelobe_step must be positive, got {self.sidelobe_step}")


@dataclass(frozen=True)
class EvolutionConfig(_ConfigMixin):
    """Settings shared by the generational and steady-state drivers.

    Strategy names must be registered when the config is built; unknown
    names raise the registry's KeyError listing the available names.
    """

    pop_size: int = 100
    crossover_rate: float = 0.8
    mutation_rate: float = 0.1
    tournament_size: int = 3
    selection: str = "tournament"
    crossover: str = "uniform"
    blend_alpha: float = 0.5
    magnitude_sigma: float = 0.1
    phase_sigma: float = math.pi / 6
    max_magnitude: float = 2.0
    objective: str = "penalty"
    history_interval: int = 1
    log_interval: int = 20

    def __post_init__(self) -> None:
        _check_int(self, "pop_size")
        _check_unit_interval("crossover_rate", self.crossover_rate)
        _check_unit_interval("mutation_rate", self.mutation_rate)
        _check_int(self, "tournament_size")
        for name in ("selection", "crossover", "objective"):
            if not isinstance(getattr(self, name), str):
                raise TypeError(f"{name} must be a strategy name, got {type(getattr(self, name)).__name__}")
        SelectionRegistry.require(self.selection)
        CrossoverRegistry.require(self.crossover)
        if self.objective not in OBJECTIVES:
            raise ValueError(f"objective must be one of {OBJECTIVES}, got {self.objective!r}")
        _check_non_negative("blend_alpha", self.blend_alpha)
        _check_non_negative("magnitude_sigma", self.magnitude_sigma)
        _check_non_negative("phase_sigma", self.phase_sigma)
        if not self.max_magnitude > 0:
            raise ValueError(f"max_magnitude must be positive, got {self.max_magnitude}")
        _check_int(self, "history_interval")
        _check_int(self, "log_interval")


@dataclass(frozen=True)
class GenerationalConfig(EvolutionConfig):
    """Generational driver settings.

    Attributes:
        max_generations: Number of cycles to run.
        elitism_rate: Fraction of the population carried over unchanged.
        elite_count: Explicit elite count; overrides elitism_rate when set.
    """

    max_generations: int = 200
    elitism_rate: float = 0.1
    elite_count: int | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_int(self, "max_generations")
        _check_unit_interval("elitism_rate", self.elitism_rate)
        if self.elite_count is not None:
            _check_int(self, "elite_count", minimum=0)
        if self.n_elite >= self.pop_size:
            raise ValueError(f"elite count ({self.n_elite}) must be smaller than pop_size ({self.pop_size})")

    @property
    def n_elite(self) -> int:
        if self.elite_count is not None:
            return self.elite_count
        return int(self.pop_size * self.elitism_rate)


@dataclass(frozen=True)
class SteadyStateConfig(EvolutionConfig):
    """Steady-state driver settings.

    Attributes:
        max_evaluations: Offspring (and injected) evaluations allowed after the
            initial population has been evaluated.
        offspring_size: Children produced and slots replaced per cycle.
        replacement: Replacement policy name ("worst" or "tournament").
        stagnation_limit: Stop after this many consecutive cycles without improvement.
        diversity_interval: Cycles between diversity checks.
        diversity_threshold: Diversity below which the worst slots are re-randomized.
        injection_fraction: Fraction of the population re-randomized on injection.
    """

    crossover: str = "blend"
    history_interval: int = 10
    log_interval: int = 500
    max_evaluations: int = 20_000
    offspring_size: int = 2
    replacement: str = "worst"
    stagnation_limit: int = 1000
    diversity_interval: int = 500
    diversity_threshold: float = 0.01
    injection_fraction: float = 0.2

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_int(self, "max_evaluations")
        _check_int(self, "offspring_size")
        if self.offspring_size > self.pop_size:
            raise ValueError(f"offspring_size ({self.offspring_size}) cannot exceed pop_size ({self.pop_size})")
        if not isinstance(self.replacement, str):
            raise TypeError(f"replacement must be a strategy name, got {type(self.replacement).__name__}")
        ReplacementRegistry.require(self.replacement)
        _check_int(self, "stagnation_limit")
        _check_int(self, "diversity_interval")
        _check_non_negative("diversity_threshold", self.diversity_threshold)
        _check_unit_interval("injection_fraction", self.injection_fraction)

    @property
    def n_inject(self) -> int:
        """Slots re-randomized by one diversity injection (at least one, never the whole population)."""
        return min(max(1, round(self.injection_fraction * self.pop_size)), max(self.pop_size - 1, 1))
