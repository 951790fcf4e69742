"""Tests for the beamforming fitness functions.

Test suite covering:
- TestBeamFitness: comm gain, sensing term and sidelobe penalty
- TestSidelobeRegion: main-beam exclusion of the sidelobe sweep
- TestPatternMatchFitness: mask-matching objective
- TestBuildFitness: objective lookup by name
"""

import numpy as np
import pytest

from jcas_ga import BeamFitness, FitnessConfig, Individual, PatternMatchFitness, ScenarioConfig, build_fitness
from jcas_ga.array import array_response
from jcas_ga.beamforming import beam_gains, combined_response
from jcas_ga.fitness import mainlobe_width
from jcas_ga.population import normalize

# =============================================================================
# BeamFitness
# =============================================================================


class TestBeamFitness:
    """Tests for the weighted comm / sensing / sidelobe objective."""

    def test_uniform_weights_reach_array_gain(self, comm_only_fitness: BeamFitness) -> None:
        """Equal in-phase unit-power weights give power gain M at broadside."""
        ind = Individual(comm_weights=np.full(4, 0.5 + 0j))
        breakdown = comm_only_fitness(ind)
        assert breakdown.fitness == pytest.approx(4.0)
        assert breakdown.comm_gain == pytest.approx(4.0)
        assert breakdown.sidelobe_penalty >= 0.0

    def test_single_antenna_gain_is_one(self) -> None:
        """With M = 1 and w = [1] the comm gain is exactly 1."""
        evaluate = BeamFitness(ScenarioConfig(n_antennas=1, sensing_directions=()), FitnessConfig(sidelobe_weight=0.0))
        assert evaluate(Individual(comm_weights=np.array([1.0 + 0j]))).comm_gain == pytest.approx(1.0)

    def test_is_deterministic(self, small_scenario: ScenarioConfig, rng: np.random.Generator) -> None:
        """Evaluating the same weights twice gives identical breakdowns."""
        evaluate = BeamFitness(small_scenario)
        ind = Individual(comm_weights=normalize(rng.normal(size=8) + 1j * rng.normal(size=8)))
        assert evaluate(ind) == evaluate(ind)

    def test_penalty_mode_matches_formula(self, small_scenario: ScenarioConfig, rng: np.random.Generator) -> None:
        """fitness = a1 G0 - a2 sum(max(0, Gmin - Gs)^2) - a3 sum(max(0, Gsl - SLmax)^2)."""
        config = FitnessConfig()
        evaluate = BeamFitness(small_scenario, config)
        weights = normalize(rng.normal(size=8) + 1j * rng.normal(size=8))
        breakdown = evaluate(Individual(comm_weights=weights))

        g_comm = beam_gains(weights, np.array([0.0]))[0] ** 2
        g_sense = beam_gains(weights, np.array([40.0])) ** 2
        g_side = beam_gains(weights, evaluate.sidelobe_angles) ** 2
        sensing_penalty = np.sum(np.clip(config.min_sensing_gain - g_sense, 0, None) ** 2)
        sidelobe_penalty = np.sum(np.clip(g_side - config.max_sidelobe, 0, None) ** 2)
        expected = g_comm - 0.5 * sensing_penalty - 0.3 * sidelobe_penalty

        assert breakdown.fitness == pytest.approx(expected)
        assert breakdown.comm_gain == pytest.approx(g_comm)
        assert breakdown.sensing_penalty == pytest.approx(sensing_penalty)
        assert breakdown.sensing_term == pytest.approx(-0.5 * sensing_penalty)
        assert breakdown.sidelobe_penalty == pytest.approx(sidelobe_penalty)

    def test_sensing_above_threshold_has_no_penalty(self) -> None:
        """A sensing direction with gain above Gmin contributes nothing in penalty mode."""
        scenario = ScenarioConfig(n_antennas=4, comm_direction=0.0, sensing_directions=(0.0,))
        evaluate = BeamFitness(scenario, FitnessConfig(sidelobe_weight=0.0))
        breakdown = evaluate(Individual(comm_weights=np.full(4, 0.5 + 0j)))
        assert breakdown.sensing_penalty == 0.0
        assert breakdown.fitness == pytest.approx(4.0)

    def test_average_mode_rewards_mean_sensing_gain(self, small_scenario: ScenarioConfig) -> None:
        """In average mode the sensing term is +a2 * mean(Gs)."""
        evaluate = BeamFitness(small_scenario, FitnessConfig(sensing_mode="average", sidelobe_weight=0.0))
        weights = normalize(array_response(8, 40.0))
        breakdown = evaluate(Individual(comm_weights=weights))
        g_sense = beam_gains(weights, np.array([40.0])) ** 2
        assert breakdown.sensing_term == pytest.approx(0.5 * float(np.mean(g_sense)))
        assert breakdown.sensing_penalty == 0.0

    def test_magnitude_gain_mode(self, comm_only_scenario: ScenarioConfig) -> None:
        """With power_gain=False the comm gain is |response| (sqrt(M) for matched weights)."""
        evaluate = BeamFitness(comm_only_scenario, FitnessConfig(sidelobe_weight=0.0, power_gain=False))
        assert evaluate(Individual(comm_weights=np.full(4, 0.5 + 0j))).fitness == pytest.approx(2.0)

    def test_steering_away_lowers_fitness(self, comm_only_fitness: BeamFitness) -> None:
        """A beam steered away from the comm direction scores below a broadside beam."""
        broadside = Individual(comm_weights=normalize(array_response(4, 0.0)))
        steered = Individual(comm_weights=normalize(array_response(4, 45.0)))
        assert comm_only_fitness(steered).fitness < comm_only_fitness(broadside).fitness

    def test_sidelobe_penalty_reduces_fitness(self, comm_only_scenario: ScenarioConfig) -> None:
        """Adding the sidelobe weight can only lower the fitness."""
        ind = Individual(comm_weights=normalize(np.array([1.0, -0.5j, 0.3, 1.0j])))
        plain = BeamFitness(comm_only_scenario, FitnessConfig(sidelobe_weight=0.0))(ind)
        penalized = BeamFitness(comm_only_scenario, FitnessConfig(sidelobe_weight=0.3))(ind)
        assert penalized.fitness <= plain.fitness

    def test_dual_beam_uses_combined_response(self, dual_scenario: ScenarioConfig, rng: np.random.Generator) -> None:
        """Dual-beam comm gain is (sqrt(rho) |comm| + sqrt(1 - rho) |sensing|)^2 at the comm direction."""
        evaluate = BeamFitness(dual_scenario)
        comm = normalize(rng.normal(size=8) + 1j * rng.normal(size=8))
        sensing = normalize(rng.normal(size=8) + 1j * rng.normal(size=8))
        breakdown = evaluate(Individual(comm_weights=comm, sensing_weights=sensing))
        expected = combined_response(comm, sensing, np.array([-20.0]), 0.6)[0] ** 2
        assert breakdown.comm_gain == pytest.approx(expected)

    def test_negated_sensing_beam_keeps_full_comm_gain(self) -> None:
        """Opposite-phase dual beams add their magnitudes instead of cancelling."""
        scenario = ScenarioConfig(n_antennas=4, comm_direction=0.0, sensing_directions=(), rho=0.5, dual_beam=True)
        evaluate = BeamFitness(scenario, FitnessConfig(sidelobe_weight=0.0))
        w = normalize(np.ones(4, dtype=np.complex128))
        breakdown = evaluate(Individual(comm_weights=w, sensing_weights=-w))
        assert breakdown.comm_gain == pytest.approx(8.0)

    def test_rejects_wrong_antenna_count(self, small_scenario: ScenarioConfig) -> None:
        """Individuals must match the scenario's array size."""
        evaluate = BeamFitness(small_scenario)
        with pytest.raises(ValueError, match="scenario expects 8"):
            evaluate(Individual(comm_weights=np.ones(4)))

    def test_breakdown_to_dict(self, comm_only_fitness: BeamFitness) -> None:
        """The breakdown serializes to plain floats."""
        data = comm_only_fitness(Individual(comm_weights=np.full(4, 0.5 + 0j))).to_dict()
        assert set(data) == {"fitness", "comm_gain", "sensing_term", "sensing_penalty", "sidelobe_penalty"}
        assert all(isinstance(v, float) for v in data.values())


# =============================================================================
# Sidelobe region
# =============================================================================


class TestSidelobeRegion:
    """Tests for the main-beam exclusion window."""

    def test_excludes_angles_within_window(self, small_scenario: ScenarioConfig) -> None:
        """Sweep angles closer than 10 degrees to a main beam are not sidelobes."""
        angles = BeamFitness(small_scenario).sidelobe_angles
        assert 0.0 not in angles
        assert 8.0 not in angles
        assert 32.0 not in angles
        assert 48.0 not in angles
        assert 10.0 in angles
        assert 30.0 in angles
        assert 50.0 in angles

    def test_sweep_size(self, small_scenario: ScenarioConfig) -> None:
        """A 2 degree sweep has 91 points; two beams each exclude 9 of them."""
        assert len(BeamFitness(small_scenario).sidelobe_angles) == 91 - 18

    def test_window_is_configurable(self, small_scenario: ScenarioConfig) -> None:
        """A zero window keeps the whole sweep."""
        evaluate = BeamFitness(small_scenario, FitnessConfig(exclusion_window=0.0))
        assert len(evaluate.sidelobe_angles) == 91


# =============================================================================
# PatternMatchFitness
# =============================================================================


class TestPatternMatchFitness:
    """Tests for the mask-matching objective."""

    def test_mainlobe_width(self) -> None:
        """Main-lobe width is 2 asin(1.2 / M) in degrees."""
        assert mainlobe_width(16) == pytest.approx(np.rad2deg(2 * np.arcsin(1.2 / 16)))
        assert mainlobe_width(16, scale=0.75) > mainlobe_width(16)

    def test_mainlobe_width_capped_for_tiny_arrays(self) -> None:
        """For M = 1 the asin argument is capped at 1."""
        assert mainlobe_width(1) == pytest.approx(180.0)

    def test_desired_mask_levels_single_beam(self, small_scenario: ScenarioConfig) -> None:
        """Single-beam masks are 1 inside a main lobe and 0 elsewhere."""
        evaluate = PatternMatchFitness(small_scenario)
        assert len(evaluate.desired) == 160
        assert set(np.unique(evaluate.desired)) == {0.0, 1.0}
        assert evaluate.desired[80] == 1.0  # 0 degrees

    def test_desired_mask_levels_dual_beam(self, dual_scenario: ScenarioConfig) -> None:
        """Dual-beam masks use sqrt(rho) for comm and sqrt(1 - rho) for sensing."""
        evaluate = PatternMatchFitness(dual_scenario)
        levels = set(np.round(np.unique(evaluate.desired), 12))
        assert levels <= {0.0, round(float(np.sqrt(0.6)), 12), round(float(np.sqrt(0.4)), 12)}
        assert round(float(np.sqrt(0.6)), 12) in levels

    def test_fitness_is_negative_mse(self, small_scenario: ScenarioConfig, rng: np.random.Generator) -> None:
        """fitness = -mean((|response| - desired)^2) and the MSE is reported as sidelobe_penalty."""
        evaluate = PatternMatchFitness(small_scenario)
        ind = Individual(comm_weights=normalize(rng.normal(size=8) + 1j * rng.normal(size=8)))
        breakdown = evaluate(ind)
        angles = -90.0 + (180.0 / 160) * np.arange(160)
        mse = np.mean((beam_gains(ind.comm_weights, angles) - evaluate.desired) ** 2)
        assert breakdown.fitness == pytest.approx(-mse)
        assert breakdown.sidelobe_penalty == pytest.approx(mse)
        assert breakdown.fitness <= 0.0

    def test_rejects_non_positive_samples(self, small_scenario: ScenarioConfig) -> None:
        """n_samples must be positive."""
        with pytest.raises(ValueError, match="n_samples must be positive"):
            PatternMatchFitness(small_scenario, n_samples=0)


class TestBuildFitness:
    """Tests for build_fitness()."""

    def test_penalty_objective(self, small_scenario: ScenarioConfig) -> None:
        assert isinstance(build_fitness("penalty", small_scenario), BeamFitness)

    def test_mask_objective(self, small_scenario: ScenarioConfig) -> None:
        assert isinstance(build_fitness("mask", small_scenario), PatternMatchFitness)

    def test_unknown_objective(self, small_scenario: ScenarioConfig) -> None:
        with pytest.raises(ValueError, match="unknown objective"):
            build_fitness("snr", small_scenario)
