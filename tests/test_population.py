"""Tests for Individual and Population data structures.

This module tests the core data structures of the optimizer:
- Test behavior, not implementation
- Each test should fail for one reason
- Assert both exception type and message fragment for error tests
"""

import numpy as np
import pytest

from jcas_ga import ComplexWeight, Individual, Population, clone, diversity, initialize, normalize
from jcas_ga.population import random_individual, random_weights


class TestIndividualConstruction:
    """Tests for Individual construction and validation."""

    def test_single_beam_defaults(self) -> None:
        """A fresh individual is single-beam, unevaluated and of age 0."""
        ind = Individual(comm_weights=np.array([1.0 + 0j, 0.0 + 1j]))
        assert ind.n_antennas == 2
        assert not ind.dual_beam
        assert not ind.evaluated
        assert ind.age == 0
        assert ind.weight_vectors == (ind.comm_weights,)

    def test_weights_are_copied_to_complex(self) -> None:
        """Construction copies the caller's array and converts it to complex128."""
        raw = np.array([1.0, 2.0])
        ind = Individual(comm_weights=raw)
        raw[0] = 99.0
        assert ind.comm_weights.dtype == np.complex128
        assert ind.comm_weights[0] == 1.0

    def test_dual_beam(self) -> None:
        """Supplying sensing weights makes the individual dual-beam."""
        ind = Individual(comm_weights=np.ones(3), sensing_weights=np.ones(3))
        assert ind.dual_beam
        assert len(ind.weight_vectors) == 2

    def test_rejects_non_array_weights(self) -> None:
        """comm_weights must be a numpy array."""
        with pytest.raises(TypeError, match="comm_weights must be a numpy array"):
            Individual(comm_weights=[1.0, 2.0])  # type: ignore[arg-type]

    def test_rejects_2d_weights(self) -> None:
        """comm_weights must be one-dimensional."""
        with pytest.raises(ValueError, match="non-empty 1D array"):
            Individual(comm_weights=np.ones((2, 2)))

    def test_rejects_empty_weights(self) -> None:
        """comm_weights must have at least one element."""
        with pytest.raises(ValueError, match="non-empty 1D array"):
            Individual(comm_weights=np.array([], dtype=np.complex128))

    def test_rejects_mismatched_sensing_shape(self) -> None:
        """sensing_weights must match the comm weight shape."""
        with pytest.raises(ValueError, match="to match comm_weights"):
            Individual(comm_weights=np.ones(3), sensing_weights=np.ones(4))

    def test_rejects_negative_age(self) -> None:
        """Age cannot be negative."""
        with pytest.raises(ValueError, match="age must be non-negative"):
            Individual(comm_weights=np.ones(2), age=-1)

    def test_is_frozen(self) -> None:
        """Individuals are immutable."""
        ind = Individual(comm_weights=np.ones(2))
        with pytest.raises(AttributeError):
            ind.fitness = 1.0  # type: ignore[misc]


class TestIndividualUpdates:
    """Tests for the copy-on-update helpers."""

    def test_with_fitness_returns_new_individual(self) -> None:
        """with_fitness caches fitness on a new object."""
        ind = Individual(comm_weights=np.ones(2))
        scored = ind.with_fitness(2.5)
        assert scored.fitness == 2.5
        assert ind.fitness is None

    def test_invalidated_clears_fitness(self) -> None:
        """invalidated drops the cached fitness but keeps the weights."""
        ind = Individual(comm_weights=np.ones(2), fitness=1.0)
        cleared = ind.invalidated()
        assert cleared.fitness is None
        assert cleared.same_weights(ind)

    def test_aged_increments_age(self) -> None:
        """aged adds the number of survived cycles."""
        ind = Individual(comm_weights=np.ones(2), age=2)
        assert ind.aged().age == 3
        assert ind.aged(5).age == 7

    def test_as_complex_weights(self) -> None:
        """Comm weights convert to ComplexWeight values."""
        ind = Individual(comm_weights=np.array([1.0 + 2.0j, -0.5 + 0j]))
        assert ind.as_complex_weights() == (ComplexWeight(1.0, 2.0), ComplexWeight(-0.5, 0.0))

    def test_same_weights(self) -> None:
        """same_weights compares values, not identity, and respects beam mode."""
        a = Individual(comm_weights=np.array([1.0, 2.0]))
        b = Individual(comm_weights=np.array([1.0, 2.0]), fitness=3.0)
        c = Individual(comm_weights=np.array([1.0, 2.0]), sensing_weights=np.array([1.0, 2.0]))
        assert a.same_weights(b)
        assert not a.same_weights(c)


class TestNormalize:
    """Tests for unit-power normalization."""

    def test_unit_power(self, rng: np.random.Generator) -> None:
        """Normalized vectors have total power 1."""
        w = normalize(rng.normal(size=7) + 1j * rng.normal(size=7))
        assert float(np.sum(np.abs(w) ** 2)) == pytest.approx(1.0, abs=1e-12)

    def test_preserves_direction(self) -> None:
        """Normalization only rescales the vector."""
        w = np.array([3.0 + 0j, 0.0 + 4.0j])
        np.testing.assert_allclose(normalize(w), w / 5.0)

    def test_zero_vector_gets_equal_magnitudes(self) -> None:
        """A zero-power vector is reset to equal magnitudes 1/sqrt(M)."""
        w = normalize(np.zeros(4, dtype=np.complex128))
        np.testing.assert_allclose(np.abs(w), np.full(4, 0.5))

    def test_does_not_mutate_input(self) -> None:
        """normalize returns a new array."""
        w = np.array([2.0 + 0j, 0.0 + 0j])
        normalize(w)
        assert w[0] == 2.0


class TestInitialization:
    """Tests for random initialization and cloning."""

    def test_random_weights_are_normalized(self, rng: np.random.Generator) -> None:
        """Random weights have unit power."""
        assert float(np.sum(np.abs(random_weights(rng, 16)) ** 2)) == pytest.approx(1.0)

    def test_random_dual_beam_individual(self, rng: np.random.Generator) -> None:
        """Dual-beam random individuals carry two normalized vectors."""
        ind = random_individual(rng, 8, dual_beam=True)
        assert ind.dual_beam
        for w in ind.weight_vectors:
            assert float(np.sum(np.abs(w) ** 2)) == pytest.approx(1.0)

    def test_initialize_population(self, rng: np.random.Generator) -> None:
        """initialize creates pop_size unevaluated individuals of the requested size."""
        pop = initialize(rng, 12, 6)
        assert len(pop) == 12
        assert pop.n_antennas == 6
        assert len(pop.unevaluated_indices()) == 12

    def test_initialize_is_reproducible(self) -> None:
        """Same seed gives identical populations."""
        a = initialize(np.random.default_rng(5), 4, 3)
        b = initialize(np.random.default_rng(5), 4, 3)
        assert all(x.same_weights(y) for x, y in zip(a, b))

    def test_initialize_rejects_empty_population(self, rng: np.random.Generator) -> None:
        """pop_size must be positive."""
        with pytest.raises(ValueError, match="pop_size must be positive"):
            initialize(rng, 0, 4)

    def test_clone_copies_weight_storage(self) -> None:
        """Clones carry equal values in separate arrays."""
        ind = Individual(comm_weights=np.ones(3), fitness=1.5, age=4)
        copy = clone(ind)
        assert copy.same_weights(ind)
        assert copy.fitness == 1.5
        assert copy.age == 4
        assert copy.comm_weights is not ind.comm_weights
        assert not np.shares_memory(copy.comm_weights, ind.comm_weights)


class TestDiversity:
    """Tests for the mean pairwise magnitude distance."""

    def test_identical_population_has_zero_diversity(self) -> None:
        """Copies of one individual have diversity 0."""
        ind = Individual(comm_weights=normalize(np.arange(1, 5) + 0j))
        assert diversity([ind, clone(ind), clone(ind)]) == 0.0

    def test_single_individual(self) -> None:
        """Fewer than two individuals have diversity 0."""
        assert diversity([Individual(comm_weights=np.ones(2))]) == 0.0

    def test_known_distance(self) -> None:
        """Two individuals: diversity is the distance between their magnitude vectors."""
        a = Individual(comm_weights=np.array([1.0, 0.0]))
        b = Individual(comm_weights=np.array([0.0, 1.0j]))
        assert diversity([a, b]) == pytest.approx(np.sqrt(2.0))

    def test_ignores_phase(self) -> None:
        """Only magnitudes count."""
        a = Individual(comm_weights=np.array([1.0, 1.0]))
        b = Individual(comm_weights=np.array([-1.0, 1.0j]))
        assert diversity([a, b]) == 0.0

    def test_dual_beam_concatenates_magnitudes(self) -> None:
        """Sensing magnitudes contribute to the distance."""
        a = Individual(comm_weights=np.ones(2), sensing_weights=np.array([1.0, 0.0]))
        b = Individual(comm_weights=np.ones(2), sensing_weights=np.array([0.0, 1.0]))
        assert diversity([a, b]) == pytest.approx(np.sqrt(2.0))

    def test_random_population_is_diverse(self, random_population: Population) -> None:
        """A random population has clearly positive diversity."""
        assert diversity(random_population) > 0.1


class TestPopulation:
    """Tests for the slot-addressed Population container."""

    def test_rejects_empty(self) -> None:
        """A population needs at least one individual."""
        with pytest.raises(ValueError, match="at least one individual"):
            Population([])

    def test_rejects_mixed_antenna_counts(self) -> None:
        """All individuals must have the same number of antennas."""
        with pytest.raises(ValueError, match="antennas, expected"):
            Population([Individual(comm_weights=np.ones(2)), Individual(comm_weights=np.ones(3))])

    def test_rejects_mixed_beam_modes(self) -> None:
        """Single- and dual-beam individuals cannot be mixed."""
        with pytest.raises(ValueError, match="cannot mix"):
            Population(
                [Individual(comm_weights=np.ones(2)), Individual(comm_weights=np.ones(2), sensing_weights=np.ones(2))]
            )

    def test_setitem_replaces_slot(self, scored_population: Population) -> None:
        """Assigning to a slot replaces only that slot."""
        fresh = Individual(comm_weights=np.ones(4), fitness=9.0)
        scored_population[1] = fresh
        np.testing.assert_array_equal(scored_population.fitness, [3.0, 9.0, 4.0, 1.0, 5.0])

    def test_setitem_rejects_non_individual(self, scored_population: Population) -> None:
        """Slots only hold Individuals."""
        with pytest.raises(TypeError, match="population entries must be Individual"):
            scored_population[0] = np.ones(4)  # type: ignore[assignment]

    def test_getitem_rejects_slices(self, scored_population: Population) -> None:
        """Slots are addressed by integers."""
        with pytest.raises(TypeError, match="indices must be integers"):
            scored_population[0:2]  # type: ignore[index]

    def test_fitness_marks_unevaluated_as_nan(self, random_population: Population) -> None:
        """Unevaluated slots report NaN fitness."""
        assert np.all(np.isnan(random_population.fitness))

    def test_require_evaluated_raises_on_missing(self, random_population: Population) -> None:
        """Operations needing fitness reject unevaluated populations."""
        with pytest.raises(ValueError, match="unevaluated individuals"):
            random_population.require_evaluated()

    def test_best_index_first_on_ties(self) -> None:
        """The first maximum wins."""
        pop = Population([Individual(comm_weights=np.ones(2), fitness=f) for f in (1.0, 5.0, 5.0)])
        assert pop.best_index() == 1

    def test_ranked_indices_stable(self, scored_population: Population) -> None:
        """Ranking is stable: equal fitness keeps slot order."""
        np.testing.assert_array_equal(scored_population.ranked_indices(), [4, 2, 0, 1, 3])
        np.testing.assert_array_equal(scored_population.ranked_indices(descending=False), [1, 3, 0, 2, 4])

    def test_copy_is_independent(self, scored_population: Population) -> None:
        """Writing to a copy leaves the original untouched."""
        copy = scored_population.copy()
        copy[0] = Individual(comm_weights=np.ones(4), fitness=-1.0)
        assert scored_population[0].fitness == 3.0
        assert copy[1].same_weights(scored_population[1])
