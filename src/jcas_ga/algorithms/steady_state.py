"""Steady-state genetic algorithm for beamforming weights.

Each cycle produces only offspring_size children, so the run is bounded by
an evaluation budget instead of a generation count. The driver carries the
extra state this needs: the budget consumed, a stagnation counter, and a
periodic diversity check that re-randomizes the worst slots of a collapsed
population.

Example:
    >>> from jcas_ga import ScenarioConfig, SteadyStateConfig, steady_state_ga
    >>>
    >>> scenario = ScenarioConfig(n_antennas=16, sensing_directions=(30.0, 45.0, 60.0))
    >>> config = SteadyStateConfig(pop_size=100, max_evaluations=20_000, replacement="tournament")
    >>> result = steady_state_ga(scenario, config, seed=7)
    >>> result.stop_reason in ("budget", "stagnation")
    True
"""

import logging

import numpy as np

from jcas_ga.algorithms.base import Callback, Driver, Evaluator
from jcas_ga.config import FitnessConfig, ScenarioConfig, SteadyStateConfig
from jcas_ga.population import Individual, Population, diversity, random_individual
from jcas_ga.protocols import Crossover, Mutation, ParentSelector, ReplacementPolicy
from jcas_ga.registry import ReplacementRegistry
from jcas_ga.results import OptimizationResult

logger = logging.getLogger(__name__)


class SteadyStateGA(Driver):
    """Steady-state driver with evaluation budget, stagnation stop and diversity injection.

    Stops when the budget of max_evaluations (offspring plus injected
    individuals, counted after the initial population) is used up, or when the
    stagnation counter exceeds stagnation_limit, whichever comes first.

    Individuals keep their age in this driver; only slots that are overwritten
    change.

    Args:
        replace: Replacement name or ReplacementPolicy, overriding config.replacement.
        See Driver for the remaining arguments.
    """

    config: SteadyStateConfig
    counts_initial_evaluations = False

    def __init__(
        self,
        scenario: ScenarioConfig | None = None,
        config: SteadyStateConfig | None = None,
        fitness_config: FitnessConfig | None = None,
        seed: int | None = None,
        callback: Callback | None = None,
        evaluate: Evaluator | None = None,
        select: str | ParentSelector | None = None,
        crossover: str | Crossover | None = None,
        mutate: Mutation | None = None,
        replace: str | ReplacementPolicy | None = None,
    ) -> None:
        super().__init__(
            scenario,
            config if config is not None else SteadyStateConfig(),
            fitness_config,
            seed=seed,
            callback=callback,
            evaluate=evaluate,
            select=select,
            crossover=crossover,
            mutate=mutate,
        )
        replace = self.config.replacement if replace is None else replace
        self.replace: ReplacementPolicy = (
            ReplacementRegistry.build(replace, tournament_size=self.config.tournament_size)
            if isinstance(replace, str)
            else replace
        )
        self.stagnation = 0
        self.injections = 0

    def start(self, population: Population | None = None) -> Population:
        self.stagnation = 0
        self.injections = 0
        return super().start(population)

    @property
    def remaining_evaluations(self) -> int:
        return max(0, self.config.max_evaluations - self.evaluations)

    def _stop_condition(self) -> str | None:
        if self.remaining_evaluations == 0:
            return "budget"
        if self.stagnation > self.config.stagnation_limit:
            return "stagnation"
        return None

    def _offspring(self, n_children: int) -> list[Individual]:
        pop = self._require_population()
        children: list[Individual] = []
        while len(children) < n_children:
            p1, p2 = self.select(pop, 2, self.rng)
            child1, child2 = self.crossover(pop[p1], pop[p2], self.rng)
            children.append(self._evaluated(self.mutate(child1, self.rng)))
            if len(children) < n_children:
                children.append(self._evaluated(self.mutate(child2, self.rng)))
        return children

    def step(self) -> np.ndarray:
        """Run one steady-state cycle.

        Algorithm Flow:
            1. Produce min(offspring_size, remaining budget) evaluated children
            2. Ask the replacement policy for that many distinct slots and overwrite them
            3. Update the running best, or increment the stagnation counter
            4. Every diversity_interval cycles, inject fresh individuals if diversity collapsed

        Returns:
            Slots overwritten by children this cycle (injections not included).

        Raises:
            RuntimeError: If the evaluation budget is already exhausted.
        """
        pop = self._require_population()
        n_children = min(self.config.offspring_size, self.remaining_evaluations)
        if n_children == 0:
            raise RuntimeError("evaluation budget exhausted")

        children = self._offspring(n_children)
        slots = self.replace(pop, len(children), self.rng)
        for slot, child in zip(slots, children):
            pop[int(slot)] = child

        self.cycle += 1
        if self._update_best():
            self.stagnation = 0
        else:
            self.stagnation += 1

        if self.cycle % self.config.diversity_interval == 0:
            self.check_diversity()

        self._after_cycle()
        return np.asarray(slots, dtype=np.intp)

    def check_diversity(self) -> float:
        """Measure diversity and inject fresh individuals if it fell below the threshold.

        Returns:
            The diversity measured before any injection.
        """
        measured = diversity(self._require_population())
        if measured < self.config.diversity_threshold:
            self.inject_diversity()
        return measured

    def inject_diversity(self) -> np.ndarray:
        """Replace the worst slots with freshly randomized, evaluated individuals.

        Injects round(injection_fraction * pop_size) individuals (at least one),
        limited by the remaining evaluation budget.

        Returns:
            The re-randomized slots.
        """
        pop = self._require_population()
        n_inject = min(self.config.n_inject, self.remaining_evaluations)
        slots = pop.ranked_indices(descending=False)[:n_inject]
        for slot in slots:
            fresh = random_individual(self.rng, self.scenario.n_antennas, self.scenario.dual_beam)
            pop[int(slot)] = self._evaluated(fresh)

        if n_inject > 0:
            self.injections += 1
            logger.info(f"Cycle {self.cycle}: diversity collapsed, re-randomized {n_inject} individuals")
            if self._update_best():
                self.stagnation = 0
        return slots


def steady_state_ga(
    scenario: ScenarioConfig | None = None,
    config: SteadyStateConfig | None = None,
    fitness_config: FitnessConfig | None = None,
    seed: int | None = None,
    callback: Callback | None = None,
    evaluate: Evaluator | None = None,
    select: str | ParentSelector | None = None,
    crossover: str | Crossover | None = None,
    mutate: Mutation | None = None,
    replace: str | ReplacementPolicy | None = None,
    population: Population | None = None,
) -> OptimizationResult:
    """Run the steady-state genetic algorithm.

    Args:
        scenario: Array geometry and directions (default ScenarioConfig()).
        config: Steady-state settings (default SteadyStateConfig()).
        fitness_config: Objective weights (default FitnessConfig()).
        seed: Random seed for reproducibility. If None, uses system entropy.
        callback: Optional callback called at the start of each cycle.
            Signature: (result: OptimizationResult, cycle: int) -> bool
            If callback returns True, optimization stops early.
        evaluate: Custom evaluator replacing the configured objective.
        select: Selection name or ParentSelector (default config.selection).
        crossover: Crossover name or Crossover callable (default config.crossover).
        mutate: Custom Mutation callable.
        replace: Replacement name ("worst", "tournament") or ReplacementPolicy.
        population: Optional prepared initial population.

    Returns:
        OptimizationResult whose evaluations count the budgeted evaluations and
        whose stop_reason is "budget", "stagnation" or "callback".

    Raises:
        ValueError: If the prepared population does not match the configuration.
        KeyError: If a strategy name is not registered.
    """
    driver = SteadyStateGA(
        scenario,
        config,
        fitness_config,
        seed=seed,
        callback=callback,
        evaluate=evaluate,
        select=select,
        crossover=crossover,
        mutate=mutate,
        replace=replace,
    )
    return driver.run(population)
