"""Shared machinery of the generational and steady-state drivers.

A driver owns one Population for the duration of a run and is the only code
that writes to it. It resolves its strategies from the registries (or takes
callables directly), evaluates individuals, tracks the running best and
records periodic snapshots.
"""

import logging
from collections.abc import Callable

import numpy as np

# Import strategy packages to trigger registration
import jcas_ga.operators  # noqa: F401
import jcas_ga.replacement  # noqa: F401
import jcas_ga.selection  # noqa: F401
from jcas_ga.config import EvolutionConfig, FitnessConfig, ScenarioConfig
from jcas_ga.fitness import FitnessBreakdown, build_fitness
from jcas_ga.operators import gaussian_mutation
from jcas_ga.population import Individual, Population, clone, diversity, initialize
from jcas_ga.protocols import Crossover, Mutation, ParentSelector
from jcas_ga.registry import CrossoverRegistry, SelectionRegistry
from jcas_ga.results import HistoryRecord, OptimizationResult

logger = logging.getLogger(__name__)

Evaluator = Callable[[Individual], FitnessBreakdown]
Callback = Callable[[OptimizationResult, int], bool]


class Driver:
    """Base class for optimizer drivers.

    Subclasses implement ``step()`` (one cycle) and ``_stop_condition()``
    (the stop reason, or None while the run should continue).

    Evaluations of the initial population count toward ``evaluations`` unless
    a subclass sets ``counts_initial_evaluations`` to False; they are always
    available as ``initial_evaluations``.

    Args:
        scenario: Array geometry and directions. Defaults to ScenarioConfig().
        config: Driver configuration.
        fitness_config: Objective weights for the "penalty" objective.
        seed: Seed of the run's single random stream. None uses system entropy.
        callback: Called before every cycle with the current result and cycle
            index; returning True stops the run.
        evaluate: Custom evaluator replacing the configured objective.
        select: Selection strategy name or ParentSelector, overriding config.selection.
        crossover: Crossover name or Crossover callable, overriding config.crossover.
        mutate: Mutation callable overriding the configured Gaussian mutation.

    Raises:
        KeyError: If a strategy name is not registered.
    """

    counts_initial_evaluations = True

    def __init__(
        self,
        scenario: ScenarioConfig | None,
        config: EvolutionConfig,
        fitness_config: FitnessConfig | None = None,
        seed: int | None = None,
        callback: Callback | None = None,
        evaluate: Evaluator | None = None,
        select: str | ParentSelector | None = None,
        crossover: str | Crossover | None = None,
        mutate: Mutation | None = None,
    ) -> None:
        self.scenario = scenario if scenario is not None else ScenarioConfig()
        self.config = config
        self.rng = np.random.default_rng(seed)
        self.callback = callback
        self.evaluate = evaluate if evaluate is not None else build_fitness(config.objective, self.scenario, fitness_config)

        select = config.selection if select is None else select
        self.select: ParentSelector = (
            SelectionRegistry.build(select, tournament_size=config.tournament_size) if isinstance(select, str) else select
        )
        crossover = config.crossover if crossover is None else crossover
        self.crossover: Crossover = (
            CrossoverRegistry.build(crossover, crossover_rate=config.crossover_rate, blend_alpha=config.blend_alpha)
            if isinstance(crossover, str)
            else crossover
        )
        self.mutate: Mutation = (
            mutate
            if mutate is not None
            else gaussian_mutation(
                mutation_rate=config.mutation_rate,
                magnitude_sigma=config.magnitude_sigma,
                phase_sigma=config.phase_sigma,
                max_magnitude=config.max_magnitude,
            )
        )

        self.population: Population | None = None
        self.best: Individual | None = None
        self.cycle = 0
        self.evaluations = 0
        self.initial_evaluations = 0
        self.history: list[HistoryRecord] = []
        self.stop_reason: str | None = None

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def start(self, population: Population | None = None) -> Population:
        """Initialize (or adopt a copy of) the population and evaluate it.

        Args:
            population: Optional prepared population. It is copied, so the
                caller's object is never mutated by the run, and every slot is
                re-scored by this driver's evaluator.

        Raises:
            ValueError: If the population does not match the configured size,
                antenna count or beam mode.
        """
        if population is None:
            population = initialize(self.rng, self.config.pop_size, self.scenario.n_antennas, self.scenario.dual_beam)
        else:
            if len(population) != self.config.pop_size:
                raise ValueError(f"population has {len(population)} individuals, expected {self.config.pop_size}")
            if population.n_antennas != self.scenario.n_antennas:
                raise ValueError(
                    f"population has {population.n_antennas} antennas, expected {self.scenario.n_antennas}"
                )
            if population.dual_beam != self.scenario.dual_beam:
                raise ValueError("population beam mode does not match scenario.dual_beam")
            population = Population([clone(ind).invalidated() for ind in population])

        self.population = population
        self.cycle = 0
        self.evaluations = 0
        self.history = []
        self.best = None
        self.stop_reason = None
        self.initial_evaluations = self._evaluate_population()
        if not self.counts_initial_evaluations:
            self.evaluations = 0
        self._update_best()
        self._snapshot()
        logger.info(
            f"{type(self).__name__} started: pop_size={len(population)}, n_antennas={self.scenario.n_antennas}, "
            f"best={self.best_fitness:.4f}"
        )
        return population

    def _require_population(self) -> Population:
        if self.population is None:
            raise RuntimeError("driver has not been started; call start() or run() first")
        return self.population

    # ------------------------------------------------------------------
    # Evaluation and bookkeeping
    # ------------------------------------------------------------------

    def _evaluated(self, individual: Individual) -> Individual:
        breakdown = self.evaluate(individual)
        self.evaluations += 1
        return individual.with_fitness(breakdown.fitness, breakdown)

    def _evaluate_population(self) -> int:
        pop = self._require_population()
        missing = pop.unevaluated_indices()
        for idx in missing:
            pop[idx] = self._evaluated(pop[idx])
        return len(missing)

    def _update_best(self) -> bool:
        """Adopt the population's best if it strictly beats the running best."""
        pop = self._require_population()
        idx = pop.best_index()
        candidate = pop[idx]
        assert candidate.fitness is not None  # Guaranteed by best_index()
        if self.best is None or candidate.fitness > self.best_fitness:
            self.best = clone(candidate)
            return True
        return False

    @property
    def best_fitness(self) -> float:
        if self.best is None or self.best.fitness is None:
            raise RuntimeError("no individual has been evaluated yet")
        return self.best.fitness

    def _snapshot(self) -> HistoryRecord:
        pop = self._require_population()
        record = HistoryRecord(
            cycle=self.cycle,
            evaluations=self.evaluations,
            best_fitness=self.best_fitness,
            average_fitness=float(np.mean(pop.require_evaluated())),
            diversity=diversity(pop),
        )
        self.history.append(record)
        return record

    def _after_cycle(self) -> None:
        """Record the snapshot and log progress at the configured cadences."""
        if self.cycle % self.config.history_interval == 0:
            self._snapshot()
        if self.cycle % self.config.log_interval == 0:
            pop = self._require_population()
            logger.info(
                f"Cycle {self.cycle}: best={self.best_fitness:.4f}, "
                f"avg={float(np.mean(pop.fitness)):.4f}, evaluations={self.evaluations}"
            )

    def result(self) -> OptimizationResult:
        """Current running-best result (final once run() has returned)."""
        pop = self._require_population()
        assert self.best is not None  # Set by start()
        return OptimizationResult(
            best=self.best,
            history=tuple(self.history),
            population=pop.copy(),
            cycles=self.cycle,
            evaluations=self.evaluations,
            stop_reason=self.stop_reason,
            scenario=self.scenario,
        )

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def _stop_condition(self) -> str | None:
        raise NotImplementedError

    def step(self) -> None:
        raise NotImplementedError

    def run(self, population: Population | None = None) -> OptimizationResult:
        """Run cycles until a stop condition holds or the callback asks to stop.

        Args:
            population: Optional prepared initial population (see start()).

        Returns:
            OptimizationResult with the running best and the snapshot history.
        """
        if self.population is None or population is not None:
            self.start(population)

        while (reason := self._stop_condition()) is None:
            if self.callback is not None and self.callback(self.result(), self.cycle):
                reason = "callback"
                break
            self.step()

        self.stop_reason = reason
        if self.history[-1].cycle != self.cycle:
            self._snapshot()
        logger.info(
            f"{type(self).__name__} finished ({reason}) after {self.cycle} cycles and "
            f"{self.evaluations} evaluations: best={self.best_fitness:.4f}"
        )
        return self.result()
