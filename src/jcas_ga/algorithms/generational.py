"""Generational genetic algorithm for beamforming weights.

Every cycle replaces the whole population: the elite individuals are carried
over unchanged (aged by one cycle) and the remaining slots are filled with
children produced by tournament selection, crossover and mutation.

Example:
    >>> from jcas_ga import GenerationalConfig, ScenarioConfig, generational_ga
    >>>
    >>> scenario = ScenarioConfig(n_antennas=8, comm_direction=0.0, sensing_directions=(-40.0, 40.0))
    >>> config = GenerationalConfig(pop_size=50, max_generations=100, elite_count=5)
    >>> result = generational_ga(scenario, config, seed=42)
    >>> best_weights = result.best.comm_weights
    >>> print(f"Best fitness: {result.best_fitness:.3f} after {result.cycles} generations")
"""

import logging

from jcas_ga.algorithms.base import Callback, Driver, Evaluator
from jcas_ga.config import FitnessConfig, GenerationalConfig, ScenarioConfig
from jcas_ga.population import Individual, Population, clone
from jcas_ga.protocols import Crossover, Mutation, ParentSelector
from jcas_ga.results import OptimizationResult

logger = logging.getLogger(__name__)


class GenerationalGA(Driver):
    """Generational driver: evolving for max_generations cycles, then done.

    The running best across all cycles is reported, which is not necessarily
    the best member of the final population.
    """

    config: GenerationalConfig

    def __init__(
        self,
        scenario: ScenarioConfig | None = None,
        config: GenerationalConfig | None = None,
        fitness_config: FitnessConfig | None = None,
        seed: int | None = None,
        callback: Callback | None = None,
        evaluate: Evaluator | None = None,
        select: str | ParentSelector | None = None,
        crossover: str | Crossover | None = None,
        mutate: Mutation | None = None,
    ) -> None:
        super().__init__(
            scenario,
            config if config is not None else GenerationalConfig(),
            fitness_config,
            seed=seed,
            callback=callback,
            evaluate=evaluate,
            select=select,
            crossover=crossover,
            mutate=mutate,
        )

    def _stop_condition(self) -> str | None:
        if self.cycle >= self.config.max_generations:
            return "max_generations"
        return None

    def step(self) -> None:
        """Run one generation.

        Algorithm Flow:
            1. Carry the n_elite best individuals over (stable ranking, aged by one)
            2. Select two parents by tournament, cross them and mutate the children
            3. Repeat 2 until the new population is full (an odd surplus child is discarded)
            4. Replace the population, evaluate new individuals, update the running best
        """
        pop = self._require_population()
        pop_size = len(pop)

        next_generation: list[Individual] = [clone(pop[i]).aged() for i in pop.ranked_indices()[: self.config.n_elite]]

        while len(next_generation) < pop_size:
            p1, p2 = self.select(pop, 2, self.rng)
            child1, child2 = self.crossover(pop[p1], pop[p2], self.rng)
            next_generation.append(self.mutate(child1, self.rng))
            if len(next_generation) < pop_size:
                next_generation.append(self.mutate(child2, self.rng))

        self.population = Population(next_generation)
        self._evaluate_population()
        self.cycle += 1
        self._update_best()
        self._after_cycle()


def generational_ga(
    scenario: ScenarioConfig | None = None,
    config: GenerationalConfig | None = None,
    fitness_config: FitnessConfig | None = None,
    seed: int | None = None,
    callback: Callback | None = None,
    evaluate: Evaluator | None = None,
    select: str | ParentSelector | None = None,
    crossover: str | Crossover | None = None,
    mutate: Mutation | None = None,
    population: Population | None = None,
) -> OptimizationResult:
    """Run the generational genetic algorithm.

    Args:
        scenario: Array geometry and directions (default ScenarioConfig()).
        config: Generational settings (default GenerationalConfig()).
        fitness_config: Objective weights (default FitnessConfig()).
        seed: Random seed for reproducibility. If None, uses system entropy.
        callback: Optional callback called at the start of each generation.
            Signature: (result: OptimizationResult, generation: int) -> bool
            If callback returns True, optimization stops early.
        evaluate: Custom evaluator replacing the configured objective.
        select: Selection name or ParentSelector (default config.selection).
        crossover: Crossover name or Crossover callable (default config.crossover).
        mutate: Custom Mutation callable.
        population: Optional prepared initial population.

    Returns:
        OptimizationResult with the running best individual, the per-generation
        history and stop_reason "max_generations" (or "callback").

    Raises:
        ValueError: If the prepared population does not match the configuration.
        KeyError: If a strategy name is not registered.
    """
    driver = GenerationalGA(
        scenario,
        config,
        fitness_config,
        seed=seed,
        callback=callback,
        evaluate=evaluate,
        select=select,
        crossover=crossover,
        mutate=mutate,
    )
    return driver.run(population)
