"""Benchmark runner comparing the generational and steady-state drivers.

Both drivers optimize the same 16-element scenario (comm beam at 0 degrees,
sensing beams at 30, 45 and 60 degrees) with the same population size,
crossover and mutation rates. The steady-state budget equals the number of
offspring evaluations the generational run performs, so both searches spend
the same effort.

Results (parameters, fitness breakdowns, histories, radiation patterns and
timings) are written to a JSON file.

Usage:
    uv run python benchmarks/compare_drivers.py [output.json]
"""

import json
import logging
import sys
import time
from datetime import UTC, datetime
from pathlib import Path

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from jcas_ga import (  # noqa: E402
    FitnessConfig,
    GenerationalConfig,
    OptimizationResult,
    ScenarioConfig,
    SteadyStateConfig,
    generational_ga,
    steady_state_ga,
)

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


# Experiment parameters
N_ANTENNAS = 16
COMM_DIRECTION = 0.0
SENSING_DIRECTIONS = (30.0, 45.0, 60.0)
POP_SIZE = 100
N_GENERATIONS = 200
CROSSOVER_RATE = 0.8
MUTATION_RATE = 0.1
ELITISM_RATE = 0.1
PATTERN_STEP = 1.0
SEED = 42


def _summary(result: OptimizationResult, elapsed: float) -> dict:
    return {
        **result.to_dict(),
        "elapsed_seconds": elapsed,
        "pattern": result.pattern(step=PATTERN_STEP).to_dict(),
    }


def run_generational(scenario: ScenarioConfig, fitness_config: FitnessConfig, seed: int) -> dict:
    """Run the generational driver on the shared scenario.

    Args:
        scenario: Shared scenario.
        fitness_config: Shared objective weights.
        seed: Random seed for reproducibility.

    Returns:
        JSON-ready summary of the run.
    """
    config = GenerationalConfig(
        pop_size=POP_SIZE,
        max_generations=N_GENERATIONS,
        crossover_rate=CROSSOVER_RATE,
        mutation_rate=MUTATION_RATE,
        elitism_rate=ELITISM_RATE,
    )
    start_time = time.perf_counter()
    result = generational_ga(scenario, config, fitness_config, seed=seed)
    elapsed = time.perf_counter() - start_time
    logger.info(f"Generational: best={result.best_fitness:.4f} in {elapsed:.2f}s ({result.evaluations} evaluations)")
    return _summary(result, elapsed)


def run_steady_state(scenario: ScenarioConfig, fitness_config: FitnessConfig, seed: int, budget: int) -> dict:
    """Run the steady-state driver on the shared scenario.

    Args:
        scenario: Shared scenario.
        fitness_config: Shared objective weights.
        seed: Random seed for reproducibility.
        budget: Evaluations allowed after initialization.

    Returns:
        JSON-ready summary of the run.
    """
    config = SteadyStateConfig(
        pop_size=POP_SIZE,
        max_evaluations=budget,
        crossover_rate=CROSSOVER_RATE,
        mutation_rate=MUTATION_RATE,
    )
    start_time = time.perf_counter()
    result = steady_state_ga(scenario, config, fitness_config, seed=seed)
    elapsed = time.perf_counter() - start_time
    logger.info(
        f"Steady-state: best={result.best_fitness:.4f} in {elapsed:.2f}s "
        f"({result.cycles} cycles, stopped on {result.stop_reason})"
    )
    return _summary(result, elapsed)


def main() -> None:
    output_path = Path(sys.argv[1]) if len(sys.argv) > 1 else PROJECT_ROOT / "benchmarks" / "results.json"

    scenario = ScenarioConfig(
        n_antennas=N_ANTENNAS,
        comm_direction=COMM_DIRECTION,
        sensing_directions=SENSING_DIRECTIONS,
    )
    fitness_config = FitnessConfig()
    n_elite = int(POP_SIZE * ELITISM_RATE)
    budget = N_GENERATIONS * (POP_SIZE - n_elite)

    logger.info(f"Comparing drivers: M={N_ANTENNAS}, pop_size={POP_SIZE}, budget={budget} evaluations")
    generational = run_generational(scenario, fitness_config, SEED)
    steady_state = run_steady_state(scenario, fitness_config, SEED, budget)

    winner = "generational" if generational["best_fitness"] >= steady_state["best_fitness"] else "steady_state"
    logger.info(f"Higher best fitness: {winner}")

    output = {
        "timestamp": datetime.now(UTC).isoformat(),
        "parameters": {
            "scenario": scenario.to_dict(),
            "fitness": fitness_config.to_dict(),
            "pop_size": POP_SIZE,
            "n_generations": N_GENERATIONS,
            "crossover_rate": CROSSOVER_RATE,
            "mutation_rate": MUTATION_RATE,
            "elitism_rate": ELITISM_RATE,
            "steady_state_budget": budget,
            "seed": SEED,
        },
        "generational": generational,
        "steady_state": steady_state,
        "winner": winner,
    }
    output_path.write_text(json.dumps(output, indent=2))
    logger.info(f"Results written to {output_path}")


if __name__ == "__main__":
    main()
