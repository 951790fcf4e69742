"""Parent selection strategies."""

from jcas_ga.registry import SelectionRegistry
from jcas_ga.selection.roulette import roulette_wheel
from jcas_ga.selection.tournament import fitness_tournament

# Register built-in selection strategies
SelectionRegistry.register("tournament", fitness_tournament)
SelectionRegistry.register("roulette", roulette_wheel)

__all__ = ["fitness_tournament", "roulette_wheel"]
