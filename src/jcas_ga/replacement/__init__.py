"""Steady-state replacement policies."""

from jcas_ga.registry import ReplacementRegistry
from jcas_ga.replacement.tournament import reverse_tournament
from jcas_ga.replacement.worst import replace_worst

# Register built-in replacement policies
ReplacementRegistry.register("worst", replace_worst)
ReplacementRegistry.register("tournament", reverse_tournament)

__all__ = ["replace_worst", "reverse_tournament"]
