"""Registry system for selection, crossover and replacement strategies.

Strategies are registered as factories under a name and retrieved with
configuration keyword arguments, so a run can choose its operators from the
plain strings held in its configuration:

- **SelectionRegistry**: parent selection (ParentSelector protocol)
- **CrossoverRegistry**: crossover operators (Crossover protocol)
- **ReplacementRegistry**: steady-state replacement policies (ReplacementPolicy protocol)

Basic usage:
    ```python
    from jcas_ga.registry import SelectionRegistry, list_selections

    selector = SelectionRegistry.get("tournament", tournament_size=3)
    parent_indices = selector(pop, 2, rng)

    available = list_selections()  # ["roulette", "tournament"]
    ```

Registering a custom policy:
    ```python
    from jcas_ga.registry import ReplacementRegistry

    def replace_oldest():
        def policy(pop, n_children, rng):
            ages = np.array([ind.age for ind in pop])
            return np.argsort(-ages, kind="stable")[:n_children].astype(np.intp)
        return policy

    ReplacementRegistry.register("oldest", replace_oldest)
    ```
"""

import inspect
from collections.abc import Callable
from typing import Any, ClassVar

from jcas_ga.protocols import Crossover, ParentSelector, ReplacementPolicy


class StrategyRegistry:
    """Class-level name -> factory registry.

    Each subclass keeps its own ``_registry`` dictionary; ``kind`` names the
    strategy family in error messages.
    """

    kind: ClassVar[str] = "strategy"
    _registry: ClassVar[dict[str, Callable[..., Any]]] = {}

    @classmethod
    def register(cls, name: str, factory: Callable[..., Any]) -> None:
        """Register a strategy factory under name, overwriting an existing entry."""
        cls._registry[name] = factory

    @classmethod
    def get(cls, name: str, **kwargs: Any) -> Any:
        """Build a configured strategy by name.

        Args:
            name: Name of the registered strategy.
            **kwargs: Configuration passed to the factory.

        Raises:
            KeyError: If the name is not registered. The message lists the
                available names.
        """
        cls.require(name)
        return cls._registry[name](**kwargs)

    @classmethod
    def require(cls, name: str) -> None:
        """Raise KeyError listing the available names unless name is registered."""
        if name not in cls._registry:
            available = ", ".join(sorted(cls._registry.keys())) or "none"
            raise KeyError(f"{cls.kind.capitalize()} strategy '{name}' not found. Available strategies: {available}")

    @classmethod
    def build(cls, name: str, **options: Any) -> Any:
        """Build a strategy by name, passing only the options its factory accepts.

        Drivers hold one flat set of options (tournament size, crossover rate,
        ...) and different factories take different subsets of them.

        Raises:
            KeyError: If the name is not registered.
        """
        if name not in cls._registry:
            return cls.get(name)
        return cls.get(name, **_accepted_options(cls._registry[name], options))

    @classmethod
    def list(cls) -> list[str]:
        """Return the sorted registered names."""
        return sorted(cls._registry.keys())


class SelectionRegistry(StrategyRegistry):
    """Registry for parent selection strategies."""

    kind = "selection"
    _registry: ClassVar[dict[str, Callable[..., ParentSelector]]] = {}

    @classmethod
    def get(cls, name: str, **kwargs: Any) -> ParentSelector:
        return super().get(name, **kwargs)


class CrossoverRegistry(StrategyRegistry):
    """Registry for crossover operators."""

    kind = "crossover"
    _registry: ClassVar[dict[str, Callable[..., Crossover]]] = {}

    @classmethod
    def get(cls, name: str, **kwargs: Any) -> Crossover:
        return super().get(name, **kwargs)


class ReplacementRegistry(StrategyRegistry):
    """Registry for steady-state replacement policies."""

    kind = "replacement"
    _registry: ClassVar[dict[str, Callable[..., ReplacementPolicy]]] = {}

    @classmethod
    def get(cls, name: str, **kwargs: Any) -> ReplacementPolicy:
        return super().get(name, **kwargs)


def list_selections() -> list[str]:
    """List all registered parent selection strategies."""
    return SelectionRegistry.list()


def list_crossovers() -> list[str]:
    """List all registered crossover operators."""
    return CrossoverRegistry.list()


def list_replacements() -> list[str]:
    """List all registered replacement policies."""
    return ReplacementRegistry.list()


def _accepted_options(factory: Callable[..., Any], options: dict[str, Any]) -> dict[str, Any]:
    params = inspect.signature(factory).parameters
    if any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params.values()):
        return options
    return {k: v for k, v in options.items() if k in params}
