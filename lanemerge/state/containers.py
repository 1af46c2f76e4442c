"""
Reactive state containers

- Store: holds a value that can be read
- Atomic: a Store that can be overwritten, notifying dependents
- Computed: a Store derived from other containers, recomputed on change
- Effect: runs a side effect whenever its dependencies change

Dependencies are declared explicitly when a Computed or Effect is created.
Every container read inside the compute function must be listed, or the
value will go stale.

Notification is synchronous: Atomic.set() returns only after every
dependent has been recomputed.
"""

from typing import Callable, Generic, Iterable, List, Optional, TypeVar

from .graph import DependencyGraph, get_default_graph

T = TypeVar("T")


class Store(Generic[T]):
    """
    Read-only state container

    get() returns the stored object itself, not a copy. Mutating a returned
    object bypasses notification; use Atomic.set_dynamic() instead.
    """

    def __init__(self, initial: T, name: Optional[str] = None, graph: Optional[DependencyGraph] = None):
        self.data = initial
        self.name = name or f"{type(self).__name__}#{id(self):x}"
        self.graph = graph if graph is not None else get_default_graph()
        self._dependents: List[object] = []

    def get(self) -> T:
        return self.data

    def _add_dependent(self, dependent) -> None:
        if not any(d is dependent for d in self._dependents):
            self._dependents.append(dependent)

    def _remove_dependent(self, dependent) -> bool:
        for i, d in enumerate(self._dependents):
            if d is dependent:
                del self._dependents[i]
                return True
        return False

    def trim_dependent(self, dependent) -> bool:
        """Stop notifying `dependent` without removing the graph edge"""
        return self._remove_dependent(dependent)

    @property
    def dependents(self) -> List[object]:
        return list(self._dependents)

    def notify_dependents(self) -> None:
        self.graph.propagate(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, value={self.data!r})"


class Atomic(Store[T]):
    """Mutable state container"""

    def set(self, value: T) -> None:
        """Overwrite the stored value and notify dependents"""
        self.data = value
        self.notify_dependents()

    def set_dynamic(self, fn: Callable[[T], T]) -> None:
        """
        Update the stored value from the current one

        `fn` receives the current value and must return the value to store,
        even when it modified the current object in place.
        """
        self.set(fn(self.data))


def _register_all(container, dependencies: Iterable[Store], graph: DependencyGraph) -> None:
    for dependency in dependencies:
        graph.register(container, dependency)


class Computed(Store[T]):
    """
    Container whose value is derived from other containers

    Must not take part in a dependency cycle: a Computed that (indirectly)
    depends on itself is never detected and leads to unbounded
    recomputation.
    """

    def __init__(
        self,
        compute_fn: Callable[[], T],
        dependencies: Iterable[Store] = (),
        name: Optional[str] = None,
        graph: Optional[DependencyGraph] = None
    ):
        super().__init__(compute_fn(), name=name, graph=graph)
        self.compute_fn = compute_fn
        self.compute_count = 1
        _register_all(self, dependencies, self.graph)

    def _recompute(self) -> None:
        self.data = self.compute_fn()
        self.compute_count += 1

    def compute(self) -> None:
        """Recompute this value and notify dependents"""
        self._recompute()
        self.notify_dependents()


class Effect:
    """Container that stores nothing and runs `effect_fn` on every change"""

    def __init__(
        self,
        effect_fn: Callable[[], None],
        dependencies: Iterable[Store] = (),
        name: Optional[str] = None,
        graph: Optional[DependencyGraph] = None
    ):
        self.effect_fn = effect_fn
        self.name = name or f"Effect#{id(self):x}"
        self.graph = graph if graph is not None else get_default_graph()
        self.run_count = 0
        self._recompute()
        _register_all(self, dependencies, self.graph)

    def _recompute(self) -> None:
        self.effect_fn()
        self.run_count += 1

    def compute(self) -> None:
        self._recompute()

    def dispose(self) -> None:
        """Detach this effect from all of its dependencies"""
        for dependency in self.graph.direct_dependencies(self):
            self.graph.deregister(self, dependency)

    def __repr__(self) -> str:
        return f"Effect(name={self.name!r})"
