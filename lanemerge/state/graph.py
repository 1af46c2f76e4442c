"""
Dependency graph for reactive state containers

Records every (dependent, dependency) edge between containers and decides
which dependents are notified, and in what order, when a container changes.

Two things happen here:

1. Trimming: if a computed container depends on a store both directly and
   through another computed container, the direct trigger is removed. The
   indirect path already recomputes it.
2. Propagation: a change is pushed to all transitive dependents in
   topological order, each recomputed once. In a diamond (A -> B, A -> C,
   B -> D, C -> D) D is recomputed once, after both B and C.

Cycles between computed containers are not detected. Creating one is a
caller error.
"""

from typing import Dict, Iterable, List, Set, Tuple
from loguru import logger


class DependencyGraph:
    """Directed graph of container dependencies"""

    def __init__(self, name: str = "default"):
        self.name = name
        self._edges: Dict[Tuple[int, int], Tuple[object, object]] = {}
        self._computes: Dict[int, object] = {}

    def __len__(self) -> int:
        return len(self._edges)

    def __contains__(self, edge: Tuple[object, object]) -> bool:
        dependent, dependency = edge
        return (id(dependent), id(dependency)) in self._edges

    def register(self, dependent, dependency) -> None:
        """
        Register that `dependent` must recompute when `dependency` changes

        Args:
            dependent: A Computed or Effect container
            dependency: The Store it reads from
        """
        key = (id(dependent), id(dependency))
        if key in self._edges:
            return
        self._edges[key] = (dependent, dependency)
        self._computes[id(dependent)] = dependent
        dependency._add_dependent(dependent)
        self.trim()

    def deregister(self, dependent, dependency) -> bool:
        """
        Remove a dependency edge

        Returns:
            Whether the edge existed
        """
        edge = self._edges.pop((id(dependent), id(dependency)), None)
        if edge is None:
            return False
        dependency._remove_dependent(dependent)
        if not any(d is dependent for d, _ in self._edges.values()):
            self._computes.pop(id(dependent), None)
        return True

    def direct_dependencies(self, compute) -> List[object]:
        return [dep for dnt, dep in self._edges.values() if dnt is compute]

    def dependencies(self, compute) -> Tuple[List[object], List[object]]:
        """
        Find all dependencies of a computed container

        Returns:
            (direct, indirect): stores read by `compute` itself, and stores
            read by any computed container it depends on, recursively
        """
        direct = self.direct_dependencies(compute)
        indirect: List[object] = []
        seen: Set[int] = set()
        stack = [dep for dep in direct if self._is_compute(dep)]
        while stack:
            current = stack.pop()
            for dep in self.direct_dependencies(current):
                if id(dep) in seen:
                    continue
                seen.add(id(dep))
                indirect.append(dep)
                if self._is_compute(dep):
                    stack.append(dep)
        return direct, indirect

    def trim(self) -> None:
        """Remove direct triggers that are already reachable indirectly"""
        for compute in list(self._computes.values()):
            direct, indirect = self.dependencies(compute)
            indirect_ids = {id(dep) for dep in indirect}
            for dependency in direct:
                if id(dependency) not in indirect_ids:
                    continue
                if dependency.trim_dependent(compute):
                    logger.debug(
                        f"Removed dependency '{dependency.name}' from "
                        f"'{getattr(compute, 'name', '<unknown>')}' due to nested duplication."
                    )

    def propagation_order(self, root) -> List[object]:
        """
        Order the transitive dependents of `root` for recomputation

        Every dependent appears once and after all of the dependents it
        reads from.
        """
        order: List[object] = []
        visited: Set[int] = set()

        def visit(node) -> None:
            for dependent in getattr(node, "_dependents", ()):
                if id(dependent) in visited:
                    continue
                visited.add(id(dependent))
                visit(dependent)
                order.append(dependent)

        visit(root)
        order.reverse()
        return order

    def propagate(self, root) -> None:
        """Recompute every transitive dependent of `root` once, in order"""
        for dependent in self.propagation_order(root):
            dependent._recompute()

    def _is_compute(self, container) -> bool:
        return id(container) in self._computes

    def edges(self) -> Iterable[Tuple[object, object]]:
        return list(self._edges.values())


_default_graph = DependencyGraph()


def get_default_graph() -> DependencyGraph:
    """Graph used by containers created without an explicit graph"""
    return _default_graph
