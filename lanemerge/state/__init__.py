"""
Reactive state

Store / Atomic / Computed / Effect containers connected by an explicit
dependency graph, plus the application state object built on them.
"""

from .graph import DependencyGraph, get_default_graph
from .containers import Store, Atomic, Computed, Effect

__all__ = [
    "DependencyGraph",
    "get_default_graph",
    "Store",
    "Atomic",
    "Computed",
    "Effect",
]
