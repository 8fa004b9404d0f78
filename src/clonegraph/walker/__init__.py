"""Graph traversal: the walker and the public clone() entry point."""

from clonegraph.walker.walker import GraphWalker, clone

__all__ = [
    "GraphWalker",
    "clone",
]
