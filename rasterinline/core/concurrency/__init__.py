"""
Concurrency Utilities
=====================

Fan-out/fan-in of asynchronous workers with positional result ordering.
"""

from .ordered_map import OrderedMapState, clone_list, ordered_map, gather_ordered

__all__ = ["OrderedMapState", "clone_list", "ordered_map", "gather_ordered"]
