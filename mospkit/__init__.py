"""Incremental single- and two-objective shortest path trees."""

__version__ = "0.1.0"

__all__ = ["graph", "sosp", "edges", "mosp", "distributed", "cli"]