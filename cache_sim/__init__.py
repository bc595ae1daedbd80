"""
Trace-driven simulator for multi-level CPU cache hierarchies.

``memory`` holds the per-cache model (address split, sets, replacement
policies), ``arch`` chains caches into a hierarchy, and ``simulator`` feeds a
memory access trace through it, optionally as a producer/consumer pipeline.
"""

__all__ = [
    "arch",
    "config",
    "entity",
    "memory",
    "post_processor",
    "simulator",
]
