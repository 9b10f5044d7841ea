"""
Exceptions raised by the heap and the structural checker.

Runtime failures of queue operations (absent queue, empty queue, failed
allocation) are reported through return values, not exceptions.
"""

from __future__ import annotations


class AllocationError(MemoryError):
    """Heap could not provide a block (injected or scheduled failure)."""


class HarnessError(Exception):
    """Heap misuse: double free, foreign block, or disallowed allocation."""


class QueueCorruptionError(Exception):
    """A queue failed a structural invariant check."""
