"""
strqueue - singly-linked queue of owned text elements.

Head/tail insertion, head removal with a bounded copy-out, in-place
reversal and stable merge sort, backed by a tracked heap that can inject
allocation failures.
"""

from strqueue.element import Element
from strqueue.errors import AllocationError, HarnessError, QueueCorruptionError
from strqueue.faults import FailureDraw, FaultStream
from strqueue.harness import Block, Heap
from strqueue.queue import (
    Queue,
    check,
    create,
    default_heap,
    destroy,
    insert_head,
    insert_tail,
    remove_head,
    reverse,
    size,
    sort,
)

__version__ = "0.1.0"
__all__ = [
    # Queue
    "Queue",
    "Element",
    # Operations
    "create",
    "destroy",
    "insert_head",
    "insert_tail",
    "remove_head",
    "size",
    "reverse",
    "sort",
    "check",
    # Heap
    "Heap",
    "Block",
    "default_heap",
    # Fault injection
    "FaultStream",
    "FailureDraw",
    # Errors
    "AllocationError",
    "HarnessError",
    "QueueCorruptionError",
]
