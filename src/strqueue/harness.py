"""
Heap - tracked block storage for queues and their elements.

Every queue handle, element and text copy is backed by a Block obtained
from a Heap. The heap keeps a record of live blocks so tests can check
that teardown releases everything, and it can refuse allocations on
demand to exercise the failure paths of the queue operations:

- fail_probability: each allocation fails with this probability, drawn
  from a seeded FaultStream
- fail_on(): fail specific upcoming allocation attempts
- no_allocation(): forbid any malloc/free inside a block of code
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from strqueue.errors import AllocationError, HarnessError
from strqueue.faults import DEFAULT_LCG_SEED, DEFAULT_MG_SEED, FailureDraw

DEFAULT_FAIL_PROBABILITY = 0.0


class Block:
    """A region of heap storage. ``data`` is zero-filled on allocation."""

    __slots__ = ("kind", "data", "_heap")

    def __init__(self, heap: Heap, size: int, kind: str) -> None:
        self.kind = kind
        self.data = bytearray(size)
        self._heap: Heap | None = heap

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def live(self) -> bool:
        """True until the block is freed."""
        return self._heap is not None

    def __repr__(self) -> str:
        state = "live" if self.live else "freed"
        return f"Block({self.kind}, {self.size} bytes, {state})"


class Heap:
    """
    Allocator with leak tracking and fault injection.

    Statistics:
        attempts: malloc calls, including refused ones
        allocations: malloc calls that returned a block
        frees: blocks released
        in_use: bytes held by live blocks
    """

    def __init__(
        self,
        fail_probability: float = DEFAULT_FAIL_PROBABILITY,
        stream_select: int = 0,
        mg_seed: int = DEFAULT_MG_SEED,
        lcg_seed: int = DEFAULT_LCG_SEED,
    ) -> None:
        self._draw = FailureDraw(fail_probability, stream_select, mg_seed, lcg_seed)
        self._live: dict[int, Block] = {}
        self._scheduled: set[int] = set()
        self._noallocate = False
        self.attempts = 0
        self.allocations = 0
        self.frees = 0
        self.in_use = 0

    @property
    def fail_probability(self) -> float:
        return self._draw.probability

    def fail_on(self, *offsets: int) -> None:
        """
        Make upcoming allocation attempts fail.

        Offsets count from the next attempt: ``fail_on(1)`` refuses the
        next malloc, ``fail_on(2)`` the one after it.
        """
        for offset in offsets:
            if offset < 1:
                raise ValueError(f"offset must be >= 1 (got {offset})")
            self._scheduled.add(self.attempts + offset)

    @contextmanager
    def no_allocation(self) -> Iterator[None]:
        """Raise HarnessError on any malloc or free inside the block."""
        previous = self._noallocate
        self._noallocate = True
        try:
            yield
        finally:
            self._noallocate = previous

    def malloc(self, size: int, kind: str = "block") -> Block:
        """
        Allocate a zero-filled block of ``size`` bytes.

        Raises AllocationError when a failure is scheduled or drawn.
        """
        if self._noallocate:
            raise HarnessError(f"malloc({size}) for {kind} called while allocation is disallowed")
        if size < 0:
            raise ValueError(f"negative allocation size {size}")

        self.attempts += 1
        if self.attempts in self._scheduled:
            self._scheduled.discard(self.attempts)
            raise AllocationError(f"scheduled failure of {kind} allocation #{self.attempts}")
        if self._draw():
            raise AllocationError(f"injected failure of {kind} allocation #{self.attempts}")

        block = Block(self, size, kind)
        self._live[id(block)] = block
        self.allocations += 1
        self.in_use += size
        return block

    def free(self, block: Block | None) -> None:
        """Release a block. Freeing None does nothing."""
        if block is None:
            return
        if self._noallocate:
            raise HarnessError(f"free of {block.kind} called while allocation is disallowed")
        if self._live.get(id(block)) is not block:
            if block._heap is None:
                raise HarnessError(f"double free of {block!r}")
            raise HarnessError(f"{block!r} was not allocated by this heap")

        del self._live[id(block)]
        block._heap = None
        self.frees += 1
        self.in_use -= block.size

    def live_blocks(self) -> list[Block]:
        """Blocks allocated and not yet freed."""
        return list(self._live.values())

    def __len__(self) -> int:
        return len(self._live)

    def __str__(self) -> str:
        return f"Heap({len(self._live)} live blocks, {self.in_use} bytes)"
