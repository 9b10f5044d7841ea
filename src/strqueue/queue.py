"""
Queue - singly-linked queue of owned text elements.

The Queue class keeps a cached first/last pair and a live count, all
updated together by every structural change. The module-level functions
form the handle-based operation set: each accepts ``None`` in place of a
queue and reports failure through its return value.

Reorder operations (reverse, sort) only relink existing elements; they
never allocate or free heap blocks.
"""

from __future__ import annotations

from typing import Iterator

from strqueue.element import Element
from strqueue.errors import AllocationError, QueueCorruptionError
from strqueue.harness import Block, Heap

# Accounting size of a queue record: first, last and count
QUEUE_SIZE = 24

_default_heap: Heap | None = None


def default_heap() -> Heap:
    """Shared heap used when none is given to create()."""
    global _default_heap
    if _default_heap is None:
        _default_heap = Heap()
    return _default_heap


def _split(head: Element) -> Element:
    """
    Cut a chain of two or more elements at its midpoint.

    Returns the head of the second half; the first half keeps the extra
    element of an odd-length chain.
    """
    slow = head
    fast = head.next
    while fast is not None and fast.next is not None:
        slow = slow.next
        fast = fast.next.next
    rest = slow.next
    slow.next = None
    return rest


def _merge(left: Element, right: Element) -> Element:
    """Stable merge of two sorted chains; left wins ties."""
    if right.precedes(left):
        head, right = right, right.next
    else:
        head, left = left, left.next

    tail = head
    while left is not None and right is not None:
        if right.precedes(left):
            tail.next = right
            right = right.next
        else:
            tail.next = left
            left = left.next
        tail = tail.next

    tail.next = left if left is not None else right
    return head


def _merge_sort(head: Element) -> Element:
    if head.next is None:
        return head
    rest = _split(head)
    return _merge(_merge_sort(head), _merge_sort(rest))


class Queue:
    """
    Queue handle owning a chain of Elements.

    Use create() or Queue.new() to obtain one; both draw the handle's own
    record from a Heap.
    """

    def __init__(self, heap: Heap, record: Block) -> None:
        self._heap = heap
        self._record: Block | None = record
        self._first: Element | None = None
        self._last: Element | None = None
        self._size = 0

    @classmethod
    def new(cls, heap: Heap | None = None) -> Queue | None:
        """Create an empty queue, or None if the heap refuses the record."""
        if heap is None:
            heap = default_heap()
        try:
            record = heap.malloc(QUEUE_SIZE, "queue")
        except AllocationError:
            return None
        return cls(heap, record)

    @property
    def heap(self) -> Heap:
        return self._heap

    def first(self) -> Element | None:
        """Return first element in queue."""
        return self._first

    def last(self) -> Element | None:
        """Return last element in queue."""
        return self._last

    def size(self) -> int:
        """Number of elements, from the maintained count."""
        return self._size

    def __len__(self) -> int:
        return self._size

    def elements(self) -> Iterator[Element]:
        """Iterate over elements from first to last."""
        current = self._first
        while current is not None:
            yield current
            current = current.next

    def __iter__(self) -> Iterator[str]:
        """Iterate over payload strings from first to last."""
        for element in self.elements():
            yield element.value

    def insert_head(self, text: str) -> bool:
        """
        Insert a copy of ``text`` at the head.

        Returns False, leaving the queue untouched, if allocation fails.
        """
        element = Element.new(self._heap, text)
        if element is None:
            return False

        element.next = self._first
        self._first = element
        if self._last is None:
            self._last = element
        self._size += 1
        return True

    def insert_tail(self, text: str) -> bool:
        """
        Insert a copy of ``text`` at the tail.

        Returns False, leaving the queue untouched, if allocation fails.
        """
        element = Element.new(self._heap, text)
        if element is None:
            return False

        if self._last is None:
            self._first = element
        else:
            self._last.next = element
        self._last = element
        self._size += 1
        return True

    def remove_head(self, sp: bytearray | None = None, bufsize: int = 0) -> bool:
        """
        Remove the head element.

        If ``sp`` is given, up to ``bufsize - 1`` bytes of the removed
        text and a NUL terminator are copied into it. Longer text is
        truncated. Returns False if the queue is empty.
        """
        if sp is not None and bufsize > len(sp):
            raise ValueError(f"bufsize {bufsize} exceeds buffer length {len(sp)}")
        if self._first is None:
            return False

        element = self._first
        if sp is not None and bufsize > 0:
            element.copy_text(sp, bufsize)

        self._first = element.next
        if self._first is None:
            self._last = None
        self._size -= 1
        element.release(self._heap)
        return True

    def reverse(self) -> None:
        """Reverse the chain in place."""
        if self._first is None or self._first is self._last:
            return

        previous = None
        current = self._first
        while current is not None:
            following = current.next
            current.next = previous
            previous = current
            current = following

        self._first, self._last = self._last, self._first

    def sort(self) -> None:
        """Stable ascending merge sort by strcmp order of the payloads."""
        if self._first is None or self._first is self._last:
            return

        self._first = _merge_sort(self._first)

        last = self._first
        while last.next is not None:
            last = last.next
        self._last = last

    def free(self) -> None:
        """Release every element, its text, and the queue record."""
        current = self._first
        while current is not None:
            following = current.next
            current.release(self._heap)
            current = following

        self._first = None
        self._last = None
        self._size = 0
        self._heap.free(self._record)
        self._record = None

    def check(self) -> None:
        """
        Verify the structural invariants.

        Raises QueueCorruptionError on the first violation found.
        """
        if self._size < 0:
            raise QueueCorruptionError(f"negative size {self._size}")
        if self._size == 0 or self._first is None or self._last is None:
            if not (self._size == 0 and self._first is None and self._last is None):
                raise QueueCorruptionError(
                    f"inconsistent empty state: size={self._size}, "
                    f"first={self._first!r}, last={self._last!r}"
                )
            return

        seen: set[int] = set()
        count = 0
        current = self._first
        tail = None
        while current is not None:
            if id(current) in seen:
                raise QueueCorruptionError(f"cycle at element {count}")
            if count >= self._size:
                raise QueueCorruptionError(f"chain is longer than size {self._size}")
            seen.add(id(current))
            count += 1
            tail = current
            current = current.next

        if count != self._size:
            raise QueueCorruptionError(f"size is {self._size} but chain holds {count} elements")
        if tail is not self._last:
            raise QueueCorruptionError("last does not refer to the final element")

    def __str__(self) -> str:
        return f"Queue({self._size} elements)"


def create(heap: Heap | None = None) -> Queue | None:
    """Create an empty queue; None if allocation fails."""
    return Queue.new(heap)


def destroy(q: Queue | None) -> None:
    """Free a queue and everything it holds. No effect on None."""
    if q is None:
        return
    q.free()


def insert_head(q: Queue | None, text: str) -> bool:
    """Insert at head. False if q is None or allocation fails."""
    if q is None:
        return False
    return q.insert_head(text)


def insert_tail(q: Queue | None, text: str) -> bool:
    """Insert at tail. False if q is None or allocation fails."""
    if q is None:
        return False
    return q.insert_tail(text)


def remove_head(q: Queue | None, sp: bytearray | None = None, bufsize: int = 0) -> bool:
    """Remove from head. False if q is None or empty."""
    if q is None:
        return False
    return q.remove_head(sp, bufsize)


def size(q: Queue | None) -> int:
    """Number of elements; 0 if q is None."""
    if q is None:
        return 0
    return q.size()


def reverse(q: Queue | None) -> None:
    """Reverse in place. No effect if q is None, empty or a singleton."""
    if q is None:
        return
    q.reverse()


def sort(q: Queue | None) -> None:
    """Sort ascending. No effect if q is None, empty or a singleton."""
    if q is None:
        return
    q.sort()


def check(q: Queue | None) -> None:
    """Structural check; a None queue passes trivially."""
    if q is None:
        return
    q.check()
