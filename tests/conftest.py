"""
Pytest configuration and fixtures for strqueue tests.
"""

from typing import Callable

import pytest

from strqueue import Heap, Queue, create


@pytest.fixture
def heap() -> Heap:
    """A fresh heap with no fault injection."""
    return Heap()


@pytest.fixture
def q(heap: Heap) -> Queue:
    """An empty queue on the ``heap`` fixture."""
    queue = create(heap)
    assert queue is not None
    return queue


@pytest.fixture
def contents() -> Callable[[Queue], list[str]]:
    """Traverse a queue by following links from first."""

    def _contents(queue: Queue) -> list[str]:
        return [element.value for element in queue.elements()]

    return _contents


@pytest.fixture
def assert_valid() -> Callable[[Queue], None]:
    """Check the structural invariants of a queue."""

    def _assert_valid(queue: Queue) -> None:
        queue.check()
        if queue.size() == 0:
            assert queue.first() is None
            assert queue.last() is None
        else:
            assert queue.last().next is None
            assert len(list(queue.elements())) == queue.size()

    return _assert_valid


@pytest.fixture
def text_of() -> Callable[[bytearray], bytes]:
    """Read a NUL-terminated buffer up to its terminator."""

    def _text_of(buffer: bytearray) -> bytes:
        end = buffer.find(0)
        return bytes(buffer if end < 0 else buffer[:end])

    return _text_of
