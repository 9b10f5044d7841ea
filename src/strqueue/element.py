"""
Element - one queue entry owning a NUL-terminated copy of its text.
"""

from __future__ import annotations

from strqueue.errors import AllocationError
from strqueue.harness import Block, Heap

# Accounting size of an element record: text pointer plus next pointer
ELEMENT_SIZE = 16

ENCODING = "utf-8"


def encode_text(text: str) -> bytes:
    """UTF-8 bytes of ``text`` up to, not including, the first NUL."""
    raw = text.encode(ENCODING)
    end = raw.find(b"\0")
    return raw if end < 0 else raw[:end]


class Element:
    """
    A text payload plus a forward link.

    The payload lives in a heap block of exactly ``len + 1`` bytes whose
    last byte is NUL. Elements are only made through ``Element.new`` and
    released through ``release``; the queue owning the chain is the only
    one that relinks ``next``.
    """

    __slots__ = ("next", "_record", "_text")

    def __init__(self, record: Block, text: Block) -> None:
        self.next: Element | None = None
        self._record = record
        self._text = text

    @classmethod
    def new(cls, heap: Heap, text: str) -> Element | None:
        """
        Allocate an element holding a copy of ``text``.

        Returns None if either allocation fails; nothing stays allocated
        in that case. Text that cannot be encoded raises
        UnicodeEncodeError before anything is allocated.
        """
        raw = encode_text(text)
        try:
            record = heap.malloc(ELEMENT_SIZE, "element")
        except AllocationError:
            return None

        try:
            payload = heap.malloc(len(raw) + 1, "text")
        except AllocationError:
            heap.free(record)
            return None

        payload.data[: len(raw)] = raw
        payload.data[len(raw)] = 0
        return cls(record, payload)

    @property
    def value(self) -> str:
        """The stored text."""
        return self._text.data[:-1].decode(ENCODING)

    @property
    def text_block(self) -> Block:
        return self._text

    def precedes(self, other: Element) -> bool:
        """strcmp(self, other) < 0."""
        # NUL terminators make bytearray order match strcmp order
        return self._text.data < other._text.data

    def copy_text(self, sp: bytearray, bufsize: int) -> None:
        """Copy at most ``bufsize - 1`` bytes plus a NUL into ``sp``."""
        count = min(len(self._text.data) - 1, bufsize - 1)
        sp[:count] = self._text.data[:count]
        sp[count] = 0

    def release(self, heap: Heap) -> None:
        """Free the text block, then the element record."""
        heap.free(self._text)
        heap.free(self._record)
        self.next = None

    def __repr__(self) -> str:
        return f"Element({self.value!r})"
