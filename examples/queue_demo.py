"""
Queue demonstration.

Runs the basic queue scenarios, then a stretch of random operations on a
heap that refuses a quarter of all allocations, and finishes by checking
that teardown returned every block to the heap.
"""

from __future__ import annotations

from strqueue import (
    FaultStream,
    Heap,
    check,
    create,
    destroy,
    insert_head,
    insert_tail,
    remove_head,
    reverse,
    size,
    sort,
)

BUFSIZE = 1024


def show(label: str, q) -> None:
    print(f"{label:<24} size={size(q)} {list(q)}")


def demo_scenarios() -> None:
    """Insert, sort, reverse and remove on a clean heap."""
    print("=" * 60)
    print("SCENARIOS")
    print("=" * 60)

    heap = Heap()
    q = create(heap)
    show("create", q)

    insert_tail(q, "b")
    insert_tail(q, "a")
    insert_head(q, "c")
    show("tail b, tail a, head c", q)

    sort(q)
    show("sort", q)

    reverse(q)
    show("reverse", q)

    insert_head(q, "hello")
    buf = bytearray(BUFSIZE)
    remove_head(q, buf, 2)
    print(f"{'remove_head bufsize=2':<24} got {bytes(buf[:2])!r}")
    show("after remove", q)

    destroy(q)
    print(f"after destroy: {heap}")
    print()


def demo_faults() -> None:
    """Random operations with injected allocation failures."""
    print("=" * 60)
    print("FAULT INJECTION (p=0.25)")
    print("=" * 60)

    heap = Heap(fail_probability=0.25)
    q = None
    while q is None:
        q = create(heap)

    ops = FaultStream(stream_select=1)
    inserted = removed = failed = 0
    for i in range(1000):
        r = ops()
        if r < 0.35:
            ok = insert_head(q, f"h{i}")
        elif r < 0.7:
            ok = insert_tail(q, f"t{i}")
        elif r < 0.95:
            if remove_head(q):
                removed += 1
            continue
        else:
            if r < 0.975:
                sort(q)
            else:
                reverse(q)
            check(q)
            continue
        if ok:
            inserted += 1
        else:
            failed += 1
        check(q)

    print(f"Successful inserts: {inserted}")
    print(f"Failed inserts: {failed}")
    print(f"Removes: {removed}")
    print(f"Final size: {size(q)} (expected {inserted - removed})")
    print(f"Allocation attempts: {heap.attempts}, granted: {heap.allocations}")

    destroy(q)
    print(f"after destroy: {heap}")
    print()


if __name__ == "__main__":
    demo_scenarios()
    demo_faults()
