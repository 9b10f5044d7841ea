"""
Deterministic fault streams for allocation failure injection.

A seeded uniform generator decides, allocation by allocation, whether the
heap should refuse a request. Runs with the same seeds fail at the same
points, so a failing sequence can be replayed exactly.

Generator:
- Multiplicative generator (MGen), Y[i+1] = Y[i] * 5^5 mod 2^26, fills
  and refreshes a 128-entry shuffle table
- Linear congruential generator (Sedgewick 1983) picks the table slot
  (Maclaren-Marsaglia shuffle)

The generator is integer-only and fully specified by its two seeds, so a
failure schedule depends on nothing but the seeds and the stream number,
not on the interpreter version or the global random module state.
"""

from __future__ import annotations

TWO_26 = 67108864  # 2**26
M = 100000000
B = 31415821
M1 = 10000
TABLE_SIZE = 128

# Skip distance between selectable streams
STREAM_SPACING = 1000

DEFAULT_MG_SEED = 772531  # Must be odd
DEFAULT_LCG_SEED = 1878892440


class FaultStream:
    """
    Uniform stream on [0, 1) used to decide allocation failures.

    ``stream_select`` skips ahead in the sequence so several heaps can
    draw from independent streams with the same seeds.
    """

    def __init__(
        self,
        stream_select: int = 0,
        mg_seed: int = DEFAULT_MG_SEED,
        lcg_seed: int = DEFAULT_LCG_SEED,
    ) -> None:
        # MGen needs an odd positive seed
        if mg_seed % 2 == 0:
            mg_seed -= 1
        self._mseed = abs(mg_seed)
        self._lseed = abs(lcg_seed)

        self._table = [self._mgen() for _ in range(TABLE_SIZE)]

        for _ in range(stream_select * STREAM_SPACING):
            self._next()

    def _mgen(self) -> float:
        # MSeed * 5^5 in three steps to stay below 2^32
        self._mseed = (self._mseed * 25) % TWO_26
        self._mseed = (self._mseed * 25) % TWO_26
        self._mseed = (self._mseed * 5) % TWO_26
        return self._mseed / TWO_26

    def _next(self) -> float:
        p0 = self._lseed % M1
        p1 = self._lseed // M1
        q0 = B % M1
        q1 = B // M1
        self._lseed = (((((p0 * q1 + p1 * q0) % M1) * M1 + p0 * q0) % M) + 1) % M

        slot = self._lseed % TABLE_SIZE
        result = self._table[slot]
        self._table[slot] = self._mgen()
        return result

    def __call__(self) -> float:
        return self._next()


class FailureDraw:
    """
    Boolean draw that is True with probability ``probability``.

    A probability of 0 never fails and never consumes the stream.
    """

    def __init__(
        self,
        probability: float,
        stream_select: int = 0,
        mg_seed: int = DEFAULT_MG_SEED,
        lcg_seed: int = DEFAULT_LCG_SEED,
    ) -> None:
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"failure probability must be in [0, 1] (got {probability})")
        self._stream = FaultStream(stream_select, mg_seed, lcg_seed)
        self._probability = probability

    @property
    def probability(self) -> float:
        return self._probability

    def __call__(self) -> bool:
        if self._probability == 0.0:
            return False
        return self._stream() < self._probability
