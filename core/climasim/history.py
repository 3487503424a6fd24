"""
Temperature History

Bounded rolling history of samples for one room. Appending past capacity
evicts the oldest sample first. Buffers are immutable values; `append`
returns a new buffer so a tick can build its result without touching the
state observers are reading.
"""

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import asdict

from .models import Sample

DEFAULT_CAPACITY = 72


class HistoryBuffer:
    """Fixed-capacity FIFO of samples."""

    __slots__ = ("_samples", "_capacity")

    def __init__(self, samples: Iterable[Sample] = (), capacity: int = DEFAULT_CAPACITY):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        # deque(maxlen) keeps only the newest `capacity` items
        self._samples = tuple(deque(samples, maxlen=capacity))
        self._capacity = capacity

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, sample: Sample) -> "HistoryBuffer":
        """Return a buffer with `sample` at the tail."""
        return HistoryBuffer((*self._samples, sample), self._capacity)

    def query(self) -> tuple[Sample, ...]:
        """Samples oldest first."""
        return self._samples

    def latest(self) -> Sample | None:
        return self._samples[-1] if self._samples else None

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self._samples)

    def __eq__(self, other) -> bool:
        if not isinstance(other, HistoryBuffer):
            return NotImplemented
        return self._samples == other._samples and self._capacity == other._capacity

    def __repr__(self) -> str:
        return f"HistoryBuffer(len={len(self)}, capacity={self._capacity})"

    def to_list(self) -> list[dict]:
        """Samples as dicts with ISO timestamps."""
        records = []
        for sample in self._samples:
            record = asdict(sample)
            record["timestamp"] = sample.timestamp.isoformat()
            records.append(record)
        return records

