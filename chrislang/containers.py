"""String-keyed hash containers, channels and thread-safe primitives."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, List, Optional

INITIAL_CAPACITY = 16
LOAD_FACTOR = 0.75
CHANNEL_MAX_BUFFER = 4096
QUEUE_DEFAULT_CAPACITY = 1024

_HASH_SEED = 5381
_HASH_MODULUS = 2**64


def djb2(key: str) -> int:
    """The djb2 hash of ``key`` over its UTF-8 bytes, as an unsigned 64-bit value.

    Bytes above 0x7F count as negative, as signed characters do.
    """
    value = _HASH_SEED
    for byte in key.encode("utf-8"):
        char = byte - 256 if byte >= 0x80 else byte
        value = (value * 33 + char) % _HASH_MODULUS
    return value


@dataclass
class _Entry:
    key: str
    value: int = 0


class _ChainedTable:
    """Separate-chaining hash table that doubles when the load factor is passed."""

    def __init__(self) -> None:
        self._buckets: List[List[_Entry]] = [[] for _ in range(INITIAL_CAPACITY)]
        self._size = 0

    @property
    def capacity(self) -> int:
        """Current number of buckets."""
        return len(self._buckets)

    def _bucket(self, key: str) -> List[_Entry]:
        return self._buckets[djb2(key) % len(self._buckets)]

    def _find(self, key: str) -> Optional[_Entry]:
        return next((entry for entry in self._bucket(key) if entry.key == key), None)

    def _insert(self, key: str, value: int) -> None:
        # New entries go to the front of their chain.
        self._bucket(key).insert(0, _Entry(key, value))
        self._size += 1
        if self._size / len(self._buckets) > LOAD_FACTOR:
            self._resize()

    def _resize(self) -> None:
        old = self._buckets
        self._buckets = [[] for _ in range(len(old) * 2)]
        for chain in old:
            for entry in chain:
                self._bucket(entry.key).insert(0, entry)

    def _remove(self, key: str) -> bool:
        chain = self._bucket(key)
        for position, entry in enumerate(chain):
            if entry.key == key:
                del chain[position]
                self._size -= 1
                return True
        return False

    def _entries(self) -> Iterator[_Entry]:
        for chain in self._buckets:
            yield from chain

    def __len__(self) -> int:
        return self._size


class StringMap(_ChainedTable):
    """A map from strings to integers; missing keys read as 0."""

    def __init__(self) -> None:
        super().__init__()

    def set(self, key: Optional[str], value: int) -> None:
        """Insert or overwrite ``key``; a missing key is ignored."""
        if key is None:
            return
        entry = self._find(key)
        if entry is not None:
            entry.value = value
        else:
            self._insert(key, value)

    def get(self, key: Optional[str]) -> int:
        """The value stored for ``key``, or 0."""
        if key is None:
            return 0
        entry = self._find(key)
        return entry.value if entry is not None else 0

    def has(self, key: Optional[str]) -> bool:
        """Whether ``key`` is present."""
        return key is not None and self._find(key) is not None

    def delete(self, key: Optional[str]) -> bool:
        """Remove ``key``; return whether it was present."""
        return key is not None and self._remove(key)

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def keys(self) -> List[str]:
        """All keys, in bucket order."""
        return [entry.key for entry in self._entries()]


class StringSet(_ChainedTable):
    """A hash set of strings."""

    def __init__(self) -> None:
        super().__init__()

    def add(self, value: Optional[str]) -> None:
        """Add ``value`` unless it is already present or missing."""
        if value is None or self._find(value) is not None:
            return
        self._insert(value, 0)

    def has(self, value: Optional[str]) -> bool:
        """Whether ``value`` is present."""
        return value is not None and self._find(value) is not None

    def remove(self, value: Optional[str]) -> bool:
        """Remove ``value``; return whether it was present."""
        return value is not None and self._remove(value)

    def __len__(self) -> int:
        return self._size

    def __contains__(self, value: object) -> bool:
        return isinstance(value, str) and self.has(value)

    def clear(self) -> None:
        """Remove every element, keeping the current capacity."""
        for chain in self._buckets:
            chain.clear()
        self._size = 0

    def values(self) -> List[str]:
        """All elements, in bucket order."""
        return [entry.key for entry in self._entries()]


class ChannelClosed(Exception):
    """Raised on sending to a closed channel or receiving from a drained one."""


class Channel:
    """A bounded blocking FIFO channel of integers."""

    def __init__(self, capacity: int = 1) -> None:
        self.capacity = min(max(capacity, 1), CHANNEL_MAX_BUFFER)
        self._buffer: Deque[int] = deque()
        self._closed = False
        self._cond = threading.Condition()

    @property
    def closed(self) -> bool:
        """Whether the channel has been closed."""
        return self._closed

    def send(self, value: int) -> None:
        """Put ``value`` in the channel, waiting while it is full."""
        with self._cond:
            self._cond.wait_for(lambda: len(self._buffer) < self.capacity or self._closed)
            if self._closed:
                raise ChannelClosed("send on closed channel")
            self._buffer.append(value)
            self._cond.notify_all()

    def recv(self) -> int:
        """Take the oldest value, waiting while empty; drains after close."""
        with self._cond:
            self._cond.wait_for(lambda: self._buffer or self._closed)
            if not self._buffer:
                raise ChannelClosed("receive on closed and empty channel")
            value = self._buffer.popleft()
            self._cond.notify_all()
            return value

    def close(self) -> None:
        """Refuse further sends and wake every waiter."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def __iter__(self) -> Iterator[int]:
        while True:
            try:
                yield self.recv()
            except ChannelClosed:
                return


class ConcurrentMap:
    """A ``StringMap`` guarded by a lock."""

    def __init__(self) -> None:
        self._map = StringMap()
        self._lock = threading.Lock()

    def set(self, key: Optional[str], value: int) -> None:
        """Insert or overwrite ``key``."""
        with self._lock:
            self._map.set(key, value)

    def get(self, key: Optional[str]) -> int:
        """The value for ``key``, or 0."""
        with self._lock:
            return self._map.get(key)

    def has(self, key: Optional[str]) -> bool:
        """Whether ``key`` is present."""
        with self._lock:
            return self._map.has(key)

    def delete(self, key: Optional[str]) -> bool:
        """Remove ``key``; return whether it was present."""
        with self._lock:
            return self._map.delete(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._map)


class ConcurrentQueue:
    """A bounded blocking FIFO queue of integers."""

    def __init__(self, capacity: int = QUEUE_DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"queue capacity must be positive: {capacity}")
        self.capacity = capacity
        self._items: Deque[int] = deque()
        self._cond = threading.Condition()

    def enqueue(self, value: int) -> None:
        """Append ``value``, waiting while the queue is full."""
        with self._cond:
            self._cond.wait_for(lambda: len(self._items) < self.capacity)
            self._items.append(value)
            self._cond.notify_all()

    def dequeue(self) -> int:
        """Remove and return the oldest value, waiting while empty."""
        with self._cond:
            self._cond.wait_for(lambda: self._items)
            value = self._items.popleft()
            self._cond.notify_all()
            return value

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def is_empty(self) -> bool:
        """Whether the queue holds nothing."""
        with self._cond:
            return not self._items


class AtomicInt:
    """An integer whose operations are each performed under a lock."""

    def __init__(self, initial: int = 0) -> None:
        self._value = initial
        self._lock = threading.Lock()

    def load(self) -> int:
        """The current value."""
        with self._lock:
            return self._value

    def store(self, value: int) -> None:
        """Replace the value."""
        with self._lock:
            self._value = value

    def add(self, delta: int) -> int:
        """Add ``delta`` and return the new value."""
        with self._lock:
            self._value += delta
            return self._value

    def sub(self, delta: int) -> int:
        """Subtract ``delta`` and return the new value."""
        with self._lock:
            self._value -= delta
            return self._value

    def compare_swap(self, expected: int, desired: int) -> bool:
        """Set ``desired`` if the value equals ``expected``; return whether it did."""
        with self._lock:
            if self._value != expected:
                return False
            self._value = desired
            return True