"""A mark-and-sweep garbage-collected heap with a shadow stack of roots."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional

INITIAL_THRESHOLD = 1024 * 1024
HEAP_GROW_FACTOR = 2
HEADER_SIZE = 24
POINTER_SIZE = 8
MAX_POINTERS = 0xFFFF
MAX_SIZE = 0xFFFFFFFF

Finalizer = Callable[["GCObject"], None]


class ObjectKind(enum.IntEnum):
    """Type tag of a heap object; decides how the marker traces it."""

    STRING = 0
    OBJECT = 1
    ARRAY = 2
    CONTAINER = 3


@dataclass(eq=False)
class GCObject:
    """One heap allocation: a header plus pointer-sized slots."""

    kind: ObjectKind
    size: int
    finalizer: Optional[Finalizer] = None
    num_pointers: int = 0
    marked: bool = False
    freed: bool = False
    slots: List[Optional["GCObject"]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.slots:
            self.slots = [None] * (self.size // POINTER_SIZE)

    @property
    def total_size(self) -> int:
        """Bytes charged to the heap for this object, header included."""
        return HEADER_SIZE + self.size

    def children(self) -> Iterator["GCObject"]:
        """Yield the objects this one keeps alive during marking."""
        if self.kind not in (ObjectKind.OBJECT, ObjectKind.ARRAY):
            return
        for child in self.slots[: self.num_pointers]:
            if isinstance(child, GCObject):
                yield child


@dataclass(eq=False)
class Root:
    """A stack slot registered with the heap; whatever it holds is live."""

    value: Optional[GCObject] = None


class Heap:
    """A thread-safe mark-and-sweep heap with an adaptive collection threshold."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._objects: List[GCObject] = []
        self._bytes_allocated = 0
        self._next_gc = INITIAL_THRESHOLD
        self._total_collections = 0
        self._roots: List[Root] = []
        self._initialized = True

    def __enter__(self) -> "Heap":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    # -- internals (caller holds the lock) ----------------------------------

    def _mark(self) -> None:
        pending = [root.value for root in self._roots if isinstance(root.value, GCObject)]
        while pending:
            obj = pending.pop()
            if obj.marked:
                continue
            obj.marked = True
            pending.extend(child for child in obj.children() if not child.marked)

    def _sweep(self) -> None:
        survivors: List[GCObject] = []
        # Newest objects are visited first.
        for obj in reversed(self._objects):
            if obj.marked:
                obj.marked = False
                survivors.append(obj)
                continue
            self._bytes_allocated -= obj.total_size
            if obj.finalizer is not None:
                obj.finalizer(obj)
            obj.freed = True
        survivors.reverse()
        self._objects = survivors

    def _collect(self) -> None:
        self._mark()
        self._sweep()
        self._total_collections += 1
        self._next_gc = max(self._bytes_allocated * HEAP_GROW_FACTOR, INITIAL_THRESHOLD)

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("heap has been shut down")

    # -- public API ---------------------------------------------------------

    def alloc(
        self,
        size: int,
        kind: ObjectKind | int,
        finalizer: Optional[Finalizer] = None,
    ) -> GCObject:
        """Allocate a zeroed object of ``size`` bytes, collecting first if needed."""
        if not 0 <= size <= MAX_SIZE:
            raise ValueError(f"allocation size out of range: {size}")
        kind = ObjectKind(kind)
        with self._lock:
            self._ensure_initialized()
            if self._bytes_allocated + HEADER_SIZE + size > self._next_gc:
                self._collect()
            obj = GCObject(kind=kind, size=size, finalizer=finalizer)
            self._objects.append(obj)
            self._bytes_allocated += obj.total_size
            return obj

    def set_num_pointers(self, obj: Optional[GCObject], num_pointers: int) -> None:
        """Set how many leading slots of ``obj`` the marker traces."""
        if obj is None:
            return
        if not 0 <= num_pointers <= MAX_POINTERS:
            raise ValueError(f"pointer count out of range: {num_pointers}")
        obj.num_pointers = num_pointers

    def collect(self) -> None:
        """Run a full mark-and-sweep collection."""
        with self._lock:
            self._collect()

    def shutdown(self) -> None:
        """Finalize and release every object; the heap cannot allocate afterwards."""
        with self._lock:
            if not self._initialized:
                return
            for obj in reversed(self._objects):
                if obj.finalizer is not None:
                    obj.finalizer(obj)
                obj.freed = True
            self._objects = []
            self._bytes_allocated = 0
            self._roots = []
            self._initialized = False

    def push_root(self, root: Root) -> None:
        """Register a root slot on the shadow stack."""
        with self._lock:
            self._ensure_initialized()
            self._roots.append(root)

    def pop_root(self) -> None:
        """Drop the most recently pushed root, if any."""
        with self._lock:
            if self._roots:
                self._roots.pop()

    def pop_roots(self, n: int) -> None:
        """Drop the ``n`` most recent roots; more than are present clears the stack."""
        if n < 0:
            raise ValueError(f"cannot pop a negative number of roots: {n}")
        with self._lock:
            if n >= len(self._roots):
                self._roots.clear()
            else:
                del self._roots[len(self._roots) - n:]

    def bytes_allocated(self) -> int:
        """Bytes currently held by live objects, headers included."""
        return self._bytes_allocated

    def object_count(self) -> int:
        """Number of objects currently on the heap."""
        return len(self._objects)

    def total_collections(self) -> int:
        """Number of collections run so far."""
        return self._total_collections