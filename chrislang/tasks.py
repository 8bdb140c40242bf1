"""Async tasks run on threads, with a registry that drains them at exit."""

from __future__ import annotations

import enum
import threading
from typing import Any, Callable, List, Optional

MAX_TASKS = 1024


class TaskKind(enum.IntEnum):
    """Scheduling hint given when a task is spawned."""

    IO = 0
    COMPUTE = 1


class TaskState(enum.IntEnum):
    """Lifecycle of a task."""

    PENDING = 0
    RUNNING = 1
    COMPLETED = 2


class Future:
    """The eventual result of a function running on its own thread."""

    def __init__(self, func: Callable[[Any], Any], arg: Any, kind: TaskKind) -> None:
        self.kind = TaskKind(kind)
        self._func = func
        self._arg = arg
        self._state = TaskState.PENDING
        self._result: Any = None
        self._error: Optional[BaseException] = None
        self._cond = threading.Condition()
        self._thread = threading.Thread(target=self._run, daemon=True)

    def _start(self) -> None:
        self._thread.start()

    def _run(self) -> None:
        with self._cond:
            self._state = TaskState.RUNNING
        result: Any = None
        error: Optional[BaseException] = None
        try:
            result = self._func(self._arg)
        except BaseException as exc:  # handed to whoever waits
            error = exc
        with self._cond:
            self._result = result
            self._error = error
            self._state = TaskState.COMPLETED
            self._arg = None
            self._cond.notify_all()

    def state(self) -> TaskState:
        """The task's current state."""
        with self._cond:
            return self._state

    def wait(self) -> Any:
        """Block until the task finishes and return its result, or raise its error."""
        with self._cond:
            self._cond.wait_for(lambda: self._state is TaskState.COMPLETED)
        self._thread.join()
        if self._error is not None:
            raise self._error
        return self._result


class TaskRegistry:
    """Spawns tasks and remembers up to ``max_tasks`` of them for ``run_loop``."""

    def __init__(self, max_tasks: int = MAX_TASKS) -> None:
        if max_tasks < 0:
            raise ValueError(f"task limit must not be negative: {max_tasks}")
        self._max_tasks = max_tasks
        self._tasks: List[Future] = []
        self._lock = threading.Lock()

    def spawn(
        self,
        func: Callable[[Any], Any],
        arg: Any = None,
        kind: TaskKind = TaskKind.IO,
    ) -> Future:
        """Start ``func(arg)`` on a new thread and return its future."""
        future = Future(func, arg, kind)
        with self._lock:
            # Past the limit the task still runs, it is just not tracked.
            if len(self._tasks) < self._max_tasks:
                self._tasks.append(future)
        future._start()
        return future

    def run_loop(self) -> None:
        """Wait for every registered task to complete, then forget them all."""
        with self._lock:
            pending = list(self._tasks)
        for future in pending:
            with future._cond:
                future._cond.wait_for(lambda f=future: f._state is TaskState.COMPLETED)
            future._thread.join()
        with self._lock:
            self._tasks.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)