"""Single-flight coordination for async start-once operations.

``SingleFlight`` makes sure that, for a given key, only one execution of an
async operation is in flight at any time. Concurrent callers asking for the
same key await the one shared task and all observe its single outcome: the
same result, or the same exception. Once the task finishes its entry is
dropped, so a failed attempt can be retried by the next caller.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict, Generic, Hashable, List, TypeVar

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """Keyed start-once coordinator.

    Example:
        ```python
        flight: SingleFlight[Engine] = SingleFlight()
        engine = await flight.run("hsnweb", lambda: connect("hsnweb"))
        ```
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._tasks: Dict[Hashable, asyncio.Task[T]] = {}

    async def run(self, key: Hashable, factory: Callable[[], Awaitable[T]]) -> T:
        """Run ``factory`` once for ``key`` and share its outcome.

        Args:
            key: Identifier of the operation (e.g. a project name)
            factory: Zero-argument callable returning the awaitable to run
                when no execution for ``key`` is in flight

        Returns:
            The result of the shared execution.

        Raises:
            Exception: Whatever the shared execution raised.
        """
        async with self._lock:
            task = self._tasks.get(key)
            if task is None:
                task = asyncio.ensure_future(factory())
                self._tasks[key] = task
                task.add_done_callback(lambda done, k=key: self._forget(k, done))
        # Shield so one cancelled caller does not cancel the attempt for the others.
        return await asyncio.shield(task)

    def in_flight(self, key: Hashable) -> bool:
        """Return True while an execution for ``key`` is running."""
        return key in self._tasks

    def pending(self) -> List[Hashable]:
        """Keys with an execution in flight."""
        return list(self._tasks)

    async def wait(self, key: Hashable) -> None:
        """Wait until the execution in flight for ``key`` (if any) has finished.

        Its outcome is not raised here; the callers of ``run`` receive it.
        """
        task = self._tasks.get(key)
        if task is not None:
            await asyncio.wait([task])

    def _forget(self, key: Hashable, task: asyncio.Task[T]) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
