"""
Ordered Map
===========

Apply an asynchronous worker to every element of a collection and get one
result per input position, in input order, no matter in which order the
workers complete.

Two forms share the same completion tracking:

- ``ordered_map(items, worker, on_complete)``: callback form. Each worker is
  called as ``worker(item, done)`` and must call ``done(result)`` exactly once.
  ``on_complete(results)`` fires exactly once, after every worker has called
  ``done`` and after all workers have been dispatched.
- ``await gather_ordered(items, worker)``: awaitable form. Each worker is a
  coroutine function; the results are returned as a list.

A worker that never calls ``done`` or calls it twice corrupts the pending count
of its invocation. This is an unchecked precondition.
"""

from typing import Any, Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar
import asyncio

from rasterinline.config.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")

Done = Callable[..., None]
Worker = Callable[[T, Done], None]


def clone_list(items: Sequence[T]) -> List[T]:
    """Return a shallow copy of ``items``."""
    return list(items)


class OrderedMapState(Generic[R]):
    """Completion tracking owned by a single ordered map invocation."""

    def __init__(self, count: int, on_complete: Callable[[List[Optional[R]]], None]):
        self.results: List[Optional[R]] = [None] * count
        self.pending = count
        self.dispatch_finished = False
        self._on_complete = on_complete

    def completion_handle(self, index: int) -> Done:
        """Create the ``done`` callback that fills the result slot at ``index``."""

        def done(result: Optional[R] = None) -> None:
            self.results[index] = result
            self.pending -= 1
            self._complete_if_finished()

        return done

    def finish_dispatch(self) -> None:
        """Mark every worker as dispatched."""
        self.dispatch_finished = True
        self._complete_if_finished()

    def _complete_if_finished(self) -> None:
        # A worker may call done() synchronously while later items are still
        # being dispatched, so both conditions are required.
        if self.dispatch_finished and self.pending == 0:
            self._on_complete(list(self.results))


def ordered_map(
    items: Sequence[T],
    worker: Worker,
    on_complete: Callable[[List[Any]], None],
) -> None:
    """
    Dispatch ``worker`` for every item and report all results at once.

    The items are copied before the first dispatch, so workers may mutate the
    caller's collection without changing which items get dispatched.

    Args:
        items: Items to process
        worker: Called as ``worker(item, done)`` once per item, in input order
        on_complete: Called once with the list of results, in input order
    """
    snapshot = clone_list(items)
    state: OrderedMapState[Any] = OrderedMapState(len(snapshot), on_complete)

    for index, item in enumerate(snapshot):
        worker(item, state.completion_handle(index))

    state.finish_dispatch()


async def gather_ordered(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    max_concurrent: Optional[int] = None,
) -> List[R]:
    """
    Run a coroutine worker for every item concurrently.

    All workers run to completion before this returns. If any worker raised,
    the exception of the first failing position is re-raised afterwards.
    If the caller is cancelled while waiting, the unfinished workers are
    cancelled too.

    Args:
        items: Items to process
        worker: Coroutine function applied to each item
        max_concurrent: Maximum number of workers in flight, unbounded if None

    Returns:
        List of results in the same order as ``items``

    Raises:
        ValueError: If max_concurrent is not a positive integer
    """
    if max_concurrent is not None and max_concurrent <= 0:
        raise ValueError("max_concurrent must be a positive integer")

    loop = asyncio.get_running_loop()
    finished: "asyncio.Future[List[asyncio.Task]]" = loop.create_future()
    semaphore = asyncio.Semaphore(max_concurrent) if max_concurrent else None

    async def run(item: T) -> R:
        if semaphore is None:
            return await worker(item)
        async with semaphore:
            return await worker(item)

    started: List[asyncio.Task] = []

    def dispatch(item: T, done: Done) -> None:
        task = loop.create_task(run(item))
        started.append(task)
        task.add_done_callback(done)

    def complete(tasks: List[Any]) -> None:
        if not finished.done():
            finished.set_result(tasks)

    ordered_map(items, dispatch, complete)
    logger.debug("Workers dispatched", count=len(items), max_concurrent=max_concurrent)

    try:
        tasks = await finished
    except asyncio.CancelledError:
        # The caller gave up, so nobody will observe the workers
        for task in started:
            if not task.done():
                task.cancel()
        raise

    errors = [task.exception() for task in tasks]
    for error in errors:
        if error is not None:
            raise error
    return [task.result() for task in tasks]
