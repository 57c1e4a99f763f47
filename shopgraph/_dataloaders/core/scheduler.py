__all__ = [
    "AsyncioBatchScheduler",
    "BatchScheduler",
    "DispatchFn",
    "ManualBatchScheduler",
]

import abc
import asyncio
import collections
import logging
import typing

logger = logging.getLogger(__name__)

DispatchFn = typing.Callable[[], typing.Awaitable[None]]


class BatchScheduler(abc.ABC):
    """
    Decides *when* the batches accumulated by dataloaders are dispatched.

    A dataloader calls `schedule` once per batch, with the first `load` of that batch.
    Everything loaded before the scheduled dispatch runs joins the same batch.
    """

    @abc.abstractmethod
    def schedule(self, dispatch: DispatchFn) -> None:
        raise NotImplementedError


class AsyncioBatchScheduler(BatchScheduler):
    """
    Dispatches once the current synchronous turn of the event loop yields control,
    i.e., after every resolver that can run without waiting has run.

    With `delay` > 0, the dispatch is postponed by (at most) `delay` seconds instead,
    which lets engines without a clear end-of-pass point collect bigger batches.
    """

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self._tasks: set[asyncio.Task] = set()

    def schedule(self, dispatch: DispatchFn) -> None:
        loop = asyncio.get_running_loop()
        if self.delay > 0:
            loop.call_later(self.delay, self._start, dispatch)
        else:
            loop.call_soon(self._start, dispatch)

    def _start(self, dispatch: DispatchFn) -> None:
        task = asyncio.ensure_future(dispatch())
        # the event loop keeps only weak references to tasks
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)


class ManualBatchScheduler(BatchScheduler):
    """
    Two-phase scheduler for engines which signal the end of a resolution pass explicitly.

    Usage:
    >>> scheduler = ManualBatchScheduler()
    ... registry = DataLoaderRegistry(scheduler=scheduler)
    ... futures = [registry["customer_by_id"].load(key) for key in (1, 2, 1, 3)]  # accumulate
    ... await scheduler.flush()  # end of pass -> a single batch with keys [1, 2, 3]
    """

    def __init__(self) -> None:
        self._pending: collections.deque[DispatchFn] = collections.deque()

    def schedule(self, dispatch: DispatchFn) -> None:
        self._pending.append(dispatch)

    @property
    def pending(self) -> int:
        """Number of armed dispatches waiting for the next flush."""
        return len(self._pending)

    async def flush(self) -> int:
        """
        Run all armed dispatches, including those armed while flushing.
        :return: The number of dispatches run.
        """
        dispatched = 0
        while self._pending:
            batch = list(self._pending)
            self._pending.clear()
            dispatched += len(batch)
            logger.debug("Flushing %d armed dispatches.", len(batch))
            await asyncio.gather(*(dispatch() for dispatch in batch))
        return dispatched

    async def run[T](self, awaitable: typing.Awaitable[T], poll_interval: float = 0.05) -> T:
        """
        Drive `awaitable` to completion, flushing whenever a resolution pass leaves armed dispatches behind.
        When nothing is armed, wait for the awaitable for at most `poll_interval` seconds before checking again.
        """
        task = asyncio.ensure_future(awaitable)
        while not task.done():
            # let everything that can run without waiting run first
            await asyncio.sleep(0)
            if self._pending:
                await self.flush()
            elif not task.done():
                await asyncio.wait({task}, timeout=poll_interval)
        return task.result()
