__all__ = (
    "BaseDataLoader",
    "DataLoader",
)

import abc
import asyncio
import collections.abc
import dataclasses
import functools
import inspect
import logging
import time
import typing

from shopgraph._app_settings import app_settings
from shopgraph._base.dispatch_logger import DispatchRecord, notify_dispatch
from shopgraph._base.exceptions import DataLoaderContextError, LoaderContractError
from shopgraph._base.types import NodePath, Outcome
from shopgraph._dataloaders.core.request_context import get_registry
from shopgraph._dataloaders.core.scheduler import AsyncioBatchScheduler, BatchScheduler

if typing.TYPE_CHECKING:
    import strawberry

    from shopgraph._dataloaders.core.request_context import DataLoaderRegistry

logger = logging.getLogger(__name__)

type BatchLoadFn[K, R] = typing.Callable[
    [list[K]],
    typing.Sequence[R | BaseException] | typing.Awaitable[typing.Sequence[R | BaseException]],
]


class _Entry(typing.NamedTuple):
    key: typing.Any
    cache_key: typing.Hashable
    future: asyncio.Future


@dataclasses.dataclass(eq=False)
class _Batch:
    """Distinct keys accumulated since the last dispatch, in the order they were first requested."""

    entries: list[_Entry] = dataclasses.field(default_factory=list)
    futures: dict[typing.Hashable, asyncio.Future] = dataclasses.field(default_factory=dict)
    dispatched: bool = False

    def add(self, entry: _Entry) -> None:
        self.entries.append(entry)
        self.futures[entry.cache_key] = entry.future

    def remove(self, cache_key: typing.Hashable) -> None:
        self.futures.pop(cache_key, None)
        self.entries = [e for e in self.entries if e.cache_key != cache_key]


class DataLoader[K, R]:
    """
    Collects individual `load` calls of one key space and resolves them with as few calls
    of the batch load function as possible.

    - Keys loaded before the scheduler dispatches the batch are fetched together, each distinct key once.
    - Every outcome (value or per-key error) is memoized for the lifetime of the loader,
      which should never outlive a single request.
    - A batch load function that raises fails every key of that batch. Nothing of that batch stays cached.

    The batch load function gets a list of distinct keys and has to return a sequence of the same length,
    where the i-th item is the value (or an exception instance) of the i-th key. It can be sync or async.
    """

    def __init__(
        self,
        load_fn: BatchLoadFn[K, R],
        *,
        scheduler: BatchScheduler | None = None,
        name: str | None = None,
        max_batch_size: int | None = None,
        cache: bool = True,
        cache_key_fn: typing.Callable[[K], typing.Hashable] | None = None,
    ) -> None:
        if max_batch_size is not None and max_batch_size < 1:
            raise ValueError("`max_batch_size` must be a positive integer or None.")
        self._batch_load_fn = load_fn
        self._scheduler = scheduler or AsyncioBatchScheduler()
        self.name = name or getattr(load_fn, "__qualname__", type(self).__name__)
        self.max_batch_size = max_batch_size
        self.cache = cache
        self._cache_key_fn = cache_key_fn or (lambda key: key)
        self._cache: dict[typing.Hashable, asyncio.Future[R]] = {}
        self._batch: _Batch | None = None
        # every key waiting for a dispatch, with the batch it waits in
        self._pending: dict[typing.Hashable, _Batch] = {}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} cached={len(self._cache)}>"

    def load(self, key: K) -> "asyncio.Future[R]":
        """Return a future of the value of `key`. The key is fetched with the next dispatch, unless it's cached."""
        cache_key = self._cache_key_fn(key)
        if self.cache and (cached := self._cache.get(cache_key)) is not None:
            return cached

        if (pending_batch := self._pending.get(cache_key)) is not None:
            return pending_batch.futures[cache_key]

        batch = self._current_batch()
        future: asyncio.Future[R] = asyncio.get_running_loop().create_future()
        batch.add(_Entry(key=key, cache_key=cache_key, future=future))
        self._pending[cache_key] = batch
        if self.cache:
            self._cache[cache_key] = future
        if len(batch.entries) == 1:
            # first key since the last dispatch -> arm the dispatch of this batch
            self._scheduler.schedule(functools.partial(self._dispatch_batch, batch))
        return future

    def load_many(self, keys: typing.Iterable[K]) -> typing.Awaitable[list[R]]:
        """Load all `keys`. The results are in the order of `keys`."""
        return asyncio.gather(*(self.load(key) for key in keys))

    async def load_outcomes(self, keys: typing.Iterable[K], path: NodePath = ()) -> list[Outcome[R]]:
        """Load all `keys`, but instead of raising, return an `Outcome` for each key (in the order of `keys`)."""
        results = await asyncio.gather(*(self.load(key) for key in keys), return_exceptions=True)
        return [
            Outcome(error=result, path=(*path, i)) if isinstance(result, BaseException)
            else Outcome(value=result, path=(*path, i))
            for i, result in enumerate(results)
        ]

    def prime(self, key: K, value: R | BaseException, force: bool = False) -> None:
        """
        Put `value` into the cache (an exception instance is cached as an error of the key).
        Does nothing if the key is already cached, unless `force` is set.
        """
        if not self.cache:
            return
        cache_key = self._cache_key_fn(key)
        if cache_key in self._cache and not force:
            return

        if (batch := self._pending.pop(cache_key, None)) is not None:
            # the key is waiting for a dispatch, resolve it right away and don't fetch it at all
            future = batch.futures[cache_key]
            batch.remove(cache_key)
        else:
            future = asyncio.get_running_loop().create_future()
        if isinstance(value, BaseException):
            future.set_exception(value)
        else:
            future.set_result(value)
        self._cache[cache_key] = future

    def prime_many(self, data: typing.Mapping[K, R | BaseException], force: bool = False) -> None:
        for key, value in data.items():
            self.prime(key, value, force=force)

    def clear(self, key: K) -> None:
        """Remove `key` from the cache. A batch which is waiting for the dispatch is not affected."""
        self._cache.pop(self._cache_key_fn(key), None)

    def clear_many(self, keys: typing.Iterable[K]) -> None:
        for key in keys:
            self.clear(key)

    def clear_all(self) -> None:
        self._cache.clear()

    async def dispatch(self) -> None:
        """Dispatch the current batch immediately, without waiting for the scheduler."""
        if self._batch is not None:
            await self._dispatch_batch(self._batch)

    def _current_batch(self) -> _Batch:
        batch = self._batch
        if batch is None or batch.dispatched or (
            self.max_batch_size is not None and len(batch.entries) >= self.max_batch_size
        ):
            batch = self._batch = _Batch()
        return batch

    async def _dispatch_batch(self, batch: _Batch) -> None:
        if batch.dispatched:
            return
        batch.dispatched = True
        if self._batch is batch:
            self._batch = None
        for entry in batch.entries:
            if self._pending.get(entry.cache_key) is batch:
                del self._pending[entry.cache_key]
        if not batch.entries:
            return

        keys = [entry.key for entry in batch.entries]
        record = DispatchRecord(key_space=self.name, keys=keys)
        logger.debug("Dispatching %d keys of `%s`.", len(keys), self.name)
        start = time.monotonic()
        try:
            results = self._batch_load_fn(keys)
            if inspect.isawaitable(results):
                results = await results
            self._check_results(keys, results)
        except asyncio.CancelledError:
            self._cancel_batch(batch)
            raise
        except Exception as e:
            record.exception = e
            self._fail_batch(batch, e)
        else:
            for entry, result in zip(batch.entries, results, strict=True):
                if entry.future.done():
                    continue
                if isinstance(result, BaseException):
                    entry.future.set_exception(result)
                else:
                    entry.future.set_result(result)
        finally:
            record.duration = time.monotonic() - start
            notify_dispatch(record)

    def _check_results(self, keys: list[K], results: typing.Any) -> None:  # noqa: ANN401
        if isinstance(results, str | bytes | collections.abc.Mapping) or not isinstance(
            results, collections.abc.Sequence
        ):
            raise LoaderContractError(
                key_space=self.name,
                message=f"must return a sequence of results, got `{type(results).__name__}`.",
            )
        if len(results) != len(keys):
            raise LoaderContractError(
                key_space=self.name,
                message=f"returned {len(results)} results for {len(keys)} keys.",
            )

    def _fail_batch(self, batch: _Batch, error: Exception) -> None:
        logger.warning("Batch load of %d keys of `%s` failed: %s", len(batch.entries), self.name, error)
        for entry in batch.entries:
            self._evict(entry)
            if not entry.future.done():
                entry.future.set_exception(error)

    def _cancel_batch(self, batch: _Batch) -> None:
        for entry in batch.entries:
            self._evict(entry)
            entry.future.cancel()

    def _evict(self, entry: _Entry) -> None:
        # the key may have been cleared or primed in the meantime
        if self._cache.get(entry.cache_key) is entry.future:
            del self._cache[entry.cache_key]


class BaseDataLoader[K: typing.Hashable, R](DataLoader[K, R], abc.ABC):
    """
    A dataloader defined as a class, one class per key space.

    Calling the class returns *the* instance of the current request: it's taken from the request's dataloader
    registry, or created (and stored there) on first use. This makes the dataloader a "semi-singleton" -
    a singleton in the context of each request, never shared between requests.

    EXAMPLE:
        class CustomerDataLoader(BaseDataLoader[int, models.Customer]):
            async def load_fn(self, keys: list[int]) -> list[models.Customer | None]:
                ...

        @strawberry.field
        @staticmethod
        def customer(root: strawberry.Parent[models.Order], info: strawberry.Info) -> "CustomerType":
            return CustomerDataLoader(info).load(root.customer_id)
    """

    key_space: typing.ClassVar[str | None] = None  # defaults to the class name
    max_batch_size: typing.ClassVar[int | None] = None  # defaults to the `DATALOADERS.MAX_BATCH_SIZE` setting
    cache: typing.ClassVar[bool | None] = None  # defaults to the `DATALOADERS.CACHE` setting

    _initialized: bool = False

    def __new__(
        cls,
        info: "strawberry.Info | DataLoaderRegistry",
        **kwargs,  # noqa: ARG003
    ) -> typing.Self:
        registry = get_registry(info)
        loader = registry.get_or_create(cls.get_key_space(), lambda: object.__new__(cls))
        if not isinstance(loader, cls):
            raise DataLoaderContextError(
                f"Key space `{cls.get_key_space()}` is already taken by `{type(loader).__name__}`.",
            )
        return loader

    def __init__(
        self,
        info: "strawberry.Info | DataLoaderRegistry",
    ) -> None:
        if self._initialized:
            return
        self._initialized = True
        registry = get_registry(info)
        cls = type(self)
        super().__init__(
            self._processed_load_fn,
            scheduler=registry.scheduler,
            name=cls.get_key_space(),
            max_batch_size=cls.max_batch_size if cls.max_batch_size is not None else app_settings.DATALOADERS.MAX_BATCH_SIZE,
            cache=cls.cache if cls.cache is not None else app_settings.DATALOADERS.CACHE,
        )

    @classmethod
    def get_key_space(cls) -> str:
        return cls.key_space or cls.__name__

    @abc.abstractmethod
    def load_fn(
        self,
        keys: list[K],
    ) -> typing.Any:  # noqa: ANN401
        """
        Function to load the raw results (sync or async).
        Results can then be further processed by overriding `process_results`.
        """
        raise NotImplementedError

    def process_results(
        self,
        keys: list[K],  # noqa: ARG002
        results: typing.Any,  # noqa: ANN401
    ) -> typing.Sequence[R | BaseException]:
        """
        Hook for subclasses to implement custom processing of the results.
        """
        return results

    async def _processed_load_fn(self, keys: list[K]) -> typing.Sequence[R | BaseException]:
        results = self.load_fn(keys)
        if inspect.isawaitable(results):
            results = await results
        return self.process_results(keys, results)
