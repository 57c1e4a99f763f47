__all__ = [
    "DispatchLogger",
    "DispatchRecord",
    "notify_dispatch",
]

import contextvars
import dataclasses
import typing
from collections import defaultdict

_active_loggers = contextvars.ContextVar[tuple["DispatchLogger", ...]]("shopgraph_dispatch_loggers", default=())


@dataclasses.dataclass
class DispatchRecord:
    """Log of a single batch dispatch of a dataloader."""

    key_space: str
    keys: list[typing.Hashable]
    duration: float | None = None
    exception: BaseException | None = None

    @property
    def batch_size(self) -> int:
        return len(self.keys)


@dataclasses.dataclass
class _DispatchGroup:
    """Log of a group of dispatches."""

    dispatches: list[DispatchRecord] = dataclasses.field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.num_dispatches} dispatches in {self.total_duration:.3f}s"

    @property
    def total_duration(self) -> float:
        """Total duration of all dispatches in seconds."""
        return sum(d.duration for d in self.dispatches if d.duration is not None)

    @property
    def num_dispatches(self) -> int:
        return len(self.dispatches)

    def for_key_space(self, key_space: str) -> list[DispatchRecord]:
        return [d for d in self.dispatches if d.key_space == key_space]

    @property
    def duplicates(self) -> dict[str, set[typing.Hashable]]:
        """Keys which were fetched more than once, per key space."""
        seen: dict[str, set[typing.Hashable]] = defaultdict(set)
        duplicates: dict[str, set[typing.Hashable]] = defaultdict(set)
        for dispatch in self.dispatches:
            for key in dispatch.keys:
                if key in seen[dispatch.key_space]:
                    duplicates[dispatch.key_space].add(key)
                seen[dispatch.key_space].add(key)
        return dict(duplicates)


@dataclasses.dataclass
class DispatchLogger(_DispatchGroup):
    """
    Records every dataloader dispatch made while the logger is active.
    This can be used as an N+1 instrumentation tool during development and in tests.

    Example usage:
        with DispatchLogger() as dl:
            await schema.execute(query, context_value=context)
        print(dl.dispatches)
    """

    _token: contextvars.Token | None = dataclasses.field(default=None, repr=False)

    def __enter__(self) -> typing.Self:
        self._token = _active_loggers.set((*_active_loggers.get(), self))
        return self

    def __exit__(self, *args, **kwargs) -> None:
        if self._token is not None:
            _active_loggers.reset(self._token)
            self._token = None


def notify_dispatch(record: DispatchRecord) -> None:
    for dispatch_logger in _active_loggers.get():
        dispatch_logger.dispatches.append(record)
