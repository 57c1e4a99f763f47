__all__ = [
    "DataLoaderRegistry",
    "DataloadersContext",
    "InfoDataloadersContextMixin",
    "get_registry",
]
import collections.abc
import dataclasses
import logging
import typing

from strawberry.django.context import StrawberryDjangoContext

from shopgraph._app_settings import app_settings
from shopgraph._base.exceptions import DataLoaderContextError
from shopgraph._dataloaders.core.scheduler import AsyncioBatchScheduler, BatchScheduler

if typing.TYPE_CHECKING:
    import strawberry

    from shopgraph._dataloaders.core.dataloaders import DataLoader

logger = logging.getLogger(__name__)


class DataLoaderRegistry(collections.abc.Mapping[str, "DataLoader"]):
    """
    The dataloaders of a single request, by key space. All of them share one batch scheduler.

    A registry must never be shared between two requests. Once the request is over, `close` it -
    all memoized values are dropped and no more dataloaders can be added.
    """

    def __init__(self, scheduler: BatchScheduler | None = None) -> None:
        self.scheduler = scheduler or AsyncioBatchScheduler(delay=app_settings.DATALOADERS.BATCH_DELAY)
        self._loaders: dict[str, DataLoader] = {}
        self._closed = False

    def __getitem__(self, key_space: str) -> "DataLoader":
        return self._loaders[key_space]

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self._loaders)

    def __len__(self) -> int:
        return len(self._loaders)

    def __repr__(self) -> str:
        state = "closed" if self._closed else ", ".join(self._loaders)
        return f"<{type(self).__name__} [{state}]>"

    @property
    def closed(self) -> bool:
        return self._closed

    def add(self, key_space: str, loader: "DataLoader") -> None:
        if self._closed:
            raise DataLoaderContextError("The dataloader registry is closed, the request it belonged to is over.")
        if key_space in self._loaders:
            raise DataLoaderContextError(f"Key space `{key_space}` is already registered.")
        self._loaders[key_space] = loader

    def get_or_create[L: "DataLoader"](self, key_space: str, factory: typing.Callable[[], L]) -> L:
        if key_space not in self._loaders:
            self.add(key_space, factory())
        return self._loaders[key_space]

    def close(self) -> None:
        for loader in self._loaders.values():
            loader.clear_all()
        self._loaders.clear()
        self._closed = True


@dataclasses.dataclass
class InfoDataloadersContextMixin:
    """
    A mixin to be used with a strawberry context (e.g. `StrawberryDjangoContext`) to store dataloaders.
    Usage:
    >>> from strawberry.django.context import StrawberryDjangoContext
    ...
    ... @dataclasses.dataclass
    ... class Context(InfoDataloadersContextMixin, StrawberryDjangoContext):
    ...     pass
    """

    dataloaders: DataLoaderRegistry = dataclasses.field(default_factory=DataLoaderRegistry)


@dataclasses.dataclass
class DataloadersContext(InfoDataloadersContextMixin, StrawberryDjangoContext):
    pass


def get_registry(source: "strawberry.Info | DataLoaderRegistry | typing.Any") -> DataLoaderRegistry:  # noqa: ANN401
    """
    Return the dataloader registry of the current request.
    :param source: The registry itself, resolver info, or the request context.
    :raises DataLoaderContextError: If there's no registry available.
    """
    if isinstance(source, DataLoaderRegistry):
        return source
    context = getattr(source, "context", source)
    if isinstance(context, typing.Mapping):
        registry = context.get("dataloaders")
    else:
        registry = getattr(context, "dataloaders", None)
    if not isinstance(registry, DataLoaderRegistry):
        raise DataLoaderContextError(
            "No dataloader registry found in the request context. "
            "Use a context with `InfoDataloadersContextMixin` or the `DataLoadersExtension`.",
        )
    return registry
