__all__ = [
    "DataLoaderFactory",
]
import logging
import typing

from shopgraph._dataloaders.core.dataloaders import BaseDataLoader, BatchLoadFn, DataLoader
from shopgraph._dataloaders.core.request_context import DataLoaderRegistry

if typing.TYPE_CHECKING:
    from shopgraph._dataloaders.core.scheduler import BatchScheduler

logger = logging.getLogger(__name__)


class _LoaderOptions(typing.TypedDict, total=False):
    max_batch_size: int | None
    cache: bool
    cache_key_fn: typing.Callable[[typing.Any], typing.Hashable]


class DataLoaderFactory:
    """
    Builds a fresh, isolated set of dataloaders - one per key space - for every request.

    Key spaces are either `BaseDataLoader` subclasses or plain batch load functions registered under a name.

    Example:
    -------
        factory = DataLoaderFactory(CustomerDataLoader, ProductDataLoader)
        factory.register("order_by_id", load_orders)

        # at the start of each request
        context = DataloadersContext(request=request, response=response, dataloaders=factory.create())

    """

    def __init__(
        self,
        *loader_classes: type[BaseDataLoader],
        scheduler_factory: "typing.Callable[[], BatchScheduler] | None" = None,
    ) -> None:
        self._loader_classes: dict[str, type[BaseDataLoader]] = {}
        self._functions: dict[str, tuple[BatchLoadFn, _LoaderOptions]] = {}
        self.scheduler_factory = scheduler_factory
        for loader_cls in loader_classes:
            self.register_class(loader_cls)

    @property
    def key_spaces(self) -> list[str]:
        return [*self._loader_classes, *self._functions]

    def register_class(self, loader_cls: type[BaseDataLoader]) -> type[BaseDataLoader]:
        """Register a class based key space. Can be used as a class decorator."""
        self._check_free(loader_cls.get_key_space())
        self._loader_classes[loader_cls.get_key_space()] = loader_cls
        return loader_cls

    def register(self, key_space: str, load_fn: BatchLoadFn, **options: typing.Unpack[_LoaderOptions]) -> None:
        """Register a key space served by a plain batch load function."""
        self._check_free(key_space)
        self._functions[key_space] = (load_fn, options)

    def create(self) -> DataLoaderRegistry:
        """Return a new registry with a new dataloader for every registered key space."""
        scheduler = self.scheduler_factory() if self.scheduler_factory is not None else None
        registry = DataLoaderRegistry(scheduler=scheduler)
        for loader_cls in self._loader_classes.values():
            loader_cls(registry)
        for key_space, (load_fn, options) in self._functions.items():
            registry.add(key_space, DataLoader(load_fn, scheduler=registry.scheduler, name=key_space, **options))
        logger.debug("Created dataloaders for key spaces: %s", ", ".join(registry))
        return registry

    def _check_free(self, key_space: str) -> None:
        if key_space in self._loader_classes or key_space in self._functions:
            raise ValueError(f"Key space `{key_space}` is already registered.")
