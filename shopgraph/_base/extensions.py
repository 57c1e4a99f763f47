__all__ = [
    "DataLoadersExtension",
]

import logging
import typing

import strawberry.extensions

from shopgraph._base.exceptions import DataLoaderContextError
from shopgraph._dataloaders.core.factories import DataLoaderFactory
from shopgraph._dataloaders.core.request_context import DataLoaderRegistry

logger = logging.getLogger(__name__)


class DataLoadersExtension(strawberry.extensions.SchemaExtension):
    """
    Gives every operation its own, fresh set of dataloaders and discards it once the operation is over.

    Usage:
    >>> schema = strawberry.Schema(
    ...     query=Query,
    ...     extensions=[DataLoadersExtension.for_factory(dataloader_factory)],
    ... )

    The operation context has to be able to hold the registry - either an object with a `dataloaders`
    attribute (see `InfoDataloadersContextMixin`) or a dict. Without any context, a dict is created.
    """

    factory: typing.ClassVar[DataLoaderFactory | None] = None

    @classmethod
    def for_factory(cls, factory: DataLoaderFactory) -> type["DataLoadersExtension"]:
        return typing.cast(
            type[DataLoadersExtension],
            type(f"{cls.__name__}ForFactory", (cls,), {"factory": factory}),
        )

    def create_registry(self) -> DataLoaderRegistry:
        if self.factory is None:
            return DataLoaderRegistry()
        return self.factory.create()

    def on_operation(self) -> typing.Iterator[None]:
        context = self.execution_context.context
        if context is None:
            context = self.execution_context.context = {}
        registry = self.create_registry()
        if isinstance(context, dict):
            context["dataloaders"] = registry
        elif hasattr(context, "dataloaders"):
            context.dataloaders = registry
        else:
            raise DataLoaderContextError(
                f"Can't attach dataloaders to the context of type `{type(context).__name__}`.",
            )
        try:
            yield
        finally:
            registry.close()
