__all__ = [
    "FKDataLoader",
]

import abc
import collections.abc
import typing

from shopgraph._base.exceptions import LoaderContractError
from shopgraph._dataloaders.core import dataloaders


class FKDataLoader[K: typing.Hashable, R](dataloaders.BaseDataLoader[K, R]):
    """
    Base loader for reversed FK relationship (e.g., Orders of a Customer).

    WARNING: This dataloader fetches *all* related objects for a given list of parent objects.

    EXAMPLE - load orders of a customer:
        class CustomerOrdersFKDataLoader(FKDataLoader[int, list[models.Order]]):
            async def get_items_map(self, ids: list[int]) -> dict[int, list[models.Order]]:
                return await order_repository.find_by_customer_ids(ids)

        ...
        return CustomerOrdersFKDataLoader(info).load(root.pk)
    """

    # if True, each key resolves to a single object (or None) instead of a list
    one_to_one: typing.ClassVar[bool] = False

    @abc.abstractmethod
    def get_items_map(
        self,
        ids: list[K],
        /,
    ) -> typing.Any:  # noqa: ANN401
        """Return a mapping of id -> related objects (sync or async). Ids without related objects can be left out."""

    def load_fn(self, keys: list[K]) -> typing.Any:  # noqa: ANN401
        return self.get_items_map(keys)

    def process_results(self, keys: list[K], results: typing.Mapping[K, list]) -> list:
        if not isinstance(results, collections.abc.Mapping):
            raise LoaderContractError(
                key_space=self.name,
                message=f"must return a mapping of id -> related objects, got `{type(results).__name__}`.",
            )
        if self.one_to_one:
            return [next(iter(results.get(key) or [None])) for key in keys]
        return [results.get(key, []) for key in keys]
