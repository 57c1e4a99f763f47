__all__ = [
    "PKDataLoader",
]

import abc
import typing

from shopgraph._base.exceptions import ObjectNotFoundError
from shopgraph._dataloaders.core import dataloaders


class PKDataLoader[K: typing.Hashable, R](dataloaders.BaseDataLoader[K, R]):
    """
    Base loader to load objects by their primary key.

    EXAMPLE - load Customer of an Order:
        1. DATALOADER DEFINITION
        class CustomerPKDataLoader(PKDataLoader[int, models.Customer]):
            async def get_by_ids(self, ids: list[int]) -> list[models.Customer]:
                return await customer_repository.find_by_ids(ids)

        2. USAGE
        @strawberry.type
        class OrderType:
            ...

            @strawberry.field
            @staticmethod
            def customer(root: strawberry.Parent["models.Order"], info: strawberry.Info) -> "CustomerType":
                return CustomerPKDataLoader(info).load(root.customer_id)

    Keys without a matching object resolve to `None`, or to `ObjectNotFoundError` if `missing_ok` is False.
    """

    pk_attr: typing.ClassVar[str] = "pk"
    missing_ok: typing.ClassVar[bool] = True

    @abc.abstractmethod
    def get_by_ids(
        self,
        ids: list[K],
        /,
    ) -> typing.Any:  # noqa: ANN401
        """Return the objects with the given ids, in any order (sync or async)."""

    def load_fn(self, keys: list[K]) -> typing.Any:  # noqa: ANN401
        return self.get_by_ids(keys)

    def process_results(self, keys: list[K], results: typing.Iterable[R]) -> list[R | None | BaseException]:
        key_to_res: dict[K, R] = {getattr(r, self.pk_attr): r for r in results}
        # ensure results are ordered in the same way as input keys
        return [
            key_to_res[key] if key in key_to_res else self._missing(key)
            for key in keys
        ]

    def _missing(self, key: K) -> None | ObjectNotFoundError:
        if self.missing_ok:
            return None
        return ObjectNotFoundError(key_space=self.name, key=key)
