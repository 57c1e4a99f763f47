__all__ = [
    "AddressPKDataLoader",
    "CustomerOrdersFKDataLoader",
    "CustomerPKDataLoader",
    "OrderLineItemsFKDataLoader",
    "ProductPKDataLoader",
    "store_dataloaders",
]

from shopgraph._dataloaders import DataLoaderFactory, FKDataLoader, PKDataLoader
from shopgraph.store import models
from shopgraph.store.repositories import (
    address_repository,
    customer_repository,
    order_repository,
    product_repository,
)


class CustomerPKDataLoader(PKDataLoader[int, models.Customer]):
    key_space = "customer_by_id"

    async def get_by_ids(self, ids: list[int]) -> list[models.Customer]:
        return await customer_repository.find_by_ids(ids)


class AddressPKDataLoader(PKDataLoader[int, models.Address]):
    key_space = "address_by_id"

    async def get_by_ids(self, ids: list[int]) -> list[models.Address]:
        return await address_repository.find_by_ids(ids)


class ProductPKDataLoader(PKDataLoader[int, models.Product]):
    """A line item can't exist without its product, so a missing product is an error."""

    key_space = "product_by_id"
    missing_ok = False

    async def get_by_ids(self, ids: list[int]) -> list[models.Product]:
        return await product_repository.find_by_ids(ids)


class CustomerOrdersFKDataLoader(FKDataLoader[int, list[models.Order]]):
    key_space = "orders_by_customer_id"

    async def get_items_map(self, ids: list[int]) -> dict[int, list[models.Order]]:
        return await order_repository.find_by_customer_ids(ids)


class OrderLineItemsFKDataLoader(FKDataLoader[int, list[models.LineItem]]):
    key_space = "line_items_by_order_id"

    async def get_items_map(self, ids: list[int]) -> dict[int, list[models.LineItem]]:
        return await order_repository.find_line_items_by_order_ids(ids)


store_dataloaders = DataLoaderFactory(
    CustomerPKDataLoader,
    AddressPKDataLoader,
    ProductPKDataLoader,
    CustomerOrdersFKDataLoader,
    OrderLineItemsFKDataLoader,
)
