"""
Backing store access. Every function fetches a whole batch of keys with a single query,
which is what the dataloaders of `shopgraph.store.dataloaders` are built on.
"""
__all__ = [
    "AddressRepository",
    "CustomerRepository",
    "OrderRepository",
    "ProductRepository",
    "address_repository",
    "customer_repository",
    "order_repository",
    "product_repository",
]

import typing
from collections import defaultdict

from asgiref.sync import sync_to_async

from shopgraph._list.page import Page
from shopgraph.store import models


def _group_by(items: typing.Iterable[typing.Any], attr: str) -> dict[int, list]:
    groups: dict[int, list] = defaultdict(list)
    for item in items:
        groups[getattr(item, attr)].append(item)
    return dict(groups)


class CustomerRepository:
    async def find_all(self, limit: int, page: int) -> Page[models.Customer]:
        qs = models.Customer.objects.order_by("id")
        return await sync_to_async(Page(qs, page=page, size=limit).evaluate)()

    async def find_by_ids(self, ids: typing.Sequence[int]) -> list[models.Customer]:
        return await sync_to_async(list)(models.Customer.objects.filter(pk__in=ids).order_by())


class AddressRepository:
    async def find_by_ids(self, ids: typing.Sequence[int]) -> list[models.Address]:
        return await sync_to_async(list)(models.Address.objects.filter(pk__in=ids).order_by())


class OrderRepository:
    async def find_by_customer_ids(self, customer_ids: typing.Sequence[int]) -> dict[int, list[models.Order]]:
        orders = await sync_to_async(list)(models.Order.objects.filter(customer_id__in=customer_ids).order_by("id"))
        return _group_by(orders, "customer_id")

    async def find_line_items_by_order_ids(
        self,
        order_ids: typing.Sequence[int],
    ) -> dict[int, list[models.LineItem]]:
        line_items = await sync_to_async(list)(models.LineItem.objects.filter(order_id__in=order_ids).order_by("id"))
        return _group_by(line_items, "order_id")


class ProductRepository:
    async def find_by_ids(self, ids: typing.Sequence[int]) -> list[models.Product]:
        return await sync_to_async(list)(models.Product.objects.filter(pk__in=ids).order_by())


customer_repository = CustomerRepository()
address_repository = AddressRepository()
order_repository = OrderRepository()
product_repository = ProductRepository()
