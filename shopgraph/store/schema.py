__all__ = [
    "Query",
    "schema",
]

import logging

import strawberry

from shopgraph._base.extensions import DataLoadersExtension
from shopgraph._base.types import path_from_info
from shopgraph._list.graphql import PageInput
from shopgraph.store.dataloaders import (
    CustomerOrdersFKDataLoader,
    CustomerPKDataLoader,
    ProductPKDataLoader,
    store_dataloaders,
)
from shopgraph.store.payments import load_payment_records
from shopgraph.store.repositories import customer_repository
from shopgraph.store.types import (
    CustomerPage,
    CustomerType,
    OrderPayment,
    OrderType,
    ProductType,
    to_payment_type,
)

logger = logging.getLogger(__name__)


@strawberry.type
class Query:
    @strawberry.field
    async def customers(self, info: strawberry.Info, page_input: PageInput) -> CustomerPage:
        page = await customer_repository.find_all(limit=page_input.limit, page=page_input.page)
        # the customers are known now, nested `Order.customer` fields don't need to fetch them again
        CustomerPKDataLoader(info).prime_many({c.pk: c for c in page.items})
        return CustomerPage(customers=page.items, page_info=page)

    @strawberry.field
    def customer(self, info: strawberry.Info, id: int) -> CustomerType | None:  # noqa: A002
        return CustomerPKDataLoader(info).load(id)

    @strawberry.field
    def customer_orders(self, info: strawberry.Info, customer_id: int) -> list[OrderType]:
        return CustomerOrdersFKDataLoader(info).load(customer_id)

    @strawberry.field(description="Products by ids. An id without a product is reported as an error of its item.")
    async def products(self, info: strawberry.Info, ids: list[int]) -> list[ProductType | None]:
        outcomes = await ProductPKDataLoader(info).load_outcomes(ids, path=path_from_info(info))
        for outcome in outcomes:
            if not outcome.ok:
                logger.info("Product at %s not loaded: %s", outcome.path, outcome.error)
        return [outcome.value_or_error() for outcome in outcomes]

    @strawberry.field
    def order_payments(self) -> list[OrderPayment]:
        return [to_payment_type(record) for record in load_payment_records()]


schema = strawberry.Schema(
    query=Query,
    extensions=[DataLoadersExtension.for_factory(store_dataloaders)],
)
