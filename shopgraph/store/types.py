__all__ = [
    "AddressNotFoundError",
    "AddressType",
    "CreditType",
    "CustomerPage",
    "CustomerType",
    "DebitType",
    "LineItemType",
    "OrderPayment",
    "OrderType",
    "PayPalType",
    "PaymentInterface",
    "ProductType",
    "to_payment_type",
]

import typing

import graphql
import strawberry

from shopgraph._list.graphql import PageInfoType
from shopgraph._scalars import DateTime
from shopgraph.store import models
from shopgraph.store.dataloaders import (
    AddressPKDataLoader,
    CustomerOrdersFKDataLoader,
    CustomerPKDataLoader,
    OrderLineItemsFKDataLoader,
    ProductPKDataLoader,
)
from shopgraph.store.payments import (
    CreditPaymentRecord,
    DebitPaymentRecord,
    PaymentRecord,
    PaymentType,
    PayPalPaymentRecord,
)


class AddressNotFoundError(graphql.GraphQLError):
    """The customer has no address. Reported as an error of the `address` field only, the rest of the data stays."""

    def __init__(self, customer_id: int) -> None:
        super().__init__(
            f"No address for customer: {customer_id}",
            extensions={"code": "ADDRESS_NOT_FOUND", "customerId": customer_id},
        )


@strawberry.type(name="Address")
class AddressType:
    street_address: str
    city: str
    state: str
    zip_code: str


@strawberry.type(name="Product")
class ProductType:
    id: int
    name: str
    company: str
    sku: str

    @strawberry.field
    def retail_price(self: "models.Product") -> float:
        return float(self.retail_price)


@strawberry.type(name="LineItem")
class LineItemType:
    quantity: int

    @strawberry.field
    def product(self: "models.LineItem", info: strawberry.Info) -> ProductType | None:
        return ProductPKDataLoader(info).load(self.product_id)


@strawberry.type(name="Order")
class OrderType:
    id: int
    payment_type: str
    ordered: DateTime
    shipped: DateTime | None

    @strawberry.field
    def customer(self: "models.Order", info: strawberry.Info) -> "CustomerType|None":
        return CustomerPKDataLoader(info).load(self.customer_id)

    @strawberry.field
    def line_items(self: "models.Order", info: strawberry.Info) -> list[LineItemType]:
        return OrderLineItemsFKDataLoader(info).load(self.pk)


@strawberry.type(name="Customer")
class CustomerType:
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str

    @strawberry.field
    def address(self: "models.Customer", info: strawberry.Info) -> AddressType | None:
        if self.address_id is None:
            raise AddressNotFoundError(customer_id=self.pk)
        return AddressPKDataLoader(info).load(self.address_id)

    @strawberry.field
    def orders(self: "models.Customer", info: strawberry.Info) -> list[OrderType]:
        return CustomerOrdersFKDataLoader(info).load(self.pk)


@strawberry.type(name="CustomerPage")
class CustomerPage:
    customers: list[CustomerType]
    page_info: PageInfoType


PaymentTypeEnum = strawberry.enum(PaymentType, name="PaymentType")


@strawberry.interface(name="Payment")
class PaymentInterface:
    id: int
    total: float
    payment_type: PaymentTypeEnum


@strawberry.type(name="Credit")
class CreditType(PaymentInterface):
    authorization_code: str


@strawberry.type(name="Debit")
class DebitType(PaymentInterface):
    bank_auth_code: str


@strawberry.type(name="PayPal")
class PayPalType(PaymentInterface):
    charge_back: bool


OrderPayment = typing.Annotated[CreditType | DebitType | PayPalType, strawberry.union("OrderPayment")]

_RECORD_TO_GQL_TYPE: dict[type, type[PaymentInterface]] = {
    CreditPaymentRecord: CreditType,
    DebitPaymentRecord: DebitType,
    PayPalPaymentRecord: PayPalType,
}


def to_payment_type(record: PaymentRecord) -> CreditType | DebitType | PayPalType:
    gql_type = _RECORD_TO_GQL_TYPE[type(record)]
    return gql_type(**{**record.model_dump(), "payment_type": PaymentType(record.payment_type)})
