import datetime
import typing

import factory

from shopgraph.store import models

if typing.TYPE_CHECKING:
    import django.db.models

DEFAULT_CUSTOMER_ORDERS_COUNT: int = 3
DEFAULT_ORDER_LINE_ITEMS_COUNT: int = 2


class TypedDjangoModelFactory[T: "django.db.models.Model"](factory.django.DjangoModelFactory):
    create: typing.Callable[..., T]
    create_batch: typing.Callable[..., list[T]]


class AddressFactory(TypedDjangoModelFactory[models.Address]):
    class Meta:
        model = models.Address

    street_address = factory.Faker("street_address")
    city = factory.Faker("city")
    state = factory.Faker("state_abbr")
    zip_code = factory.Faker("postcode")


class ProductFactory(TypedDjangoModelFactory[models.Product]):
    class Meta:
        model = models.Product

    name = factory.Faker("word")
    company = factory.Faker("company")
    retail_price = factory.Faker("pydecimal", left_digits=3, right_digits=2, positive=True)
    sku = factory.Sequence(lambda n: f"SKU-{n:05d}")


class CustomerFactory(TypedDjangoModelFactory[models.Customer]):
    class Meta:
        model = models.Customer

    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    email = factory.Faker("email")
    phone = factory.Faker("numerify", text="###-###-####")
    address = factory.SubFactory(AddressFactory)

    @classmethod
    def create(
            cls,
            with_orders: bool = False,
            **kwargs,
    ) -> models.Customer:
        instance = super().create(**kwargs)
        if with_orders:
            OrderFactory.create_batch(DEFAULT_CUSTOMER_ORDERS_COUNT, customer=instance, with_line_items=True)
        return instance

    @classmethod
    def create_batch(
            cls,
            size: int,
            *,
            with_orders: bool = False,
            **kwargs,
    ) -> list[models.Customer]:
        return [cls.create(with_orders=with_orders, **kwargs) for _ in range(size)]


class OrderFactory(TypedDjangoModelFactory[models.Order]):
    class Meta:
        model = models.Order

    customer = factory.SubFactory(CustomerFactory)
    payment_type = factory.Iterator(["CREDIT", "DEBIT", "PAYPAL"])
    ordered = factory.Faker("date_time_this_year", tzinfo=datetime.UTC)
    shipped = None

    @classmethod
    def create(
            cls,
            with_line_items: bool = False,
            **kwargs,
    ) -> models.Order:
        instance = super().create(**kwargs)
        if with_line_items:
            LineItemFactory.create_batch(DEFAULT_ORDER_LINE_ITEMS_COUNT, order=instance)
        return instance

    @classmethod
    def create_batch(
            cls,
            size: int,
            *,
            with_line_items: bool = False,
            **kwargs,
    ) -> list[models.Order]:
        return [cls.create(with_line_items=with_line_items, **kwargs) for _ in range(size)]


class LineItemFactory(TypedDjangoModelFactory[models.LineItem]):
    class Meta:
        model = models.LineItem

    order = factory.SubFactory(OrderFactory)
    product = factory.SubFactory(ProductFactory)
    quantity = factory.Faker("random_int", min=1, max=5)
