import typing

from django.db import models

if typing.TYPE_CHECKING:
    from django.db.models.fields.related_descriptors import ReverseManyToOneDescriptor


class Address(models.Model):
    street_address: str = models.CharField(max_length=128)
    city: str = models.CharField(max_length=64)
    state: str = models.CharField(max_length=64)
    zip_code: str = models.CharField(max_length=16)

    objects: models.QuerySet

    def __str__(self) -> str:
        return f"{self.street_address}, {self.city}"


class Customer(models.Model):
    first_name: str = models.CharField(max_length=64)
    last_name: str = models.CharField(max_length=64)
    email: str = models.EmailField()
    phone: str = models.CharField(max_length=32, blank=True)
    address = models.ForeignKey("Address", null=True, blank=True, on_delete=models.SET_NULL, related_name="customers")
    address_id: int | None

    orders: "ReverseManyToOneDescriptor"
    objects: models.QuerySet

    class Meta:
        ordering = ("id",)

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Product(models.Model):
    name: str = models.CharField(max_length=128)
    company: str = models.CharField(max_length=128)
    retail_price = models.DecimalField(max_digits=10, decimal_places=2)
    sku: str = models.CharField(max_length=32, unique=True)

    objects: models.QuerySet

    def __str__(self) -> str:
        return self.name


class Order(models.Model):
    customer = models.ForeignKey("Customer", on_delete=models.CASCADE, related_name="orders")
    customer_id: int
    payment_type: str = models.CharField(max_length=16)
    ordered = models.DateTimeField()
    shipped = models.DateTimeField(null=True, blank=True)

    line_items: "ReverseManyToOneDescriptor"
    objects: models.QuerySet

    class Meta:
        ordering = ("id",)

    def __str__(self) -> str:
        return f"Order {self.pk}"


class LineItem(models.Model):
    order = models.ForeignKey("Order", on_delete=models.CASCADE, related_name="line_items")
    order_id: int
    product = models.ForeignKey("Product", on_delete=models.PROTECT, related_name="line_items")
    product_id: int
    quantity: int = models.PositiveIntegerField(default=1)

    objects: models.QuerySet

    class Meta:
        ordering = ("id",)

    def __str__(self) -> str:
        return f"{self.quantity}x {self.product_id}"
