from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from gold.models.base import AMOUNT_DECIMAL_PLACES, AMOUNT_MAX_DIGITS, BaseModel


class Address(BaseModel):
    street = models.CharField(max_length=255)
    city = models.CharField(max_length=100, db_index=True)
    state = models.CharField(max_length=100, db_index=True)
    country = models.CharField(max_length=100, db_index=True)
    postal_code = models.CharField(max_length=20, blank=True)

    def __str__(self):
        return f"{self.street}, {self.city}, {self.state}, {self.country}"


class User(BaseModel):
    """Owner of virtual holdings; ``address`` is where physical gold is delivered."""

    name = models.CharField(max_length=150)
    email = models.EmailField(unique=True)
    address = models.ForeignKey(
        Address,
        on_delete=models.PROTECT,
        related_name="users",
    )

    def __str__(self):
        return f"User {self.id} ({self.email})"


class Vendor(BaseModel):
    """
    A gold vendor operating one or more branches.

    ``current_gold_price`` is the unit price applied at the moment of a
    conversion. It is maintained by the price refresh task and read fresh
    for every conversion.
    """

    name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    current_gold_price = models.DecimalField(
        max_digits=AMOUNT_MAX_DIGITS,
        decimal_places=AMOUNT_DECIMAL_PLACES,
        validators=[MinValueValidator(Decimal("0.0001"))],
    )
    price_updated_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f"Vendor {self.id} {self.name} (price={self.current_gold_price})"
