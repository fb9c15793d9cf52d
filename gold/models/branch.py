from decimal import Decimal

from django.db import models

from gold.models.base import QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS, BaseModel
from gold.models.reference import Address, Vendor


class VendorBranch(BaseModel):
    """
    A vendor branch and the gold inventory it holds.

    ``quantity`` never drops below zero. The ledger services validate this
    before every write and the check constraint backs them up.
    """

    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.PROTECT,
        related_name="branches",
    )
    address = models.ForeignKey(
        Address,
        on_delete=models.PROTECT,
        related_name="branches",
    )
    quantity = models.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS,
        decimal_places=QUANTITY_DECIMAL_PLACES,
        default=Decimal("0"),
    )

    class Meta(BaseModel.Meta):
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name="vendor_branch_quantity_non_negative",
            ),
        ]

    def __str__(self):
        return f"VendorBranch {self.id} | vendor={self.vendor_id} | quantity={self.quantity}"
