from decimal import Decimal

from django.db import models

from gold.models.base import QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS, BaseModel
from gold.models.branch import VendorBranch
from gold.models.reference import User


class VirtualGoldHolding(BaseModel):
    """
    A user's claim on the virtual inventory of one branch.

    Quantity leaves a holding only through conversion to physical gold,
    which runs under a row lock held by VirtualGoldHoldingService.
    """

    user = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="virtual_holdings",
    )
    branch = models.ForeignKey(
        VendorBranch,
        on_delete=models.PROTECT,
        related_name="virtual_holdings",
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
                name="virtual_holding_quantity_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["user", "branch"], name="idx_holding_user_branch"),
        ]

    def __str__(self):
        return (
            f"VirtualGoldHolding {self.id} | user={self.user_id} | "
            f"branch={self.branch_id} | quantity={self.quantity}"
        )
