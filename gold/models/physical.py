from django.db import models

from gold.models.base import QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS, AppendOnlyModel
from gold.models.branch import VendorBranch
from gold.models.reference import Address, User


class PhysicalGoldTransaction(AppendOnlyModel):
    """
    Gold taken out of virtual form for physical delivery.

    ``delivery_address`` is the user's address at the moment of conversion;
    later changes to the user's address do not touch existing rows.
    """

    user = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="physical_transactions",
    )
    branch = models.ForeignKey(
        VendorBranch,
        on_delete=models.PROTECT,
        related_name="physical_transactions",
    )
    delivery_address = models.ForeignKey(
        Address,
        on_delete=models.PROTECT,
        related_name="physical_deliveries",
    )
    quantity = models.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS,
        decimal_places=QUANTITY_DECIMAL_PLACES,
    )

    class Meta(AppendOnlyModel.Meta):
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="physical_transaction_quantity_positive",
            ),
        ]

    def __str__(self):
        return (
            f"PhysicalGoldTransaction {self.id} | user={self.user_id} | "
            f"branch={self.branch_id} | quantity={self.quantity}"
        )
