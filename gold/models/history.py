from django.db import models

from gold.models.base import (
    AMOUNT_DECIMAL_PLACES,
    AMOUNT_MAX_DIGITS,
    QUANTITY_DECIMAL_PLACES,
    QUANTITY_MAX_DIGITS,
    AppendOnlyModel,
)
from gold.models.branch import VendorBranch
from gold.models.reference import User


class TransactionHistory(AppendOnlyModel):
    """
    Immutable audit record of one quantity-affecting event.

    ``amount`` is the quantity multiplied by the vendor's unit price at the
    time of the event. Rows are only ever written through
    TransactionHistoryService.record().
    """

    # BUY, SELL and TRANSFER are accepted by record() for callers outside the
    # ledger core; no service in this app writes them.
    class TransactionType(models.TextChoices):
        BUY = "BUY", "Buy"
        SELL = "SELL", "Sell"
        CONVERT_TO_PHYSICAL = "CONVERT_TO_PHYSICAL", "Convert to physical"
        TRANSFER = "TRANSFER", "Transfer"

    class Status(models.TextChoices):
        SUCCESS = "SUCCESS", "Success"
        FAILURE = "FAILURE", "Failure"

    user = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="transaction_history",
    )
    branch = models.ForeignKey(
        VendorBranch,
        on_delete=models.PROTECT,
        related_name="transaction_history",
    )
    transaction_type = models.CharField(
        max_length=20,
        choices=TransactionType.choices,
    )
    transaction_status = models.CharField(
        max_length=10,
        choices=Status.choices,
    )
    quantity = models.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS,
        decimal_places=QUANTITY_DECIMAL_PLACES,
    )
    amount = models.DecimalField(
        max_digits=AMOUNT_MAX_DIGITS,
        decimal_places=AMOUNT_DECIMAL_PLACES,
    )

    class Meta(AppendOnlyModel.Meta):
        verbose_name_plural = "transaction history"
        indexes = [
            models.Index(fields=["branch", "created_at"], name="idx_history_branch"),
            models.Index(
                fields=["transaction_status", "transaction_type"],
                name="idx_history_status_type",
            ),
        ]

    def __str__(self):
        return (
            f"TransactionHistory {self.id} | {self.transaction_type} | "
            f"{self.quantity} | {self.amount} | {self.transaction_status}"
        )
