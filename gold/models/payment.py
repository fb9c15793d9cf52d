from django.db import models

from gold.models.base import AMOUNT_DECIMAL_PLACES, AMOUNT_MAX_DIGITS, BaseModel
from gold.models.reference import User


class Payment(BaseModel):
    """
    Money paid by a user, tracked by method and settlement status.

    Unlike history rows, a payment's status moves on after creation
    (PENDING to SUCCESS or FAILED), so it is a regular mutable model.
    """

    class PaymentStatus(models.TextChoices):
        PENDING = "PENDING", "Pending"
        SUCCESS = "SUCCESS", "Success"
        FAILED = "FAILED", "Failed"

    class PaymentMethod(models.TextChoices):
        CREDIT_CARD = "CREDIT_CARD", "Credit card"
        DEBIT_CARD = "DEBIT_CARD", "Debit card"
        NET_BANKING = "NET_BANKING", "Net banking"
        UPI = "UPI", "UPI"
        WALLET = "WALLET", "Wallet"

    user = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="payments",
    )
    amount = models.DecimalField(
        max_digits=AMOUNT_MAX_DIGITS,
        decimal_places=AMOUNT_DECIMAL_PLACES,
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
    )
    payment_status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )

    class Meta(BaseModel.Meta):
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="payment_amount_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["payment_status"], name="idx_payment_status"),
            models.Index(fields=["payment_method"], name="idx_payment_method"),
        ]

    def __str__(self):
        return (
            f"Payment {self.id} | user={self.user_id} | {self.amount} | "
            f"{self.payment_method} | {self.payment_status}"
        )
