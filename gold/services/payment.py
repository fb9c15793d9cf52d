import logging

from django.db import transaction

from gold.exceptions import InvalidPayment, PaymentNotFound
from gold.models import Payment
from gold.responses import SuccessResponse
from gold.services.lookups import ReferenceLookup
from gold.utils import to_amount

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Records users' payments and answers queries by user, status and method.

    Method and status names are matched case-insensitively; an unknown name
    raises InvalidPayment instead of silently matching nothing.
    """

    def __init__(self, lookup: ReferenceLookup = None):
        self.lookup = lookup or ReferenceLookup()

    @transaction.atomic
    def record_payment(
        self,
        user_id,
        amount,
        payment_method,
        payment_status=Payment.PaymentStatus.PENDING,
    ) -> SuccessResponse:
        user = self.lookup.resolve_user(user_id)
        amount = self._amount(amount)
        payment_method = self._choice(payment_method, Payment.PaymentMethod, "method")
        payment_status = self._choice(payment_status, Payment.PaymentStatus, "status")

        payment = Payment.objects.create(
            user=user,
            amount=amount,
            payment_method=payment_method,
            payment_status=payment_status,
        )

        logger.info(
            "Payment recorded: payment=%d user=%d amount=%s method=%s status=%s",
            payment.id,
            user.id,
            amount,
            payment_method,
            payment_status,
        )
        return SuccessResponse("Payment recorded successfully", payment.id)

    @transaction.atomic
    def update_status(self, payment_id, payment_status) -> SuccessResponse:
        payment = self._get(payment_id, for_update=True)
        payment_status = self._choice(payment_status, Payment.PaymentStatus, "status")

        previous = payment.payment_status
        payment.payment_status = payment_status
        payment.save(update_fields=["payment_status", "updated_at"])

        logger.info(
            "Payment status changed: payment=%d %s -> %s",
            payment.id,
            previous,
            payment_status,
        )
        return SuccessResponse("Payment status updated successfully", payment.id)

    def get(self, payment_id) -> Payment:
        return self._get(payment_id)

    def list_all(self):
        return Payment.objects.all()

    def list_by_user(self, user_id):
        user = self.lookup.resolve_user(user_id)
        return Payment.objects.filter(user=user)

    def list_by_status(self, payment_status: str):
        payment_status = self._choice(payment_status, Payment.PaymentStatus, "status")
        return Payment.objects.filter(payment_status=payment_status)

    def list_by_method(self, payment_method: str):
        payment_method = self._choice(payment_method, Payment.PaymentMethod, "method")
        return Payment.objects.filter(payment_method=payment_method)

    @staticmethod
    def _get(payment_id, for_update=False) -> Payment:
        queryset = Payment.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(pk=payment_id)
        except (Payment.DoesNotExist, ValueError, TypeError):
            raise PaymentNotFound(payment_id)

    @staticmethod
    def _amount(amount):
        amount = to_amount(amount, lambda: InvalidPayment("Invalid payment amount"))
        if amount <= 0:
            raise InvalidPayment("Payment amount must be positive")
        return amount

    @staticmethod
    def _choice(value, choices, label):
        name = str(value).upper()
        if name not in choices.values:
            raise InvalidPayment(f"Unknown payment {label}: {value}")
        return name
