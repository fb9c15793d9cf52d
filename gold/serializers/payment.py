from rest_framework import serializers

from gold.models import Payment
from gold.models.base import AMOUNT_DECIMAL_PLACES, AMOUNT_MAX_DIGITS


class PaymentSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Payment
        fields = (
            "id",
            "user_id",
            "amount",
            "payment_method",
            "payment_status",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class PaymentInputSerializer(serializers.Serializer):
    """Validates payment requests. Method and status names are checked by the service."""

    user_id = serializers.IntegerField()
    amount = serializers.DecimalField(
        max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES
    )
    payment_method = serializers.CharField(max_length=20)
    payment_status = serializers.CharField(max_length=10, required=False)


class PaymentStatusSerializer(serializers.Serializer):
    payment_status = serializers.CharField(max_length=10)
