from rest_framework import serializers

from gold.models import VirtualGoldHolding
from gold.models.base import QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS


class VirtualGoldHoldingSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    branch_id = serializers.IntegerField(read_only=True)
    vendor_id = serializers.IntegerField(source="branch.vendor_id", read_only=True)

    class Meta:
        model = VirtualGoldHolding
        fields = (
            "id",
            "user_id",
            "branch_id",
            "vendor_id",
            "quantity",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class VirtualGoldHoldingInputSerializer(serializers.Serializer):
    """Validates holding create/update requests."""

    user_id = serializers.IntegerField()
    branch_id = serializers.IntegerField()
    quantity = serializers.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS, decimal_places=QUANTITY_DECIMAL_PLACES
    )


class ConvertToPhysicalSerializer(serializers.Serializer):
    """Validates conversion requests. Positivity is checked by the ledger."""

    quantity = serializers.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS, decimal_places=QUANTITY_DECIMAL_PLACES
    )
