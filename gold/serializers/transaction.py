from rest_framework import serializers

from gold.models import PhysicalGoldTransaction, TransactionHistory
from gold.serializers.reference import AddressSerializer


class TransactionHistorySerializer(serializers.ModelSerializer):
    """Read-only serializer for history responses."""

    user_id = serializers.IntegerField(read_only=True)
    branch_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = TransactionHistory
        fields = (
            "id",
            "user_id",
            "branch_id",
            "transaction_type",
            "transaction_status",
            "quantity",
            "amount",
            "created_at",
        )
        read_only_fields = fields


class PhysicalGoldTransactionSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    branch_id = serializers.IntegerField(read_only=True)
    delivery_address = AddressSerializer(read_only=True)

    class Meta:
        model = PhysicalGoldTransaction
        fields = (
            "id",
            "user_id",
            "branch_id",
            "delivery_address",
            "quantity",
            "created_at",
        )
        read_only_fields = fields
