from rest_framework import serializers

from gold.models import VendorBranch
from gold.models.base import QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS
from gold.serializers.reference import AddressSerializer


class VendorBranchSerializer(serializers.ModelSerializer):
    """Read-only serializer for branch responses."""

    vendor_id = serializers.IntegerField(read_only=True)
    vendor_name = serializers.CharField(source="vendor.name", read_only=True)
    address = AddressSerializer(read_only=True)

    class Meta:
        model = VendorBranch
        fields = (
            "id",
            "vendor_id",
            "vendor_name",
            "address",
            "quantity",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class VendorBranchInputSerializer(serializers.Serializer):
    """
    Validates branch create/update requests.

    Only the shape is checked here; quantity rules belong to the ledger
    service so every caller gets the same errors.
    """

    vendor_id = serializers.IntegerField()
    address_id = serializers.IntegerField()
    quantity = serializers.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS, decimal_places=QUANTITY_DECIMAL_PLACES
    )


class BranchTransferSerializer(serializers.Serializer):
    """Validates branch-to-branch transfer requests."""

    source_branch_id = serializers.IntegerField()
    destination_branch_id = serializers.IntegerField()
    quantity = serializers.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS, decimal_places=QUANTITY_DECIMAL_PLACES
    )
