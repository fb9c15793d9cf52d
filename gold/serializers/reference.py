from rest_framework import serializers

from gold.models import Address


class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = ("id", "street", "city", "state", "country", "postal_code")
        read_only_fields = fields
