from decimal import Decimal

from gold.exceptions import (
    AddressNotFound,
    UserNotFound,
    VendorBranchNotFound,
    VendorNotFound,
    VirtualGoldHoldingNotFound,
)
from gold.models import Address, User, Vendor, VendorBranch, VirtualGoldHolding


class ReferenceLookup:
    """
    Read-only resolution of referenced entities by id.

    Ledger services receive one of these instead of querying reference
    tables themselves. Every ``resolve_*`` returns the entity or raises the
    matching NotFound failure. ``for_update=True`` takes a row lock and must
    be called inside ``transaction.atomic``.
    """

    def resolve_user(self, user_id) -> User:
        return self._resolve(User.objects.select_related("address"), user_id, UserNotFound)

    def resolve_vendor(self, vendor_id) -> Vendor:
        return self._resolve(Vendor.objects.all(), vendor_id, VendorNotFound)

    def resolve_address(self, address_id) -> Address:
        return self._resolve(Address.objects.all(), address_id, AddressNotFound)

    def resolve_branch(self, branch_id, for_update: bool = False) -> VendorBranch:
        queryset = VendorBranch.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        return self._resolve(queryset, branch_id, VendorBranchNotFound)

    def resolve_holding(self, holding_id, for_update: bool = False) -> VirtualGoldHolding:
        queryset = VirtualGoldHolding.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        return self._resolve(queryset, holding_id, VirtualGoldHoldingNotFound)

    def current_gold_price(self, vendor_id) -> Decimal:
        """Vendor's unit price as stored right now, not as cached on an instance."""
        try:
            return Vendor.objects.values_list("current_gold_price", flat=True).get(
                pk=vendor_id
            )
        except Vendor.DoesNotExist:
            raise VendorNotFound(vendor_id)

    @staticmethod
    def _resolve(queryset, pk, not_found):
        try:
            return queryset.get(pk=pk)
        except (queryset.model.DoesNotExist, ValueError, TypeError):
            raise not_found(pk)
