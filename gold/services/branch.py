import logging

from django.db import transaction
from django.db.models import F

from gold.exceptions import InsufficientQuantity, InvalidGoldQuantity, VendorBranchNotFound
from gold.models import VendorBranch
from gold.responses import SuccessResponse
from gold.services.history import TransactionHistoryService
from gold.services.lookups import ReferenceLookup
from gold.utils import to_quantity

logger = logging.getLogger(__name__)


class VendorBranchService:
    """
    Owns branch inventory: creation, overwrite and branch-to-branch transfer.

    Transfers run in one atomic block and lock both branch rows with
    select_for_update() in ascending id order, so two transfers over the
    same pair of branches serialize instead of deadlocking.
    """

    def __init__(
        self,
        lookup: ReferenceLookup = None,
        history: TransactionHistoryService = None,
    ):
        self.lookup = lookup or ReferenceLookup()
        self.history = history or TransactionHistoryService(self.lookup)

    def get_branch(self, branch_id) -> VendorBranch:
        return self.lookup.resolve_branch(branch_id)

    def list_branches(self, vendor_id=None, city=None, state=None, country=None):
        """All branches matching every filter given. An empty result is not an error."""
        queryset = VendorBranch.objects.select_related("vendor", "address")
        if vendor_id is not None:
            queryset = queryset.filter(vendor_id=vendor_id)
        if city:
            queryset = queryset.filter(address__city__iexact=city)
        if state:
            queryset = queryset.filter(address__state__iexact=state)
        if country:
            queryset = queryset.filter(address__country__iexact=country)
        return queryset

    def list_transactions(self, branch_id):
        return self.history.list_by_branch(branch_id)

    @transaction.atomic
    def create_branch(self, vendor_id, address_id, quantity) -> SuccessResponse:
        vendor = self.lookup.resolve_vendor(vendor_id)
        address = self.lookup.resolve_address(address_id)
        quantity = self._non_negative(quantity)

        branch = VendorBranch.objects.create(
            vendor=vendor,
            address=address,
            quantity=quantity,
        )

        logger.info(
            "Vendor branch created: branch=%d vendor=%d address=%d quantity=%s",
            branch.id,
            vendor.id,
            address.id,
            quantity,
        )
        return SuccessResponse("Vendor Branch added successfully", branch.id)

    @transaction.atomic
    def update_branch(self, branch_id, vendor_id, address_id, quantity) -> SuccessResponse:
        """
        Overwrite a branch's vendor, address and quantity.

        The quantity is replaced, not adjusted, but it still may not be
        negative.
        """
        branch = self.lookup.resolve_branch(branch_id, for_update=True)
        vendor = self.lookup.resolve_vendor(vendor_id)
        address = self.lookup.resolve_address(address_id)
        quantity = self._non_negative(quantity)

        branch.vendor = vendor
        branch.address = address
        branch.quantity = quantity
        branch.save(update_fields=["vendor", "address", "quantity", "updated_at"])

        logger.info(
            "Vendor branch updated: branch=%d vendor=%d address=%d quantity=%s",
            branch.id,
            vendor.id,
            address.id,
            quantity,
        )
        return SuccessResponse("Vendor Branch updated successfully", branch.id)

    @transaction.atomic
    def transfer(
        self, source_branch_id, destination_branch_id, quantity
    ) -> SuccessResponse:
        """
        Move ``quantity`` of gold from one branch to another.

        Both branches are debited/credited in the same transaction or not at
        all. Source and destination may be the same branch, in which case the
        balance is checked and left unchanged.

        Raises:
            VendorBranchNotFound: If either branch doesn't exist.
            InvalidGoldQuantity: If quantity is not positive.
            InsufficientQuantity: If the source holds less than quantity.
        """
        branches = self._lock_branches(source_branch_id, destination_branch_id)
        source = branches[self._branch_key(source_branch_id)]
        destination = branches[self._branch_key(destination_branch_id)]

        quantity = to_quantity(quantity)
        if quantity <= 0:
            raise InvalidGoldQuantity("Invalid gold quantity")

        if source.quantity < quantity:
            logger.warning(
                "Branch transfer rejected (insufficient gold): source=%d "
                "available=%s requested=%s destination=%d",
                source.id,
                source.quantity,
                quantity,
                destination.id,
            )
            raise InsufficientQuantity()

        VendorBranch.objects.filter(pk=source.pk).update(
            quantity=F("quantity") - quantity
        )
        VendorBranch.objects.filter(pk=destination.pk).update(
            quantity=F("quantity") + quantity
        )
        source.refresh_from_db(fields=["quantity"])
        destination.refresh_from_db(fields=["quantity"])

        logger.info(
            "Branch transfer completed: source=%d destination=%d quantity=%s "
            "source_balance=%s destination_balance=%s",
            source.id,
            destination.id,
            quantity,
            source.quantity,
            destination.quantity,
        )
        return SuccessResponse("Vendor Branch transfer was successful", source.id)

    def _lock_branches(self, *branch_ids) -> dict:
        # Lock in ascending id order regardless of transfer direction.
        keys = sorted({self._branch_key(branch_id) for branch_id in branch_ids})
        return {
            key: self.lookup.resolve_branch(key, for_update=True) for key in keys
        }

    @staticmethod
    def _branch_key(branch_id) -> int:
        try:
            return int(branch_id)
        except (TypeError, ValueError):
            raise VendorBranchNotFound(branch_id)

    @staticmethod
    def _non_negative(quantity):
        quantity = to_quantity(quantity)
        if quantity < 0:
            raise InvalidGoldQuantity("Gold quantity cannot be negative")
        return quantity
