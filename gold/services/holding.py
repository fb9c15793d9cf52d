import logging

from django.conf import settings
from django.db import transaction
from django.db.models import F

from gold.exceptions import InvalidGoldQuantity, VirtualGoldHoldingAlreadyExists
from gold.models import TransactionHistory, VirtualGoldHolding
from gold.responses import SuccessResponse
from gold.services.history import TransactionHistoryService
from gold.services.lookups import ReferenceLookup
from gold.services.physical import PhysicalGoldTransactionService
from gold.utils import compute_amount, to_quantity

logger = logging.getLogger(__name__)


class VirtualGoldHoldingService:
    """
    Owns users' virtual gold holdings and their conversion to physical gold.

    Conversion is a single unit of work: the holding debit, the physical
    delivery record and the history record commit together or not at all.
    The holding row is locked with select_for_update() for the whole unit,
    so two conversions of the same holding never interleave.
    """

    def __init__(
        self,
        lookup: ReferenceLookup = None,
        physical: PhysicalGoldTransactionService = None,
        history: TransactionHistoryService = None,
    ):
        self.lookup = lookup or ReferenceLookup()
        self.physical = physical or PhysicalGoldTransactionService(self.lookup)
        self.history = history or TransactionHistoryService(self.lookup)

    def get_holding(self, holding_id) -> VirtualGoldHolding:
        return self.lookup.resolve_holding(holding_id)

    def list_holdings(self):
        return VirtualGoldHolding.objects.select_related("user", "branch")

    def list_by_user(self, user_id):
        user = self.lookup.resolve_user(user_id)
        return self.list_holdings().filter(user=user)

    def list_by_user_and_vendor(self, user_id, vendor_id):
        user = self.lookup.resolve_user(user_id)
        vendor = self.lookup.resolve_vendor(vendor_id)
        return self.list_holdings().filter(user=user, branch__vendor=vendor)

    @transaction.atomic
    def create_holding(self, user_id, branch_id, quantity) -> SuccessResponse:
        user = self.lookup.resolve_user(user_id)
        branch = self.lookup.resolve_branch(branch_id)
        quantity = self._storable(quantity)

        if getattr(settings, "GOLD_ENFORCE_UNIQUE_HOLDINGS", False):
            if VirtualGoldHolding.objects.filter(user=user, branch=branch).exists():
                logger.warning(
                    "Virtual holding rejected (already exists): user=%d branch=%d",
                    user.id,
                    branch.id,
                )
                raise VirtualGoldHoldingAlreadyExists(user.id, branch.id)

        holding = VirtualGoldHolding.objects.create(
            user=user,
            branch=branch,
            quantity=quantity,
        )

        logger.info(
            "Virtual holding created: holding=%d user=%d branch=%d quantity=%s",
            holding.id,
            user.id,
            branch.id,
            quantity,
        )
        return SuccessResponse(
            "Virtual Gold Holding data added successfully", holding.id
        )

    @transaction.atomic
    def update_holding(self, holding_id, user_id, branch_id, quantity) -> SuccessResponse:
        holding = self.lookup.resolve_holding(holding_id, for_update=True)
        user = self.lookup.resolve_user(user_id)
        branch = self.lookup.resolve_branch(branch_id)
        quantity = self._storable(quantity)

        holding.user = user
        holding.branch = branch
        holding.quantity = quantity
        holding.save(update_fields=["user", "branch", "quantity", "updated_at"])

        logger.info(
            "Virtual holding updated: holding=%d user=%d branch=%d quantity=%s",
            holding.id,
            user.id,
            branch.id,
            quantity,
        )
        return SuccessResponse(
            "Virtual Gold Holding data updated successfully", holding.id
        )

    @transaction.atomic
    def convert_to_physical(self, holding_id, quantity) -> SuccessResponse:
        """
        Convert part or all of a virtual holding into physical gold.

        This method:
        1. Locks the holding row.
        2. Rejects non-positive quantities.
        3. Rejects quantities above the holding's balance (equal is allowed).
        4. Debits the holding.
        5. Records the physical delivery to the user's current address.
        6. Prices the quantity at the vendor's current gold price.
        7. Appends a CONVERT_TO_PHYSICAL history record.

        Any failure rolls back every write made so far.

        Raises:
            VirtualGoldHoldingNotFound: If the holding doesn't exist.
            InvalidGoldQuantity: If quantity is not positive or exceeds the balance.
        """
        holding = self.lookup.resolve_holding(holding_id, for_update=True)

        quantity = to_quantity(quantity)
        if quantity <= 0:
            raise InvalidGoldQuantity("Invalid gold quantity")

        if holding.quantity < quantity:
            logger.warning(
                "Conversion rejected (insufficient holding): holding=%d "
                "balance=%s requested=%s",
                holding.id,
                holding.quantity,
                quantity,
            )
            raise InvalidGoldQuantity(f"Quantity must be less than {holding.quantity}")

        VirtualGoldHolding.objects.filter(pk=holding.pk).update(
            quantity=F("quantity") - quantity
        )
        holding.refresh_from_db(fields=["quantity"])

        physical = self.physical.record_conversion(holding, quantity)

        branch = holding.branch
        unit_price = self.lookup.current_gold_price(branch.vendor_id)
        amount = compute_amount(quantity, unit_price)

        entry = self.history.record(
            user=holding.user,
            branch=branch,
            transaction_type=TransactionHistory.TransactionType.CONVERT_TO_PHYSICAL,
            quantity=quantity,
            amount=amount,
        )

        logger.info(
            "Gold converted to physical: holding=%d quantity=%s remaining=%s "
            "unit_price=%s amount=%s physical=%d history=%d",
            holding.id,
            quantity,
            holding.quantity,
            unit_price,
            amount,
            physical.id,
            entry.id,
        )
        return SuccessResponse("Virtual Gold data convert successfully", holding.id)

    @staticmethod
    def _storable(quantity):
        quantity = to_quantity(quantity)
        if quantity < 0:
            raise InvalidGoldQuantity("Gold quantity cannot be negative")
        return quantity
