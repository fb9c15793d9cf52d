import logging
from decimal import Decimal

from gold.exceptions import PhysicalGoldTransactionNotFound
from gold.models import PhysicalGoldTransaction, VirtualGoldHolding
from gold.services.lookups import ReferenceLookup

logger = logging.getLogger(__name__)


class PhysicalGoldTransactionService:
    """Creates and reads physical delivery records."""

    def __init__(self, lookup: ReferenceLookup = None):
        self.lookup = lookup or ReferenceLookup()

    def record_conversion(
        self, holding: VirtualGoldHolding, quantity: Decimal
    ) -> PhysicalGoldTransaction:
        """
        Snapshot a conversion out of ``holding`` for delivery.

        The delivery address is whatever address the user has right now.
        Must run inside the conversion's transaction.
        """
        physical = PhysicalGoldTransaction.objects.create(
            user=holding.user,
            branch=holding.branch,
            delivery_address=holding.user.address,
            quantity=quantity,
        )
        logger.info(
            "Physical gold transaction created: id=%d holding=%d user=%d "
            "branch=%d quantity=%s",
            physical.id,
            holding.id,
            holding.user_id,
            holding.branch_id,
            quantity,
        )
        return physical

    def get(self, transaction_id) -> PhysicalGoldTransaction:
        try:
            return PhysicalGoldTransaction.objects.get(pk=transaction_id)
        except (PhysicalGoldTransaction.DoesNotExist, ValueError, TypeError):
            raise PhysicalGoldTransactionNotFound(transaction_id)

    def list_all(self):
        return PhysicalGoldTransaction.objects.all()

    def list_by_user(self, user_id):
        user = self.lookup.resolve_user(user_id)
        return PhysicalGoldTransaction.objects.filter(user=user)

    def list_by_branch(self, branch_id):
        branch = self.lookup.resolve_branch(branch_id)
        return PhysicalGoldTransaction.objects.filter(branch=branch)
