import logging
from decimal import Decimal

from gold.exceptions import TransactionHistoryNotFound
from gold.models import TransactionHistory, User, VendorBranch
from gold.services.lookups import ReferenceLookup

logger = logging.getLogger(__name__)


class TransactionHistoryService:
    """
    Append-only writer and reader of the transaction history.

    ``record`` is the only way rows get written; there is no update or
    delete. It does not open a transaction of its own, so a record written
    inside a caller's ``transaction.atomic`` block commits or rolls back
    with the caller's other mutations.
    """

    def __init__(self, lookup: ReferenceLookup = None):
        self.lookup = lookup or ReferenceLookup()

    def record(
        self,
        user: User,
        branch: VendorBranch,
        transaction_type: str,
        quantity: Decimal,
        amount: Decimal,
        transaction_status: str = TransactionHistory.Status.SUCCESS,
    ) -> TransactionHistory:
        entry = TransactionHistory.objects.create(
            user=user,
            branch=branch,
            transaction_type=transaction_type,
            transaction_status=transaction_status,
            quantity=quantity,
            amount=amount,
        )
        logger.info(
            "History recorded: id=%d type=%s status=%s user=%d branch=%d "
            "quantity=%s amount=%s",
            entry.id,
            transaction_type,
            transaction_status,
            user.id,
            branch.id,
            quantity,
            amount,
        )
        return entry

    def get(self, history_id) -> TransactionHistory:
        try:
            return TransactionHistory.objects.get(pk=history_id)
        except (TransactionHistory.DoesNotExist, ValueError, TypeError):
            raise TransactionHistoryNotFound(history_id)

    def list_all(self):
        return TransactionHistory.objects.all()

    def list_by_branch(self, branch_id):
        branch = self.lookup.resolve_branch(branch_id)
        return TransactionHistory.objects.filter(branch=branch)

    def list_by_user(self, user_id):
        user = self.lookup.resolve_user(user_id)
        return TransactionHistory.objects.filter(user=user)

    def list_by_status(self, transaction_status: str):
        return TransactionHistory.objects.filter(
            transaction_status=transaction_status.upper()
        )

    def list_by_type(self, transaction_type: str):
        return TransactionHistory.objects.filter(
            transaction_type=transaction_type.upper()
        )
