from gold.services.lookups import ReferenceLookup
from gold.services.history import TransactionHistoryService
from gold.services.physical import PhysicalGoldTransactionService
from gold.services.branch import VendorBranchService
from gold.services.holding import VirtualGoldHoldingService
from gold.services.payment import PaymentService

__all__ = [
    "ReferenceLookup",
    "TransactionHistoryService",
    "PhysicalGoldTransactionService",
    "VendorBranchService",
    "VirtualGoldHoldingService",
    "PaymentService",
]
