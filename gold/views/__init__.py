from gold.views.branch import (
    VendorBranchDetailView,
    VendorBranchListCreateView,
    VendorBranchTransactionsView,
    VendorBranchTransferView,
)
from gold.views.holding import (
    ConvertToPhysicalView,
    VirtualGoldHoldingDetailView,
    VirtualGoldHoldingListCreateView,
)
from gold.views.payment import PaymentDetailView, PaymentListCreateView
from gold.views.transaction import (
    PhysicalGoldTransactionListView,
    TransactionHistoryDetailView,
    TransactionHistoryListView,
)

__all__ = [
    "VendorBranchDetailView",
    "VendorBranchListCreateView",
    "VendorBranchTransactionsView",
    "VendorBranchTransferView",
    "ConvertToPhysicalView",
    "VirtualGoldHoldingDetailView",
    "VirtualGoldHoldingListCreateView",
    "PhysicalGoldTransactionListView",
    "TransactionHistoryDetailView",
    "TransactionHistoryListView",
    "PaymentDetailView",
    "PaymentListCreateView",
]
