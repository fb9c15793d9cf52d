from django.urls import path

from gold.views import (
    ConvertToPhysicalView,
    PaymentDetailView,
    PaymentListCreateView,
    PhysicalGoldTransactionListView,
    TransactionHistoryDetailView,
    TransactionHistoryListView,
    VendorBranchDetailView,
    VendorBranchListCreateView,
    VendorBranchTransactionsView,
    VendorBranchTransferView,
    VirtualGoldHoldingDetailView,
    VirtualGoldHoldingListCreateView,
)

urlpatterns = [
    path("branches/", VendorBranchListCreateView.as_view(), name="branch-list"),
    path(
        "branches/transfer/",
        VendorBranchTransferView.as_view(),
        name="branch-transfer",
    ),
    path(
        "branches/<int:branch_id>/",
        VendorBranchDetailView.as_view(),
        name="branch-detail",
    ),
    path(
        "branches/<int:branch_id>/transactions/",
        VendorBranchTransactionsView.as_view(),
        name="branch-transactions",
    ),
    path("holdings/", VirtualGoldHoldingListCreateView.as_view(), name="holding-list"),
    path(
        "holdings/<int:holding_id>/",
        VirtualGoldHoldingDetailView.as_view(),
        name="holding-detail",
    ),
    path(
        "holdings/<int:holding_id>/convert/",
        ConvertToPhysicalView.as_view(),
        name="holding-convert",
    ),
    path(
        "transactions/",
        TransactionHistoryListView.as_view(),
        name="transaction-list",
    ),
    path(
        "transactions/<int:history_id>/",
        TransactionHistoryDetailView.as_view(),
        name="transaction-detail",
    ),
    path(
        "physical-transactions/",
        PhysicalGoldTransactionListView.as_view(),
        name="physical-transaction-list",
    ),
    path("payments/", PaymentListCreateView.as_view(), name="payment-list"),
    path(
        "payments/<int:payment_id>/",
        PaymentDetailView.as_view(),
        name="payment-detail",
    ),
]
