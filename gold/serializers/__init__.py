from gold.serializers.reference import AddressSerializer
from gold.serializers.branch import (
    BranchTransferSerializer,
    VendorBranchInputSerializer,
    VendorBranchSerializer,
)
from gold.serializers.holding import (
    ConvertToPhysicalSerializer,
    VirtualGoldHoldingInputSerializer,
    VirtualGoldHoldingSerializer,
)
from gold.serializers.payment import (
    PaymentInputSerializer,
    PaymentSerializer,
    PaymentStatusSerializer,
)
from gold.serializers.transaction import (
    PhysicalGoldTransactionSerializer,
    TransactionHistorySerializer,
)

__all__ = [
    "AddressSerializer",
    "BranchTransferSerializer",
    "VendorBranchInputSerializer",
    "VendorBranchSerializer",
    "ConvertToPhysicalSerializer",
    "VirtualGoldHoldingInputSerializer",
    "VirtualGoldHoldingSerializer",
    "PhysicalGoldTransactionSerializer",
    "TransactionHistorySerializer",
    "PaymentInputSerializer",
    "PaymentSerializer",
    "PaymentStatusSerializer",
]
