from gold.models.reference import Address, User, Vendor
from gold.models.branch import VendorBranch
from gold.models.holding import VirtualGoldHolding
from gold.models.physical import PhysicalGoldTransaction
from gold.models.history import TransactionHistory
from gold.models.payment import Payment

__all__ = [
    "Address",
    "User",
    "Vendor",
    "VendorBranch",
    "VirtualGoldHolding",
    "PhysicalGoldTransaction",
    "TransactionHistory",
    "Payment",
]
