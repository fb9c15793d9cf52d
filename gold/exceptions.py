from django.utils import timezone


class GoldLedgerError(Exception):
    """
    Base class for every caller-facing ledger failure.

    Each failure carries a machine-readable ``kind``, a human-readable
    message and the time it was raised. None of them are fatal: a failed
    operation leaves the ledger exactly as it was.
    """

    kind = "LEDGER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.timestamp = timezone.now()

    def as_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "kind": self.kind,
            "message": self.message,
        }


# ── Lookups ──────────────────────────────────────────────────


class NotFound(GoldLedgerError):
    kind = "NOT_FOUND"
    entity = "Entity"

    def __init__(self, entity_id, message: str = None):
        self.entity_id = entity_id
        super().__init__(message or f"{self.entity} not found with id: {entity_id}")


class UserNotFound(NotFound):
    kind = "USER_NOT_FOUND"
    entity = "User"


class VendorNotFound(NotFound):
    kind = "VENDOR_NOT_FOUND"
    entity = "Vendor"


class AddressNotFound(NotFound):
    kind = "ADDRESS_NOT_FOUND"
    entity = "Address"


class VendorBranchNotFound(NotFound):
    kind = "VENDOR_BRANCH_NOT_FOUND"
    entity = "Vendor Branch"


class VirtualGoldHoldingNotFound(NotFound):
    kind = "VIRTUAL_GOLD_HOLDING_NOT_FOUND"
    entity = "VirtualGoldHolding"

    def __init__(self, entity_id, message: str = None):
        super().__init__(entity_id, message or f"VirtualGoldHolding#{entity_id} not found")


class PhysicalGoldTransactionNotFound(NotFound):
    kind = "PHYSICAL_GOLD_TRANSACTION_NOT_FOUND"
    entity = "Physical Gold Transaction"


class TransactionHistoryNotFound(NotFound):
    kind = "TRANSACTION_HISTORY_NOT_FOUND"
    entity = "Transaction History"


class PaymentNotFound(NotFound):
    kind = "PAYMENT_NOT_FOUND"
    entity = "Payment"


# ── Quantity rules ───────────────────────────────────────────


class InvalidGoldQuantity(GoldLedgerError):
    kind = "INVALID_GOLD_QUANTITY"


class InsufficientQuantity(InvalidGoldQuantity):
    kind = "INSUFFICIENT_QUANTITY"

    def __init__(self, message: str = "Insufficient gold in the source branch"):
        super().__init__(message)


# ── Payments ─────────────────────────────────────────────────


class InvalidPayment(GoldLedgerError):
    """Amount, method or status of a payment is not acceptable."""

    kind = "INVALID_PAYMENT"


# ── Uniqueness / immutability ────────────────────────────────


class AlreadyExists(GoldLedgerError):
    kind = "ALREADY_EXISTS"


class VirtualGoldHoldingAlreadyExists(AlreadyExists):
    kind = "VIRTUAL_GOLD_HOLDING_ALREADY_EXISTS"

    def __init__(self, user_id, branch_id):
        self.user_id = user_id
        self.branch_id = branch_id
        super().__init__(
            f"Virtual Gold Holding already exists for user {user_id} "
            f"at branch {branch_id}"
        )


class ImmutableRecordError(GoldLedgerError):
    """Raised when code attempts to change or remove an append-only record."""

    kind = "IMMUTABLE_RECORD"
