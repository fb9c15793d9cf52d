import threading
from decimal import Decimal
from unittest import skipUnless
from unittest.mock import MagicMock, patch

import requests
from django.db import DatabaseError, IntegrityError, connection, transaction
from django.test import TestCase, TransactionTestCase, override_settings
from rest_framework.test import APIClient

from gold.exceptions import (
    AddressNotFound,
    ImmutableRecordError,
    InsufficientQuantity,
    InvalidGoldQuantity,
    InvalidPayment,
    PaymentNotFound,
    PhysicalGoldTransactionNotFound,
    TransactionHistoryNotFound,
    UserNotFound,
    VendorBranchNotFound,
    VendorNotFound,
    VirtualGoldHoldingAlreadyExists,
    VirtualGoldHoldingNotFound,
)
from gold.models import (
    Address,
    Payment,
    PhysicalGoldTransaction,
    TransactionHistory,
    User,
    Vendor,
    VendorBranch,
    VirtualGoldHolding,
)
from gold.services import (
    PaymentService,
    PhysicalGoldTransactionService,
    ReferenceLookup,
    TransactionHistoryService,
    VendorBranchService,
    VirtualGoldHoldingService,
)
from gold.utils import compute_amount, request_gold_price_quote, to_quantity

MISSING_ID = 999999


class LedgerFixturesMixin:
    """Builders for the reference rows every ledger test needs."""

    def make_address(self, city="Mumbai", state="Maharashtra", country="India"):
        return Address.objects.create(
            street="1 Gold Street", city=city, state=state, country=country
        )

    def make_user(self, email="asha@example.com", address=None):
        return User.objects.create(
            name="Asha", email=email, address=address or self.make_address()
        )

    def make_vendor(self, name="Aurum", price="5000.00"):
        return Vendor.objects.create(name=name, current_gold_price=Decimal(price))

    def make_branch(self, quantity="0", vendor=None, address=None):
        return VendorBranch.objects.create(
            vendor=vendor or self.make_vendor(),
            address=address or self.make_address(),
            quantity=Decimal(quantity),
        )

    def make_holding(self, quantity="10", user=None, branch=None):
        return VirtualGoldHolding.objects.create(
            user=user or self.make_user(),
            branch=branch or self.make_branch(),
            quantity=Decimal(quantity),
        )


# ============================================================
# Model Tests
# ============================================================


class ModelTest(LedgerFixturesMixin, TestCase):
    def test_branch_str(self):
        branch = self.make_branch(quantity="12.5")
        self.assertIn("12.5", str(branch))

    def test_holding_str(self):
        holding = self.make_holding(quantity="3")
        self.assertIn(f"user={holding.user_id}", str(holding))

    def test_branch_quantity_cannot_be_negative_in_db(self):
        vendor = self.make_vendor()
        address = self.make_address()
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                VendorBranch.objects.create(
                    vendor=vendor, address=address, quantity=Decimal("-1")
                )

    def test_holding_quantity_cannot_be_negative_in_db(self):
        holding = self.make_holding(quantity="1")
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                VirtualGoldHolding.objects.filter(pk=holding.pk).update(
                    quantity=Decimal("-0.5")
                )


class AppendOnlyModelTest(LedgerFixturesMixin, TestCase):
    def setUp(self):
        self.holding = self.make_holding()
        self.entry = TransactionHistory.objects.create(
            user=self.holding.user,
            branch=self.holding.branch,
            transaction_type=TransactionHistory.TransactionType.CONVERT_TO_PHYSICAL,
            transaction_status=TransactionHistory.Status.SUCCESS,
            quantity=Decimal("1"),
            amount=Decimal("5000"),
        )
        self.physical = PhysicalGoldTransaction.objects.create(
            user=self.holding.user,
            branch=self.holding.branch,
            delivery_address=self.holding.user.address,
            quantity=Decimal("1"),
        )

    def test_history_cannot_be_updated(self):
        self.entry.amount = Decimal("1")
        with self.assertRaises(ImmutableRecordError):
            self.entry.save()
        self.entry.refresh_from_db()
        self.assertEqual(self.entry.amount, Decimal("5000"))

    def test_history_cannot_be_deleted(self):
        with self.assertRaises(ImmutableRecordError):
            self.entry.delete()
        self.assertTrue(TransactionHistory.objects.filter(pk=self.entry.pk).exists())

    def test_physical_transaction_cannot_be_updated(self):
        self.physical.quantity = Decimal("2")
        with self.assertRaises(ImmutableRecordError):
            self.physical.save()

    def test_physical_transaction_cannot_be_deleted(self):
        with self.assertRaises(ImmutableRecordError):
            self.physical.delete()

    def test_history_str(self):
        self.assertIn("CONVERT_TO_PHYSICAL", str(self.entry))
        self.assertIn("SUCCESS", str(self.entry))


# ============================================================
# Quantity & Error Tests
# ============================================================


class QuantityTest(TestCase):
    def test_to_quantity_normalizes_to_four_places(self):
        self.assertEqual(to_quantity("1.5"), Decimal("1.5000"))
        self.assertEqual(to_quantity(7), Decimal("7.0000"))

    def test_to_quantity_keeps_float_decimal_value(self):
        self.assertEqual(to_quantity(0.1), Decimal("0.1000"))

    def test_to_quantity_rejects_garbage(self):
        for value in ("abc", None, "NaN", "Infinity", True):
            with self.assertRaises(InvalidGoldQuantity):
                to_quantity(value)

    def test_compute_amount(self):
        self.assertEqual(
            compute_amount(Decimal("7"), Decimal("5000.25")), Decimal("35001.7500")
        )

    def test_compute_amount_rounds_half_up(self):
        self.assertEqual(
            compute_amount(Decimal("0.0001"), Decimal("0.5")), Decimal("0.0001")
        )

    def test_to_quantity_rejects_more_than_four_places(self):
        for value in ("10.00004", "0.00005", "1.00001", Decimal("2.12345")):
            with self.assertRaises(InvalidGoldQuantity):
                to_quantity(value)

    def test_to_quantity_accepts_trailing_zeros(self):
        self.assertEqual(to_quantity("1.50000000"), Decimal("1.5000"))

    def test_to_quantity_rejects_values_too_large_to_store(self):
        for value in (Decimal("1e30"), "1" + "0" * 40, 10**14):
            with self.assertRaises(InvalidGoldQuantity):
                to_quantity(value)
        self.assertEqual(to_quantity("99999999999999.9999"), Decimal("99999999999999.9999"))

    def test_compute_amount_too_large(self):
        with self.assertRaises(InvalidGoldQuantity):
            compute_amount(Decimal("99999999999999"), Decimal("99999999999999999999"))


class ErrorTest(TestCase):
    def test_not_found_message(self):
        self.assertEqual(
            VendorBranchNotFound(7).message, "Vendor Branch not found with id: 7"
        )
        self.assertEqual(
            VirtualGoldHoldingNotFound(9).message, "VirtualGoldHolding#9 not found"
        )

    def test_as_dict_carries_kind_message_timestamp(self):
        data = InvalidGoldQuantity("Invalid gold quantity").as_dict()
        self.assertEqual(data["kind"], "INVALID_GOLD_QUANTITY")
        self.assertEqual(data["message"], "Invalid gold quantity")
        self.assertIn("timestamp", data)

    def test_insufficient_quantity_is_invalid_quantity(self):
        exc = InsufficientQuantity()
        self.assertIsInstance(exc, InvalidGoldQuantity)
        self.assertEqual(exc.message, "Insufficient gold in the source branch")


# ============================================================
# Lookup Tests
# ============================================================


class ReferenceLookupTest(LedgerFixturesMixin, TestCase):
    def setUp(self):
        self.lookup = ReferenceLookup()

    def test_resolves_existing_entities(self):
        holding = self.make_holding()
        self.assertEqual(self.lookup.resolve_user(holding.user_id), holding.user)
        self.assertEqual(self.lookup.resolve_branch(holding.branch_id), holding.branch)
        self.assertEqual(self.lookup.resolve_holding(holding.id), holding)

    def test_missing_entities_raise_typed_not_found(self):
        cases = (
            (self.lookup.resolve_user, UserNotFound),
            (self.lookup.resolve_vendor, VendorNotFound),
            (self.lookup.resolve_address, AddressNotFound),
            (self.lookup.resolve_branch, VendorBranchNotFound),
            (self.lookup.resolve_holding, VirtualGoldHoldingNotFound),
        )
        for resolve, error in cases:
            with self.assertRaises(error) as ctx:
                resolve(MISSING_ID)
            self.assertEqual(ctx.exception.entity_id, MISSING_ID)

    def test_non_integer_id_is_not_found(self):
        with self.assertRaises(VendorBranchNotFound):
            self.lookup.resolve_branch("abc")

    def test_current_gold_price_reads_stored_value(self):
        vendor = self.make_vendor(price="100")
        Vendor.objects.filter(pk=vendor.pk).update(current_gold_price=Decimal("150"))
        # The in-memory instance is stale; the lookup must not be.
        self.assertEqual(self.lookup.current_gold_price(vendor.id), Decimal("150"))

    def test_current_gold_price_unknown_vendor(self):
        with self.assertRaises(VendorNotFound):
            self.lookup.current_gold_price(MISSING_ID)


# ============================================================
# Branch Service Tests
# ============================================================


class VendorBranchServiceTest(LedgerFixturesMixin, TransactionTestCase):
    def setUp(self):
        self.service = VendorBranchService()
        self.vendor = self.make_vendor()
        self.address = self.make_address()

    def test_create_branch(self):
        ack = self.service.create_branch(self.vendor.id, self.address.id, "25.5")

        self.assertEqual(ack.message, "Vendor Branch added successfully")
        branch = VendorBranch.objects.get(pk=ack.affected_id)
        self.assertEqual(branch.quantity, Decimal("25.5"))
        self.assertEqual(branch.vendor, self.vendor)
        self.assertIsNotNone(ack.timestamp)

    def test_create_branch_unknown_vendor(self):
        with self.assertRaises(VendorNotFound):
            self.service.create_branch(MISSING_ID, self.address.id, 1)
        self.assertEqual(VendorBranch.objects.count(), 0)

    def test_create_branch_unknown_address(self):
        with self.assertRaises(AddressNotFound):
            self.service.create_branch(self.vendor.id, MISSING_ID, 1)
        self.assertEqual(VendorBranch.objects.count(), 0)

    def test_create_branch_negative_quantity(self):
        with self.assertRaises(InvalidGoldQuantity):
            self.service.create_branch(self.vendor.id, self.address.id, -1)
        self.assertEqual(VendorBranch.objects.count(), 0)

    def test_create_branch_zero_quantity(self):
        ack = self.service.create_branch(self.vendor.id, self.address.id, 0)
        self.assertEqual(VendorBranch.objects.get(pk=ack.affected_id).quantity, 0)

    def test_update_branch_overwrites_fields(self):
        branch = self.make_branch(quantity="5", vendor=self.vendor, address=self.address)
        other_vendor = self.make_vendor(name="Other")
        other_address = self.make_address(city="Pune")

        ack = self.service.update_branch(branch.id, other_vendor.id, other_address.id, 2)

        self.assertEqual(ack.message, "Vendor Branch updated successfully")
        self.assertEqual(ack.affected_id, branch.id)
        branch.refresh_from_db()
        self.assertEqual(branch.quantity, Decimal("2"))
        self.assertEqual(branch.vendor, other_vendor)
        self.assertEqual(branch.address, other_address)

    def test_update_unknown_branch(self):
        with self.assertRaises(VendorBranchNotFound):
            self.service.update_branch(MISSING_ID, self.vendor.id, self.address.id, 1)

    def test_update_branch_unknown_vendor_leaves_branch_unchanged(self):
        branch = self.make_branch(quantity="5", vendor=self.vendor)
        with self.assertRaises(VendorNotFound):
            self.service.update_branch(branch.id, MISSING_ID, self.address.id, 1)
        branch.refresh_from_db()
        self.assertEqual(branch.quantity, Decimal("5"))

    def test_update_branch_rejects_negative_quantity(self):
        branch = self.make_branch(quantity="5", vendor=self.vendor)
        with self.assertRaises(InvalidGoldQuantity):
            self.service.update_branch(branch.id, self.vendor.id, self.address.id, -3)
        branch.refresh_from_db()
        self.assertEqual(branch.quantity, Decimal("5"))

    def test_list_branches_filters(self):
        mumbai = self.make_branch(vendor=self.vendor, address=self.make_address(city="Mumbai"))
        austin = self.make_branch(
            vendor=self.make_vendor(name="Other"),
            address=self.make_address(city="Austin", state="Texas", country="USA"),
        )

        self.assertEqual(list(self.service.list_branches(vendor_id=self.vendor.id)), [mumbai])
        self.assertEqual(list(self.service.list_branches(city="austin")), [austin])
        self.assertEqual(list(self.service.list_branches(state="Texas")), [austin])
        self.assertEqual(list(self.service.list_branches(country="India")), [mumbai])
        self.assertEqual(self.service.list_branches().count(), 2)

    def test_list_branches_no_match_is_empty(self):
        self.make_branch(vendor=self.vendor)
        self.assertEqual(list(self.service.list_branches(city="Atlantis")), [])
        self.assertEqual(list(self.service.list_branches(vendor_id=MISSING_ID)), [])

    def test_list_transactions_unknown_branch(self):
        with self.assertRaises(VendorBranchNotFound):
            self.service.list_transactions(MISSING_ID)

    def test_list_transactions_empty_for_new_branch(self):
        branch = self.make_branch(vendor=self.vendor)
        self.assertEqual(list(self.service.list_transactions(branch.id)), [])


class BranchTransferTest(LedgerFixturesMixin, TransactionTestCase):
    def setUp(self):
        self.service = VendorBranchService()
        vendor = self.make_vendor()
        self.source = self.make_branch(quantity="5", vendor=vendor)
        self.destination = self.make_branch(quantity="0", vendor=vendor)

    def assertBalances(self, source, destination):
        self.source.refresh_from_db()
        self.destination.refresh_from_db()
        self.assertEqual(self.source.quantity, Decimal(source))
        self.assertEqual(self.destination.quantity, Decimal(destination))

    def test_transfer_full_balance_then_overdraw(self):
        ack = self.service.transfer(self.source.id, self.destination.id, 5)

        self.assertEqual(ack.message, "Vendor Branch transfer was successful")
        self.assertBalances("0", "5")

        with self.assertRaises(InsufficientQuantity):
            self.service.transfer(self.source.id, self.destination.id, 6)
        self.assertBalances("0", "5")

    def test_transfer_conserves_total(self):
        before = self.source.quantity + self.destination.quantity

        self.service.transfer(self.source.id, self.destination.id, "2.25")
        self.service.transfer(self.destination.id, self.source.id, "1.125")

        self.assertBalances("3.875", "1.125")
        self.assertEqual(self.source.quantity + self.destination.quantity, before)

    def test_transfer_non_positive_quantity_rejected(self):
        for quantity in (0, -1):
            with self.assertRaises(InvalidGoldQuantity) as ctx:
                self.service.transfer(self.source.id, self.destination.id, quantity)
            self.assertEqual(ctx.exception.message, "Invalid gold quantity")
        self.assertBalances("5", "0")

    def test_transfer_unknown_source(self):
        with self.assertRaises(VendorBranchNotFound):
            self.service.transfer(MISSING_ID, self.destination.id, 1)
        self.assertBalances("5", "0")

    def test_transfer_unknown_destination(self):
        with self.assertRaises(VendorBranchNotFound):
            self.service.transfer(self.source.id, MISSING_ID, 1)
        self.assertBalances("5", "0")

    def test_transfer_to_same_branch_leaves_balance(self):
        self.service.transfer(self.source.id, self.source.id, 3)
        self.assertBalances("5", "0")

    def test_transfer_to_same_branch_still_checks_balance(self):
        with self.assertRaises(InsufficientQuantity):
            self.service.transfer(self.source.id, self.source.id, 6)

    def test_transfer_records_no_history(self):
        self.service.transfer(self.source.id, self.destination.id, 1)
        self.assertEqual(TransactionHistory.objects.count(), 0)

    def test_transfer_rolls_back_when_interrupted(self):
        with patch.object(
            VendorBranch, "refresh_from_db", side_effect=DatabaseError("disk full")
        ):
            with self.assertRaises(DatabaseError):
                self.service.transfer(self.source.id, self.destination.id, 2)
        self.assertBalances("5", "0")

    def test_transfer_rejects_unstorable_quantities(self):
        for quantity in ("4.99995", Decimal("1e30")):
            with self.assertRaises(InvalidGoldQuantity):
                self.service.transfer(self.source.id, self.destination.id, quantity)
        self.assertBalances("5", "0")

    def test_repeated_transfers_never_go_negative(self):
        for _ in range(5):
            self.service.transfer(self.source.id, self.destination.id, 1)
        with self.assertRaises(InsufficientQuantity):
            self.service.transfer(self.source.id, self.destination.id, "0.0001")
        self.assertBalances("0", "5")


# ============================================================
# Holding Service Tests
# ============================================================


class VirtualGoldHoldingServiceTest(LedgerFixturesMixin, TransactionTestCase):
    def setUp(self):
        self.service = VirtualGoldHoldingService()
        self.user = self.make_user()
        self.branch = self.make_branch(quantity="100")

    def test_create_holding(self):
        ack = self.service.create_holding(self.user.id, self.branch.id, "4.5")

        self.assertEqual(ack.message, "Virtual Gold Holding data added successfully")
        holding = VirtualGoldHolding.objects.get(pk=ack.affected_id)
        self.assertEqual(holding.quantity, Decimal("4.5"))
        self.assertEqual(holding.user, self.user)
        self.assertEqual(holding.branch, self.branch)

    def test_create_holding_unknown_user(self):
        with self.assertRaises(UserNotFound):
            self.service.create_holding(MISSING_ID, self.branch.id, 1)
        self.assertEqual(VirtualGoldHolding.objects.count(), 0)

    def test_create_holding_unknown_branch(self):
        with self.assertRaises(VendorBranchNotFound):
            self.service.create_holding(self.user.id, MISSING_ID, 1)

    def test_create_holding_negative_quantity(self):
        with self.assertRaises(InvalidGoldQuantity):
            self.service.create_holding(self.user.id, self.branch.id, -1)

    def test_duplicate_holdings_allowed_by_default(self):
        self.service.create_holding(self.user.id, self.branch.id, 1)
        self.service.create_holding(self.user.id, self.branch.id, 2)
        self.assertEqual(VirtualGoldHolding.objects.count(), 2)

    @override_settings(GOLD_ENFORCE_UNIQUE_HOLDINGS=True)
    def test_duplicate_holding_rejected_when_enforced(self):
        self.service.create_holding(self.user.id, self.branch.id, 1)
        with self.assertRaises(VirtualGoldHoldingAlreadyExists):
            self.service.create_holding(self.user.id, self.branch.id, 2)
        self.assertEqual(VirtualGoldHolding.objects.count(), 1)

    def test_update_holding(self):
        holding = self.make_holding(quantity="1", user=self.user, branch=self.branch)
        other_user = self.make_user(email="ravi@example.com")
        other_branch = self.make_branch()

        ack = self.service.update_holding(holding.id, other_user.id, other_branch.id, 9)

        self.assertEqual(ack.message, "Virtual Gold Holding data updated successfully")
        self.assertEqual(ack.affected_id, holding.id)
        holding.refresh_from_db()
        self.assertEqual(holding.user, other_user)
        self.assertEqual(holding.branch, other_branch)
        self.assertEqual(holding.quantity, Decimal("9"))

    def test_update_resolves_holding_first(self):
        with self.assertRaises(VirtualGoldHoldingNotFound):
            self.service.update_holding(MISSING_ID, MISSING_ID, MISSING_ID, 1)

    def test_update_holding_unknown_branch(self):
        holding = self.make_holding(user=self.user, branch=self.branch)
        with self.assertRaises(VendorBranchNotFound):
            self.service.update_holding(holding.id, self.user.id, MISSING_ID, 1)

    def test_get_holding_unknown(self):
        with self.assertRaises(VirtualGoldHoldingNotFound):
            self.service.get_holding(MISSING_ID)

    def test_list_by_user(self):
        mine = self.make_holding(user=self.user, branch=self.branch)
        self.make_holding(user=self.make_user(email="other@example.com"), branch=self.branch)

        self.assertEqual(list(self.service.list_by_user(self.user.id)), [mine])
        self.assertEqual(self.service.list_holdings().count(), 2)

    def test_list_by_user_unknown(self):
        with self.assertRaises(UserNotFound):
            self.service.list_by_user(MISSING_ID)

    def test_list_by_user_without_holdings_is_empty(self):
        self.assertEqual(list(self.service.list_by_user(self.user.id)), [])

    def test_list_by_user_and_vendor(self):
        here = self.make_holding(user=self.user, branch=self.branch)
        other_vendor = self.make_vendor(name="Other")
        self.make_holding(user=self.user, branch=self.make_branch(vendor=other_vendor))

        result = self.service.list_by_user_and_vendor(self.user.id, self.branch.vendor_id)
        self.assertEqual(list(result), [here])

    def test_list_by_user_and_vendor_unknown_vendor(self):
        with self.assertRaises(VendorNotFound):
            self.service.list_by_user_and_vendor(self.user.id, MISSING_ID)

    def test_list_by_user_and_vendor_checks_user_first(self):
        with self.assertRaises(UserNotFound):
            self.service.list_by_user_and_vendor(MISSING_ID, MISSING_ID)


class ConvertToPhysicalTest(LedgerFixturesMixin, TransactionTestCase):
    def setUp(self):
        self.service = VirtualGoldHoldingService()
        self.vendor = self.make_vendor(price="5000.00")
        self.user = self.make_user()
        self.branch = self.make_branch(quantity="100", vendor=self.vendor)
        self.holding = self.make_holding(quantity="10", user=self.user, branch=self.branch)

    def assertNothingRecorded(self):
        self.assertEqual(PhysicalGoldTransaction.objects.count(), 0)
        self.assertEqual(TransactionHistory.objects.count(), 0)

    def test_convert_part_of_holding(self):
        ack = self.service.convert_to_physical(self.holding.id, 7)

        self.assertEqual(ack.message, "Virtual Gold data convert successfully")
        self.assertEqual(ack.affected_id, self.holding.id)

        self.holding.refresh_from_db()
        self.assertEqual(self.holding.quantity, Decimal("3"))

        physical = PhysicalGoldTransaction.objects.get()
        self.assertEqual(physical.quantity, Decimal("7"))
        self.assertEqual(physical.user, self.user)
        self.assertEqual(physical.branch, self.branch)
        self.assertEqual(physical.delivery_address, self.user.address)

        entry = TransactionHistory.objects.get()
        self.assertEqual(
            entry.transaction_type, TransactionHistory.TransactionType.CONVERT_TO_PHYSICAL
        )
        self.assertEqual(entry.transaction_status, TransactionHistory.Status.SUCCESS)
        self.assertEqual(entry.quantity, Decimal("7"))
        self.assertEqual(entry.amount, Decimal("35000"))
        self.assertEqual(entry.user, self.user)
        self.assertEqual(entry.branch, self.branch)

    def test_convert_does_not_touch_branch_inventory(self):
        self.service.convert_to_physical(self.holding.id, 7)
        self.branch.refresh_from_db()
        self.assertEqual(self.branch.quantity, Decimal("100"))

    def test_convert_entire_balance_is_allowed(self):
        self.service.convert_to_physical(self.holding.id, 10)

        self.holding.refresh_from_db()
        self.assertEqual(self.holding.quantity, Decimal("0"))
        self.assertEqual(PhysicalGoldTransaction.objects.count(), 1)

    def test_convert_more_than_balance_rejected(self):
        with self.assertRaises(InvalidGoldQuantity) as ctx:
            self.service.convert_to_physical(self.holding.id, "10.0001")

        self.assertEqual(ctx.exception.message, "Quantity must be less than 10.0000")
        self.holding.refresh_from_db()
        self.assertEqual(self.holding.quantity, Decimal("10"))
        self.assertNothingRecorded()

    def test_convert_just_above_balance_rejected(self):
        for quantity in ("10.00001", "10.00004"):
            with self.assertRaises(InvalidGoldQuantity):
                self.service.convert_to_physical(self.holding.id, quantity)

        self.holding.refresh_from_db()
        self.assertEqual(self.holding.quantity, Decimal("10"))
        self.assertNothingRecorded()

    def test_convert_below_storable_precision_rejected(self):
        with self.assertRaises(InvalidGoldQuantity) as ctx:
            self.service.convert_to_physical(self.holding.id, "0.00005")

        self.assertEqual(ctx.exception.message, "Invalid gold quantity")
        self.holding.refresh_from_db()
        self.assertEqual(self.holding.quantity, Decimal("10"))
        self.assertNothingRecorded()

    def test_convert_huge_quantity_is_typed_failure(self):
        with self.assertRaises(InvalidGoldQuantity):
            self.service.convert_to_physical(self.holding.id, Decimal("1e30"))
        self.assertNothingRecorded()

    def test_convert_zero_rejected(self):
        with self.assertRaises(InvalidGoldQuantity) as ctx:
            self.service.convert_to_physical(self.holding.id, 0)

        self.assertEqual(ctx.exception.message, "Invalid gold quantity")
        self.assertNothingRecorded()

    def test_convert_negative_rejected(self):
        with self.assertRaises(InvalidGoldQuantity):
            self.service.convert_to_physical(self.holding.id, -2)
        self.holding.refresh_from_db()
        self.assertEqual(self.holding.quantity, Decimal("10"))
        self.assertNothingRecorded()

    def test_convert_unknown_holding(self):
        with self.assertRaises(VirtualGoldHoldingNotFound):
            self.service.convert_to_physical(MISSING_ID, 1)
        self.assertNothingRecorded()

    def test_unknown_holding_checked_before_quantity(self):
        with self.assertRaises(VirtualGoldHoldingNotFound):
            self.service.convert_to_physical(MISSING_ID, 0)

    def test_history_failure_rolls_back_debit(self):
        with patch.object(
            TransactionHistoryService,
            "record",
            side_effect=DatabaseError("history table unavailable"),
        ):
            with self.assertRaises(DatabaseError):
                self.service.convert_to_physical(self.holding.id, 4)

        self.holding.refresh_from_db()
        self.assertEqual(self.holding.quantity, Decimal("10"))
        self.assertNothingRecorded()

    def test_physical_record_failure_rolls_back_debit(self):
        with patch.object(
            PhysicalGoldTransactionService,
            "record_conversion",
            side_effect=DatabaseError("insert failed"),
        ):
            with self.assertRaises(DatabaseError):
                self.service.convert_to_physical(self.holding.id, 4)

        self.holding.refresh_from_db()
        self.assertEqual(self.holding.quantity, Decimal("10"))
        self.assertNothingRecorded()

    def test_amount_uses_price_at_conversion_time(self):
        Vendor.objects.filter(pk=self.vendor.pk).update(current_gold_price=Decimal("6100.50"))

        self.service.convert_to_physical(self.holding.id, 2)

        self.assertEqual(TransactionHistory.objects.get().amount, Decimal("12201.0000"))

    def test_delivery_address_is_snapshot(self):
        original_address = self.user.address
        self.service.convert_to_physical(self.holding.id, 1)

        self.user.address = self.make_address(city="Delhi")
        self.user.save()

        physical = PhysicalGoldTransaction.objects.get()
        self.assertEqual(physical.delivery_address, original_address)

    def test_successive_conversions_balance_law(self):
        for quantity in ("2.5", "2.5", "5"):
            self.service.convert_to_physical(self.holding.id, quantity)

        self.holding.refresh_from_db()
        self.assertEqual(self.holding.quantity, Decimal("0"))
        self.assertEqual(PhysicalGoldTransaction.objects.count(), 3)
        self.assertEqual(TransactionHistory.objects.count(), 3)

        with self.assertRaises(InvalidGoldQuantity):
            self.service.convert_to_physical(self.holding.id, "0.0001")
        self.assertEqual(TransactionHistory.objects.count(), 3)

    def test_injected_lookup_supplies_price(self):
        lookup = ReferenceLookup()
        lookup.current_gold_price = MagicMock(return_value=Decimal("10"))
        service = VirtualGoldHoldingService(lookup=lookup)

        service.convert_to_physical(self.holding.id, 3)

        lookup.current_gold_price.assert_called_once_with(self.vendor.id)
        self.assertEqual(TransactionHistory.objects.get().amount, Decimal("30"))


@skipUnless(
    connection.features.has_select_for_update,
    "overlapping writers need row-level locks",
)
class ConcurrentLedgerTest(LedgerFixturesMixin, TransactionTestCase):
    """Two callers racing on the same rows: one wins, the other sees its result."""

    def run_concurrently(self, operation, expected_error):
        barrier = threading.Barrier(2)
        outcomes = []
        lock = threading.Lock()

        def worker():
            try:
                barrier.wait(timeout=10)
                operation()
                outcome = "ok"
            except expected_error:
                outcome = "rejected"
            finally:
                connection.close()
            with lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=worker) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)
        return sorted(outcomes)

    def test_overlapping_conversions_of_one_holding(self):
        holding = self.make_holding(quantity="10")

        outcomes = self.run_concurrently(
            lambda: VirtualGoldHoldingService().convert_to_physical(holding.id, 6),
            InvalidGoldQuantity,
        )

        self.assertEqual(outcomes, ["ok", "rejected"])
        holding.refresh_from_db()
        self.assertEqual(holding.quantity, Decimal("4"))
        self.assertEqual(PhysicalGoldTransaction.objects.count(), 1)
        self.assertEqual(TransactionHistory.objects.count(), 1)

    def test_overlapping_transfers_from_one_branch(self):
        vendor = self.make_vendor()
        source = self.make_branch(quantity="10", vendor=vendor)
        destination = self.make_branch(quantity="0", vendor=vendor)

        outcomes = self.run_concurrently(
            lambda: VendorBranchService().transfer(source.id, destination.id, 6),
            InsufficientQuantity,
        )

        self.assertEqual(outcomes, ["ok", "rejected"])
        source.refresh_from_db()
        destination.refresh_from_db()
        self.assertEqual(source.quantity, Decimal("4"))
        self.assertEqual(destination.quantity, Decimal("6"))


# ============================================================
# History & Physical Recorder Tests
# ============================================================


class TransactionHistoryServiceTest(LedgerFixturesMixin, TestCase):
    def setUp(self):
        self.history = TransactionHistoryService()
        self.user = self.make_user()
        self.branch = self.make_branch()
        self.other_branch = self.make_branch()

    def record(self, branch=None, transaction_type="CONVERT_TO_PHYSICAL", status="SUCCESS"):
        return self.history.record(
            user=self.user,
            branch=branch or self.branch,
            transaction_type=transaction_type,
            quantity=Decimal("1"),
            amount=Decimal("5000"),
            transaction_status=status,
        )

    def test_record_assigns_id_and_timestamp(self):
        entry = self.record()
        self.assertIsNotNone(entry.id)
        self.assertIsNotNone(entry.created_at)

    def test_record_defaults_to_success(self):
        entry = self.history.record(
            user=self.user,
            branch=self.branch,
            transaction_type=TransactionHistory.TransactionType.BUY,
            quantity=Decimal("1"),
            amount=Decimal("1"),
        )
        self.assertEqual(entry.transaction_status, TransactionHistory.Status.SUCCESS)

    def test_list_by_branch(self):
        mine = self.record()
        self.record(branch=self.other_branch)
        self.assertEqual(list(self.history.list_by_branch(self.branch.id)), [mine])

    def test_list_by_branch_unknown(self):
        with self.assertRaises(VendorBranchNotFound):
            self.history.list_by_branch(MISSING_ID)

    def test_list_by_status_and_type(self):
        self.record()
        self.record(status="FAILURE")
        self.record(transaction_type="BUY")

        self.assertEqual(self.history.list_by_status("failure").count(), 1)
        self.assertEqual(self.history.list_by_status("SUCCESS").count(), 2)
        self.assertEqual(self.history.list_by_type("convert_to_physical").count(), 2)
        self.assertEqual(self.history.list_by_type("TRANSFER").count(), 0)
        self.assertEqual(self.history.list_all().count(), 3)

    def test_list_by_user_unknown(self):
        with self.assertRaises(UserNotFound):
            self.history.list_by_user(MISSING_ID)

    def test_get_unknown(self):
        with self.assertRaises(TransactionHistoryNotFound):
            self.history.get(MISSING_ID)

    def test_reads_have_no_side_effects(self):
        self.record()
        list(self.history.list_all())
        list(self.history.list_by_branch(self.branch.id))
        self.assertEqual(TransactionHistory.objects.count(), 1)


class PhysicalGoldTransactionServiceTest(LedgerFixturesMixin, TestCase):
    def setUp(self):
        self.physical = PhysicalGoldTransactionService()
        self.holding = self.make_holding()

    def test_record_conversion_and_reads(self):
        record = self.physical.record_conversion(self.holding, Decimal("2"))

        self.assertEqual(self.physical.get(record.id), record)
        self.assertEqual(list(self.physical.list_by_user(self.holding.user_id)), [record])
        self.assertEqual(
            list(self.physical.list_by_branch(self.holding.branch_id)), [record]
        )
        self.assertEqual(self.physical.list_all().count(), 1)

    def test_unknown_lookups(self):
        with self.assertRaises(PhysicalGoldTransactionNotFound):
            self.physical.get(MISSING_ID)
        with self.assertRaises(UserNotFound):
            self.physical.list_by_user(MISSING_ID)
        with self.assertRaises(VendorBranchNotFound):
            self.physical.list_by_branch(MISSING_ID)


# ============================================================
# Payment Tests
# ============================================================


class PaymentServiceTest(LedgerFixturesMixin, TransactionTestCase):
    def setUp(self):
        self.payments = PaymentService()
        self.user = self.make_user()

    def record(self, amount="2500", method="UPI", status="SUCCESS", user=None):
        ack = self.payments.record_payment(
            (user or self.user).id, amount, method, status
        )
        return Payment.objects.get(pk=ack.affected_id)

    def test_record_payment(self):
        ack = self.payments.record_payment(self.user.id, "1999.99", "credit_card")

        self.assertEqual(ack.message, "Payment recorded successfully")
        payment = Payment.objects.get(pk=ack.affected_id)
        self.assertEqual(payment.amount, Decimal("1999.99"))
        self.assertEqual(payment.payment_method, Payment.PaymentMethod.CREDIT_CARD)
        self.assertEqual(payment.payment_status, Payment.PaymentStatus.PENDING)

    def test_record_payment_unknown_user(self):
        with self.assertRaises(UserNotFound):
            self.payments.record_payment(MISSING_ID, "10", "UPI")
        self.assertEqual(Payment.objects.count(), 0)

    def test_record_payment_rejects_bad_amounts(self):
        for amount in ("0", "-5", "abc", "1.00001", Decimal("1e40")):
            with self.assertRaises(InvalidPayment):
                self.payments.record_payment(self.user.id, amount, "UPI")
        self.assertEqual(Payment.objects.count(), 0)

    def test_record_payment_rejects_unknown_method_and_status(self):
        with self.assertRaises(InvalidPayment):
            self.payments.record_payment(self.user.id, "10", "CHEQUE")
        with self.assertRaises(InvalidPayment):
            self.payments.record_payment(self.user.id, "10", "UPI", "REFUNDED")
        self.assertEqual(Payment.objects.count(), 0)

    def test_update_status(self):
        payment = self.record(status="PENDING")

        ack = self.payments.update_status(payment.id, "failed")

        self.assertEqual(ack.message, "Payment status updated successfully")
        self.assertEqual(ack.affected_id, payment.id)
        payment.refresh_from_db()
        self.assertEqual(payment.payment_status, Payment.PaymentStatus.FAILED)

    def test_update_status_unknown_payment(self):
        with self.assertRaises(PaymentNotFound):
            self.payments.update_status(MISSING_ID, "SUCCESS")

    def test_update_status_rejects_unknown_status(self):
        payment = self.record(status="PENDING")
        with self.assertRaises(InvalidPayment):
            self.payments.update_status(payment.id, "LOST")
        payment.refresh_from_db()
        self.assertEqual(payment.payment_status, Payment.PaymentStatus.PENDING)

    def test_queries_by_user_status_and_method(self):
        upi = self.record(method="UPI", status="SUCCESS")
        card = self.record(method="DEBIT_CARD", status="FAILED")
        other = self.record(
            method="UPI", status="PENDING", user=self.make_user(email="ravi@example.com")
        )

        self.assertEqual(set(self.payments.list_by_user(self.user.id)), {upi, card})
        self.assertEqual(list(self.payments.list_by_status("failed")), [card])
        self.assertEqual(set(self.payments.list_by_method("upi")), {upi, other})
        self.assertEqual(self.payments.list_all().count(), 3)

    def test_query_failures(self):
        with self.assertRaises(UserNotFound):
            self.payments.list_by_user(MISSING_ID)
        with self.assertRaises(InvalidPayment):
            self.payments.list_by_status("UNKNOWN")
        with self.assertRaises(InvalidPayment):
            self.payments.list_by_method("BARTER")
        with self.assertRaises(PaymentNotFound):
            self.payments.get(MISSING_ID)

    def test_payment_str(self):
        payment = self.record()
        self.assertIn("UPI", str(payment))


# ============================================================
# Price Feed & Celery Task Tests
# ============================================================


class PriceFeedTest(TestCase):
    @patch("gold.utils.price_feed.requests.get")
    def test_quote_success(self, mock_get):
        mock_get.return_value = MagicMock(
            status_code=200, json=MagicMock(return_value={"price": "5100.25"})
        )

        result = request_gold_price_quote(3)

        self.assertTrue(result["success"])
        self.assertEqual(result["response"]["price"], "5100.25")
        self.assertTrue(mock_get.call_args.args[0].endswith("/vendors/3/price"))

    @patch("gold.utils.price_feed.requests.get")
    def test_quote_without_price(self, mock_get):
        mock_get.return_value = MagicMock(json=MagicMock(return_value={"error": "unknown"}))

        result = request_gold_price_quote(3)

        self.assertFalse(result["success"])

    @patch("gold.utils.price_feed.requests.get")
    def test_quote_with_non_object_body(self, mock_get):
        mock_get.return_value = MagicMock(json=MagicMock(return_value=[{"price": "1"}]))

        result = request_gold_price_quote(3)

        self.assertFalse(result["success"])
        self.assertEqual(result["response"], [{"price": "1"}])

    @patch("gold.utils.price_feed.requests.get")
    def test_quote_connection_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")

        result = request_gold_price_quote(3)

        self.assertFalse(result["success"])
        self.assertEqual(result["response"]["error"], "connection_error")

    @patch("gold.utils.price_feed.requests.get")
    def test_quote_timeout(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout("slow")

        result = request_gold_price_quote(3)

        self.assertEqual(result["response"]["error"], "timeout")


class CeleryTaskTest(LedgerFixturesMixin, TransactionTestCase):
    def setUp(self):
        self.vendor = self.make_vendor(price="5000")

    @patch("gold.tasks.request_gold_price_quote")
    def test_refresh_vendor_price(self, mock_quote):
        mock_quote.return_value = {"success": True, "response": {"price": "5123.4567"}}

        from gold.tasks import refresh_vendor_gold_price

        result = refresh_vendor_gold_price.apply(args=[self.vendor.id])

        self.assertEqual(result.get()["status"], "UPDATED")
        self.vendor.refresh_from_db()
        self.assertEqual(self.vendor.current_gold_price, Decimal("5123.4567"))
        self.assertIsNotNone(self.vendor.price_updated_at)

    @patch("gold.tasks.request_gold_price_quote")
    def test_refresh_ignores_non_positive_quote(self, mock_quote):
        mock_quote.return_value = {"success": True, "response": {"price": "-1"}}

        from gold.tasks import refresh_vendor_gold_price

        result = refresh_vendor_gold_price.apply(args=[self.vendor.id])

        self.assertEqual(result.get()["status"], "INVALID_QUOTE")
        self.vendor.refresh_from_db()
        self.assertEqual(self.vendor.current_gold_price, Decimal("5000"))

    @patch("gold.tasks.request_gold_price_quote")
    def test_refresh_unknown_vendor(self, mock_quote):
        mock_quote.return_value = {"success": True, "response": {"price": "10"}}

        from gold.tasks import refresh_vendor_gold_price

        result = refresh_vendor_gold_price.apply(args=[MISSING_ID])

        self.assertEqual(result.get()["status"], "NOT_FOUND")

    @patch("gold.tasks.request_gold_price_quote")
    def test_refresh_feed_failure_keeps_price(self, mock_quote):
        mock_quote.return_value = {"success": False, "response": {"error": "timeout"}}

        from gold.tasks import PriceFeedUnavailable, refresh_vendor_gold_price

        # Called directly, retry() re-raises the original error.
        with self.assertRaises(PriceFeedUnavailable):
            refresh_vendor_gold_price(self.vendor.id)

        self.vendor.refresh_from_db()
        self.assertEqual(self.vendor.current_gold_price, Decimal("5000"))

    @patch("gold.utils.price_feed.requests.get")
    def test_refresh_non_object_body_goes_through_retry(self, mock_get):
        mock_get.return_value = MagicMock(json=MagicMock(return_value=["5100"]))

        from gold.tasks import PriceFeedUnavailable, refresh_vendor_gold_price

        with self.assertRaises(PriceFeedUnavailable):
            refresh_vendor_gold_price(self.vendor.id)

        self.vendor.refresh_from_db()
        self.assertEqual(self.vendor.current_gold_price, Decimal("5000"))

    @patch("gold.tasks.refresh_vendor_gold_price")
    def test_refresh_all_dispatches_each_vendor(self, mock_refresh):
        second = self.make_vendor(name="Second")

        from gold.tasks import refresh_all_vendor_gold_prices

        result = refresh_all_vendor_gold_prices.apply()

        self.assertEqual(result.get()["dispatched"], 2)
        dispatched = [call.args[0] for call in mock_refresh.delay.call_args_list]
        self.assertEqual(dispatched, [self.vendor.id, second.id])


# ============================================================
# API Tests
# ============================================================


class BranchAPITest(LedgerFixturesMixin, TestCase):
    def setUp(self):
        self.client = APIClient()
        self.vendor = self.make_vendor()
        self.address = self.make_address()

    def test_create_branch(self):
        response = self.client.post(
            "/api/branches/",
            {"vendor_id": self.vendor.id, "address_id": self.address.id, "quantity": "12.5"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["message"], "Vendor Branch added successfully")
        self.assertIn("timestamp", response.data)
        branch = VendorBranch.objects.get(pk=response.data["id"])
        self.assertEqual(branch.quantity, Decimal("12.5"))

    def test_create_branch_unknown_vendor(self):
        response = self.client.post(
            "/api/branches/",
            {"vendor_id": MISSING_ID, "address_id": self.address.id, "quantity": "1"},
            format="json",
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["kind"], "VENDOR_NOT_FOUND")

    def test_create_branch_missing_fields(self):
        response = self.client.post("/api/branches/", {}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_list_branches_by_city(self):
        self.make_branch(vendor=self.vendor, address=self.make_address(city="Austin"))
        self.make_branch(vendor=self.vendor, address=self.address)

        response = self.client.get("/api/branches/?city=Austin")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["address"]["city"], "Austin")

    def test_list_branches_bad_vendor_param(self):
        response = self.client.get("/api/branches/?vendor=abc")
        self.assertEqual(response.status_code, 400)

    def test_retrieve_branch(self):
        branch = self.make_branch(quantity="3", vendor=self.vendor)
        response = self.client.get(f"/api/branches/{branch.id}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(Decimal(response.data["quantity"]), Decimal("3"))
        self.assertEqual(response.data["vendor_id"], self.vendor.id)

    def test_retrieve_unknown_branch(self):
        response = self.client.get(f"/api/branches/{MISSING_ID}/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["kind"], "VENDOR_BRANCH_NOT_FOUND")
        self.assertEqual(
            response.data["message"], f"Vendor Branch not found with id: {MISSING_ID}"
        )
        self.assertIn("timestamp", response.data)

    def test_update_branch(self):
        branch = self.make_branch(quantity="3", vendor=self.vendor)
        response = self.client.put(
            f"/api/branches/{branch.id}/",
            {"vendor_id": self.vendor.id, "address_id": self.address.id, "quantity": "8"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        branch.refresh_from_db()
        self.assertEqual(branch.quantity, Decimal("8"))

    def test_transfer(self):
        source = self.make_branch(quantity="5", vendor=self.vendor)
        destination = self.make_branch(quantity="0", vendor=self.vendor)

        response = self.client.post(
            "/api/branches/transfer/",
            {
                "source_branch_id": source.id,
                "destination_branch_id": destination.id,
                "quantity": "5",
            },
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["message"], "Vendor Branch transfer was successful")

        response = self.client.post(
            "/api/branches/transfer/",
            {
                "source_branch_id": source.id,
                "destination_branch_id": destination.id,
                "quantity": "6",
            },
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["kind"], "INSUFFICIENT_QUANTITY")

        source.refresh_from_db()
        destination.refresh_from_db()
        self.assertEqual(source.quantity, Decimal("0"))
        self.assertEqual(destination.quantity, Decimal("5"))

    def test_branch_transactions(self):
        holding = self.make_holding(quantity="5", branch=self.make_branch(vendor=self.vendor))
        VirtualGoldHoldingService().convert_to_physical(holding.id, 1)

        response = self.client.get(f"/api/branches/{holding.branch_id}/transactions/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["transaction_type"], "CONVERT_TO_PHYSICAL")

    def test_branch_transactions_unknown_branch(self):
        response = self.client.get(f"/api/branches/{MISSING_ID}/transactions/")
        self.assertEqual(response.status_code, 404)


class HoldingAPITest(LedgerFixturesMixin, TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = self.make_user()
        self.branch = self.make_branch(quantity="50")
        self.holding = self.make_holding(quantity="10", user=self.user, branch=self.branch)

    def test_create_holding(self):
        response = self.client.post(
            "/api/holdings/",
            {"user_id": self.user.id, "branch_id": self.branch.id, "quantity": "2"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(
            response.data["message"], "Virtual Gold Holding data added successfully"
        )
        self.assertTrue(VirtualGoldHolding.objects.filter(pk=response.data["id"]).exists())

    @override_settings(GOLD_ENFORCE_UNIQUE_HOLDINGS=True)
    def test_create_duplicate_holding_conflict(self):
        response = self.client.post(
            "/api/holdings/",
            {"user_id": self.user.id, "branch_id": self.branch.id, "quantity": "2"},
            format="json",
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["kind"], "VIRTUAL_GOLD_HOLDING_ALREADY_EXISTS")

    def test_list_holdings_by_user(self):
        self.make_holding(user=self.make_user(email="other@example.com"), branch=self.branch)

        response = self.client.get(f"/api/holdings/?user={self.user.id}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual([row["id"] for row in response.data], [self.holding.id])

    def test_list_holdings_by_user_and_vendor(self):
        response = self.client.get(
            f"/api/holdings/?user={self.user.id}&vendor={self.branch.vendor_id}"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)

    def test_list_holdings_unknown_user(self):
        response = self.client.get(f"/api/holdings/?user={MISSING_ID}")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["kind"], "USER_NOT_FOUND")

    def test_list_holdings_vendor_without_user(self):
        response = self.client.get(f"/api/holdings/?vendor={self.branch.vendor_id}")
        self.assertEqual(response.status_code, 400)

    def test_update_holding(self):
        response = self.client.put(
            f"/api/holdings/{self.holding.id}/",
            {"user_id": self.user.id, "branch_id": self.branch.id, "quantity": "4"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["id"], self.holding.id)
        self.holding.refresh_from_db()
        self.assertEqual(self.holding.quantity, Decimal("4"))

    def test_convert(self):
        response = self.client.post(
            f"/api/holdings/{self.holding.id}/convert/", {"quantity": "7"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["message"], "Virtual Gold data convert successfully")
        self.assertEqual(response.data["id"], self.holding.id)

        response = self.client.get(f"/api/holdings/{self.holding.id}/")
        self.assertEqual(Decimal(response.data["quantity"]), Decimal("3"))

    def test_convert_zero(self):
        response = self.client.post(
            f"/api/holdings/{self.holding.id}/convert/", {"quantity": "0"}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["message"], "Invalid gold quantity")
        self.assertEqual(response.data["kind"], "INVALID_GOLD_QUANTITY")

    def test_convert_unknown_holding(self):
        response = self.client.post(
            f"/api/holdings/{MISSING_ID}/convert/", {"quantity": "1"}, format="json"
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["kind"], "VIRTUAL_GOLD_HOLDING_NOT_FOUND")


class TransactionAPITest(LedgerFixturesMixin, TestCase):
    def setUp(self):
        self.client = APIClient()
        self.holding = self.make_holding(quantity="10")
        service = VirtualGoldHoldingService()
        service.convert_to_physical(self.holding.id, 2)
        service.convert_to_physical(self.holding.id, 3)

    def test_list_transactions(self):
        response = self.client.get("/api/transactions/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 2)

    def test_filter_by_type(self):
        response = self.client.get("/api/transactions/?type=convert_to_physical")
        self.assertEqual(len(response.data), 2)

        response = self.client.get("/api/transactions/?type=TRANSFER")
        self.assertEqual(len(response.data), 0)

    def test_filter_by_status(self):
        response = self.client.get("/api/transactions/?status=FAILURE")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 0)

    def test_filter_by_user(self):
        response = self.client.get(f"/api/transactions/?user={self.holding.user_id}")
        self.assertEqual(len(response.data), 2)

        response = self.client.get(f"/api/transactions/?user={MISSING_ID}")
        self.assertEqual(response.status_code, 404)

    def test_transaction_detail(self):
        entry = TransactionHistory.objects.order_by("id").first()
        response = self.client.get(f"/api/transactions/{entry.id}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["id"], entry.id)
        self.assertEqual(Decimal(response.data["amount"]), Decimal("10000"))

    def test_transaction_detail_unknown(self):
        response = self.client.get(f"/api/transactions/{MISSING_ID}/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["kind"], "TRANSACTION_HISTORY_NOT_FOUND")

    def test_physical_transactions(self):
        response = self.client.get(
            f"/api/physical-transactions/?user={self.holding.user_id}"
            f"&branch={self.holding.branch_id}"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            sorted(Decimal(row["quantity"]) for row in response.data),
            [Decimal("2"), Decimal("3")],
        )
        self.assertEqual(response.data[0]["delivery_address"]["city"], "Mumbai")


class PaymentAPITest(LedgerFixturesMixin, TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = self.make_user()

    def create_payment(self, **overrides):
        data = {"user_id": self.user.id, "amount": "1500.50", "payment_method": "UPI"}
        data.update(overrides)
        return self.client.post("/api/payments/", data, format="json")

    def test_create_payment(self):
        response = self.create_payment()

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["message"], "Payment recorded successfully")
        payment = Payment.objects.get(pk=response.data["id"])
        self.assertEqual(payment.payment_status, "PENDING")

    def test_create_payment_unknown_method(self):
        response = self.create_payment(payment_method="CHEQUE")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["kind"], "INVALID_PAYMENT")

    def test_create_payment_unknown_user(self):
        response = self.create_payment(user_id=MISSING_ID)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["kind"], "USER_NOT_FOUND")

    def test_list_payments_with_filters(self):
        self.create_payment(payment_status="SUCCESS")
        self.create_payment(payment_method="WALLET")

        response = self.client.get(f"/api/payments/?user={self.user.id}&method=wallet")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["payment_method"], "WALLET")

        response = self.client.get("/api/payments/?status=SUCCESS")
        self.assertEqual(len(response.data), 1)
        self.assertEqual(Decimal(response.data[0]["amount"]), Decimal("1500.50"))

    def test_list_payments_unknown_status(self):
        response = self.client.get("/api/payments/?status=LOST")
        self.assertEqual(response.status_code, 400)

    def test_update_payment_status(self):
        payment_id = self.create_payment().data["id"]

        response = self.client.patch(
            f"/api/payments/{payment_id}/", {"payment_status": "SUCCESS"}, format="json"
        )

        self.assertEqual(response.status_code, 200)
        response = self.client.get(f"/api/payments/{payment_id}/")
        self.assertEqual(response.data["payment_status"], "SUCCESS")

    def test_retrieve_unknown_payment(self):
        response = self.client.get(f"/api/payments/{MISSING_ID}/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["kind"], "PAYMENT_NOT_FOUND")
