"""
Service layer tests for summaries app.

Tests:
- Monthly compilation (income, expenses, counters, leaderboards)
- Cache state: missing, cached, stale, recompiled
- Invalidation on writes to transactions, payments and entity names
- Home, yearly and history overviews
"""

import pytest
from datetime import date
from decimal import Decimal

from unittest.mock import patch

from django.db import DatabaseError
from django.forms.models import model_to_dict

from apps.customers.models import Customer, CustomerPayment
from apps.customers.services import (
    add_customer_transaction,
    add_payment_to_transaction,
    update_customer_transaction,
)
from apps.ledger.exceptions import InvalidPeriodError, NotAuthenticatedError, StoreError
from apps.summaries.models import MonthlySummary
from apps.summaries.services import (
    calculate_monthly_summary,
    compile_monthly_summary,
    get_current_monthly_summary,
    get_home_summary,
    get_monthly_summary,
    get_transaction_history,
    get_yearly_summary,
)
from apps.vendors.models import Vendor
from apps.vendors.services import (
    add_vendor_payment,
    add_vendor_transaction,
    delete_vendor,
    update_vendor,
    update_vendor_transaction,
)


def _is_stale(user, year, month):
    return MonthlySummary.objects.get(owner=user, year=year, month=month).is_stale


# ============================================================================
# COMPILATION TESTS
# ============================================================================

@pytest.mark.django_db
class TestCompileMonthlySummary:
    """Test the monthly aggregation."""

    def test_expense_and_income_in_month(self, user, vendor, customer):
        """One 300 purchase and one 200 payment give net -100."""
        add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 3, 10), material_amount=300)
        sale = add_customer_transaction(
            owner=user, customer_id=customer.id, date=date(2025, 3, 2), material_amount=1000
        )
        add_payment_to_transaction(
            owner=user, customer_id=customer.id, transaction_id=sale.id,
            amount=200, date=date(2025, 3, 20),
        )

        data = compile_monthly_summary(owner=user, year=2025, month=3)

        assert data['monthly_expenses'] == Decimal('300.00')
        assert data['monthly_income'] == Decimal('200.00')
        assert data['net_balance'] == Decimal('-100.00')
        assert data['vendor_transaction_count'] == 1
        assert data['customer_transaction_count'] == 1
        assert data['customer_payment_count'] == 1
        assert data['top_vendors'] == [{'id': str(vendor.id), 'name': 'Sharma Cement', 'amount': '300.00'}]
        assert data['top_customers'] == [{'id': str(customer.id), 'name': 'Verma Builders', 'amount': '200.00'}]

    def test_empty_month_is_all_zero(self, user):
        data = compile_monthly_summary(owner=user, year=2024, month=2)

        assert data['monthly_income'] == Decimal('0.00')
        assert data['monthly_expenses'] == Decimal('0.00')
        assert data['net_balance'] == Decimal('0.00')
        assert data['vendor_transaction_count'] == 0
        assert data['customer_transaction_count'] == 0
        assert data['vendor_payment_count'] == 0
        assert data['customer_payment_count'] == 0
        assert data['top_vendors'] == []
        assert data['top_customers'] == []

    def test_income_follows_payment_date_not_sale_date(self, user, customer):
        sale = add_customer_transaction(
            owner=user, customer_id=customer.id, date=date(2025, 2, 25), material_amount=500
        )
        add_payment_to_transaction(
            owner=user, customer_id=customer.id, transaction_id=sale.id,
            amount=120, date=date(2025, 3, 3),
        )

        february = compile_monthly_summary(owner=user, year=2025, month=2)
        march = compile_monthly_summary(owner=user, year=2025, month=3)

        assert february['monthly_income'] == Decimal('0.00')
        assert february['customer_transaction_count'] == 1
        assert march['monthly_income'] == Decimal('120.00')
        assert march['customer_transaction_count'] == 0

    def test_window_boundaries_are_inclusive(self, user, vendor):
        add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 4, 1), material_amount=10)
        add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 4, 30), material_amount=20)
        add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 5, 1), material_amount=40)

        data = compile_monthly_summary(owner=user, year=2025, month=4)
        assert data['monthly_expenses'] == Decimal('30.00')

    def test_vendor_payments_are_counted_only(self, user, vendor):
        add_vendor_payment(owner=user, vendor_id=vendor.id, amount=75, date=date(2025, 3, 5))

        data = compile_monthly_summary(owner=user, year=2025, month=3)
        assert data['vendor_payment_count'] == 1
        assert data['monthly_expenses'] == Decimal('0.00')

    def test_top_vendors_sorted_with_stable_ties_and_limit(self, user, settings):
        settings.LEDGER_TOP_ENTITIES = 3
        names = ['Alpha', 'Bravo', 'Charlie', 'Delta']
        vendors = [Vendor.objects.create(owner=user, name=name) for name in names]
        amounts = [100, 300, 100, 50]
        for vendor, amount in zip(vendors, amounts):
            add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 6, 1), material_amount=amount)

        data = compile_monthly_summary(owner=user, year=2025, month=6)

        assert [entry['name'] for entry in data['top_vendors']] == ['Bravo', 'Alpha', 'Charlie']

    def test_zero_amount_entities_left_off_leaderboard(self, user, vendor):
        add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 6, 1), items=[])

        data = compile_monthly_summary(owner=user, year=2025, month=6)
        assert data['vendor_transaction_count'] == 1
        assert data['top_vendors'] == []

    def test_other_users_data_ignored(self, user, other_user):
        foreign = Vendor.objects.create(owner=other_user, name='Elsewhere')
        add_vendor_transaction(owner=other_user, vendor_id=foreign.id, date=date(2025, 3, 1), material_amount=999)

        data = compile_monthly_summary(owner=user, year=2025, month=3)
        assert data['monthly_expenses'] == Decimal('0.00')

    def test_invalid_month(self, user):
        with pytest.raises(InvalidPeriodError):
            compile_monthly_summary(owner=user, year=2025, month=13)

    def test_requires_owner(self):
        with pytest.raises(NotAuthenticatedError):
            compile_monthly_summary(owner=None, year=2025, month=3)


# ============================================================================
# CACHE TESTS
# ============================================================================

@pytest.mark.django_db
class TestSummaryCache:
    """Test the cached summary row."""

    def test_missing_month_is_created_with_zeros(self, user):
        summary = get_monthly_summary(owner=user, year=2030, month=1)

        assert summary.key == '2030_01'
        assert summary.monthly_income == Decimal('0.00')
        assert summary.vendor_transaction_count == 0
        assert MonthlySummary.objects.filter(owner=user).count() == 1

    def test_recalculation_is_idempotent(self, user, vendor, customer):
        add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 3, 10), material_amount=300)
        add_customer_transaction(
            owner=user, customer_id=customer.id, date=date(2025, 3, 11), material_amount=90,
            payments=[{'amount': 40, 'date': date(2025, 3, 11)}],
        )

        first = model_to_dict(calculate_monthly_summary(owner=user, year=2025, month=3))
        second = model_to_dict(calculate_monthly_summary(owner=user, year=2025, month=3))

        assert first == second
        assert MonthlySummary.objects.filter(owner=user, year=2025, month=3).count() == 1

    def test_cached_row_served_until_invalidated(self, user, vendor):
        summary = get_monthly_summary(owner=user, year=2025, month=3)
        MonthlySummary.objects.filter(pk=summary.pk).update(monthly_expenses=Decimal('1.00'))

        cached = get_monthly_summary(owner=user, year=2025, month=3)
        assert cached.monthly_expenses == Decimal('1.00')

        add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 3, 5), material_amount=300)
        assert _is_stale(user, 2025, 3)

        refreshed = get_monthly_summary(owner=user, year=2025, month=3)
        assert refreshed.monthly_expenses == Decimal('300.00')
        assert refreshed.is_stale is False

    def test_current_month(self, user):
        summary = get_current_monthly_summary(owner=user, today=date(2025, 7, 15))
        assert (summary.year, summary.month) == (2025, 7)

    def test_store_failure_leaves_stale_row_untouched(self, user, vendor):
        summary = get_monthly_summary(owner=user, year=2025, month=3)
        add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 3, 5), material_amount=300)
        stale = MonthlySummary.objects.get(pk=summary.pk)
        assert stale.is_stale is True

        with patch.object(CustomerPayment.objects, 'filter', side_effect=DatabaseError('connection lost')):
            with pytest.raises(StoreError, match='connection lost'):
                get_monthly_summary(owner=user, year=2025, month=3)

        row = MonthlySummary.objects.get(pk=summary.pk)
        assert row.is_stale is True
        assert row.monthly_expenses == Decimal('0.00')
        assert row.vendor_transaction_count == 0
        assert row.updated_at == stale.updated_at

    def test_store_failure_creates_no_row(self, user, vendor):
        add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 3, 5), material_amount=300)

        with patch.object(CustomerPayment.objects, 'filter', side_effect=DatabaseError('connection lost')):
            with pytest.raises(StoreError):
                get_monthly_summary(owner=user, year=2025, month=3)

        assert not MonthlySummary.objects.filter(owner=user).exists()


# ============================================================================
# INVALIDATION TESTS
# ============================================================================

@pytest.mark.django_db
class TestSummaryInvalidation:
    """Test that ledger writes mark the affected months stale."""

    def test_vendor_payment_marks_month_stale(self, user, vendor):
        get_monthly_summary(owner=user, year=2025, month=3)
        get_monthly_summary(owner=user, year=2025, month=4)

        add_vendor_payment(owner=user, vendor_id=vendor.id, amount=10, date=date(2025, 3, 8))

        assert _is_stale(user, 2025, 3)
        assert not _is_stale(user, 2025, 4)

    def test_moving_transaction_marks_both_months(self, user, vendor):
        vendor_transaction = add_vendor_transaction(
            owner=user, vendor_id=vendor.id, date=date(2025, 3, 10), material_amount=300
        )
        get_monthly_summary(owner=user, year=2025, month=3)
        get_monthly_summary(owner=user, year=2025, month=4)

        update_vendor_transaction(
            owner=user, vendor_id=vendor.id, transaction_id=vendor_transaction.id,
            data={'date': date(2025, 4, 2)},
        )

        assert _is_stale(user, 2025, 3)
        assert _is_stale(user, 2025, 4)
        assert get_monthly_summary(owner=user, year=2025, month=3).monthly_expenses == Decimal('0.00')
        assert get_monthly_summary(owner=user, year=2025, month=4).monthly_expenses == Decimal('300.00')

    def test_replacing_customer_payments_marks_old_payment_month(self, user, customer):
        sale = add_customer_transaction(
            owner=user, customer_id=customer.id, date=date(2025, 3, 1), material_amount=100,
            payments=[{'amount': 50, 'date': date(2025, 5, 3)}],
        )
        get_monthly_summary(owner=user, year=2025, month=5)

        update_customer_transaction(
            owner=user, customer_id=customer.id, transaction_id=sale.id,
            data={'payments': [{'amount': 50, 'date': date(2025, 3, 1)}]},
        )

        assert _is_stale(user, 2025, 5)
        assert get_monthly_summary(owner=user, year=2025, month=5).monthly_income == Decimal('0.00')

    def test_deleting_vendor_marks_its_months(self, user, vendor):
        add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 3, 10), material_amount=300)
        get_monthly_summary(owner=user, year=2025, month=3)

        delete_vendor(owner=user, vendor_id=vendor.id)

        assert _is_stale(user, 2025, 3)
        assert get_monthly_summary(owner=user, year=2025, month=3).top_vendors == []

    def test_renaming_vendor_marks_all_months(self, user, vendor):
        add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 3, 10), material_amount=300)
        get_monthly_summary(owner=user, year=2025, month=3)
        get_monthly_summary(owner=user, year=2025, month=8)

        update_vendor(owner=user, vendor_id=vendor.id, name='Sharma Cement Works')

        assert _is_stale(user, 2025, 3)
        assert _is_stale(user, 2025, 8)
        top = get_monthly_summary(owner=user, year=2025, month=3).top_vendors
        assert top[0]['name'] == 'Sharma Cement Works'

    def test_phone_change_keeps_cache(self, user, vendor):
        get_monthly_summary(owner=user, year=2025, month=3)
        update_vendor(owner=user, vendor_id=vendor.id, phone='12345')
        assert not _is_stale(user, 2025, 3)

    def test_other_users_summaries_untouched(self, user, other_user, vendor):
        get_monthly_summary(owner=other_user, year=2025, month=3)
        add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 3, 10), material_amount=5)
        assert not _is_stale(other_user, 2025, 3)


# ============================================================================
# OVERVIEW TESTS
# ============================================================================

@pytest.mark.django_db
class TestOverviews:
    """Test home, yearly and history overviews."""

    def test_home_summary(self, user, vendor, customer):
        add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 3, 10), material_amount=500)
        add_vendor_payment(owner=user, vendor_id=vendor.id, amount=150, date=date(2025, 3, 11))
        add_customer_transaction(
            owner=user, customer_id=customer.id, date=date(2025, 3, 12), material_amount=1000,
            payments=[{'amount': 400, 'date': date(2025, 3, 12)}, {'amount': 350, 'date': date(2025, 3, 13)}],
        )

        data = get_home_summary(owner=user, today=date(2025, 3, 31))

        assert data['vendor_balance'] == Decimal('350.00')
        assert data['customer_balance'] == Decimal('250.00')
        assert data['monthly_summary'].monthly_income == Decimal('750.00')
        assert data['monthly_summary'].monthly_expenses == Decimal('500.00')

    def test_yearly_summary(self, user, vendor, customer):
        add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 1, 10), material_amount=300)
        add_customer_transaction(
            owner=user, customer_id=customer.id, date=date(2025, 6, 1), material_amount=900,
            payments=[{'amount': 450, 'date': date(2025, 6, 2)}],
        )

        data = get_yearly_summary(owner=user, year=2025)

        assert data['yearly_income'] == Decimal('450.00')
        assert data['yearly_expenses'] == Decimal('300.00')
        assert data['yearly_net_balance'] == Decimal('150.00')
        assert len(data['monthly_breakdown']) == 12
        assert data['monthly_breakdown'][0]['net_balance'] == Decimal('-300.00')
        assert data['monthly_breakdown'][5]['income'] == Decimal('450.00')

    def test_transaction_history(self, user, vendor, customer):
        add_vendor_transaction(owner=user, vendor_id=vendor.id, date=date(2025, 3, 10), material_amount=300)
        sale = add_customer_transaction(
            owner=user, customer_id=customer.id, date=date(2025, 2, 27), material_amount=500,
            payments=[
                {'amount': 100, 'date': date(2025, 2, 27)},
                {'amount': 200, 'date': date(2025, 3, 15)},
            ],
        )

        entries = get_transaction_history(owner=user, start_date=date(2025, 3, 1), end_date=date(2025, 3, 31))

        assert [(e['type'], e['amount']) for e in entries] == [
            ('income', Decimal('200.00')),
            ('expense', Decimal('300.00')),
        ]
        assert entries[0]['payment_for'] == date(2025, 2, 27)
        assert entries[0]['transaction_id'] == sale.id
        assert entries[1]['entity_name'] == 'Sharma Cement'

    def test_history_rejects_inverted_range(self, user):
        with pytest.raises(InvalidPeriodError):
            get_transaction_history(owner=user, start_date=date(2025, 3, 31), end_date=date(2025, 3, 1))
