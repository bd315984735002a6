"""
Service layer tests for customers app.

Tests all service functions for:
- Customer management (create, update, delete, search)
- Transactions with initial and later payments
- Outstanding balances (single customer and portfolio)
"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth.models import AnonymousUser
from django.db import DatabaseError
from django.utils import timezone

from apps.ledger.exceptions import (
    EntityNotFoundError,
    LedgerValidationError,
    NotAuthenticatedError,
    StoreError,
    TransactionNotFoundError,
)
from apps.customers.models import Customer, CustomerTransaction, CustomerPayment
from apps.customers.services import (
    create_customer,
    get_customer,
    update_customer,
    delete_customer,
    list_customers,
    search_customers,
    add_customer_transaction,
    get_customer_transaction,
    get_customer_transactions,
    update_customer_transaction,
    delete_customer_transaction,
    add_payment_to_transaction,
    get_single_customer_outstanding_balance,
    get_customer_outstanding_balance,
)


# ============================================================================
# CUSTOMER MANAGEMENT TESTS
# ============================================================================

@pytest.mark.django_db
class TestCustomerManagement:
    """Test customer CRUD operations."""

    def test_create_customer(self, user):
        customer = create_customer(owner=user, name=' Verma Builders ', address='Ring Road')

        assert customer.name == 'Verma Builders'
        assert customer.name_lower == 'verma builders'
        assert customer.address == 'Ring Road'

    def test_create_customer_requires_name(self, user):
        with pytest.raises(LedgerValidationError):
            create_customer(owner=user, name='')

    def test_anonymous_owner_rejected(self):
        with pytest.raises(NotAuthenticatedError):
            list_customers(owner=AnonymousUser())

    def test_update_customer_phone(self, user, customer):
        updated = update_customer(owner=user, customer_id=customer.id, phone='555')
        assert updated.phone == '555'
        assert updated.name == 'Verma Builders'

    def test_other_users_customer_not_found(self, user, other_customer):
        with pytest.raises(EntityNotFoundError):
            get_customer(owner=user, customer_id=other_customer.id)

    def test_delete_customer_cascades(self, user, customer, customer_transaction):
        delete_customer(owner=user, customer_id=customer.id)

        assert not Customer.objects.filter(id=customer.id).exists()
        assert not CustomerTransaction.objects.filter(id=customer_transaction.id).exists()
        assert not CustomerPayment.objects.exists()

    def test_search_and_list(self, user, customer, second_customer, other_customer):
        assert [c.name for c in list_customers(owner=user)] == ['Anand Homes', 'Verma Builders']
        assert [c.name for c in search_customers(owner=user, term='ver')] == ['Verma Builders']

    def test_store_failure_becomes_store_error(self, user):
        with patch('apps.customers.models.Customer.objects.create', side_effect=DatabaseError('down')):
            with pytest.raises(StoreError):
                create_customer(owner=user, name='Verma Builders')


# ============================================================================
# TRANSACTION & PAYMENT TESTS
# ============================================================================

@pytest.mark.django_db
class TestCustomerTransactions:
    """Test customer sales and payments received."""

    def test_sale_with_initial_payments(self, user, customer):
        """A 500 sale with payments of 100 and 50 leaves 350 outstanding."""
        sale = add_customer_transaction(
            owner=user,
            customer_id=customer.id,
            date=date(2025, 3, 5),
            items=[{'name': 'Bricks', 'quantity': 100, 'unit_price': 5}],
            payments=[
                {'amount': Decimal('100.00'), 'date': date(2025, 3, 5)},
                {'amount': Decimal('50.00'), 'date': date(2025, 3, 6)},
            ],
        )

        assert sale.total_amount == Decimal('500.00')
        assert sale.total_payments == Decimal('150.00')
        assert sale.outstanding_amount == Decimal('350.00')
        assert sale.payments.count() == 2

    def test_sale_without_payments_is_fully_outstanding(self, user, customer):
        sale = add_customer_transaction(
            owner=user, customer_id=customer.id, date=date(2025, 3, 5), material_amount=80
        )
        assert sale.total_payments == Decimal('0.00')
        assert sale.outstanding_amount == Decimal('80.00')

    def test_invalid_initial_payment_rolls_back(self, user, customer):
        with pytest.raises(LedgerValidationError):
            add_customer_transaction(
                owner=user,
                customer_id=customer.id,
                date=date(2025, 3, 5),
                material_amount=100,
                payments=[{'amount': '-5'}],
            )
        assert not CustomerTransaction.objects.exists()

    def test_initial_payment_date_defaults_to_today(self, user, customer):
        sale = add_customer_transaction(
            owner=user,
            customer_id=customer.id,
            date=date(2025, 3, 5),
            material_amount=100,
            payments=[{'amount': 40}],
        )
        assert sale.payments.get().date == timezone.localdate()

    @pytest.mark.parametrize('amount', [Decimal('1.00'), Decimal('99.99'), Decimal('400.00')])
    def test_payment_decreases_outstanding_by_amount(self, user, customer, customer_transaction, amount):
        before = customer_transaction.outstanding_amount

        updated = add_payment_to_transaction(
            owner=user,
            customer_id=customer.id,
            transaction_id=customer_transaction.id,
            amount=amount,
            date=date(2025, 3, 20),
        )

        assert updated.outstanding_amount == before - amount
        assert updated.total_payments == Decimal('150.00') + amount

    def test_overpayment_goes_negative(self, user, customer, customer_transaction):
        updated = add_payment_to_transaction(
            owner=user,
            customer_id=customer.id,
            transaction_id=customer_transaction.id,
            amount=Decimal('400.00'),
        )
        assert updated.outstanding_amount == Decimal('-50.00')

    @pytest.mark.parametrize('amount', [None, '', 'abc', 0, '-10', '0.004'])
    def test_invalid_payment_amount(self, user, customer, customer_transaction, amount):
        with pytest.raises(LedgerValidationError, match='Valid payment amount is required'):
            add_payment_to_transaction(
                owner=user,
                customer_id=customer.id,
                transaction_id=customer_transaction.id,
                amount=amount,
            )
        assert customer_transaction.payments.count() == 1

    def test_sub_cent_payment_is_rounded_before_storing(self, user, customer, customer_transaction):
        updated = add_payment_to_transaction(
            owner=user,
            customer_id=customer.id,
            transaction_id=customer_transaction.id,
            amount='0.005',
        )

        assert updated.outstanding_amount == Decimal('349.99')
        assert updated.payments.filter(amount=Decimal('0.01')).count() == 1

    def test_missing_owner_checked_before_amount(self, customer, customer_transaction):
        with pytest.raises(NotAuthenticatedError):
            add_payment_to_transaction(
                owner=None,
                customer_id=customer.id,
                transaction_id=customer_transaction.id,
                amount='-1',
            )

    def test_oversized_sale_rejected(self, user, customer):
        with pytest.raises(LedgerValidationError, match='total_amount exceeds'):
            add_customer_transaction(
                owner=user,
                customer_id=customer.id,
                date=date(2025, 3, 1),
                items=[{'quantity': '99999999999', 'unit_price': '9999999999'}],
            )
        assert not CustomerTransaction.objects.filter(customer=customer).exists()

    def test_payment_to_unknown_transaction(self, user, customer, second_customer, customer_transaction):
        with pytest.raises(TransactionNotFoundError):
            add_payment_to_transaction(
                owner=user,
                customer_id=second_customer.id,
                transaction_id=customer_transaction.id,
                amount=10,
            )

    def test_patch_material_refreshes_outstanding(self, user, customer, customer_transaction):
        updated = update_customer_transaction(
            owner=user,
            customer_id=customer.id,
            transaction_id=customer_transaction.id,
            data={'material_amount': Decimal('600.00')},
        )

        assert updated.total_amount == Decimal('600.00')
        assert updated.outstanding_amount == Decimal('450.00')

    def test_patch_payments_replaces_existing(self, user, customer, customer_transaction):
        updated = update_customer_transaction(
            owner=user,
            customer_id=customer.id,
            transaction_id=customer_transaction.id,
            data={'payments': [{'amount': Decimal('500.00'), 'date': date(2025, 3, 9)}]},
        )

        assert updated.payments.count() == 1
        assert updated.total_payments == Decimal('500.00')
        assert updated.outstanding_amount == Decimal('0.00')

    def test_patch_zero_material_is_respected(self, user, customer, customer_transaction):
        updated = update_customer_transaction(
            owner=user,
            customer_id=customer.id,
            transaction_id=customer_transaction.id,
            data={'material_amount': 0},
        )
        assert updated.total_amount == Decimal('0.00')
        assert updated.outstanding_amount == Decimal('-150.00')

    def test_transactions_filtered_by_date(self, user, customer, customer_transaction):
        later = add_customer_transaction(
            owner=user, customer_id=customer.id, date=date(2025, 4, 1), material_amount=10
        )

        in_april = get_customer_transactions(
            owner=user, customer_id=customer.id, start_date=date(2025, 4, 1)
        )
        assert [t.id for t in in_april] == [later.id]

    def test_delete_transaction_removes_payments(self, user, customer, customer_transaction):
        delete_customer_transaction(
            owner=user, customer_id=customer.id, transaction_id=customer_transaction.id
        )

        with pytest.raises(TransactionNotFoundError):
            get_customer_transaction(
                owner=user, customer_id=customer.id, transaction_id=customer_transaction.id
            )
        assert not CustomerPayment.objects.exists()


# ============================================================================
# BALANCE TESTS
# ============================================================================

@pytest.mark.django_db
class TestCustomerBalances:
    """Test outstanding balance reducers."""

    def test_single_customer_balance(self, user, customer, customer_transaction):
        assert get_single_customer_outstanding_balance(
            owner=user, customer_id=customer.id
        ) == Decimal('350.00')

    def test_single_customer_balance_not_clamped(self, user, customer, customer_transaction):
        add_payment_to_transaction(
            owner=user,
            customer_id=customer.id,
            transaction_id=customer_transaction.id,
            amount=Decimal('450.00'),
        )
        assert get_single_customer_outstanding_balance(
            owner=user, customer_id=customer.id
        ) == Decimal('-100.00')

    def test_portfolio_floors_each_customer(self, user, customer, second_customer, customer_transaction):
        overpaid = add_customer_transaction(
            owner=user,
            customer_id=second_customer.id,
            date=date(2025, 3, 1),
            material_amount=100,
            payments=[{'amount': 130, 'date': date(2025, 3, 1)}],
        )
        assert overpaid.outstanding_amount == Decimal('-30.00')

        assert get_customer_outstanding_balance(owner=user) == Decimal('350.00')

    def test_portfolio_empty(self, user):
        assert get_customer_outstanding_balance(owner=user) == Decimal('0.00')

    def test_portfolio_ignores_other_users(self, user, other_user, other_customer):
        add_customer_transaction(
            owner=other_user, customer_id=other_customer.id, date=date(2025, 3, 1), material_amount=99
        )
        assert get_customer_outstanding_balance(owner=user) == Decimal('0.00')
