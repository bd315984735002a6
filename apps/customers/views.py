from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.ledger.exceptions import LedgerServiceError
from apps.ledger.pagination import LedgerPagination
from apps.ledger.responses import error_response
from apps.ledger.serializers import (
    DateRangeFilterSerializer,
    EntityInputSerializer,
    ErrorResponseSerializer,
    OutstandingBalanceSerializer,
)
from .serializers import (
    CustomerTransactionInputSerializer,
    CustomerPaymentInputSerializer,
    CustomerSerializer,
    CustomerTransactionSerializer,
    CustomerBalanceSerializer,
)
from . import services


class CustomerViewSet(viewsets.ModelViewSet):
    """
    ViewSet for customers, their sales and the payments received.

    list: Owner's customers with live balances (?search= for name prefix)
    create: Create a customer
    retrieve: Get a customer
    partial_update: Update customer details
    destroy: Delete a customer with its transactions and payments
    """

    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = LedgerPagination
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        search = self.request.query_params.get('search')
        if search:
            return services.search_customers(owner=self.request.user, term=search)
        return services.list_customers(owner=self.request.user)

    def _annotated(self, customer):
        return services.list_customers(owner=self.request.user).get(pk=customer.pk)

    @extend_schema(request=EntityInputSerializer, responses={201: CustomerSerializer, 400: ErrorResponseSerializer})
    def create(self, request, *args, **kwargs):
        input_serializer = EntityInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        try:
            customer = services.create_customer(owner=request.user, **input_serializer.validated_data)
        except LedgerServiceError as e:
            return error_response(e)

        return Response(
            CustomerSerializer(self._annotated(customer)).data,
            status=status.HTTP_201_CREATED
        )

    @extend_schema(request=EntityInputSerializer, responses={200: CustomerSerializer, 400: ErrorResponseSerializer})
    def partial_update(self, request, *args, **kwargs):
        input_serializer = EntityInputSerializer(data=request.data, partial=True)
        input_serializer.is_valid(raise_exception=True)

        try:
            customer = services.update_customer(
                owner=request.user,
                customer_id=kwargs['pk'],
                **input_serializer.validated_data
            )
        except LedgerServiceError as e:
            return error_response(e)

        return Response(CustomerSerializer(self._annotated(customer)).data)

    def destroy(self, request, *args, **kwargs):
        try:
            services.delete_customer(owner=request.user, customer_id=kwargs['pk'])
        except LedgerServiceError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # =========================================================================
    # Transactions
    # =========================================================================

    @extend_schema(
        request=CustomerTransactionInputSerializer,
        responses={200: CustomerTransactionSerializer(many=True), 201: CustomerTransactionSerializer},
        parameters=[
            OpenApiParameter('start_date', str, description='YYYY-MM-DD'),
            OpenApiParameter('end_date', str, description='YYYY-MM-DD'),
        ],
    )
    @action(detail=True, methods=['get', 'post'])
    def transactions(self, request, pk=None):
        """
        List or add customer transactions.

        GET  /api/customers/{id}/transactions/
        POST /api/customers/{id}/transactions/
        """
        try:
            if request.method == 'POST':
                input_serializer = CustomerTransactionInputSerializer(data=request.data)
                input_serializer.is_valid(raise_exception=True)
                customer_transaction = services.add_customer_transaction(
                    owner=request.user,
                    customer_id=pk,
                    **input_serializer.validated_data
                )
                return Response(
                    CustomerTransactionSerializer(customer_transaction).data,
                    status=status.HTTP_201_CREATED
                )

            filter_serializer = DateRangeFilterSerializer(data=request.query_params)
            filter_serializer.is_valid(raise_exception=True)
            transactions = services.get_customer_transactions(
                owner=request.user,
                customer_id=pk,
                **filter_serializer.validated_data
            )
        except LedgerServiceError as e:
            return error_response(e)

        return Response(CustomerTransactionSerializer(transactions, many=True).data)

    @extend_schema(
        request=CustomerTransactionInputSerializer,
        responses={200: CustomerTransactionSerializer, 404: ErrorResponseSerializer},
    )
    @action(
        detail=True,
        methods=['get', 'patch', 'delete'],
        url_path=r'transactions/(?P<transaction_id>[0-9a-f-]+)',
        url_name='transaction-detail',
    )
    def transaction_detail(self, request, pk=None, transaction_id=None):
        """
        Retrieve, patch or delete one customer transaction.

        GET    /api/customers/{id}/transactions/{transaction_id}/
        PATCH  /api/customers/{id}/transactions/{transaction_id}/
        DELETE /api/customers/{id}/transactions/{transaction_id}/
        """
        lookup = {'owner': request.user, 'customer_id': pk, 'transaction_id': transaction_id}
        try:
            if request.method == 'DELETE':
                services.delete_customer_transaction(**lookup)
                return Response(status=status.HTTP_204_NO_CONTENT)

            if request.method == 'PATCH':
                input_serializer = CustomerTransactionInputSerializer(data=request.data, partial=True)
                input_serializer.is_valid(raise_exception=True)
                customer_transaction = services.update_customer_transaction(
                    data=input_serializer.validated_data,
                    **lookup
                )
            else:
                customer_transaction = services.get_customer_transaction(**lookup)
        except LedgerServiceError as e:
            return error_response(e)

        return Response(CustomerTransactionSerializer(customer_transaction).data)

    @extend_schema(
        request=CustomerPaymentInputSerializer,
        responses={201: CustomerTransactionSerializer, 400: ErrorResponseSerializer},
    )
    @action(
        detail=True,
        methods=['post'],
        url_path=r'transactions/(?P<transaction_id>[0-9a-f-]+)/payments',
        url_name='transaction-payments',
    )
    def transaction_payments(self, request, pk=None, transaction_id=None):
        """
        Record a payment received against a transaction.

        POST /api/customers/{id}/transactions/{transaction_id}/payments/
        """
        input_serializer = CustomerPaymentInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        try:
            customer_transaction = services.add_payment_to_transaction(
                owner=request.user,
                customer_id=pk,
                transaction_id=transaction_id,
                **input_serializer.validated_data
            )
        except LedgerServiceError as e:
            return error_response(e)

        return Response(
            CustomerTransactionSerializer(customer_transaction).data,
            status=status.HTTP_201_CREATED
        )

    # =========================================================================
    # Balances
    # =========================================================================

    @extend_schema(responses={200: CustomerBalanceSerializer, 404: ErrorResponseSerializer})
    @action(detail=True, methods=['get'])
    def balance(self, request, pk=None):
        """
        Outstanding balance of one customer (unclamped).

        GET /api/customers/{id}/balance/
        """
        try:
            total = services.get_single_customer_outstanding_balance(owner=request.user, customer_id=pk)
        except LedgerServiceError as e:
            return error_response(e)
        return Response(CustomerBalanceSerializer({'customer_id': pk, 'outstanding_balance': total}).data)

    @extend_schema(responses={200: OutstandingBalanceSerializer})
    @action(detail=False, methods=['get'])
    def outstanding(self, request):
        """
        Portfolio outstanding balance over all customers.

        GET /api/customers/outstanding/
        """
        try:
            total = services.get_customer_outstanding_balance(owner=request.user)
        except LedgerServiceError as e:
            return error_response(e)
        return Response(OutstandingBalanceSerializer({'outstanding_balance': total}).data)
