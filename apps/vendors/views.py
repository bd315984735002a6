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
    VendorTransactionInputSerializer,
    VendorPaymentInputSerializer,
    VendorSerializer,
    VendorTransactionSerializer,
    VendorPaymentSerializer,
    VendorBalanceSerializer,
)
from . import services


class VendorViewSet(viewsets.ModelViewSet):
    """
    ViewSet for vendors and their transactions, payments and balances.

    list: Owner's vendors with live balances (?search= for name prefix)
    create: Create a vendor
    retrieve: Get a vendor
    partial_update: Update vendor details
    destroy: Delete a vendor with its transactions and payments
    """

    serializer_class = VendorSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = LedgerPagination
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        """Owner's vendors; ``?search=`` narrows by name prefix."""
        search = self.request.query_params.get('search')
        if search:
            return services.search_vendors(owner=self.request.user, term=search)
        return services.list_vendors(owner=self.request.user)

    def _annotated(self, vendor):
        return services.list_vendors(owner=self.request.user).get(pk=vendor.pk)

    @extend_schema(request=EntityInputSerializer, responses={201: VendorSerializer, 400: ErrorResponseSerializer})
    def create(self, request, *args, **kwargs):
        """Create vendor using service layer."""
        input_serializer = EntityInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        try:
            vendor = services.create_vendor(owner=request.user, **input_serializer.validated_data)
        except LedgerServiceError as e:
            return error_response(e)

        return Response(
            VendorSerializer(self._annotated(vendor)).data,
            status=status.HTTP_201_CREATED
        )

    @extend_schema(request=EntityInputSerializer, responses={200: VendorSerializer, 400: ErrorResponseSerializer})
    def partial_update(self, request, *args, **kwargs):
        """Update vendor details using service layer."""
        input_serializer = EntityInputSerializer(data=request.data, partial=True)
        input_serializer.is_valid(raise_exception=True)

        try:
            vendor = services.update_vendor(
                owner=request.user,
                vendor_id=kwargs['pk'],
                **input_serializer.validated_data
            )
        except LedgerServiceError as e:
            return error_response(e)

        return Response(VendorSerializer(self._annotated(vendor)).data)

    def destroy(self, request, *args, **kwargs):
        """Delete vendor using service layer."""
        try:
            services.delete_vendor(owner=request.user, vendor_id=kwargs['pk'])
        except LedgerServiceError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # =========================================================================
    # Transactions
    # =========================================================================

    @extend_schema(
        request=VendorTransactionInputSerializer,
        responses={200: VendorTransactionSerializer(many=True), 201: VendorTransactionSerializer},
        parameters=[
            OpenApiParameter('start_date', str, description='YYYY-MM-DD'),
            OpenApiParameter('end_date', str, description='YYYY-MM-DD'),
        ],
    )
    @action(detail=True, methods=['get', 'post'])
    def transactions(self, request, pk=None):
        """
        List or add vendor transactions.

        GET  /api/vendors/{id}/transactions/
        POST /api/vendors/{id}/transactions/
        """
        try:
            if request.method == 'POST':
                input_serializer = VendorTransactionInputSerializer(data=request.data)
                input_serializer.is_valid(raise_exception=True)
                vendor_transaction = services.add_vendor_transaction(
                    owner=request.user,
                    vendor_id=pk,
                    **input_serializer.validated_data
                )
                return Response(
                    VendorTransactionSerializer(vendor_transaction).data,
                    status=status.HTTP_201_CREATED
                )

            filter_serializer = DateRangeFilterSerializer(data=request.query_params)
            filter_serializer.is_valid(raise_exception=True)
            transactions = services.get_vendor_transactions(
                owner=request.user,
                vendor_id=pk,
                **filter_serializer.validated_data
            )
        except LedgerServiceError as e:
            return error_response(e)

        return Response(VendorTransactionSerializer(transactions, many=True).data)

    @extend_schema(
        request=VendorTransactionInputSerializer,
        responses={200: VendorTransactionSerializer, 404: ErrorResponseSerializer},
    )
    @action(
        detail=True,
        methods=['get', 'patch', 'delete'],
        url_path=r'transactions/(?P<transaction_id>[0-9a-f-]+)',
        url_name='transaction-detail',
    )
    def transaction_detail(self, request, pk=None, transaction_id=None):
        """
        Retrieve, patch or delete one vendor transaction.

        GET    /api/vendors/{id}/transactions/{transaction_id}/
        PATCH  /api/vendors/{id}/transactions/{transaction_id}/
        DELETE /api/vendors/{id}/transactions/{transaction_id}/
        """
        lookup = {'owner': request.user, 'vendor_id': pk, 'transaction_id': transaction_id}
        try:
            if request.method == 'DELETE':
                services.delete_vendor_transaction(**lookup)
                return Response(status=status.HTTP_204_NO_CONTENT)

            if request.method == 'PATCH':
                input_serializer = VendorTransactionInputSerializer(data=request.data, partial=True)
                input_serializer.is_valid(raise_exception=True)
                vendor_transaction = services.update_vendor_transaction(
                    data=input_serializer.validated_data,
                    **lookup
                )
            else:
                vendor_transaction = services.get_vendor_transaction(**lookup)
        except LedgerServiceError as e:
            return error_response(e)

        return Response(VendorTransactionSerializer(vendor_transaction).data)

    # =========================================================================
    # Payments & balances
    # =========================================================================

    @extend_schema(
        request=VendorPaymentInputSerializer,
        responses={200: VendorPaymentSerializer(many=True), 201: VendorPaymentSerializer},
    )
    @action(detail=True, methods=['get', 'post'])
    def payments(self, request, pk=None):
        """
        List or record payments to a vendor.

        GET  /api/vendors/{id}/payments/
        POST /api/vendors/{id}/payments/
        """
        try:
            if request.method == 'POST':
                input_serializer = VendorPaymentInputSerializer(data=request.data)
                input_serializer.is_valid(raise_exception=True)
                payment = services.add_vendor_payment(
                    owner=request.user,
                    vendor_id=pk,
                    **input_serializer.validated_data
                )
                return Response(VendorPaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

            payments = services.get_vendor_payments(owner=request.user, vendor_id=pk)
        except LedgerServiceError as e:
            return error_response(e)

        return Response(VendorPaymentSerializer(payments, many=True).data)

    @extend_schema(responses={200: VendorBalanceSerializer, 404: ErrorResponseSerializer})
    @action(detail=True, methods=['get'])
    def balance(self, request, pk=None):
        """
        Recompute and return a vendor's remaining balance (unclamped).

        GET /api/vendors/{id}/balance/
        """
        try:
            snapshot = services.get_vendor_remaining_balance(owner=request.user, vendor_id=pk)
        except LedgerServiceError as e:
            return error_response(e)
        return Response(VendorBalanceSerializer(snapshot).data)

    @extend_schema(responses={200: OutstandingBalanceSerializer})
    @action(detail=False, methods=['get'])
    def outstanding(self, request):
        """
        Portfolio outstanding balance over all vendors.

        GET /api/vendors/outstanding/
        """
        try:
            total = services.get_vendor_outstanding_balance(owner=request.user)
        except LedgerServiceError as e:
            return error_response(e)
        return Response(OutstandingBalanceSerializer({'outstanding_balance': total}).data)

    @extend_schema(
        responses={200: VendorPaymentSerializer(many=True)},
        parameters=[
            OpenApiParameter('start_date', str, description='YYYY-MM-DD'),
            OpenApiParameter('end_date', str, description='YYYY-MM-DD'),
        ],
    )
    @action(detail=False, methods=['get'], url_path='payments', url_name='all-payments')
    def all_payments(self, request):
        """
        All vendor payments of the owner, newest first.

        GET /api/vendors/payments/?start_date=&end_date=
        """
        filter_serializer = DateRangeFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        try:
            payments = services.get_all_vendor_payments(
                owner=request.user,
                **filter_serializer.validated_data
            )
        except LedgerServiceError as e:
            return error_response(e)

        page = self.paginate_queryset(payments)
        if page is not None:
            return self.get_paginated_response(VendorPaymentSerializer(page, many=True).data)
        return Response(VendorPaymentSerializer(payments, many=True).data)
