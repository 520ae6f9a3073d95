from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsProgramAdmin

from .models import Payment
from .serializers import (
    PaymentSerializer,
    PaymentFilterSerializer,
    MilestoneOverviewSerializer,
    MilestoneRequestSerializer,
    ApprovePaymentSerializer,
    RejectPaymentSerializer,
    MarkPaidSerializer,
)
from .services import (
    get_milestone_overview,
    request_milestone_payment,
    approve_payment,
    reject_payment,
    mark_payment_paid,
    cancel_payment,
    # Exceptions
    PaymentNotFoundError,
    MilestonePaymentNotAllowedError,
    InvalidPaymentTransitionError,
)


class PaymentPagination(PageNumberPagination):
    """Custom pagination for payments."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class PaymentViewSet(mixins.ListModelMixin,
                     mixins.RetrieveModelMixin,
                     viewsets.GenericViewSet):
    """
    Payments and milestone rewards.

    list: Own payments (admins see all, filterable by installer)
    retrieve: Get a specific payment
    """

    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = PaymentPagination

    def get_queryset(self):
        """Filter payments using input serializer validation."""
        user = self.request.user
        queryset = Payment.objects.select_related('installer')

        if user.is_program_admin:
            if self.action == 'list':
                installer = self._filter_params().get('installer')
                if installer:
                    queryset = queryset.filter(installer_id=installer)
        else:
            queryset = queryset.filter(installer=user)

        if self.action == 'list':
            params = self._filter_params()
            if 'status' in params:
                queryset = queryset.filter(status=params['status'])
            if 'payment_type' in params:
                queryset = queryset.filter(payment_type=params['payment_type'])

        return queryset.order_by('-requested_at')

    def _filter_params(self):
        filter_serializer = PaymentFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return filter_serializer.validated_data

    @extend_schema(responses={200: MilestoneOverviewSerializer})
    @action(detail=False, methods=['get'])
    def milestones(self, request):
        """Current milestone state and whether a payment can be requested."""
        overview = get_milestone_overview(installer=request.user)
        return Response(MilestoneOverviewSerializer(overview).data)

    @extend_schema(request=MilestoneRequestSerializer, responses={201: PaymentSerializer})
    @action(detail=False, methods=['post'], url_path='milestones/request', url_name='milestone-request')
    def request_milestone(self, request):
        """Request the reward for the current milestone tier."""
        serializer = MilestoneRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = request_milestone_payment(installer=request.user, **serializer.validated_data)
        except MilestonePaymentNotAllowedError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ApprovePaymentSerializer, responses={200: PaymentSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsProgramAdmin])
    def approve(self, request, pk=None):
        """Approve a pending payment (admin only)."""
        serializer = ApprovePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = approve_payment(payment_id=pk, admin=request.user, **serializer.validated_data)
        except PaymentNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidPaymentTransitionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PaymentSerializer(payment).data)

    @extend_schema(request=RejectPaymentSerializer, responses={200: PaymentSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsProgramAdmin])
    def reject(self, request, pk=None):
        """Reject a payment (admin only)."""
        serializer = RejectPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = reject_payment(
                payment_id=pk,
                admin=request.user,
                reason=serializer.validated_data['reason'],
            )
        except PaymentNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidPaymentTransitionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PaymentSerializer(payment).data)

    @extend_schema(request=MarkPaidSerializer, responses={200: PaymentSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsProgramAdmin])
    def mark_paid(self, request, pk=None):
        """Record disbursement of an approved payment (admin only)."""
        serializer = MarkPaidSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = mark_payment_paid(payment_id=pk, admin=request.user, **serializer.validated_data)
        except PaymentNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidPaymentTransitionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PaymentSerializer(payment).data)

    @extend_schema(request=None, responses={200: PaymentSerializer})
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        """Withdraw an own pending request."""
        try:
            payment = cancel_payment(payment_id=pk, installer=request.user)
        except PaymentNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidPaymentTransitionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PaymentSerializer(payment).data)
