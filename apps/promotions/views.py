from rest_framework import viewsets, status, serializers
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsProgramAdmin, IsProgramAdminOrReadOnly

from .models import Promotion, PromotionStatus
from .serializers import (
    PromotionSerializer,
    ParticipationSerializer,
    InstallerPromotionSerializer,
    DashboardStatsSerializer,
    PromotionAnalyticsSerializer,
    RewardStatusInputSerializer,
)
from .services import (
    join_promotion,
    compute_progress,
    get_installer_promotions,
    get_promotion_dashboard_stats,
    get_promotion_analytics,
    update_reward_status,
    # Exceptions
    NotFoundError,
    ConflictError,
    ConfigurationError,
    PromotionNotActiveError,
    NotEligibleError,
    AlreadyParticipatingError,
    InvalidRewardTransitionError,
)


class PromotionFilterSerializer(serializers.Serializer):
    """Validate query parameters for promotion filtering."""

    status = serializers.ChoiceField(choices=PromotionStatus.choices, required=False)
    type = serializers.CharField(required=False)


class PromotionPagination(PageNumberPagination):
    """Custom pagination for promotions."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class PromotionViewSet(viewsets.ModelViewSet):
    """
    ViewSet for promotions.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Get promotions (filter by status / type)
    create: Create a promotion (admin only)
    retrieve: Get a specific promotion
    update / partial_update / destroy: Admin only
    """

    serializer_class = PromotionSerializer
    permission_classes = [IsProgramAdminOrReadOnly]
    pagination_class = PromotionPagination

    def get_queryset(self):
        queryset = Promotion.objects.all()
        if self.action != 'list':
            return queryset

        filter_serializer = PromotionFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if params.get('status') == PromotionStatus.ACTIVE:
            queryset = queryset.active()
        elif params.get('status') == PromotionStatus.EXPIRED:
            queryset = queryset.expired()
        if params.get('type'):
            queryset = queryset.filter(type=params['type'])
        return queryset

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    @extend_schema(responses={200: InstallerPromotionSerializer(many=True)})
    @action(detail=False, methods=['get'], permission_classes=[IsAuthenticated])
    def mine(self, request):
        """Active promotions with the current installer's participation."""
        listing = get_installer_promotions(installer=request.user)
        serializer = InstallerPromotionSerializer(listing, many=True, context={'request': request})
        return Response(serializer.data)

    @extend_schema(responses={200: DashboardStatsSerializer})
    @action(detail=False, methods=['get'], permission_classes=[IsAuthenticated])
    def dashboard(self, request):
        """Promotion summary for the current installer."""
        stats = get_promotion_dashboard_stats(installer=request.user)
        return Response(DashboardStatsSerializer(stats).data)

    @extend_schema(request=None, responses={201: ParticipationSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated])
    def join(self, request, pk=None):
        """Join a promotion."""
        try:
            participation = join_promotion(installer=request.user, promotion_id=pk)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except AlreadyParticipatingError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except (PromotionNotActiveError, NotEligibleError, ConfigurationError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ParticipationSerializer(participation).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: ParticipationSerializer})
    @action(detail=True, methods=['get'], permission_classes=[IsAuthenticated])
    def progress(self, request, pk=None):
        """Recompute and return the current installer's progress."""
        try:
            participation = compute_progress(installer_id=request.user.id, promotion_id=pk)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except ConflictError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except ConfigurationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ParticipationSerializer(participation).data)

    @extend_schema(responses={200: PromotionAnalyticsSerializer})
    @action(detail=True, methods=['get'], permission_classes=[IsProgramAdmin])
    def analytics(self, request, pk=None):
        """Participation statistics for a promotion (admin only)."""
        try:
            data = get_promotion_analytics(promotion_id=pk)
        except NotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(PromotionAnalyticsSerializer(data).data)


@extend_schema(
    request=RewardStatusInputSerializer,
    responses={200: ParticipationSerializer},
    description="Settle the reward of a completed participation (admin only).",
    tags=['promotions'],
)
@api_view(['POST'])
@permission_classes([IsProgramAdmin])
def update_participation_reward(request, pk):
    """Move a participation's reward to a new status."""
    input_serializer = RewardStatusInputSerializer(data=request.data)
    input_serializer.is_valid(raise_exception=True)

    try:
        participation = update_reward_status(
            participation_id=pk,
            reward_status=input_serializer.validated_data['reward_status'],
            admin=request.user,
        )
    except NotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InvalidRewardTransitionError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(ParticipationSerializer(participation).data)
