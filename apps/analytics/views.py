from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.accounts.permissions import IsProgramAdmin
from .analytics import ProgramAnalytics
from .serializers import (
    # Input serializers
    DateRangeQuerySerializer,
    TimeseriesQuerySerializer,
    TopInstallersQuerySerializer,
    # Response serializers
    OverviewSerializer,
    TimeseriesResponseSerializer,
    TopInstallersResponseSerializer,
    ErrorSerializer,
)
from .permissions import CanViewInstallerAnalytics
from .exceptions import AnalyticsServiceError


@extend_schema(
    parameters=[
        OpenApiParameter('start_date', OpenApiTypes.DATE, description='Start date (YYYY-MM-DD)'),
        OpenApiParameter('end_date', OpenApiTypes.DATE, description='End date (YYYY-MM-DD)'),
    ],
    responses={
        200: OverviewSerializer,
        400: ErrorSerializer,
    },
    description="Program-wide installer, installation, promotion and payout totals (admin only).",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsProgramAdmin])
def overview(request):
    """Program overview - thin HTTP handler."""
    query_serializer = DateRangeQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = ProgramAnalytics.overview(
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
        )
    except AnalyticsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(OverviewSerializer(data).data)


@extend_schema(
    parameters=[
        OpenApiParameter('installer_id', OpenApiTypes.UUID, description='Installer (required for non-admins, must be own ID)'),
        OpenApiParameter('start_date', OpenApiTypes.DATE, description='Start date (YYYY-MM-DD)'),
        OpenApiParameter('end_date', OpenApiTypes.DATE, description='End date (YYYY-MM-DD)'),
    ],
    responses={
        200: TimeseriesResponseSerializer,
        400: ErrorSerializer,
        403: ErrorSerializer,
    },
    description="Valid installations per month, for one installer or the whole program.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewInstallerAnalytics])
def installations_timeseries(request):
    """Installations timeseries - thin HTTP handler."""
    query_serializer = TimeseriesQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = ProgramAnalytics.installations_timeseries(
            installer_id=params.get('installer_id'),
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
        )
    except AnalyticsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'installer_id': params.get('installer_id'),
        'data': data,
    })


@extend_schema(
    parameters=[
        OpenApiParameter('metric', OpenApiTypes.STR, description="Ranking metric: 'installations', 'payments', 'completions'", default='installations'),
        OpenApiParameter('period', OpenApiTypes.INT, description='Number of days to consider', default=30),
        OpenApiParameter('limit', OpenApiTypes.INT, description='Number of results', default=10),
    ],
    responses={
        200: TopInstallersResponseSerializer,
        400: ErrorSerializer,
    },
    description="Installers ranked by installations, payouts or completed promotions (admin only).",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsProgramAdmin])
def top_installers(request):
    """Top installers - thin HTTP handler."""
    query_serializer = TopInstallersQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = ProgramAnalytics.top_installers(
            metric=params['metric'],
            period_days=params['period'],
            limit=params['limit'],
        )
    except AnalyticsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'metric': params['metric'],
        'period_days': params['period'],
        'results': data,
    })
