from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
from .permissions import IsProgramAdmin
from .serializers import UserSerializer, InstallerStatusInputSerializer
from .services import (
    update_installer_status,
    InstallerNotFoundError,
    InvalidInstallerStatusError,
)


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


@extend_schema(
    request=UserSerializer,
    responses={200: UserSerializer},
    description="Get or update the current user's profile (display_name, phone, city).",
    tags=['auth'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def current_user(request):
    """Get or update current authenticated user profile."""
    if request.method == 'GET':
        return Response(UserSerializer(request.user).data)

    serializer = UserSerializer(request.user, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data)


@extend_schema(
    request=InstallerStatusInputSerializer,
    responses={
        200: UserSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Approve or suspend an installer account (admin only).",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsProgramAdmin])
def review_installer(request, pk):
    """Set installer review status."""
    input_serializer = InstallerStatusInputSerializer(data=request.data)
    input_serializer.is_valid(raise_exception=True)

    try:
        installer = update_installer_status(
            installer_id=pk,
            status=input_serializer.validated_data['status'],
        )
    except InstallerNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InvalidInstallerStatusError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(UserSerializer(installer).data)
