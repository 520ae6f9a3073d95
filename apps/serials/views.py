from rest_framework import viewsets, mixins, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .models import SerialRecord
from .serializers import (
    SerialRecordSerializer,
    SerialRegistrationSerializer,
    SerialFilterSerializer,
)
from .services import (
    register_serial,
    DuplicateSerialError,
    InvalidInstallationDateError,
    InstallerNotAllowedError,
)


class SerialPagination(PageNumberPagination):
    """Custom pagination for serials."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class SerialRecordViewSet(mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          mixins.CreateModelMixin,
                          viewsets.GenericViewSet):
    """
    Installer serial registration.

    list: Own serials (admins see all, filterable by installer)
    create: Register a new serial number
    retrieve: Get a specific serial
    """

    serializer_class = SerialRecordSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = SerialPagination

    def get_queryset(self):
        """Filter serials using input serializer validation."""
        user = self.request.user

        filter_serializer = SerialFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        queryset = SerialRecord.objects.select_related('installer')
        if user.is_staff:
            if 'installer' in params:
                queryset = queryset.filter(installer_id=params['installer'])
        else:
            queryset = queryset.filter(installer=user)

        if 'status' in params:
            queryset = queryset.filter(status=params['status'])

        return queryset.order_by('-installation_date', '-created_at')

    def get_serializer_class(self):
        if self.action == 'create':
            return SerialRegistrationSerializer
        return SerialRecordSerializer

    @extend_schema(
        request=SerialRegistrationSerializer,
        responses={201: SerialRecordSerializer},
    )
    def create(self, request, *args, **kwargs):
        """Register a serial number for the current installer."""
        serializer = SerialRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            serial = register_serial(installer=request.user, **serializer.validated_data)
        except InstallerNotAllowedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except DuplicateSerialError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except InvalidInstallationDateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(SerialRecordSerializer(serial).data, status=status.HTTP_201_CREATED)
