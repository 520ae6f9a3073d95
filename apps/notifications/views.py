from rest_framework import viewsets, mixins, status, serializers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, inline_serializer

from .serializers import NotificationSerializer, NotificationFilterSerializer
from .services import (
    list_notifications,
    unread_count as count_unread,
    mark_read,
    mark_all_read,
    NotificationNotFoundError,
)


class NotificationPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class NotificationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Current user's notification inbox.

    list: Own notifications, newest first (?unread=true for unread only)
    """

    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = NotificationPagination

    def get_queryset(self):
        filter_serializer = NotificationFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return list_notifications(
            user=self.request.user,
            unread_only=filter_serializer.validated_data['unread'],
        )

    @extend_schema(responses={200: inline_serializer('UnreadCount', {'count': serializers.IntegerField()})})
    @action(detail=False, methods=['get'])
    def unread_count(self, request):
        return Response({'count': count_unread(user=request.user)})

    @extend_schema(request=None, responses={200: NotificationSerializer})
    @action(detail=True, methods=['post'])
    def read(self, request, pk=None):
        """Mark a notification as read."""
        try:
            notification = mark_read(notification_id=pk, user=request.user)
        except NotificationNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(NotificationSerializer(notification).data)

    @extend_schema(request=None, responses={200: inline_serializer('MarkedRead', {'marked': serializers.IntegerField()})})
    @action(detail=False, methods=['post'])
    def read_all(self, request):
        """Mark all notifications as read."""
        return Response({'marked': mark_all_read(user=request.user)})
