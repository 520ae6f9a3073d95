"""Installer-facing notification inbox."""

from uuid import UUID

from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.notifications.models import Notification

from .exceptions import NotificationNotFoundError


def list_notifications(*, user: User, unread_only: bool = False) -> QuerySet:
    queryset = Notification.objects.filter(recipient=user)
    if unread_only:
        queryset = queryset.filter(is_read=False)
    return queryset.order_by('-created_at')


def unread_count(*, user: User) -> int:
    return Notification.objects.filter(recipient=user, is_read=False).count()


def mark_read(*, notification_id: UUID, user: User) -> Notification:
    """
    Mark one of the user's notifications as read.

    Raises:
        NotificationNotFoundError: If notification doesn't exist or isn't the user's
    """
    try:
        notification = Notification.objects.get(id=notification_id, recipient=user)
    except Notification.DoesNotExist:
        raise NotificationNotFoundError(f"Notification {notification_id} not found")

    if not notification.is_read:
        notification.is_read = True
        notification.read_at = timezone.now()
        notification.save(update_fields=['is_read', 'read_at'])
    return notification


def mark_all_read(*, user: User) -> int:
    """Mark every unread notification of the user as read; returns the count."""
    return (
        Notification.objects
        .filter(recipient=user, is_read=False)
        .update(is_read=True, read_at=timezone.now())
    )
