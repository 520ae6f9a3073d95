# ==========================================
# apps/notifications/models.py
# ==========================================

from django.db import models
import uuid


class NotificationType(models.TextChoices):
    PROMOTION_COMPLETED = 'promotion_completed', 'Promotion completed'
    MILESTONE_REACHED = 'milestone_reached', 'Milestone reached'
    PAYMENT_STATUS = 'payment_status', 'Payment status'
    REWARD_STATUS = 'reward_status', 'Reward status'
    GENERAL = 'general', 'General'


class Notification(models.Model):
    """In-app message to an installer."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    recipient = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='notifications',
    )
    type = models.CharField(
        max_length=30,
        choices=NotificationType.choices,
        default=NotificationType.GENERAL,
    )
    title = models.CharField(max_length=200)
    message = models.TextField()
    data = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        indexes = [
            models.Index(fields=['recipient', 'is_read'], name='notifications_unread_idx'),
            models.Index(fields=['recipient', 'created_at'], name='notifications_recent_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.type} for {self.recipient}"
