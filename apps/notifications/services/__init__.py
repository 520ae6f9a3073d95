"""
Notifications services - Business logic layer.

- Fire-and-forget delivery used by promotions, payments and serials
- Inbox reads and read-state updates
"""

from .delivery import (
    notify,
    notify_promotion_completed,
    notify_milestone_unlocked,
    notify_payment_status,
    notify_reward_status,
)

from .inbox import (
    list_notifications,
    unread_count,
    mark_read,
    mark_all_read,
)

from .exceptions import (
    NotificationsServiceError,
    NotificationNotFoundError,
)

__all__ = [
    'notify',
    'notify_promotion_completed',
    'notify_milestone_unlocked',
    'notify_payment_status',
    'notify_reward_status',
    'list_notifications',
    'unread_count',
    'mark_read',
    'mark_all_read',
    'NotificationsServiceError',
    'NotificationNotFoundError',
]
