"""
Notification delivery.

Delivery is fire-and-forget: a failed insert is logged and swallowed so
the operation that triggered it (progress recompute, payment approval)
still succeeds.
"""

import logging
from typing import Optional

from django.conf import settings
from django.db import transaction, DatabaseError

from apps.accounts.models import User
from apps.notifications.models import Notification, NotificationType

logger = logging.getLogger(__name__)


def notify(
    recipient: User,
    type: str,
    title: str,
    message: str,
    data: Optional[dict] = None,
) -> Optional[Notification]:
    """
    Store an in-app notification for a user.

    Returns:
        Created Notification, or None when delivery failed
    """
    try:
        with transaction.atomic():
            return Notification.objects.create(
                recipient=recipient,
                type=type,
                title=title,
                message=message,
                data=data or {},
            )
    except DatabaseError:
        logger.exception("Failed to deliver %s notification to %s", type, recipient.pk)
        return None


def notify_promotion_completed(participation) -> Optional[Notification]:
    promotion = participation.promotion
    return notify(
        participation.installer,
        NotificationType.PROMOTION_COMPLETED,
        'Promotion completed',
        f"You completed '{promotion.title}'. Your reward of "
        f"{promotion.currency} {promotion.reward_amount} is pending review.",
        {
            'promotion_id': str(promotion.pk),
            'participation_id': str(participation.pk),
        },
    )


def notify_milestone_unlocked(installer: User, milestone_state) -> Optional[Notification]:
    installations = milestone_state.completed * 10
    return notify(
        installer,
        NotificationType.MILESTONE_REACHED,
        'Milestone reached',
        f"You reached {installations} installations. Request your "
        f"{settings.LOYALTY_CURRENCY} {settings.MILESTONE_REWARD_AMOUNT} milestone reward.",
        {'milestone_number': milestone_state.completed},
    )


def notify_payment_status(payment) -> Optional[Notification]:
    return notify(
        payment.installer,
        NotificationType.PAYMENT_STATUS,
        f'Payment {payment.get_status_display().lower()}',
        f"Your {payment.get_payment_type_display().lower()} payment of "
        f"{payment.currency} {payment.amount} is now {payment.get_status_display().lower()}.",
        {'payment_id': str(payment.pk), 'status': payment.status},
    )


def notify_reward_status(participation) -> Optional[Notification]:
    promotion = participation.promotion
    status = participation.get_reward_status_display().lower()
    return notify(
        participation.installer,
        NotificationType.REWARD_STATUS,
        f'Reward {status}',
        f"Your reward for '{promotion.title}' is now {status}.",
        {
            'promotion_id': str(promotion.pk),
            'participation_id': str(participation.pk),
            'reward_status': participation.reward_status,
        },
    )
