"""Per-promotion participation statistics for administrators."""

from decimal import Decimal
from uuid import UUID

from django.db.models import Avg, Count, Q
from django.db.models.functions import Coalesce

from apps.promotions.models import Participation, ParticipationStatus, RewardStatus

from .promotion_queries import get_promotion


def get_promotion_analytics(*, promotion_id: UUID) -> dict:
    """
    Summarize how installers are doing in one promotion.

    Args:
        promotion_id: UUID of the promotion

    Returns:
        dict: A dictionary containing:
            - total_participants (int)
            - active, completed, expired (int): Participations per status
            - completion_rate (Decimal): Completed share of participants, in percent
            - average_progress (Decimal): Mean stored progress percentage
            - rewards_paid (int): Participations whose reward was paid out
            - rewards_paid_amount (Decimal): rewards_paid * promotion reward amount

    Raises:
        PromotionNotFoundError: If promotion doesn't exist
    """
    promotion = get_promotion(promotion_id)

    stats = Participation.objects.filter(promotion=promotion).aggregate(
        total=Count('id'),
        active=Count('id', filter=Q(status=ParticipationStatus.ACTIVE)),
        completed=Count('id', filter=Q(status=ParticipationStatus.COMPLETED)),
        expired=Count('id', filter=Q(status=ParticipationStatus.EXPIRED)),
        rewards_paid=Count('id', filter=Q(reward_status=RewardStatus.PAID)),
        average_progress=Coalesce(Avg('progress_percentage'), Decimal('0.00')),
    )

    total = stats['total']
    completion_rate = (
        Decimal(stats['completed'] * 100) / Decimal(total) if total else Decimal('0')
    )

    return {
        'promotion_id': promotion.id,
        'title': promotion.title,
        'total_participants': total,
        'active': stats['active'],
        'completed': stats['completed'],
        'expired': stats['expired'],
        'completion_rate': round(completion_rate, 2),
        'average_progress': round(Decimal(stats['average_progress']), 2),
        'rewards_paid': stats['rewards_paid'],
        'rewards_paid_amount': promotion.reward_amount * stats['rewards_paid'],
    }
