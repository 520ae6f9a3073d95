"""Gate for new milestone payment requests."""

from decimal import Decimal
from typing import Iterable

from django.conf import settings

from apps.payments.models import Payment, PaymentType

from .milestones import MilestoneState


def can_request_milestone_payment(
    milestone_state: MilestoneState,
    milestone_payments: Iterable[Payment],
) -> bool:
    """
    Whether the installer may request a payment for their current tier.

    Closed when no tier is unclaimed, or when a request for the current
    tier is already pending or approved.
    """
    if not milestone_state.has_unclaimed_milestone:
        return False

    for payment in milestone_payments:
        if (
            payment.payment_type == PaymentType.MILESTONE
            and payment.milestone_number == milestone_state.completed
            and payment.is_open
        ):
            return False

    return True


def default_amount() -> Decimal:
    """Fixed reward per milestone tier."""
    return Decimal(settings.MILESTONE_REWARD_AMOUNT)
