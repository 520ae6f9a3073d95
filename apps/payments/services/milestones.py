"""
Milestone evaluation.

Every 10 valid installations unlock one milestone tier. The state is
always derived from the installer's serial count and payment history;
nothing about milestones is stored on the installer.
"""

from dataclasses import dataclass
from typing import AbstractSet, FrozenSet, Iterable, List, Optional
from uuid import UUID

from apps.payments.models import Payment, PaymentStatus, PaymentType
from apps.serials.services.serial_queries import count_valid_installations

from .payment_queries import list_payments_by_type

MILESTONE_SIZE = 10


@dataclass(frozen=True)
class MilestoneState:
    total_installations: int
    completed: int
    current_progress: int
    progress_percentage: int
    next_milestone_at: Optional[int]
    has_unclaimed_milestone: bool

    def as_dict(self) -> dict:
        return {
            'total_installations': self.total_installations,
            'completed': self.completed,
            'current_progress': self.current_progress,
            'progress_percentage': self.progress_percentage,
            'next_milestone_at': self.next_milestone_at,
            'has_unclaimed_milestone': self.has_unclaimed_milestone,
        }


def compute_milestone_state(
    total_valid_installations: int,
    claimed_milestone_numbers: AbstractSet[int],
) -> MilestoneState:
    """
    Derive milestone progress from an installation count.

    Args:
        total_valid_installations: Installer's non-inactive serial count
        claimed_milestone_numbers: Tiers already paid out

    Returns:
        MilestoneState
    """
    if total_valid_installations < 0:
        raise ValueError("Installation count cannot be negative")

    completed, current_progress = divmod(total_valid_installations, MILESTONE_SIZE)
    return MilestoneState(
        total_installations=total_valid_installations,
        completed=completed,
        current_progress=current_progress,
        progress_percentage=current_progress * 100 // MILESTONE_SIZE,
        next_milestone_at=None if current_progress == 0 else MILESTONE_SIZE - current_progress,
        has_unclaimed_milestone=completed > 0 and completed not in claimed_milestone_numbers,
    )


def claimed_milestone_numbers(payments: Iterable[Payment]) -> FrozenSet[int]:
    """Tiers of milestone payments that were paid out."""
    return frozenset(
        payment.milestone_number
        for payment in payments
        if payment.payment_type == PaymentType.MILESTONE
        and payment.status == PaymentStatus.PAID
        and payment.milestone_number is not None
    )


def list_milestone_payments(installer_id: UUID) -> List[Payment]:
    return list(list_payments_by_type(installer_id, PaymentType.MILESTONE))


def get_milestone_state(*, installer_id: UUID) -> MilestoneState:
    """Current milestone state of an installer, re-derived from the database."""
    return compute_milestone_state(
        count_valid_installations(installer_id),
        claimed_milestone_numbers(list_milestone_payments(installer_id)),
    )
