"""
Payment management service.

Milestone payment requests and the admin payment workflow:

    pending --approve--> approved --mark_paid--> paid
    pending / approved --reject--> rejected
    pending --cancel (installer)--> cancelled

Transitions lock the payment row.
"""

import logging
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction, IntegrityError
from django.utils import timezone

from apps.accounts.models import User
from apps.notifications.services import notify_payment_status
from apps.payments.models import Payment, PaymentStatus, PaymentType
from apps.serials.services.serial_queries import count_valid_installations

from .eligibility import can_request_milestone_payment, default_amount
from .exceptions import (
    PaymentNotFoundError,
    MilestonePaymentNotAllowedError,
    InvalidPaymentTransitionError,
)
from .milestones import MILESTONE_SIZE, compute_milestone_state, claimed_milestone_numbers
from .payment_queries import list_payments_by_type

logger = logging.getLogger(__name__)


def get_milestone_overview(*, installer: User) -> dict:
    """
    Milestone state plus whether a payment may be requested right now.

    Returns:
        Dict with the MilestoneState fields, can_request, default_amount,
        currency and claimed_milestones
    """
    payments = list(list_payments_by_type(installer.id, PaymentType.MILESTONE))
    claimed = claimed_milestone_numbers(payments)
    state = compute_milestone_state(count_valid_installations(installer.id), claimed)

    return {
        **state.as_dict(),
        'can_request': can_request_milestone_payment(state, payments),
        'default_amount': default_amount(),
        'currency': settings.LOYALTY_CURRENCY,
        'claimed_milestones': sorted(claimed),
    }


@transaction.atomic
def request_milestone_payment(
    *,
    installer: User,
    payment_method: Optional[str] = None,
    notes: str = '',
) -> Payment:
    """
    Request the reward for the installer's current milestone tier.

    The installer row is locked so two simultaneous requests see each
    other's payment.

    Raises:
        MilestonePaymentNotAllowedError: If no tier is claimable or a request
            for the current tier is already in flight
    """
    User.objects.select_for_update().filter(pk=installer.pk).first()

    payments = list(list_payments_by_type(installer.id, PaymentType.MILESTONE))
    state = compute_milestone_state(
        count_valid_installations(installer.id),
        claimed_milestone_numbers(payments),
    )

    if not can_request_milestone_payment(state, payments):
        raise MilestonePaymentNotAllowedError("No milestone payment can be requested right now")

    tier = state.completed
    payment = Payment(
        installer=installer,
        amount=default_amount(),
        currency=settings.LOYALTY_CURRENCY,
        payment_type=PaymentType.MILESTONE,
        description=f"Milestone {tier} reward ({tier * MILESTONE_SIZE} installations)",
        milestone_number=tier,
        inverter_count=state.total_installations,
        notes=notes,
    )
    if payment_method:
        payment.payment_method = payment_method

    try:
        with transaction.atomic():
            payment.save(force_insert=True)
    except IntegrityError:
        raise MilestonePaymentNotAllowedError(f"Milestone {tier} already has an open request")

    logger.info("Installer %s requested milestone %s payment %s", installer.id, tier, payment.pk)
    return payment


def _lock_payment(payment_id: UUID) -> Payment:
    try:
        return (
            Payment.objects
            .select_for_update()
            .select_related('installer')
            .get(id=payment_id)
        )
    except Payment.DoesNotExist:
        raise PaymentNotFoundError(f"Payment {payment_id} not found")


def _require_status(payment: Payment, *allowed: str, action: str) -> None:
    if payment.status not in allowed:
        raise InvalidPaymentTransitionError(
            f"Cannot {action} a payment that is {payment.status}"
        )


def _log_transition(payment: Payment, previous: str, actor: User) -> None:
    logger.info(
        "Payment %s moved %s -> %s by %s",
        payment.pk, previous, payment.status, actor.id,
    )


@transaction.atomic
def approve_payment(*, payment_id: UUID, admin: User, notes: str = '') -> Payment:
    """
    Approve a pending payment.

    Raises:
        PaymentNotFoundError: If payment doesn't exist
        InvalidPaymentTransitionError: If payment isn't pending
    """
    payment = _lock_payment(payment_id)
    _require_status(payment, PaymentStatus.PENDING, action='approve')

    previous = payment.status
    payment.status = PaymentStatus.APPROVED
    payment.approved_by = admin
    payment.approved_at = timezone.now()
    if notes:
        payment.notes = notes
    payment.save()

    _log_transition(payment, previous, admin)
    notify_payment_status(payment)
    return payment


@transaction.atomic
def reject_payment(*, payment_id: UUID, admin: User, reason: str) -> Payment:
    """
    Reject a pending or approved payment. A rejected milestone tier can be
    requested again.

    Raises:
        PaymentNotFoundError: If payment doesn't exist
        InvalidPaymentTransitionError: If payment is already paid, rejected or cancelled
    """
    payment = _lock_payment(payment_id)
    _require_status(payment, PaymentStatus.PENDING, PaymentStatus.APPROVED, action='reject')

    previous = payment.status
    payment.status = PaymentStatus.REJECTED
    payment.rejected_by = admin
    payment.rejected_at = timezone.now()
    payment.rejection_reason = reason
    payment.save()

    _log_transition(payment, previous, admin)
    notify_payment_status(payment)
    return payment


@transaction.atomic
def mark_payment_paid(
    *,
    payment_id: UUID,
    admin: User,
    transaction_id: Optional[str] = None,
    payment_method: Optional[str] = None,
) -> Payment:
    """
    Record the disbursement of an approved payment.

    Raises:
        PaymentNotFoundError: If payment doesn't exist
        InvalidPaymentTransitionError: If payment isn't approved
    """
    payment = _lock_payment(payment_id)
    _require_status(payment, PaymentStatus.APPROVED, action='pay')

    previous = payment.status
    payment.status = PaymentStatus.PAID
    payment.paid_by = admin
    payment.paid_at = timezone.now()
    if transaction_id:
        payment.transaction_id = transaction_id
    if payment_method:
        payment.payment_method = payment_method

    try:
        with transaction.atomic():
            payment.save()
    except IntegrityError:
        raise InvalidPaymentTransitionError(f"Transaction ID {transaction_id} is already recorded")

    _log_transition(payment, previous, admin)
    notify_payment_status(payment)
    return payment


@transaction.atomic
def cancel_payment(*, payment_id: UUID, installer: User) -> Payment:
    """
    Withdraw one of the installer's own pending requests.

    Raises:
        PaymentNotFoundError: If payment doesn't exist or isn't the installer's
        InvalidPaymentTransitionError: If payment isn't pending
    """
    payment = _lock_payment(payment_id)
    if payment.installer_id != installer.id:
        raise PaymentNotFoundError(f"Payment {payment_id} not found")
    _require_status(payment, PaymentStatus.PENDING, action='cancel')

    previous = payment.status
    payment.status = PaymentStatus.CANCELLED
    payment.save()

    _log_transition(payment, previous, installer)
    return payment
