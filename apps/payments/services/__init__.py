"""
Payments services - Business logic layer.

- Milestone evaluation (derived from serial count and payment history)
- Milestone payment gate
- Payment request and admin workflow
"""

from .milestones import (
    MILESTONE_SIZE,
    MilestoneState,
    compute_milestone_state,
    claimed_milestone_numbers,
    get_milestone_state,
)

from .eligibility import (
    can_request_milestone_payment,
    default_amount,
)

from .payment_queries import list_payments_by_type

from .payment_management import (
    get_milestone_overview,
    request_milestone_payment,
    approve_payment,
    reject_payment,
    mark_payment_paid,
    cancel_payment,
)

from .exceptions import (
    PaymentsServiceError,
    PaymentNotFoundError,
    MilestonePaymentNotAllowedError,
    InvalidPaymentTransitionError,
)

__all__ = [
    # Milestones
    'MILESTONE_SIZE',
    'MilestoneState',
    'compute_milestone_state',
    'claimed_milestone_numbers',
    'get_milestone_state',
    # Gate
    'can_request_milestone_payment',
    'default_amount',
    # Workflow
    'list_payments_by_type',
    'get_milestone_overview',
    'request_milestone_payment',
    'approve_payment',
    'reject_payment',
    'mark_payment_paid',
    'cancel_payment',
    # Exceptions
    'PaymentsServiceError',
    'PaymentNotFoundError',
    'MilestonePaymentNotAllowedError',
    'InvalidPaymentTransitionError',
]
