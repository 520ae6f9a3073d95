"""Domain-specific exceptions for payments services."""


class PaymentsServiceError(Exception):
    """Base exception for payments services."""
    pass


class PaymentNotFoundError(PaymentsServiceError):
    """Raised when payment doesn't exist."""
    pass


class MilestonePaymentNotAllowedError(PaymentsServiceError):
    """Raised when the milestone gate is closed for the installer."""
    pass


class InvalidPaymentTransitionError(PaymentsServiceError):
    """Raised when a payment cannot move to the requested status."""
    pass
