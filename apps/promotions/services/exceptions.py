"""
Domain exceptions for promotions services.

Exception Hierarchy:
    PromotionsServiceError (base)
    ├── NotFoundError
    │   ├── PromotionNotFoundError
    │   └── ParticipationNotFoundError
    ├── ConfigurationError
    ├── ConflictError
    ├── PromotionNotActiveError
    ├── NotEligibleError
    ├── AlreadyParticipatingError
    └── InvalidRewardTransitionError

None of these are retried by the services; the API layer translates
them into responses.
"""


class PromotionsServiceError(Exception):
    """Base exception for all promotions service errors."""
    pass


class NotFoundError(PromotionsServiceError):
    """A promotion or participation record is missing."""
    pass


class PromotionNotFoundError(NotFoundError):
    """Promotion does not exist."""
    pass


class ParticipationNotFoundError(NotFoundError):
    """Installer is not participating in the promotion."""
    pass


class ConfigurationError(PromotionsServiceError):
    """Promotion definition cannot be evaluated (e.g. target value <= 0)."""
    pass


class ConflictError(PromotionsServiceError):
    """A concurrent update won; this write was discarded."""
    pass


class PromotionNotActiveError(PromotionsServiceError):
    """Promotion is outside its start/end window."""
    pass


class NotEligibleError(PromotionsServiceError):
    """Installer does not meet the promotion's eligibility rules."""
    pass


class AlreadyParticipatingError(PromotionsServiceError):
    """Installer already joined this promotion."""
    pass


class InvalidRewardTransitionError(PromotionsServiceError):
    """Reward status change is not allowed from the current state."""
    pass
