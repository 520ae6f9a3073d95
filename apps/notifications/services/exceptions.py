"""Domain-specific exceptions for notifications services."""


class NotificationsServiceError(Exception):
    """Base exception for notifications services."""
    pass


class NotificationNotFoundError(NotificationsServiceError):
    """Raised when notification doesn't exist or belongs to someone else."""
    pass
