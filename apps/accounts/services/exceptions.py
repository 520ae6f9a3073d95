"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class InstallerNotFoundError(AccountsServiceError):
    """Raised when installer does not exist."""
    pass


class InvalidInstallerStatusError(AccountsServiceError):
    """Raised when an installer status change is not allowed."""
    pass
