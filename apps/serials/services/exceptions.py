"""Domain-specific exceptions for serials services."""


class SerialsServiceError(Exception):
    """Base exception for serials services."""
    pass


class DuplicateSerialError(SerialsServiceError):
    """Raised when the serial number is already registered."""
    pass


class InvalidInstallationDateError(SerialsServiceError):
    """Raised when installation date lies in the future."""
    pass


class InstallerNotAllowedError(SerialsServiceError):
    """Raised when the account may not register installations."""
    pass
