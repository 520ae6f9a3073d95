"""
Serials services - Business logic layer.

- Serial registration with promotion / milestone fan-out
- Installer rating aggregation
- Valid-serial queries feeding the progress and milestone calculations
"""

from .serial_queries import (
    list_valid_serials,
    count_valid_installations,
)

from .serial_registration import (
    register_serial,
    get_installer_serials,
    normalize_serial_number,
)

from .rating_aggregation import (
    update_installer_rating,
)

from .exceptions import (
    SerialsServiceError,
    DuplicateSerialError,
    InvalidInstallationDateError,
    InstallerNotAllowedError,
)

__all__ = [
    'list_valid_serials',
    'count_valid_installations',
    'register_serial',
    'get_installer_serials',
    'normalize_serial_number',
    'update_installer_rating',
    'SerialsServiceError',
    'DuplicateSerialError',
    'InvalidInstallationDateError',
    'InstallerNotAllowedError',
]
