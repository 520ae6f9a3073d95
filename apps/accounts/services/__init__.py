"""
Accounts services - Business logic layer.

Installer review operations used by the admin API.
"""

from .installer_management import (
    update_installer_status,
)

from .exceptions import (
    AccountsServiceError,
    InstallerNotFoundError,
    InvalidInstallerStatusError,
)

__all__ = [
    'update_installer_status',
    'AccountsServiceError',
    'InstallerNotFoundError',
    'InvalidInstallerStatusError',
]
