"""Read-side serial queries shared by the progress and milestone calculations."""

from typing import List
from uuid import UUID

from apps.serials.models import SerialRecord


def list_valid_serials(installer_id: UUID) -> List[SerialRecord]:
    """
    List an installer's serials that count as installations.

    Inactive serials are excluded; active and maintenance serials are kept.
    Ordered by installation date.
    """
    return list(
        SerialRecord.objects
        .for_installer(installer_id)
        .valid()
        .order_by('installation_date', 'created_at')
    )


def count_valid_installations(installer_id: UUID) -> int:
    """Total number of valid installations, with no date cutoff."""
    return SerialRecord.objects.for_installer(installer_id).valid().count()
