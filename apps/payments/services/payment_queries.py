"""Payment history lookups."""

from uuid import UUID

from django.db.models import QuerySet

from apps.payments.models import Payment


def list_payments_by_type(installer_id: UUID, payment_type: str) -> QuerySet:
    """An installer's payments of one type, newest first."""
    return (
        Payment.objects
        .filter(installer_id=installer_id, payment_type=payment_type)
        .order_by('-requested_at')
    )
