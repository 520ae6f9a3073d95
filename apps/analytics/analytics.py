"""
Analytics Module
=================

This module provides aggregate queries over installers, serials,
promotions and payments for the program administration dashboards.

Classes:
    ProgramAnalytics: Static methods for the analytics endpoints.

Key Features:
    - Program overview (installers, installations, payouts)
    - Installation timeseries for charts
    - Top installers rankings by various metrics

Example:
    Getting the last month's overview::

        from apps.analytics.analytics import ProgramAnalytics

        stats = ProgramAnalytics.overview(
            start_date=date.today() - timedelta(days=30),
            end_date=date.today(),
        )
        print(f"{stats['installations']} installations registered")

Note:
    This module is read-only and doesn't modify any data. All methods
    are static and can be called without instantiation.
"""

from django.db.models import Sum, Count, Q
from django.db.models.functions import TruncMonth, Coalesce
from django.utils import timezone
from datetime import timedelta
from decimal import Decimal
from apps.accounts.models import User, UserRole, InstallerStatus
from apps.payments.models import Payment, PaymentStatus
from apps.promotions.models import Participation, ParticipationStatus, Promotion
from apps.serials.models import SerialRecord, SerialStatus
from .exceptions import InvalidDateRangeError, InvalidMetricError

VALID_METRICS = ('installations', 'payments', 'completions')


def _check_range(start_date, end_date):
    if start_date and end_date and start_date > end_date:
        raise InvalidDateRangeError("Start date must be before end date")


class ProgramAnalytics:
    """
    Aggregate queries for analytics endpoints.

    Methods:
        overview: Program-wide totals.
        installations_timeseries: Installations per month.
        top_installers: Installers ranked by a metric.

    Note:
        All methods return plain dictionaries or lists, not Django objects,
        making them suitable for JSON serialization in API responses.
    """

    @staticmethod
    def overview(start_date=None, end_date=None):
        """
        Program-wide totals.

        Installer and promotion counts are current; installations and
        payouts are limited to the date range when one is given.

        Args:
            start_date (date, optional): Start of period to analyze.
            end_date (date, optional): End of period to analyze.

        Returns:
            dict: A dictionary containing:
                - installers (dict): total, approved, pending, suspended
                - installations (int): Valid serials installed in the period
                - active_promotions (int)
                - participations (dict): active, completed, expired
                - payments (dict): pending_count, pending_amount, paid_count, paid_amount

        Raises:
            InvalidDateRangeError: If start_date is after end_date.
        """
        _check_range(start_date, end_date)

        installers = User.objects.filter(role=UserRole.INSTALLER).aggregate(
            total=Count('id'),
            approved=Count('id', filter=Q(status=InstallerStatus.APPROVED)),
            pending=Count('id', filter=Q(status=InstallerStatus.PENDING)),
            suspended=Count('id', filter=Q(status=InstallerStatus.SUSPENDED)),
        )

        serials = SerialRecord.objects.exclude(status=SerialStatus.INACTIVE)
        payments = Payment.objects.all()
        if start_date:
            serials = serials.filter(installation_date__date__gte=start_date)
            payments = payments.filter(requested_at__date__gte=start_date)
        if end_date:
            serials = serials.filter(installation_date__date__lte=end_date)
            payments = payments.filter(requested_at__date__lte=end_date)

        zero = Decimal('0.00')
        payment_totals = payments.aggregate(
            pending_count=Count('id', filter=Q(status=PaymentStatus.PENDING)),
            pending_amount=Coalesce(Sum('amount', filter=Q(status=PaymentStatus.PENDING)), zero),
            paid_count=Count('id', filter=Q(status=PaymentStatus.PAID)),
            paid_amount=Coalesce(Sum('amount', filter=Q(status=PaymentStatus.PAID)), zero),
        )

        participations = Participation.objects.aggregate(
            active=Count('id', filter=Q(status=ParticipationStatus.ACTIVE)),
            completed=Count('id', filter=Q(status=ParticipationStatus.COMPLETED)),
            expired=Count('id', filter=Q(status=ParticipationStatus.EXPIRED)),
        )

        return {
            'installers': installers,
            'installations': serials.count(),
            'active_promotions': Promotion.objects.active().count(),
            'participations': participations,
            'payments': payment_totals,
            'period_start': start_date,
            'period_end': end_date,
        }

    @staticmethod
    def installations_timeseries(installer_id=None, start_date=None, end_date=None):
        """
        Installations per month for chart visualizations.

        Args:
            installer_id (UUID, optional): Limit to one installer.
                If None, covers the whole program.
            start_date (date, optional): Start of period.
            end_date (date, optional): End of period.

        Returns:
            list[dict]: Chronological list, each containing:
                - period (str): Month label, e.g. '2025-01'.
                - installations (int): Valid serials installed that month.
                - cities (int): Distinct installation cities that month.

        Raises:
            InvalidDateRangeError: If start_date is after end_date.
        """
        _check_range(start_date, end_date)

        serials = SerialRecord.objects.exclude(status=SerialStatus.INACTIVE)
        if installer_id:
            serials = serials.filter(installer_id=installer_id)
        if start_date:
            serials = serials.filter(installation_date__date__gte=start_date)
        if end_date:
            serials = serials.filter(installation_date__date__lte=end_date)

        rows = (
            serials
            .annotate(month=TruncMonth('installation_date'))
            .values('month')
            .annotate(
                installations=Count('id'),
                cities=Count('city', filter=~Q(city=''), distinct=True),
            )
            .order_by('month')
        )

        return [
            {
                'period': row['month'].strftime('%Y-%m'),
                'installations': row['installations'],
                'cities': row['cities'],
            }
            for row in rows
        ]

    @staticmethod
    def top_installers(metric='installations', period_days=30, limit=10):
        """
        Rank installers by a metric.

        Args:
            metric (str, optional): The ranking metric. Options:
                - 'installations': Valid serials installed.
                - 'payments': Total amount paid out.
                - 'completions': Promotions completed.
                Defaults to 'installations'.
            period_days (int | None, optional): Limit to last N days.
                If None, includes all-time data.
            limit (int, optional): Maximum number of results.

        Returns:
            list[dict]: Each containing installer_id, email, display_name,
            loyalty_card_id, city and score.

        Raises:
            InvalidMetricError: If an invalid metric is specified.
        """
        if metric not in VALID_METRICS:
            raise InvalidMetricError(
                f"Invalid metric: '{metric}'. Valid options: {', '.join(VALID_METRICS)}"
            )

        cutoff = timezone.now() - timedelta(days=period_days) if period_days else None
        installers = User.objects.filter(role=UserRole.INSTALLER)

        if metric == 'installations':
            condition = Q(serials__status__in=[SerialStatus.ACTIVE, SerialStatus.MAINTENANCE])
            if cutoff:
                condition &= Q(serials__installation_date__gte=cutoff)
            ranked = installers.annotate(score=Count('serials', filter=condition))

        elif metric == 'payments':
            condition = Q(payments__status=PaymentStatus.PAID)
            if cutoff:
                condition &= Q(payments__paid_at__gte=cutoff)
            ranked = installers.annotate(
                score=Coalesce(Sum('payments__amount', filter=condition), Decimal('0.00'))
            )

        else:
            condition = Q(participations__status=ParticipationStatus.COMPLETED)
            if cutoff:
                condition &= Q(participations__completed_at__gte=cutoff)
            ranked = installers.annotate(score=Count('participations', filter=condition))

        ranked = ranked.filter(score__gt=0).order_by('-score', 'email')[:limit]

        return [
            {
                'installer_id': installer.id,
                'email': installer.email,
                'display_name': installer.get_display_name(),
                'loyalty_card_id': installer.loyalty_card_id,
                'city': installer.city,
                'score': installer.score,
            }
            for installer in ranked
        ]
