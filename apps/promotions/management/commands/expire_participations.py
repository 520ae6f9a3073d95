"""
Management command to expire participations of ended promotions.

Run periodically (e.g. from cron) so stored participation status follows
promotion end dates even for installers who stop registering serials.

Usage:
    python manage.py expire_participations
    python manage.py expire_participations --dry-run
"""

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.promotions.models import Participation, ParticipationStatus
from apps.promotions.services import expire_participations


class Command(BaseCommand):
    help = 'Mark active participations of ended promotions as expired'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be expired without making changes',
        )

    def handle(self, *args, **options):
        now = timezone.now()
        stale = (
            Participation.objects
            .filter(status=ParticipationStatus.ACTIVE, promotion__end_date__lt=now)
            .select_related('installer', 'promotion')
        )

        count = stale.count()
        if count == 0:
            self.stdout.write(self.style.SUCCESS('No participations to expire.'))
            return

        self.stdout.write(f'\nFound {count} participation(s) to expire:\n')
        for participation in stale:
            self.stdout.write(
                f'  - {participation.installer.email} | {participation.promotion.title} '
                f'| ended {participation.promotion.end_date:%Y-%m-%d}'
            )

        if options['dry_run']:
            self.stdout.write(self.style.WARNING('\n--dry-run mode: No changes made.'))
            return

        expired = expire_participations(now)
        self.stdout.write(self.style.SUCCESS(f'\nExpired {expired} participation(s).'))
