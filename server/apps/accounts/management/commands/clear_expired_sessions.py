"""Management command to delete expired login sessions."""

from typing import Any

from django.core.management.base import BaseCommand
from django.utils import timezone

from server.apps.accounts.logic.session_store import cleanup_expired_sessions
from server.apps.accounts.models import Session


class Command(BaseCommand):
    """Delete sessions whose expiry time has passed."""

    help = 'Delete expired login sessions'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show how many sessions would be deleted',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the cleanup command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        if options['dry_run']:
            expired = Session.objects.filter(expires_at__lte=timezone.now()).count()
            self.stdout.write(
                self.style.SUCCESS(f'Would delete {expired} expired sessions'),
            )
            return

        deleted = cleanup_expired_sessions()
        self.stdout.write(
            self.style.SUCCESS(f'Deleted {deleted} expired sessions'),
        )
