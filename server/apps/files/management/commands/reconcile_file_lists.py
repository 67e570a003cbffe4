"""Management command to repair users' file lists."""

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from server.apps.files.logic.ownership import reconcile_file_list
from server.apps.files.models import File

User = get_user_model()
logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Rebuild every user's ``file_ids`` from the files they own."""

    help = 'Reconcile users file lists with file ownership'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report drifted lists without rewriting them',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the reconcile command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        dry_run = options['dry_run']

        repaired = 0
        for user in User.objects.order_by('pk'):
            if dry_run:
                owned_ids = set(
                    File.objects.filter(owner_id=user.pk).values_list(
                        'id',
                        flat=True,
                    ),
                )
                listed = list(user.file_ids)
                if len(listed) != len(set(listed)) or set(listed) != owned_ids:
                    self.stdout.write(
                        f'Would reconcile: {user.username} '
                        f'(listed: {listed}, owned: {sorted(owned_ids)})',
                    )
                    repaired += 1
                continue

            if reconcile_file_list(user.pk):
                repaired += 1

        if dry_run:
            self.stdout.write(
                self.style.SUCCESS(f'Would reconcile {repaired} file lists'),
            )
        else:
            logger.info('Reconciled %d file lists', repaired)
            self.stdout.write(
                self.style.SUCCESS(f'Reconciled {repaired} file lists'),
            )
