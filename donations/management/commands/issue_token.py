import uuid

from django.core.management.base import BaseCommand, CommandError

from donations.auth import KIND_CENTER, KIND_DONOR, issue_token
from donations.models import BloodCenter, Donor


class Command(BaseCommand):
    help = "Mint a bearer token for a blood center (by centerId) or a donor (by UUID)."

    def add_arguments(self, parser):
        parser.add_argument('kind', choices=[KIND_CENTER, KIND_DONOR])
        parser.add_argument('principal_id')

    def handle(self, *args, **options):
        kind = options['kind']
        principal_id = options['principal_id']

        if kind == KIND_CENTER:
            exists = BloodCenter.objects.filter(center_id=principal_id, is_active=True).exists()
        else:
            try:
                exists = Donor.objects.filter(id=uuid.UUID(principal_id)).exists()
            except ValueError:
                exists = False

        if not exists:
            raise CommandError(f"No active {kind} with id {principal_id!r}")

        self.stdout.write(issue_token(kind, principal_id))
