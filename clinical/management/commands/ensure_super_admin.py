# clinical/management/commands/ensure_super_admin.py
import os

from django.core.management.base import BaseCommand, CommandError
from rest_framework.exceptions import ValidationError

from clinical.models import User
from clinical.policy import Role
from clinical.services.accounts import set_password


class Command(BaseCommand):
    help = "Ensure a SUPER_ADMIN account exists with the given password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--email", default=os.getenv("SUPER_ADMIN_EMAIL"))
        parser.add_argument("--password", default=os.getenv("SUPER_ADMIN_PASSWORD"))
        parser.add_argument("--name", default=os.getenv("SUPER_ADMIN_NAME", "Super Admin"))

    def handle(self, *args, **opts):
        email = (opts["email"] or "").strip().lower()
        password = opts["password"]
        if not email or not password:
            raise CommandError("--email and --password (or SUPER_ADMIN_EMAIL / SUPER_ADMIN_PASSWORD) are required")

        u = User.objects.filter(email=email).first()
        created = u is None
        if created:
            u = User(email=email)
        elif u.role != Role.SUPER_ADMIN.value:
            raise CommandError(f"{email} already exists with role {u.role}")
        u.name = opts["name"]
        u.role = Role.SUPER_ADMIN.value
        u.hospital = None
        u.is_active = True
        try:
            set_password(u, password)
        except ValidationError as e:
            raise CommandError(f"Password rejected: {e.detail}")
        u.save()
        self.stdout.write(self.style.SUCCESS(f"{'created' if created else 'updated'}: {email} (SUPER_ADMIN)"))
