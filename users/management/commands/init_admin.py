"""
Create the first administrator account at deploy time from environment
variables; skipped when the account already exists.
"""

import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = "Initialize default administrator from environment variables."

    def handle(self, *args, **options):
        email = os.getenv("SUPER_USER_EMAIL")
        password = os.getenv("SUPER_USER_PASSWORD")
        first_name = os.getenv("SUPER_USER_FIRST_NAME", "Admin")

        missing = [
            key
            for key, value in {
                "SUPER_USER_EMAIL": email,
                "SUPER_USER_PASSWORD": password,
            }.items()
            if not value
        ]
        if missing:
            raise CommandError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        User = get_user_model()
        if User.objects.filter(email=email.lower()).exists():
            self.stdout.write(self.style.SUCCESS("Administrator already exists. Skipping."))
            return

        User.objects.create_superuser(
            email=email,
            password=password,
            first_name=first_name,
        )

        self.stdout.write(self.style.SUCCESS("Administrator created successfully."))
