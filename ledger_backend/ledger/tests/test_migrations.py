# ledger/tests/test_migrations.py

from io import StringIO

from django.core.management import call_command
from django.test import TestCase


class MigrationStateTests(TestCase):
    """
    Hand-written migrations must describe exactly what the models declare.
    """

    def test_models_have_no_pending_changes(self):
        out = StringIO()
        try:
            call_command(
                "makemigrations",
                "organizations",
                "ledger",
                "payments",
                "--check",
                "--dry-run",
                stdout=out,
                stderr=StringIO(),
            )
        except SystemExit:
            self.fail(f"Models differ from migrations:\n{out.getvalue()}")
