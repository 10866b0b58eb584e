"""
Grant bonus credits to an account.

Usage:
    python manage.py grant_credits ana@example.com 10 --reason "Support"
    python manage.py grant_credits 52998224725 10
"""

from django.core.management.base import BaseCommand, CommandError
from django.db.models import Q

from authentication.models import User
from core.helpers import digits_only
from payments.ledger.exceptions import LedgerError
from payments.ledger.services import LedgerService


class Command(BaseCommand):
    help = "Grant bonus credits to an account, identified by email or CPF."

    def add_arguments(self, parser):
        parser.add_argument("account", help="Email or CPF of the account")
        parser.add_argument("amount", type=int, help="Credits to grant")
        parser.add_argument("--reason", default="", help="Shown in the history")

    def handle(self, *args, **options):
        account = options["account"].strip()
        lookup = Q(email__iexact=account)
        if digits_only(account):
            lookup |= Q(national_id=digits_only(account))

        user = User.objects.filter(lookup).first()
        if user is None:
            raise CommandError(f"No account matches '{account}'")

        try:
            LedgerService.grant_bonus(
                user, options["amount"], description=options["reason"]
            )
        except LedgerError as exc:
            raise CommandError(exc.message) from exc

        user.refresh_from_db(fields=["credits"])
        self.stdout.write(
            self.style.SUCCESS(
                f"Granted {options['amount']} credits to {user.email}; "
                f"balance is now {user.credits}"
            )
        )
