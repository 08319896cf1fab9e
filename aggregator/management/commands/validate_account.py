"""
Management command to validate a bank account number from the command line.

Runs the same provider fan-out as the HTTP endpoint and prints every
provider's verdict, including why a provider failed.
"""
import json

from django.core.management.base import BaseCommand, CommandError
from tabulate import tabulate

from aggregator import validate_account
from providers import get_registry
from providers.client import describe_outcome


class Command(BaseCommand):
    help = "Validate a bank account number against the configured data providers"

    def add_arguments(self, parser):
        parser.add_argument("account_number", help="Account number to validate")
        parser.add_argument(
            "--provider",
            action="append",
            dest="providers",
            metavar="NAME",
            help="Only ask this provider (repeat for several). Defaults to all providers",
        )
        parser.add_argument(
            "--format", choices=["table", "json"], default="table",
            help="Output format"
        )

    def handle(self, *args, **options):
        account_number = options["account_number"]
        if not account_number:
            raise CommandError("Account number must not be blank")

        provider_names = options.get("providers")
        if provider_names:
            unknown = [name for name in provider_names if name not in get_registry()]
            if unknown:
                self.stderr.write(
                    self.style.WARNING(f"Ignoring unknown providers: {', '.join(unknown)}")
                )

        result = validate_account(account_number, provider_names)
        rows = sorted((describe_outcome(o) for o in result.results), key=lambda r: r["provider"])

        if options["format"] == "json":
            self.stdout.write(json.dumps({"results": rows}, indent=2))
            return

        if not rows:
            self.stdout.write(self.style.WARNING("No providers selected."))
            return

        table = [
            [row["provider"], row["isValid"], row["status"], row["error"] or ""]
            for row in rows
        ]
        self.stdout.write(
            tabulate(table, ["Provider", "Valid", "Status", "Error"], tablefmt="pretty")
        )
        self.stdout.write(f"\n{result.valid_count}/{len(result)} providers report the account as valid")
