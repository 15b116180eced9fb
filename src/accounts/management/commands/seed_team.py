"""Seed the team roster for development."""
from decimal import Decimal

from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "Seed the team roster with demo members (PIN 1234 unless --pin is given)"

    DEMO_MEMBERS = [
        {"name": "Alex Admin", "role": "Creative Director", "auth_role": "admin", "color": "#c9a84c", "profit_share_pct": Decimal("40")},
        {"name": "Sam Designer", "role": "Lead Designer", "auth_role": "class_a", "color": "#4caf7a", "profit_share_pct": Decimal("30")},
        {"name": "Jo Producer", "role": "Producer", "auth_role": "class_b", "color": "#5b8def", "profit_share_pct": Decimal("30")},
    ]

    def add_arguments(self, parser):
        parser.add_argument("--pin", default="1234", help="PIN given to every seeded member")
        parser.add_argument(
            "--reset-pins",
            action="store_true",
            help="Reset the PIN of members that already exist.",
        )

    def handle(self, *args, **options):
        from accounts.models import TeamMember

        created_count = 0
        for data in self.DEMO_MEMBERS:
            fields = dict(data)
            name = fields.pop("name")
            member = TeamMember.objects.filter(name=name).first()
            if member is None:
                TeamMember.objects.create_user(name, pin=options["pin"], **fields)
                created_count += 1
                self.stdout.write(f"  Member: {name} ({fields['auth_role']})")
            elif options["reset_pins"]:
                member.set_password(options["pin"])
                member.save(update_fields=["password"])
                self.stdout.write(f"  PIN reset: {name}")

        self.stdout.write(self.style.SUCCESS(f"Seed complete: {created_count} members created"))
