"""
Management command to set a metal rate from the shell.

Usage:
    python manage.py set_metal_rate gold 6000 --purity 22K
    python manage.py set_metal_rate silver 75
"""

from django.core.management.base import BaseCommand, CommandError

from apps.core.exceptions import PointOfSaleError
from apps.pricing.models import MetalRate
from apps.pricing.services import update_rate


class Command(BaseCommand):
    """Administrative rate update that also reprices affected products."""

    help = "Set the current price per gram for a metal and reprice its products"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "metal",
            type=str,
            choices=[choice[0] for choice in MetalRate.METAL_CHOICES],
            help="Metal to update",
        )
        parser.add_argument("price", type=str, help="Price per gram in rupees")
        parser.add_argument(
            "--purity",
            type=str,
            default=None,
            help="Karat grade for gold (24K, 22K, 18K)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        try:
            rate, updated = update_rate(
                options["metal"], options["price"], purity=options["purity"]
            )
        except PointOfSaleError as e:
            raise CommandError(e.message)

        self.stdout.write(self.style.SUCCESS(f"✓ {rate}"))
        if updated is None:
            self.stdout.write("Product repricing queued")
        else:
            self.stdout.write(f"Repriced {updated} products")
