"""
Core models shared by the catalog and sales apps.
"""

from django.db import models


class IdentifierSequence(models.Model):
    """
    Durable per-key counter behind human-readable identifiers.

    One row per key ("ORD", "INV", "SKU_RIN_202410", ...). The counter
    starts at 0 and is only ever incremented in place by a single UPDATE,
    so values are never reused or decremented.
    """

    key = models.CharField(
        max_length=50,
        unique=True,
        help_text="Sequence key (identifier prefix, optionally year-scoped)",
    )

    counter = models.PositiveBigIntegerField(
        default=0,
        help_text="Last value handed out",
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the counter was last incremented",
    )

    class Meta:
        db_table = "core_identifier_sequences"
        ordering = ["key"]
        verbose_name = "Identifier Sequence"
        verbose_name_plural = "Identifier Sequences"

    def __str__(self):
        return f"{self.key}: {self.counter}"
