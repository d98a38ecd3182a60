"""
Sequence allocation for order numbers, invoice numbers and SKUs.

Counters live in the database and are advanced with a single
``UPDATE ... SET counter = counter + 1`` inside a transaction. The UPDATE
takes the row lock, so concurrent callers for the same key queue up and
each reads back its own value: results are distinct and consecutive.
"""

import logging
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.core.models import IdentifierSequence

logger = logging.getLogger(__name__)


def format_identifier(prefix: str, separator: str, year: int, counter: int) -> str:
    """
    Build a human-readable identifier.

    Examples:
        >>> format_identifier("ORD", "-", 2024, 7)
        'ORD-2024-0007'
        >>> format_identifier("INV", "/", 2024, 7)
        'INV/2024/0007'
    """
    return f"{prefix}{separator}{year}{separator}{counter:04d}"


class SequenceAllocator:
    """
    Issues strictly increasing integers per named key.

    By default a key's counter is global: the year shown in an identifier
    is only a label and numbering continues across year boundaries. With
    ORDER_SEQUENCE_RESET_YEARLY the counter key is scoped by year instead,
    so numbering restarts at 1 every January.
    """

    def __init__(self, reset_yearly: Optional[bool] = None):
        if reset_yearly is None:
            reset_yearly = getattr(settings, "ORDER_SEQUENCE_RESET_YEARLY", False)
        self.reset_yearly = reset_yearly

    def counter_key(self, key: str, year_scope: Optional[int] = None) -> str:
        if self.reset_yearly and year_scope is not None:
            return f"{key}-{year_scope}"
        return key

    def next_value(self, key: str, year_scope: Optional[int] = None) -> int:
        """
        Atomically increment and return the counter for ``key``.

        Args:
            key: Sequence key (e.g. "ORD", "INV")
            year_scope: Year the identifier belongs to; only changes the
                counter when yearly reset is enabled

        Returns:
            int: The new counter value (first call returns 1)
        """
        counter_key = self.counter_key(key, year_scope)

        with transaction.atomic():
            # get_or_create retries the lookup when a concurrent insert wins
            IdentifierSequence.objects.get_or_create(key=counter_key)
            IdentifierSequence.objects.filter(key=counter_key).update(
                counter=F("counter") + 1, updated_at=timezone.now()
            )
            value = (
                IdentifierSequence.objects.filter(key=counter_key)
                .values_list("counter", flat=True)
                .get()
            )

        logger.debug(f"Allocated {counter_key} #{value}")
        return value

    def next_identifier(
        self, prefix: str, separator: str, year: Optional[int] = None
    ) -> str:
        """Allocate the next value for ``prefix`` and format it."""
        if year is None:
            year = timezone.localdate().year
        return format_identifier(prefix, separator, year, self.next_value(prefix, year))
