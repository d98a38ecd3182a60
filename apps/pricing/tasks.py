"""
Celery tasks for product price recalculation.

Rate updates reprice every product that depends on the changed rate. With
PRICE_RECALCULATION_ASYNC enabled the rate-update path hands that work to
these tasks instead of running it inside the request.
"""

import logging
from typing import Optional

from celery import shared_task

from apps.pricing.models import MetalRate

logger = logging.getLogger(__name__)


@shared_task(
    name="apps.pricing.tasks.recalculate_product_prices",
    bind=True,
    max_retries=3,
    default_retry_delay=60,
)
def recalculate_product_prices(self, metal: str, purity: Optional[str] = None) -> int:
    """
    Recalculate prices for products priced off a (metal, purity) rate.

    Args:
        metal: Metal whose rate changed
        purity: Karat grade for gold, ignored for silver

    Returns:
        int: Number of products whose price changed
    """
    from django.db import DatabaseError

    from apps.pricing.services import PriceRecalculationService

    try:
        updated = PriceRecalculationService().recalculate_for_rate(metal, purity)
    except DatabaseError as exc:
        logger.warning(f"Price recalculation for {metal} {purity or ''} failed, retrying: {exc}")
        raise self.retry(exc=exc)

    logger.info(f"Recalculated {updated} product prices for {metal} {purity or ''}".rstrip())
    return updated


@shared_task(name="apps.pricing.tasks.recalculate_all_product_prices")
def recalculate_all_product_prices() -> str:
    """
    Reprice the whole catalog against every stored rate.

    Useful after bulk product imports or when rates were edited directly
    in the admin.

    Returns:
        str: Summary of price updates
    """
    from apps.pricing.services import PriceRecalculationService

    service = PriceRecalculationService()
    total_updated = 0

    for rate in MetalRate.objects.all():
        total_updated += service.recalculate_for_rate(rate.metal, rate.purity or None)

    logger.info(f"Price update complete: {total_updated} products updated")
    return f"Updated {total_updated} product prices"
