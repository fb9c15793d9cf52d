import logging
from decimal import Decimal, InvalidOperation

from celery import shared_task
from django.conf import settings
from django.utils import timezone

from gold.models import Vendor
from gold.utils import request_gold_price_quote

logger = logging.getLogger(__name__)

MAX_RETRIES = getattr(settings, "GOLD_PRICE_REFRESH_MAX_RETRIES", 3)


class PriceFeedUnavailable(Exception):
    """The price feed did not return a usable quote."""


@shared_task(bind=True, acks_late=True, max_retries=MAX_RETRIES, default_retry_delay=30)
def refresh_vendor_gold_price(self, vendor_id: int):
    """
    Fetch and store one vendor's current gold price.

    Conversions read the stored price at the moment they run, so a
    refresh never affects a conversion already in progress. A quote that
    is missing, malformed or not positive leaves the stored price as is.
    """
    try:
        result = request_gold_price_quote(vendor_id)
        if not result["success"]:
            raise PriceFeedUnavailable(str(result["response"]))

        try:
            price = Decimal(str(result["response"]["price"]))
        except (InvalidOperation, KeyError, TypeError):
            price = None

        if price is None or not price.is_finite() or price <= 0:
            logger.warning(
                "Ignoring invalid gold price quote: vendor=%d response=%s",
                vendor_id,
                result["response"],
            )
            return {"vendor_id": vendor_id, "status": "INVALID_QUOTE"}

        updated = Vendor.objects.filter(pk=vendor_id).update(
            current_gold_price=price,
            price_updated_at=timezone.now(),
            updated_at=timezone.now(),
        )
        if not updated:
            logger.error("Vendor %d not found while refreshing price.", vendor_id)
            return {"vendor_id": vendor_id, "status": "NOT_FOUND"}

        logger.info("Vendor gold price refreshed: vendor=%d price=%s", vendor_id, price)
        return {"vendor_id": vendor_id, "status": "UPDATED", "price": str(price)}

    except PriceFeedUnavailable as exc:
        logger.warning(
            "Price feed unavailable for vendor=%d (attempt %d): %s",
            vendor_id,
            self.request.retries + 1,
            str(exc),
        )
        # Retry with exponential backoff
        raise self.retry(exc=exc, countdown=2**self.request.retries * 10)


@shared_task
def refresh_all_vendor_gold_prices():
    """
    Periodic task: dispatch a price refresh for every vendor.

    Runs via Celery Beat every GOLD_PRICE_REFRESH_INTERVAL seconds.
    """
    vendor_ids = list(Vendor.objects.order_by("id").values_list("id", flat=True))

    if not vendor_ids:
        return {"dispatched": 0}

    logger.info("Dispatching gold price refresh for %d vendor(s).", len(vendor_ids))

    for vendor_id in vendor_ids:
        refresh_vendor_gold_price.delay(vendor_id)

    return {"dispatched": len(vendor_ids)}
