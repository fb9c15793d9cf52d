import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


def request_gold_price_quote(vendor_id: int) -> dict:
    """
    Ask the third-party price feed for a vendor's current gold unit price.

    Handles both HTTP errors (non-200 responses from the feed) and network
    failures (connection errors, timeouts). Returns a structured result dict
    for consistent downstream handling.

    Args:
        vendor_id: Id of the vendor whose price is requested.

    Returns:
        dict with keys:
            - success (bool): Whether the feed returned a usable quote.
            - response (dict): The raw response data or error details.
    """
    base_url = getattr(settings, "GOLD_PRICE_FEED_URL", "http://localhost:8020")
    timeout = getattr(settings, "GOLD_PRICE_FEED_TIMEOUT", 10)

    try:
        response = requests.get(
            f"{base_url}/vendors/{vendor_id}/price",
            timeout=timeout,
        )
        response.raise_for_status()
        response_data = response.json()

        if isinstance(response_data, dict) and response_data.get("price") is not None:
            logger.info(
                "Gold price quote received: vendor=%d price=%s",
                vendor_id,
                response_data["price"],
            )
            return {"success": True, "response": response_data}

        logger.warning(
            "Gold price quote missing price: vendor=%d response=%s",
            vendor_id,
            response_data,
        )
        return {"success": False, "response": response_data}

    except requests.exceptions.ConnectionError as exc:
        logger.error(
            "Price feed connection error: vendor=%d error=%s", vendor_id, str(exc)
        )
        return {
            "success": False,
            "response": {"error": "connection_error", "detail": str(exc)},
        }

    except requests.exceptions.Timeout as exc:
        logger.error("Price feed timeout: vendor=%d error=%s", vendor_id, str(exc))
        return {
            "success": False,
            "response": {"error": "timeout", "detail": str(exc)},
        }

    except requests.exceptions.HTTPError as exc:
        logger.error("Price feed HTTP error: vendor=%d error=%s", vendor_id, str(exc))
        return {
            "success": False,
            "response": {"error": "http_error", "detail": str(exc)},
        }

    except requests.exceptions.RequestException as exc:
        logger.error(
            "Price feed request error: vendor=%d error=%s", vendor_id, str(exc)
        )
        return {
            "success": False,
            "response": {"error": "request_error", "detail": str(exc)},
        }
