"""
Thin wrapper around the external gold price API.
"""
import logging

import requests

from jewelry_catalog.exceptions import GoldPriceError

logger = logging.getLogger(__name__)


def get_current_gold_price(url, field="price", timeout=10):
    """
    Fetch the current gold price.

    Args:
        url: Endpoint returning a JSON object
        field: Key holding the numeric price in that object
        timeout: Request timeout in seconds

    Returns:
        The price as a float

    Raises:
        GoldPriceError: on network, HTTP, JSON or value errors
    """
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as e:
        raise GoldPriceError(f"Gold price request failed: {e}") from e

    if not isinstance(payload, dict) or field not in payload:
        raise GoldPriceError(f"Gold price response has no '{field}' field")

    try:
        price = float(payload[field])
    except (TypeError, ValueError) as e:
        raise GoldPriceError(f"Gold price is not numeric: {payload[field]!r}") from e

    logger.debug("Gold price fetched: %s", price)
    return price


def make_fetcher(url, field="price", timeout=10):
    def fetch():
        return get_current_gold_price(url, field=field, timeout=timeout)
    return fetch
