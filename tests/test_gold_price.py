"""
Tests for the gold price helper and poller
"""
import time
from unittest.mock import MagicMock, patch

import pytest
import requests

from jewelry_catalog.exceptions import GoldPriceError
from jewelry_catalog.services.gold_price import get_current_gold_price, make_fetcher
from jewelry_catalog.services.price_poller import DEFAULT_GOLD_PRICE, FETCH_ERROR, PricePoller

URL = "https://prices.example/gold"


def response_with(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


@patch("jewelry_catalog.services.gold_price.requests.get")
def test_reads_price_field(get):
    get.return_value = response_with({"price": "2381.5", "currency": "USD"})

    assert get_current_gold_price(URL, timeout=3) == 2381.5
    get.assert_called_once_with(URL, timeout=3)


@patch("jewelry_catalog.services.gold_price.requests.get")
def test_custom_field(get):
    get.return_value = response_with({"rate": 61.2})
    assert make_fetcher(URL, field="rate")() == 61.2


@patch("jewelry_catalog.services.gold_price.requests.get")
def test_network_error(get):
    get.side_effect = requests.ConnectionError("down")
    with pytest.raises(GoldPriceError):
        get_current_gold_price(URL)


@patch("jewelry_catalog.services.gold_price.requests.get")
def test_http_error(get):
    response = response_with({})
    response.raise_for_status.side_effect = requests.HTTPError("503")
    get.return_value = response
    with pytest.raises(GoldPriceError):
        get_current_gold_price(URL)


@pytest.mark.parametrize("payload", [{}, {"price": "n/a"}, {"price": None}, [1, 2]])
@patch("jewelry_catalog.services.gold_price.requests.get")
def test_bad_payload(get, payload):
    get.return_value = response_with(payload)
    with pytest.raises(GoldPriceError):
        get_current_gold_price(URL)


class FakeFeed:
    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def test_poller_starts_with_fallback():
    poller = PricePoller(FakeFeed())
    assert poller.snapshot() == {"gold_price": DEFAULT_GOLD_PRICE, "loading": True, "error": None}


def test_failure_keeps_last_good_price():
    poller = PricePoller(FakeFeed(5600.0, GoldPriceError("boom")))

    poller.refresh()
    assert poller.price == 5600.0
    assert poller.error is None
    assert poller.loading is False

    poller.refresh()
    assert poller.price == 5600.0
    assert poller.error == FETCH_ERROR
    assert poller.loading is False


def test_success_after_failure_clears_error():
    poller = PricePoller(FakeFeed(GoldPriceError("boom"), 5700.0))

    poller.refresh()
    assert poller.price == DEFAULT_GOLD_PRICE
    assert poller.error == FETCH_ERROR

    poller.refresh()
    assert poller.price == 5700.0
    assert poller.error is None


def test_no_updates_after_stop():
    feed = FakeFeed(5800.0)
    poller = PricePoller(feed)
    poller.stop()

    poller.refresh()
    assert feed.calls == 0
    assert poller.price == DEFAULT_GOLD_PRICE
    assert not poller.running


def test_stopped_poller_does_not_restart():
    poller = PricePoller(FakeFeed(5800.0))
    poller.stop()
    poller.start()

    assert poller._thread is None
    assert poller.price == DEFAULT_GOLD_PRICE


def test_interval_keeps_running_after_failure():
    failures = [GoldPriceError("first"), GoldPriceError("second")]

    def fetch():
        if failures:
            raise failures.pop(0)
        return 6000.0

    poller = PricePoller(fetch, interval=0.01)
    poller.start()
    try:
        deadline = time.monotonic() + 5
        while poller.snapshot()["gold_price"] != 6000.0 and time.monotonic() < deadline:
            time.sleep(0.01)
    finally:
        poller.stop()

    poller._thread.join(5)
    assert not poller._thread.is_alive()
    assert poller.price == 6000.0
    assert failures == []


def test_api_endpoint_reports_state(app, client):
    poller = app.extensions["gold_price_poller"]
    poller._fetch = FakeFeed(GoldPriceError("boom"))
    poller.refresh()

    data = client.get("/api/gold-price").get_json()
    assert data == {"gold_price": 5450, "loading": False, "error": FETCH_ERROR}
