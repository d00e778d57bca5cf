"""
Periodic gold price refresh.

One fetch on start, then one per interval (24h by default) until stopped.
A failed fetch keeps the last good price and sets the error; it never stops
the interval.
"""
import logging
import threading

logger = logging.getLogger(__name__)

DAY_SECONDS = 24 * 60 * 60
DEFAULT_GOLD_PRICE = 5450
FETCH_ERROR = "Failed to fetch gold price"


class PricePoller:

    def __init__(self, fetch, interval=DAY_SECONDS, fallback=DEFAULT_GOLD_PRICE):
        self._fetch = fetch
        self.interval = interval
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread = None
        self._running = True

        self.price = fallback
        self.loading = True
        self.error = None

    def refresh(self):
        """Run one fetch and apply the result. No-op once stopped."""
        if not self._set_state(loading=True, error=None):
            return

        try:
            price = self._fetch()
        except Exception as e:
            logger.error("Gold price fetch error: %s", e)
            self._set_state(error=FETCH_ERROR, loading=False)
            return

        self._set_state(price=price, loading=False)

    def _set_state(self, **changes):
        with self._lock:
            if not self._running:
                return False
            for name, value in changes.items():
                setattr(self, name, value)
            return True

    def _run(self):
        self.refresh()
        while not self._stop_event.wait(self.interval):
            self.refresh()

    def start(self):
        if self._thread is not None or not self.running:
            return
        self._thread = threading.Thread(target=self._run, name="gold-price-poller", daemon=True)
        self._thread.start()
        logger.info("Gold price polling every %s seconds", self.interval)

    def stop(self):
        with self._lock:
            self._running = False
        self._stop_event.set()

    @property
    def running(self):
        return self._running

    def snapshot(self):
        with self._lock:
            return {"gold_price": self.price, "loading": self.loading, "error": self.error}
