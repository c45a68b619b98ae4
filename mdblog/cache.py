import logging
import threading
import time
from typing import Callable, Optional, Sequence

from mdblog.errors import BlogError
from mdblog.pages import Page

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 30.0


class IndexCache:
    """Periodically refreshed snapshot of all pages for the index.

    The snapshot is a tuple replaced as a whole on every successful refresh,
    so readers never need the lock. A failed refresh keeps the previous one.
    """

    def __init__(self, loader: Callable[[], Sequence[Page]], interval: float = DEFAULT_INTERVAL):
        self._loader = loader
        self.interval = interval
        self._snapshot: tuple[Page, ...] = ()
        self._last_refresh: Optional[float] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def snapshot(self) -> tuple[Page, ...]:
        return self._snapshot

    @property
    def last_refresh(self) -> Optional[float]:
        return self._last_refresh

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def refresh(self) -> bool:
        try:
            pages = tuple(self._loader())
        except BlogError as exc:
            logger.error("index refresh failed, keeping %d cached pages: %s", len(self._snapshot), exc)
            return False
        except Exception:
            logger.exception("unexpected index refresh failure, keeping %d cached pages", len(self._snapshot))
            return False
        self._snapshot = pages
        self._last_refresh = time.time()
        logger.debug("index refreshed: %d pages", len(pages))
        return True

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self.refresh()
        self._thread = threading.Thread(target=self._run, name="index-refresh", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
            logger.info("index refresh stopped")

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.refresh()
