# sheetchat/services/poller.py

import logging
import threading

logger = logging.getLogger(__name__)


class Poller:
    """Calls session.poll() every `interval` seconds on a daemon thread."""

    def __init__(self, session, interval: float):
        self.session = session
        self.interval = interval
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="sheetchat-poller", daemon=True)

    def start(self):
        logger.info("Polling every %.1fs", self.interval)
        self._thread.start()

    def stop(self, timeout: float | None = 5.0):
        self._stop.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    @property
    def running(self) -> bool:
        return self._thread.is_alive() and not self._stop.is_set()

    def _run(self):
        while not self._stop.wait(self.interval):
            try:
                self.session.poll()
            except Exception:
                # poll() handles transport errors itself; keep the timer alive regardless
                logger.exception("Unexpected error during poll")
