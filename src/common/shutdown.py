"""
Graceful shutdown for the exporter process.
Turns SIGINT/SIGTERM into an ordered run of cleanup callbacks and wakes
the main thread waiting for it.
"""
import signal
import threading
import time
from typing import Callable, List, Optional, Tuple

from src.common.logging_config import get_logger

logger = get_logger(__name__)


class ShutdownManager:
    """
    Runs registered cleanup callbacks once, lowest priority first.

    Priority levels (lower = executed first):
        0-9:   Stop accepting scrapes (close the HTTP listener)
        10-19: Close outbound connections (breaker box session)

    Usage:
        shutdown = ShutdownManager()
        shutdown.register(server.stop, priority=0, name="http")
        shutdown.install_signal_handlers()
        shutdown.wait_for_shutdown()
    """

    def __init__(self, timeout: float = 10.0):
        """
        Args:
            timeout: Seconds after which remaining callbacks are skipped
        """
        self.timeout = timeout
        self._callbacks: List[Tuple[int, str, Callable[[], None]]] = []
        self._state_lock = threading.Lock()
        self._shutdown_event = threading.Event()
        self._started = False

    @property
    def is_running(self) -> bool:
        return not self._shutdown_event.is_set()

    def register(
        self,
        callback: Callable[[], None],
        priority: int = 10,
        name: str = "unnamed"
    ) -> None:
        self._callbacks.append((priority, name, callback))
        self._callbacks.sort(key=lambda x: x[0])
        logger.debug(f"Registered shutdown callback: {name} (priority={priority})")

    def install_signal_handlers(self) -> None:
        """Install SIGINT and SIGTERM handlers."""
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum: int, frame) -> None:
        logger.info(f"Received {signal.Signals(signum).name}, shutting down")
        # Callbacks may block; keep them off the signal frame
        threading.Thread(
            target=self.initiate_shutdown, name="shutdown", daemon=True
        ).start()

    def initiate_shutdown(self) -> None:
        """
        Run all callbacks. Safe to call more than once and from any thread;
        only the first call does anything.
        """
        with self._state_lock:
            if self._started:
                return
            self._started = True

        start_time = time.time()
        for priority, name, callback in self._callbacks:
            if time.time() - start_time > self.timeout:
                logger.error(
                    f"Shutdown timeout ({self.timeout}s) exceeded, "
                    f"skipping remaining callbacks"
                )
                break
            try:
                callback()
                logger.debug(f"Shutdown callback completed: {name}")
            except Exception as e:
                logger.error(f"Shutdown callback failed: {name} - {e}")

        self._shutdown_event.set()
        logger.info("Shutdown complete")

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """
        Block until shutdown has completed.

        Returns:
            True if shutdown completed, False on timeout
        """
        return self._shutdown_event.wait(timeout=timeout)
