import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from app.models.drop import Drop
from app.services.drop_service import DropStatus, get_drop_status

logger = logging.getLogger(__name__)


class DropStatusWatcher:
    """
    Re-derive a drop's status on a timer and report changes.

    Each watcher owns its own thread and last-seen status; any number can
    watch the same drop and they agree for the same wall-clock time because
    the status is a pure function of the schedule.
    """

    def __init__(
        self,
        drop: Drop,
        on_change: Callable[[DropStatus], None],
        interval: float = 1.0,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.drop = drop
        self.on_change = on_change
        self.interval = interval
        self.clock = clock

        self._status: Optional[DropStatus] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def status(self) -> Optional[DropStatus]:
        return self._status

    def poll(self) -> DropStatus:
        status = get_drop_status(self.drop, self.clock())
        if status != self._status:
            self._status = status
            self.on_change(status)
        return status

    def _run(self):
        self.poll()
        while not self._stop.wait(self.interval):
            self.poll()

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run,
            name=f"drop-watch-{self.drop.id}",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=self.interval * 2)
            self._thread = None
        logger.debug(f"Stopped watching drop {self.drop.id}")
