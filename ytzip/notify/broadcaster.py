"""Fan-out push channel for job progress frames."""
import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ytzip.config import get_push_queue_size
from ytzip.state.models import Job

_logger = logging.getLogger("ytzip")


def progress_frame(job: Job, error: Optional[str] = None) -> Dict[str, Any]:
    frame: Dict[str, Any] = {
        "jobId": job.id,
        "status": job.status.value,
        "progress": job.progress,
    }
    if error is not None:
        frame["error"] = error
    return frame


@dataclass(eq=False)
class Listener:
    """One connected client: a bounded queue owned by the event loop it was registered on.

    A ``None`` in the queue means the listener fell too far behind and was dropped.
    """

    loop: asyncio.AbstractEventLoop
    queue: "asyncio.Queue[Optional[Dict[str, Any]]]"
    dropped: bool = False

    async def get(self) -> Optional[Dict[str, Any]]:
        return await self.queue.get()


class Notifier:
    """Registry of listeners; every listener receives every frame.

    ``broadcast`` may be called from any thread. Frames are handed to each listener's
    loop with ``call_soon_threadsafe``, which runs callbacks in the order they were
    scheduled, so one caller's frames arrive in the order they were broadcast.
    """

    def __init__(self, max_queued: Optional[int] = None):
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()
        self._max_queued = max_queued

    def register(self) -> Listener:
        """Create a listener bound to the running event loop."""
        maxsize = self._max_queued or get_push_queue_size()
        listener = Listener(loop=asyncio.get_running_loop(), queue=asyncio.Queue(maxsize=maxsize))
        with self._lock:
            self._listeners.append(listener)
            count = len(self._listeners)
        _logger.info("Listener connected listeners=%d", count)
        return listener

    def unregister(self, listener: Listener) -> None:
        with self._lock:
            if listener not in self._listeners:
                return
            self._listeners.remove(listener)
            count = len(self._listeners)
        _logger.info("Listener disconnected listeners=%d", count)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def broadcast(self, frame: Dict[str, Any]) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            if listener.loop.is_closed():
                self.unregister(listener)
                continue
            try:
                listener.loop.call_soon_threadsafe(self._deliver, listener, frame)
            except RuntimeError:
                # loop closed between the check and the call
                self.unregister(listener)
        _logger.debug("Broadcast frame job_id=%s status=%s listeners=%d", frame.get("jobId"), frame.get("status"), len(listeners))

    def _deliver(self, listener: Listener, frame: Dict[str, Any]) -> None:
        # runs on the listener's loop
        if listener.dropped:
            return
        try:
            listener.queue.put_nowait(frame)
            return
        except asyncio.QueueFull:
            pass

        listener.dropped = True
        self.unregister(listener)
        while not listener.queue.empty():
            listener.queue.get_nowait()
        listener.queue.put_nowait(None)
        _logger.warning("Dropped slow listener unread=%d", listener.queue.maxsize)

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()


notifier = Notifier()
