# Inbound Frame Relay
# Fans frames out from one transport to any number of subscribers

import logging
import threading
from typing import Callable, Dict

logger = logging.getLogger(__name__)

FrameCallback = Callable[[str], None]


class FrameRelay:
    """
    Publish/subscribe hand-off between a transport and its consumers.

    The transport publishes each inbound text frame; every current
    subscriber receives it. Subscribers usually just enqueue the frame
    for the thread that owns the session state, so the transport's
    lifetime stays separate from the session's.
    """

    def __init__(self):
        self._subscribers: Dict[int, FrameCallback] = {}
        self._next_id = 0
        self.lock = threading.RLock()

    def subscribe(self, callback: FrameCallback) -> Callable[[], None]:
        """
        Register callback for inbound frames.

        Returns:
            Function that removes the subscription (safe to call twice)
        """
        with self.lock:
            subscription_id = self._next_id
            self._next_id += 1
            self._subscribers[subscription_id] = callback

        def unsubscribe() -> None:
            with self.lock:
                self._subscribers.pop(subscription_id, None)

        return unsubscribe

    def publish(self, text: str) -> int:
        """
        Deliver a frame to every subscriber.

        Returns:
            Number of subscribers that accepted the frame
        """
        with self.lock:
            subscribers = list(self._subscribers.values())

        delivered = 0
        for callback in subscribers:
            try:
                callback(text)
                delivered += 1
            except Exception:
                logger.exception("Frame subscriber failed; skipping it for this frame")
        return delivered

    def subscriber_count(self) -> int:
        with self.lock:
            return len(self._subscribers)
