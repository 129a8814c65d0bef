"""Session-change notification stream.

Subscribers are plain callables taking (event, user_id). The ledger and
favorites services subscribe at startup so they can drop per-user state on
sign-out. A failing subscriber is logged and does not stop the others.
"""

import logging
from collections.abc import Callable

from src.tb_common.enums import SessionEvent

logger = logging.getLogger("tb.session")

SessionListener = Callable[[SessionEvent, str], None]


class SessionEventBus:
    def __init__(self) -> None:
        self._listeners: list[SessionListener] = []

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: SessionEvent, user_id: str) -> None:
        logger.info("session %s user=%s", event.value, user_id)
        for listener in list(self._listeners):
            try:
                listener(event, user_id)
            except Exception:
                logger.exception("session listener failed event=%s user=%s", event.value, user_id)
