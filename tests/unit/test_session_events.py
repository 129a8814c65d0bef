"""Unit tests for the session-change event bus."""

from src.tb_common.enums import SessionEvent
from src.tb_gateway.session.events import SessionEventBus


def test_publish_reaches_all_listeners() -> None:
    bus = SessionEventBus()
    seen: list[tuple[SessionEvent, str]] = []
    bus.subscribe(lambda event, user_id: seen.append((event, user_id)))
    bus.subscribe(lambda event, user_id: seen.append((event, user_id)))

    bus.publish(SessionEvent.SIGNED_IN, "user-1")

    assert seen == [(SessionEvent.SIGNED_IN, "user-1")] * 2


def test_unsubscribe() -> None:
    bus = SessionEventBus()
    seen: list[str] = []
    unsubscribe = bus.subscribe(lambda event, user_id: seen.append(user_id))

    unsubscribe()
    unsubscribe()  # second call is harmless
    bus.publish(SessionEvent.SIGNED_OUT, "user-1")

    assert seen == []


def test_failing_listener_does_not_stop_others() -> None:
    bus = SessionEventBus()
    seen: list[str] = []

    def broken(event: SessionEvent, user_id: str) -> None:
        raise RuntimeError("boom")

    bus.subscribe(broken)
    bus.subscribe(lambda event, user_id: seen.append(user_id))

    bus.publish(SessionEvent.SIGNED_OUT, "user-1")

    assert seen == ["user-1"]
