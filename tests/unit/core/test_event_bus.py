"""
Unit tests for the in-memory event bus.
"""

import pytest

from activations.domain.events import AuthorizationActivated, ClientActionRejected
from core.domain.events import EventHandler
from core.infrastructure.events import InMemoryEventBus


class RecordingHandler(EventHandler):
    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)


class FailingHandler(EventHandler):
    async def handle(self, event):
        raise RuntimeError("handler failed")


@pytest.mark.asyncio
class TestInMemoryEventBus:
    """Tests for InMemoryEventBus."""

    async def test_publish_reaches_subscribers_of_type(self):
        """Test handlers only receive their event type."""
        bus = InMemoryEventBus()
        handler = RecordingHandler()
        bus.subscribe(AuthorizationActivated, handler)

        await bus.publish(AuthorizationActivated(aggregate_id="CODE"))
        await bus.publish(ClientActionRejected(aggregate_id="CODE", rejected_action="verify"))

        assert len(handler.events) == 1
        assert handler.events[0].event_type == "AuthorizationActivated"

    async def test_subscribe_is_idempotent(self):
        """Test subscribing the same handler twice registers it once."""
        bus = InMemoryEventBus()
        handler = RecordingHandler()
        bus.subscribe(AuthorizationActivated, handler)
        bus.subscribe(AuthorizationActivated, handler)

        assert bus.handlers_for(AuthorizationActivated) == [handler]

    async def test_failing_handler_does_not_break_publish(self):
        """Test a failing handler leaves other handlers and the publisher unaffected."""
        bus = InMemoryEventBus()
        handler = RecordingHandler()
        bus.subscribe(AuthorizationActivated, FailingHandler())
        bus.subscribe(AuthorizationActivated, handler)

        await bus.publish(AuthorizationActivated(aggregate_id="CODE"))

        assert len(handler.events) == 1


class TestClientEvents:
    """Tests for client action event shapes."""

    def test_activation_action_name(self):
        """Test repeat activations are reported as reactivate."""
        assert AuthorizationActivated(aggregate_id="C").action == "activate"
        assert AuthorizationActivated(aggregate_id="C", is_new_activation=False).action == (
            "reactivate"
        )

    def test_rejection(self):
        """Test rejections report the failed action and reason."""
        event = ClientActionRejected(
            aggregate_id="C", rejected_action="rebind", reason="REBIND_LIMIT_REACHED"
        )

        assert event.action == "rebind"
        assert event.success is False
        assert event.message == "REBIND_LIMIT_REACHED"
        assert event.to_dict()["event_type"] == "ClientActionRejected"
