"""
Tests for the event channel and request supersession.
"""
from claimflow.engine import EventChannel, EventRecorder, FulfillmentTransitioned, SupersessionGuard
from claimflow.models import FlowStep, FulfillmentStatus

from tests.conftest import make_record


def make_event(action="confirm_excess"):
    record = make_record(status=FulfillmentStatus.AWAITING_APPOINTMENT)
    return FulfillmentTransitioned(
        claim_id="CLM-001",
        action=action,
        previous_status=FulfillmentStatus.PENDING_EXCESS,
        status=record.status,
        step=FlowStep.SCHEDULE,
        record=record,
    )


class TestEventChannel:
    """Tests for publish/subscribe."""

    def test_delivers_in_subscription_order(self):
        channel = EventChannel()
        received = []
        channel.subscribe(lambda e: received.append(("first", e.action)))
        channel.subscribe(lambda e: received.append(("second", e.action)))

        assert channel.publish(make_event()) == 2
        assert received == [("first", "confirm_excess"), ("second", "confirm_excess")]

    def test_unsubscribe(self):
        channel = EventChannel()
        recorder = EventRecorder()
        unsubscribe = channel.subscribe(recorder)
        unsubscribe()
        unsubscribe()

        assert channel.publish(make_event()) == 0
        assert recorder.events == []
        assert channel.subscriber_count == 0

    def test_failing_handler_does_not_stop_delivery(self):
        channel = EventChannel()
        recorder = EventRecorder()

        def broken(event):
            raise RuntimeError("handler bug")

        channel.subscribe(broken)
        channel.subscribe(recorder)

        assert channel.publish(make_event()) == 1
        assert recorder.last.action == "confirm_excess"

    def test_event_to_dict(self):
        data = make_event().to_dict()
        assert data["previous_status"] == "pending_excess"
        assert data["status"] == "awaiting_appointment"
        assert data["step"] == 4

    def test_recorder_starts_empty(self):
        assert EventRecorder().last is None


class TestSupersessionGuard:
    """Only the newest ticket per key is current."""

    def test_newest_ticket_wins(self):
        guard = SupersessionGuard()
        first = guard.issue("slots")
        second = guard.issue("slots")
        assert not guard.is_current("slots", first)
        assert guard.is_current("slots", second)

    def test_keys_are_independent(self):
        guard = SupersessionGuard()
        dates = guard.issue(("CLM-001", "dates"))
        guard.issue(("CLM-001", "slots"))
        guard.issue(("CLM-002", "dates"))
        assert guard.is_current(("CLM-001", "dates"), dates)

    def test_invalidate(self):
        guard = SupersessionGuard()
        ticket = guard.issue("dates")
        guard.invalidate("dates")
        assert not guard.is_current("dates", ticket)
