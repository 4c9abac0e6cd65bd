from django.test import SimpleTestCase

from crash.events import Category, Event, EventBus


class EventBusTests(SimpleTestCase):
    def test_failing_listener_is_skipped(self):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(broken)
        bus.subscribe(received.append)
        event = Event(Category.INFO, "hello")

        with self.assertLogs("crash.events", level="ERROR"):
            bus.publish(event)
        self.assertEqual(received, [event])

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        unsubscribe = bus.subscribe(received.append)
        unsubscribe()
        unsubscribe()
        bus.publish("x")
        self.assertEqual(received, [])
        self.assertEqual(len(bus), 0)


class EventTests(SimpleTestCase):
    def test_event_dict(self):
        event = Event(Category.ROUND_UPDATE, "tick", {"depth": 150})
        self.assertEqual(event.to_dict()["category"], "round-update")
        self.assertEqual(event.to_dict()["data"], {"depth": 150})
        self.assertGreater(Event(Category.INFO, "later").id, event.id)
