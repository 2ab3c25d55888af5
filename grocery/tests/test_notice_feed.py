import unittest
from grocery.events.Event_Bus import EventBus
from grocery.events.event_helpers import publish_notice, publish_sync_error
from grocery.events.web_observers import NoticeFeed


class TestNoticeFeed(unittest.TestCase):

    def setUp(self):
        self.bus = EventBus()
        self.feed = NoticeFeed(max_events=5).start(self.bus)

    def test_notices_are_per_user(self):
        publish_notice("u1", "List added: Weekly", bus=self.bus)
        publish_notice("u2", "Item deleted", bus=self.bus)
        mine = self.feed.get_events("u1")
        self.assertEqual([e['message'] for e in mine['events']], ["List added: Weekly"])
        self.assertNotIn('user_id', mine['events'][0])

    def test_since_cursor(self):
        publish_notice("u1", "one", bus=self.bus)
        cursor = self.feed.get_events("u1")['next_cursor']
        publish_notice("u1", "two", bus=self.bus)
        newer = self.feed.get_events("u1", since=cursor)
        self.assertEqual([e['message'] for e in newer['events']], ["two"])
        self.assertEqual(self.feed.get_events("u1", since=newer['next_cursor'])['events'], [])

    def test_sync_errors_become_load_failed_notices(self):
        publish_sync_error("u1", "users/u1/groceryLists", "lists", "Permission denied", bus=self.bus)
        event = self.feed.get_events("u1")['events'][0]
        self.assertEqual(event['message'], "Failed to load lists: Permission denied")
        self.assertEqual(event['level'], "error")

    def test_buffer_is_capped(self):
        for i in range(8):
            publish_notice("u1", f"n{i}", bus=self.bus)
        messages = [e['message'] for e in self.feed.get_events("u1")['events']]
        self.assertEqual(messages, ["n3", "n4", "n5", "n6", "n7"])

    def test_stop_unsubscribes(self):
        self.feed.stop()
        publish_notice("u1", "ignored", bus=self.bus)
        self.assertEqual(self.feed.get_events("u1")['events'], [])


if __name__ == '__main__':
    unittest.main()
