import threading
import unittest

from pytaws.core.data_structures import FlightSample
from pytaws.io.replay import LiveSampleFeed, SampleReplay


def make_samples(n):
    return [FlightSample(0.0, 0.0, 90.0, 80.0, 0.0, 0.0, 60.0, 30.0, 1000.0 + i) for i in range(n)]


class TestSampleReplay(unittest.TestCase):

    def test_replays_all_samples_in_order(self):
        received = []
        replay = SampleReplay(make_samples(5), received.append, rate=0.001)
        replay.start()
        replay.join(timeout=10)
        self.assertFalse(replay.is_running)
        self.assertEqual(replay.index, 5)
        self.assertEqual([s.altitude for s in received], [1000.0, 1001.0, 1002.0, 1003.0, 1004.0])

    def test_stop(self):
        first = threading.Event()
        received = []

        def callback(sample):
            received.append(sample)
            first.set()

        replay = SampleReplay(make_samples(100), callback, rate=10.0)
        replay.start()
        self.assertTrue(first.wait(timeout=10))
        replay.stop()
        self.assertFalse(replay.is_running)
        self.assertEqual(len(received), 1)
        replay.stop()  # idempotent

    def test_callback_error_stops_replay(self):
        def callback(sample):
            raise RuntimeError("boom")

        replay = SampleReplay(make_samples(3), callback, rate=0.001)
        with self.assertLogs('pytaws.io.replay', level='ERROR'):
            replay.start()
            replay.join(timeout=10)
        self.assertEqual(replay.index, 0)

    def test_invalid_rate(self):
        with self.assertRaises(ValueError):
            SampleReplay([], print, rate=0.0)

    def test_empty(self):
        replay = SampleReplay([], print, rate=0.01)
        replay.start()
        replay.join(timeout=10)
        self.assertEqual(replay.index, 0)


class TestLiveSampleFeed(unittest.TestCase):

    def test_push_to_subscribers(self):
        feed = LiveSampleFeed()
        a, b = [], []
        feed.subscribe(a.append)
        feed.subscribe(b.append)
        sample = make_samples(1)[0]
        self.assertTrue(feed.push(sample))
        self.assertEqual(a, [sample])
        self.assertEqual(b, [sample])

        feed.unsubscribe(b.append)
        feed.push(sample)
        self.assertEqual(len(a), 2)
        self.assertEqual(len(b), 1)

    def test_disabled_feed_drops(self):
        feed = LiveSampleFeed(enabled=False)
        received = []
        feed.subscribe(received.append)
        self.assertFalse(feed.push(make_samples(1)[0]))
        self.assertEqual(received, [])

    def test_push_line(self):
        feed = LiveSampleFeed()
        received = []
        feed.subscribe(received.append)
        self.assertTrue(feed.push_line("0;0;45;80;0;0;60;30;900"))
        self.assertFalse(feed.push_line("0;0;45"))
        self.assertEqual(len(received), 1)
        self.assertEqual(received[0].heading, 45.0)
        self.assertEqual(feed.dropped, 1)


if __name__ == '__main__':
    unittest.main()
