from unittest import TestCase
from ttlset.expiry_queue import ExpiryQueue, ExpiryRecord


class TestExpiryQueue(TestCase):
    def test_ordering(self):
        queue = ExpiryQueue()
        self.assertIsNone(queue.peek())
        self.assertEqual(0, len(queue))
        self.assertFalse(queue)
        for gen, deadline in enumerate((5.0, 1.0, 3.0, 2.0, 4.0)):
            queue.push(ExpiryRecord(f'e{gen}', deadline, gen))
        self.assertTrue(queue)
        self.assertEqual(1.0, queue.peek().expire_at)
        self.assertListEqual([1.0, 2.0, 3.0, 4.0, 5.0], [queue.pop().expire_at for _ in range(5)])
        self.assertRaises(IndexError, queue.pop)

    def test_ties_come_out_in_push_order(self):
        queue = ExpiryQueue()
        for gen in range(20):
            queue.push(ExpiryRecord(gen, 7.0, gen))
        self.assertListEqual(list(range(20)), [r.element for r in queue.pop_expired(7.0)])

    def test_same_generation_does_not_compare_records(self):
        queue = ExpiryQueue()
        queue.push(ExpiryRecord(object(), 1.0, 1))
        queue.push(ExpiryRecord(object(), 1.0, 1))
        self.assertEqual(2, len(list(queue.pop_expired(1.0))))

    def test_pop_expired(self):
        queue = ExpiryQueue()
        for gen, deadline in enumerate((1.0, 2.0, 2.5, 10.0)):
            queue.push(ExpiryRecord(gen, deadline, gen))
        self.assertListEqual([0, 1], [r.element for r in queue.pop_expired(2.0)])
        self.assertEqual(2, len(queue))
        self.assertListEqual([], list(queue.pop_expired(2.0)))
        self.assertEqual(2.5, queue.peek().expire_at)

    def test_stale_records_are_still_popped(self):
        queue = ExpiryQueue()
        record = ExpiryRecord('x', 1.0, 1)
        queue.push(record)
        record.invalidate()
        popped = list(queue.pop_expired(1.0))
        self.assertEqual(1, len(popped))
        self.assertTrue(popped[0].stale)

    def test_clear(self):
        queue = ExpiryQueue()
        queue.push(ExpiryRecord('x', 1.0, 1))
        queue.clear()
        self.assertEqual(0, len(queue))
        self.assertIsNone(queue.peek())
