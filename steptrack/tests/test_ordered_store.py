import unittest
from steptrack.domain.OrderedStore import OrderedStore


class TestOrderedStore(unittest.TestCase):

    def setUp(self):
        self.store = OrderedStore(lambda item: item[0])

    def test_insert_keeps_key_order(self):
        for key in (5, 1, 4, 2, 3):
            self.store.insert((key, f"v{key}"))
        self.assertEqual(self.store.keys(), [1, 2, 3, 4, 5])
        self.assertEqual(self.store.size(), 5)
        self.assertEqual(len(self.store), 5)

    def test_duplicate_insert_is_ignored(self):
        self.assertTrue(self.store.insert((1, "first")))
        self.assertFalse(self.store.insert((1, "second")))
        self.assertEqual(self.store.size(), 1)
        self.assertEqual(self.store.search(1), (1, "first"))

    def test_search_and_remove(self):
        self.store.insert((10, "ten"))
        self.store.insert((20, "twenty"))
        self.assertEqual(self.store.search(20), (20, "twenty"))
        self.assertIsNone(self.store.search(15))
        self.assertTrue(self.store.remove(10))
        self.assertFalse(self.store.remove(10))
        self.assertEqual(self.store.keys(), [20])

    def test_search_returns_stored_object(self):
        self.store.insert((1, ["a"]))
        self.store.search(1)[1].append("b")
        self.assertEqual(self.store.search(1), (1, ["a", "b"]))

    def test_range_is_inclusive(self):
        for key in range(1, 11):
            self.store.insert((key, key * 10))
        self.assertEqual([k for k, _ in self.store.range(3, 6)], [3, 4, 5, 6])
        self.assertEqual([k for k, _ in self.store.range(0, 2)], [1, 2])
        self.assertEqual([k for k, _ in self.store.range(9, 50)], [9, 10])
        self.assertEqual(self.store.range(11, 20), [])
        self.assertEqual(self.store.range(6, 3), [])

    def test_range_then_search_is_repeatable(self):
        for key in (2, 4, 6, 8):
            self.store.insert((key, str(key)))
        first = self.store.range(3, 8)
        second = self.store.range(3, 8)
        self.assertEqual(first, second)
        for key, value in first:
            self.assertEqual(self.store.search(key), (key, value))

    def test_string_keys_use_lexicographic_order(self):
        store = OrderedStore(lambda item: item[0])
        for key in ("G2", "G10", "G1", "G3"):
            store.insert((key, None))
        self.assertEqual(store.keys(), ["G1", "G10", "G2", "G3"])
        self.assertEqual([k for k, _ in store.range("G1", "G2")], ["G1", "G10", "G2"])

    def test_custom_comparator_orders_and_matches(self):
        store = OrderedStore(lambda item: item[0], less=lambda a, b: a > b)
        for key in (1, 3, 2):
            store.insert((key, None))
        self.assertEqual(store.keys(), [3, 2, 1])
        # Range bounds follow the comparator's order
        self.assertEqual([k for k, _ in store.range(3, 2)], [3, 2])

    def test_equality_comes_from_comparator(self):
        store = OrderedStore(lambda item: item[0], less=lambda a, b: a.lower() < b.lower())
        store.insert(("alpha", 1))
        self.assertFalse(store.insert(("ALPHA", 2)))
        self.assertEqual(store.search("Alpha"), ("alpha", 1))
        self.assertTrue(store.remove("ALPHA"))
        self.assertEqual(store.size(), 0)

    def test_all_values_is_a_copy_of_the_sequence(self):
        self.store.insert((1, "one"))
        values = self.store.all_values()
        values.clear()
        self.assertEqual(self.store.size(), 1)


if __name__ == '__main__':
    unittest.main()
