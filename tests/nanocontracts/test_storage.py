from twisted.trial import unittest

from nanowallet.nanocontracts.exception import NCInsufficientFunds, NCViewMethodError
from nanowallet.nanocontracts.storage import NCChangesTracker, NCMemoryStorage, NCMemoryStorageFactory

TOKEN_UID = b'\x00' * 20


class NCMemoryStorageTestCase(unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.storage = NCMemoryStorage(nc_id=b'\x01' * 20)

    def test_get_put_delete(self) -> None:
        with self.assertRaises(KeyError):
            self.storage.get('a')
        self.assertIsNone(self.storage.get('a', default=None))
        self.assertFalse(self.storage.has('a'))

        self.storage.put('a', 1)
        self.assertEqual(self.storage.get('a'), 1)
        self.assertTrue(self.storage.has('a'))

        self.storage.delete('a')
        self.assertFalse(self.storage.has('a'))
        # Deleting a missing key is allowed.
        self.storage.delete('a')

    def test_none_value_is_stored(self) -> None:
        self.storage.put('a', None)
        self.assertTrue(self.storage.has('a'))
        self.assertIsNone(self.storage.get('a'))

    def test_values_are_copied(self) -> None:
        value = [1, 2]
        self.storage.put('a', value)
        value.append(3)
        self.assertEqual(self.storage.get('a'), [1, 2])

    def test_lock(self) -> None:
        self.storage.lock()
        with self.assertRaises(NCViewMethodError):
            self.storage.put('a', 1)
        with self.assertRaises(NCViewMethodError):
            self.storage.add_balance(TOKEN_UID, 1)
        self.storage.unlock()
        self.storage.put('a', 1)

    def test_balances(self) -> None:
        self.assertEqual(self.storage.get_balance(TOKEN_UID), 0)
        self.storage.add_balance(TOKEN_UID, 10)
        self.storage.add_balance(TOKEN_UID, -3)
        self.assertEqual(self.storage.get_balance(TOKEN_UID), 7)
        self.assertEqual(list(self.storage.get_all_balances().values()), [7])

    def test_factory_returns_the_same_storage(self) -> None:
        factory = NCMemoryStorageFactory()
        self.assertIs(factory(b'\x01'), factory(b'\x01'))
        self.assertIsNot(factory(b'\x01'), factory(b'\x02'))


class NCChangesTrackerTestCase(unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.nc_id = b'\x01' * 20
        self.storage = NCMemoryStorage(nc_id=self.nc_id)
        self.storage.put('kept', 'value')
        self.tracker = NCChangesTracker(self.nc_id, self.storage)

    def test_changes_stay_in_the_tracker(self) -> None:
        self.tracker.put('a', 1)
        self.tracker.delete('kept')

        self.assertEqual(self.tracker.get('a'), 1)
        self.assertFalse(self.tracker.has('kept'))
        self.assertEqual(self.tracker.get('kept', default='gone'), 'gone')
        with self.assertRaises(KeyError):
            self.tracker.get('kept')

        self.assertFalse(self.storage.has('a'))
        self.assertEqual(self.storage.get('kept'), 'value')

    def test_commit(self) -> None:
        self.tracker.put('a', 1)
        self.tracker.delete('kept')
        self.tracker.add_balance(TOKEN_UID, 5)
        self.tracker.commit()

        self.assertEqual(self.storage.get('a'), 1)
        self.assertFalse(self.storage.has('kept'))
        self.assertEqual(self.storage.get_balance(TOKEN_UID), 5)

        with self.assertRaises(RuntimeError):
            self.tracker.put('b', 2)

    def test_reset(self) -> None:
        self.tracker.put('a', 1)
        self.tracker.add_balance(TOKEN_UID, 5)
        self.assertFalse(self.tracker.is_empty())

        self.tracker.reset()
        self.assertTrue(self.tracker.is_empty())
        self.assertFalse(self.tracker.has('a'))
        self.assertEqual(self.tracker.get_balance(TOKEN_UID), 0)

    def test_stacked_trackers(self) -> None:
        inner = NCChangesTracker(self.nc_id, self.tracker)
        inner.put('a', 1)
        self.assertFalse(self.tracker.has('a'))

        inner.commit()
        self.assertEqual(self.tracker.get('a'), 1)
        self.assertFalse(self.storage.has('a'))

    def test_balances(self) -> None:
        self.storage.add_balance(TOKEN_UID, 10)
        self.tracker.add_balance(TOKEN_UID, -4)
        self.assertEqual(self.tracker.get_balance(TOKEN_UID), 6)
        self.assertEqual(self.storage.get_balance(TOKEN_UID), 10)
        self.tracker.validate_balances()

        self.tracker.add_balance(TOKEN_UID, -7)
        with self.assertRaises(NCInsufficientFunds):
            self.tracker.validate_balances()

    def test_zero_balance_diff_is_empty(self) -> None:
        self.tracker.add_balance(TOKEN_UID, 3)
        self.tracker.add_balance(TOKEN_UID, -3)
        self.assertTrue(self.tracker.is_empty())

    def test_locked_tracker(self) -> None:
        self.tracker.lock()
        with self.assertRaises(NCViewMethodError):
            self.tracker.put('a', 1)
