"""Unit tests for MongoUserRepository against a mocked collection."""

import unittest
from datetime import date, datetime, timezone
from unittest.mock import MagicMock

from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb import USERS_COLLECTION_NAME
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import DuplicateError, NotFoundError
from domain.model.user import Gender, User

NOW = datetime(2026, 1, 23, 12, 0, 0, tzinfo=timezone.utc)


def make_doc(**overrides) -> dict:
    doc = {
        '_id': 'user-1',
        'login': 'bob',
        'password_hash': '$2b$12$hash',
        'name': 'Bob',
        'gender': 'male',
        'is_admin': False,
        'birthday': datetime(1990, 5, 17, tzinfo=timezone.utc),
        'created_on': NOW,
        'created_by': 'admin',
        'modified_on': None,
        'modified_by': None,
        'revoked_on': None,
        'revoked_by': None,
    }
    doc.update(overrides)
    return doc


class MongoRepoTestCase(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        self.db = MagicMock()
        self.db.__getitem__.return_value = self.collection
        self.repo = MongoUserRepository(self.db)


class TestConversion(MongoRepoTestCase):

    def test_uses_users_collection(self):
        self.db.__getitem__.assert_called_with(USERS_COLLECTION_NAME)

    def test_get_by_login_converts_document(self):
        self.collection.find_one.return_value = make_doc()

        user = self.repo.get_by_login('bob')

        self.assertIsInstance(user, User)
        self.assertEqual(user.id, 'user-1')
        self.assertEqual(user.gender, Gender.MALE)
        self.assertEqual(user.birthday, date(1990, 5, 17))
        self.assertTrue(user.is_active)
        self.collection.find_one.assert_called_once_with({'login': 'bob'})

    def test_get_by_login_not_found(self):
        self.collection.find_one.return_value = None
        self.assertIsNone(self.repo.get_by_login('ghost'))

    def test_insert_stores_birthday_as_midnight_utc(self):
        user = User.create(
            login='bob', password_hash='h', name='Bob', gender=Gender.FEMALE,
            created_by='admin', birthday=date(1990, 5, 17),
        )

        self.repo.insert(user)

        doc = self.collection.insert_one.call_args[0][0]
        self.assertEqual(doc['_id'], user.id)
        self.assertEqual(doc['gender'], 'female')
        self.assertEqual(doc['birthday'], datetime(1990, 5, 17, tzinfo=timezone.utc))
        self.assertNotIn('password', doc)


class TestWrites(MongoRepoTestCase):

    def _user(self) -> User:
        self.collection.find_one.return_value = make_doc()
        return self.repo.get_by_login('bob')

    def test_insert_duplicate_key_raises_duplicate_error(self):
        self.collection.insert_one.side_effect = DuplicateKeyError('E11000 duplicate key')

        with self.assertRaises(DuplicateError):
            self.repo.insert(self._user())

    def test_insert_store_failure_propagates(self):
        self.collection.insert_one.side_effect = PyMongoError('connection lost')

        with self.assertRaises(PyMongoError):
            self.repo.insert(self._user())

    def test_update_replaces_document_by_id(self):
        self.collection.replace_one.return_value.matched_count = 1
        user = self._user()

        self.repo.update(user)

        filter_, doc = self.collection.replace_one.call_args[0]
        self.assertEqual(filter_, {'_id': 'user-1'})
        self.assertEqual(doc['login'], 'bob')

    def test_update_duplicate_login_raises(self):
        self.collection.replace_one.side_effect = DuplicateKeyError('E11000 duplicate key')

        with self.assertRaises(DuplicateError):
            self.repo.update(self._user())

    def test_update_missing_raises_not_found(self):
        self.collection.replace_one.return_value.matched_count = 0

        with self.assertRaises(NotFoundError):
            self.repo.update(self._user())

    def test_delete_missing_raises_not_found(self):
        self.collection.delete_one.return_value.deleted_count = 0

        with self.assertRaises(NotFoundError):
            self.repo.delete(self._user())

    def test_delete_removes_by_id(self):
        self.collection.delete_one.return_value.deleted_count = 1

        self.repo.delete(self._user())

        self.collection.delete_one.assert_called_once_with({'_id': 'user-1'})


class TestQueries(MongoRepoTestCase):

    def test_exists_by_login(self):
        self.collection.count_documents.return_value = 1

        self.assertTrue(self.repo.exists_by_login('bob'))
        self.collection.count_documents.assert_called_once_with({'login': 'bob'}, limit=1)

    def test_find_many_active_sorted_by_created_on(self):
        self.collection.find.return_value.sort.return_value = [make_doc()]

        users = self.repo.find_many(active_only=True)

        self.assertEqual(len(users), 1)
        self.collection.find.assert_called_once_with({'revoked_on': None})
        self.collection.find.return_value.sort.assert_called_once_with('created_on', 1)

    def test_find_many_by_birthday_cutoff(self):
        self.collection.find.return_value.sort.return_value = []

        self.repo.find_many(born_on_or_before=date(2000, 1, 1), order_by='birthday')

        self.collection.find.assert_called_once_with(
            {'birthday': {'$lte': datetime(2000, 1, 1, tzinfo=timezone.utc)}}
        )
        self.collection.find.return_value.sort.assert_called_once_with('birthday', 1)


class TestEnsureIndexes(MongoRepoTestCase):

    def test_creates_unique_login_index(self):
        self.assertTrue(self.repo.ensure_indexes())

        self.collection.create_index.assert_any_call([('login', 1)], name='idx_users_login', unique=True)

    def test_returns_false_on_store_error(self):
        self.collection.create_index.side_effect = PyMongoError('down')

        self.assertFalse(self.repo.ensure_indexes())


if __name__ == '__main__':
    unittest.main()
