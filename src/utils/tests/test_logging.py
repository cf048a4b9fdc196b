"""Unit tests for structured JSON logging."""

import json
import logging
import unittest

from utils.logging import REDACTED, JSONFormatter, setup_structured_logging


def make_record(msg='User created', **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name='services.user_service', level=logging.INFO, pathname=__file__,
        lineno=1, msg=msg, args=(), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter(unittest.TestCase):

    def setUp(self):
        self.formatter = JSONFormatter()

    def test_standard_fields(self):
        data = json.loads(self.formatter.format(make_record()))

        self.assertEqual(data['level'], 'INFO')
        self.assertEqual(data['logger'], 'services.user_service')
        self.assertEqual(data['message'], 'User created')
        self.assertTrue(data['timestamp'].endswith('Z'))
        self.assertNotIn('pathname', data)

    def test_extra_fields_included(self):
        data = json.loads(self.formatter.format(make_record(actorLogin='admin', targetLogin='bob')))

        self.assertEqual(data['actorLogin'], 'admin')
        self.assertEqual(data['targetLogin'], 'bob')

    def test_password_fields_redacted(self):
        data = json.loads(self.formatter.format(make_record(password='pass1234', newPassword='x')))

        self.assertEqual(data['password'], REDACTED)
        self.assertEqual(data['newPassword'], REDACTED)

    def test_non_json_values_stringified(self):
        from datetime import date
        data = json.loads(self.formatter.format(make_record(birthday=date(1990, 5, 17))))
        self.assertEqual(data['birthday'], '1990-05-17')

    def test_datetime_extra_serialized(self):
        from datetime import datetime, timezone
        revoked_on = datetime(2026, 1, 23, 12, 0, tzinfo=timezone.utc)

        data = json.loads(self.formatter.format(make_record(revokedOn=revoked_on, newPassword=revoked_on)))

        self.assertEqual(data['revokedOn'], str(revoked_on))
        self.assertEqual(data['newPassword'], REDACTED)


class TestSetupStructuredLogging(unittest.TestCase):

    def setUp(self):
        root = logging.getLogger()
        self._saved = (root.level, root.handlers[:])

    def tearDown(self):
        root = logging.getLogger()
        root.setLevel(self._saved[0])
        root.handlers = self._saved[1]

    def test_installs_json_handler_at_level(self):
        setup_structured_logging('debug')

        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(len(root.handlers), 1)
        self.assertIsInstance(root.handlers[0].formatter, JSONFormatter)


if __name__ == '__main__':
    unittest.main()
