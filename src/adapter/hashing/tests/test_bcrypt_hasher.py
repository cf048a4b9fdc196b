"""Unit tests for BcryptPasswordHasher."""

import unittest

from adapter.hashing.bcrypt_hasher import BCRYPT_MAX_PASSWORD_BYTES, BcryptPasswordHasher


class TestBcryptPasswordHasher(unittest.TestCase):

    def setUp(self):
        # Minimum cost keeps the suite fast
        self.hasher = BcryptPasswordHasher(rounds=4)

    def test_hash_is_not_plaintext_and_verifies(self):
        hashed = self.hasher.hash('pass1234')

        self.assertNotEqual(hashed, 'pass1234')
        self.assertTrue(hashed.startswith('$2'))
        self.assertTrue(self.hasher.verify('pass1234', hashed))

    def test_wrong_password_does_not_verify(self):
        hashed = self.hasher.hash('pass1234')
        self.assertFalse(self.hasher.verify('pass12345', hashed))

    def test_hash_is_salted(self):
        self.assertNotEqual(self.hasher.hash('pass1234'), self.hasher.hash('pass1234'))

    def test_empty_password_fails_fast(self):
        with self.assertRaises(ValueError):
            self.hasher.hash('')
        with self.assertRaises(ValueError):
            self.hasher.verify('', '$2b$04$abc')

    def test_72_byte_password_accepted(self):
        password = 'a' * BCRYPT_MAX_PASSWORD_BYTES
        self.assertTrue(self.hasher.verify(password, self.hasher.hash(password)))

    def test_longer_password_rejected_not_truncated(self):
        hashed = self.hasher.hash('a' * BCRYPT_MAX_PASSWORD_BYTES)
        too_long = 'a' * (BCRYPT_MAX_PASSWORD_BYTES + 8)

        with self.assertRaises(ValueError):
            self.hasher.hash(too_long)
        with self.assertRaises(ValueError):
            self.hasher.verify(too_long, hashed)

    def test_limit_counts_bytes_not_characters(self):
        # 'ж' is two bytes in UTF-8
        with self.assertRaises(ValueError):
            self.hasher.hash('ж' * 37)


if __name__ == '__main__':
    unittest.main()
