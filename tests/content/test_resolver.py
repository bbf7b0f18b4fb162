"""
ContentResolver: decode and shape check happen before any storage call.
"""
import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

from sqlalchemy.exc import OperationalError

from streamgate.core.errors import StorageUnavailableError
from streamgate.db.session import storage_guard
from streamgate.links.codec import encode
from streamgate.services.content.resolver import ContentResolver


class TestContentResolver(unittest.TestCase):
    def setUp(self):
        self.content = MagicMock()
        self.resolver = ContentResolver(self.content)

    def test_undecodable_token_skips_storage(self):
        for token in ("", "not*a*token", "%%%", "TFA", None):
            self.assertIsNone(self.resolver.resolve(token))
        self.content.get.assert_not_called()
        self.assertEqual(self.content.get.call_count, 0)

    def test_decodable_but_malformed_identifier_skips_storage(self):
        self.assertIsNone(self.resolver.resolve(encode("abc-123")))
        self.content.get.assert_not_called()

    def test_unknown_identifier_is_not_found(self):
        ident = str(uuid4())
        self.content.get.return_value = None
        self.assertIsNone(self.resolver.resolve(encode(ident)))
        self.content.get.assert_called_once_with(ident)

    def test_known_identifier_returns_item(self):
        ident = str(uuid4())
        item = SimpleNamespace(id=ident, title="x")
        self.content.get.return_value = item
        self.assertIs(self.resolver.resolve(encode(ident)), item)
        self.assertEqual(self.content.get.call_count, 1)

    def test_resolve_id_does_no_io(self):
        ident = str(uuid4())
        self.assertEqual(self.resolver.resolve_id(encode(ident)), ident)
        self.assertIsNone(self.resolver.resolve_id("garbage"))
        self.content.get.assert_not_called()

    def test_storage_failure_is_not_masked_as_not_found(self):
        def unavailable(_):
            with storage_guard():
                raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        self.content.get.side_effect = unavailable
        with self.assertRaises(StorageUnavailableError):
            self.resolver.resolve(encode(str(uuid4())))
