import json
import logging
import unittest

from streamgate.core.logging import JsonFormatter, RequestIdFilter, request_id_var


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("streamgate.test", logging.INFO, __file__, 1, "subscription_approve", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter(unittest.TestCase):
    def test_known_extras_lifted(self):
        out = json.loads(JsonFormatter().format(_record(subscription_id="s-1", outcome="transitioned", chat_id=5)))
        self.assertEqual(out["message"], "subscription_approve")
        self.assertEqual(out["subscription_id"], "s-1")
        self.assertEqual(out["outcome"], "transitioned")
        self.assertNotIn("chat_id", out)

    def test_none_extras_omitted(self):
        out = json.loads(JsonFormatter().format(_record(account_id=None)))
        self.assertNotIn("account_id", out)


class TestRequestIdFilter(unittest.TestCase):
    def test_stamps_current_request_id(self):
        token = request_id_var.set("req-42")
        try:
            record = _record()
            RequestIdFilter().filter(record)
        finally:
            request_id_var.reset(token)
        self.assertEqual(record.request_id, "req-42")

    def test_explicit_request_id_wins(self):
        token = request_id_var.set("req-42")
        try:
            record = _record(request_id="explicit")
            RequestIdFilter().filter(record)
        finally:
            request_id_var.reset(token)
        self.assertEqual(record.request_id, "explicit")

    def test_outside_request(self):
        record = _record()
        RequestIdFilter().filter(record)
        self.assertIsNone(record.request_id)
