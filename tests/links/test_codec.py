"""
Unit tests for the token codec: url-safe output, marker checks, decode never raises.
"""
import base64
import random
import re
import string
import unittest
from uuid import uuid4

from streamgate.links.codec import build_share_link, decode, encode

URLSAFE = re.compile(r"^[A-Za-z0-9_-]+$")


class TestEncode(unittest.TestCase):
    def test_known_identifier_round_trips(self):
        token = encode("abc-123")
        self.assertEqual(decode(token), "abc-123")

    def test_token_matches_reference_transform(self):
        expected = base64.urlsafe_b64encode(b"LP_abc-123_VID").decode().rstrip("=")
        self.assertEqual(encode("abc-123"), expected)

    def test_deterministic(self):
        ident = str(uuid4())
        self.assertEqual(encode(ident), encode(ident))

    def test_slash_is_remapped(self):
        # "???" lands on its own base64 group: "Pz8/"
        token = encode("???")
        self.assertIn("Pz8_", token)
        self.assertEqual(decode(token), "???")

    def test_plus_is_remapped(self):
        # ">>>" -> "Pj4+"
        token = encode(">>>")
        self.assertIn("Pj4-", token)
        self.assertEqual(decode(token), ">>>")

    def test_output_is_url_safe_and_unpadded(self):
        for ident in ["a", "ab", "abc", str(uuid4()), "ção/ñ?+=", ">>>???"]:
            token = encode(ident)
            self.assertRegex(token, URLSAFE)
            self.assertEqual(decode(token), ident)

    def test_empty_identifier_rejected(self):
        with self.assertRaises(ValueError):
            encode("")


class TestDecodeRobustness(unittest.TestCase):
    def test_none_and_empty(self):
        self.assertIsNone(decode(None))
        self.assertIsNone(decode(""))

    def test_non_string_input(self):
        self.assertIsNone(decode(12345))  # type: ignore[arg-type]

    def test_base64_without_marker(self):
        token = base64.urlsafe_b64encode(b"some-other-id").decode().rstrip("=")
        self.assertIsNone(decode(token))

    def test_prefix_only_or_suffix_only(self):
        for raw in (b"LP_abc", b"abc_VID", b"XX_abc_VID", b"LP_abc_VIDX"):
            token = base64.urlsafe_b64encode(raw).decode().rstrip("=")
            self.assertIsNone(decode(token), raw)

    def test_marker_without_identifier(self):
        token = base64.urlsafe_b64encode(b"LP__VID").decode().rstrip("=")
        self.assertIsNone(decode(token))

    def test_shorter_than_marker(self):
        self.assertIsNone(decode("TFA"))  # "LP"

    def test_chars_outside_alphabet(self):
        token = encode("abc-123")
        for bad in ("+", "/", "=", "!", " ", "é", "%2F"):
            self.assertIsNone(decode(token[:4] + bad + token[4:]), bad)

    def test_padded_token_rejected(self):
        self.assertIsNone(decode(encode("abc-123") + "="))

    def test_unrepairable_length(self):
        token = encode("abc-123")
        # length % 4 == 1 cannot be fixed by padding
        bad = token + "A" * ((1 - len(token)) % 4)
        self.assertEqual(len(bad) % 4, 1)
        self.assertIsNone(decode(bad))

    def test_one_token_per_identifier(self):
        ident = str(uuid4())
        token = encode(ident)
        # 43 payload bytes leave unused low bits in the final character
        self.assertNotEqual(len(token) % 4, 0)
        alphabet = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-_"
        twin = token[:-1] + alphabet[alphabet.index(token[-1]) ^ 1]
        self.assertEqual(base64.urlsafe_b64decode(twin + "=" * (-len(twin) % 4)),
                         base64.urlsafe_b64decode(token + "=" * (-len(token) % 4)))
        self.assertIsNone(decode(twin))
        self.assertEqual(decode(token), ident)

    def test_invalid_utf8_payload(self):
        token = base64.urlsafe_b64encode(b"LP_\xff\xfe_VID").decode().rstrip("=")
        self.assertIsNone(decode(token))

    def test_random_strings_never_raise(self):
        rng = random.Random(1337)
        alphabet = string.ascii_letters + string.digits + "-_+/=.~%!é "
        for _ in range(2000):
            s = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 40)))
            result = decode(s)
            if result is not None:
                # only strings that really carry the marker may decode
                self.assertEqual(encode(result), s)

    def test_truncated_token(self):
        token = encode(str(uuid4()))
        self.assertIsNone(decode(token[:-3]))


class TestShareLink(unittest.TestCase):
    def test_video_link(self):
        ident = str(uuid4())
        link = build_share_link(ident, base_url="https://example.com/")
        self.assertEqual(link, f"https://example.com/v/{encode(ident)}")

    def test_dorama_link(self):
        link = build_share_link("abc", base_url="https://example.com", kind="dorama")
        self.assertTrue(link.startswith("https://example.com/dorama/"))
        self.assertEqual(decode(link.rsplit("/", 1)[1]), "abc")

    def test_default_base_from_settings(self):
        link = build_share_link("abc")
        self.assertTrue(link.startswith("https://linkproibido.com/v/"))

    def test_unknown_kind(self):
        with self.assertRaises(ValueError):
            build_share_link("abc", base_url="https://example.com", kind="movie")
