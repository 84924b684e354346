import logging
import unittest
import unittest.mock

from streamid import text
from streamid.binary import StreamId, StreamTarget, StreamTrack
from streamid.errors import (
    InvalidEncoding,
    InvalidPrefix,
    InvalidTrack,
    ShortBufferError,
)
from streamid.text import (
    decode_streamid,
    decode_streamid_urisafe,
    encode_streamid,
    encode_streamid_urisafe,
)


PUBLISHER = StreamId(1, 1)
PUBLISHER_TEXT = "#!RgAEAAQ"

SUBSCRIBER = StreamId(1, 2, StreamTarget(3, StreamTrack.CONTENT_AUDIO))
SUBSCRIBER_TEXT = "#!RAAEAAgADAQ"


class EncodeTestCase(unittest.TestCase):
    def test_encode_publisher(self):
        self.assertEqual(encode_streamid(PUBLISHER), PUBLISHER_TEXT)

    def test_encode_subscriber(self):
        self.assertEqual(encode_streamid(SUBSCRIBER), SUBSCRIBER_TEXT)

    def test_encode_urisafe(self):
        self.assertEqual(encode_streamid_urisafe(PUBLISHER), "%23!RgAEAAQ")
        self.assertEqual(encode_streamid_urisafe(SUBSCRIBER), "%23!RAAEAAgADAQ")

    def test_no_padding_is_emitted(self):
        for stream_id in (PUBLISHER, SUBSCRIBER, StreamId(0x7FFF, 0xFFFF)):
            with self.subTest(f"Check {stream_id!r} has no padding"):
                self.assertNotIn("=", encode_streamid(stream_id))
                self.assertNotIn("=", encode_streamid_urisafe(stream_id))

    def test_encode_failure_is_fatal(self):
        with unittest.mock.patch.object(
            StreamId, "encode", side_effect=ShortBufferError("Boom!")
        ):
            with self.assertLogs("streamid.text", level=logging.ERROR) as log:
                with self.assertRaises(RuntimeError) as cm:
                    encode_streamid(PUBLISHER)
        self.assertIn("Error encoding stream id", log.output[0])
        self.assertIsInstance(cm.exception.__cause__, ShortBufferError)

    def test_out_of_range_version_is_fatal(self):
        stream_id = SUBSCRIBER._replace(version=0x8000)
        with self.assertLogs("streamid.text", level=logging.ERROR):
            with self.assertRaises(RuntimeError) as cm:
                encode_streamid(stream_id)
        self.assertIsInstance(cm.exception.__cause__, ValueError)


class DecodeTestCase(unittest.TestCase):
    def test_decode_publisher(self):
        stream_id = decode_streamid(PUBLISHER_TEXT)
        self.assertEqual(stream_id, PUBLISHER)
        self.assertTrue(stream_id.is_publisher())

    def test_decode_subscriber(self):
        self.assertEqual(decode_streamid(SUBSCRIBER_TEXT), SUBSCRIBER)

    def test_missing_prefix(self):
        for value in ("XYZgAEAAQ", "gAEAAQ", "#!rgAEAAQ", " #!RgAEAAQ", "", "#!", None):
            with self.subTest(f"Check {value!r} is rejected"):
                with self.assertRaises(InvalidPrefix):
                    decode_streamid(value)

    def test_invalid_prefix_is_logged(self):
        with self.assertLogs("streamid.text", level=logging.DEBUG) as log:
            with self.assertRaises(InvalidPrefix):
                decode_streamid("XYZ")
        self.assertIn("prefix", log.output[0])

    def test_urisafe_text_needs_unescaping(self):
        for stream_id in (PUBLISHER, SUBSCRIBER):
            with self.subTest(f"Check urisafe form of {stream_id!r}"):
                urisafe = encode_streamid_urisafe(stream_id)
                with self.assertRaises(InvalidPrefix):
                    decode_streamid(urisafe)
                unescaped = urisafe.replace("%23", "#", 1)
                self.assertEqual(decode_streamid(unescaped), stream_id)

    def test_decode_urisafe(self):
        self.assertEqual(decode_streamid_urisafe("%23!RgAEAAQ"), PUBLISHER)
        self.assertEqual(decode_streamid_urisafe(PUBLISHER_TEXT), PUBLISHER)
        with self.assertRaises(InvalidPrefix):
            decode_streamid_urisafe("%2523!RgAEAAQ")

    def test_invalid_encoding(self):
        cases = (
            ("padding", "#!RgAEAAQ=="),
            ("url alphabet", "#!RgAEA-Q"),
            ("whitespace", "#!RgAEA AQ"),
            ("impossible length", "#!RgAEAA"),
            ("non-zero trailing bits", "#!RgAEAAR"),
            ("more than 16 bytes", "#!R" + "A" * 23),
            ("non-ascii", "#!RgAEAAé"),
        )
        for name, value in cases:
            with self.subTest(f"Check {name} is rejected"):
                with self.assertRaises(InvalidEncoding):
                    decode_streamid(value)

    def test_sixteen_bytes_is_accepted(self):
        # 16 zero bytes; only the first 7 are read.
        stream_id = decode_streamid("#!R" + "A" * 22)
        self.assertEqual(stream_id, StreamId(0, 0, StreamTarget(0, StreamTrack.VIDEO)))

    def test_short_body(self):
        # A 4 byte body with the publisher flag clear.
        with self.assertRaises(ShortBufferError):
            decode_streamid("#!RAAEAAg")
        with self.assertRaises(ShortBufferError):
            decode_streamid("#!R")

    def test_invalid_track(self):
        with self.assertRaises(InvalidTrack):
            decode_streamid("#!RAAEAAgADAw")

    def test_roundtrip(self):
        values = [StreamId(v, u) for v in (0, 1, 0x7FFF) for u in (0, 0xBEEF, 0xFFFF)]
        values.extend(
            StreamId.subscriber(0x7FFF, 0xFFFF, 0xFFFF, track) for track in StreamTrack
        )
        for stream_id in values:
            with self.subTest(f"Check roundtrip of {stream_id!r}"):
                self.assertEqual(decode_streamid(encode_streamid(stream_id)), stream_id)
                self.assertEqual(
                    decode_streamid_urisafe(encode_streamid_urisafe(stream_id)),
                    stream_id,
                )

    def test_constants(self):
        self.assertEqual(text.PREFIX, "#!R")
        self.assertEqual(text.URISAFE_PREFIX, "%23!R")
        self.assertEqual(text.SCRATCH_SIZE, 16)


if __name__ == "__main__":
    unittest.main()
