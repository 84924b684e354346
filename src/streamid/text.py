"""
The text envelope wraps the binary form of a stream id so that it can be
carried in URLs and protocol strings.

.. code-block:: console

    +----------+---------------------------------------+
    |  prefix  |  body                                 |
    +----------+---------------------------------------+
    |   #!R    |  unpadded base64 of the wire bytes    |
    +----------+---------------------------------------+

The URI safe variant replaces the ``#`` of the prefix with ``%23``. The body
uses the standard base64 alphabet in both variants and padding characters
are never emitted or accepted.
"""

import base64
import logging
import re

from .binary import StreamId
from .errors import InvalidEncoding, InvalidPrefix, StreamIdError

logger = logging.getLogger(__name__)


PREFIX = "#!R"
URISAFE_PREFIX = "%23!R"

# Bodies that decode to more bytes than this are rejected.
SCRATCH_SIZE = 16

BASE64_BODY_RE = re.compile(r"[A-Za-z0-9+/]*")


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii").rstrip("=")


def _b64decode(body: str) -> bytes:
    """ Strictly decode an unpadded, standard alphabet base64 string. """
    if not BASE64_BODY_RE.fullmatch(body):
        raise InvalidEncoding("Stream id body contains non base64 characters")

    if len(body) % 4 == 1:
        raise InvalidEncoding(f"Invalid base64 body length {len(body)}")

    if len(body) * 3 // 4 > SCRATCH_SIZE:
        raise InvalidEncoding(
            f"Stream id body decodes to more than {SCRATCH_SIZE} bytes"
        )

    data = base64.b64decode(body + "=" * (-len(body) % 4), validate=True)

    # b64decode silently drops the unused low bits of the final symbol.
    if _b64encode(data) != body:
        raise InvalidEncoding("Stream id body has non-zero trailing bits")

    return data


def decode_streamid(text: str) -> StreamId:
    """ Decode a stream id from its text form.

    Raises a :class:`StreamIdError` subclass for any malformed input. Errors
    from the binary decoder propagate unchanged.
    """
    if not isinstance(text, str) or not text.startswith(PREFIX):
        logger.debug(f"Stream id missing {PREFIX!r} prefix: {text!r:.32}")
        raise InvalidPrefix(f"Stream id must start with {PREFIX!r}")

    try:
        data = _b64decode(text[len(PREFIX) :])
    except InvalidEncoding as exc:
        logger.debug(f"Invalid stream id body: {exc}")
        raise

    return StreamId.decode(data)


def decode_streamid_urisafe(text: str) -> StreamId:
    """ Decode a stream id in either the plain or the URI safe text form.

    Only the escaped ``%23`` of the prefix is undone, the body is decoded
    exactly as :func:`decode_streamid` does.
    """
    if isinstance(text, str) and text.startswith(URISAFE_PREFIX):
        text = PREFIX + text[len(URISAFE_PREFIX) :]
    return decode_streamid(text)


def _encode(stream_id: StreamId, prefix: str) -> str:
    buf = bytearray(SCRATCH_SIZE)
    try:
        size = stream_id.encode(buf)
    except (StreamIdError, ValueError) as exc:
        logger.exception(f"Error encoding stream id {stream_id!r}")
        raise RuntimeError(f"Error encoding stream id: {exc}") from exc
    return prefix + _b64encode(bytes(buf[:size]))


def encode_streamid(stream_id: StreamId) -> str:
    """ Return the ``#!R`` prefixed text form of a stream id. """
    return _encode(stream_id, PREFIX)


def encode_streamid_urisafe(stream_id: StreamId) -> str:
    """ Return the text form of a stream id with a ``%23!R`` prefix, for use
    as a URL path or query component.
    """
    return _encode(stream_id, URISAFE_PREFIX)
