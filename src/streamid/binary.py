"""
The binary form of a stream id is a fixed layout, big-endian record. A
publisher identity occupies 4 bytes. A subscriber identity adds the target
user and the track it subscribes to, for a total of 7 bytes.

.. code-block:: console

    +-----------------------+--------+-------------+--------------+
    |         flags         |  user  | target.user | target.track |
    +-----------+-----------+--------+-------------+--------------+
    | publisher |  version  | uint16 |   uint16    |    uint8     |
    |   bit 15  | bits 14-0 |        |             |              |
    +-----------+-----------+--------+-------------+--------------+

The target fields are only present when the publisher bit is clear. The
publisher bit is never stored on the value itself, it is derived from
whether a target is present.
"""

import enum
import logging
import struct

from collections import namedtuple
from typing import Optional

from .errors import InvalidTrack, ShortBufferError

logger = logging.getLogger(__name__)


HEADER_FORMAT = ">HH"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)

TARGET_FORMAT = ">HB"
TARGET_SIZE = struct.calcsize(TARGET_FORMAT)

PUBLISHER_SIZE = HEADER_SIZE
SUBSCRIBER_SIZE = HEADER_SIZE + TARGET_SIZE
MAX_SIZE = SUBSCRIBER_SIZE

PUBLISHER_FLAG = 0x8000
VERSION_MASK = 0x7FFF
MAX_VERSION = VERSION_MASK
MAX_USER = 0xFFFF


def _check_range(name: str, value: int, maximum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= maximum:
        raise ValueError(f"{name} must be an integer in 0..{maximum}, got {value!r}")


def _check_fields(version: int, user: int, target) -> None:
    _check_range("version", version, MAX_VERSION)
    _check_range("user", user, MAX_USER)
    if target is None:
        return
    if not isinstance(target, StreamTarget):
        raise ValueError(f"target must be a StreamTarget or None, got {target!r}")
    _check_range("target user", target.user, MAX_USER)
    StreamTrack(target.track)


class StreamTrack(enum.IntEnum):
    """ The media track a subscription points at. """

    VIDEO = 0
    CONTENT_AUDIO = 1
    COMMENTARY_AUDIO = 2

    @classmethod
    def from_byte(cls, value: int) -> "StreamTrack":
        try:
            return cls(value)
        except ValueError:
            raise InvalidTrack(value) from None


class StreamTarget(namedtuple("StreamTarget", ("user", "track"))):
    """ The user and track that a subscriber identity points at. """

    __slots__ = ()

    def __new__(cls, user: int, track: StreamTrack):
        _check_range("target user", user, MAX_USER)
        return super().__new__(cls, user, StreamTrack(track))


class StreamId(namedtuple("StreamId", ("version", "user", "target"))):
    """
    A publisher or subscriber identity.

    A stream id without a target identifies ``user`` as publishing. A
    stream id with a target identifies ``user`` as subscribing to one track
    of the target user.

    Instances are immutable. Fields are range checked on construction and
    again on encode, since ``_replace`` and ``_make`` bypass ``__new__``.
    """

    __slots__ = ()

    def __new__(cls, version: int, user: int, target: Optional[StreamTarget] = None):
        _check_fields(version, user, target)
        return super().__new__(cls, version, user, target)

    @classmethod
    def publisher(cls, version: int, user: int) -> "StreamId":
        return cls(version, user)

    @classmethod
    def subscriber(
        cls, version: int, user: int, target_user: int, track: StreamTrack
    ) -> "StreamId":
        return cls(version, user, StreamTarget(target_user, track))

    def is_publisher(self) -> bool:
        return self.target is None

    @property
    def size(self) -> int:
        """ The number of bytes this stream id occupies on the wire. """
        return PUBLISHER_SIZE if self.is_publisher() else SUBSCRIBER_SIZE

    @classmethod
    def decode(cls, data) -> "StreamId":
        """ Decode a stream id from the start of a bytes-like object.

        Exactly 4 bytes (publisher) or 7 bytes (subscriber) are consumed.
        Any bytes after that are never looked at.
        """
        try:
            flags, user = struct.unpack_from(HEADER_FORMAT, data, 0)
        except struct.error as exc:
            msg = f"Stream id header needs {HEADER_SIZE} bytes, got {len(data)}"
            logger.debug(msg)
            raise ShortBufferError(msg) from exc

        version = flags & VERSION_MASK
        if flags & PUBLISHER_FLAG:
            return cls(version, user)

        try:
            target_user, track = struct.unpack_from(TARGET_FORMAT, data, HEADER_SIZE)
        except struct.error as exc:
            msg = f"Subscriber stream id needs {SUBSCRIBER_SIZE} bytes, got {len(data)}"
            logger.debug(msg)
            raise ShortBufferError(msg) from exc

        return cls(version, user, StreamTarget(target_user, StreamTrack.from_byte(track)))

    def encode(self, buf) -> int:
        """ Write the wire form into the start of a writable buffer.

        Nothing beyond the returned number of bytes (4 for a publisher, 7
        for a subscriber) is written. Callers that pre-allocate a larger
        buffer must truncate it to the returned size.

        :raises ValueError: if a field is outside its wire range.
        """
        _check_fields(self.version, self.user, self.target)

        # Fields are in range here, so struct errors only mean a short buffer.
        flags = (PUBLISHER_FLAG if self.is_publisher() else 0) | self.version
        try:
            struct.pack_into(HEADER_FORMAT, buf, 0, flags, self.user)
            if self.target is None:
                return PUBLISHER_SIZE
            struct.pack_into(
                TARGET_FORMAT, buf, HEADER_SIZE, self.target.user, int(self.target.track)
            )
        except struct.error as exc:
            raise ShortBufferError(
                f"Stream id needs {self.size} bytes, buffer holds {len(buf)}"
            ) from exc
        return SUBSCRIBER_SIZE

    def to_bytes(self) -> bytes:
        """ Return exactly the encoded bytes of this stream id. """
        buf = bytearray(self.size)
        self.encode(buf)
        return bytes(buf)
