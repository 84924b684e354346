__version__ = "0.1.0"

from .errors import (
    InvalidEncoding,
    InvalidPrefix,
    InvalidTrack,
    ShortBufferError,
    StreamIdError,
)
from .binary import StreamId, StreamTarget, StreamTrack
from .text import (
    decode_streamid,
    decode_streamid_urisafe,
    encode_streamid,
    encode_streamid_urisafe,
)
from .url import streamid_from_url, streamid_url
