""" Helpers for carrying a stream id in a URL query parameter. """

import logging
import os

from typing import Optional, Union
from yarl import URL

from .binary import StreamId
from .errors import InvalidPrefix
from .text import decode_streamid, encode_streamid

logger = logging.getLogger(__name__)


DEFAULT_QUERY_KEY = "streamid"


def get_query_key(key: str = None) -> str:
    """ Return the query parameter name used for stream ids.

    If no key is passed the ``STREAMID_QUERY_KEY`` environment variable is
    inspected before falling back to ``streamid``.
    """
    return key if key else os.getenv("STREAMID_QUERY_KEY", DEFAULT_QUERY_KEY)


def streamid_url(
    base: Union[str, URL], stream_id: StreamId, key: Optional[str] = None
) -> URL:
    """ Return base with the stream id added as a query parameter.

    Any existing query parameters are kept. The envelope is escaped by
    yarl, so the ``#`` of the prefix appears as ``%23`` in the URL.

    :param base: The URL to extend, e.g. ``srt://media.example.com:9000``.

    :param stream_id: The stream id to embed.

    :param key: The query parameter name. See :func:`get_query_key`.
    """
    url = URL(base)
    return url.update_query({get_query_key(key): encode_streamid(stream_id)})


def streamid_from_url(url: Union[str, URL], key: Optional[str] = None) -> StreamId:
    """ Extract and decode the stream id held in a URL query parameter.

    :raises InvalidPrefix: if the URL has no such query parameter or the
      parameter value does not carry the prefix.
    """
    url = URL(url)
    key = get_query_key(key)
    value = url.query.get(key)
    if value is None:
        logger.debug(f"No {key!r} query parameter in {url}")
        raise InvalidPrefix(f"URL has no {key!r} query parameter")
    return decode_streamid(value)
