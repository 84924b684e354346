""" This module contains the exceptions raised when decoding stream ids. """


class StreamIdError(Exception):
    """ Base class for all stream id decoding failures. """


class InvalidPrefix(StreamIdError):
    """ The text form does not start with the expected prefix. """


class InvalidEncoding(StreamIdError):
    """ The base64 body is malformed or decodes to too many bytes. """


class InvalidTrack(StreamIdError):
    """ The track byte is not one of the known track codes. """

    def __init__(self, value: int) -> None:
        super().__init__(f"Invalid track code {value}")
        self.value = value


class ShortBufferError(StreamIdError):
    """
    The byte buffer ended before all fields required by the publisher flag
    could be read (or written). The originating ``struct.error`` is kept as
    the exception cause.
    """
