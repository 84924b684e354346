"""
Encode or decode stream ids from the command line.

    python streamid_tool.py encode --version 1 --user 42
    python streamid_tool.py encode --version 1 --user 42 --target 7 --track video
    python streamid_tool.py decode '#!RgAEAKg'
    python streamid_tool.py decode 'srt://media.example.com:9000?streamid=%23!RgAEAKg'
"""
import logging
import sys

from streamid import (
    StreamId,
    StreamIdError,
    StreamTrack,
    decode_streamid_urisafe,
    encode_streamid,
    encode_streamid_urisafe,
    streamid_from_url,
    streamid_url,
)


if __name__ == "__main__":

    import argparse

    parser = argparse.ArgumentParser(description="Stream Id Example")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "error"],
        default="error",
        help="Logging level. Default is 'error'.",
    )
    subparsers = parser.add_subparsers(dest="command")

    encode_parser = subparsers.add_parser("encode", help="Encode a stream id")
    encode_parser.add_argument("--version", type=int, default=0)
    encode_parser.add_argument("--user", type=int, required=True)
    encode_parser.add_argument(
        "--target",
        metavar="<user>",
        type=int,
        default=None,
        help="The user to subscribe to. Omit for a publisher id.",
    )
    encode_parser.add_argument(
        "--track",
        type=str,
        choices=[t.name.lower() for t in StreamTrack],
        default="video",
    )
    encode_parser.add_argument(
        "--url",
        metavar="<url>",
        type=str,
        default=None,
        help="Also print this URL with the stream id added to its query",
    )

    decode_parser = subparsers.add_parser("decode", help="Decode a stream id")
    decode_parser.add_argument("text", help="A stream id or a URL holding one")

    args = parser.parse_args()

    logging.basicConfig(
        format="%(asctime)s.%(msecs)03.0f [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        level=getattr(logging, args.log_level.upper()),
    )

    if args.command == "encode":
        if args.target is None:
            stream_id = StreamId.publisher(args.version, args.user)
        else:
            track = StreamTrack[args.track.upper()]
            stream_id = StreamId.subscriber(args.version, args.user, args.target, track)
        print(encode_streamid(stream_id))
        print(encode_streamid_urisafe(stream_id))
        if args.url:
            print(streamid_url(args.url, stream_id))

    elif args.command == "decode":
        try:
            if "://" in args.text:
                stream_id = streamid_from_url(args.text)
            else:
                stream_id = decode_streamid_urisafe(args.text)
        except StreamIdError as exc:
            print(f"Invalid stream id: {exc!r}")
            sys.exit(1)
        print(stream_id)

    else:
        parser.print_help()
