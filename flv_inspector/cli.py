import argparse
import logging
import sys
from collections import Counter
from typing import BinaryIO

from flv_inspector.configs import settings
from flv_inspector.decoder import FLVDecodeError, FLVSession
from flv_inspector.report import Reporter, create_reporter
from flv_inspector.sources import SourceError, open_source

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DECODE_ERROR = 1
EXIT_SOURCE_ERROR = 2


def inspect_stream(stream: BinaryIO, reporter: Reporter, unsupported_amf: str = "fail") -> int:
    """
    Decode one FLV stream and feed every record to the reporter.

    Returns:
        EXIT_OK after a clean end of stream, EXIT_DECODE_ERROR on the first fatal decode error,
        EXIT_SOURCE_ERROR if the input fails while it is being read.
    """
    session = FLVSession(stream, unsupported_amf)
    counts = Counter()
    try:
        reporter.header(session.read_header())
        for tag in session.tags():
            counts[tag.tag_type.name.lower()] += 1
            reporter.tag(tag)
    except FLVDecodeError as e:
        logger.error("Decoding failed: %s", e)
        reporter.error(e)
        reporter.summary(session.tag_count, counts, clean_end=False)
        return EXIT_DECODE_ERROR
    except SourceError as e:
        e.offset = session.cursor.offset
        e.tag_index = session.tag_count + 1
        logger.error("Input failed after %d tags: %s", session.tag_count, e.message)
        reporter.error(e)
        reporter.summary(session.tag_count, counts, clean_end=False)
        return EXIT_SOURCE_ERROR

    logger.info("Decoded %d tags", session.tag_count)
    reporter.summary(session.tag_count, counts, clean_end=True)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flv-inspector",
        description="Decode an FLV stream and print its header, tags and metadata.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default=None,
        help="FLV file path or http(s) URL; standard input when omitted or '-'",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    reporter = create_reporter(settings.report_format, sys.stdout, settings.show_raw_bytes)

    try:
        with open_source(args.input) as stream:
            return inspect_stream(stream, reporter, settings.unsupported_amf_policy)
    except SourceError as e:
        logger.error("Cannot read input: %s", e.message)
        return EXIT_SOURCE_ERROR
