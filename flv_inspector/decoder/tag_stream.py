"""
FLV body iteration.

FLV File Body:

    PreviousTagSize0    UI32    (always 0)
    Tag1                FLVTAG
    PreviousTagSize1    UI32
    ...
    TagN                FLVTAG
    PreviousTagSizeN    UI32

Each FLVTAG is an 11-byte header (type byte, DataSize UI24, Timestamp UI24,
TimestampExtended UI8, StreamID UI24) followed by DataSize payload bytes.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO

from flv_inspector.const import TAG_FILTER_BIT, TAG_TYPE_BITS, TagType
from flv_inspector.decoder.audio import AudioPayload, decode_audio_payload
from flv_inspector.decoder.byte_cursor import ByteCursor, extract_bits
from flv_inspector.decoder.errors import FLVDecodeError, UnknownTagTypeError
from flv_inspector.decoder.header import FileHeader, decode_header
from flv_inspector.decoder.script_data import ScriptMetadata, UnsupportedPolicy, decode_script_data
from flv_inspector.decoder.video import VideoPayload, decode_video_payload

logger = logging.getLogger(__name__)

TagPayload = AudioPayload | VideoPayload | ScriptMetadata


@dataclass(frozen=True, slots=True)
class Tag:
    index: int  # 1-based position in the stream
    offset: int  # Byte offset of the tag type byte
    previous_tag_size: int  # Informational, never validated
    filter: bool
    tag_type: TagType
    payload_size: int
    timestamp: int  # Lower 24 bits, milliseconds
    timestamp_extension: int  # Upper 8 bits
    stream_id: int
    payload: TagPayload

    @property
    def extended_timestamp(self) -> int:
        return (self.timestamp_extension << 24) | self.timestamp


class ScanState(Enum):
    SCANNING = "scanning"
    DONE = "done"


class TagStreamIterator:
    """
    Produces one Tag per call from a cursor positioned after the file header.

    ``next_tag()`` returns None once the stream ends cleanly on a tag
    boundary. Any decode error is re-raised annotated with the tag index and
    leaves the iterator DONE: there is no resynchronization.
    """

    def __init__(self, cursor: ByteCursor, unsupported_amf: UnsupportedPolicy = "fail") -> None:
        self.cursor = cursor
        self.unsupported_amf = unsupported_amf
        self.state = ScanState.SCANNING
        self.tag_count = 0

    def __iter__(self) -> Iterator[Tag]:
        return self

    def __next__(self) -> Tag:
        tag = self.next_tag()
        if tag is None:
            raise StopIteration
        return tag

    def _finish(self) -> None:
        logger.debug("[tag_stream] End of stream after %d tags at offset %d", self.tag_count, self.cursor.offset)
        self.state = ScanState.DONE

    def next_tag(self) -> Tag | None:
        if self.state is ScanState.DONE:
            return None

        try:
            return self._read_tag()
        except FLVDecodeError as e:
            self.state = ScanState.DONE
            if e.tag_index is None:
                e.tag_index = self.tag_count + 1
            raise

    def _read_tag(self) -> Tag | None:
        cursor = self.cursor

        # A stream may end without the trailing PreviousTagSize
        if cursor.at_clean_boundary():
            self._finish()
            return None
        previous_tag_size = cursor.read_u32_be()

        if cursor.at_clean_boundary():
            self._finish()
            return None

        offset = cursor.offset
        type_byte = cursor.read_u8()
        filter_flag = bool(extract_bits(type_byte, TAG_FILTER_BIT, 1))
        raw_type = extract_bits(type_byte, 0, TAG_TYPE_BITS)
        payload_size = cursor.read_u24_be()
        timestamp = cursor.read_u24_be()
        timestamp_extension = cursor.read_u8()
        stream_id = cursor.read_u24_be()

        try:
            tag_type = TagType(raw_type)
        except ValueError:
            raise UnknownTagTypeError(raw_type, offset=offset) from None

        payload: TagPayload
        if tag_type is TagType.AUDIO:
            payload = decode_audio_payload(cursor, payload_size)
        elif tag_type is TagType.VIDEO:
            payload = decode_video_payload(cursor, payload_size)
        else:
            payload = decode_script_data(cursor, payload_size, self.unsupported_amf)

        self.tag_count += 1
        tag = Tag(
            index=self.tag_count,
            offset=offset,
            previous_tag_size=previous_tag_size,
            filter=filter_flag,
            tag_type=tag_type,
            payload_size=payload_size,
            timestamp=timestamp,
            timestamp_extension=timestamp_extension,
            stream_id=stream_id,
            payload=payload,
        )
        logger.debug(
            "[tag_stream] Tag %d: %s size=%d ts=%d at offset %d",
            tag.index,
            tag_type.name,
            payload_size,
            tag.extended_timestamp,
            offset,
        )
        return tag


class FLVSession:
    """
    One decode pass over one input stream.

    Owns the cursor and the tag counter, so independent sessions can run
    side by side in the same process.
    """

    def __init__(self, stream: BinaryIO, unsupported_amf: UnsupportedPolicy = "fail") -> None:
        self.cursor = ByteCursor(stream)
        self.unsupported_amf = unsupported_amf
        self.header: FileHeader | None = None
        self._iterator: TagStreamIterator | None = None

    @property
    def tag_count(self) -> int:
        return self._iterator.tag_count if self._iterator is not None else 0

    def read_header(self) -> FileHeader:
        if self.header is None:
            self.header = decode_header(self.cursor)
            self._iterator = TagStreamIterator(self.cursor, self.unsupported_amf)
        return self.header

    def tags(self) -> Iterator[Tag]:
        """Yield tags in stream order, reading the header first if needed."""
        self.read_header()
        yield from self._iterator
