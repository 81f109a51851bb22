"""
Reporting adapter.

The decoder produces dataclasses; this module flattens them into ordered
(field name, value) pairs and hands those to a reporter. Reporters decide
the presentation: indented text for humans or JSON lines for tooling.
"""

from collections.abc import Iterator
from typing import Any, Protocol, TextIO

from flv_inspector import const
from flv_inspector.decoder import (
    AudioPayload,
    AVCPacket,
    FileHeader,
    FLVDecodeError,
    OpaqueCodecData,
    ScriptMetadata,
    SeekMarker,
    Tag,
    VideoPayload,
)
from flv_inspector.schemas import ErrorReport, HeaderReport, ReportField, SummaryReport, TagReport
from flv_inspector.sources import SourceError

Field = tuple[str, Any]

PROPERTY_PREFIX = "property."


def describe_header(header: FileHeader) -> Iterator[Field]:
    yield "signature", header.signature.decode("ascii", errors="replace")
    yield "version", header.version
    yield "has_audio", header.has_audio
    yield "has_video", header.has_video
    yield "header_size", header.header_size


def _describe_raw(raw_data: bytes, raw_bytes: int) -> Iterator[Field]:
    yield "raw_data_length", len(raw_data)
    if raw_bytes > 0 and raw_data:
        yield "raw_data_head", raw_data[:raw_bytes].hex(" ")


def describe_payload(payload, raw_bytes: int = 0) -> Iterator[Field]:
    if isinstance(payload, AudioPayload):
        yield "sound_format", payload.sound_format
        yield "sound_rate", payload.sound_rate
        yield "sound_size", payload.sound_size
        yield "sound_type", payload.sound_type
        if payload.aac_packet_type is not None:
            yield "aac_packet_type", payload.aac_packet_type
        yield from _describe_raw(payload.raw_data, raw_bytes)

    elif isinstance(payload, VideoPayload):
        yield "frame_type", payload.frame_type
        yield "codec_id", payload.codec_id
        body = payload.body
        if isinstance(body, SeekMarker):
            yield "seek_marker", body.marker
        elif isinstance(body, AVCPacket):
            yield "avc_packet_type", body.packet_type
            yield "composition_time", body.composition_time
            if body.nalu_length is not None:
                yield "nalu_length", body.nalu_length
            yield from _describe_raw(body.raw_data, raw_bytes)
        elif isinstance(body, OpaqueCodecData):
            yield "video_packet", const.VIDEO_PACKET_NAMES.get(body.codec_id, "unknown")
            yield from _describe_raw(body.raw_data, raw_bytes)

    elif isinstance(payload, ScriptMetadata):
        yield "name", payload.name
        yield "declared_count", payload.declared_count
        for name, value in payload.as_pairs():
            yield f"{PROPERTY_PREFIX}{name}", value
        if payload.skipped_bytes:
            yield "skipped_bytes", payload.skipped_bytes

    else:
        raise TypeError(f"Unsupported payload type: {type(payload).__name__}")


def describe_tag(tag: Tag, raw_bytes: int = 0) -> Iterator[Field]:
    """Yield the tag header fields followed by the payload fields."""
    yield "previous_tag_size", tag.previous_tag_size
    yield "tag_type", int(tag.tag_type)
    yield "filter", tag.filter
    yield "payload_size", tag.payload_size
    yield "timestamp", tag.timestamp
    yield "timestamp_extension", tag.timestamp_extension
    yield "extended_timestamp", tag.extended_timestamp
    yield "stream_id", tag.stream_id
    yield from describe_payload(tag.payload, raw_bytes)


class Reporter(Protocol):
    def header(self, header: FileHeader) -> None: ...

    def tag(self, tag: Tag) -> None: ...

    def error(self, error: FLVDecodeError | SourceError) -> None: ...

    def summary(self, tag_count: int, counts: dict[str, int], clean_end: bool) -> None: ...


# Code tables used to label numeric fields in the text report
_LABEL_TABLES = {
    "sound_format": const.SOUND_FORMATS,
    "sound_rate": const.SOUND_RATES,
    "sound_size": const.SOUND_SIZES,
    "sound_type": const.SOUND_TYPES,
    "aac_packet_type": const.AAC_PACKET_TYPES,
    "frame_type": const.FRAME_TYPES,
    "codec_id": const.CODEC_IDS,
    "avc_packet_type": const.AVC_PACKET_TYPES,
}


def format_value(name: str, value: Any) -> str:
    """Render one field value for humans, with labels and units where known."""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if name in _LABEL_TABLES:
        return f"{value} - {const.describe_code(_LABEL_TABLES[name], value)}"
    if name == "tag_type":
        return f"{value} - {const.TAG_TYPE_NAMES.get(value, 'Unknown')}"
    if name == "seek_marker":
        edge = "Start" if value == 0 else "End"
        return f"{value} - {edge} of client-side seeking video frame sequence"
    if isinstance(value, float):
        text = f"{value:.12g}"
        if name.startswith(PROPERTY_PREFIX):
            unit = const.METADATA_UNITS.get(name[len(PROPERTY_PREFIX) :])
            if unit:
                text = f"{text} {unit}"
        return text
    return str(value)


class TextReporter:
    """Indented human-readable report."""

    def __init__(self, out: TextIO, raw_bytes: int = 0) -> None:
        self.out = out
        self.raw_bytes = raw_bytes

    def _write_fields(self, fields: Iterator[Field]) -> None:
        for name, value in fields:
            self.out.write(f"  {name}: {format_value(name, value)}\n")

    def header(self, header: FileHeader) -> None:
        self.out.write(f"FLV file version {header.version}\n")
        self._write_fields(describe_header(header))

    def tag(self, tag: Tag) -> None:
        self.out.write(f"\nTag{tag.index} at offset {tag.offset} (0x{tag.offset:X})\n")
        self._write_fields(describe_tag(tag, self.raw_bytes))

    def error(self, error: FLVDecodeError | SourceError) -> None:
        self.out.write(f"\nDecoding stopped: {error}\n")

    def summary(self, tag_count: int, counts: dict[str, int], clean_end: bool) -> None:
        breakdown = ", ".join(f"{name}: {count}" for name, count in sorted(counts.items()))
        status = "Finished analyzing" if clean_end else "Analysis aborted"
        self.out.write(f"\n{status}: {tag_count} tags ({breakdown or 'none'})\n")


class JsonLinesReporter:
    """One JSON object per record, built from the pydantic report schemas."""

    def __init__(self, out: TextIO, raw_bytes: int = 0) -> None:
        self.out = out
        self.raw_bytes = raw_bytes

    def _emit(self, record) -> None:
        self.out.write(record.model_dump_json() + "\n")

    def header(self, header: FileHeader) -> None:
        fields = [ReportField(name=name, value=value) for name, value in describe_header(header)]
        self._emit(HeaderReport(fields=fields))

    def tag(self, tag: Tag) -> None:
        fields = [ReportField(name=name, value=value) for name, value in describe_tag(tag, self.raw_bytes)]
        self._emit(TagReport(index=tag.index, offset=tag.offset, tag_type=tag.tag_type.name.lower(), fields=fields))

    def error(self, error: FLVDecodeError | SourceError) -> None:
        self._emit(ErrorReport(kind=error.kind, message=error.message, offset=error.offset, tag_index=error.tag_index))

    def summary(self, tag_count: int, counts: dict[str, int], clean_end: bool) -> None:
        self._emit(SummaryReport(tag_count=tag_count, counts=dict(counts), clean_end=clean_end))


def create_reporter(report_format: str, out: TextIO, raw_bytes: int = 0) -> Reporter:
    if report_format == "jsonl":
        return JsonLinesReporter(out, raw_bytes)
    if report_format == "text":
        return TextReporter(out, raw_bytes)
    raise ValueError(f"Unknown report format: {report_format}")
