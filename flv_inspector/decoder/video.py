"""
Video tag payload decoding.

A VIDEODATA body starts with one byte holding FrameType UB[4] and CodecID
UB[4]. What follows depends on both:

- FrameType 5 (video info/command frame): a single UI8 seek marker,
  0 = start of client-side seeking sequence, 1 = end.
- CodecID 7 (AVC): an AVCVIDEOPACKET with its own 4 or 8 byte header.
- Any other codec: codec-specific bytes kept verbatim.
"""

import logging
from dataclasses import dataclass

from flv_inspector.const import AVC_NALU, FLV_CODEC_ID_AVC, VIDEO_FRAME_TYPE_INFO
from flv_inspector.decoder.byte_cursor import ByteCursor, extract_bits
from flv_inspector.decoder.errors import UnderflowInLengthError

logger = logging.getLogger(__name__)

# AVCPacketType(1) + CompositionTime(3)
_AVC_HEADER_SIZE = 4
# ... + NALU length(4) for AVCPacketType == 1
_AVC_NALU_HEADER_SIZE = 8


def sign_extend_24(value: int) -> int:
    """Interpret a 24-bit unsigned value as two's complement SI24."""
    if value & 0x800000:
        return value - 0x1000000
    return value


@dataclass(frozen=True, slots=True)
class AVCPacket:
    packet_type: int  # 0 = sequence header, 1 = NALU, 2 = end of sequence
    composition_time: int  # SI24, sign-extended
    nalu_length: int | None  # Only for packet_type == 1
    raw_data: bytes

    @property
    def header_size(self) -> int:
        return _AVC_HEADER_SIZE if self.nalu_length is None else _AVC_NALU_HEADER_SIZE


@dataclass(frozen=True, slots=True)
class OpaqueCodecData:
    codec_id: int
    raw_data: bytes

    @property
    def header_size(self) -> int:
        return 0


@dataclass(frozen=True, slots=True)
class SeekMarker:
    marker: int

    @property
    def is_start(self) -> bool:
        return self.marker == 0

    @property
    def header_size(self) -> int:
        return 1


VideoBody = AVCPacket | OpaqueCodecData | SeekMarker


@dataclass(frozen=True, slots=True)
class VideoPayload:
    """VIDEODATA tag body."""

    frame_type: int  # UB[4]
    codec_id: int  # UB[4]
    body: VideoBody

    @property
    def raw_data(self) -> bytes:
        if isinstance(self.body, SeekMarker):
            return b""
        return self.body.raw_data


def decode_avc_packet(cursor: ByteCursor, size: int) -> AVCPacket:
    """
    Decode an AVCVIDEOPACKET occupying size bytes.

    Layout: AVCPacketType UI8 + CompositionTime SI24, then NALU length UI32
    when AVCPacketType == 1, then the packet data.
    """
    if size < _AVC_HEADER_SIZE:
        raise UnderflowInLengthError("AVC packet", size, _AVC_HEADER_SIZE, offset=cursor.offset)

    packet_type = cursor.read_u8()
    composition_time = sign_extend_24(cursor.read_u24_be())

    nalu_length = None
    if packet_type == AVC_NALU:
        if size < _AVC_NALU_HEADER_SIZE:
            raise UnderflowInLengthError("AVC NALU packet", size, _AVC_NALU_HEADER_SIZE, offset=cursor.offset)
        nalu_length = cursor.read_u32_be()
        raw_data = cursor.read_bytes(size - _AVC_NALU_HEADER_SIZE)
    else:
        raw_data = cursor.read_bytes(size - _AVC_HEADER_SIZE)

    logger.debug(
        "[video] AVC packet_type=%d cts=%d nalu_length=%s raw=%d bytes",
        packet_type,
        composition_time,
        nalu_length,
        len(raw_data),
    )
    return AVCPacket(
        packet_type=packet_type,
        composition_time=composition_time,
        nalu_length=nalu_length,
        raw_data=raw_data,
    )


def decode_video_payload(cursor: ByteCursor, payload_size: int) -> VideoPayload:
    """Decode a video tag payload of payload_size bytes."""
    if payload_size < 1:
        raise UnderflowInLengthError("video payload", payload_size, 1, offset=cursor.offset)

    byte = cursor.read_u8()
    frame_type = extract_bits(byte, 4, 4)
    codec_id = extract_bits(byte, 0, 4)
    remaining = payload_size - 1

    body: VideoBody
    if frame_type == VIDEO_FRAME_TYPE_INFO:
        if remaining < 1:
            raise UnderflowInLengthError("video info frame", payload_size, 2, offset=cursor.offset)
        body = SeekMarker(marker=cursor.read_u8())
        if remaining > 1:
            # A command frame carries only the marker byte
            extra = cursor.skip(remaining - 1)
            logger.warning("[video] Discarded %d bytes after video info frame marker", extra)
    elif codec_id == FLV_CODEC_ID_AVC:
        body = decode_avc_packet(cursor, remaining)
    else:
        body = OpaqueCodecData(codec_id=codec_id, raw_data=cursor.read_bytes(remaining))

    logger.debug("[video] frame_type=%d codec_id=%d body=%s", frame_type, codec_id, type(body).__name__)
    return VideoPayload(frame_type=frame_type, codec_id=codec_id, body=body)
