import io

import pytest

from flv_inspector.decoder import (
    AVCPacket,
    ByteCursor,
    OpaqueCodecData,
    SeekMarker,
    UnderflowInLengthError,
    decode_avc_packet,
    decode_video_payload,
)


def _decode(data: bytes, payload_size: int | None = None):
    cursor = ByteCursor(io.BytesIO(data))
    payload = decode_video_payload(cursor, len(data) if payload_size is None else payload_size)
    return payload, cursor


def test_avc_nalu_packet():
    nalu = b"\x65\x88\x84\x00"
    data = b"\x17\x01\x00\x00\x21" + len(nalu).to_bytes(4, "big") + nalu
    payload, cursor = _decode(data)

    assert payload.frame_type == 1
    assert payload.codec_id == 7
    assert isinstance(payload.body, AVCPacket)
    assert payload.body.packet_type == 1
    assert payload.body.composition_time == 0x21
    assert payload.body.nalu_length == 4
    # size passed to the AVC decoder is payload_size - 1, raw data is size - 8
    assert payload.body.raw_data == nalu
    assert len(payload.raw_data) == len(data) - 1 - 8
    assert cursor.offset == len(data)


def test_avc_sequence_header():
    record = b"\x01\x64\x00\x1f\xff"
    payload, _ = _decode(b"\x17\x00\x00\x00\x00" + record)

    assert payload.body.packet_type == 0
    assert payload.body.nalu_length is None
    assert payload.body.raw_data == record
    assert payload.body.header_size == 4


def test_avc_end_of_sequence():
    payload, _ = _decode(b"\x27\x02\x00\x00\x00")

    assert payload.frame_type == 2
    assert payload.body.packet_type == 2
    assert payload.body.raw_data == b""


def test_composition_time_is_sign_extended():
    packet = decode_avc_packet(ByteCursor(io.BytesIO(b"\x01\xff\xff\xff\x00\x00\x00\x00")), 8)
    assert packet.composition_time == -1

    packet = decode_avc_packet(ByteCursor(io.BytesIO(b"\x01\x80\x00\x00\x00\x00\x00\x00")), 8)
    assert packet.composition_time == -0x800000

    packet = decode_avc_packet(ByteCursor(io.BytesIO(b"\x00\x7f\xff\xff")), 4)
    assert packet.composition_time == 0x7FFFFF


def test_video_info_frame_yields_seek_marker():
    payload, cursor = _decode(b"\x57\x00")

    assert payload.frame_type == 5
    assert isinstance(payload.body, SeekMarker)
    assert payload.body.is_start is True
    assert payload.raw_data == b""
    assert cursor.offset == 2

    payload, _ = _decode(b"\x52\x01")
    assert payload.body.is_start is False


def test_video_info_frame_discards_extra_declared_bytes(caplog):
    payload, cursor = _decode(b"\x52\x00\xaa\xbb")

    assert isinstance(payload.body, SeekMarker)
    assert payload.raw_data == b""
    assert cursor.offset == 4
    assert "Discarded 2 bytes" in caplog.text


def test_other_codecs_are_kept_opaque():
    payload, _ = _decode(b"\x24\x01\x02\x03")

    assert payload.frame_type == 2
    assert payload.codec_id == 4
    assert isinstance(payload.body, OpaqueCodecData)
    assert payload.body.raw_data == b"\x01\x02\x03"


@pytest.mark.parametrize(
    "data, payload_size, minimum",
    [
        (b"\x17", 0, 1),
        (b"\x52\x00", 1, 2),
        (b"\x17\x00\x00\x00", 4, 4),  # AVC size 3
        (b"\x17\x01\x00\x00\x00\x00\x00", 7, 8),  # NALU size 6
    ],
)
def test_short_declared_sizes_underflow(data, payload_size, minimum):
    with pytest.raises(UnderflowInLengthError) as exc_info:
        _decode(data, payload_size=payload_size)
    assert exc_info.value.minimum == minimum
