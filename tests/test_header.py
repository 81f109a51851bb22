import io
import logging

import pytest

from flv_inspector.decoder import (
    BadSignatureError,
    ByteCursor,
    FLVSession,
    TruncatedInputError,
    decode_header,
)


def test_decode_standard_header():
    cursor = ByteCursor(io.BytesIO(bytes.fromhex("464C56010500000009")))

    header = decode_header(cursor)

    assert header.signature == b"FLV"
    assert header.version == 1
    assert header.has_audio is True
    assert header.has_video is True
    assert header.header_size == 9
    assert cursor.offset == 9


@pytest.mark.parametrize(
    "flags, has_audio, has_video",
    [
        (0x04, True, False),
        (0x01, False, True),
        (0x02, False, False),  # reserved bit between the two flags
        (0x00, False, False),
    ],
)
def test_header_flag_bits(flv, flags, has_audio, has_video):
    header = decode_header(ByteCursor(io.BytesIO(flv.header(flags=flags))))

    assert header.has_audio is has_audio
    assert header.has_video is has_video
    assert header.flags == flags


def test_bad_signature_fails_before_any_tag(flv):
    data = bytes.fromhex("464C58010500000009") + flv.tag(8, b"\xaf\x01")
    session = FLVSession(io.BytesIO(data))

    with pytest.raises(BadSignatureError) as exc_info:
        list(session.tags())

    assert exc_info.value.signature == b"FLX"
    assert exc_info.value.kind == "BadSignature"
    assert session.tag_count == 0


def test_truncated_header():
    with pytest.raises(TruncatedInputError):
        decode_header(ByteCursor(io.BytesIO(b"FLV\x01\x05\x00")))


def test_header_size_is_reported_but_not_used_to_seek(flv, caplog):
    data = flv.header(header_size=100) + flv.tag(8, b"\x2f")
    session = FLVSession(io.BytesIO(data))

    with caplog.at_level(logging.WARNING):
        tags = list(session.tags())

    assert session.header.header_size == 100
    assert len(tags) == 1
    assert tags[0].offset == 13
    assert "declares size 100" in caplog.text
