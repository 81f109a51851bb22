import logging
from dataclasses import dataclass

from flv_inspector.const import FLV_HEADER_AUDIO_BIT, FLV_HEADER_SIZE, FLV_HEADER_VIDEO_BIT, FLV_SIGNATURE
from flv_inspector.decoder.byte_cursor import ByteCursor, extract_bits
from flv_inspector.decoder.errors import BadSignatureError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FileHeader:
    """Decoded 9-byte FLV file header."""

    signature: bytes
    version: int
    flags: int  # Raw TypeFlags byte
    has_audio: bool
    has_video: bool
    header_size: int  # DataOffset, reported only, never used to seek


def decode_header(cursor: ByteCursor) -> FileHeader:
    """
    Decode the FLV file header.

    Layout: Signature(3) "FLV" + Version(1) + TypeFlags(1) + DataOffset(4).

    Tag decoding starts right after these 9 bytes whatever DataOffset says.

    Raises:
        BadSignatureError: If the first three bytes are not "FLV".
        TruncatedInputError: If the stream ends inside the header.
    """
    start = cursor.offset
    signature = cursor.read_bytes(len(FLV_SIGNATURE))
    if signature != FLV_SIGNATURE:
        raise BadSignatureError(signature, offset=start)

    version = cursor.read_u8()
    flags = cursor.read_u8()
    header_size = cursor.read_u32_be()

    header = FileHeader(
        signature=signature,
        version=version,
        flags=flags,
        has_audio=bool(extract_bits(flags, FLV_HEADER_AUDIO_BIT, 1)),
        has_video=bool(extract_bits(flags, FLV_HEADER_VIDEO_BIT, 1)),
        header_size=header_size,
    )
    if header_size != FLV_HEADER_SIZE:
        logger.warning("[header] Header declares size %d, expected %d; ignoring", header_size, FLV_HEADER_SIZE)
    logger.debug("[header] %s", header)
    return header
