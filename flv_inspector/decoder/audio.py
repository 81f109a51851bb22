import logging
from dataclasses import dataclass

from flv_inspector.const import SOUND_FORMAT_AAC
from flv_inspector.decoder.byte_cursor import ByteCursor, extract_bits
from flv_inspector.decoder.errors import UnderflowInLengthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AudioPayload:
    """AUDIODATA tag body."""

    sound_format: int  # UB[4], 10 = AAC
    sound_rate: int  # UB[2], 0 = 5.5 kHz ... 3 = 44 kHz
    sound_size: int  # UB[1], 0 = 8-bit, 1 = 16-bit
    sound_type: int  # UB[1], 0 = mono, 1 = stereo
    aac_packet_type: int | None  # Only for AAC: 0 = sequence header, 1 = raw
    raw_data: bytes

    @property
    def header_size(self) -> int:
        return 1 if self.aac_packet_type is None else 2


def decode_audio_payload(cursor: ByteCursor, payload_size: int) -> AudioPayload:
    """
    Decode an audio tag payload of payload_size bytes.

    Layout: SoundFormat UB[4] + SoundRate UB[2] + SoundSize UB[1] + SoundType UB[1],
    then AACPacketType UI8 when SoundFormat == 10, then the sound data.
    """
    if payload_size < 1:
        raise UnderflowInLengthError("audio payload", payload_size, 1, offset=cursor.offset)

    byte = cursor.read_u8()
    sound_format = extract_bits(byte, 4, 4)
    sound_rate = extract_bits(byte, 2, 2)
    sound_size = extract_bits(byte, 1, 1)
    sound_type = extract_bits(byte, 0, 1)

    aac_packet_type = None
    if sound_format == SOUND_FORMAT_AAC:
        if payload_size < 2:
            raise UnderflowInLengthError("AAC audio payload", payload_size, 2, offset=cursor.offset)
        aac_packet_type = cursor.read_u8()
        raw_data = cursor.read_bytes(payload_size - 2)
    else:
        raw_data = cursor.read_bytes(payload_size - 1)

    logger.debug(
        "[audio] format=%d rate=%d size=%d type=%d raw=%d bytes",
        sound_format,
        sound_rate,
        sound_size,
        sound_type,
        len(raw_data),
    )
    return AudioPayload(
        sound_format=sound_format,
        sound_rate=sound_rate,
        sound_size=sound_size,
        sound_type=sound_type,
        aac_packet_type=aac_packet_type,
        raw_data=raw_data,
    )
