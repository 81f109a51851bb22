"""
FLV container decoder package.

Provides a pure Python, forward-only decoder for FLV streams:

- byte_cursor: Big-endian primitive reader and sub-byte field extraction
- header: 9-byte file header decoder
- audio: AUDIODATA payload decoder
- video: VIDEODATA payload decoder with the nested AVC packet decoder
- script_data: SCRIPTDATA (AMF0 ECMA array) metadata decoder
- tag_stream: Header-then-tag loop dispatching on tag type
- errors: Decode error taxonomy
"""

from flv_inspector.decoder.audio import AudioPayload, decode_audio_payload
from flv_inspector.decoder.byte_cursor import ByteCursor, extract_bits
from flv_inspector.decoder.errors import (
    BadSignatureError,
    FLVDecodeError,
    TruncatedInputError,
    UnderflowInLengthError,
    UnknownTagTypeError,
    UnsupportedValueTypeError,
)
from flv_inspector.decoder.header import FileHeader, decode_header
from flv_inspector.decoder.script_data import ScriptMetadata, ScriptProperty, decode_script_data
from flv_inspector.decoder.tag_stream import FLVSession, ScanState, Tag, TagStreamIterator
from flv_inspector.decoder.video import (
    AVCPacket,
    OpaqueCodecData,
    SeekMarker,
    VideoPayload,
    decode_avc_packet,
    decode_video_payload,
)

__all__ = [
    "AVCPacket",
    "AudioPayload",
    "BadSignatureError",
    "ByteCursor",
    "FLVDecodeError",
    "FLVSession",
    "FileHeader",
    "OpaqueCodecData",
    "ScanState",
    "ScriptMetadata",
    "ScriptProperty",
    "SeekMarker",
    "Tag",
    "TagStreamIterator",
    "TruncatedInputError",
    "UnderflowInLengthError",
    "UnknownTagTypeError",
    "UnsupportedValueTypeError",
    "VideoPayload",
    "decode_audio_payload",
    "decode_avc_packet",
    "decode_header",
    "decode_script_data",
    "decode_video_payload",
    "extract_bits",
]
