from enum import IntEnum

# =============================================================================
# Wire constants
# =============================================================================

FLV_SIGNATURE = b"FLV"
FLV_HEADER_SIZE = 9

# TypeFlags byte: UB[5] reserved, UB[1] audio, UB[1] reserved, UB[1] video
FLV_HEADER_AUDIO_BIT = 2
FLV_HEADER_VIDEO_BIT = 0

# Tag byte: filter flag and tag type. The filter is read from bit 4, which
# overlaps the top bit of the 5-bit type, so script tags (18) report it set.
TAG_FILTER_BIT = 4
TAG_TYPE_BITS = 5


class TagType(IntEnum):
    AUDIO = 8
    VIDEO = 9
    SCRIPT = 18


SOUND_FORMAT_AAC = 10

VIDEO_FRAME_TYPE_INFO = 5

FLV_CODEC_ID_H263 = 2
FLV_CODEC_ID_SCREEN = 3
FLV_CODEC_ID_VP6 = 4
FLV_CODEC_ID_VP6_ALPHA = 5
FLV_CODEC_ID_SCREEN_V2 = 6
FLV_CODEC_ID_AVC = 7

AVC_SEQUENCE_HEADER = 0
AVC_NALU = 1
AVC_END_OF_SEQUENCE = 2

# AMF0 value type markers understood by the script data decoder
AMF_TYPE_NUMBER = 0
AMF_TYPE_BOOLEAN = 1
AMF_TYPE_STRING = 2

SCRIPT_END_MARKER = b"\x00\x00\x09"

# =============================================================================
# Descriptive labels for reports
# =============================================================================

SOUND_FORMATS = [
    "Linear PCM, platform endian",
    "ADPCM",
    "MP3",
    "Linear PCM, little endian",
    "Nellymoser 16 kHz mono",
    "Nellymoser 8 kHz mono",
    "Nellymoser",
    "G.711 A-law logarithmic PCM",
    "G.711 mu-law logarithmic PCM",
    "reserved",
    "AAC",
    "Speex",
    "not defined by standard",
    "not defined by standard",
    "MP3 8-Khz",
    "Device-specific sound",
]

SOUND_RATES = ["5.5 Khz", "11 Khz", "22 Khz", "44 Khz"]

SOUND_SIZES = ["8-bit samples", "16-bit samples"]

SOUND_TYPES = ["Mono sound", "Stereo sound"]

AAC_PACKET_TYPES = ["AAC sequence header", "AAC raw"]

FRAME_TYPES = [
    "not defined by standard",
    "keyframe (for AVC, a seekable frame)",
    "inter frame (for AVC, a non-seekable frame)",
    "disposable inter frame (H.263 only)",
    "generated keyframe (reserved for server use only)",
    "video info/command frame",
]

CODEC_IDS = [
    "not defined by standard",
    "not defined by standard",
    "Sorenson H.263",
    "Screen video",
    "On2 VP6",
    "On2 VP6 with alpha channel",
    "Screen video version 2",
    "AVC",
]

# Packet names used by the original FLV tools for non-AVC video bodies
VIDEO_PACKET_NAMES = {
    FLV_CODEC_ID_H263: "H263VIDEOPACKET",
    FLV_CODEC_ID_SCREEN: "SCREENVIDEOPACKET",
    FLV_CODEC_ID_VP6: "VP6VIDEOPACKET",
    FLV_CODEC_ID_VP6_ALPHA: "VP6ALPHAPACKET",
    FLV_CODEC_ID_SCREEN_V2: "SCREENV2PACKET",
}

AVC_PACKET_TYPES = {
    AVC_SEQUENCE_HEADER: "AVC sequence header",
    AVC_NALU: "AVC NALU",
    AVC_END_OF_SEQUENCE: "AVC end of sequence (lower level NALU sequence ender is not required or supported)",
}

TAG_TYPE_NAMES = {
    TagType.AUDIO: "Audio data",
    TagType.VIDEO: "Video data",
    TagType.SCRIPT: "Script data object",
}

# Units for well-known onMetaData properties
METADATA_UNITS = {
    "audiodatarate": "kbs",
    "videodatarate": "kbs",
    "audiodelay": "seconds",
    "duration": "seconds",
    "audiosamplerate": "Hz",
    "framerate": "fps",
    "height": "pixels",
    "width": "pixels",
    "filesize": "bytes",
}


def describe_code(table: list[str] | dict[int, str], code: int) -> str:
    """Look up a label for a numeric code, tolerating values outside the table."""
    if isinstance(table, dict):
        return table.get(code, "not defined by standard")
    if 0 <= code < len(table):
        return table[code]
    return "not defined by standard"
