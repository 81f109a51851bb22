"""
SCRIPTDATA (AMF0) payload decoding.

The payload of a script tag is a name string followed by an ECMA array of
named properties and an object-end marker:

    Type(1) NameLength(2) Name        -- usually 0x02, 10, "onMetaData"
    Type(1) ElementCount(4)           -- usually 0x08 (ECMA array)
    ElementCount x [NameLength(2) Name Type(1) Value]
    End(3)                            -- 0x00 0x00 0x09

Only Number, Boolean and String values are understood. What happens on
any other value type is controlled by the ``unsupported`` policy:

- "fail": raise UnsupportedValueTypeError.
- "skip": discard the rest of the payload (requires payload_size) and
  return the properties decoded so far.
"""

import logging
from dataclasses import dataclass
from typing import Literal

from flv_inspector.const import AMF_TYPE_BOOLEAN, AMF_TYPE_NUMBER, AMF_TYPE_STRING, SCRIPT_END_MARKER
from flv_inspector.decoder.byte_cursor import ByteCursor
from flv_inspector.decoder.errors import UnderflowInLengthError, UnsupportedValueTypeError

logger = logging.getLogger(__name__)

UnsupportedPolicy = Literal["fail", "skip"]

ScriptValue = float | bool | str


@dataclass(frozen=True, slots=True)
class ScriptProperty:
    name: str
    value: ScriptValue


@dataclass(frozen=True, slots=True)
class ScriptMetadata:
    """Decoded script data object (e.g. onMetaData)."""

    name: str
    declared_count: int
    properties: tuple[ScriptProperty, ...]
    skipped_bytes: int = 0

    def get(self, name: str, default: ScriptValue | None = None) -> ScriptValue | None:
        """Return the value of the first property called name."""
        for prop in self.properties:
            if prop.name == name:
                return prop.value
        return default

    def as_pairs(self) -> list[tuple[str, ScriptValue]]:
        return [(prop.name, prop.value) for prop in self.properties]


def _read_string(cursor: ByteCursor) -> str:
    """Read a ScriptDataString: UI16 length + text."""
    length = cursor.read_u16_be()
    return cursor.read_bytes(length).decode("utf-8", errors="replace")


def _read_value(cursor: ByteCursor, type_code: int) -> ScriptValue:
    if type_code == AMF_TYPE_NUMBER:
        return cursor.read_f64_be()
    if type_code == AMF_TYPE_BOOLEAN:
        return cursor.read_u8() != 0
    return _read_string(cursor)


def decode_script_data(
    cursor: ByteCursor,
    payload_size: int | None = None,
    unsupported: UnsupportedPolicy = "fail",
) -> ScriptMetadata:
    """
    Decode a script data payload.

    Args:
        cursor: Cursor positioned at the first payload byte.
        payload_size: Declared payload size. When given, trailing bytes after the
            end marker are discarded and overruns are rejected.
        unsupported: Policy for value types other than Number/Boolean/String.

    Returns:
        ScriptMetadata with the properties in stream order.
    """
    start = cursor.offset

    # Leading name string; the type byte is not validated
    cursor.read_u8()
    name = _read_string(cursor)

    # ECMA array header; the type byte is not validated
    cursor.read_u8()
    declared_count = cursor.read_u32_be()

    # Smallest property (empty name, Boolean) plus the object end marker
    min_remaining = len(SCRIPT_END_MARKER) + 4

    properties = []
    skipped = 0
    for _ in range(declared_count):
        if payload_size is not None:
            consumed = cursor.offset - start
            if payload_size - consumed < min_remaining:
                raise UnderflowInLengthError(
                    "script payload", payload_size, consumed + min_remaining, offset=cursor.offset
                )
        prop_name = _read_string(cursor)
        type_offset = cursor.offset
        type_code = cursor.read_u8()
        if type_code not in (AMF_TYPE_NUMBER, AMF_TYPE_BOOLEAN, AMF_TYPE_STRING):
            if unsupported == "skip" and payload_size is not None:
                consumed = cursor.offset - start
                if consumed > payload_size:
                    raise UnderflowInLengthError("script payload", payload_size, consumed, offset=start)
                skipped = cursor.skip(payload_size - consumed)
                logger.warning(
                    "[script] Unsupported AMF type %d for %r, skipped remaining %d bytes of %r",
                    type_code,
                    prop_name,
                    skipped,
                    name,
                )
                return ScriptMetadata(name, declared_count, tuple(properties), skipped)
            raise UnsupportedValueTypeError(type_code, prop_name, offset=type_offset)
        properties.append(ScriptProperty(prop_name, _read_value(cursor, type_code)))
        if payload_size is not None:
            consumed = cursor.offset - start
            if consumed > payload_size - len(SCRIPT_END_MARKER):
                raise UnderflowInLengthError(
                    "script payload", payload_size, consumed + len(SCRIPT_END_MARKER), offset=type_offset
                )

    end_marker = cursor.read_bytes(len(SCRIPT_END_MARKER))
    if end_marker != SCRIPT_END_MARKER:
        logger.debug("[script] Unexpected object end marker %s", end_marker.hex())

    if payload_size is not None:
        consumed = cursor.offset - start
        if consumed > payload_size:
            raise UnderflowInLengthError("script payload", payload_size, consumed, offset=start)
        if consumed < payload_size:
            skipped = cursor.skip(payload_size - consumed)
            logger.warning("[script] Discarded %d trailing bytes after %r", skipped, name)

    logger.debug("[script] %r with %d/%d properties", name, len(properties), declared_count)
    return ScriptMetadata(name, declared_count, tuple(properties), skipped)
