"""
Pytest configuration and FLV byte builders.

An optional remote sample URL is loaded from the environment for the network
test. Locally, add TEST_URL_FLV to your .env file.
"""

import os
import struct
from pathlib import Path
from types import SimpleNamespace

import pytest
from dotenv import load_dotenv

# Load .env file from project root
project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")


def _header(flags: int = 0x05, version: int = 1, header_size: int = 9, signature: bytes = b"FLV") -> bytes:
    return signature + bytes([version, flags]) + struct.pack(">I", header_size)


def _tag(
    tag_type: int,
    payload: bytes,
    timestamp: int = 0,
    timestamp_ext: int = 0,
    stream_id: int = 0,
    previous_tag_size: int = 0,
    payload_size: int | None = None,
    type_byte: int | None = None,
) -> bytes:
    """PreviousTagSize + 11-byte tag header + payload."""
    size = len(payload) if payload_size is None else payload_size
    if type_byte is None:
        type_byte = tag_type
    return (
        struct.pack(">I", previous_tag_size)
        + bytes([type_byte])
        + size.to_bytes(3, "big")
        + timestamp.to_bytes(3, "big")
        + bytes([timestamp_ext])
        + stream_id.to_bytes(3, "big")
        + payload
    )


def _amf_string(text: str) -> bytes:
    raw = text.encode("utf-8")
    return struct.pack(">H", len(raw)) + raw


def _number(name: str, value: float) -> bytes:
    return _amf_string(name) + b"\x00" + struct.pack(">d", value)


def _boolean(name: str, value: bool) -> bytes:
    return _amf_string(name) + b"\x01" + bytes([1 if value else 0])


def _string(name: str, value: str) -> bytes:
    return _amf_string(name) + b"\x02" + _amf_string(value)


def _script(properties: list[bytes], count: int | None = None, name: str = "onMetaData") -> bytes:
    declared = len(properties) if count is None else count
    return (
        b"\x02"
        + _amf_string(name)
        + b"\x08"
        + struct.pack(">I", declared)
        + b"".join(properties)
        + b"\x00\x00\x09"
    )


@pytest.fixture
def flv():
    """Builders for synthetic FLV byte streams."""
    return SimpleNamespace(
        header=_header,
        tag=_tag,
        amf_string=_amf_string,
        number=_number,
        boolean=_boolean,
        string=_string,
        script=_script,
    )


@pytest.fixture
def get_test_url():
    """
    Factory fixture that returns a function to get test URLs from environment.

    Usage:
        def test_something(get_test_url):
            url = get_test_url("flv")
            if url is None:
                pytest.skip("TEST_URL_FLV not set")
    """

    def _get_url(name: str) -> str | None:
        env_var = f"TEST_URL_{name.upper()}"
        return os.environ.get(env_var)

    return _get_url
