# file: tests/test_module1_metadata.py

"""
Unit tests for Module 1: Metadata Codec.

Test coverage:
    - Header layout and field encoding
    - Round-trip through decode_header
    - Rejection of bad magic, unknown types and short buffers
    - Size overflow
"""

import random
import struct

import pytest

from hmqc.module1_metadata import (
    ContentType,
    MetadataHeader,
    encode_header,
    decode_header,
    MAGIC,
    VERSION,
    HEADER_SIZE,
    SizeOverflowError,
    BadMagicError,
    UnknownContentTypeError,
    TruncatedHeaderError,
)


class TestEncodeHeader:
    """Test header assembly."""

    def test_header_is_32_bytes(self):
        header = encode_header(ContentType.TEXT, 5, 5)
        assert len(header) == HEADER_SIZE == 32

    def test_field_layout_big_endian(self):
        header = encode_header(
            ContentType.AUDIO, 1000, 600, timestamp=1_700_000_000, instance_id=0xDEADBEEF
        )
        fields = struct.unpack(">8I", header)

        assert header[:4] == b"HMQC"
        assert fields[0] == MAGIC
        assert fields[1] == VERSION == 0x030000
        assert fields[2] == 3
        assert fields[3] == 1000
        assert fields[4] == 600
        assert fields[5] == 1_700_000_000
        assert fields[6] == 0xDEADBEEF
        assert fields[7] == 0

    def test_instance_id_reproducible_with_rng(self):
        a = encode_header(ContentType.BINARY, 1, 1, timestamp=0, rng=random.Random(7))
        b = encode_header(ContentType.BINARY, 1, 1, timestamp=0, rng=random.Random(7))
        assert a == b

    def test_size_limit_accepted(self):
        header = encode_header(ContentType.BINARY, 0xFFFFFFFF, 0)
        assert decode_header(header).original_size == 0xFFFFFFFF

    def test_size_overflow(self):
        with pytest.raises(SizeOverflowError) as exc_info:
            encode_header(ContentType.BINARY, 2 ** 32, 10)
        assert exc_info.value.field_name == "original_size"

    @pytest.mark.parametrize("content_type", [0, 9, "text"])
    def test_unknown_content_type_rejected(self, content_type):
        with pytest.raises(UnknownContentTypeError) as exc_info:
            encode_header(content_type, 1, 1)
        assert exc_info.value.code == content_type

    def test_negative_size_rejected(self):
        with pytest.raises(SizeOverflowError):
            encode_header(ContentType.BINARY, 10, -1)


class TestDecodeHeader:
    """Test header parsing and validation."""

    def test_roundtrip_fields(self):
        data = encode_header(ContentType.IMAGE, 4096, 1234, timestamp=42, instance_id=99)
        header = decode_header(data)

        assert isinstance(header, MetadataHeader)
        assert header.content_type is ContentType.IMAGE
        assert header.original_size == 4096
        assert header.compressed_size == 1234
        assert header.timestamp == 42
        assert header.id == 99
        assert header.pack() == data

    def test_extra_bytes_ignored(self):
        data = encode_header(ContentType.TEXT, 3, 3) + b"payload"
        assert decode_header(data).original_size == 3

    def test_version_accessors(self):
        header = decode_header(encode_header(ContentType.TEXT, 0, 0, timestamp=0))
        assert header.version_tuple == (3, 0, 0)
        assert header.version_string == "3.0.0"
        assert header.created_at.year == 1970

    def test_bad_magic(self):
        data = bytearray(encode_header(ContentType.TEXT, 1, 1))
        data[0] ^= 0xFF
        with pytest.raises(BadMagicError):
            decode_header(bytes(data))

    @pytest.mark.parametrize("code", [0, 5, 255])
    def test_unknown_content_type_strict(self, code):
        data = bytearray(encode_header(ContentType.TEXT, 1, 1))
        data[8:12] = struct.pack(">I", code)
        with pytest.raises(UnknownContentTypeError) as exc_info:
            decode_header(bytes(data))
        assert exc_info.value.code == code

    def test_unknown_content_type_lenient(self, caplog):
        data = bytearray(encode_header(ContentType.TEXT, 1, 1))
        data[8:12] = struct.pack(">I", 9)
        header = decode_header(bytes(data), strict=False)
        assert header.content_type is ContentType.BINARY
        assert "Unknown content type" in caplog.text

    def test_truncated(self):
        with pytest.raises(TruncatedHeaderError):
            decode_header(b"HMQC" + b"\x00" * 20)


class TestContentType:
    """Test content type lookup."""

    def test_codes(self):
        assert [int(t) for t in ContentType] == [1, 2, 3, 4]

    def test_from_name(self):
        assert ContentType.from_name(" Audio ") is ContentType.AUDIO

    def test_from_name_unknown(self):
        with pytest.raises(ValueError, match="expected one of"):
            ContentType.from_name("video")
