#!/usr/bin/env python3
"""
Test suite for the FIT decoder.

Covers header validation, definition/data decoding, field scaling and
invalid sentinels, compressed timestamps, developer fields, bounded resync
on malformed records, CRC checks and a cross-check against fitparse.
"""

import struct
from datetime import timedelta

import pytest

from trainload.config import DecoderSettings
from trainload.processors.fit_decoder import FitDecoder, decode_fit
from trainload.processors.interface import (
    BufferTooShort, DecoderState, InvalidHeader, InvalidSignature, MessageCategory
)
from trainload.processors.profile import SEMICIRCLES_TO_DEGREES

from conftest import (
    ACTIVITY, ENUM, FIELD_DESCRIPTION, RECORD, SESSION, SINT32, START, STRING,
    UINT8, UINT16, UINT32, FitFileBuilder, fit_ts
)


def hr_file(values, header_size=12, file_crc=True):
    builder = FitFileBuilder(header_size=header_size, protocol_version=16, profile_version=100)
    builder.define(0, RECORD, [(3, 2, UINT16)])
    for value in values:
        builder.data(0, value)
    return builder.build(file_crc=file_crc)


class TestFitHeader:
    """Test header validation"""

    def test_header_fields_parsed(self, run_file):
        result = decode_fit(run_file)
        header = result.header
        assert header.header_size == 14
        assert header.signature == b'.FIT'
        assert header.profile_version == 2132
        assert header.end_offset == len(run_file) - 2
        assert header.header_crc != 0

    def test_invalid_signature_is_fatal(self):
        buffer = FitFileBuilder().define(0, RECORD, [(3, 1, UINT8)]).build(signature=b'.FTT')
        decoder = FitDecoder(buffer)
        with pytest.raises(InvalidSignature):
            decoder.decode()
        assert decoder.state is DecoderState.FAILED

    def test_buffer_shorter_than_header(self):
        with pytest.raises(BufferTooShort):
            decode_fit(b'\x0e\x10\x00\x00')

    def test_declared_data_size_exceeds_buffer(self):
        buffer = FitFileBuilder().define(0, RECORD, [(3, 1, UINT8)]).build(data_size=500)
        with pytest.raises(BufferTooShort):
            decode_fit(buffer)

    def test_declared_header_size_exceeds_buffer(self):
        buffer = bytearray(hr_file([60]))
        buffer[0] = 200
        with pytest.raises(BufferTooShort):
            decode_fit(bytes(buffer))

    def test_header_size_below_minimum(self):
        buffer = bytearray(hr_file([60]))
        buffer[0] = 10
        with pytest.raises(InvalidHeader):
            decode_fit(bytes(buffer))

    def test_decoder_is_single_use(self, run_file):
        decoder = FitDecoder(run_file)
        decoder.decode()
        assert decoder.state is DecoderState.DONE
        with pytest.raises(RuntimeError):
            decoder.decode()


class TestDataMessages:
    """Test definition and data message decoding"""

    def test_twelve_byte_header_u16_heart_rate(self):
        values = [60, 70, 80, 90, 100]
        result = decode_fit(hr_file(values))

        assert len(result.messages) == len(values)
        assert all(m.category is MessageCategory.RECORD for m in result.messages)
        assert [m.get('heart_rate') for m in result.messages] == values
        assert result.warnings == []
        assert result.bytes_consumed == result.header.data_size

    def test_missing_crc_footer_is_not_an_error(self):
        result = decode_fit(hr_file([60, 61], file_crc=False))
        assert len(result.records) == 2
        assert result.crc_valid is None

    def test_scale_offset_and_semicircles(self):
        latitude = 52.5
        semicircles = round(latitude / SEMICIRCLES_TO_DEGREES)
        builder = FitFileBuilder()
        builder.define(0, RECORD, [
            (253, 4, UINT32), (0, 4, SINT32), (2, 2, UINT16), (5, 4, UINT32), (6, 2, UINT16)
        ])
        # altitude 120 m -> (120 + 500) * 5
        builder.data(0, fit_ts(START), semicircles, 3100, 123456, 3250)
        record = decode_fit(builder.build()).records[0]

        assert record.timestamp == START
        assert record.timestamp.tzinfo is not None
        assert record.get('position_lat') == pytest.approx(latitude, abs=1e-6)
        assert record.get('altitude') == pytest.approx(120.0)
        assert record.get('distance') == pytest.approx(1234.56)
        assert record.get('speed') == pytest.approx(3.25)

    def test_invalid_sentinels_are_absent(self):
        builder = FitFileBuilder()
        builder.define(0, RECORD, [(253, 4, UINT32), (3, 1, UINT8), (7, 2, UINT16)])
        builder.data(0, fit_ts(START), None, None)
        record = decode_fit(builder.build()).records[0]

        assert 'heart_rate' not in record.fields
        assert 'power' not in record.fields
        assert record.timestamp == START

    def test_big_endian_definition(self):
        builder = FitFileBuilder()
        builder.define(0, RECORD, [(253, 4, UINT32), (7, 2, UINT16)], big_endian=True)
        builder.data(0, fit_ts(START), 310)
        record = decode_fit(builder.build()).records[0]

        assert record.get('power') == 310
        assert record.timestamp == START

    def test_enum_fields(self):
        builder = FitFileBuilder()
        builder.define(0, SESSION, [(253, 4, UINT32), (5, 1, ENUM), (6, 1, ENUM)])
        builder.data(0, fit_ts(START), 2, 99)
        session = decode_fit(builder.build()).sessions[0]

        assert session.get('sport') == 'cycling'
        # Unknown enum codes pass through as integers
        assert session.get('sub_sport') == 99

    def test_array_field_decodes_to_tuple(self):
        builder = FitFileBuilder()
        builder.define(0, RECORD, [(99, 4, UINT16), (98, 3, UINT16)])
        builder.data(0, (1, 2), b'\x01\x02\x03')
        result = decode_fit(builder.build())
        record = result.records[0]

        assert record.get('unknown_99') == (1, 2)
        # 3 bytes is not a whole number of uint16 values
        assert record.get('unknown_98') == b'\x01\x02\x03'
        assert any("not a multiple" in w for w in result.warnings)

    def test_unknown_global_message(self):
        builder = FitFileBuilder()
        builder.define(0, 999, [(1, 1, UINT8)])
        builder.data(0, 5)
        message = decode_fit(builder.build()).messages[0]

        assert message.name == 'unknown_999'
        assert message.category is MessageCategory.UNKNOWN
        assert message.get('unknown_1') == 5

    def test_local_type_redefinition(self):
        builder = FitFileBuilder()
        builder.define(0, RECORD, [(3, 1, UINT8)])
        builder.data(0, 140)
        builder.define(0, ACTIVITY, [(1, 2, UINT16)])
        builder.data(0, 1)
        messages = decode_fit(builder.build()).messages

        assert messages[0].category is MessageCategory.RECORD
        assert messages[1].category is MessageCategory.ACTIVITY
        assert messages[1].get('num_sessions') == 1


class TestCompressedTimestamps:
    """Test compressed-timestamp record headers"""

    def test_offsets_roll_forward(self):
        base = fit_ts(START)
        absolute = base - (base % 32) + 30

        builder = FitFileBuilder()
        builder.define(0, RECORD, [(253, 4, UINT32), (3, 1, UINT8)])
        builder.define(1, RECORD, [(3, 1, UINT8)])
        builder.data(0, absolute, 120)
        builder.data(1, 121, time_offset=31)
        builder.data(1, 122, time_offset=2)
        records = decode_fit(builder.build()).records

        first = records[0].timestamp
        assert records[1].timestamp - first == timedelta(seconds=1)
        # Offset 2 is below the previous low bits (31), so it wraps to the next 32 s block
        assert records[2].timestamp - first == timedelta(seconds=4)
        assert [r.get('heart_rate') for r in records] == [120, 121, 122]

    def test_compressed_without_prior_timestamp_warns(self):
        builder = FitFileBuilder()
        builder.define(1, RECORD, [(3, 1, UINT8)])
        builder.data(1, 130, time_offset=4)
        result = decode_fit(builder.build())

        assert result.records[0].timestamp is None
        assert any("no preceding absolute timestamp" in w for w in result.warnings)


class TestDeveloperFields:
    """Test developer data fields"""

    def test_described_developer_field(self):
        builder = FitFileBuilder()
        builder.define(0, FIELD_DESCRIPTION, [
            (0, 1, UINT8), (1, 1, UINT8), (2, 1, UINT8), (3, 16, STRING), (8, 8, STRING)
        ])
        builder.data(0, 0, 0, UINT16, "Power", "Watts")
        builder.define(1, RECORD, [(253, 4, UINT32)], developer_fields=[(0, 2, 0), (1, 1, 0)])
        builder.data(1, fit_ts(START), developer=[struct.pack('<H', 287), b'\x07'])
        result = decode_fit(builder.build())
        record = result.records[0]

        assert record.developer_fields['Power'] == 287
        # No field_description for field 1
        assert record.developer_fields['developer_0_1'] == b'\x07'
        assert 'Power' not in record.fields


class TestBoundedResync:
    """Test recovery from malformed records"""

    def test_undefined_local_type_is_skipped(self):
        builder = FitFileBuilder()
        builder.define(0, RECORD, [(3, 1, UINT8)])
        builder.data(0, 100)
        builder.raw(b'\x05')  # data header for undefined local type 5
        builder.data(0, 101)
        result = decode_fit(builder.build())

        assert [r.get('heart_rate') for r in result.records] == [100, 101]
        assert result.skipped_bytes == 1
        assert len(result.warnings) == 1
        assert "local message type 5" in result.warnings[0]

    def test_truncated_trailing_record(self):
        builder = FitFileBuilder()
        builder.define(0, RECORD, [(253, 4, UINT32), (3, 1, UINT8)])
        builder.data(0, fit_ts(START), 100)
        builder.data(0, fit_ts(START) + 1, 101)
        builder.raw(b'\x00\x10')  # data header plus one of five payload bytes
        result = decode_fit(builder.build())

        assert len(result.records) == 2
        assert result.skipped_bytes == 2
        assert result.bytes_consumed == result.header.data_size

    def test_unknown_architecture_is_malformed(self):
        builder = FitFileBuilder()
        builder.raw(bytes([0x40, 0, 7, RECORD, 0, 1, 3, 1, UINT8]))
        builder.define(0, RECORD, [(3, 1, UINT8)])
        builder.data(0, 150)
        result = decode_fit(builder.build())

        assert [r.get('heart_rate') for r in result.records] == [150]
        assert any("architecture" in w for w in result.warnings)

    def test_warning_cap(self):
        builder = FitFileBuilder()
        builder.raw(b'\x05' * 10)
        result = decode_fit(builder.build(), DecoderSettings(max_warnings=3))

        assert len(result.warnings) == 4
        assert result.warnings[-1] == "7 further warnings suppressed"
        assert result.skipped_bytes == 10


class TestCrcVerification:
    """Test header and file CRC checks"""

    def test_valid_file_crc(self, run_file):
        result = decode_fit(run_file)
        assert result.crc_valid is True
        assert result.warnings == []

    def test_corrupt_file_crc_is_soft(self, run_file):
        corrupted = bytearray(run_file)
        corrupted[-1] ^= 0xFF
        result = decode_fit(bytes(corrupted))

        assert result.crc_valid is False
        assert any("File CRC mismatch" in w for w in result.warnings)
        assert len(result.records) == len(decode_fit(run_file).records)

    def test_corrupt_header_crc_is_soft(self):
        buffer = bytearray(FitFileBuilder().define(0, RECORD, [(3, 1, UINT8)]).data(0, 99).build())
        buffer[12] ^= 0x01
        result = decode_fit(bytes(buffer))

        assert result.crc_valid is False
        assert any("Header CRC mismatch" in w for w in result.warnings)
        assert result.records[0].get('heart_rate') == 99

    def test_crc_check_disabled(self, run_file):
        corrupted = bytearray(run_file)
        corrupted[-1] ^= 0xFF
        result = decode_fit(bytes(corrupted), DecoderSettings(verify_crc=False))
        assert result.crc_valid is None
        assert result.warnings == []


class TestRunFile:
    """Test a complete synthetic activity file"""

    def test_message_mix(self, run_file):
        result = decode_fit(run_file)

        assert len(result.records) == 241
        assert len(result.laps) == 2
        assert len(result.sessions) == 1
        assert len(result.messages_of(MessageCategory.ACTIVITY)) == 1
        assert result.bytes_consumed == result.header.data_size

    def test_session_values(self, run_file):
        session = decode_fit(run_file).sessions[0]
        assert session.get('sport') == 'running'
        assert session.get('total_timer_time') == pytest.approx(1200.0)
        assert session.get('total_distance') == pytest.approx(3600.0)
        assert session.get('start_time') == START

    def test_matches_fitparse(self, run_file):
        fitparse = pytest.importorskip("fitparse")
        reference = list(fitparse.FitFile(run_file).get_messages('record'))
        decoded = decode_fit(run_file).records

        assert len(decoded) == len(reference)
        for ours, theirs in zip(decoded, reference):
            assert ours.get('heart_rate') == theirs.get_value('heart_rate')
            assert ours.get('distance') == pytest.approx(theirs.get_value('distance'))
            assert ours.get('speed') == pytest.approx(theirs.get_value('speed'))
            assert ours.timestamp.replace(tzinfo=None) == theirs.get_value('timestamp')
