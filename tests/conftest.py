#!/usr/bin/env python3
"""
Pytest configuration and fixtures for trainload tests.

Provides a small FIT encoder (FitFileBuilder) so decoder, aggregator and
service tests run against byte-exact synthetic files with valid CRCs.
"""

import struct
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import pytest

from trainload.analytics.heart_rate_zones import AthleteConfig, Sex
from trainload.config import AggregatorSettings, DecoderSettings, ReadinessSettings
from trainload.processors.profile import fit_crc16, lookup_base_type, datetime_to_fit_timestamp


# Global message numbers
FILE_ID = 0
SESSION = 18
LAP = 19
RECORD = 20
EVENT = 21
ACTIVITY = 34
FIELD_DESCRIPTION = 206

# Base type numbers
ENUM = 0x00
SINT8 = 0x01
UINT8 = 0x02
SINT16 = 0x83
UINT16 = 0x84
SINT32 = 0x85
UINT32 = 0x86
STRING = 0x07
FLOAT32 = 0x88
BYTE = 0x0D

FieldSpec = Tuple[int, int, int]  # (field number, size, base type)

START = datetime(2024, 3, 4, 7, 0, 0, tzinfo=timezone.utc)

RECORD_FIELDS = [
    (253, 4, UINT32),  # timestamp
    (3, 1, UINT8),     # heart_rate
    (5, 4, UINT32),    # distance, cm
    (6, 2, UINT16),    # speed, mm/s
    (7, 2, UINT16),    # power
]

LAP_FIELDS = [
    (253, 4, UINT32),  # timestamp
    (2, 4, UINT32),    # start_time
    (8, 4, UINT32),    # total_timer_time, ms
    (9, 4, UINT32),    # total_distance, cm
    (15, 1, UINT8),    # avg_heart_rate
    (16, 1, UINT8),    # max_heart_rate
    (24, 1, ENUM),     # lap_trigger
]

SESSION_FIELDS = [
    (253, 4, UINT32),  # timestamp
    (2, 4, UINT32),    # start_time
    (5, 1, ENUM),      # sport
    (6, 1, ENUM),      # sub_sport
    (8, 4, UINT32),    # total_timer_time, ms
    (9, 4, UINT32),    # total_distance, cm
    (11, 2, UINT16),   # total_calories
    (16, 1, UINT8),    # avg_heart_rate
    (17, 1, UINT8),    # max_heart_rate
    (22, 2, UINT16),   # total_ascent
]

ACTIVITY_FIELDS = [
    (253, 4, UINT32),  # timestamp
    (1, 2, UINT16),    # num_sessions
]


def fit_ts(value: datetime) -> int:
    """FIT epoch seconds for an aware datetime"""
    return datetime_to_fit_timestamp(value)


def encode_value(value: Any, size: int, base_number: int, order: str) -> bytes:
    """Encode one field value; None encodes the base type's invalid sentinel"""
    base = lookup_base_type(base_number)

    if isinstance(value, (bytes, bytearray)):
        return bytes(value)[:size].ljust(size, b'\xff')

    if base.name == 'string':
        raw = (value or '').encode('utf-8')
        return raw[:size].ljust(size, b'\x00')

    if base.struct_code is None:
        if value is None:
            return bytes([base.invalid]) * size
        return bytes(value).ljust(size, b'\xff')

    count = size // base.size
    values = list(value) if isinstance(value, (tuple, list)) else [value]
    if len(values) != count:
        raise ValueError(f"Expected {count} values for a {size}-byte {base.name} field")

    out = bytearray()
    for item in values:
        if item is None:
            if base.struct_code in ('f', 'd'):
                invalid_code = 'I' if base.size == 4 else 'Q'
                out += struct.pack(order + invalid_code, base.invalid)
            else:
                out += struct.pack(order + base.struct_code, base.invalid)
        else:
            out += struct.pack(order + base.struct_code, item)
    return bytes(out)


class FitFileBuilder:
    """Byte-level FIT file writer for tests"""

    def __init__(self, header_size: int = 14, protocol_version: int = 0x20,
                 profile_version: int = 2132):
        self.header_size = header_size
        self.protocol_version = protocol_version
        self.profile_version = profile_version
        self.body = bytearray()
        self._layouts = {}

    def define(self, local_type: int, global_number: int, fields: Sequence[FieldSpec],
               big_endian: bool = False,
               developer_fields: Sequence[FieldSpec] = ()) -> "FitFileBuilder":
        header = 0x40 | local_type
        if developer_fields:
            header |= 0x20
        order = '>' if big_endian else '<'

        out = bytearray([header, 0, 1 if big_endian else 0])
        out += struct.pack(order + 'H', global_number)
        out.append(len(fields))
        for number, size, base in fields:
            out += bytes([number, size, base])
        if developer_fields:
            out.append(len(developer_fields))
            for number, size, index in developer_fields:
                out += bytes([number, size, index])

        self.body += out
        self._layouts[local_type] = (list(fields), order, list(developer_fields))
        return self

    def data(self, local_type: int, *values: Any,
             developer: Iterable[bytes] = (),
             time_offset: Optional[int] = None) -> "FitFileBuilder":
        """
        Append a data message. With ``time_offset`` a compressed-timestamp
        header is written (local types 0-3 only). Developer values are raw bytes.
        """
        fields, order, _ = self._layouts[local_type]
        if time_offset is None:
            header = local_type
        else:
            header = 0x80 | ((local_type & 0x03) << 5) | (time_offset & 0x1F)

        out = bytearray([header])
        for (number, size, base), value in zip(fields, values):
            out += encode_value(value, size, base, order)
        for raw in developer:
            out += raw
        self.body += out
        return self

    def raw(self, data: bytes) -> "FitFileBuilder":
        self.body += data
        return self

    def build(self, header_crc: bool = True, file_crc: bool = True,
              data_size: Optional[int] = None, signature: bytes = b'.FIT') -> bytes:
        size = len(self.body) if data_size is None else data_size
        header = struct.pack('<BBHI4s', self.header_size, self.protocol_version,
                             self.profile_version, size, signature)
        if self.header_size >= 14:
            header += struct.pack('<H', fit_crc16(header) if header_crc else 0)
        header += bytes(max(0, self.header_size - len(header)))

        out = header + bytes(self.body)
        if file_crc:
            out += struct.pack('<H', fit_crc16(out))
        return out


def build_run_file(start: datetime = START, duration_s: int = 1200, interval_s: int = 5,
                   lap_split_s: Optional[int] = 600, start_hr: int = 130, end_hr: int = 150,
                   speed_ms: float = 3.0, power: Optional[int] = 250,
                   with_hr: bool = True, with_session: bool = True,
                   sport: int = 1, sub_sport: int = 0) -> bytes:
    """
    Synthetic run: one record every ``interval_s`` seconds with HR rising
    linearly from ``start_hr`` to ``end_hr``, constant speed and power,
    laps every ``lap_split_s`` seconds, then a session and activity message.
    """
    builder = FitFileBuilder()
    builder.define(0, RECORD, RECORD_FIELDS)
    builder.define(1, LAP, LAP_FIELDS)
    builder.define(2, SESSION, SESSION_FIELDS)
    builder.define(3, ACTIVITY, ACTIVITY_FIELDS)

    heart_rates: List[int] = []
    lap_start = 0
    lap_hrs: List[int] = []
    steps = duration_s // interval_s
    for step in range(steps + 1):
        elapsed = step * interval_s
        heart_rate = round(start_hr + (end_hr - start_hr) * elapsed / duration_s) if with_hr else None
        if heart_rate is not None:
            heart_rates.append(heart_rate)
            lap_hrs.append(heart_rate)
        builder.data(
            0,
            fit_ts(start + timedelta(seconds=elapsed)),
            heart_rate,
            round(speed_ms * elapsed * 100),
            round(speed_ms * 1000),
            power
        )

        if lap_split_s and elapsed > 0 and (elapsed % lap_split_s == 0 or step == steps):
            lap_duration = elapsed - lap_start
            builder.data(
                1,
                fit_ts(start + timedelta(seconds=elapsed)),
                fit_ts(start + timedelta(seconds=lap_start)),
                lap_duration * 1000,
                round(speed_ms * lap_duration * 100),
                round(sum(lap_hrs) / len(lap_hrs)) if lap_hrs else None,
                max(lap_hrs) if lap_hrs else None,
                1  # time
            )
            lap_start = elapsed
            lap_hrs = []

    end = start + timedelta(seconds=duration_s)
    if with_session:
        builder.data(
            2,
            fit_ts(end),
            fit_ts(start),
            sport,
            sub_sport,
            duration_s * 1000,
            round(speed_ms * duration_s * 100),
            450,
            round(sum(heart_rates) / len(heart_rates)) if heart_rates else None,
            max(heart_rates) if heart_rates else None,
            42
        )
    builder.data(3, fit_ts(end), 1)
    return builder.build()


@pytest.fixture
def fit_builder():
    """Fixture providing an empty FIT file builder"""
    return FitFileBuilder()


@pytest.fixture
def athlete():
    """Fixture providing a male athlete with default zones"""
    return AthleteConfig(resting_hr=50, max_hr=190, sex=Sex.MALE)


@pytest.fixture
def power_athlete():
    """Fixture providing an athlete with a known FTP"""
    return AthleteConfig(resting_hr=50, max_hr=190, sex=Sex.MALE, ftp=250)


@pytest.fixture
def decoder_settings():
    return DecoderSettings(verify_crc=True, max_warnings=200)


@pytest.fixture
def aggregator_settings():
    return AggregatorSettings()


@pytest.fixture
def readiness_settings():
    return ReadinessSettings()


@pytest.fixture
def run_file() -> bytes:
    """Fixture providing a 20 minute synthetic run with two laps"""
    return build_run_file()


@pytest.fixture
def day0() -> date:
    return date(2024, 3, 4)
