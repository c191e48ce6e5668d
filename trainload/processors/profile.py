#!/usr/bin/env python3
"""
FIT Global Profile subset

Immutable lookup data describing the base types, enumerated types and the
message/field layout (name, scale, offset, units) for the messages the
activity pipeline consumes. Field numbers and scales follow the FIT SDK
Profile; messages and fields not listed here decode as ``unknown_<n>``.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .interface import MessageCategory


# FIT timestamps count seconds from 1989-12-31T00:00:00Z
FIT_EPOCH = datetime(1989, 12, 31, tzinfo=timezone.utc)
FIT_EPOCH_OFFSET = 631065600

# date_time values below this are relative (seconds since device power-on)
MIN_ABSOLUTE_TIMESTAMP = 0x10000000

SEMICIRCLES_TO_DEGREES = 180.0 / 2 ** 31

TIMESTAMP_FIELD_NUMBER = 253

CRC_TABLE = (
    0x0000, 0xCC01, 0xD801, 0x1400, 0xF001, 0x3C00, 0x2800, 0xE401,
    0xA001, 0x6C00, 0x7800, 0xB401, 0x5000, 0x9C01, 0x8801, 0x4400,
)


def fit_crc16(data, crc: int = 0) -> int:
    """FIT CRC-16 over ``data``, optionally continuing from a previous ``crc``"""
    for byte in data:
        tmp = CRC_TABLE[crc & 0xF]
        crc = ((crc >> 4) & 0x0FFF) ^ tmp ^ CRC_TABLE[byte & 0xF]
        tmp = CRC_TABLE[crc & 0xF]
        crc = ((crc >> 4) & 0x0FFF) ^ tmp ^ CRC_TABLE[(byte >> 4) & 0xF]
    return crc & 0xFFFF


def fit_timestamp_to_datetime(seconds: int) -> datetime:
    """Convert FIT epoch seconds to an aware UTC datetime"""
    return FIT_EPOCH + timedelta(seconds=seconds)


def datetime_to_fit_timestamp(value: datetime) -> int:
    """Convert an aware datetime to FIT epoch seconds"""
    return int((value - FIT_EPOCH).total_seconds())


@dataclass(frozen=True)
class BaseType:
    """FIT base type: wire width, struct code and invalid sentinel"""
    number: int
    name: str
    size: int
    struct_code: Optional[str]
    invalid: Any
    signed: bool = False


BASE_TYPES: Mapping[int, BaseType] = MappingProxyType({
    0x00: BaseType(0x00, 'enum', 1, 'B', 0xFF),
    0x01: BaseType(0x01, 'sint8', 1, 'b', 0x7F, signed=True),
    0x02: BaseType(0x02, 'uint8', 1, 'B', 0xFF),
    0x83: BaseType(0x83, 'sint16', 2, 'h', 0x7FFF, signed=True),
    0x84: BaseType(0x84, 'uint16', 2, 'H', 0xFFFF),
    0x85: BaseType(0x85, 'sint32', 4, 'i', 0x7FFFFFFF, signed=True),
    0x86: BaseType(0x86, 'uint32', 4, 'I', 0xFFFFFFFF),
    0x07: BaseType(0x07, 'string', 1, None, ''),
    0x88: BaseType(0x88, 'float32', 4, 'f', 0xFFFFFFFF),
    0x89: BaseType(0x89, 'float64', 8, 'd', 0xFFFFFFFFFFFFFFFF),
    0x0A: BaseType(0x0A, 'uint8z', 1, 'B', 0x00),
    0x8B: BaseType(0x8B, 'uint16z', 2, 'H', 0x0000),
    0x8C: BaseType(0x8C, 'uint32z', 4, 'I', 0x00000000),
    0x0D: BaseType(0x0D, 'byte', 1, None, 0xFF),
    0x8E: BaseType(0x8E, 'sint64', 8, 'q', 0x7FFFFFFFFFFFFFFF, signed=True),
    0x8F: BaseType(0x8F, 'uint64', 8, 'Q', 0xFFFFFFFFFFFFFFFF),
    0x90: BaseType(0x90, 'uint64z', 8, 'Q', 0x0000000000000000),
})

BYTE_BASE_TYPE = BASE_TYPES[0x0D]


def lookup_base_type(number: int) -> BaseType:
    """Base type for a definition's base-type byte; unknown numbers read as bytes"""
    base_type = BASE_TYPES.get(number)
    if base_type is None:
        # The endian-ability bit (0x80) is sometimes omitted by writers
        base_type = BASE_TYPES.get(number | 0x80, BYTE_BASE_TYPE)
    return base_type


# Enumerated profile types: value -> name
TYPES: Mapping[str, Mapping[int, str]] = MappingProxyType({
    'file': MappingProxyType({
        1: 'device', 2: 'settings', 3: 'sport', 4: 'activity', 5: 'workout',
        6: 'course', 7: 'schedules', 9: 'weight', 10: 'totals', 11: 'goals',
        14: 'blood_pressure', 15: 'monitoring_a', 20: 'activity_summary',
        28: 'monitoring_daily', 32: 'monitoring_b', 34: 'segment',
    }),
    'sport': MappingProxyType({
        0: 'generic', 1: 'running', 2: 'cycling', 3: 'transition',
        4: 'fitness_equipment', 5: 'swimming', 6: 'basketball', 7: 'soccer',
        8: 'tennis', 9: 'american_football', 10: 'training', 11: 'walking',
        12: 'cross_country_skiing', 13: 'alpine_skiing', 14: 'snowboarding',
        15: 'rowing', 16: 'mountaineering', 17: 'hiking', 18: 'multisport',
        19: 'paddling', 20: 'flying', 21: 'e_biking', 37: 'stand_up_paddleboarding',
        41: 'kayaking', 43: 'yoga', 254: 'all',
    }),
    'sub_sport': MappingProxyType({
        0: 'generic', 1: 'treadmill', 2: 'street', 3: 'trail', 4: 'track',
        5: 'spin', 6: 'indoor_cycling', 7: 'road', 8: 'mountain', 9: 'downhill',
        10: 'recumbent', 11: 'cyclocross', 12: 'hand_cycling', 13: 'track_cycling',
        14: 'indoor_rowing', 15: 'elliptical', 16: 'stair_climbing',
        17: 'lap_swimming', 18: 'open_water', 19: 'flexibility_training',
        20: 'strength_training', 21: 'warm_up', 22: 'match', 23: 'exercise',
        24: 'challenge', 25: 'indoor_skiing', 26: 'cardio_training',
        27: 'indoor_walking', 43: 'yoga', 46: 'gravel_cycling', 58: 'virtual_activity',
        254: 'all',
    }),
    'event': MappingProxyType({
        0: 'timer', 3: 'workout', 4: 'workout_step', 5: 'power_down', 6: 'power_up',
        7: 'off_course', 8: 'session', 9: 'lap', 10: 'course_point', 11: 'battery',
        12: 'virtual_partner_pace', 13: 'hr_high_alert', 14: 'hr_low_alert',
        15: 'speed_high_alert', 16: 'speed_low_alert', 17: 'cad_high_alert',
        18: 'cad_low_alert', 19: 'power_high_alert', 20: 'power_low_alert',
        21: 'recovery_hr', 22: 'battery_low', 23: 'time_duration_alert',
        24: 'distance_duration_alert', 25: 'calorie_duration_alert', 26: 'activity',
        27: 'fitness_equipment', 28: 'length', 32: 'user_marker', 33: 'sport_point',
        36: 'calibration', 42: 'front_gear_change', 43: 'rear_gear_change',
    }),
    'event_type': MappingProxyType({
        0: 'start', 1: 'stop', 2: 'consecutive_depreciated', 3: 'marker',
        4: 'stop_all', 5: 'begin_depreciated', 6: 'end_depreciated',
        7: 'end_all_depreciated', 8: 'stop_disable', 9: 'stop_disable_all',
    }),
    'lap_trigger': MappingProxyType({
        0: 'manual', 1: 'time', 2: 'distance', 3: 'position_start', 4: 'position_lap',
        5: 'position_waypoint', 6: 'position_marked', 7: 'session_end',
        8: 'fitness_equipment',
    }),
    'activity': MappingProxyType({0: 'manual', 1: 'auto_multi_sport'}),
    'manufacturer': MappingProxyType({
        1: 'garmin', 2: 'garmin_fr405_antfs', 3: 'zephyr', 4: 'dayton', 5: 'idt',
        6: 'srm', 7: 'quarq', 8: 'ibike', 9: 'saris', 10: 'spark_hk', 11: 'tanita',
        12: 'echowell', 13: 'dynastream_oem', 15: 'dynastream', 16: 'timex',
        23: 'suunto', 32: 'wahoo_fitness', 38: 'osynce', 40: 'concept2',
        69: 'stages_cycling', 89: 'tacx', 95: 'stryd', 123: 'polar', 255: 'development',
        260: 'zwift', 263: 'favero_electronics', 265: 'strava', 294: 'coros',
    }),
    'battery_status': MappingProxyType({
        1: 'new', 2: 'good', 3: 'ok', 4: 'low', 5: 'critical', 6: 'charging', 7: 'unknown',
    }),
})


@dataclass(frozen=True)
class FieldProfile:
    """Semantic description of one field: raw value / scale - offset"""
    name: str
    scale: float = 1
    offset: float = 0
    units: Optional[str] = None
    type_name: Optional[str] = None


@dataclass(frozen=True)
class MessageProfile:
    """Semantic description of one global message"""
    number: int
    name: str
    category: MessageCategory
    fields: Mapping[int, FieldProfile]


def _fields(by_number) -> Mapping[int, FieldProfile]:
    return MappingProxyType(dict(by_number))


_TIMESTAMP = FieldProfile('timestamp', units='s', type_name='date_time')
_MESSAGE_INDEX = FieldProfile('message_index')


MESSAGES: Mapping[int, MessageProfile] = MappingProxyType({
    0: MessageProfile(0, 'file_id', MessageCategory.UNKNOWN, _fields({
        0: FieldProfile('type', type_name='file'),
        1: FieldProfile('manufacturer', type_name='manufacturer'),
        2: FieldProfile('product'),
        3: FieldProfile('serial_number'),
        4: FieldProfile('time_created', type_name='date_time'),
        5: FieldProfile('number'),
        8: FieldProfile('product_name'),
    })),
    18: MessageProfile(18, 'session', MessageCategory.SESSION, _fields({
        253: _TIMESTAMP,
        254: _MESSAGE_INDEX,
        0: FieldProfile('event', type_name='event'),
        1: FieldProfile('event_type', type_name='event_type'),
        2: FieldProfile('start_time', type_name='date_time'),
        3: FieldProfile('start_position_lat', units='semicircles'),
        4: FieldProfile('start_position_long', units='semicircles'),
        5: FieldProfile('sport', type_name='sport'),
        6: FieldProfile('sub_sport', type_name='sub_sport'),
        7: FieldProfile('total_elapsed_time', scale=1000, units='s'),
        8: FieldProfile('total_timer_time', scale=1000, units='s'),
        9: FieldProfile('total_distance', scale=100, units='m'),
        10: FieldProfile('total_cycles', units='cycles'),
        11: FieldProfile('total_calories', units='kcal'),
        13: FieldProfile('total_fat_calories', units='kcal'),
        14: FieldProfile('avg_speed', scale=1000, units='m/s'),
        15: FieldProfile('max_speed', scale=1000, units='m/s'),
        16: FieldProfile('avg_heart_rate', units='bpm'),
        17: FieldProfile('max_heart_rate', units='bpm'),
        18: FieldProfile('avg_cadence', units='rpm'),
        19: FieldProfile('max_cadence', units='rpm'),
        20: FieldProfile('avg_power', units='watts'),
        21: FieldProfile('max_power', units='watts'),
        22: FieldProfile('total_ascent', units='m'),
        23: FieldProfile('total_descent', units='m'),
        24: FieldProfile('total_training_effect', scale=10),
        25: FieldProfile('first_lap_index'),
        26: FieldProfile('num_laps'),
        34: FieldProfile('normalized_power', units='watts'),
        35: FieldProfile('training_stress_score', scale=10, units='tss'),
        36: FieldProfile('intensity_factor', scale=1000, units='if'),
        57: FieldProfile('avg_temperature', units='C'),
        124: FieldProfile('enhanced_avg_speed', scale=1000, units='m/s'),
        125: FieldProfile('enhanced_max_speed', scale=1000, units='m/s'),
    })),
    19: MessageProfile(19, 'lap', MessageCategory.LAP, _fields({
        253: _TIMESTAMP,
        254: _MESSAGE_INDEX,
        0: FieldProfile('event', type_name='event'),
        1: FieldProfile('event_type', type_name='event_type'),
        2: FieldProfile('start_time', type_name='date_time'),
        3: FieldProfile('start_position_lat', units='semicircles'),
        4: FieldProfile('start_position_long', units='semicircles'),
        5: FieldProfile('end_position_lat', units='semicircles'),
        6: FieldProfile('end_position_long', units='semicircles'),
        7: FieldProfile('total_elapsed_time', scale=1000, units='s'),
        8: FieldProfile('total_timer_time', scale=1000, units='s'),
        9: FieldProfile('total_distance', scale=100, units='m'),
        10: FieldProfile('total_cycles', units='cycles'),
        11: FieldProfile('total_calories', units='kcal'),
        13: FieldProfile('avg_speed', scale=1000, units='m/s'),
        14: FieldProfile('max_speed', scale=1000, units='m/s'),
        15: FieldProfile('avg_heart_rate', units='bpm'),
        16: FieldProfile('max_heart_rate', units='bpm'),
        17: FieldProfile('avg_cadence', units='rpm'),
        18: FieldProfile('max_cadence', units='rpm'),
        19: FieldProfile('avg_power', units='watts'),
        20: FieldProfile('max_power', units='watts'),
        21: FieldProfile('total_ascent', units='m'),
        22: FieldProfile('total_descent', units='m'),
        24: FieldProfile('lap_trigger', type_name='lap_trigger'),
        25: FieldProfile('sport', type_name='sport'),
        33: FieldProfile('normalized_power', units='watts'),
        110: FieldProfile('enhanced_avg_speed', scale=1000, units='m/s'),
        111: FieldProfile('enhanced_max_speed', scale=1000, units='m/s'),
    })),
    20: MessageProfile(20, 'record', MessageCategory.RECORD, _fields({
        253: _TIMESTAMP,
        0: FieldProfile('position_lat', units='semicircles'),
        1: FieldProfile('position_long', units='semicircles'),
        2: FieldProfile('altitude', scale=5, offset=500, units='m'),
        3: FieldProfile('heart_rate', units='bpm'),
        4: FieldProfile('cadence', units='rpm'),
        5: FieldProfile('distance', scale=100, units='m'),
        6: FieldProfile('speed', scale=1000, units='m/s'),
        7: FieldProfile('power', units='watts'),
        13: FieldProfile('temperature', units='C'),
        29: FieldProfile('accumulated_power', units='watts'),
        30: FieldProfile('left_right_balance'),
        39: FieldProfile('vertical_oscillation', scale=10, units='mm'),
        40: FieldProfile('stance_time_percent', scale=100, units='percent'),
        41: FieldProfile('stance_time', scale=10, units='ms'),
        53: FieldProfile('fractional_cadence', scale=128, units='rpm'),
        73: FieldProfile('enhanced_speed', scale=1000, units='m/s'),
        78: FieldProfile('enhanced_altitude', scale=5, offset=500, units='m'),
    })),
    21: MessageProfile(21, 'event', MessageCategory.EVENT, _fields({
        253: _TIMESTAMP,
        0: FieldProfile('event', type_name='event'),
        1: FieldProfile('event_type', type_name='event_type'),
        3: FieldProfile('data'),
        4: FieldProfile('event_group'),
    })),
    23: MessageProfile(23, 'device_info', MessageCategory.DEVICE_INFO, _fields({
        253: _TIMESTAMP,
        0: FieldProfile('device_index'),
        1: FieldProfile('device_type'),
        2: FieldProfile('manufacturer', type_name='manufacturer'),
        3: FieldProfile('serial_number'),
        4: FieldProfile('product'),
        5: FieldProfile('software_version', scale=100),
        6: FieldProfile('hardware_version'),
        10: FieldProfile('battery_voltage', scale=256, units='V'),
        11: FieldProfile('battery_status', type_name='battery_status'),
        27: FieldProfile('product_name'),
    })),
    34: MessageProfile(34, 'activity', MessageCategory.ACTIVITY, _fields({
        253: _TIMESTAMP,
        0: FieldProfile('total_timer_time', scale=1000, units='s'),
        1: FieldProfile('num_sessions'),
        2: FieldProfile('type', type_name='activity'),
        3: FieldProfile('event', type_name='event'),
        4: FieldProfile('event_type', type_name='event_type'),
        5: FieldProfile('local_timestamp'),
        6: FieldProfile('event_group'),
    })),
    206: MessageProfile(206, 'field_description', MessageCategory.UNKNOWN, _fields({
        0: FieldProfile('developer_data_index'),
        1: FieldProfile('field_definition_number'),
        2: FieldProfile('fit_base_type_id'),
        3: FieldProfile('field_name'),
        6: FieldProfile('scale'),
        7: FieldProfile('offset'),
        8: FieldProfile('units'),
        14: FieldProfile('native_mesg_num'),
        15: FieldProfile('native_field_num'),
    })),
    207: MessageProfile(207, 'developer_data_id', MessageCategory.UNKNOWN, _fields({
        0: FieldProfile('developer_id'),
        1: FieldProfile('application_id'),
        2: FieldProfile('manufacturer_id', type_name='manufacturer'),
        3: FieldProfile('developer_data_index'),
        4: FieldProfile('application_version'),
    })),
})

FIELD_DESCRIPTION_MESSAGE = 206


def lookup_message(global_number: int) -> Optional[MessageProfile]:
    return MESSAGES.get(global_number)


def message_name(global_number: int) -> str:
    profile = MESSAGES.get(global_number)
    return profile.name if profile else f"unknown_{global_number}"


def message_category(global_number: int) -> MessageCategory:
    profile = MESSAGES.get(global_number)
    return profile.category if profile else MessageCategory.UNKNOWN


def convert_value(raw: Any, field: FieldProfile) -> Any:
    """
    Apply a field profile to one valid raw value.

    Order: enumerated type lookup, date_time conversion, semicircle
    conversion, then scale/offset. Scale 1 and offset 0 keep integers intact.
    """
    if field.type_name == 'date_time':
        if isinstance(raw, int) and raw >= MIN_ABSOLUTE_TIMESTAMP:
            return fit_timestamp_to_datetime(raw)
        return raw
    if field.type_name is not None:
        names = TYPES.get(field.type_name)
        if names is not None and isinstance(raw, int):
            return names.get(raw, raw)
        return raw
    if field.units == 'semicircles' and isinstance(raw, int):
        return raw * SEMICIRCLES_TO_DEGREES
    if isinstance(raw, (str, bytes)):
        return raw
    if field.scale != 1 or field.offset != 0:
        return raw / field.scale - field.offset
    return raw
