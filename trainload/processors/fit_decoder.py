#!/usr/bin/env python3
"""
FIT binary decoder

Decodes the Flexible and Interoperable Data Transfer protocol from an
in-memory buffer:

1. Header: size, protocol/profile versions, data size and the '.FIT'
   signature. Header problems are fatal.
2. Records: alternating Definition Messages (which bind a local message type
   to a global message and field layout) and Data Messages (decoded through
   the active layout and the global profile's scale/offset).

Device files are routinely slightly corrupt, so a malformed record never
aborts the file: the decoder steps one byte past the record start, records
a warning and carries on. The CRC footer is checked but a mismatch is only
a warning.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from .binary_reader import BinaryReader, BytesLike
from .definitions import (
    DeveloperFieldDefinition, FieldDefinition, MessageDefinition,
    MessageDefinitionTable, LITTLE_ENDIAN, BIG_ENDIAN
)
from .interface import (
    DecoderState, MessageCategory, WarningLog,
    BufferTooShort, FitHeaderError, InvalidHeader, InvalidSignature,
    MalformedRecord, OutOfBounds, UndefinedLocalMessage
)
from .profile import (
    BaseType, FieldProfile, FIELD_DESCRIPTION_MESSAGE, TIMESTAMP_FIELD_NUMBER,
    convert_value, fit_crc16, fit_timestamp_to_datetime, lookup_base_type,
    lookup_message, message_category, message_name
)
from ..config import DecoderSettings, get_decoder_settings
from ..utils import get_logger


logger = get_logger(__name__)


FIT_SIGNATURE = b'.FIT'
MIN_HEADER_SIZE = 12
CRC_SIZE = 2

# Record header bits
COMPRESSED_HEADER_MASK = 0x80
DEFINITION_MESSAGE_MASK = 0x40
DEVELOPER_DATA_MASK = 0x20
LOCAL_TYPE_MASK = 0x0F
COMPRESSED_LOCAL_TYPE_MASK = 0x03
COMPRESSED_TIME_MASK = 0x1F

RECOVERABLE_ERRORS = (OutOfBounds, UndefinedLocalMessage, MalformedRecord)


@dataclass(frozen=True)
class FitHeader:
    """FIT file header"""
    header_size: int
    protocol_version: int
    profile_version: int
    data_size: int
    signature: bytes
    header_crc: Optional[int] = None

    @property
    def end_offset(self) -> int:
        """Offset one past the last byte of the message stream"""
        return self.header_size + self.data_size


@dataclass
class DecodedMessage:
    """One decoded Data Message with semantic field values"""
    category: MessageCategory
    global_number: int
    name: str
    fields: Dict[str, Any] = field(default_factory=dict)
    developer_fields: Dict[str, Any] = field(default_factory=dict)
    local_type: Optional[int] = None

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    @property
    def timestamp(self) -> Optional[datetime]:
        value = self.fields.get('timestamp')
        return value if isinstance(value, datetime) else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert message to dictionary format"""
        return {
            'name': self.name,
            'category': self.category.value,
            'global_number': self.global_number,
            'fields': dict(self.fields),
            'developer_fields': dict(self.developer_fields)
        }


@dataclass
class DecodeResult:
    """Outcome of a successful decode: messages plus soft warnings"""
    header: FitHeader
    messages: List[DecodedMessage] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    bytes_consumed: int = 0
    skipped_bytes: int = 0
    crc_valid: Optional[bool] = None

    def messages_of(self, category: MessageCategory) -> List[DecodedMessage]:
        return [m for m in self.messages if m.category is category]

    @property
    def records(self) -> List[DecodedMessage]:
        return self.messages_of(MessageCategory.RECORD)

    @property
    def laps(self) -> List[DecodedMessage]:
        return self.messages_of(MessageCategory.LAP)

    @property
    def sessions(self) -> List[DecodedMessage]:
        return self.messages_of(MessageCategory.SESSION)


@dataclass(frozen=True)
class DeveloperFieldDescription:
    """Developer field layout announced by a field_description message"""
    developer_data_index: int
    field_definition_number: int
    base_type: int
    name: str
    units: Optional[str] = None
    scale: float = 1
    offset: float = 0

    def to_profile(self) -> FieldProfile:
        return FieldProfile(self.name, scale=self.scale, offset=self.offset, units=self.units)


class FitDecoder:
    """Single-use FIT decoder over one in-memory buffer"""

    def __init__(self, buffer: BytesLike, settings: Optional[DecoderSettings] = None):
        self._buffer = memoryview(buffer)
        self.settings = settings or get_decoder_settings()
        self.state = DecoderState.READING_HEADER
        self.header: Optional[FitHeader] = None
        self.definitions = MessageDefinitionTable()
        self._developer_fields: Dict[Tuple[int, int], DeveloperFieldDescription] = {}
        self._last_timestamp: Optional[int] = None
        self._warnings = WarningLog(max_warnings=self.settings.max_warnings)
        self._messages: List[DecodedMessage] = []
        self._skipped_bytes = 0

    def decode(self) -> DecodeResult:
        """
        Decode the whole buffer.

        Returns:
            DecodeResult with every decoded message in file order

        Raises:
            FitHeaderError: header invalid or buffer shorter than declared
        """
        if self.state is not DecoderState.READING_HEADER:
            raise RuntimeError(f"Decoder already used (state: {self.state.value})")

        try:
            header = self._read_header()
        except FitHeaderError as e:
            self.state = DecoderState.FAILED
            logger.error(f"FIT header rejected: {e}")
            raise

        self.header = header
        self.state = DecoderState.READING_RECORDS

        reader = BinaryReader(self._buffer[:header.end_offset])
        reader.seek(header.header_size)

        while reader.remaining() > 0:
            record_start = reader.tell()
            try:
                message = self._read_record(reader)
            except RECOVERABLE_ERRORS as e:
                self._resync(reader, record_start, e)
                continue
            if message is not None:
                self._messages.append(message)

        crc_valid = self._verify_crc(header) if self.settings.verify_crc else None

        self.state = DecoderState.DONE
        warnings = self._warnings.to_list()
        logger.debug(
            f"Decoded {len(self._messages)} messages from {header.data_size} data bytes "
            f"({self._skipped_bytes} bytes skipped, {len(warnings)} warnings)"
        )

        return DecodeResult(
            header=header,
            messages=self._messages,
            warnings=warnings,
            bytes_consumed=reader.tell() - header.header_size,
            skipped_bytes=self._skipped_bytes,
            crc_valid=crc_valid
        )

    def _read_header(self) -> FitHeader:
        if len(self._buffer) < MIN_HEADER_SIZE:
            raise BufferTooShort(
                f"Buffer of {len(self._buffer)} bytes is shorter than the minimum FIT header"
            )

        reader = BinaryReader(self._buffer)
        header_size = reader.read_uint8()
        if header_size < MIN_HEADER_SIZE:
            raise InvalidHeader(f"Declared header size {header_size} is below {MIN_HEADER_SIZE}")
        if header_size > len(self._buffer):
            raise BufferTooShort(
                f"Declared header size {header_size} exceeds buffer of {len(self._buffer)} bytes"
            )

        protocol_version = reader.read_uint8()
        profile_version = reader.read_uint16()
        data_size = reader.read_uint32()
        signature = reader.read_bytes(4)
        if signature != FIT_SIGNATURE:
            raise InvalidSignature(f"Expected signature {FIT_SIGNATURE!r}, found {signature!r}")

        header_crc = reader.read_uint16() if header_size >= MIN_HEADER_SIZE + CRC_SIZE else None

        if header_size + data_size > len(self._buffer):
            raise BufferTooShort(
                f"Header declares {data_size} data bytes but only "
                f"{len(self._buffer) - header_size} follow the header"
            )

        return FitHeader(
            header_size=header_size,
            protocol_version=protocol_version,
            profile_version=profile_version,
            data_size=data_size,
            signature=signature,
            header_crc=header_crc
        )

    def _read_record(self, reader: BinaryReader) -> Optional[DecodedMessage]:
        record_header = reader.read_uint8()

        if record_header & COMPRESSED_HEADER_MASK:
            local_type = (record_header >> 5) & COMPRESSED_LOCAL_TYPE_MASK
            time_offset = record_header & COMPRESSED_TIME_MASK
            definition = self.definitions.lookup(local_type)
            message = self._read_data_message(reader, definition)
            timestamp = self._roll_timestamp(time_offset)
            if timestamp is None:
                self._warnings.add(
                    f"Compressed timestamp at offset {reader.tell()} has no preceding absolute timestamp"
                )
            else:
                message.fields['timestamp'] = fit_timestamp_to_datetime(timestamp)
            return message

        if record_header & DEFINITION_MESSAGE_MASK:
            self._read_definition_message(reader, record_header)
            return None

        definition = self.definitions.lookup(record_header & LOCAL_TYPE_MASK)
        return self._read_data_message(reader, definition)

    def _read_definition_message(self, reader: BinaryReader, record_header: int):
        local_type = record_header & LOCAL_TYPE_MASK
        reader.read_uint8()  # reserved
        architecture = reader.read_uint8()
        if architecture not in (LITTLE_ENDIAN, BIG_ENDIAN):
            raise MalformedRecord(f"Unknown architecture byte {architecture}")
        little_endian = architecture == LITTLE_ENDIAN
        global_number = reader.read_uint16(little_endian)

        field_count = reader.read_uint8()
        fields = []
        for _ in range(field_count):
            number, size, base_type = reader.read_uint8(), reader.read_uint8(), reader.read_uint8()
            fields.append(FieldDefinition(number, size, base_type))

        developer_fields = []
        if record_header & DEVELOPER_DATA_MASK:
            developer_count = reader.read_uint8()
            for _ in range(developer_count):
                number, size, index = reader.read_uint8(), reader.read_uint8(), reader.read_uint8()
                developer_fields.append(DeveloperFieldDefinition(number, size, index))

        self.definitions.define(local_type, MessageDefinition(
            local_type=local_type,
            global_message_number=global_number,
            architecture=architecture,
            fields=tuple(fields),
            developer_fields=tuple(developer_fields)
        ))

    def _read_data_message(self, reader: BinaryReader,
                           definition: MessageDefinition) -> DecodedMessage:
        global_number = definition.global_message_number
        profile = lookup_message(global_number)
        little_endian = definition.little_endian

        fields: Dict[str, Any] = {}
        raw_timestamp = None
        for field_def in definition.fields:
            raw = self._read_field(reader, field_def.size, field_def.base, little_endian)
            number = field_def.field_definition_number
            if raw is None:
                continue
            if number == TIMESTAMP_FIELD_NUMBER and isinstance(raw, int):
                raw_timestamp = raw

            field_profile = profile.fields.get(number) if profile else None
            if field_profile is None:
                fields[f"unknown_{number}"] = raw
            else:
                fields[field_profile.name] = _convert(raw, field_profile)

        developer_fields: Dict[str, Any] = {}
        for dev_def in definition.developer_fields:
            key = (dev_def.developer_data_index, dev_def.field_number)
            description = self._developer_fields.get(key)
            if description is None:
                developer_fields[f"developer_{key[0]}_{key[1]}"] = reader.read_bytes(dev_def.size)
                continue
            raw = self._read_field(
                reader, dev_def.size, lookup_base_type(description.base_type), little_endian
            )
            if raw is not None:
                developer_fields[description.name] = _convert(raw, description.to_profile())

        # State changes only once the whole message has been read
        if raw_timestamp is not None:
            self._last_timestamp = raw_timestamp

        message = DecodedMessage(
            category=message_category(global_number),
            global_number=global_number,
            name=message_name(global_number),
            fields=fields,
            developer_fields=developer_fields,
            local_type=definition.local_type
        )

        if global_number == FIELD_DESCRIPTION_MESSAGE:
            self._register_developer_field(message)

        return message

    def _read_field(self, reader: BinaryReader, size: int, base: BaseType,
                    little_endian: bool) -> Union[None, int, float, str, bytes, tuple]:
        """Read one field; invalid sentinels (for arrays: all elements invalid) give None"""
        if base.name == 'string':
            return reader.read_string(size) or None

        if base.struct_code is None:
            raw = reader.read_bytes(size)
            if all(b == base.invalid for b in raw):
                return None
            return raw[0] if size == 1 else raw

        if size % base.size != 0:
            self._warnings.add(
                f"Field of {size} bytes is not a multiple of {base.name} width; kept as raw bytes"
            )
            return reader.read_bytes(size)

        count = size // base.size
        values = [_read_scalar(reader, base, little_endian) for _ in range(count)]
        if count == 1:
            return values[0]
        if all(v is None for v in values):
            return None
        return tuple(values)

    def _roll_timestamp(self, time_offset: int) -> Optional[int]:
        """Advance the last absolute timestamp to a 5-bit offset, wrapping forward only"""
        if self._last_timestamp is None:
            return None
        last = self._last_timestamp
        timestamp = (last & ~COMPRESSED_TIME_MASK) + time_offset
        if time_offset < (last & COMPRESSED_TIME_MASK):
            timestamp += COMPRESSED_TIME_MASK + 1
        self._last_timestamp = timestamp
        return timestamp

    def _register_developer_field(self, message: DecodedMessage):
        index = message.get('developer_data_index')
        number = message.get('field_definition_number')
        base_type = message.get('fit_base_type_id')
        if index is None or number is None or base_type is None:
            self._warnings.add("Incomplete field_description message ignored")
            return

        self._developer_fields[(index, number)] = DeveloperFieldDescription(
            developer_data_index=index,
            field_definition_number=number,
            base_type=base_type,
            name=message.get('field_name') or f"developer_{index}_{number}",
            units=message.get('units'),
            scale=message.get('scale') or 1,
            offset=message.get('offset') or 0
        )

    def _resync(self, reader: BinaryReader, record_start: int, error: Exception):
        self._skipped_bytes += 1
        self._warnings.add(f"Skipped malformed record at offset {record_start}: {error}")
        logger.debug(f"Resyncing after malformed record at offset {record_start}: {error}")
        reader.seek(record_start + 1)

    def _verify_crc(self, header: FitHeader) -> Optional[bool]:
        checked = False
        valid = True

        if header.header_crc:
            checked = True
            expected = fit_crc16(self._buffer[:MIN_HEADER_SIZE])
            if expected != header.header_crc:
                valid = False
                self._warnings.add(
                    f"Header CRC mismatch: stored 0x{header.header_crc:04X}, computed 0x{expected:04X}"
                )

        end = header.end_offset
        if len(self._buffer) >= end + CRC_SIZE:
            checked = True
            stored = BinaryReader(self._buffer[end:end + CRC_SIZE]).read_uint16()
            expected = fit_crc16(self._buffer[:end])
            if stored != expected:
                valid = False
                self._warnings.add(
                    f"File CRC mismatch: stored 0x{stored:04X}, computed 0x{expected:04X}"
                )

        return valid if checked else None


_SCALAR_READERS = {
    'B': lambda reader, little: reader.read_uint8(),
    'b': lambda reader, little: reader.read_int8(),
    'H': lambda reader, little: reader.read_uint16(little),
    'h': lambda reader, little: reader.read_int16(little),
    'I': lambda reader, little: reader.read_uint32(little),
    'i': lambda reader, little: reader.read_int32(little),
    'Q': lambda reader, little: reader.read_uint64(little),
    'q': lambda reader, little: reader.read_int64(little),
    'f': lambda reader, little: reader.read_float32(little),
    'd': lambda reader, little: reader.read_float64(little),
}


def _read_scalar(reader: BinaryReader, base: BaseType, little_endian: bool):
    value = _SCALAR_READERS[base.struct_code](reader, little_endian)
    if isinstance(value, float):
        return None if math.isnan(value) else value
    return None if value == base.invalid else value


def _convert(raw: Any, field_profile: FieldProfile) -> Any:
    if isinstance(raw, tuple):
        return tuple(None if v is None else convert_value(v, field_profile) for v in raw)
    return convert_value(raw, field_profile)


def decode_fit(buffer: BytesLike, settings: Optional[DecoderSettings] = None) -> DecodeResult:
    """Decode a FIT buffer with a fresh decoder"""
    return FitDecoder(buffer, settings).decode()
