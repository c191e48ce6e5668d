#!/usr/bin/env python3
"""
Processors Interface - shared state enums, result containers and exceptions
for FIT decoding and activity aggregation
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List


class DecoderState(Enum):
    """FIT decoder state machine states"""
    READING_HEADER = "reading_header"
    READING_RECORDS = "reading_records"
    DONE = "done"
    FAILED = "failed"


class MessageCategory(Enum):
    """Semantic category of a decoded data message"""
    RECORD = "record"
    SESSION = "session"
    LAP = "lap"
    EVENT = "event"
    DEVICE_INFO = "device_info"
    ACTIVITY = "activity"
    UNKNOWN = "unknown"


class ProcessingStatus(Enum):
    """Processing status enumeration"""
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    PARTIALLY_COMPLETED = "partially_completed"


class MetricStatus(Enum):
    """Status flags attached to aggregated metrics"""
    UNSCORED = "unscored"
    LOW_CONFIDENCE = "low_confidence"


@dataclass
class WarningLog:
    """Ordered soft-warning collector with an upper bound on stored messages"""
    max_warnings: int = 200
    messages: List[str] = field(default_factory=list)
    suppressed: int = 0

    def add(self, warning: str):
        """Add warning"""
        if len(self.messages) < self.max_warnings:
            self.messages.append(warning)
        else:
            self.suppressed += 1

    def to_list(self) -> List[str]:
        """Stored warnings, with a trailing summary line when some were suppressed"""
        if self.suppressed:
            return self.messages + [f"{self.suppressed} further warnings suppressed"]
        return list(self.messages)


# Exception classes
class ProcessingError(Exception):
    """Processing error base class"""
    pass


class FitDecodeError(ProcessingError):
    """FIT decoding error base class"""
    pass


class FitHeaderError(FitDecodeError):
    """Fatal error in the FIT file header; no messages are produced"""
    pass


class InvalidSignature(FitHeaderError):
    """Header bytes 8-11 are not '.FIT'"""
    pass


class BufferTooShort(FitHeaderError):
    """Declared header or data size exceeds the buffer length"""
    pass


class InvalidHeader(FitHeaderError):
    """Declared header size is too small to hold a FIT header"""
    pass


class OutOfBounds(FitDecodeError):
    """A read would run past the end of the buffer"""
    pass


class UndefinedLocalMessage(FitDecodeError):
    """A data message references a local message type with no active definition"""

    def __init__(self, local_type: int):
        super().__init__(f"No definition for local message type {local_type}")
        self.local_type = local_type


class MalformedRecord(FitDecodeError):
    """A record is structurally invalid (e.g. unknown architecture byte)"""
    pass
